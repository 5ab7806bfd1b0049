"""
Camp Scheduler - backtracking search for round-based activity pairings.

Assigns an activity to pairs of teams (cabins) for every round such that:
- every team plays exactly once per round
- an activity is used at most once per round
- a team never repeats an activity across the schedule
- (strict phase) two teams never meet twice

The strict phase is tried first. Only when its whole search space is
exhausted does the solver retry from an empty schedule with repeated
meetings allowed (relaxed phase). Enumeration order is fixed by the input
order, so identical input always yields the identical schedule.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

# (activity_idx, team_a_idx, team_b_idx)
IndexPairing = Tuple[int, int, int]


@dataclass(frozen=True)
class Pairing:
    activity: str
    team_a: str
    team_b: str


@dataclass(frozen=True)
class ScheduledRound:
    round_number: int  # 1-based
    pairings: Tuple[Pairing, ...]


@dataclass(frozen=True)
class SolverResult:
    """A complete schedule and the phase that produced it."""
    rounds: Tuple[ScheduledRound, ...]
    relaxed: bool


class _WorkingSchedule:
    """
    Mutable schedule owned by a single search phase.

    Keeps per-round pairing lists plus the lookup sets needed to check a
    candidate in constant time. place() and undo() must stay symmetric.
    """

    def __init__(self, num_rounds: int, allow_repeats: bool):
        self.allow_repeats = allow_repeats
        self.rounds: List[List[IndexPairing]] = [[] for _ in range(num_rounds)]
        self._round_teams: List[Set[int]] = [set() for _ in range(num_rounds)]
        self._round_activities: List[Set[int]] = [set() for _ in range(num_rounds)]
        self._team_activities: Set[Tuple[int, int]] = set()
        self._pair_counts: Counter = Counter()

    def is_valid(self, round_idx: int, activity: int, team_a: int, team_b: int) -> bool:
        round_teams = self._round_teams[round_idx]
        if team_a in round_teams or team_b in round_teams:
            return False
        if activity in self._round_activities[round_idx]:
            return False
        if (team_a, activity) in self._team_activities or (team_b, activity) in self._team_activities:
            return False
        if not self.allow_repeats and self._pair_counts[_pair_key(team_a, team_b)]:
            return False
        return True

    def place(self, round_idx: int, pairing: IndexPairing) -> None:
        activity, team_a, team_b = pairing
        self.rounds[round_idx].append(pairing)
        self._round_teams[round_idx].update((team_a, team_b))
        self._round_activities[round_idx].add(activity)
        self._team_activities.add((team_a, activity))
        self._team_activities.add((team_b, activity))
        self._pair_counts[_pair_key(team_a, team_b)] += 1

    def undo(self, round_idx: int) -> None:
        activity, team_a, team_b = self.rounds[round_idx].pop()
        self._round_teams[round_idx].difference_update((team_a, team_b))
        self._round_activities[round_idx].discard(activity)
        self._team_activities.discard((team_a, activity))
        self._team_activities.discard((team_b, activity))
        key = _pair_key(team_a, team_b)
        self._pair_counts[key] -= 1
        if not self._pair_counts[key]:
            del self._pair_counts[key]

    def round_size(self, round_idx: int) -> int:
        return len(self.rounds[round_idx])

    def unused_teams(self, round_idx: int, num_teams: int) -> List[int]:
        used = self._round_teams[round_idx]
        return [t for t in range(num_teams) if t not in used]


def _pair_key(team_a: int, team_b: int) -> Tuple[int, int]:
    return (team_a, team_b) if team_a < team_b else (team_b, team_a)


class CampScheduler:
    """
    Depth-first scheduler for activity pairings.

    Input is assumed to be validated already (see app.utils.schedule_input):
    distinct non-empty names, an even number of teams, rounds >= 1.

    Example:
        >>> scheduler = CampScheduler(["Swim", "Archery"], ["A", "B", "C", "D"], 1)
        >>> result = scheduler.generate()
        >>> [(p.activity, p.team_a, p.team_b) for p in result.rounds[0].pairings]
        [('Swim', 'A', 'B'), ('Archery', 'C', 'D')]
    """

    def __init__(self, activities: Sequence[str], teams: Sequence[str], num_rounds: int):
        self.activities = tuple(activities)
        self.teams = tuple(teams)
        self.num_rounds = num_rounds
        self.num_activities = len(self.activities)
        self.num_teams = len(self.teams)
        self.pairings_per_round = self.num_teams // 2

    def generate(self) -> Optional[SolverResult]:
        """
        Run the strict phase, then the relaxed phase if strict is infeasible.

        Returns:
            SolverResult on success, None when both phases are exhausted.
        """
        # Every team needs a new activity each round and every round needs one
        # activity per pairing; short of that both phases would exhaust.
        if self.num_activities < max(self.num_rounds, self.pairings_per_round):
            self._log_infeasible()
            return None

        for allow_repeats in (False, True):
            phase = "relaxed" if allow_repeats else "strict"
            logger.info(
                "Starting %s phase: %d activities, %d teams, %d rounds",
                phase,
                self.num_activities,
                self.num_teams,
                self.num_rounds,
            )
            rounds = self._search(allow_repeats)
            if rounds is not None:
                logger.info("%s phase found a schedule", phase.capitalize())
                return SolverResult(rounds=self._to_named(rounds), relaxed=allow_repeats)
            if not allow_repeats:
                logger.info("Strict phase exhausted; retrying with repeated pairings allowed")

        self._log_infeasible()
        return None

    def _log_infeasible(self) -> None:
        logger.warning(
            "No schedule exists for %d activities, %d teams, %d rounds",
            self.num_activities,
            self.num_teams,
            self.num_rounds,
        )

    def _search(self, allow_repeats: bool) -> Optional[List[List[IndexPairing]]]:
        """
        Explicit-stack form of the recursive backtracking search.

        Each frame holds the round being filled and a lazy iterator over its
        valid candidates. The placement made from a frame is undone when the
        frame above it is exhausted, which mirrors returning False from a
        recursive call.
        """
        phase = "Relaxed" if allow_repeats else "Strict"
        working = _WorkingSchedule(self.num_rounds, allow_repeats)
        if self.num_rounds == 0:
            return working.rounds

        frames: List[Tuple[int, Iterator[IndexPairing]]] = [(0, self._candidates(working, 0))]
        placements = 0

        while frames:
            round_idx, candidates = frames[-1]
            pairing = next(candidates, None)

            if pairing is None:
                frames.pop()
                if frames:
                    working.undo(frames[-1][0])
                continue

            working.place(round_idx, pairing)
            placements += 1

            next_round = round_idx
            if working.round_size(round_idx) == self.pairings_per_round:
                next_round += 1
            if next_round == self.num_rounds:
                logger.info("%s phase finished after %d placements", phase, placements)
                return working.rounds

            frames.append((next_round, self._candidates(working, next_round)))

        logger.info("%s phase exhausted after %d placements", phase, placements)
        return None

    def _candidates(self, working: _WorkingSchedule, round_idx: int) -> Iterator[IndexPairing]:
        """
        Yield valid (activity, team_a, team_b) placements for round_idx.

        team_a is always the lowest-index team still free in the round, team_b
        walks the remaining free teams in index order, and activities are
        tried in index order for each pair.
        """
        available = working.unused_teams(round_idx, self.num_teams)
        team_a = available[0]
        for team_b in available[1:]:
            for activity in range(self.num_activities):
                if working.is_valid(round_idx, activity, team_a, team_b):
                    yield (activity, team_a, team_b)

    def _to_named(self, rounds: List[List[IndexPairing]]) -> Tuple[ScheduledRound, ...]:
        return tuple(
            ScheduledRound(
                round_number=round_idx + 1,
                pairings=tuple(
                    Pairing(
                        activity=self.activities[activity],
                        team_a=self.teams[team_a],
                        team_b=self.teams[team_b],
                    )
                    for activity, team_a, team_b in pairings
                ),
            )
            for round_idx, pairings in enumerate(rounds)
        )


def solve_camp_schedule(activities: Sequence[str], teams: Sequence[str], num_rounds: int) -> Optional[SolverResult]:
    """Convenience wrapper around CampScheduler(...).generate()."""
    return CampScheduler(activities, teams, num_rounds).generate()
