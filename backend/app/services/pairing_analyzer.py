"""
Pairing Analyzer - repeated team meetings in a finished schedule.

Pure post-processing of a solver result. Every unordered team pair that
meets two or more times is reported with its count and the rounds and
activities where it met.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from app.services.camp_scheduler import ScheduledRound


@dataclass(frozen=True)
class Encounter:
    round_number: int
    activity: str


@dataclass(frozen=True)
class RepeatedPairing:
    team_a: str
    team_b: str
    count: int
    encounters: Tuple[Encounter, ...]


@dataclass(frozen=True)
class PairingAnalysis:
    has_repeats: bool
    relaxed: bool
    repeated_pairings: Tuple[RepeatedPairing, ...]


def analyze_pairings(rounds: Sequence[ScheduledRound], relaxed: bool = False) -> PairingAnalysis:
    """
    Count how often each unordered team pair meets.

    Encounters are collected round-major, then in within-round order. The
    order of the returned records follows first appearance of each pair and
    is not otherwise meaningful.

    Args:
        rounds: Schedule rounds as returned by the solver
        relaxed: Whether the schedule came from the relaxed phase

    Returns:
        PairingAnalysis with one RepeatedPairing per pair met >= 2 times
    """
    encounters_by_pair: Dict[Tuple[str, str], List[Encounter]] = {}

    for scheduled_round in rounds:
        for pairing in scheduled_round.pairings:
            key = tuple(sorted((pairing.team_a, pairing.team_b)))
            encounters_by_pair.setdefault(key, []).append(
                Encounter(round_number=scheduled_round.round_number, activity=pairing.activity)
            )

    repeated = tuple(
        RepeatedPairing(
            team_a=team_a,
            team_b=team_b,
            count=len(encounters),
            encounters=tuple(encounters),
        )
        for (team_a, team_b), encounters in encounters_by_pair.items()
        if len(encounters) >= 2
    )

    return PairingAnalysis(
        has_repeats=bool(repeated),
        relaxed=relaxed,
        repeated_pairings=repeated,
    )
