"""
Tests for the camp scheduler: strict/relaxed backtracking search.
"""

import logging
from collections import Counter

import pytest

from app.services.camp_scheduler import CampScheduler, Pairing, solve_camp_schedule


def _names(prefix: str, n: int) -> list[str]:
    return [f"{prefix}{i + 1}" for i in range(n)]


def _as_tuples(result) -> list[list[tuple[str, str, str]]]:
    return [[(p.activity, p.team_a, p.team_b) for p in r.pairings] for r in result.rounds]


def _assert_schedule_invariants(activities, teams, rounds, result):
    """Independent checker for every rule a returned schedule must satisfy."""
    assert len(result.rounds) == rounds
    assert [r.round_number for r in result.rounds] == list(range(1, rounds + 1))

    team_activity_seen = set()
    pair_counts = Counter()

    for scheduled_round in result.rounds:
        assert len(scheduled_round.pairings) == len(teams) // 2

        round_teams = [t for p in scheduled_round.pairings for t in (p.team_a, p.team_b)]
        assert sorted(round_teams) == sorted(teams), "every team exactly once per round"

        round_activities = [p.activity for p in scheduled_round.pairings]
        assert len(set(round_activities)) == len(round_activities), "activity twice in a round"

        for p in scheduled_round.pairings:
            assert p.activity in activities
            assert p.team_a != p.team_b
            for team in (p.team_a, p.team_b):
                assert (team, p.activity) not in team_activity_seen, f"{team} repeats {p.activity}"
                team_activity_seen.add((team, p.activity))
            pair_counts[frozenset((p.team_a, p.team_b))] += 1

    if not result.relaxed:
        assert max(pair_counts.values()) == 1, "strict schedule repeats a pairing"


class TestScenarios:
    """Small hand-checked inputs."""

    def test_two_activities_four_teams_one_round(self):
        result = solve_camp_schedule(["Swim", "Archery"], ["A", "B", "C", "D"], 1)
        assert result is not None
        assert result.relaxed is False
        assert _as_tuples(result) == [[("Swim", "A", "B"), ("Archery", "C", "D")]]

    def test_single_pairing(self):
        result = solve_camp_schedule(["Swim"], ["A", "B"], 1)
        assert result is not None
        assert result.rounds[0].round_number == 1
        assert result.rounds[0].pairings == (Pairing(activity="Swim", team_a="A", team_b="B"),)

    def test_one_activity_cannot_fill_second_round(self):
        # A round of 4 teams needs 2 activities; with only one, nothing fits
        assert solve_camp_schedule(["Swim"], ["A", "B", "C", "D"], 2) is None

    def test_two_teams_one_activity_two_rounds_infeasible(self):
        # Relaxing repeats does not help: both teams already did Swim
        assert solve_camp_schedule(["Swim"], ["A", "B"], 2) is None

    def test_three_activities_four_teams_three_rounds_needs_relaxed_phase(self):
        # With 4 teams, pairings from different rounds always share a team,
        # so a repeat-free 3-round schedule needs 6 activities. With only 3
        # the strict phase is exhausted and the relaxed phase succeeds.
        result = solve_camp_schedule(["Swim", "Archery", "Canoe"], ["A", "B", "C", "D"], 3)
        assert result is not None
        assert result.relaxed is True
        assert _as_tuples(result) == [
            [("Swim", "A", "B"), ("Archery", "C", "D")],
            [("Archery", "A", "B"), ("Canoe", "C", "D")],
            [("Canoe", "A", "B"), ("Swim", "C", "D")],
        ]

    def test_strict_phase_preferred_over_relaxed(self):
        # Relaxed search would pair A-B again in round 2; strict must not
        result = solve_camp_schedule(["Swim", "Archery", "Canoe", "Dance"], ["A", "B", "C", "D"], 2)
        assert result is not None
        assert result.relaxed is False
        assert _as_tuples(result) == [
            [("Swim", "A", "B"), ("Archery", "C", "D")],
            [("Canoe", "A", "C"), ("Dance", "B", "D")],
        ]

    def test_full_round_robin_of_four_teams_with_six_activities(self):
        activities = _names("act", 6)
        teams = ["A", "B", "C", "D"]
        result = solve_camp_schedule(activities, teams, 3)
        assert result is not None
        assert result.relaxed is False
        _assert_schedule_invariants(activities, teams, 3, result)
        pairs = {frozenset((p.team_a, p.team_b)) for r in result.rounds for p in r.pairings}
        assert len(pairs) == 6


class TestInvariants:
    """Every returned schedule passes the independent checker."""

    @pytest.mark.parametrize("num_teams", [2, 4])
    @pytest.mark.parametrize("num_activities", [1, 2, 3, 4, 5])
    @pytest.mark.parametrize("rounds", [1, 2, 3])
    def test_small_grid(self, num_teams, num_activities, rounds):
        activities = _names("act", num_activities)
        teams = _names("cabin", num_teams)
        result = solve_camp_schedule(activities, teams, rounds)
        # Infeasible exactly when a team would run out of activities or a
        # round has more pairings than activities
        expect_infeasible = num_activities < max(rounds, num_teams // 2)
        assert (result is None) == expect_infeasible
        if result is not None:
            _assert_schedule_invariants(activities, teams, rounds, result)

    @pytest.mark.parametrize("num_activities", [3, 6])
    def test_six_teams_two_rounds(self, num_activities):
        activities = _names("act", num_activities)
        teams = _names("cabin", 6)
        result = solve_camp_schedule(activities, teams, 2)
        assert result is not None
        assert result.relaxed is False
        _assert_schedule_invariants(activities, teams, 2, result)

    def test_too_few_activities_for_rounds_is_infeasible(self):
        # A team can do at most len(activities) rounds
        assert solve_camp_schedule(["Swim", "Archery"], ["A", "B"], 3) is None

    def test_too_few_activities_for_one_round_is_infeasible(self):
        assert solve_camp_schedule(["Swim", "Archery"], _names("cabin", 6), 1) is None


class TestDeterminism:
    """Same input must produce exactly the same output every time."""

    def test_repeated_runs_identical(self):
        activities = _names("act", 6)
        teams = _names("cabin", 6)
        r1 = solve_camp_schedule(activities, teams, 2)
        r2 = solve_camp_schedule(activities, teams, 2)
        r3 = CampScheduler(activities, teams, 2).generate()
        assert r1 == r2 == r3

    def test_repeated_infeasible_runs_identical(self):
        assert solve_camp_schedule(["Swim"], ["A", "B", "C", "D"], 2) is None
        assert solve_camp_schedule(["Swim"], ["A", "B", "C", "D"], 2) is None

    def test_input_order_drives_result(self):
        result = solve_camp_schedule(["Archery", "Swim"], ["D", "C", "B", "A"], 1)
        assert _as_tuples(result) == [[("Archery", "D", "C"), ("Swim", "B", "A")]]


class TestActivityShortage:
    """Too few activities is reported without running either search phase."""

    def test_more_rounds_than_activities_returns_immediately(self, caplog):
        # Searching this would try every ordering of 30 activities
        activities = _names("act", 30)
        with caplog.at_level(logging.INFO, logger="app.services.camp_scheduler"):
            result = solve_camp_schedule(activities, ["A", "B"], 31)

        assert result is None
        messages = [r.getMessage() for r in caplog.records]
        assert not any("Starting" in m for m in messages)
        assert "No schedule exists for 30 activities, 2 teams, 31 rounds" in messages

    def test_fewer_activities_than_pairings_per_round(self, caplog):
        with caplog.at_level(logging.INFO, logger="app.services.camp_scheduler"):
            result = solve_camp_schedule(_names("act", 2), _names("cabin", 6), 1)

        assert result is None
        assert not any("Starting" in r.getMessage() for r in caplog.records)

    def test_exactly_enough_activities_still_searched(self):
        result = solve_camp_schedule(["Swim", "Archery"], ["A", "B"], 2)
        assert result is not None
        assert [r.pairings[0].activity for r in result.rounds] == ["Swim", "Archery"]


class TestPhaseLogging:
    def test_placements_logged_at_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="app.services.camp_scheduler"):
            solve_camp_schedule(["Swim", "Archery", "Canoe"], ["A", "B", "C", "D"], 3)

        info = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        assert any(m.startswith("Strict phase exhausted after") and "placements" in m for m in info)
        assert any(m.startswith("Relaxed phase finished after") and "placements" in m for m in info)


class TestSearchDepth:
    def test_long_schedule_does_not_hit_recursion_limit(self):
        # Two teams meet every round; the relaxed phase places one pairing per
        # round, so the search is deeper than the default recursion limit.
        rounds = 1200
        activities = _names("act", rounds)
        result = solve_camp_schedule(activities, ["A", "B"], rounds)
        assert result is not None
        assert result.relaxed is True
        assert len(result.rounds) == rounds
        assert [r.pairings[0].activity for r in result.rounds] == activities


class TestResultShape:
    def test_result_is_immutable(self):
        result = solve_camp_schedule(["Swim"], ["A", "B"], 1)
        assert isinstance(result.rounds, tuple)
        assert isinstance(result.rounds[0].pairings, tuple)
        with pytest.raises(AttributeError):
            result.rounds[0].pairings[0].activity = "Canoe"

    def test_scheduler_reusable(self):
        scheduler = CampScheduler(["Swim", "Archery", "Canoe"], ["A", "B", "C", "D"], 3)
        assert scheduler.generate() == scheduler.generate()
