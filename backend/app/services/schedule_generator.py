"""
Schedule Generator - solver + pairing analysis in one call.

Entry point used by the API layer. Input must already be validated.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from app.services.camp_scheduler import ScheduledRound, solve_camp_schedule
from app.services.pairing_analyzer import PairingAnalysis, RepeatedPairing, analyze_pairings

logger = logging.getLogger(__name__)

INFEASIBLE_MESSAGE = (
    "Could not generate a valid schedule with these parameters. "
    "Try reducing the number of rounds or increasing the number of activities."
)


@dataclass(frozen=True)
class GeneratedSchedule:
    rounds: Tuple[ScheduledRound, ...]
    analysis: PairingAnalysis

    @property
    def has_repeats(self) -> bool:
        return self.analysis.has_repeats

    @property
    def repeated_pairings(self) -> Tuple[RepeatedPairing, ...]:
        return self.analysis.repeated_pairings


def describe_repeated_pairing(record: RepeatedPairing) -> str:
    encounters = ", ".join(f"Round {e.round_number} ({e.activity})" for e in record.encounters)
    return f"{record.team_a} vs {record.team_b} compete {record.count} times: {encounters}"


def repeat_notice(analysis: PairingAnalysis) -> Optional[str]:
    if not analysis.has_repeats:
        return None
    return f"Note: Schedule generated with {len(analysis.repeated_pairings)} repeated cabin pairings."


def generate_camp_schedule(
    activities: Sequence[str], teams: Sequence[str], rounds: int
) -> Optional[GeneratedSchedule]:
    """
    Solve the schedule and analyze repeated pairings.

    Returns:
        GeneratedSchedule, or None when no schedule exists for the input
    """
    result = solve_camp_schedule(activities, teams, rounds)
    if result is None:
        return None

    analysis = analyze_pairings(result.rounds, relaxed=result.relaxed)
    if analysis.has_repeats:
        logger.info(
            "Repeated pairings analysis:\n%s",
            "\n".join(describe_repeated_pairing(r) for r in analysis.repeated_pairings),
        )

    return GeneratedSchedule(rounds=result.rounds, analysis=analysis)
