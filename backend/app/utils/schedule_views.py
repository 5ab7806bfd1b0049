"""
Schedule Views - regroup a finished schedule and render it as text.

Three views are supported:
- rounds: what happens in each round
- activities: who plays each activity, round by round
- cabins: each team's activities and opponents
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence

from app.services.camp_scheduler import ScheduledRound

EXPORT_TITLE = "Camp Activity Schedule"


class ScheduleView(str, Enum):
    ROUNDS = "rounds"
    ACTIVITIES = "activities"
    CABINS = "cabins"


@dataclass(frozen=True)
class ActivityMatch:
    round_number: int
    team_a: str
    team_b: str


@dataclass(frozen=True)
class TeamMatch:
    round_number: int
    activity: str
    opponent: str


def group_by_activity(rounds: Sequence[ScheduledRound]) -> Dict[str, List[ActivityMatch]]:
    """Activities in first-seen order, each with its matches in round order."""
    grouped: Dict[str, List[ActivityMatch]] = {}
    for scheduled_round in rounds:
        for pairing in scheduled_round.pairings:
            grouped.setdefault(pairing.activity, []).append(
                ActivityMatch(
                    round_number=scheduled_round.round_number,
                    team_a=pairing.team_a,
                    team_b=pairing.team_b,
                )
            )
    return grouped


def group_by_team(rounds: Sequence[ScheduledRound]) -> Dict[str, List[TeamMatch]]:
    """Teams in first-seen order; every pairing adds an entry for both teams."""
    grouped: Dict[str, List[TeamMatch]] = {}
    for scheduled_round in rounds:
        for pairing in scheduled_round.pairings:
            for team, opponent in ((pairing.team_a, pairing.team_b), (pairing.team_b, pairing.team_a)):
                grouped.setdefault(team, []).append(
                    TeamMatch(
                        round_number=scheduled_round.round_number,
                        activity=pairing.activity,
                        opponent=opponent,
                    )
                )
    return grouped


def render_schedule_text(rounds: Sequence[ScheduledRound], view: str) -> str:
    """
    Render one view of the schedule as plain text.

    Raises:
        ValueError: if view is not one of ScheduleView
    """
    view = ScheduleView(view)
    lines: List[str] = [EXPORT_TITLE, ""]

    if view is ScheduleView.ROUNDS:
        for scheduled_round in rounds:
            lines.append(f"Round {scheduled_round.round_number}")
            for p in scheduled_round.pairings:
                lines.append(f"{p.activity}: {p.team_a} vs {p.team_b}")
            lines.append("")
    elif view is ScheduleView.ACTIVITIES:
        for activity, matches in group_by_activity(rounds).items():
            lines.append(activity)
            for m in matches:
                lines.append(f"Round {m.round_number}: {m.team_a} vs {m.team_b}")
            lines.append("")
    else:
        for team, matches in group_by_team(rounds).items():
            lines.append(team)
            for m in matches:
                lines.append(f"Round {m.round_number}: {m.activity} vs {m.opponent}")
            lines.append("")

    return "\n".join(lines) + "\n"


def export_filename(view: str) -> str:
    return f"camp_schedule_{ScheduleView(view).value}.txt"
