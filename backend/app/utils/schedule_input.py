"""
Schedule Input Validation
Checks activities, cabins and round count before the solver is called.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from app.config import MAX_ROUNDS


class ScheduleInputError(Exception):
    """Raised when schedule input cannot be scheduled as given"""

    pass


@dataclass(frozen=True)
class ScheduleInput:
    activities: List[str]
    teams: List[str]
    rounds: int


def validate_schedule_input(
    activities: Sequence[str],
    teams: Sequence[str],
    rounds: Optional[int],
    max_rounds: int = MAX_ROUNDS,
) -> ScheduleInput:
    """
    Validate raw schedule input and return it normalized (names trimmed).

    Checks run in a fixed order and the first failure is reported:
    1. at least one activity
    2. at least one cabin
    3. even number of cabins
    4. rounds >= 1
    5. unique activity names
    6. unique cabin names
    7. no blank activity names
    8. no blank cabin names
    9. rounds <= max_rounds

    Raises:
        ScheduleInputError: with the message to show the user
    """
    activities = [a.strip() for a in activities]
    teams = [t.strip() for t in teams]

    if not activities:
        raise ScheduleInputError("Please add at least one activity")

    if not teams:
        raise ScheduleInputError("Please add at least one cabin")

    if len(teams) % 2 != 0:
        raise ScheduleInputError("Number of cabins must be even")

    if rounds is None or rounds < 1:
        raise ScheduleInputError("Please enter a valid number of rounds")

    if len(set(activities)) != len(activities):
        raise ScheduleInputError("Activity names must be unique")

    if len(set(teams)) != len(teams):
        raise ScheduleInputError("Cabin names must be unique")

    if any(not a for a in activities):
        raise ScheduleInputError("All activities must have names")

    if any(not t for t in teams):
        raise ScheduleInputError("All cabins must have names")

    if rounds > max_rounds:
        raise ScheduleInputError(f"Number of rounds cannot exceed {max_rounds}")

    return ScheduleInput(activities=activities, teams=teams, rounds=rounds)
