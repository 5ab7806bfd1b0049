"""
Camp Schedule API Routes
Generates activity schedules for cabins and exports them as text.
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from app.services.schedule_generator import (
    INFEASIBLE_MESSAGE,
    GeneratedSchedule,
    generate_camp_schedule,
    repeat_notice,
)
from app.utils.schedule_input import ScheduleInputError, validate_schedule_input
from app.utils.schedule_views import (
    ScheduleView,
    export_filename,
    group_by_activity,
    group_by_team,
    render_schedule_text,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class CampScheduleRequest(BaseModel):
    activities: List[str]
    cabins: List[str]
    rounds: int


class PairingResponse(BaseModel):
    activity: str
    cabin_a: str
    cabin_b: str


class RoundResponse(BaseModel):
    round_number: int
    pairings: List[PairingResponse]


class EncounterResponse(BaseModel):
    round_number: int
    activity: str


class RepeatedPairingResponse(BaseModel):
    cabin_a: str
    cabin_b: str
    count: int
    encounters: List[EncounterResponse]


class CampScheduleResponse(BaseModel):
    """Schedule result; rounds is null when no schedule exists"""

    feasible: bool
    rounds: Optional[List[RoundResponse]] = None
    has_repeats: bool = False
    repeated_pairings: List[RepeatedPairingResponse] = []
    notice: Optional[str] = None
    message: Optional[str] = None


class ActivityMatchResponse(BaseModel):
    round_number: int
    cabin_a: str
    cabin_b: str


class CabinMatchResponse(BaseModel):
    round_number: int
    activity: str
    opponent: str


class CampScheduleViewsResponse(BaseModel):
    rounds: List[RoundResponse]
    by_activity: Dict[str, List[ActivityMatchResponse]]
    by_cabin: Dict[str, List[CabinMatchResponse]]
    has_repeats: bool
    notice: Optional[str] = None


# ============================================================================
# Helpers
# ============================================================================


def _generate(request: CampScheduleRequest) -> Optional[GeneratedSchedule]:
    try:
        schedule_input = validate_schedule_input(request.activities, request.cabins, request.rounds)
    except ScheduleInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return generate_camp_schedule(schedule_input.activities, schedule_input.teams, schedule_input.rounds)


def _require_schedule(request: CampScheduleRequest) -> GeneratedSchedule:
    generated = _generate(request)
    if generated is None:
        raise HTTPException(status_code=409, detail=INFEASIBLE_MESSAGE)
    return generated


def _rounds_response(generated: GeneratedSchedule) -> List[RoundResponse]:
    return [
        RoundResponse(
            round_number=r.round_number,
            pairings=[PairingResponse(activity=p.activity, cabin_a=p.team_a, cabin_b=p.team_b) for p in r.pairings],
        )
        for r in generated.rounds
    ]


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/camp-schedule", response_model=CampScheduleResponse)
def create_camp_schedule(request: CampScheduleRequest):
    """
    Generate a camp activity schedule.

    Infeasibility is a normal result: feasible=false, rounds=null and a
    message suggesting fewer rounds or more activities.

    Errors:
    - 400: invalid input (empty/duplicate names, odd cabin count, bad rounds)
    """
    generated = _generate(request)

    if generated is None:
        return CampScheduleResponse(feasible=False, message=INFEASIBLE_MESSAGE)

    return CampScheduleResponse(
        feasible=True,
        rounds=_rounds_response(generated),
        has_repeats=generated.has_repeats,
        repeated_pairings=[
            RepeatedPairingResponse(
                cabin_a=rp.team_a,
                cabin_b=rp.team_b,
                count=rp.count,
                encounters=[
                    EncounterResponse(round_number=e.round_number, activity=e.activity) for e in rp.encounters
                ],
            )
            for rp in generated.repeated_pairings
        ],
        notice=repeat_notice(generated.analysis),
    )


@router.post("/camp-schedule/views", response_model=CampScheduleViewsResponse)
def get_camp_schedule_views(request: CampScheduleRequest):
    """
    Generate a schedule and return it grouped by round, activity and cabin.

    Errors:
    - 400: invalid input
    - 409: no schedule exists for the input
    """
    generated = _require_schedule(request)

    by_activity = {
        activity: [ActivityMatchResponse(round_number=m.round_number, cabin_a=m.team_a, cabin_b=m.team_b) for m in matches]
        for activity, matches in group_by_activity(generated.rounds).items()
    }
    by_cabin = {
        cabin: [CabinMatchResponse(round_number=m.round_number, activity=m.activity, opponent=m.opponent) for m in matches]
        for cabin, matches in group_by_team(generated.rounds).items()
    }

    return CampScheduleViewsResponse(
        rounds=_rounds_response(generated),
        by_activity=by_activity,
        by_cabin=by_cabin,
        has_repeats=generated.has_repeats,
        notice=repeat_notice(generated.analysis),
    )


@router.post("/camp-schedule/export/{view}", response_class=PlainTextResponse)
def export_camp_schedule(view: str, request: CampScheduleRequest):
    """
    Generate a schedule and download one view of it as a text file.

    Errors:
    - 404: unknown view (must be rounds, activities or cabins)
    - 400: invalid input
    - 409: no schedule exists for the input
    """
    if view not in {v.value for v in ScheduleView}:
        raise HTTPException(status_code=404, detail=f"Unknown schedule view '{view}'")

    generated = _require_schedule(request)
    text = render_schedule_text(generated.rounds, view)
    logger.info("Exporting %s view (%d rounds)", view, len(generated.rounds))

    return PlainTextResponse(
        content=text,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(view)}"'},
    )
