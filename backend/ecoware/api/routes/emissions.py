from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Request

from ecoware.api.deps import Session, http_error, log_call
from ecoware.core.config import settings
from ecoware.core.errors import UnknownActivityError
from ecoware.schemas.emissions import (
    ActivityEntry,
    ActivityListResponse,
    AdjustAmountRequest,
    EmissionSummaryResponse,
    FootprintResponse,
    ReductionFactors,
    ReductionScenarioResponse,
    SetAmountRequest,
)
from ecoware.services.emissions import (
    adjust_amount,
    build_footprint,
    build_summary,
    set_amount,
    simulate_reduction,
    total_carbon,
    trees_needed,
)
from ecoware.services.simulator import emissions_by_item

router = APIRouter(prefix="/emissions", tags=["emissions"])


@router.get("/activities", response_model=ActivityListResponse)
def list_activities(session: Session) -> ActivityListResponse:
    total = total_carbon(session.activities)
    return ActivityListResponse(activities=session.activities, total_carbon=total, trees_needed=trees_needed(total))


@router.post("/activities/{activity_id}/adjust", response_model=ActivityEntry)
def adjust_activity(activity_id: int, payload: AdjustAmountRequest, request: Request, session: Session) -> ActivityEntry:
    try:
        entry = adjust_amount(session.activities, activity_id, payload.change)
    except UnknownActivityError as exc:
        raise http_error(request, session, "adjust_activity", 404, exc, payload) from exc
    log_call(request, session, "adjust_activity", payload, entry)
    return entry


@router.put("/activities/{activity_id}", response_model=ActivityEntry)
def set_activity_amount(activity_id: int, payload: SetAmountRequest, request: Request, session: Session) -> ActivityEntry:
    try:
        entry = set_amount(session.activities, activity_id, payload.amount)
    except UnknownActivityError as exc:
        raise http_error(request, session, "set_activity_amount", 404, exc, payload) from exc
    log_call(request, session, "set_activity_amount", payload, entry)
    return entry


@router.get("/footprint", response_model=FootprintResponse)
def carbon_footprint(session: Session) -> FootprintResponse:
    return build_footprint(session.activities)


@router.get("/summary", response_model=EmissionSummaryResponse)
def emission_summary(session: Session) -> EmissionSummaryResponse:
    window = timedelta(minutes=settings.simulation_window_minutes)
    recent = session.feed.recent(session.simulation().clock(), window)
    real_time = sum(emission for _, emission in emissions_by_item(recent))
    return build_summary(session.activities, real_time)


@router.get("/reductions", response_model=ReductionScenarioResponse)
def reduction_scenario(session: Session) -> ReductionScenarioResponse:
    return simulate_reduction(session.activities, session.reduction_factors)


@router.put("/reductions", response_model=ReductionScenarioResponse)
def update_reductions(payload: ReductionFactors, request: Request, session: Session) -> ReductionScenarioResponse:
    session.reduction_factors = payload
    response = simulate_reduction(session.activities, payload)
    log_call(request, session, "update_reductions", payload, response)
    return response


@router.post("/reductions/reset", response_model=ReductionScenarioResponse)
def reset_reductions(session: Session) -> ReductionScenarioResponse:
    session.reduction_factors = ReductionFactors()
    return simulate_reduction(session.activities, session.reduction_factors)
