from __future__ import annotations

from dataclasses import asdict
from datetime import timedelta

from fastapi import APIRouter, Request

from ecoware.api.deps import Session, log_call
from ecoware.core.config import settings
from ecoware.core.session import SessionState
from ecoware.schemas.simulation import (
    ItemDemand,
    ItemEmission,
    SimulationDashboardResponse,
    SimulationEventOut,
    SimulationStatus,
)
from ecoware.services.simulator import demand_by_item, emissions_by_item

router = APIRouter(prefix="/simulation", tags=["simulation"])


def _status(session: SessionState) -> SimulationStatus:
    runner = session.simulation()
    return SimulationStatus(
        running=runner.running,
        interval_seconds=runner.interval,
        events_recorded=len(session.feed.events()),
    )


@router.post("/start", response_model=SimulationStatus)
def start_simulation(request: Request, session: Session) -> SimulationStatus:
    session.simulation().start()
    response = _status(session)
    log_call(request, session, "start_simulation", {}, response)
    return response


@router.post("/stop", response_model=SimulationStatus)
def stop_simulation(request: Request, session: Session) -> SimulationStatus:
    session.simulation().stop()
    response = _status(session)
    log_call(request, session, "stop_simulation", {}, response)
    return response


@router.post("/reset", response_model=SimulationStatus)
def reset_simulation(request: Request, session: Session) -> SimulationStatus:
    session.simulation().stop()
    session.feed.clear()
    response = _status(session)
    log_call(request, session, "reset_simulation", {}, response)
    return response


@router.post("/tick", response_model=SimulationEventOut)
def emit_simulated_event(session: Session) -> SimulationEventOut:
    event = session.simulation().tick()
    return SimulationEventOut(**asdict(event))


@router.get("/dashboard", response_model=SimulationDashboardResponse)
def simulation_dashboard(session: Session) -> SimulationDashboardResponse:
    runner = session.simulation()
    recent = session.feed.recent(runner.clock(), timedelta(minutes=settings.simulation_window_minutes))
    demand = [ItemDemand(name=name, quantity=quantity) for name, quantity in demand_by_item(recent)]
    emissions = [ItemEmission(name=name, emission=emission) for name, emission in emissions_by_item(recent)]

    return SimulationDashboardResponse(
        running=runner.running,
        window_minutes=settings.simulation_window_minutes,
        recent_events=[SimulationEventOut(**asdict(event)) for event in recent],
        demand=demand,
        emissions=emissions,
        top_demanded=demand[:3],
        least_demanded=list(reversed(demand[-3:])),
        total_emission=sum(item.emission for item in emissions),
    )
