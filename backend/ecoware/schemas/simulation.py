from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class SimulationEventOut(BaseModel):
    item_id: str
    item_name: str
    movement_type: str
    timestamp: datetime
    quantity: int
    emission_factor: float


class ItemDemand(BaseModel):
    name: str
    quantity: int


class ItemEmission(BaseModel):
    name: str
    emission: float


class SimulationStatus(BaseModel):
    running: bool
    interval_seconds: float
    events_recorded: int


class SimulationDashboardResponse(BaseModel):
    running: bool
    window_minutes: int
    recent_events: list[SimulationEventOut]
    demand: list[ItemDemand]
    emissions: list[ItemEmission]
    top_demanded: list[ItemDemand]
    least_demanded: list[ItemDemand]
    total_emission: float
