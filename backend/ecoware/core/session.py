from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from threading import Lock
from typing import Iterator

from fastapi import Request

from ecoware.core.config import settings
from ecoware.core.errors import SessionBusyError
from ecoware.schemas.emissions import ActivityEntry, ReductionFactors
from ecoware.schemas.movements import ForecastPoint, MovementRecord
from ecoware.services.emissions import default_activities
from ecoware.services.simulator import SimulationFeed, SimulationRunner

SESSION_HEADER = "X-EcoWare-Session"
DEFAULT_SESSION_ID = "default"


def _simulation_window() -> timedelta:
    return timedelta(minutes=settings.simulation_window_minutes)


@dataclass
class SessionState:
    session_id: str
    activities: list[ActivityEntry] = field(default_factory=default_activities)
    reduction_factors: ReductionFactors = field(default_factory=ReductionFactors)
    records: list[MovementRecord] = field(default_factory=list)
    selected_item: str | None = None
    forecast: list[ForecastPoint] = field(default_factory=list)
    feed: SimulationFeed = field(default_factory=lambda: SimulationFeed(retention=_simulation_window()))
    runner: SimulationRunner | None = None
    _busy: set[str] = field(default_factory=set)
    _lock: Lock = field(default_factory=Lock)

    def replace_records(self, records: list[MovementRecord]) -> None:
        self.records = list(records)
        self.forecast = []
        self.selected_item = None

    def simulation(self) -> SimulationRunner:
        if self.runner is None:
            self.runner = SimulationRunner(self.feed, interval=settings.simulation_interval_seconds)
        return self.runner

    @contextmanager
    def busy(self, operation: str) -> Iterator[None]:
        with self._lock:
            if operation in self._busy:
                raise SessionBusyError(details={"operation": operation, "session_id": self.session_id})
            self._busy.add(operation)
        try:
            yield
        finally:
            with self._lock:
                self._busy.discard(operation)


class SessionStore:
    def __init__(self) -> None:
        self._sessions: dict[str, SessionState] = {}
        self._lock = Lock()

    def get(self, session_id: str) -> SessionState:
        with self._lock:
            state = self._sessions.get(session_id)
            if state is None:
                state = SessionState(session_id=session_id)
                self._sessions[session_id] = state
            return state

    def drop(self, session_id: str) -> None:
        with self._lock:
            state = self._sessions.pop(session_id, None)
        if state is not None and state.runner is not None:
            state.runner.stop()

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.drop(session_id)


session_store = SessionStore()


def get_session(request: Request) -> SessionState:
    session_id = request.headers.get(SESSION_HEADER, "").strip() or DEFAULT_SESSION_ID
    return session_store.get(session_id)
