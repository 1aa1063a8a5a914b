from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Event, Lock, Thread
from typing import Callable

import numpy as np

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# name -> (item id, grams CO2 per unit)
SIMULATED_ITEMS: dict[str, tuple[str, float]] = {
    "Milk Packet": ("A101", 50),
    "Modern Bread": ("A102", 40),
    "Toothpaste": ("A103", 70),
    "Notebook": ("A104", 90),
    "Rice": ("A105", 120),
    "Sugar": ("A106", 100),
}
MIN_QUANTITY = 5
MAX_QUANTITY = 20


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SimulationEvent:
    item_id: str
    item_name: str
    movement_type: str
    timestamp: datetime
    quantity: int
    emission_factor: float


def generate_event(rng: np.random.Generator, clock: Clock = utc_now) -> SimulationEvent:
    names = list(SIMULATED_ITEMS)
    name = names[int(rng.integers(len(names)))]
    item_id, factor = SIMULATED_ITEMS[name]
    return SimulationEvent(
        item_id=item_id,
        item_name=name,
        movement_type="out",
        timestamp=clock(),
        quantity=int(rng.integers(MIN_QUANTITY, MAX_QUANTITY + 1)),
        emission_factor=factor,
    )


def _ranked(totals: dict[str, float]) -> list[tuple[str, float]]:
    return sorted(totals.items(), key=lambda pair: pair[1], reverse=True)


class SimulationFeed:
    """Time-ordered simulated events; with ``retention`` set, older events are dropped on append."""

    def __init__(self, retention: timedelta | None = None) -> None:
        self.retention = retention
        self._events: deque[SimulationEvent] = deque()
        self._lock = Lock()

    def append(self, event: SimulationEvent) -> None:
        with self._lock:
            self._events.append(event)
            if self.retention is not None:
                cutoff = event.timestamp - self.retention
                while self._events and self._events[0].timestamp <= cutoff:
                    self._events.popleft()

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def events(self) -> list[SimulationEvent]:
        with self._lock:
            return list(self._events)

    def recent(self, now: datetime, window: timedelta) -> list[SimulationEvent]:
        cutoff = now - window
        return [event for event in self.events() if event.timestamp > cutoff]


def demand_by_item(events: list[SimulationEvent]) -> list[tuple[str, int]]:
    totals: dict[str, float] = {}
    for event in events:
        if event.movement_type == "out":
            totals[event.item_name] = totals.get(event.item_name, 0) + event.quantity
    return [(name, int(quantity)) for name, quantity in _ranked(totals)]


def emissions_by_item(events: list[SimulationEvent]) -> list[tuple[str, float]]:
    totals: dict[str, float] = {}
    for event in events:
        totals[event.item_name] = totals.get(event.item_name, 0.0) + event.quantity * event.emission_factor / 1000
    return _ranked(totals)


class SimulationRunner:
    """Emit one simulated movement every ``interval`` seconds until stopped."""

    def __init__(
        self,
        feed: SimulationFeed,
        interval: float = 10.0,
        clock: Clock = utc_now,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.feed = feed
        self.interval = interval
        self.clock = clock
        self.rng = rng if rng is not None else np.random.default_rng()
        self._stop = Event()
        self._thread: Thread | None = None
        self._lock = Lock()
        self._rng_lock = Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> SimulationEvent:
        # the periodic thread and manual ticks share one Generator
        with self._rng_lock:
            event = generate_event(self.rng, self.clock)
        self.feed.append(event)
        return event

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()

    def start(self) -> bool:
        with self._lock:
            if self.running:
                return False
            self._stop.clear()
            self._thread = Thread(target=self._run, name="ecoware-simulation", daemon=True)
            self._thread.start()
        logger.info("Simulation started (interval=%ss)", self.interval)
        return True

    def stop(self, timeout: float | None = 1.0) -> bool:
        with self._lock:
            thread = self._thread
            if thread is None:
                return False
            self._stop.set()
            self._thread = None
        thread.join(timeout)
        logger.info("Simulation stopped")
        return True
