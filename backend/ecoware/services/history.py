from __future__ import annotations

from typing import Iterable

from ecoware.schemas.movements import MovementRecord

OUTBOUND = "out"
MIN_SERIES_LENGTH = 3


def item_history(records: Iterable[MovementRecord], item_name: str) -> list[MovementRecord]:
    matching = [
        record
        for record in records
        if record.item_name == item_name and record.movement_type == OUTBOUND
    ]
    return sorted(matching, key=lambda record: record.date)


def build_series(records: Iterable[MovementRecord], item_name: str) -> list[MovementRecord]:
    """Outbound history for one item, oldest first.

    Empty when fewer than ``MIN_SERIES_LENGTH`` records match, which is the
    smallest sample the forecaster accepts.
    """
    series = item_history(records, item_name)
    if len(series) < MIN_SERIES_LENGTH:
        return []
    return series


def unique_items(records: Iterable[MovementRecord]) -> list[str]:
    return sorted({record.item_name for record in records})
