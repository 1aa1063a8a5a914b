from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from pydantic import ValidationError

from ecoware.core.errors import EmptyInputError, MissingColumnsError, ParseFailureError
from ecoware.schemas.movements import MovementRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "item_name", "quantity", "movement_type")
MIN_FIELDS = len(REQUIRED_COLUMNS)
_INT64_LIMIT = float(np.iinfo(np.int64).max)

SAMPLE_CSV_FILENAME = "sample_warehouse_data.csv"
SAMPLE_CSV = """date,item_name,quantity,movement_type
2024-01-01,Milk Packet,50,out
2024-01-02,Milk Packet,45,out
2024-01-03,Milk Packet,55,out
2024-01-01,Modern Bread,30,out
2024-01-02,Modern Bread,35,out
2024-01-03,Modern Bread,25,out"""


def _normalize_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _split_line(line: str, delimiter: str) -> list[str]:
    return [_normalize_text(value) for value in line.split(delimiter)]


def missing_columns(header: list[str]) -> list[str]:
    lowered = [token.lower() for token in header]
    return [column for column in REQUIRED_COLUMNS if not any(column in token for token in lowered)]


def _coerce_quantity(series: pd.Series) -> pd.Series:
    leading_int = series.str.extract(r"^\s*([+-]?\d+)", expand=False)
    numeric = pd.to_numeric(leading_int, errors="coerce").astype("float64")
    # values outside int64 would wrap on the cast
    numeric = numeric.where(numeric < _INT64_LIMIT)
    return numeric.fillna(0).clip(lower=0).astype("int64")


def read_movement_frame(raw_text: str, delimiter: str = ",") -> pd.DataFrame:
    """Parse an uploaded movement log into a typed frame.

    Columns are taken by position (date, item_name, quantity, movement_type);
    the header is only checked for the presence of the four logical columns.
    Rows with fewer than four fields are skipped, and quantities that are not
    a non-negative integer become 0. Any other row-level failure aborts the
    whole parse.
    """
    text = (raw_text or "").lstrip("\ufeff")
    if not text.strip():
        raise EmptyInputError()

    lines = text.splitlines()
    header = _split_line(lines[0], delimiter)
    missing = missing_columns(header)
    if missing:
        raise MissingColumnsError(missing)

    try:
        rows = []
        for line in lines[1:]:
            if not line.strip():
                continue
            values = _split_line(line, delimiter)
            if len(values) < MIN_FIELDS:
                continue
            rows.append(values[:MIN_FIELDS])

        frame = pd.DataFrame(rows, columns=list(REQUIRED_COLUMNS), dtype=str)
        if frame.empty:
            return frame

        frame["date"] = pd.to_datetime(frame["date"], format="ISO8601").dt.date
        frame["quantity"] = _coerce_quantity(frame["quantity"])
    except Exception as exc:
        raise ParseFailureError(details={"reason": str(exc)}) from exc

    return frame.reset_index(drop=True)


def parse_movement_csv(raw_text: str, delimiter: str = ",") -> list[MovementRecord]:
    frame = read_movement_frame(raw_text, delimiter=delimiter)
    try:
        records = [
            MovementRecord(
                date=row.date,
                item_name=row.item_name,
                quantity=int(row.quantity),
                movement_type=row.movement_type,
            )
            for row in frame.itertuples(index=False)
        ]
    except ValidationError as exc:
        raise ParseFailureError(details={"reason": str(exc)}) from exc
    logger.info("Parsed %d movement record(s) from CSV upload", len(records))
    return records
