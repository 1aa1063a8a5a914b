from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

FORECAST_HORIZONS = (7, 14, 30, 60, 90)


class MovementRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    item_name: str
    quantity: int = Field(default=0, ge=0)
    movement_type: str


class ForecastPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    quantity: int = Field(ge=0)


class CsvUploadRequest(BaseModel):
    content: str = Field(..., description="Raw CSV text: date,item_name,quantity,movement_type.")
    filename: str | None = Field(default=None, description="Original file name, used to reject non-CSV uploads.")


class CsvUploadResponse(BaseModel):
    filename: str | None
    records_loaded: int
    items: list[str]


class ItemsResponse(BaseModel):
    items: list[str]


class HistoryPoint(BaseModel):
    date: dt.date
    quantity: int
    type: Literal["historical", "forecast"] = "historical"


class HistoryResponse(BaseModel):
    item_name: str
    points: list[HistoryPoint]


class ForecastRunRequest(BaseModel):
    item_name: str = Field(..., min_length=1, description="Item to forecast, matched exactly.")
    horizon_days: int = Field(default=30, description="One of 7, 14, 30, 60 or 90.")

    @field_validator("horizon_days")
    @classmethod
    def _check_horizon(cls, value: int) -> int:
        if value not in FORECAST_HORIZONS:
            raise ValueError(f"horizon_days must be one of {list(FORECAST_HORIZONS)}")
        return value


class ForecastTableRow(BaseModel):
    date: dt.date
    quantity: int
    cumulative: int


class ForecastRunResponse(BaseModel):
    item_name: str
    horizon_days: int
    model: str
    forecast: list[ForecastTableRow]
    history: list[HistoryPoint]
    key_evidence_metrics: dict[str, float | int | list[float]] = Field(default_factory=dict)
    assumptions: list[str] = Field(default_factory=list)
