from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

import numpy as np
from sklearn.linear_model import LinearRegression

from ecoware.core.errors import ForecastError, InsufficientDataError
from ecoware.schemas.movements import ForecastPoint, MovementRecord

logger = logging.getLogger(__name__)

WINDOW = 3
MODEL_NAME = "3-period moving average + linear trend"


@dataclass
class TrendFit:
    slope: float
    intercept: float
    flat: bool


@dataclass
class DemandForecastResult:
    points: list[ForecastPoint]
    smoothed: list[float]
    slope: float
    intercept: float
    history_points_used: int

    @property
    def total_demand(self) -> int:
        return sum(point.quantity for point in self.points)

    @property
    def average_daily_demand(self) -> int:
        if not self.points:
            return 0
        return _round_half_up(self.total_demand / len(self.points))

    def cumulative(self) -> list[int]:
        return np.cumsum([point.quantity for point in self.points]).astype(int).tolist()


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def _check_preconditions(series: Sequence[MovementRecord], horizon_days: int) -> None:
    if horizon_days < 1:
        raise ForecastError("horizon_days must be at least 1", details={"horizon_days": horizon_days})
    if len(series) < WINDOW:
        raise InsufficientDataError(details={"points": len(series), "required": WINDOW})
    dates = [record.date for record in series]
    if any(later < earlier for earlier, later in zip(dates, dates[1:])):
        raise ForecastError("series must be sorted ascending by date")


def moving_average(quantities: Sequence[float], window: int = WINDOW) -> np.ndarray:
    values = np.asarray(quantities, dtype=float)
    return np.convolve(values, np.ones(window) / window, mode="valid")


def fit_trend(smoothed: np.ndarray) -> TrendFit:
    n = len(smoothed)
    x = np.arange(n, dtype=float)
    # n * sum(x^2) - sum(x)^2 is zero for a single window.
    if n * float(np.sum(x * x)) - float(np.sum(x)) ** 2 == 0:
        return TrendFit(slope=0.0, intercept=float(smoothed[-1]), flat=True)

    model = LinearRegression().fit(x.reshape(-1, 1), smoothed)
    return TrendFit(slope=float(model.coef_[0]), intercept=float(model.intercept_), flat=False)


def run_demand_forecast(series: Sequence[MovementRecord], horizon_days: int) -> DemandForecastResult:
    _check_preconditions(series, horizon_days)

    smoothed = moving_average([record.quantity for record in series])
    trend = fit_trend(smoothed)

    n = len(smoothed)
    last_date = series[-1].date
    steps = np.arange(1, horizon_days + 1)
    projected = trend.intercept + trend.slope * (n + steps - 1)

    points = [
        ForecastPoint(date=last_date + timedelta(days=int(step)), quantity=max(0, _round_half_up(value)))
        for step, value in zip(steps, projected)
    ]

    logger.info(
        "Forecast %d day(s) from %d point(s): slope=%.4f intercept=%.4f flat=%s",
        horizon_days,
        len(series),
        trend.slope,
        trend.intercept,
        trend.flat,
    )
    return DemandForecastResult(
        points=points,
        smoothed=smoothed.tolist(),
        slope=trend.slope,
        intercept=trend.intercept,
        history_points_used=len(series),
    )


def forecast_demand(series: Sequence[MovementRecord], horizon_days: int) -> list[ForecastPoint]:
    return run_demand_forecast(series, horizon_days).points
