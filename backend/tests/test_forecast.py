from datetime import date, timedelta

import pytest

from ecoware.core.errors import ForecastError, InsufficientDataError
from ecoware.schemas.movements import MovementRecord
from ecoware.services.forecast import fit_trend, forecast_demand, moving_average, run_demand_forecast
from ecoware.services.history import build_series, item_history, unique_items

START = date(2024, 1, 1)


def _series(quantities: list[int], item: str = "Widget", start: date = START) -> list[MovementRecord]:
    return [
        MovementRecord(date=start + timedelta(days=i), item_name=item, quantity=q, movement_type="out")
        for i, q in enumerate(quantities)
    ]


def test_build_series_filters_item_and_outbound_and_sorts() -> None:
    records = [
        MovementRecord(date=date(2024, 1, 3), item_name="Widget", quantity=3, movement_type="out"),
        MovementRecord(date=date(2024, 1, 1), item_name="Widget", quantity=1, movement_type="out"),
        MovementRecord(date=date(2024, 1, 2), item_name="Widget", quantity=9, movement_type="in"),
        MovementRecord(date=date(2024, 1, 2), item_name="Gadget", quantity=4, movement_type="out"),
        MovementRecord(date=date(2024, 1, 2), item_name="Widget", quantity=2, movement_type="out"),
        MovementRecord(date=date(2024, 1, 2), item_name="widget", quantity=5, movement_type="out"),
    ]
    series = build_series(records, "Widget")

    assert [record.quantity for record in series] == [1, 2, 3]
    assert all(record.movement_type == "out" for record in series)
    assert [record.date for record in series] == sorted(record.date for record in series)


def test_build_series_requires_three_matches() -> None:
    records = _series([5, 6]) + [
        MovementRecord(date=START, item_name="Widget", quantity=7, movement_type="in"),
    ]
    assert build_series(records, "Widget") == []
    assert len(item_history(records, "Widget")) == 2


def test_unique_items_sorted() -> None:
    records = _series([1], item="Rice") + _series([1], item="Milk Packet") + _series([1], item="Rice")
    assert unique_items(records) == ["Milk Packet", "Rice"]


def test_concrete_scenario() -> None:
    series = _series([50, 45, 55, 60, 58])
    result = run_demand_forecast(series, 2)

    assert result.smoothed == pytest.approx([50.0, 53.3333, 57.6667], abs=1e-3)
    assert result.slope == pytest.approx(3.8333, abs=1e-3)
    assert result.intercept == pytest.approx(49.8333, abs=1e-3)
    assert [point.quantity for point in result.points] == [61, 65]
    assert [point.date for point in result.points] == [date(2024, 1, 6), date(2024, 1, 7)]
    assert all(point.quantity >= round(result.smoothed[-1]) for point in result.points)
    assert result.total_demand == 126
    assert result.average_daily_demand == 63
    assert result.cumulative() == [61, 126]


@pytest.mark.parametrize("length", [0, 1, 2])
def test_short_series_is_rejected(length: int) -> None:
    with pytest.raises(InsufficientDataError):
        forecast_demand(_series([10] * length), 7)


@pytest.mark.parametrize("horizon", [7, 14, 30, 60, 90])
def test_horizon_yields_contiguous_days(horizon: int) -> None:
    series = _series([12, 15, 11, 18, 20, 17])
    points = forecast_demand(series, horizon)

    assert len(points) == horizon
    assert points[0].date == series[-1].date + timedelta(days=1)
    for earlier, later in zip(points, points[1:]):
        assert later.date - earlier.date == timedelta(days=1)
    assert all(point.quantity >= 0 for point in points)


def test_forecast_is_idempotent() -> None:
    series = _series([50, 45, 55, 60, 58, 61, 40])
    first = forecast_demand(series, 30)
    second = forecast_demand(series, 30)
    assert [p.model_dump_json() for p in first] == [p.model_dump_json() for p in second]


def test_single_window_projects_flat() -> None:
    result = run_demand_forecast(_series([10, 20, 30]), 5)
    assert result.slope == 0.0
    assert [point.quantity for point in result.points] == [20] * 5


def test_fit_trend_flat_for_single_value() -> None:
    trend = fit_trend(moving_average([3, 3, 9]))
    assert trend.flat is True
    assert trend.intercept == pytest.approx(5.0)


def test_declining_trend_is_floored_at_zero() -> None:
    result = run_demand_forecast(_series([100, 80, 60, 40, 20, 0]), 3)
    assert result.slope == pytest.approx(-20.0)
    assert [point.quantity for point in result.points] == [0, 0, 0]


def test_invalid_horizon_is_reported() -> None:
    with pytest.raises(ForecastError) as excinfo:
        forecast_demand(_series([1, 2, 3, 4]), 0)
    assert not isinstance(excinfo.value, InsufficientDataError)


def test_unsorted_series_is_reported() -> None:
    series = list(reversed(_series([1, 2, 3, 4])))
    with pytest.raises(ForecastError):
        forecast_demand(series, 7)
