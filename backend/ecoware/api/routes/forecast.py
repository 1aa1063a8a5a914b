from __future__ import annotations

from fastapi import APIRouter, Query, Request, Response

from ecoware.api.deps import Session, http_error, log_call
from ecoware.core.errors import CsvIngestError, ForecastError, ParseFailureError
from ecoware.schemas.movements import (
    FORECAST_HORIZONS,
    CsvUploadRequest,
    CsvUploadResponse,
    ForecastRunRequest,
    ForecastRunResponse,
    ForecastTableRow,
    HistoryPoint,
    HistoryResponse,
    ItemsResponse,
)
from ecoware.services.forecast import MODEL_NAME, run_demand_forecast
from ecoware.services.history import build_series, item_history, unique_items
from ecoware.services.ingest import SAMPLE_CSV, SAMPLE_CSV_FILENAME, parse_movement_csv

router = APIRouter(prefix="/forecast", tags=["Demand Forecast"])


@router.post("/upload", response_model=CsvUploadResponse)
def upload_csv(payload: CsvUploadRequest, request: Request, session: Session) -> CsvUploadResponse:
    """Replace the session's movement log with the parsed upload."""
    preview = {"filename": payload.filename, "bytes": len(payload.content)}
    if payload.filename is not None and not payload.filename.lower().endswith(".csv"):
        exc = ParseFailureError("Please select a valid CSV file", code="invalid_file_type")
        raise http_error(request, session, "upload_csv", 400, exc, preview)

    with session.busy("upload"):
        try:
            records = parse_movement_csv(payload.content)
        except CsvIngestError as exc:
            raise http_error(request, session, "upload_csv", 400, exc, preview) from exc
        session.replace_records(records)

    response = CsvUploadResponse(
        filename=payload.filename,
        records_loaded=len(records),
        items=unique_items(records),
    )
    log_call(request, session, "upload_csv", preview, response)
    return response


@router.get("/sample")
def download_sample_csv() -> Response:
    return Response(
        content=SAMPLE_CSV,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{SAMPLE_CSV_FILENAME}"'},
    )


@router.get("/items", response_model=ItemsResponse)
def list_items(session: Session) -> ItemsResponse:
    return ItemsResponse(items=unique_items(session.records))


@router.get("/history", response_model=HistoryResponse)
def item_history_endpoint(session: Session, item_name: str = Query(..., min_length=1)) -> HistoryResponse:
    points = [
        HistoryPoint(date=record.date, quantity=record.quantity)
        for record in item_history(session.records, item_name)
    ]
    return HistoryResponse(item_name=item_name, points=points)


@router.get("/horizons")
def list_horizons() -> dict:
    return {"horizons": list(FORECAST_HORIZONS)}


@router.post("/run", response_model=ForecastRunResponse)
def run_forecast(payload: ForecastRunRequest, request: Request, session: Session) -> ForecastRunResponse:
    """
    Forecast daily outbound demand for one item from the uploaded history.
    Smooths with a 3-point moving average and extends a least-squares trend.
    """
    series = build_series(session.records, payload.item_name)
    try:
        result = run_demand_forecast(series, payload.horizon_days)
    except ForecastError as exc:
        raise http_error(request, session, "run_forecast", 422, exc, payload) from exc

    session.selected_item = payload.item_name
    session.forecast = result.points

    history = [
        HistoryPoint(date=record.date, quantity=record.quantity)
        for record in item_history(session.records, payload.item_name)
    ]
    rows = [
        ForecastTableRow(date=point.date, quantity=point.quantity, cumulative=cumulative)
        for point, cumulative in zip(result.points, result.cumulative())
    ]
    response = ForecastRunResponse(
        item_name=payload.item_name,
        horizon_days=payload.horizon_days,
        model=MODEL_NAME,
        forecast=rows,
        history=history,
        key_evidence_metrics={
            "history_points_used": result.history_points_used,
            "forecast_days": len(result.points),
            "average_daily_demand": result.average_daily_demand,
            "total_forecast_demand": result.total_demand,
            "slope": round(result.slope, 4),
            "intercept": round(result.intercept, 4),
            "smoothed_values": [round(value, 2) for value in result.smoothed],
        },
        assumptions=[
            "Only outbound ('out') movements for the selected item are used.",
            "Trend is a straight line through 3-point moving averages; no seasonality is modelled.",
            "Projected quantities are rounded and floored at zero.",
        ],
    )
    log_call(request, session, "run_forecast", payload, response)
    return response
