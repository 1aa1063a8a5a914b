from uuid import uuid4

from fastapi.testclient import TestClient

from ecoware.core.activity import list_activity, record_activity
from ecoware.main import app
from ecoware.services.ingest import SAMPLE_CSV

client = TestClient(app)

HISTORY_CSV = """date,item_name,quantity,movement_type
2024-01-05,Milk Packet,58,out
2024-01-01,Milk Packet,50,out
2024-01-02,Milk Packet,45,out
2024-01-03,Milk Packet,55,out
2024-01-04,Milk Packet,60,out
2024-01-02,Milk Packet,500,in
2024-01-01,Rice,12,out
"""


def _headers() -> dict[str, str]:
    return {"X-EcoWare-Session": f"smoke-{uuid4()}"}


def _upload(headers: dict[str, str], content: str = HISTORY_CSV, filename: str = "history.csv"):
    return client.post("/forecast/upload", json={"content": content, "filename": filename}, headers=headers)


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["app"] == "EcoWare"


def test_sample_csv_download() -> None:
    response = client.get("/forecast/sample")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "sample_warehouse_data.csv" in response.headers["content-disposition"]
    assert response.text == SAMPLE_CSV
    assert len(response.text.splitlines()) == 7


def test_upload_then_forecast() -> None:
    headers = _headers()
    upload = _upload(headers)
    assert upload.status_code == 200
    assert upload.json()["records_loaded"] == 7
    assert upload.json()["items"] == ["Milk Packet", "Rice"]

    items = client.get("/forecast/items", headers=headers).json()
    assert items["items"] == ["Milk Packet", "Rice"]

    history = client.get("/forecast/history", params={"item_name": "Milk Packet"}, headers=headers).json()
    assert [point["quantity"] for point in history["points"]] == [50, 45, 55, 60, 58]

    response = client.post("/forecast/run", json={"item_name": "Milk Packet", "horizon_days": 7}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["model"] == "3-period moving average + linear trend"
    assert len(body["forecast"]) == 7
    assert body["forecast"][0] == {"date": "2024-01-06", "quantity": 61, "cumulative": 61}
    assert body["forecast"][1]["quantity"] == 65
    assert body["key_evidence_metrics"]["history_points_used"] == 5
    assert body["key_evidence_metrics"]["forecast_days"] == 7


def test_upload_replaces_previous_records() -> None:
    headers = _headers()
    _upload(headers)
    _upload(headers, content=SAMPLE_CSV, filename="sample_warehouse_data.csv")
    items = client.get("/forecast/items", headers=headers).json()
    assert items["items"] == ["Milk Packet", "Modern Bread"]


def test_upload_missing_columns() -> None:
    headers = _headers()
    response = _upload(headers, content="date,item_name,movement_type\n2024-01-01,Widget,out\n")
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "MissingColumnsError"
    assert detail["details"]["missing_columns"] == ["quantity"]
    assert client.get("/forecast/items", headers=headers).json()["items"] == []


def test_upload_rejects_non_csv_file() -> None:
    response = _upload(_headers(), filename="history.xlsx")
    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Please select a valid CSV file"


def test_upload_empty_file() -> None:
    response = _upload(_headers(), content="")
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "EmptyInputError"


def test_upload_with_oversized_quantity() -> None:
    headers = _headers()
    content = "date,item_name,quantity,movement_type\n2024-01-01,Widget,99999999999999999999999,out\n"
    response = _upload(headers, content=content)
    assert response.status_code == 200
    assert response.json()["records_loaded"] == 1
    history = client.get("/forecast/history", params={"item_name": "Widget"}, headers=headers).json()
    assert [point["quantity"] for point in history["points"]] == [0]


def test_failed_upload_keeps_previous_records() -> None:
    headers = _headers()
    assert _upload(headers).status_code == 200

    missing = _upload(headers, content="date,item_name,movement_type\n2024-01-01,Widget,out\n")
    assert missing.status_code == 400
    bad_date = _upload(headers, content="date,item_name,quantity,movement_type\nnot-a-date,Widget,4,out\n")
    assert bad_date.status_code == 400
    assert bad_date.json()["detail"]["error"] == "ParseFailureError"

    items = client.get("/forecast/items", headers=headers).json()
    assert items["items"] == ["Milk Packet", "Rice"]


def test_forecast_insufficient_data() -> None:
    headers = _headers()
    _upload(headers)
    response = client.post("/forecast/run", json={"item_name": "Rice", "horizon_days": 7}, headers=headers)
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Need at least 3 data points for forecasting"


def test_forecast_rejects_unsupported_horizon() -> None:
    headers = _headers()
    _upload(headers)
    response = client.post("/forecast/run", json={"item_name": "Milk Packet", "horizon_days": 10}, headers=headers)
    assert response.status_code == 422


def test_activity_feed_records_calls() -> None:
    session_id = f"smoke-{uuid4()}"
    _upload({"X-EcoWare-Session": session_id})

    response = client.get("/activity?limit=5")
    assert response.status_code == 200
    events = response.json()["events"]
    assert events[0]["action"] == "upload_csv"
    assert events[0]["session_id"] == session_id
    assert events[0]["outcome"] == "ok"
    assert events[0]["payload"] == {"filename": "history.csv", "bytes": len(HISTORY_CSV)}


def test_activity_payload_is_compacted() -> None:
    payload = {f"key{index}": "word " * 40 for index in range(12)}
    record_activity(action="bulk_update", path="/test", session_id="compact", payload=payload)

    event = list_activity(limit=1)[0]
    assert len(event["payload"]) == 8
    assert len(event["payload"]["key0"]) == 120
    assert event["payload"]["key0"].endswith("...")
