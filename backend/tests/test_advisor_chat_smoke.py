from uuid import uuid4

from fastapi.testclient import TestClient

from ecoware.core.config import Settings
from ecoware.core.session import session_store
from ecoware.main import app
from ecoware.services.advisor.service import FALLBACK_NOTICE, AdviceResult

client = TestClient(app)


def _session_id() -> str:
    return f"advisor-{uuid4()}"


def test_advisor_chat_route(monkeypatch) -> None:
    from ecoware.api.routes import advisor as advisor_routes

    seen = {}

    def fake_generate_advice(question, snapshot):
        seen["question"] = question
        seen["total"] = snapshot.total_carbon
        return AdviceResult(text="Proxy ok", provider="openai", source="remote")

    monkeypatch.setattr(advisor_routes, "generate_advice", fake_generate_advice)

    headers = {"X-EcoWare-Session": _session_id()}
    client.put("/emissions/activities/1", json={"amount": 100}, headers=headers)
    response = client.post("/advisor/chat", json={"message": "  any tips?  "}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["reply"] == "Proxy ok"
    assert body["source"] == "remote"
    assert body["used_fallback"] is False
    assert seen == {"question": "any tips?", "total": 50.0}


def test_advisor_chat_falls_back_locally(monkeypatch) -> None:
    from ecoware.services.advisor import service as advisor_service

    monkeypatch.setattr(
        advisor_service,
        "settings",
        Settings(advisor_provider="google", google_api_key="your-gemini-api-key-here"),
    )

    response = client.post(
        "/advisor/chat",
        json={"message": "give me a recommendation"},
        headers={"X-EcoWare-Session": _session_id()},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["provider"] == "google"
    assert body["source"] == "local"
    assert body["used_fallback"] is True
    assert body["reply"].endswith(FALLBACK_NOTICE)


def test_advisor_chat_rejects_blank_message() -> None:
    response = client.post("/advisor/chat", json={"message": "   "}, headers={"X-EcoWare-Session": _session_id()})
    assert response.status_code == 422


def test_advisor_chat_busy_session() -> None:
    session_id = _session_id()
    with session_store.get(session_id).busy("advisor"):
        response = client.post("/advisor/chat", json={"message": "hello"}, headers={"X-EcoWare-Session": session_id})
    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "SessionBusyError"


def test_advisor_welcome() -> None:
    response = client.get("/advisor/welcome", headers={"X-EcoWare-Session": _session_id()})
    assert response.status_code == 200
    assert "0.0 kg CO₂" in response.json()["message"]
