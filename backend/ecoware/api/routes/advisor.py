from __future__ import annotations

from fastapi import APIRouter, Request

from ecoware.api.deps import Session, log_call
from ecoware.schemas.advisor import AdvisorChatRequest, AdvisorChatResponse, AdvisorWelcomeResponse
from ecoware.services.advisor.local import welcome_message
from ecoware.services.advisor.service import generate_advice, snapshot_from_activities

router = APIRouter(prefix="/advisor", tags=["advisor"])


@router.get("/welcome", response_model=AdvisorWelcomeResponse)
def advisor_welcome(session: Session) -> AdvisorWelcomeResponse:
    snapshot = snapshot_from_activities(session.activities)
    return AdvisorWelcomeResponse(message=welcome_message(snapshot.total_carbon), total_carbon=snapshot.total_carbon)


@router.post("/chat", response_model=AdvisorChatResponse)
def advisor_chat(payload: AdvisorChatRequest, request: Request, session: Session) -> AdvisorChatResponse:
    snapshot = snapshot_from_activities(session.activities)
    with session.busy("advisor"):
        result = generate_advice(payload.message, snapshot)

    response = AdvisorChatResponse(
        reply=result.text,
        provider=result.provider,
        source=result.source,
        used_fallback=result.used_fallback,
    )
    log_call(request, session, "advisor_chat", payload, response)
    return response
