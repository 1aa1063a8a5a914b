from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request

from ecoware.core.activity import record_activity
from ecoware.core.errors import EcoWareError
from ecoware.core.session import SessionState, get_session

Session = Annotated[SessionState, Depends(get_session)]


def _result_preview(payload: Any) -> dict[str, Any]:
    if hasattr(payload, "model_dump"):
        data = payload.model_dump(mode="json")
    elif isinstance(payload, dict):
        data = payload
    else:
        return {}
    return {"keys": sorted(data.keys())[:8]}


def log_call(request: Request, session: SessionState, action: str, payload: Any, response_payload: Any) -> None:
    record_activity(
        action=action,
        path=request.url.path,
        session_id=session.session_id,
        payload=payload,
        result_preview=_result_preview(response_payload),
    )


def http_error(
    request: Request,
    session: SessionState,
    action: str,
    status_code: int,
    exc: EcoWareError,
    payload: Any = None,
) -> HTTPException:
    record_activity(
        action=action,
        path=request.url.path,
        session_id=session.session_id,
        payload=payload,
        outcome=exc.__class__.__name__,
    )
    return HTTPException(status_code=status_code, detail=exc.to_dict())
