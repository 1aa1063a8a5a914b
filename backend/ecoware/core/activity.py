from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Any

from pydantic import BaseModel

_MAX_EVENTS = 50
_EVENTS: deque[dict[str, Any]] = deque(maxlen=_MAX_EVENTS)
_LOCK = Lock()
_SEQUENCE = 0
_PREVIEW_KEYS = 8
_PREVIEW_ITEMS = 5
_PREVIEW_CHARS = 120


def _compact(value: Any) -> Any:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(key): _compact(value[key]) for key in list(value)[:_PREVIEW_KEYS]}
    if isinstance(value, (list, tuple)):
        return [_compact(item) for item in value[:_PREVIEW_ITEMS]]
    if isinstance(value, str):
        text = " ".join(value.split())
        return text if len(text) <= _PREVIEW_CHARS else text[: _PREVIEW_CHARS - 3] + "..."
    return value


def record_activity(
    *,
    action: str,
    path: str,
    session_id: str,
    payload: Any = None,
    outcome: str = "ok",
    result_preview: dict[str, Any] | None = None,
) -> None:
    global _SEQUENCE

    with _LOCK:
        _SEQUENCE += 1
        _EVENTS.appendleft(
            {
                "event_id": _SEQUENCE,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "action": action,
                "path": path,
                "session_id": session_id,
                "outcome": outcome,
                "payload": _compact(payload or {}),
                "result_preview": _compact(result_preview or {}),
            }
        )


def list_activity(limit: int = 25) -> list[dict[str, Any]]:
    """Newest first; at most the retained events are returned."""
    with _LOCK:
        events = list(_EVENTS)
    return events[: max(limit, 1)]
