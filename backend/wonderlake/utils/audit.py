"""Structured audit logging for dashboard actions."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

audit_logger = logging.getLogger("wonderlake.audit")


def _to_serializable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_serializable(v) for v in value]
    return str(value)


def log_audit_event(
    event_type: str,
    *,
    actor: Any = None,
    details: Mapping[str, Any] | None = None,
) -> None:
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event_type,
    }

    if actor is not None:
        actor_id = getattr(actor, "id", None)
        payload.update(
            {
                "actor_id": str(actor_id) if actor_id else None,
                "actor_email": getattr(actor, "email", None),
                "actor_is_admin": bool(getattr(actor, "is_admin", False)),
            }
        )

    if details:
        payload["details"] = _to_serializable(details)

    audit_logger.info(json.dumps(payload, ensure_ascii=True))
