# mr_core/audit/services.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

import httpx

from mr_core.integrations.registry import get_integrations

logger = logging.getLogger(__name__)

AUDIT_PATH = "/api/audit"


@dataclass(frozen=True)
class AuditRecord:
    action: str
    entity: str
    entityId: Optional[str]
    actorId: Optional[str] = None
    actorRole: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class AuditService:
    """
    Best-effort audit emitter.
    Events are POSTed to the audit service after the business write succeeded;
    a failure is logged and dropped, never raised to the caller.
    """

    @staticmethod
    def log(
        *,
        action: str,
        entity: str,
        entity_id=None,
        actor_id=None,
        actor_role: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        auth_token: Optional[str] = None,
    ) -> Optional[AuditRecord]:
        record = AuditRecord(
            action=action,
            entity=entity,
            entityId=str(entity_id) if entity_id is not None else None,
            actorId=str(actor_id) if actor_id is not None else None,
            actorRole=actor_role or None,
            metadata=_jsonable(metadata or {}),
        )

        client = get_integrations().audit
        if client is None:
            logger.debug("Audit service not configured; dropping %s %s", action, record.entityId)
            return None

        try:
            client.post(AUDIT_PATH, asdict(record), auth_token=auth_token)
        except httpx.HTTPError as e:
            logger.warning("Audit event %s for %s %s not delivered: %s", action, entity, record.entityId, e)
            return None
        return record

    @staticmethod
    def log_for_request(request, **kwargs) -> Optional[AuditRecord]:
        user = getattr(request, "user", None)
        return AuditService.log(
            actor_id=getattr(user, "id", None),
            actor_role=getattr(user, "role", None),
            auth_token=request.META.get("HTTP_AUTHORIZATION"),
            **kwargs,
        )


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
