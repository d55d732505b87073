# mr_core/audit/tests/test_audit_service.py
import logging

from mr_core.audit.services import AuditService
from mr_core.conftest import AUTH_HEADER


def test_event_is_posted_with_camel_case_payload(upstream):
    record = AuditService.log(
        action="DIAGNOSIS_CREATE",
        entity="Diagnostics",
        entity_id="d-1",
        actor_id="doc-1",
        actor_role="MEDICO",
        metadata={"documentIds": ["x", "y"]},
        auth_token=AUTH_HEADER,
    )

    assert record is not None
    assert upstream.audit_events == [
        {
            "action": "DIAGNOSIS_CREATE",
            "entity": "Diagnostics",
            "entityId": "d-1",
            "actorId": "doc-1",
            "actorRole": "MEDICO",
            "metadata": {"documentIds": ["x", "y"]},
        }
    ]
    audit_request = [r for r in upstream.requests if r.url.host == "audit.test"][0]
    assert audit_request.url.path == "/api/audit"
    assert audit_request.headers["Authorization"] == AUTH_HEADER


def test_failure_is_logged_not_raised(upstream, caplog):
    upstream.audit_down = True

    with caplog.at_level(logging.WARNING, logger="mr_core.audit.services"):
        assert AuditService.log(action="X", entity="Y", entity_id=1) is None

    assert "not delivered" in caplog.text


def test_noop_without_audit_service(settings, upstream):
    settings.INTEGRATIONS = {**settings.INTEGRATIONS, "AUDIT_SERVICE_URL": ""}

    assert AuditService.log(action="X", entity="Y", entity_id=1) is None
    assert upstream.audit_events == []
