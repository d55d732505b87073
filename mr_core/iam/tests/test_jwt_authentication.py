# mr_core/iam/tests/test_jwt_authentication.py
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from django.conf import settings

pytestmark = pytest.mark.django_db


def _token(claims: dict, key: str | None = None) -> str:
    payload = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5), **claims}
    return jwt.encode(payload, key or settings.SIMPLE_JWT["SIGNING_KEY"], algorithm="HS256")


def test_valid_token_from_auth_service_is_accepted(client):
    token = _token({"id": "doc-1", "role": "MEDICO"})
    r = client.get("/api/v1/diseases/", HTTP_AUTHORIZATION=f"Bearer {token}")
    assert r.status_code == 200, r.content


def test_token_without_subject_is_bad_request(client):
    token = _token({"role": "MEDICO"})
    r = client.get("/api/v1/diseases/", HTTP_AUTHORIZATION=f"Bearer {token}")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "validation_error"


def test_token_with_wrong_signature_is_rejected(client):
    token = _token({"id": "doc-1", "role": "MEDICO"}, key="some-other-secret-that-is-long-enough")
    r = client.get("/api/v1/diseases/", HTTP_AUTHORIZATION=f"Bearer {token}")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "not_authenticated"


def test_expired_token_is_rejected(client):
    token = _token({"id": "doc-1", "role": "MEDICO", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)})
    r = client.get("/api/v1/diseases/", HTTP_AUTHORIZATION=f"Bearer {token}")
    assert r.status_code == 401
