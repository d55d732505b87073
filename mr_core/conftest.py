# mr_core/conftest.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

import httpx
import pytest
from rest_framework.test import APIClient

from mr_core.common.permissions import ROLE_ADMIN, ROLE_DOCTOR, ROLE_NURSE
from mr_core.diagnostics.models import Diagnostic, DiagnosticState, DiagnosticType
from mr_core.diseases.models import DiseaseCatalog
from mr_core.iam.tokens import ServiceUser
from mr_core.integrations.registry import reset_integrations
from mr_core.records.models import MedicalRecord

DOCTOR_ID = "doc-1"
OTHER_DOCTOR_ID = "doc-2"
NURSE_ID = "nurse-1"
ADMIN_ID = "admin-1"
PATIENT_ID = "pat-1"
OTHER_PATIENT_ID = "pat-2"

USERS_URL = "http://users.test"
AUTH_URL = "http://auth.test"
AUDIT_URL = "http://audit.test"
APPOINTMENTS_URL = "http://appointments.test"

AUTH_HEADER = "Bearer test-token"


@dataclass
class UpstreamServices:
    """
    In-memory stand-in for the user, auth, audit and appointment services,
    served through httpx.MockTransport.
    """
    users: dict = field(default_factory=dict)
    patients: dict = field(default_factory=dict)
    auth_users: dict = field(default_factory=dict)
    appointments: dict = field(default_factory=dict)
    allergies: dict = field(default_factory=dict)
    audit_events: list = field(default_factory=list)
    requests: list = field(default_factory=list)
    audit_down: bool = False
    users_down: bool = False

    def _lookup(self, table: dict, key: str) -> httpx.Response:
        if key in table:
            return httpx.Response(200, json=table[key])
        return httpx.Response(404, json={"message": "not found"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host, path = request.url.host, request.url.path

        if host == "audit.test":
            if self.audit_down:
                return httpx.Response(503)
            self.audit_events.append(json.loads(request.content))
            return httpx.Response(201, json={"ok": True})

        if host == "users.test":
            if self.users_down:
                raise httpx.ConnectError("connection refused", request=request)
            if m := re.fullmatch(r"/patients/([^/]+)/allergies", path):
                return self._lookup({k: {"allergies": v} for k, v in self.allergies.items()}, m.group(1))
            if m := re.fullmatch(r"/api/v1/users/patients/([^/]+)", path):
                return self._lookup(self.patients, m.group(1))
            if m := re.fullmatch(r"/api/v1/users/([^/]+)", path):
                return self._lookup(self.users, m.group(1))

        if host == "auth.test":
            if m := re.fullmatch(r"/api/v1/(?:users|patients)/([^/]+)", path):
                return self._lookup(self.auth_users, m.group(1))

        if host == "appointments.test":
            if m := re.fullmatch(r"/api/v1/appointments/by-id/([^/]+)", path):
                return self._lookup(self.appointments, m.group(1))

        return httpx.Response(404)

    def actions(self) -> list[str]:
        return [e["action"] for e in self.audit_events]


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "uploads")
    return tmp_path / "uploads"


@pytest.fixture(autouse=True)
def upstream(settings):
    settings.INTEGRATIONS = {
        "USER_SERVICE_URL": USERS_URL,
        "AUTH_SERVICE_URL": AUTH_URL,
        "AUDIT_SERVICE_URL": AUDIT_URL,
        "APPOINTMENT_SERVICE_URL": APPOINTMENTS_URL,
        "AUTH_USER_PATH": "/api/v1/users/{id}",
        "AUTH_PATIENT_PATH": "/api/v1/patients/{id}",
        "APPOINTMENT_BY_ID_PATH": "/api/v1/appointments/by-id/{id}",
        "VALIDATE_PATIENT": True,
        "VALIDATE_DOCTOR": True,
        "TIMEOUT_SECONDS": 1,
    }

    services = UpstreamServices(
        users={
            DOCTOR_ID: {"id": DOCTOR_ID, "fullName": "Ana Gómez", "role": "MEDICO", "licenseNumber": "RM-123"},
            OTHER_DOCTOR_ID: {"id": OTHER_DOCTOR_ID, "fullName": "Luis Pérez", "role": "MEDICO"},
            PATIENT_ID: {"id": PATIENT_ID, "fullName": "Carlos Ruiz", "role": "PACIENTE"},
            OTHER_PATIENT_ID: {"id": OTHER_PATIENT_ID, "fullName": "María López", "role": "PACIENTE"},
        },
        patients={
            PATIENT_ID: {
                "data": {
                    "id": PATIENT_ID,
                    "firstName": "Carlos",
                    "lastName": "Ruiz",
                    "documentType": "CC",
                    "documentNumber": "1020",
                    "dateOfBirth": "1990-05-17",
                }
            },
        },
    )
    reset_integrations(transport=httpx.MockTransport(services.handler))
    yield services
    reset_integrations()


def _client(user_id: str, role: str) -> APIClient:
    c = APIClient()
    c.force_authenticate(user=ServiceUser({"id": user_id, "role": role}))
    c.credentials(HTTP_AUTHORIZATION=AUTH_HEADER)
    return c


@pytest.fixture
def doctor_client():
    return _client(DOCTOR_ID, ROLE_DOCTOR)


@pytest.fixture
def other_doctor_client():
    return _client(OTHER_DOCTOR_ID, ROLE_DOCTOR)


@pytest.fixture
def nurse_client():
    return _client(NURSE_ID, ROLE_NURSE)


@pytest.fixture
def admin_client():
    return _client(ADMIN_ID, ROLE_ADMIN)


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def disease(db):
    return DiseaseCatalog.objects.create(code="J00", name="Common cold", description="Rinofaringitis aguda")


@pytest.fixture
def inactive_disease(db):
    return DiseaseCatalog.objects.create(code="Z99", name="Retired entry", is_active=False)


@pytest.fixture
def record(db):
    return MedicalRecord.objects.create(
        patient_id=PATIENT_ID,
        physician_id=DOCTOR_ID,
        symptoms="Fiebre y tos",
        notes="Control en una semana",
    )


@pytest.fixture
def make_diagnostic(db, disease):
    def make(record, *, type=DiagnosticType.PRIMARY, state=DiagnosticState.ACTIVE, diagnosis="J00 - Common cold"):
        return Diagnostic.objects.create(
            patient_id=record.patient_id,
            doctor_id=record.physician_id,
            medical_record=record,
            disease_code=disease.code,
            disease_name=disease.name,
            type=type,
            state=state,
            title="Resfriado",
            description="Cuadro viral",
            diagnosis=diagnosis,
            treatment="Reposo",
        )

    return make
