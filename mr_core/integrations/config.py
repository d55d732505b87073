# mr_core/integrations/config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from django.conf import settings


@dataclass(frozen=True)
class IntegrationSettings:
    """
    Startup configuration of the upstream services.
    Empty base URLs mean "not deployed": every lookup against them is skipped.
    """
    user_service_url: str = ""
    auth_service_url: str = ""
    audit_service_url: str = ""
    appointment_service_url: str = ""
    auth_user_path: str = "/api/v1/users/{id}"
    auth_patient_path: str = "/api/v1/patients/{id}"
    appointment_by_id_path: str = "/api/v1/appointments/by-id/{id}"
    validate_patient: bool = True
    validate_doctor: bool = True
    timeout_seconds: float = 5.0

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "IntegrationSettings":
        defaults = cls()
        return cls(
            user_service_url=str(raw.get("USER_SERVICE_URL") or "").rstrip("/"),
            auth_service_url=str(raw.get("AUTH_SERVICE_URL") or "").rstrip("/"),
            audit_service_url=str(raw.get("AUDIT_SERVICE_URL") or "").rstrip("/"),
            appointment_service_url=str(raw.get("APPOINTMENT_SERVICE_URL") or "").rstrip("/"),
            auth_user_path=raw.get("AUTH_USER_PATH") or defaults.auth_user_path,
            auth_patient_path=raw.get("AUTH_PATIENT_PATH") or defaults.auth_patient_path,
            appointment_by_id_path=raw.get("APPOINTMENT_BY_ID_PATH") or defaults.appointment_by_id_path,
            validate_patient=bool(raw.get("VALIDATE_PATIENT", True)),
            validate_doctor=bool(raw.get("VALIDATE_DOCTOR", True)),
            timeout_seconds=float(raw.get("TIMEOUT_SECONDS", defaults.timeout_seconds)),
        )

    @classmethod
    def from_django(cls) -> "IntegrationSettings":
        return cls.from_mapping(getattr(settings, "INTEGRATIONS", {}) or {})
