# mr_core/integrations/guards.py
from __future__ import annotations

from typing import Optional

from rest_framework.exceptions import NotFound

from mr_core.integrations.identity import IdentityKind
from mr_core.integrations.registry import get_integrations

PATIENT_NOT_FOUND = "Paciente no existe"
DOCTOR_NOT_FOUND = "Doctor no existe"


def ensure_patient(patient_id: str, auth_token: Optional[str] = None) -> None:
    if not get_integrations().identity.verify_exists(IdentityKind.PATIENT, patient_id, auth_token):
        raise NotFound(PATIENT_NOT_FOUND)


def ensure_doctor(doctor_id: str, auth_token: Optional[str] = None) -> None:
    if not get_integrations().identity.verify_exists(IdentityKind.DOCTOR, doctor_id, auth_token):
        raise NotFound(DOCTOR_NOT_FOUND)


def ensure_patient_and_doctor(patient_id: str, doctor_id: str, auth_token: Optional[str] = None) -> None:
    """Both checks run concurrently; a missing patient is reported before a missing doctor."""
    patient_ok, doctor_ok = get_integrations().identity.verify_patient_and_doctor(patient_id, doctor_id, auth_token)
    if not patient_ok:
        raise NotFound(PATIENT_NOT_FOUND)
    if not doctor_ok:
        raise NotFound(DOCTOR_NOT_FOUND)
