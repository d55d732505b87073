# mr_core/integrations/appointments.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from mr_core.integrations.http import ServiceClient, fill_id
from mr_core.integrations.identity import unwrap

BLOCKING_STATUSES = frozenset({"CANCELLED", "NO_SHOW"})


class AppointmentProblem(str, Enum):
    NO_APPOINTMENT = "NO_APPOINTMENT"
    NOT_FOUND = "NOT_FOUND"
    PATIENT_MISMATCH = "PATIENT_MISMATCH"
    INVALID_STATUS = "INVALID_STATUS"


@dataclass(frozen=True)
class AppointmentCheck:
    ok: bool
    reason: Optional[AppointmentProblem] = None
    appointment: Optional[dict] = None


class AppointmentClient:
    def __init__(self, client: Optional[ServiceClient], by_id_path: str):
        self.client = client
        self.by_id_path = by_id_path

    def get_appointment(self, appointment_id: str, auth_token: Optional[str] = None) -> Optional[dict]:
        if self.client is None or not appointment_id:
            return None
        lookup = self.client.get(fill_id(self.by_id_path, appointment_id), auth_token=auth_token)
        if not lookup.found:
            return None
        data: Any = unwrap(lookup.data)
        return data if isinstance(data, dict) else None

    def validate_for_patient(
        self,
        appointment_id: Optional[str],
        patient_id: str,
        auth_token: Optional[str] = None,
    ) -> AppointmentCheck:
        """
        An appointment is usable when it exists, belongs to the patient and
        is not CANCELLED / NO_SHOW.
        """
        if not appointment_id:
            return AppointmentCheck(False, AppointmentProblem.NO_APPOINTMENT)

        appt = self.get_appointment(appointment_id, auth_token)
        if not appt:
            return AppointmentCheck(False, AppointmentProblem.NOT_FOUND)

        if str(appt.get("patientId", appt.get("patient_id"))) != str(patient_id):
            return AppointmentCheck(False, AppointmentProblem.PATIENT_MISMATCH, appt)

        if str(appt.get("status", "")).upper() in BLOCKING_STATUSES:
            return AppointmentCheck(False, AppointmentProblem.INVALID_STATUS, appt)

        return AppointmentCheck(True, None, appt)
