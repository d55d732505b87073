# mr_core/records/services.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import NotFound

from mr_core.common.api.exceptions import InvalidAppointment
from mr_core.integrations.guards import ensure_patient
from mr_core.integrations.identity import IdentityKind
from mr_core.integrations.registry import get_integrations
from mr_core.records.models import MedicalRecord, MedicalRecordStatus

UPDATABLE_FIELDS = ("symptoms", "diagnosis", "treatment", "notes", "status")


@dataclass(frozen=True)
class CreatedRecord:
    record: MedicalRecord
    patient: Optional[dict]
    appointment: Optional[dict]


class MedicalRecordService:
    """
    Write-model operations for medical records.
    Identity and appointment checks happen before the write; no transaction is held
    open across upstream calls.
    """

    @staticmethod
    def create(
        *,
        patient_id: str,
        physician_id: str,
        symptoms: str,
        diagnosis: str = "",
        treatment: str = "",
        notes: str = "",
        appointment_id: Optional[str] = None,
        date: Optional[datetime] = None,
        auth_token: Optional[str] = None,
    ) -> CreatedRecord:
        integrations = get_integrations()

        ensure_patient(patient_id, auth_token)
        if not integrations.identity.verify_exists(IdentityKind.DOCTOR, physician_id, auth_token):
            raise NotFound({"detail": "El usuario autenticado no es médico", "physician_id": physician_id})

        appointment = None
        if appointment_id:
            check = integrations.appointments.validate_for_patient(appointment_id, patient_id, auth_token)
            if not check.ok:
                raise InvalidAppointment(
                    {
                        "detail": "La cita no es válida para este paciente",
                        "reason": check.reason.value,
                        "appointment": check.appointment,
                    }
                )
            appointment = check.appointment

        patient_info = integrations.identity.get_patient_info(patient_id, auth_token)

        with transaction.atomic():
            fields = dict(
                patient_id=str(patient_id),
                physician_id=str(physician_id),
                appointment_id=str(appointment_id) if appointment_id else None,
                symptoms=symptoms,
                diagnosis=diagnosis or "",
                treatment=treatment or "",
                notes=notes or "",
                status=MedicalRecordStatus.ACTIVE,
            )
            if date is not None:
                fields["date"] = date
            record = MedicalRecord.objects.create(**fields)

        return CreatedRecord(record=record, patient=patient_info, appointment=appointment)

    @staticmethod
    @transaction.atomic
    def update(*, record: MedicalRecord, changes: dict) -> MedicalRecord:
        fields = [f for f in UPDATABLE_FIELDS if f in changes and changes[f] is not None]
        for f in fields:
            setattr(record, f, changes[f])
        if fields:
            record.save(update_fields=[*fields, "updated_at"])
        return record

    @staticmethod
    @transaction.atomic
    def archive(*, record: MedicalRecord) -> MedicalRecord:
        if record.status != MedicalRecordStatus.ARCHIVED:
            record.status = MedicalRecordStatus.ARCHIVED
            record.save(update_fields=["status", "updated_at"])
        return record
