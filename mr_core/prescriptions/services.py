# mr_core/prescriptions/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from mr_core.common.api.exceptions import AllergyConflict, DiagnosisRequired, PrimaryDiagnosisRequired
from mr_core.diagnostics.models import Diagnostic, DiagnosticState, DiagnosticType
from mr_core.integrations.guards import ensure_patient_and_doctor
from mr_core.integrations.registry import get_integrations
from mr_core.prescriptions.models import Prescription
from mr_core.records.selectors import MedicalRecordSelector

logger = logging.getLogger(__name__)

DEFAULT_DURATIONS = {
    "ANTIBIOTIC": "7 días",
    "ANALGESIC": "3 días",
    "ANTIINFLAMMATORY": "5 días",
}
UNDEFINED_DURATION = "sin duración definida"

UPDATABLE_FIELDS = ("medication", "dosage", "frequency", "duration", "instructions", "expiration_date")


def infer_duration(medication_type: Optional[str], explicit: Optional[str]) -> str:
    if explicit and explicit.strip():
        return explicit.strip()
    if medication_type:
        return DEFAULT_DURATIONS.get(medication_type.strip().upper(), UNDEFINED_DURATION)
    return UNDEFINED_DURATION


def find_allergy_conflict(medication: str, allergies: Iterable[str]) -> Optional[str]:
    """Returns the first allergy that contains the medication name or is contained by it."""
    med = (medication or "").strip().lower()
    if not med:
        return None
    for allergy in allergies:
        name = (allergy or "").strip().lower()
        if name and (med in name or name in med):
            return allergy
    return None


def pick_linked_diagnostic(active: list[Diagnostic]) -> Optional[Diagnostic]:
    """PRIMARY wins; otherwise the newest active diagnostic. `active` is newest first."""
    for d in active:
        if d.type == DiagnosticType.PRIMARY:
            return d
    return active[0] if active else None


@dataclass(frozen=True)
class PrescriptionInput:
    patient_id: str
    doctor_id: str
    medical_record_id: str
    medication: str
    dosage: str
    frequency: str
    duration: str = ""
    instructions: str = ""
    medication_type: str = ""
    expiration_date: Optional[date] = None


class PrescriptionService:
    """
    Prescription creation pipeline:
    required fields -> identities -> record and diagnoses -> allergies -> duration -> insert.
    Every check runs before the single INSERT; a rejected request writes nothing.
    """

    @staticmethod
    def create(*, data: PrescriptionInput, auth_token: Optional[str] = None) -> Prescription:
        missing = [
            name
            for name in ("patient_id", "medical_record_id", "medication", "dosage", "frequency")
            if not str(getattr(data, name) or "").strip()
        ]
        if missing:
            raise ValidationError({"detail": "Faltan campos obligatorios", "missing": missing})

        ensure_patient_and_doctor(data.patient_id, data.doctor_id, auth_token)

        try:
            record = MedicalRecordSelector.get_record(record_id=data.medical_record_id)
        except MedicalRecordSelector.NotFound:
            raise NotFound("Historia clínica no existe")

        active = list(
            Diagnostic.objects.filter(medical_record=record, state=DiagnosticState.ACTIVE).order_by("-created_at")
        )
        if not active:
            raise DiagnosisRequired()
        if not any(d.type == DiagnosticType.PRIMARY for d in active):
            raise PrimaryDiagnosisRequired()

        allergies = get_integrations().allergies.get_allergies(data.patient_id, auth_token)
        conflict = find_allergy_conflict(data.medication, allergies)
        if conflict is not None:
            raise AllergyConflict({"detail": AllergyConflict.default_detail, "allergy": conflict})

        with transaction.atomic():
            prescription = Prescription.objects.create(
                medical_record=record,
                patient_id=str(data.patient_id),
                doctor_id=str(data.doctor_id),
                diagnostic=pick_linked_diagnostic(active),
                medication=data.medication.strip(),
                dosage=data.dosage.strip(),
                frequency=data.frequency.strip(),
                duration=infer_duration(data.medication_type, data.duration),
                instructions=data.instructions or "",
                expiration_date=data.expiration_date,
            )

        logger.info("Prescription %s created on record %s", prescription.id, record.id)
        return prescription

    @staticmethod
    @transaction.atomic
    def update(*, prescription: Prescription, changes: dict) -> Prescription:
        fields = [f for f in UPDATABLE_FIELDS if f in changes and changes[f] is not None]
        for f in fields:
            setattr(prescription, f, changes[f])
        if fields:
            prescription.save(update_fields=[*fields, "updated_at"])
        return prescription

    @staticmethod
    @transaction.atomic
    def delete(*, prescription: Prescription) -> None:
        prescription.delete()
