# mr_core/records/selectors.py
from __future__ import annotations

from django.db.models import Prefetch, QuerySet

from mr_core.common.ids import parse_uuid
from mr_core.diagnostics.models import Diagnostic, DiagnosticState
from mr_core.documents.models import Document
from mr_core.records.models import MedicalRecord


def active_diagnostics_prefetch(to_attr: str = "active_diagnostics") -> Prefetch:
    return Prefetch(
        "diagnostics",
        queryset=Diagnostic.objects.filter(state=DiagnosticState.ACTIVE)
        .prefetch_related(Prefetch("documents", queryset=Document.objects.alive()))
        .order_by("-created_at"),
        to_attr=to_attr,
    )


class MedicalRecordSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_record(*, record_id) -> MedicalRecord:
        pk = parse_uuid(record_id)
        if pk is None:
            raise MedicalRecordSelector.NotFound()
        try:
            return MedicalRecord.objects.get(id=pk)
        except MedicalRecord.DoesNotExist:
            raise MedicalRecordSelector.NotFound()

    @staticmethod
    def get_record_detail(*, record_id) -> MedicalRecord:
        """Record with prescriptions, lab results, active diagnostics (+documents) and orders."""
        pk = parse_uuid(record_id)
        if pk is None:
            raise MedicalRecordSelector.NotFound()
        try:
            return (
                MedicalRecord.objects.prefetch_related(
                    "prescriptions",
                    "lab_results",
                    "medical_orders",
                    active_diagnostics_prefetch(),
                ).get(id=pk)
            )
        except MedicalRecord.DoesNotExist:
            raise MedicalRecordSelector.NotFound()

    @staticmethod
    def list_records() -> QuerySet[MedicalRecord]:
        return MedicalRecord.objects.all().order_by("-date")

    @staticmethod
    def list_by_patient(*, patient_id: str) -> QuerySet[MedicalRecord]:
        return MedicalRecord.objects.filter(patient_id=str(patient_id)).order_by("-date")

    @staticmethod
    def get_by_appointment(*, appointment_id: str) -> MedicalRecord:
        record = (
            MedicalRecord.objects.filter(appointment_id=str(appointment_id))
            .prefetch_related("prescriptions", "lab_results", "medical_orders", active_diagnostics_prefetch())
            .order_by("-date")
            .first()
        )
        if record is None:
            raise MedicalRecordSelector.NotFound()
        return record
