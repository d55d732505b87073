# mr_core/prescriptions/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from mr_core.common.ids import parse_uuid
from mr_core.prescriptions.models import Prescription


class PrescriptionSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_prescription(*, prescription_id) -> Prescription:
        pk = parse_uuid(prescription_id)
        if pk is None:
            raise PrescriptionSelector.NotFound()
        try:
            return Prescription.objects.select_related("medical_record", "diagnostic").get(id=pk)
        except Prescription.DoesNotExist:
            raise PrescriptionSelector.NotFound()

    @staticmethod
    def list_prescriptions() -> QuerySet[Prescription]:
        return Prescription.objects.select_related("medical_record").order_by("-prescription_date")

    @staticmethod
    def list_for_patient(*, patient_id: str) -> QuerySet[Prescription]:
        return (
            Prescription.objects.select_related("medical_record")
            .filter(patient_id=str(patient_id))
            .order_by("-prescription_date")
        )
