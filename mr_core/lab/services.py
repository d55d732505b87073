# mr_core/lab/services.py
from __future__ import annotations

from datetime import datetime

from django.db import transaction
from rest_framework.exceptions import NotFound

from mr_core.lab.models import LabResult
from mr_core.records.selectors import MedicalRecordSelector

UPDATABLE_FIELDS = ("test_type", "result", "reference_range", "lab_name", "test_date", "comments")


class LabResultService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        medical_record_id,
        test_type: str,
        result: str,
        test_date: datetime,
        reference_range: str = "",
        lab_name: str = "",
        comments: str = "",
    ) -> LabResult:
        try:
            record = MedicalRecordSelector.get_record(record_id=medical_record_id)
        except MedicalRecordSelector.NotFound:
            raise NotFound("Registro médico no encontrado")

        return LabResult.objects.create(
            medical_record=record,
            test_type=test_type,
            result=result,
            test_date=test_date,
            reference_range=reference_range or "",
            lab_name=lab_name or "",
            comments=comments or "",
        )

    @staticmethod
    @transaction.atomic
    def update(*, lab_result: LabResult, changes: dict) -> LabResult:
        fields = [f for f in UPDATABLE_FIELDS if f in changes and changes[f] is not None]
        for f in fields:
            setattr(lab_result, f, changes[f])
        if fields:
            lab_result.save(update_fields=[*fields, "updated_at"])
        return lab_result

    @staticmethod
    @transaction.atomic
    def delete(*, lab_result: LabResult) -> None:
        lab_result.delete()
