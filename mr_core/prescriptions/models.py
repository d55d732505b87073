# mr_core/prescriptions/models.py
from django.db import models
from django.utils import timezone

from mr_core.common.models import RecordModel
from mr_core.diagnostics.models import Diagnostic
from mr_core.records.models import MedicalRecord


class Prescription(RecordModel):
    medical_record = models.ForeignKey(MedicalRecord, on_delete=models.PROTECT, related_name="prescriptions")
    patient_id = models.CharField(max_length=64, db_index=True)
    doctor_id = models.CharField(max_length=64, db_index=True)
    diagnostic = models.ForeignKey(
        Diagnostic,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="prescriptions",
    )

    medication = models.CharField(max_length=255)
    dosage = models.CharField(max_length=255)
    frequency = models.CharField(max_length=255)
    duration = models.CharField(max_length=100)
    instructions = models.TextField(blank=True, default="")
    expiration_date = models.DateField(null=True, blank=True)
    prescription_date = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "prescriptions_prescription"
        ordering = ["-prescription_date"]
        indexes = [
            models.Index(fields=["patient_id", "prescription_date"]),
            models.Index(fields=["medical_record"]),
        ]

    def __str__(self) -> str:
        return f"Prescription({self.medication}, {self.patient_id})"
