# mr_core/records/models.py
from django.db import models
from django.utils import timezone

from mr_core.common.models import RecordModel


class MedicalRecordStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    ARCHIVED = "archived", "Archived"


class MedicalRecord(RecordModel):
    """
    Aggregate root of a clinical encounter. Diagnostics, prescriptions, lab results,
    orders and documents all hang off a record. Never hard-deleted: archived instead.
    """
    patient_id = models.CharField(max_length=64, db_index=True)
    physician_id = models.CharField(max_length=64, db_index=True)
    appointment_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    date = models.DateTimeField(default=timezone.now, db_index=True)
    symptoms = models.TextField()
    diagnosis = models.TextField(blank=True, default="")
    treatment = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=16,
        choices=MedicalRecordStatus.choices,
        default=MedicalRecordStatus.ACTIVE,
        db_index=True,
    )

    class Meta:
        db_table = "records_medical_record"
        ordering = ["-date"]
        indexes = [
            models.Index(fields=["patient_id", "status"]),
            models.Index(fields=["physician_id", "date"]),
        ]

    def __str__(self) -> str:
        return f"MedicalRecord({self.patient_id}, {self.status})"
