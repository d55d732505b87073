# mr_core/orders/models.py
from django.db import models

from mr_core.common.models import RecordModel
from mr_core.records.models import MedicalRecord


class MedicalOrderType(models.TextChoices):
    LABORATORY = "LABORATORY", "Laboratory"
    RADIOLOGY = "RADIOLOGY", "Radiology"


class MedicalOrderPriority(models.TextChoices):
    ROUTINE = "ROUTINE", "Routine"
    URGENT = "URGENT", "Urgent"
    STAT = "STAT", "Stat"


class MedicalOrderStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    ORDERED = "ORDERED", "Ordered"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


ALLOWED_LAB_TESTS = ("Hemograma", "Química sanguínea", "Orina")
ALLOWED_RADIOLOGY_EXAMS = ("Rayos X", "TAC", "Resonancia", "Ecografía")


class MedicalOrder(RecordModel):
    patient_id = models.CharField(max_length=64, db_index=True)
    doctor_id = models.CharField(max_length=64, db_index=True)
    medical_record = models.ForeignKey(MedicalRecord, on_delete=models.PROTECT, related_name="medical_orders")

    type = models.CharField(max_length=16, choices=MedicalOrderType.choices)
    priority = models.CharField(
        max_length=16,
        choices=MedicalOrderPriority.choices,
        default=MedicalOrderPriority.ROUTINE,
    )
    status = models.CharField(
        max_length=16,
        choices=MedicalOrderStatus.choices,
        default=MedicalOrderStatus.ORDERED,
        db_index=True,
    )

    lab_tests = models.JSONField(default=list, blank=True)
    radiology_exams = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders_medical_order"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["patient_id", "type"]),
            models.Index(fields=["medical_record"]),
        ]

    def __str__(self) -> str:
        return f"MedicalOrder({self.type}, {self.status})"
