# mr_core/lab/models.py
from django.db import models

from mr_core.common.models import RecordModel
from mr_core.records.models import MedicalRecord


class LabResult(RecordModel):
    medical_record = models.ForeignKey(MedicalRecord, on_delete=models.CASCADE, related_name="lab_results")

    test_type = models.CharField(max_length=255, db_index=True)
    result = models.TextField()
    reference_range = models.CharField(max_length=255, blank=True, default="")
    lab_name = models.CharField(max_length=255, blank=True, default="")
    test_date = models.DateTimeField(db_index=True)
    comments = models.TextField(blank=True, default="")

    class Meta:
        db_table = "lab_result"
        ordering = ["-test_date"]
        indexes = [
            models.Index(fields=["medical_record", "test_date"]),
        ]

    def __str__(self) -> str:
        return f"LabResult({self.test_type}, {self.test_date:%Y-%m-%d})"
