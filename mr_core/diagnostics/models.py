# mr_core/diagnostics/models.py
from django.db import models
from django.db.models import Q

from mr_core.common.models import RecordModel
from mr_core.records.models import MedicalRecord


class DiagnosticType(models.TextChoices):
    PRIMARY = "PRIMARY", "Primary"
    SECONDARY = "SECONDARY", "Secondary"


class DiagnosticState(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"


class Diagnostic(RecordModel):
    patient_id = models.CharField(max_length=64, db_index=True)
    doctor_id = models.CharField(max_length=64, db_index=True)
    medical_record = models.ForeignKey(MedicalRecord, on_delete=models.PROTECT, related_name="diagnostics")

    # Snapshot of the catalog entry at creation time
    disease_code = models.CharField(max_length=32, db_index=True)
    disease_name = models.CharField(max_length=255)

    type = models.CharField(max_length=16, choices=DiagnosticType.choices, default=DiagnosticType.SECONDARY)
    title = models.CharField(max_length=255)
    description = models.TextField()
    diagnosis = models.TextField()
    treatment = models.TextField()
    observations = models.TextField(blank=True, default="")
    next_appointment = models.DateTimeField(null=True, blank=True)

    state = models.CharField(
        max_length=16,
        choices=DiagnosticState.choices,
        default=DiagnosticState.ACTIVE,
        db_index=True,
    )

    class Meta:
        db_table = "diagnostics_diagnostic"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["medical_record", "state"]),
            models.Index(fields=["patient_id", "created_at"]),
        ]
        constraints = [
            # At most one ACTIVE PRIMARY diagnostic per medical record.
            models.UniqueConstraint(
                fields=["medical_record"],
                condition=Q(type="PRIMARY", state="ACTIVE"),
                name="uq_active_primary_diagnostic_per_record",
            ),
        ]

    def __str__(self) -> str:
        return f"Diagnostic({self.disease_code}, {self.type}, {self.state})"
