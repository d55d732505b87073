# mr_core/documents/models.py
from django.db import models

from mr_core.common.models import RecordModel


class DocumentCategory(models.TextChoices):
    GENERAL = "GENERAL", "General"
    DIAGNOSTIC_ATTACHMENT = "DIAGNOSTIC_ATTACHMENT", "Diagnostic attachment"
    LAB = "LAB", "Lab"
    ADMIN = "ADMIN", "Admin"


class DocumentQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)


class Document(RecordModel):
    patient_id = models.CharField(max_length=64, db_index=True)
    medical_record = models.ForeignKey(
        "records.MedicalRecord",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="documents",
    )
    diagnostic = models.ForeignKey(
        "diagnostics.Diagnostic",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="documents",
    )
    encounter_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    filename = models.CharField(max_length=255)
    store_filename = models.CharField(max_length=255)
    # Relative to MEDIA_ROOT
    file_path = models.CharField(max_length=512)
    mime_type = models.CharField(max_length=100)
    file_size = models.PositiveBigIntegerField()
    file_type = models.CharField(max_length=16)

    category = models.CharField(max_length=32, choices=DocumentCategory.choices, default=DocumentCategory.GENERAL)
    description = models.TextField(blank=True, default="")
    tags = models.JSONField(default=list, blank=True)

    uploaded_by = models.CharField(max_length=64, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = DocumentQuerySet.as_manager()

    class Meta:
        db_table = "documents_document"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["patient_id", "created_at"]),
            models.Index(fields=["diagnostic"]),
        ]

    def __str__(self) -> str:
        return f"Document({self.filename}, {self.category})"
