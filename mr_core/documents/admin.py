# mr_core/documents/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.documents.models import Document


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "patient_id",
        "filename",
        "mime_type",
        "file_size",
        "category",
        "uploaded_by",
        "deleted_at",
        "created_at",
    )
    list_filter = ("category", "mime_type")
    search_fields = ("id", "patient_id", "filename", "encounter_id")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")
