# mr_core/diagnostics/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.diagnostics.models import Diagnostic
from mr_core.documents.models import Document


class DocumentInline(admin.TabularInline):
    model = Document
    extra = 0
    fields = ("id", "filename", "mime_type", "file_size", "category", "deleted_at", "created_at")
    readonly_fields = ("id", "created_at")


@admin.register(Diagnostic)
class DiagnosticAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "patient_id",
        "doctor_id",
        "medical_record",
        "disease_code",
        "type",
        "state",
        "created_at",
    )
    list_filter = ("type", "state")
    search_fields = ("id", "patient_id", "doctor_id", "disease_code", "disease_name")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")
    list_select_related = ("medical_record",)
    inlines = [DocumentInline]
