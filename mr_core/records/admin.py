# mr_core/records/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.diagnostics.models import Diagnostic
from mr_core.lab.models import LabResult
from mr_core.prescriptions.models import Prescription
from mr_core.records.models import MedicalRecord


class DiagnosticInline(admin.TabularInline):
    model = Diagnostic
    extra = 0
    fields = ("disease_code", "disease_name", "type", "state", "doctor_id", "created_at")
    readonly_fields = ("created_at",)


class PrescriptionInline(admin.TabularInline):
    model = Prescription
    extra = 0
    fields = ("medication", "dosage", "frequency", "duration", "prescription_date")
    raw_id_fields = ("diagnostic",)


class LabResultInline(admin.TabularInline):
    model = LabResult
    extra = 0
    fields = ("test_type", "result", "test_date")


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "patient_id", "physician_id", "appointment_id", "status", "date")
    list_filter = ("status",)
    search_fields = ("id", "patient_id", "physician_id", "appointment_id")
    ordering = ("-date",)
    inlines = [DiagnosticInline, PrescriptionInline, LabResultInline]
