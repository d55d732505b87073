# mr_core/prescriptions/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.prescriptions.models import Prescription


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ("id", "patient_id", "doctor_id", "medication", "dosage", "duration", "prescription_date")
    search_fields = ("id", "patient_id", "doctor_id", "medication")
    list_filter = ("duration",)
    ordering = ("-prescription_date",)
    raw_id_fields = ("medical_record", "diagnostic")
