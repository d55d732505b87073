# mr_core/lab/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.lab.models import LabResult


@admin.register(LabResult)
class LabResultAdmin(admin.ModelAdmin):
    list_display = ("id", "test_type", "lab_name", "test_date", "medical_record")
    search_fields = ("id", "test_type", "lab_name")
    ordering = ("-test_date",)
    raw_id_fields = ("medical_record",)
