# mr_core/orders/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.orders.models import MedicalOrder


@admin.register(MedicalOrder)
class MedicalOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "priority", "status", "patient_id", "doctor_id", "created_at")
    list_filter = ("type", "priority", "status")
    search_fields = ("id", "patient_id", "doctor_id")
    ordering = ("-created_at",)
    raw_id_fields = ("medical_record",)
