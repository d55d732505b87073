# mr_core/diseases/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.diseases.models import DiseaseCatalog


@admin.register(DiseaseCatalog)
class DiseaseCatalogAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "is_active", "created_at", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
