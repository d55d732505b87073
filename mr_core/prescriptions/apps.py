# mr_core/prescriptions/apps.py
from django.apps import AppConfig


class PrescriptionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mr_core.prescriptions"
