# mr_core/diseases/apps.py
from django.apps import AppConfig


class DiseasesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mr_core.diseases"
