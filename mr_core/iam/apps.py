# mr_core/iam/apps.py
from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mr_core.iam"

    def ready(self):
        # Registers the OpenAPI security scheme for ServiceJWTAuthentication
        import mr_core.iam.openapi  # noqa: F401
