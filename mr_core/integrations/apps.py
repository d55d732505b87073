# mr_core/integrations/apps.py
from django.apps import AppConfig


class IntegrationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mr_core.integrations"

    def ready(self) -> None:
        from django.test.signals import setting_changed

        from mr_core.integrations.registry import on_setting_changed

        setting_changed.connect(on_setting_changed, dispatch_uid="integrations.reset_on_setting_changed")
