# mr_core/iam/tokens.py
from __future__ import annotations

from rest_framework_simplejwt.models import TokenUser
from rest_framework_simplejwt.settings import api_settings


class ServiceUser(TokenUser):
    """
    Request user built from the upstream auth service's token claims.
    Nothing is looked up locally: `id` and `role` come straight from the JWT.
    """

    @property
    def id(self) -> str:
        return str(self.token[api_settings.USER_ID_CLAIM])

    @property
    def pk(self) -> str:
        return self.id

    @property
    def role(self) -> str:
        return str(self.token.get("role", "") or "").upper()

    @property
    def roles(self) -> list[str]:
        return list(self.token.get("roles", []) or [])

    def __str__(self) -> str:
        return f"ServiceUser {self.id} ({self.role or '-'})"
