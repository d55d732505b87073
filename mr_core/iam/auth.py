# mr_core/iam/auth.py

from __future__ import annotations

from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.authentication import JWTStatelessUserAuthentication
from rest_framework_simplejwt.settings import api_settings


class ServiceJWTAuthentication(JWTStatelessUserAuthentication):
    """
    Authenticate with `Authorization: Bearer <access>` issued by the auth service.

    The token is verified with the shared secret; no local user table is consulted.
    A token without a usable subject id is a malformed request (400), not an auth failure.
    """

    def get_user(self, validated_token):
        claim = api_settings.USER_ID_CLAIM
        subject = validated_token.get(claim) if hasattr(validated_token, "get") else None
        if subject is None or str(subject).strip() == "":
            raise ValidationError({"detail": "El token no contiene el identificador del usuario."})
        return api_settings.TOKEN_USER_CLASS(validated_token)
