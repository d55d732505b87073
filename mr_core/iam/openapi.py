# mr_core/iam/openapi.py
from drf_spectacular.extensions import OpenApiAuthenticationExtension


class ServiceJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "mr_core.iam.auth.ServiceJWTAuthentication"
    name = "BearerJWT"
    priority = 1

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Access token issued by the auth service, sent as `Authorization: Bearer <token>`. "
                "Claims used: `id` (subject) and `role` (MEDICO, ENFERMERO, ADMINISTRADOR)."
            ),
        }
