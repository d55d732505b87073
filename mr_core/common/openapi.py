# mr_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter


class RecordsAutoSchema(AutoSchema):
    """
    Global OpenAPI tweak: documents the optional X-Request-Id correlation header
    on every operation (echoed back and included in error envelopes).
    """

    REQUEST_ID_HEADER = OpenApiParameter(
        name="X-Request-Id",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.HEADER,
        required=False,
        description="Optional correlation id; echoed back and included in error envelopes.",
    )

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])
        if not any(p.name.lower() == "x-request-id" for p in params):
            params.append(self.REQUEST_ID_HEADER)
        return params
