# mr_core/common/middleware.py
from __future__ import annotations

from django.utils.deprecation import MiddlewareMixin

from mr_core.common.api.exceptions import ensure_request_id


class RequestIdMiddleware(MiddlewareMixin):
    """
    Attaches a request id (honouring an inbound X-Request-Id) and echoes it on the response,
    so error envelopes and upstream logs can be correlated.
    """

    HEADER = "X-Request-Id"
    META_KEY = "HTTP_X_REQUEST_ID"

    def process_request(self, request):
        inbound = request.META.get(self.META_KEY)
        if inbound:
            request.request_id = inbound[:64]
        ensure_request_id(request)
        return None

    def process_response(self, request, response):
        rid = getattr(request, "request_id", None)
        if rid and self.HEADER not in response:
            response[self.HEADER] = rid
        return response
