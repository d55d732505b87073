# mr_core/search/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from mr_core.audit.services import AuditService
from mr_core.common.api.pagination import LimitPagination
from mr_core.common.permissions import SearchPermission
from mr_core.diagnostics.models import Diagnostic
from mr_core.search.api.serializers import PatientSearchHitSerializer
from mr_core.search.selectors import PatientSearchSelector
from mr_core.search.services import PatientSearchService


class PatientSearchViewSet(viewsets.ViewSet):
    permission_classes = [SearchPermission]
    serializer_class = PatientSearchHitSerializer
    queryset = Diagnostic.objects.none()

    @extend_schema(
        parameters=[
            OpenApiParameter(name="diagnostic", required=False, type=str),
            OpenApiParameter(name="date_from", required=False, type=OpenApiTypes.DATE),
            OpenApiParameter(name="date_to", required=False, type=OpenApiTypes.DATE),
            OpenApiParameter(name="page", required=False, type=int),
            OpenApiParameter(name="limit", required=False, type=int),
        ],
        responses={200: PatientSearchHitSerializer(many=True)},
        tags=["Patient search"],
    )
    @action(detail=False, methods=["get"], url_path="advanced")
    def advanced(self, request):
        criteria = PatientSearchService.parse_criteria(request.query_params)
        qs = PatientSearchSelector.latest_diagnostic_per_patient(
            diagnostic=criteria.diagnostic,
            date_from=criteria.date_from,
            date_to=criteria.date_to,
        )

        paginator = LimitPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        hits = PatientSearchService.enrich(page, auth_token=request.META.get("HTTP_AUTHORIZATION"))

        AuditService.log_for_request(
            request,
            action="ADVANCED_SEARCH",
            entity="Patient",
            metadata={
                "filters": criteria.as_metadata(),
                "resultsCount": len(hits),
                "page": paginator.page.number,
                "limit": paginator.get_page_size(request),
            },
        )
        return paginator.get_paginated_response(PatientSearchHitSerializer(hits, many=True).data)
