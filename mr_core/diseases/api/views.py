# mr_core/diseases/api/views.py
from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from mr_core.audit.services import AuditService
from mr_core.common.permissions import DiseaseCatalogPermission
from mr_core.diseases.api.serializers import (
    DiseaseCreateSerializer,
    DiseaseListQuerySerializer,
    DiseaseSerializer,
    DiseaseUpdateSerializer,
)
from mr_core.diseases.models import DiseaseCatalog
from mr_core.diseases.selectors import DiseaseSelector
from mr_core.diseases.services import DiseaseService

NOT_FOUND = "Enfermedad no encontrada"


class DiseaseCatalogViewSet(viewsets.ViewSet):
    """
    Disease catalog (code + name). Reads for every clinical role, writes for administrators.
    """

    permission_classes = [DiseaseCatalogPermission]
    serializer_class = DiseaseSerializer
    queryset = DiseaseCatalog.objects.none()

    def _get(self, pk) -> DiseaseCatalog:
        try:
            return DiseaseSelector.get_by_id(disease_id=pk)
        except DiseaseSelector.NotFound:
            raise NotFound(NOT_FOUND)

    def _audit(self, request, action_code: str, disease: DiseaseCatalog) -> None:
        AuditService.log_for_request(
            request,
            action=action_code,
            entity="DiseaseCatalog",
            entity_id=disease.id,
            metadata={"code": disease.code},
        )

    @extend_schema(
        responses={200: DiseaseSerializer(many=True)},
        tags=["Diseases"],
        parameters=[
            OpenApiParameter(name="q", location=OpenApiParameter.QUERY, required=False, type=str),
            OpenApiParameter(name="is_active", location=OpenApiParameter.QUERY, required=False, type=bool),
            OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, required=False, type=int),
        ],
    )
    def list(self, request):
        query = DiseaseListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        is_active = params.get("is_active")
        qs = DiseaseSelector.search(
            q=(params.get("q") or "").strip() or None,
            is_active=True if is_active is None else is_active,
            limit=params.get("limit") or 20,
        )
        return Response(DiseaseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: DiseaseSerializer}, tags=["Diseases"])
    def retrieve(self, request, pk=None):
        return Response(DiseaseSerializer(self._get(pk)).data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: DiseaseSerializer}, tags=["Diseases"])
    @action(detail=False, methods=["get"], url_path=r"code/(?P<code>[^/]+)")
    def by_code(self, request, code=None):
        try:
            disease = DiseaseSelector.get_by_code(code=code)
        except DiseaseSelector.NotFound:
            raise NotFound(NOT_FOUND)
        return Response(DiseaseSerializer(disease).data, status=status.HTTP_200_OK)

    @extend_schema(request=DiseaseCreateSerializer, responses={201: DiseaseSerializer}, tags=["Diseases"])
    def create(self, request):
        ser = DiseaseCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        disease = DiseaseService.create(**ser.validated_data)
        self._audit(request, "DISEASE_CREATE", disease)
        return Response(DiseaseSerializer(disease).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=DiseaseUpdateSerializer, responses={200: DiseaseSerializer}, tags=["Diseases"])
    def update(self, request, pk=None):
        disease = self._get(pk)
        ser = DiseaseUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        disease = DiseaseService.update(disease=disease, changes=ser.validated_data)
        self._audit(request, "DISEASE_UPDATE", disease)
        return Response(DiseaseSerializer(disease).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(responses={200: DiseaseSerializer}, tags=["Diseases"])
    def destroy(self, request, pk=None):
        disease, changed = DiseaseService.deactivate(disease=self._get(pk))
        if not changed:
            return Response(
                {"message": "La enfermedad ya estaba inactiva", "data": DiseaseSerializer(disease).data},
                status=status.HTTP_200_OK,
            )

        self._audit(request, "DISEASE_DELETE", disease)
        return Response(
            {"message": "Enfermedad marcada como inactiva", "data": DiseaseSerializer(disease).data},
            status=status.HTTP_200_OK,
        )
