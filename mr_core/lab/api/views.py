# mr_core/lab/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from mr_core.audit.services import AuditService
from mr_core.common.api.pagination import paginate
from mr_core.common.permissions import LabResultPermission
from mr_core.lab.api.serializers import LabResultCreateSerializer, LabResultSerializer, LabResultUpdateSerializer
from mr_core.lab.filters import LabResultFilter
from mr_core.lab.models import LabResult
from mr_core.lab.selectors import LabResultSelector
from mr_core.lab.services import LabResultService

NOT_FOUND = "Resultado de laboratorio no encontrado"


class LabResultViewSet(viewsets.ViewSet):
    permission_classes = [LabResultPermission]
    serializer_class = LabResultSerializer
    queryset = LabResult.objects.none()

    def _get(self, pk) -> LabResult:
        try:
            return LabResultSelector.get_result(result_id=pk)
        except LabResultSelector.NotFound:
            raise NotFound(NOT_FOUND)

    def _audit(self, request, action_code: str, lab_result: LabResult, result_id=None) -> None:
        AuditService.log_for_request(
            request,
            action=action_code,
            entity="LabResult",
            entity_id=result_id or lab_result.id,
            metadata={"medicalRecordId": lab_result.medical_record_id, "testType": lab_result.test_type},
        )

    @extend_schema(request=LabResultCreateSerializer, responses={201: LabResultSerializer}, tags=["Lab results"])
    def create(self, request):
        ser = LabResultCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        lab_result = LabResultService.create(**ser.validated_data)
        self._audit(request, "LAB_RESULT_CREATE", lab_result)
        return Response(LabResultSerializer(lab_result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="medical_record_id", required=False, type=str),
            OpenApiParameter(name="test_type", required=False, type=str),
            OpenApiParameter(name="from_date", required=False, type=OpenApiTypes.DATE),
            OpenApiParameter(name="to_date", required=False, type=OpenApiTypes.DATE),
        ],
        responses={200: LabResultSerializer(many=True)},
        tags=["Lab results"],
    )
    def list(self, request):
        f = LabResultFilter(request.query_params, queryset=LabResultSelector.list_results())
        if not f.is_valid():
            raise ValidationError(f.errors)
        return paginate(request, f.qs, LabResultSerializer)

    @extend_schema(responses={200: LabResultSerializer}, tags=["Lab results"])
    def retrieve(self, request, pk=None):
        return Response(LabResultSerializer(self._get(pk)).data, status=status.HTTP_200_OK)

    @extend_schema(request=LabResultUpdateSerializer, responses={200: LabResultSerializer}, tags=["Lab results"])
    def update(self, request, pk=None):
        lab_result = self._get(pk)
        ser = LabResultUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        lab_result = LabResultService.update(lab_result=lab_result, changes=ser.validated_data)
        self._audit(request, "LAB_RESULT_UPDATE", lab_result)
        return Response(LabResultSerializer(lab_result).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=["Lab results"])
    def destroy(self, request, pk=None):
        lab_result = self._get(pk)
        result_id = lab_result.id
        LabResultService.delete(lab_result=lab_result)

        self._audit(request, "LAB_RESULT_DELETE", lab_result, result_id=result_id)
        return Response({"message": "Resultado de laboratorio eliminado exitosamente"}, status=status.HTTP_200_OK)
