# mr_core/records/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from mr_core.audit.services import AuditService
from mr_core.common.api.pagination import paginate
from mr_core.common.permissions import MedicalRecordPermission
from mr_core.records.api.serializers import (
    MedicalRecordCreateSerializer,
    MedicalRecordDetailSerializer,
    MedicalRecordSerializer,
    MedicalRecordUpdateSerializer,
)
from mr_core.records.filters import MedicalRecordFilter
from mr_core.records.models import MedicalRecord
from mr_core.records.selectors import MedicalRecordSelector
from mr_core.records.services import MedicalRecordService

NOT_FOUND = "Registro médico no encontrado"


class MedicalRecordViewSet(viewsets.ViewSet):
    """
    Thin API layer over MedicalRecordService (writes) and MedicalRecordSelector (reads).
    DELETE archives the record; nothing is removed.
    """

    permission_classes = [MedicalRecordPermission]
    serializer_class = MedicalRecordSerializer
    queryset = MedicalRecord.objects.none()

    def _get(self, pk) -> MedicalRecord:
        try:
            return MedicalRecordSelector.get_record(record_id=pk)
        except MedicalRecordSelector.NotFound:
            raise NotFound(NOT_FOUND)

    def _audit(self, request, action_code: str, record: MedicalRecord, **metadata) -> None:
        AuditService.log_for_request(
            request,
            action=action_code,
            entity="MedicalRecord",
            entity_id=record.id,
            metadata={"patientId": record.patient_id, **metadata},
        )

    @extend_schema(request=MedicalRecordCreateSerializer, responses={201: OpenApiTypes.OBJECT}, tags=["Medical records"])
    def create(self, request):
        ser = MedicalRecordCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        created = MedicalRecordService.create(
            physician_id=str(request.user.id),
            auth_token=request.META.get("HTTP_AUTHORIZATION"),
            **data,
        )
        self._audit(request, "MEDICAL_RECORD_CREATE", created.record, appointmentId=created.record.appointment_id)

        return Response(
            {
                "message": "Registro médico creado exitosamente",
                "data": MedicalRecordSerializer(created.record).data,
                "patient": created.patient,
                "appointment": created.appointment,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        parameters=[
            OpenApiParameter(name="patient_id", required=False, type=str),
            OpenApiParameter(name="physician_id", required=False, type=str),
            OpenApiParameter(name="status", required=False, type=str),
            OpenApiParameter(name="from_date", required=False, type=OpenApiTypes.DATE),
            OpenApiParameter(name="to_date", required=False, type=OpenApiTypes.DATE),
        ],
        responses={200: MedicalRecordSerializer(many=True)},
        tags=["Medical records"],
    )
    def list(self, request):
        f = MedicalRecordFilter(request.query_params, queryset=MedicalRecordSelector.list_records())
        if not f.is_valid():
            raise ValidationError(f.errors)
        return paginate(request, f.qs, MedicalRecordSerializer)

    @extend_schema(responses={200: MedicalRecordDetailSerializer}, tags=["Medical records"])
    def retrieve(self, request, pk=None):
        try:
            record = MedicalRecordSelector.get_record_detail(record_id=pk)
        except MedicalRecordSelector.NotFound:
            raise NotFound(NOT_FOUND)
        return Response(MedicalRecordDetailSerializer(record).data, status=status.HTTP_200_OK)

    @extend_schema(request=MedicalRecordUpdateSerializer, responses={200: MedicalRecordSerializer}, tags=["Medical records"])
    def update(self, request, pk=None):
        record = self._get(pk)
        ser = MedicalRecordUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        record = MedicalRecordService.update(record=record, changes=ser.validated_data)
        self._audit(request, "MEDICAL_RECORD_UPDATE", record, fields=sorted(ser.validated_data.keys()))
        return Response(MedicalRecordSerializer(record).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(responses={200: MedicalRecordSerializer}, tags=["Medical records"])
    def destroy(self, request, pk=None):
        record = MedicalRecordService.archive(record=self._get(pk))
        self._audit(request, "MEDICAL_RECORD_ARCHIVE", record)
        return Response(
            {"message": "Registro médico archivado", "data": MedicalRecordSerializer(record).data},
            status=status.HTTP_200_OK,
        )

    @extend_schema(responses={200: MedicalRecordSerializer(many=True)}, tags=["Medical records"])
    @action(detail=False, methods=["get"], url_path=r"by-patient/(?P<patient_id>[^/]+)")
    def by_patient(self, request, patient_id=None):
        return paginate(request, MedicalRecordSelector.list_by_patient(patient_id=patient_id), MedicalRecordSerializer)

    @extend_schema(responses={200: MedicalRecordDetailSerializer}, tags=["Medical records"])
    @action(detail=False, methods=["get"], url_path=r"by-appointment/(?P<appointment_id>[^/]+)")
    def by_appointment(self, request, appointment_id=None):
        try:
            record = MedicalRecordSelector.get_by_appointment(appointment_id=appointment_id)
        except MedicalRecordSelector.NotFound:
            raise NotFound(NOT_FOUND)
        return Response(MedicalRecordDetailSerializer(record).data, status=status.HTTP_200_OK)
