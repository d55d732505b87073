# mr_core/prescriptions/api/views.py
from __future__ import annotations

from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from mr_core.audit.services import AuditService
from mr_core.common.api.pagination import paginate
from mr_core.common.permissions import PrescriptionPermission
from mr_core.prescriptions.api.serializers import (
    PrescriptionCreateSerializer,
    PrescriptionSerializer,
    PrescriptionUpdateSerializer,
)
from mr_core.prescriptions.filters import PrescriptionFilter
from mr_core.prescriptions.models import Prescription
from mr_core.prescriptions.pdf import RenderedPdf, render_prescription_pdf
from mr_core.prescriptions.selectors import PrescriptionSelector
from mr_core.prescriptions.services import PrescriptionInput, PrescriptionService

NOT_FOUND = "Prescripción no encontrada"


def _pdf_response(rendered: RenderedPdf, *, status_code: int = status.HTTP_200_OK) -> HttpResponse:
    response = HttpResponse(rendered.content, content_type="application/pdf", status=status_code)
    response["Content-Disposition"] = f'inline; filename="{rendered.filename}"'
    return response


def _wants_pdf(request) -> bool:
    return str(request.query_params.get("pdf", "")).lower() in ("true", "1")


class PrescriptionViewSet(viewsets.ViewSet):
    permission_classes = [PrescriptionPermission]
    serializer_class = PrescriptionSerializer
    queryset = Prescription.objects.none()

    def _get(self, pk) -> Prescription:
        try:
            return PrescriptionSelector.get_prescription(prescription_id=pk)
        except PrescriptionSelector.NotFound:
            raise NotFound(NOT_FOUND)

    @extend_schema(
        request=PrescriptionCreateSerializer,
        responses={201: PrescriptionSerializer},
        parameters=[OpenApiParameter(name="pdf", required=False, type=bool)],
        tags=["Prescriptions"],
    )
    def create(self, request):
        ser = PrescriptionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        auth_token = request.META.get("HTTP_AUTHORIZATION")

        prescription = PrescriptionService.create(
            data=PrescriptionInput(doctor_id=str(request.user.id), **data),
            auth_token=auth_token,
        )

        AuditService.log_for_request(
            request,
            action="PRESCRIPTION_CREATE",
            entity="Prescription",
            entity_id=prescription.id,
            metadata={
                "patientId": prescription.patient_id,
                "medicalRecordId": prescription.medical_record_id,
                "diagnosticId": prescription.diagnostic_id,
                "medication": prescription.medication,
            },
        )

        prescription = PrescriptionSelector.get_prescription(prescription_id=prescription.id)
        if _wants_pdf(request):
            rendered = render_prescription_pdf(prescription, auth_token=auth_token)
            return _pdf_response(rendered, status_code=status.HTTP_201_CREATED)
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="medical_record_id", required=False, type=str),
            OpenApiParameter(name="medication", required=False, type=str),
            OpenApiParameter(name="patient_id", required=False, type=str),
            OpenApiParameter(name="doctor_id", required=False, type=str),
        ],
        responses={200: PrescriptionSerializer(many=True)},
        tags=["Prescriptions"],
    )
    def list(self, request):
        f = PrescriptionFilter(request.query_params, queryset=PrescriptionSelector.list_prescriptions())
        if not f.is_valid():
            raise ValidationError(f.errors)
        return paginate(request, f.qs, PrescriptionSerializer)

    @extend_schema(responses={200: PrescriptionSerializer}, tags=["Prescriptions"])
    def retrieve(self, request, pk=None):
        return Response(PrescriptionSerializer(self._get(pk)).data, status=status.HTTP_200_OK)

    @extend_schema(request=PrescriptionUpdateSerializer, responses={200: PrescriptionSerializer}, tags=["Prescriptions"])
    def update(self, request, pk=None):
        prescription = self._get(pk)
        ser = PrescriptionUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        prescription = PrescriptionService.update(prescription=prescription, changes=ser.validated_data)
        AuditService.log_for_request(
            request,
            action="PRESCRIPTION_UPDATE",
            entity="Prescription",
            entity_id=prescription.id,
            metadata={"fields": sorted(ser.validated_data.keys())},
        )
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=["Prescriptions"])
    def destroy(self, request, pk=None):
        prescription = self._get(pk)
        prescription_id, patient_id = prescription.id, prescription.patient_id
        PrescriptionService.delete(prescription=prescription)

        AuditService.log_for_request(
            request,
            action="PRESCRIPTION_DELETE",
            entity="Prescription",
            entity_id=prescription_id,
            metadata={"patientId": patient_id},
        )
        return Response({"message": "Prescripción eliminada exitosamente"}, status=status.HTTP_200_OK)

    @extend_schema(
        responses={(200, "application/pdf"): OpenApiResponse(response=OpenApiTypes.BINARY)},
        tags=["Prescriptions"],
    )
    @action(detail=True, methods=["get"], url_path="pdf")
    def pdf(self, request, pk=None):
        rendered = render_prescription_pdf(self._get(pk), auth_token=request.META.get("HTTP_AUTHORIZATION"))
        return _pdf_response(rendered)

    @extend_schema(responses={200: PrescriptionSerializer(many=True)}, tags=["Prescriptions"])
    @action(detail=False, methods=["get"], url_path=r"patient/(?P<patient_id>[^/]+)")
    def by_patient(self, request, patient_id=None):
        return paginate(request, PrescriptionSelector.list_for_patient(patient_id=patient_id), PrescriptionSerializer)
