# mr_core/diagnostics/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from mr_core.audit.services import AuditService
from mr_core.common.permissions import DiagnosticPermission
from mr_core.diagnostics.api.serializers import DiagnosticCreateSerializer, DiagnosticSerializer
from mr_core.diagnostics.models import Diagnostic
from mr_core.diagnostics.selectors import DiagnosticSelector
from mr_core.diagnostics.services import DiagnosticInput, DiagnosticService
from mr_core.records.selectors import MedicalRecordSelector

UPLOAD_FIELD = "documents"


class DiagnosticViewSet(viewsets.ViewSet):
    """
    POST /diagnostics/{patient_id}/ (multipart, up to 5 `documents`)
    GET  /diagnostics/medical-record/{medical_record_id}/
    """

    permission_classes = [DiagnosticPermission]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    serializer_class = DiagnosticSerializer
    queryset = Diagnostic.objects.none()

    @extend_schema(
        request={"multipart/form-data": OpenApiTypes.OBJECT, "application/json": DiagnosticCreateSerializer},
        responses={201: DiagnosticSerializer},
        tags=["Diagnostics"],
    )
    def create(self, request, patient_id=None):
        uploads = request.FILES.getlist(UPLOAD_FIELD)
        payload = {k: request.data.get(k) for k in request.data.keys() if k != UPLOAD_FIELD}

        ser = DiagnosticCreateSerializer(data=payload)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        diagnostic = DiagnosticService.create(
            data=DiagnosticInput(
                patient_id=str(patient_id),
                doctor_id=str(request.user.id),
                medical_record_id=str(data["medical_record_id"]),
                disease_code=data["disease_code"],
                title=data["title"],
                description=data["description"],
                treatment=data["treatment"],
                type=data.get("type"),
                diagnosis=data.get("diagnosis", ""),
                observations=data.get("observations", ""),
                next_appointment=data.get("next_appointment"),
            ),
            uploads=uploads,
            auth_token=request.META.get("HTTP_AUTHORIZATION"),
        )

        AuditService.log_for_request(
            request,
            action="DIAGNOSIS_CREATE",
            entity="Diagnostics",
            entity_id=diagnostic.id,
            metadata={
                "patientId": str(patient_id),
                "documentIds": [str(d.id) for d in diagnostic.documents.all()],
            },
        )
        return Response(DiagnosticSerializer(diagnostic).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: DiagnosticSerializer(many=True)}, tags=["Diagnostics"])
    def by_medical_record(self, request, medical_record_id=None):
        try:
            record = MedicalRecordSelector.get_record(record_id=medical_record_id)
        except MedicalRecordSelector.NotFound:
            raise NotFound("Historia clínica no existe")

        qs = DiagnosticSelector.active_for_record(medical_record_id=record.id)
        return Response(DiagnosticSerializer(qs, many=True).data, status=status.HTTP_200_OK)
