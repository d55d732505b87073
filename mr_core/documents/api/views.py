# mr_core/documents/api/views.py
from __future__ import annotations

from django.core.files.storage import FileSystemStorage
from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from mr_core.audit.services import AuditService
from mr_core.common.api.pagination import BoundedPagination, paginate
from mr_core.common.permissions import DocumentPermission
from mr_core.documents.api.serializers import (
    DocumentListQuerySerializer,
    DocumentSerializer,
    DocumentUploadSerializer,
)
from mr_core.documents.models import Document
from mr_core.documents.selectors import DocumentSelector
from mr_core.documents.services import DocumentService

UPLOAD_FIELD = "document"


class DocumentViewSet(viewsets.ViewSet):
    """
    POST   /documents/upload/                (multipart, one `document`)
    GET    /documents/patient/{patient_id}/
    GET    /documents/{id}/                  (download)
    DELETE /documents/{id}/                  (soft delete)
    """

    permission_classes = [DocumentPermission]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    serializer_class = DocumentSerializer
    queryset = Document.objects.none()

    def _get_or_404(self, pk) -> Document:
        try:
            return DocumentSelector.get_document(document_id=pk)
        except DocumentSelector.NotFound:
            raise NotFound("Documento no encontrado")

    @extend_schema(
        request={"multipart/form-data": OpenApiTypes.OBJECT},
        responses={201: DocumentSerializer},
        tags=["Documents"],
    )
    @action(detail=False, methods=["post"], url_path="upload")
    def upload(self, request):
        payload = {k: request.data.get(k) for k in request.data.keys() if k not in (UPLOAD_FIELD, "tags")}
        tags = request.data.getlist("tags") if hasattr(request.data, "getlist") else request.data.get("tags")
        if isinstance(tags, list) and len(tags) == 1:
            tags = tags[0]
        if tags:
            payload["tags"] = tags

        ser = DocumentUploadSerializer(data=payload)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        doc = DocumentService.upload(
            upload=request.FILES.get(UPLOAD_FIELD),
            patient_id=data["patient_id"],
            encounter_id=data["encounter_id"],
            uploaded_by=str(request.user.id),
            medical_record_id=data.get("medical_record_id"),
            diagnostic_id=data.get("diagnostic_id"),
            description=data.get("description", ""),
            category=data["category"],
            tags=data.get("tags"),
            auth_token=request.META.get("HTTP_AUTHORIZATION"),
        )

        AuditService.log_for_request(
            request,
            action="DOCUMENT_UPLOAD",
            entity="Document",
            entity_id=doc.id,
            metadata={
                "patientId": doc.patient_id,
                "medicalRecordId": doc.medical_record_id,
                "diagnosticId": doc.diagnostic_id,
                "filename": doc.filename,
            },
        )
        return Response(DocumentSerializer(doc).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="encounter_id", required=False, type=str),
            OpenApiParameter(name="diagnostic_id", required=False, type=str),
            OpenApiParameter(name="category", required=False, type=str),
            OpenApiParameter(name="mime", required=False, type=str),
            OpenApiParameter(name="q", required=False, type=str),
            OpenApiParameter(name="page", required=False, type=int),
            OpenApiParameter(name="page_size", required=False, type=int),
        ],
        responses={200: DocumentSerializer(many=True)},
        tags=["Documents"],
    )
    @action(detail=False, methods=["get"], url_path=r"patient/(?P<patient_id>[^/]+)")
    def by_patient(self, request, patient_id=None):
        q = DocumentListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        qs = DocumentSelector.list_for_patient(patient_id=patient_id, **q.validated_data)
        return paginate(request, qs, DocumentSerializer, paginator=BoundedPagination())

    @extend_schema(
        responses={200: OpenApiResponse(response=OpenApiTypes.BINARY, description="Stored file")},
        tags=["Documents"],
    )
    def retrieve(self, request, pk=None):
        doc = self._get_or_404(pk)

        storage = FileSystemStorage()
        if not doc.file_path or not storage.exists(doc.file_path):
            raise NotFound("Archivo no existe")

        response = FileResponse(
            storage.open(doc.file_path, "rb"),
            as_attachment=True,
            filename=doc.filename,
            content_type=doc.mime_type or "application/octet-stream",
        )
        response["Content-Length"] = str(storage.size(doc.file_path))
        return response

    @extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=["Documents"])
    def destroy(self, request, pk=None):
        doc = self._get_or_404(pk)
        DocumentService.soft_delete(document=doc, user=request.user)

        AuditService.log_for_request(
            request,
            action="DOCUMENT_DELETE",
            entity="Document",
            entity_id=doc.id,
            metadata={"patientId": doc.patient_id},
        )
        return Response({"message": "Documento eliminado"}, status=status.HTTP_200_OK)
