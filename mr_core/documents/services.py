# mr_core/documents/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.core.files.uploadedfile import UploadedFile
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from mr_core.common.api.exceptions import RecordPatientMismatch
from mr_core.common.ids import parse_uuid
from mr_core.common.permissions import is_admin
from mr_core.diagnostics.models import Diagnostic
from mr_core.documents.models import Document, DocumentCategory
from mr_core.documents.staging import DOCUMENTS_DIR, FileStaging
from mr_core.documents.uploads import UploadRules, validate_uploads
from mr_core.integrations.guards import ensure_patient
from mr_core.records.models import MedicalRecord

logger = logging.getLogger(__name__)


class DocumentService:
    @staticmethod
    def upload(
        *,
        upload: Optional[UploadedFile],
        patient_id: str,
        encounter_id: str,
        uploaded_by: str,
        medical_record_id=None,
        diagnostic_id=None,
        description: str = "",
        category: str = DocumentCategory.GENERAL,
        tags: Optional[list[str]] = None,
        auth_token: Optional[str] = None,
    ) -> Document:
        if upload is None:
            raise ValidationError({"detail": "Archivo requerido en campo 'document'"})
        validate_uploads([upload], UploadRules.from_settings(max_files=1))

        ensure_patient(patient_id, auth_token)

        record = None
        if medical_record_id:
            record = MedicalRecord.objects.filter(id=parse_uuid(medical_record_id)).first()
            if record is None:
                raise NotFound("Historia clínica no existe")

        diagnostic = None
        if diagnostic_id:
            diagnostic = Diagnostic.objects.filter(id=parse_uuid(diagnostic_id)).first()
            if diagnostic is None:
                raise NotFound("Diagnóstico no existe")

        if record is not None and record.patient_id != str(patient_id):
            raise RecordPatientMismatch()
        if diagnostic is not None:
            if diagnostic.patient_id != str(patient_id):
                raise RecordPatientMismatch()
            if record is not None and diagnostic.medical_record_id != record.id:
                raise ValidationError({"detail": "El diagnóstico no pertenece a esta historia clínica"})

        with FileStaging(DOCUMENTS_DIR) as staging:
            staged = staging.stage(upload, owner_id=patient_id)
            with transaction.atomic():
                doc = Document.objects.create(
                    patient_id=str(patient_id),
                    encounter_id=str(encounter_id),
                    medical_record=record,
                    diagnostic=diagnostic,
                    filename=staged.original_name,
                    store_filename=staged.stored_name,
                    file_path=staged.path,
                    mime_type=staged.mime_type,
                    file_size=staged.size,
                    file_type=staged.file_type,
                    category=category if category in DocumentCategory.values else DocumentCategory.GENERAL,
                    description=description or "",
                    tags=list(tags or []),
                    uploaded_by=str(uploaded_by),
                )
            staging.commit()

        return doc

    @staticmethod
    @transaction.atomic
    def soft_delete(*, document: Document, user) -> Document:
        """Only the uploader or an administrator may delete; the file stays on disk."""
        if document.uploaded_by != str(getattr(user, "id", "")) and not is_admin(user):
            raise PermissionDenied("No autorizado")

        document.deleted_at = timezone.now()
        document.save(update_fields=["deleted_at", "updated_at"])
        logger.info("Document %s soft-deleted by %s", document.id, getattr(user, "id", None))
        return document
