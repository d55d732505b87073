# mr_core/diagnostics/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from django.core.files.uploadedfile import UploadedFile
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from mr_core.common.api.exceptions import PrimaryDiagnosisExists, RecordPatientMismatch, RecordPhysicianMismatch
from mr_core.diagnostics.models import Diagnostic, DiagnosticState, DiagnosticType
from mr_core.diagnostics.selectors import DiagnosticSelector
from mr_core.diseases.selectors import DiseaseSelector
from mr_core.documents.models import Document, DocumentCategory
from mr_core.documents.staging import DIAGNOSTICS_DIR, FileStaging
from mr_core.documents.uploads import UploadRules, validate_uploads
from mr_core.integrations.guards import ensure_patient_and_doctor
from mr_core.records.models import MedicalRecord
from mr_core.records.selectors import MedicalRecordSelector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticInput:
    patient_id: str
    doctor_id: str
    medical_record_id: str
    disease_code: str
    title: str
    description: str
    treatment: str
    type: str = DiagnosticType.SECONDARY
    diagnosis: str = ""
    observations: str = ""
    next_appointment: Optional[datetime] = None


class DiagnosticService:
    """
    Creates a diagnostic together with its attached documents.

    Validation runs first (identities, record ownership, catalog, primary uniqueness);
    then files are staged and the diagnostic + document rows are written in one
    transaction. On any failure the rows roll back and the staged files are removed.
    """

    @staticmethod
    def _load_record(data: DiagnosticInput) -> MedicalRecord:
        try:
            record = MedicalRecordSelector.get_record(record_id=data.medical_record_id)
        except MedicalRecordSelector.NotFound:
            raise NotFound("Historia clínica no existe")

        if record.patient_id != str(data.patient_id):
            raise RecordPatientMismatch()
        if record.physician_id != str(data.doctor_id):
            raise RecordPhysicianMismatch()
        return record

    @staticmethod
    def _ensure_no_active_primary(record: MedicalRecord, *, lock: bool = False) -> None:
        if DiagnosticSelector.has_active_primary(medical_record_id=record.id, lock=lock):
            raise PrimaryDiagnosisExists()

    @staticmethod
    def create(
        *,
        data: DiagnosticInput,
        uploads: Sequence[UploadedFile] = (),
        auth_token: Optional[str] = None,
        rules: Optional[UploadRules] = None,
    ) -> Diagnostic:
        rules = rules or UploadRules.from_settings()
        files = validate_uploads(uploads, rules)

        missing = [
            name
            for name in ("medical_record_id", "disease_code", "title", "description", "treatment")
            if not str(getattr(data, name) or "").strip()
        ]
        if missing:
            raise ValidationError({"detail": "Faltan campos obligatorios", "missing": missing})

        ensure_patient_and_doctor(data.patient_id, data.doctor_id, auth_token)

        record = DiagnosticService._load_record(data)

        disease = DiseaseSelector.get_active_by_code(code=data.disease_code)
        if disease is None:
            raise ValidationError({"detail": "Código de enfermedad inválido o inactivo", "disease_code": data.disease_code})

        diag_type = (data.type or DiagnosticType.SECONDARY).upper()
        if diag_type == DiagnosticType.PRIMARY:
            DiagnosticService._ensure_no_active_primary(record)

        diagnosis_text = (data.diagnosis or "").strip() or f"{disease.code} - {disease.name}"

        with FileStaging(DIAGNOSTICS_DIR) as staging:
            staged = [staging.stage(f, owner_id=data.patient_id) for f in files]

            try:
                with transaction.atomic():
                    if diag_type == DiagnosticType.PRIMARY:
                        DiagnosticService._ensure_no_active_primary(record, lock=True)

                    diagnostic = Diagnostic.objects.create(
                        patient_id=str(data.patient_id),
                        doctor_id=str(data.doctor_id),
                        medical_record=record,
                        disease_code=disease.code,
                        disease_name=disease.name,
                        type=diag_type,
                        title=data.title.strip(),
                        description=data.description,
                        diagnosis=diagnosis_text,
                        treatment=data.treatment,
                        observations=data.observations or "",
                        next_appointment=data.next_appointment,
                        state=DiagnosticState.ACTIVE,
                    )

                    Document.objects.bulk_create(
                        [
                            Document(
                                patient_id=str(data.patient_id),
                                medical_record=record,
                                diagnostic=diagnostic,
                                filename=s.original_name,
                                store_filename=s.stored_name,
                                file_path=s.path,
                                mime_type=s.mime_type,
                                file_size=s.size,
                                file_type=s.file_type,
                                category=DocumentCategory.DIAGNOSTIC_ATTACHMENT,
                                uploaded_by=str(data.doctor_id),
                            )
                            for s in staged
                        ]
                    )
            except IntegrityError as e:
                # Lost the race against a concurrent PRIMARY insert
                if diag_type == DiagnosticType.PRIMARY:
                    raise PrimaryDiagnosisExists() from e
                raise

            staging.commit()

        logger.info(
            "Diagnostic %s created for record %s with %d document(s)",
            diagnostic.id,
            record.id,
            len(staged),
        )
        return DiagnosticSelector.get_diagnostic(diagnostic_id=diagnostic.id)
