# mr_core/common/api/exceptions.py

from __future__ import annotations

import logging
import uuid
from typing import Any

from django.conf import settings
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Safe to call from middleware and DRF exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    """
    Canonical error envelope of the service.
    Reusable from Django middleware (JsonResponse) and DRF (Response).
    """
    rid = ensure_request_id(request)
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": rid,
        }
    }


class ConflictError(APIException):
    """
    409 Conflict that still flows through the global exception handler.
    Use when the state of stored data blocks an action (duplicate keys, allergy conflicts).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicto."
    default_code = "conflict"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


class AllergyConflict(ConflictError):
    default_detail = "El paciente presenta alergia registrada a este medicamento"
    default_code = "allergy_conflict"


class BusinessRuleViolation(APIException):
    """
    400 for clinical prerequisites that are not met by the stored data.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Regla de negocio incumplida."
    default_code = "business_rule_violation"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


class PrimaryDiagnosisExists(BusinessRuleViolation):
    default_detail = "Ya existe un diagnóstico principal para esta historia clínica"
    default_code = "primary_diagnosis_exists"


class DiagnosisRequired(BusinessRuleViolation):
    default_detail = "Debe registrar al menos un diagnóstico antes de prescribir medicamentos"
    default_code = "diagnosis_required"


class PrimaryDiagnosisRequired(BusinessRuleViolation):
    default_detail = "Debe existir un diagnóstico principal antes de crear una prescripción"
    default_code = "primary_diagnosis_required"


class InvalidAppointment(BusinessRuleViolation):
    default_detail = "Cita inválida para este paciente"
    default_code = "invalid_appointment"


class RecordPatientMismatch(BusinessRuleViolation):
    default_detail = "La historia clínica no pertenece a este paciente"
    default_code = "record_patient_mismatch"


class RecordPhysicianMismatch(PermissionDenied):
    default_detail = "La historia clínica no pertenece a este médico"
    default_code = "record_physician_mismatch"


class FileTooLarge(APIException):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_detail = "El archivo excede 10MB"
    default_code = "file_too_large"


class UnsupportedFileType(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Tipo no permitido. Solo PDF/JPG/PNG."
    default_code = "unsupported_file_type"


class TooManyFiles(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Demasiados archivos."
    default_code = "too_many_files"


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return "not_authenticated"
    if isinstance(exc, RecordPhysicianMismatch):
        return exc.default_code
    if isinstance(exc, PermissionDenied):
        return "permission_denied"
    if isinstance(exc, (Http404, NotFound)):
        return "not_found"
    if isinstance(exc, APIException):
        return getattr(exc, "default_code", "api_error") or "api_error"
    if http_status >= 500:
        return "server_error"
    return "error"


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        rid = ensure_request_id(request)
        logger.exception("Unhandled error (request_id=%s)", rid, exc_info=exc)
        return Response(
            build_error_envelope(
                request=request,
                code="server_error",
                message="Error interno del servidor.",
                details=str(exc) if settings.DEBUG else None,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = response.status_code
    code = _code_for(exc, http_status)

    data = response.data

    # Message + details rules:
    # 1) {"detail": "..."} -> message=detail, details=None
    # 2) {"detail": "...", ...} -> message=detail, details={...without detail}
    # 3) otherwise -> message="Solicitud inválida.", details=data
    message = "Solicitud inválida."
    details = data

    if isinstance(data, dict) and "detail" in data:
        message = str(data.get("detail"))
        rest = {k: v for k, v in data.items() if k != "detail"}
        details = rest or None

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            message=message,
            details=details,
        ),
        status=http_status,
        headers=response.headers,
    )
