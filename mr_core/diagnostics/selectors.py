# mr_core/diagnostics/selectors.py
from __future__ import annotations

from django.db.models import Prefetch, QuerySet

from mr_core.common.ids import parse_uuid
from mr_core.diagnostics.models import Diagnostic, DiagnosticState, DiagnosticType
from mr_core.documents.models import Document


def _with_documents(qs: QuerySet[Diagnostic]) -> QuerySet[Diagnostic]:
    return qs.prefetch_related(Prefetch("documents", queryset=Document.objects.alive().order_by("created_at")))


class DiagnosticSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_diagnostic(*, diagnostic_id) -> Diagnostic:
        pk = parse_uuid(diagnostic_id)
        if pk is None:
            raise DiagnosticSelector.NotFound()
        try:
            return _with_documents(Diagnostic.objects.all()).get(id=pk)
        except Diagnostic.DoesNotExist:
            raise DiagnosticSelector.NotFound()

    @staticmethod
    def active_for_record(*, medical_record_id) -> QuerySet[Diagnostic]:
        """ACTIVE diagnostics of a record, newest first, with their live documents."""
        return _with_documents(
            Diagnostic.objects.filter(medical_record_id=medical_record_id, state=DiagnosticState.ACTIVE)
        ).order_by("-created_at")

    @staticmethod
    def has_active_primary(*, medical_record_id, lock: bool = False) -> bool:
        qs = Diagnostic.objects.filter(
            medical_record_id=medical_record_id,
            type=DiagnosticType.PRIMARY,
            state=DiagnosticState.ACTIVE,
        )
        if lock:
            qs = qs.select_for_update()
        return qs.exists()
