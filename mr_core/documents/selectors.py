# mr_core/documents/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from mr_core.common.ids import parse_uuid
from mr_core.documents.models import Document


class DocumentSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_document(*, document_id) -> Document:
        """Soft-deleted documents are treated as missing."""
        pk = parse_uuid(document_id)
        if pk is None:
            raise DocumentSelector.NotFound()
        try:
            return Document.objects.alive().get(id=pk)
        except Document.DoesNotExist:
            raise DocumentSelector.NotFound()

    @staticmethod
    def list_for_patient(
        *,
        patient_id: str,
        encounter_id: str | None = None,
        diagnostic_id=None,
        category: str | None = None,
        mime: str | None = None,
        q: str | None = None,
    ) -> QuerySet[Document]:
        qs = Document.objects.alive().filter(patient_id=str(patient_id)).order_by("-created_at")
        if encounter_id:
            qs = qs.filter(encounter_id=str(encounter_id))
        if diagnostic_id:
            qs = qs.filter(diagnostic_id=diagnostic_id)
        if category:
            qs = qs.filter(category=category)
        if mime:
            qs = qs.filter(mime_type__icontains=mime)
        if q:
            qs = qs.filter(filename__icontains=q)
        return qs
