# mr_core/diseases/selectors.py
from __future__ import annotations

from django.db.models import Q, QuerySet

from mr_core.common.ids import parse_uuid
from mr_core.diseases.models import DiseaseCatalog

MAX_LIST_LIMIT = 50
DEFAULT_LIST_LIMIT = 20


class DiseaseSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_by_id(*, disease_id) -> DiseaseCatalog:
        pk = parse_uuid(disease_id)
        if pk is None:
            raise DiseaseSelector.NotFound()
        try:
            return DiseaseCatalog.objects.get(id=pk)
        except DiseaseCatalog.DoesNotExist:
            raise DiseaseSelector.NotFound()

    @staticmethod
    def get_by_code(*, code: str) -> DiseaseCatalog:
        """Lookup by business key; inactive entries are returned too."""
        try:
            return DiseaseCatalog.objects.get(code=(code or "").strip())
        except DiseaseCatalog.DoesNotExist:
            raise DiseaseSelector.NotFound()

    @staticmethod
    def get_active_by_code(*, code: str) -> DiseaseCatalog | None:
        return DiseaseCatalog.objects.filter(code=(code or "").strip(), is_active=True).first()

    @staticmethod
    def search(*, q: str | None = None, is_active: bool | None = True, limit: int = DEFAULT_LIST_LIMIT) -> QuerySet[DiseaseCatalog]:
        qs = DiseaseCatalog.objects.all().order_by("name")
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        if q:
            qs = qs.filter(Q(code__icontains=q) | Q(name__icontains=q))
        limit = max(1, min(int(limit or DEFAULT_LIST_LIMIT), MAX_LIST_LIMIT))
        return qs[:limit]
