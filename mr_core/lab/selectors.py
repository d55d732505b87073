# mr_core/lab/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from mr_core.common.ids import parse_uuid
from mr_core.lab.models import LabResult


class LabResultSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_result(*, result_id) -> LabResult:
        pk = parse_uuid(result_id)
        if pk is None:
            raise LabResultSelector.NotFound()
        try:
            return LabResult.objects.get(id=pk)
        except LabResult.DoesNotExist:
            raise LabResultSelector.NotFound()

    @staticmethod
    def list_results() -> QuerySet[LabResult]:
        return LabResult.objects.all().order_by("-test_date")
