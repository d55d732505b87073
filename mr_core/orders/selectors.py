# mr_core/orders/selectors.py
from __future__ import annotations

from typing import Optional

from django.db.models import QuerySet

from mr_core.common.ids import parse_uuid
from mr_core.orders.models import MedicalOrder, MedicalOrderStatus, MedicalOrderType


class MedicalOrderSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_order(*, order_id) -> MedicalOrder:
        pk = parse_uuid(order_id)
        if pk is None:
            raise MedicalOrderSelector.NotFound()
        try:
            return MedicalOrder.objects.get(id=pk)
        except MedicalOrder.DoesNotExist:
            raise MedicalOrderSelector.NotFound()

    @staticmethod
    def list_for_patient(
        *,
        patient_id: str,
        order_type: Optional[str] = None,
        order_status: Optional[str] = None,
    ) -> QuerySet[MedicalOrder]:
        """Unknown `type`/`status` values are ignored rather than rejected."""
        qs = MedicalOrder.objects.filter(patient_id=str(patient_id))

        t = (order_type or "").strip().upper()
        if t in MedicalOrderType.values:
            qs = qs.filter(type=t)

        s = (order_status or "").strip().upper()
        if s in MedicalOrderStatus.values:
            qs = qs.filter(status=s)

        return qs.order_by("-created_at")
