# mr_core/orders/services.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.db import transaction
from rest_framework.exceptions import ValidationError

from mr_core.common.ids import parse_uuid
from mr_core.integrations.guards import ensure_doctor, ensure_patient
from mr_core.orders.models import (
    ALLOWED_LAB_TESTS,
    ALLOWED_RADIOLOGY_EXAMS,
    MedicalOrder,
    MedicalOrderPriority,
    MedicalOrderStatus,
    MedicalOrderType,
)
from mr_core.records.models import MedicalRecord

logger = logging.getLogger(__name__)

# Per order type: (allowed items, "none selected" message, "invalid items" message)
ORDER_RULES = {
    MedicalOrderType.LABORATORY: (
        ALLOWED_LAB_TESTS,
        "Debe seleccionar al menos un examen de laboratorio",
        "Exámenes de laboratorio inválidos",
    ),
    MedicalOrderType.RADIOLOGY: (
        ALLOWED_RADIOLOGY_EXAMS,
        "Debe seleccionar al menos un estudio de radiología",
        "Estudios de radiología inválidos",
    ),
}


def normalize_items(items: Optional[Iterable]) -> list[str]:
    if not isinstance(items, (list, tuple)):
        return []
    return [str(i).strip() for i in items if i is not None and str(i).strip()]


class MedicalOrderService:
    @staticmethod
    def create_order(
        *,
        order_type: str,
        patient_id: str,
        doctor_id: str,
        medical_record_id: Optional[str],
        items: Optional[Iterable],
        priority: Optional[str] = None,
        notes: str = "",
        auth_token: Optional[str] = None,
    ) -> MedicalOrder:
        if not patient_id or not doctor_id:
            raise ValidationError({"detail": "patient_id y doctor_id son requeridos"})

        ensure_patient(patient_id, auth_token)
        ensure_doctor(doctor_id, auth_token)

        if not medical_record_id:
            raise ValidationError({"detail": "medical_record_id es requerido para la orden"})
        record_pk = parse_uuid(medical_record_id)
        record = MedicalRecord.objects.filter(id=record_pk).first() if record_pk else None
        if record is None:
            raise ValidationError({"detail": "Historia clínica no existe"})
        if record.patient_id != str(patient_id):
            raise ValidationError({"detail": "La historia clínica no pertenece al paciente indicado"})

        prio = str(priority or MedicalOrderPriority.ROUTINE).strip().upper()
        if prio not in MedicalOrderPriority.values:
            raise ValidationError({"detail": "Prioridad inválida", "allowed": list(MedicalOrderPriority.values)})

        allowed, empty_msg, invalid_msg = ORDER_RULES[order_type]
        picked = normalize_items(items)
        if not picked:
            raise ValidationError({"detail": empty_msg})
        invalid = [i for i in picked if i not in allowed]
        if invalid:
            raise ValidationError({"detail": invalid_msg, "invalid": invalid})

        with transaction.atomic():
            order = MedicalOrder.objects.create(
                patient_id=str(patient_id),
                doctor_id=str(doctor_id),
                medical_record=record,
                type=order_type,
                priority=prio,
                status=MedicalOrderStatus.ORDERED,
                lab_tests=picked if order_type == MedicalOrderType.LABORATORY else [],
                radiology_exams=picked if order_type == MedicalOrderType.RADIOLOGY else [],
                notes=notes or "",
            )

        logger.info("%s order %s created for patient %s", order_type, order.id, patient_id)
        return order
