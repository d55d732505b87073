# mr_core/orders/api/views.py
from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from mr_core.audit.services import AuditService
from mr_core.common.permissions import MedicalOrderPermission
from mr_core.orders.api.serializers import (
    LabOrderCreateSerializer,
    MedicalOrderSerializer,
    OrderTemplatesSerializer,
    RadiologyOrderCreateSerializer,
)
from mr_core.orders.models import (
    ALLOWED_LAB_TESTS,
    ALLOWED_RADIOLOGY_EXAMS,
    MedicalOrder,
    MedicalOrderPriority,
    MedicalOrderStatus,
    MedicalOrderType,
)
from mr_core.orders.selectors import MedicalOrderSelector
from mr_core.orders.services import MedicalOrderService


class MedicalOrderViewSet(viewsets.ViewSet):
    """
    Laboratory and radiology orders. Responses use the `{ok, data}` shape.
    """

    permission_classes = [MedicalOrderPermission]
    serializer_class = MedicalOrderSerializer
    queryset = MedicalOrder.objects.none()

    def _create(self, request, *, order_type: str, serializer_class, items_field: str) -> Response:
        ser = serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        order = MedicalOrderService.create_order(
            order_type=order_type,
            patient_id=data["patient_id"],
            doctor_id=data["doctor_id"],
            medical_record_id=data["medical_record_id"],
            items=data[items_field],
            priority=data["priority"],
            notes=data["notes"],
            auth_token=request.META.get("HTTP_AUTHORIZATION"),
        )

        AuditService.log_for_request(
            request,
            action="MEDICAL_ORDER_CREATE",
            entity="MedicalOrder",
            entity_id=order.id,
            metadata={"patientId": order.patient_id, "type": order.type},
        )
        return Response({"ok": True, "data": MedicalOrderSerializer(order).data}, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: OrderTemplatesSerializer}, tags=["Medical orders"])
    @action(detail=False, methods=["get"], url_path="templates")
    def templates(self, request):
        data = {
            "laboratory": list(ALLOWED_LAB_TESTS),
            "radiology": list(ALLOWED_RADIOLOGY_EXAMS),
            "priorities": list(MedicalOrderPriority.values),
            "statuses": list(MedicalOrderStatus.values),
        }
        return Response({"ok": True, "data": data}, status=status.HTTP_200_OK)

    @extend_schema(request=LabOrderCreateSerializer, responses={201: MedicalOrderSerializer}, tags=["Medical orders"])
    @action(detail=False, methods=["post"], url_path="laboratory")
    def laboratory(self, request):
        return self._create(
            request,
            order_type=MedicalOrderType.LABORATORY,
            serializer_class=LabOrderCreateSerializer,
            items_field="tests",
        )

    @extend_schema(request=RadiologyOrderCreateSerializer, responses={201: MedicalOrderSerializer}, tags=["Medical orders"])
    @action(detail=False, methods=["post"], url_path="radiology")
    def radiology(self, request):
        return self._create(
            request,
            order_type=MedicalOrderType.RADIOLOGY,
            serializer_class=RadiologyOrderCreateSerializer,
            items_field="exams",
        )

    @extend_schema(responses={200: MedicalOrderSerializer}, tags=["Medical orders"])
    def retrieve(self, request, pk=None):
        try:
            order = MedicalOrderSelector.get_order(order_id=pk)
        except MedicalOrderSelector.NotFound:
            raise NotFound("Orden no encontrada")
        return Response({"ok": True, "data": MedicalOrderSerializer(order).data}, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="type", required=False, type=str, enum=list(MedicalOrderType.values)),
            OpenApiParameter(name="status", required=False, type=str, enum=list(MedicalOrderStatus.values)),
        ],
        responses={200: MedicalOrderSerializer(many=True)},
        tags=["Medical orders"],
    )
    @action(detail=False, methods=["get"], url_path=r"patient/(?P<patient_id>[^/]+)")
    def by_patient(self, request, patient_id=None):
        qs = MedicalOrderSelector.list_for_patient(
            patient_id=patient_id,
            order_type=request.query_params.get("type"),
            order_status=request.query_params.get("status"),
        )
        return Response({"ok": True, "data": MedicalOrderSerializer(qs, many=True).data}, status=status.HTTP_200_OK)
