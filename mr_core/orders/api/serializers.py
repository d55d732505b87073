# mr_core/orders/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.orders.models import MedicalOrder


class MedicalOrderSerializer(serializers.ModelSerializer):
    medical_record_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = MedicalOrder
        fields = [
            "id",
            "patient_id",
            "doctor_id",
            "medical_record_id",
            "type",
            "priority",
            "status",
            "lab_tests",
            "radiology_exams",
            "notes",
            "created_at",
            "updated_at",
        ]


class _OrderCreateBase(serializers.Serializer):
    patient_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    doctor_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    medical_record_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    priority = serializers.CharField(max_length=16, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class LabOrderCreateSerializer(_OrderCreateBase):
    tests = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False, default=list)


class RadiologyOrderCreateSerializer(_OrderCreateBase):
    exams = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False, default=list)


class OrderTemplatesSerializer(serializers.Serializer):
    laboratory = serializers.ListField(child=serializers.CharField())
    radiology = serializers.ListField(child=serializers.CharField())
    priorities = serializers.ListField(child=serializers.CharField())
    statuses = serializers.ListField(child=serializers.CharField())
