# mr_core/records/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.diagnostics.api.serializers import DiagnosticSerializer
from mr_core.lab.api.serializers import LabResultSerializer
from mr_core.orders.api.serializers import MedicalOrderSerializer
from mr_core.prescriptions.api.serializers import PrescriptionSerializer
from mr_core.records.models import MedicalRecord, MedicalRecordStatus

RECORD_FIELDS = [
    "id",
    "patient_id",
    "physician_id",
    "appointment_id",
    "date",
    "symptoms",
    "diagnosis",
    "treatment",
    "notes",
    "status",
    "created_at",
    "updated_at",
]


class MedicalRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = MedicalRecord
        fields = RECORD_FIELDS


class MedicalRecordDetailSerializer(serializers.ModelSerializer):
    """Record with everything hanging off it; expects `MedicalRecordSelector.get_record_detail` prefetches."""

    prescriptions = PrescriptionSerializer(many=True, read_only=True)
    lab_results = LabResultSerializer(many=True, read_only=True)
    medical_orders = MedicalOrderSerializer(many=True, read_only=True)
    diagnostics = DiagnosticSerializer(many=True, read_only=True, source="active_diagnostics")

    class Meta:
        model = MedicalRecord
        fields = [*RECORD_FIELDS, "diagnostics", "prescriptions", "lab_results", "medical_orders"]


class MedicalRecordCreateSerializer(serializers.Serializer):
    patient_id = serializers.CharField(max_length=64)
    symptoms = serializers.CharField()
    diagnosis = serializers.CharField(required=False, allow_blank=True, default="")
    treatment = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    appointment_id = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True, default=None)
    date = serializers.DateTimeField(required=False, allow_null=True, default=None)


class MedicalRecordUpdateSerializer(serializers.Serializer):
    symptoms = serializers.CharField(required=False)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    treatment = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=MedicalRecordStatus.choices, required=False)
