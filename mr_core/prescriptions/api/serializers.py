# mr_core/prescriptions/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.prescriptions.models import Prescription
from mr_core.records.models import MedicalRecord


class RecordSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = MedicalRecord
        fields = ["id", "patient_id", "physician_id", "appointment_id", "date", "status"]


class PrescriptionSerializer(serializers.ModelSerializer):
    medical_record_id = serializers.UUIDField(read_only=True)
    diagnostic_id = serializers.UUIDField(read_only=True, allow_null=True)
    medical_record = RecordSummarySerializer(read_only=True)

    class Meta:
        model = Prescription
        fields = [
            "id",
            "medical_record_id",
            "patient_id",
            "doctor_id",
            "diagnostic_id",
            "medication",
            "dosage",
            "frequency",
            "duration",
            "instructions",
            "expiration_date",
            "prescription_date",
            "medical_record",
            "created_at",
            "updated_at",
        ]


class PrescriptionCreateSerializer(serializers.Serializer):
    # Presence of the clinical fields is checked by the creation pipeline
    patient_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    medical_record_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    medication = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    dosage = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    frequency = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    duration = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    instructions = serializers.CharField(required=False, allow_blank=True, default="")
    medication_type = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    expiration_date = serializers.DateField(required=False, allow_null=True, default=None)


class PrescriptionUpdateSerializer(serializers.Serializer):
    medication = serializers.CharField(max_length=255, required=False)
    dosage = serializers.CharField(max_length=255, required=False)
    frequency = serializers.CharField(max_length=255, required=False)
    duration = serializers.CharField(max_length=100, required=False)
    instructions = serializers.CharField(required=False, allow_blank=True)
    expiration_date = serializers.DateField(required=False, allow_null=True)
