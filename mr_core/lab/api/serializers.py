# mr_core/lab/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.lab.models import LabResult


class LabResultSerializer(serializers.ModelSerializer):
    medical_record_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = LabResult
        fields = [
            "id",
            "medical_record_id",
            "test_type",
            "result",
            "reference_range",
            "lab_name",
            "test_date",
            "comments",
            "created_at",
            "updated_at",
        ]


class LabResultCreateSerializer(serializers.Serializer):
    medical_record_id = serializers.UUIDField()
    test_type = serializers.CharField(max_length=255)
    result = serializers.CharField()
    test_date = serializers.DateTimeField()
    reference_range = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    lab_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    comments = serializers.CharField(required=False, allow_blank=True, default="")


class LabResultUpdateSerializer(serializers.Serializer):
    test_type = serializers.CharField(max_length=255, required=False)
    result = serializers.CharField(required=False)
    test_date = serializers.DateTimeField(required=False)
    reference_range = serializers.CharField(max_length=255, required=False, allow_blank=True)
    lab_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    comments = serializers.CharField(required=False, allow_blank=True)
