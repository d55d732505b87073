# mr_core/diseases/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.diseases.models import DiseaseCatalog


class DiseaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = DiseaseCatalog
        fields = ["id", "code", "name", "description", "is_active", "created_at", "updated_at"]


class DiseaseCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=32)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)


class DiseaseUpdateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=32, required=False, allow_blank=True)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class DiseaseListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    limit = serializers.IntegerField(required=False, min_value=1, default=20)
