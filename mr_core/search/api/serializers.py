# mr_core/search/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class SearchDiagnosticSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()
    diagnosis = serializers.CharField()
    created_at = serializers.DateTimeField()


class PatientSearchHitSerializer(serializers.Serializer):
    diagnostic = SearchDiagnosticSerializer()
    patient = serializers.DictField()
