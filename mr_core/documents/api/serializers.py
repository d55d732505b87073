# mr_core/documents/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.documents.models import Document, DocumentCategory


class DocumentSerializer(serializers.ModelSerializer):
    medical_record_id = serializers.UUIDField(read_only=True, allow_null=True)
    diagnostic_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Document
        fields = [
            "id",
            "patient_id",
            "medical_record_id",
            "diagnostic_id",
            "encounter_id",
            "filename",
            "store_filename",
            "file_path",
            "mime_type",
            "file_size",
            "file_type",
            "category",
            "description",
            "tags",
            "uploaded_by",
            "created_at",
            "updated_at",
        ]


class TagsField(serializers.Field):
    """Accepts a comma-separated string or a list of strings."""

    def to_internal_value(self, data):
        if data in (None, ""):
            return []
        if isinstance(data, str):
            items = data.split(",")
        elif isinstance(data, (list, tuple)):
            items = data
        else:
            raise serializers.ValidationError("tags debe ser texto separado por comas o una lista")
        return [str(t).strip() for t in items if str(t).strip()]

    def to_representation(self, value):
        return list(value or [])


class DocumentUploadSerializer(serializers.Serializer):
    patient_id = serializers.CharField(max_length=64)
    encounter_id = serializers.CharField(max_length=64)
    medical_record_id = serializers.UUIDField(required=False, allow_null=True)
    diagnostic_id = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, allow_blank=True, default=DocumentCategory.GENERAL)
    tags = TagsField(required=False, default=list)

    def validate_category(self, value):
        value = (value or "").strip().upper()
        return value if value in DocumentCategory.values else DocumentCategory.GENERAL


class DocumentListQuerySerializer(serializers.Serializer):
    encounter_id = serializers.CharField(required=False)
    diagnostic_id = serializers.UUIDField(required=False)
    category = serializers.ChoiceField(choices=DocumentCategory.choices, required=False)
    mime = serializers.CharField(required=False)
    q = serializers.CharField(required=False)
