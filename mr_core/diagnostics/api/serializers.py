# mr_core/diagnostics/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.diagnostics.models import Diagnostic, DiagnosticType
from mr_core.documents.api.serializers import DocumentSerializer


class DiagnosticCreateSerializer(serializers.Serializer):
    medical_record_id = serializers.UUIDField()
    disease_code = serializers.CharField(max_length=32)
    type = serializers.ChoiceField(choices=DiagnosticType.choices, required=False, default=DiagnosticType.SECONDARY)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    diagnosis = serializers.CharField(required=False, allow_blank=True, default="")
    treatment = serializers.CharField()
    observations = serializers.CharField(required=False, allow_blank=True, default="")
    next_appointment = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def to_internal_value(self, data):
        if type(data) is dict:
            data = dict(data)
            # Multipart clients send the enum in any case
            if isinstance(data.get("type"), str):
                data["type"] = data["type"].strip().upper()
            # Form clients post empty optional fields; those fall back to their defaults
            for name in [k for k, v in data.items() if v == ""]:
                field = self.fields.get(name)
                if field is not None and not field.required and not getattr(field, "allow_blank", False):
                    del data[name]
        return super().to_internal_value(data)


class DiagnosticSerializer(serializers.ModelSerializer):
    medical_record_id = serializers.UUIDField(read_only=True)
    documents = serializers.SerializerMethodField()

    class Meta:
        model = Diagnostic
        fields = [
            "id",
            "patient_id",
            "doctor_id",
            "medical_record_id",
            "disease_code",
            "disease_name",
            "type",
            "title",
            "description",
            "diagnosis",
            "treatment",
            "observations",
            "next_appointment",
            "state",
            "documents",
            "created_at",
            "updated_at",
        ]

    def get_documents(self, obj) -> list[dict]:
        docs = [d for d in obj.documents.all() if d.deleted_at is None]
        return DocumentSerializer(docs, many=True).data
