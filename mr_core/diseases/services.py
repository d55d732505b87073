# mr_core/diseases/services.py
from __future__ import annotations

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from mr_core.common.api.exceptions import ConflictError
from mr_core.diseases.models import DiseaseCatalog

DUPLICATE_CODE = "Ya existe una enfermedad con ese código"


class DiseaseService:
    """
    Write-model operations for the disease catalog.
    Entries are never removed: deletion flips `is_active`.
    """

    @staticmethod
    def _save(disease: DiseaseCatalog, **save_kwargs) -> DiseaseCatalog:
        try:
            with transaction.atomic():
                disease.save(**save_kwargs)
        except IntegrityError:
            raise ConflictError({"detail": DUPLICATE_CODE, "code": disease.code})
        return disease

    @staticmethod
    def create(*, code: str, name: str, description: str = "", is_active: bool = True) -> DiseaseCatalog:
        code = (code or "").strip()
        name = (name or "").strip()
        if not code or not name:
            raise ValidationError({"detail": "code y name son obligatorios"})

        if DiseaseCatalog.objects.filter(code=code).exists():
            raise ConflictError({"detail": DUPLICATE_CODE, "code": code})

        disease = DiseaseCatalog(code=code, name=name, description=description or "", is_active=is_active)
        return DiseaseService._save(disease, force_insert=True)

    @staticmethod
    def update(*, disease: DiseaseCatalog, changes: dict) -> DiseaseCatalog:
        fields: list[str] = []

        for key in ("code", "name"):
            value = changes.get(key)
            if isinstance(value, str) and value.strip():
                setattr(disease, key, value.strip())
                fields.append(key)

        if "description" in changes and changes["description"] is not None:
            disease.description = changes["description"]
            fields.append("description")

        if isinstance(changes.get("is_active"), bool):
            disease.is_active = changes["is_active"]
            fields.append("is_active")

        if not fields:
            raise ValidationError({"detail": "No hay campos para actualizar"})

        if "code" in fields and DiseaseCatalog.objects.filter(code=disease.code).exclude(id=disease.id).exists():
            raise ConflictError({"detail": DUPLICATE_CODE, "code": disease.code})

        return DiseaseService._save(disease, update_fields=[*fields, "updated_at"])

    @staticmethod
    def deactivate(*, disease: DiseaseCatalog) -> tuple[DiseaseCatalog, bool]:
        """Returns (disease, changed); deactivating an inactive entry is a no-op."""
        if not disease.is_active:
            return disease, False
        disease.is_active = False
        disease.save(update_fields=["is_active", "updated_at"])
        return disease, True
