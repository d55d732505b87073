# mr_core/search/services.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

from django.utils.dateparse import parse_date
from rest_framework.exceptions import ValidationError

from mr_core.diagnostics.models import Diagnostic
from mr_core.integrations.registry import get_integrations

PATIENT_UNAVAILABLE = "Información de paciente no disponible"


@dataclass(frozen=True)
class SearchCriteria:
    diagnostic: Optional[str]
    date_from: Optional[date]
    date_to: Optional[date]

    def as_metadata(self) -> dict[str, Any]:
        return {
            "diagnostic": self.diagnostic,
            "dateFrom": self.date_from.isoformat() if self.date_from else None,
            "dateTo": self.date_to.isoformat() if self.date_to else None,
        }


def _parse_day(raw: Optional[str], message: str) -> Optional[date]:
    if not raw:
        return None
    try:
        parsed = parse_date(raw.strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError({"detail": message})
    return parsed


class PatientSearchService:
    @staticmethod
    def parse_criteria(params) -> SearchCriteria:
        diagnostic = (params.get("diagnostic") or "").strip() or None
        raw_from = params.get("date_from")
        raw_to = params.get("date_to")

        if not diagnostic and not raw_from and not raw_to:
            raise ValidationError(
                {"detail": "Debe proporcionar al menos un criterio de búsqueda (diagnostic, date_from, date_to)"}
            )

        return SearchCriteria(
            diagnostic=diagnostic,
            date_from=_parse_day(raw_from, "Formato de fecha inicial inválido. Use YYYY-MM-DD"),
            date_to=_parse_day(raw_to, "Formato de fecha final inválido. Use YYYY-MM-DD"),
        )

    @staticmethod
    def enrich(diagnostics: Sequence[Diagnostic], *, auth_token: Optional[str] = None) -> list[dict]:
        """Attaches patient details to each hit; lookups run concurrently."""
        identity = get_integrations().identity

        def details(patient_id: str) -> Optional[dict]:
            return identity.get_user_details(patient_id, auth_token)

        if not diagnostics:
            return []

        with ThreadPoolExecutor(max_workers=min(8, len(diagnostics)), thread_name_prefix="search") as pool:
            patients = list(pool.map(details, [d.patient_id for d in diagnostics]))

        return [
            {
                "diagnostic": {
                    "id": str(d.id),
                    "title": d.title,
                    "diagnosis": d.diagnosis,
                    "created_at": d.created_at,
                },
                "patient": patient if isinstance(patient, dict) else {"id": d.patient_id, "message": PATIENT_UNAVAILABLE},
            }
            for d, patient in zip(diagnostics, patients)
        ]
