# mr_core/search/selectors.py
from __future__ import annotations

from datetime import date, datetime, time, timezone as dt_timezone
from typing import Optional

from django.db.models import OuterRef, QuerySet, Subquery

from mr_core.diagnostics.models import Diagnostic, DiagnosticState


class PatientSearchSelector:
    @staticmethod
    def latest_diagnostic_per_patient(
        *,
        diagnostic: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> QuerySet[Diagnostic]:
        """
        ACTIVE diagnostics matching the criteria, reduced to the newest one per patient.
        Date bounds cover whole UTC days.
        """
        qs = Diagnostic.objects.filter(state=DiagnosticState.ACTIVE)
        if diagnostic:
            qs = qs.filter(diagnosis__icontains=diagnostic)
        if date_from:
            qs = qs.filter(created_at__gte=datetime.combine(date_from, time.min, tzinfo=dt_timezone.utc))
        if date_to:
            qs = qs.filter(created_at__lte=datetime.combine(date_to, time.max, tzinfo=dt_timezone.utc))

        newest = qs.filter(patient_id=OuterRef("patient_id")).order_by("-created_at", "-id").values("id")[:1]
        return qs.filter(id=Subquery(newest)).order_by("-created_at")
