# mr_core/records/filters.py
from __future__ import annotations

import django_filters

from mr_core.records.models import MedicalRecord, MedicalRecordStatus


class MedicalRecordFilter(django_filters.FilterSet):
    patient_id = django_filters.CharFilter(field_name="patient_id")
    physician_id = django_filters.CharFilter(field_name="physician_id")
    status = django_filters.ChoiceFilter(choices=MedicalRecordStatus.choices)
    from_date = django_filters.DateFilter(field_name="date", lookup_expr="date__gte")
    to_date = django_filters.DateFilter(field_name="date", lookup_expr="date__lte")

    class Meta:
        model = MedicalRecord
        fields = ["patient_id", "physician_id", "status", "from_date", "to_date"]
