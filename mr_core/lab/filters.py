# mr_core/lab/filters.py
from __future__ import annotations

import django_filters

from mr_core.lab.models import LabResult


class LabResultFilter(django_filters.FilterSet):
    medical_record_id = django_filters.UUIDFilter(field_name="medical_record_id")
    test_type = django_filters.CharFilter(field_name="test_type", lookup_expr="icontains")
    from_date = django_filters.DateFilter(field_name="test_date", lookup_expr="date__gte")
    to_date = django_filters.DateFilter(field_name="test_date", lookup_expr="date__lte")

    class Meta:
        model = LabResult
        fields = ["medical_record_id", "test_type", "from_date", "to_date"]
