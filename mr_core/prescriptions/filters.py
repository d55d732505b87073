# mr_core/prescriptions/filters.py
from __future__ import annotations

import django_filters

from mr_core.prescriptions.models import Prescription


class PrescriptionFilter(django_filters.FilterSet):
    medical_record_id = django_filters.UUIDFilter(field_name="medical_record_id")
    medication = django_filters.CharFilter(field_name="medication", lookup_expr="icontains")
    patient_id = django_filters.CharFilter(field_name="patient_id")
    doctor_id = django_filters.CharFilter(field_name="doctor_id")

    class Meta:
        model = Prescription
        fields = ["medical_record_id", "medication", "patient_id", "doctor_id"]
