# mr_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from mr_core.diagnostics.api.views import DiagnosticViewSet
from mr_core.diseases.api.views import DiseaseCatalogViewSet
from mr_core.documents.api.views import DocumentViewSet
from mr_core.lab.api.views import LabResultViewSet
from mr_core.orders.api.views import MedicalOrderViewSet
from mr_core.prescriptions.api.views import PrescriptionViewSet
from mr_core.records.api.views import MedicalRecordViewSet
from mr_core.search.api.views import PatientSearchViewSet

router = DefaultRouter()

router.register(r"medical-records", MedicalRecordViewSet, basename="medical-records")
router.register(r"prescriptions", PrescriptionViewSet, basename="prescriptions")
router.register(r"diseases", DiseaseCatalogViewSet, basename="diseases")
router.register(r"documents", DocumentViewSet, basename="documents")
router.register(r"medical-orders", MedicalOrderViewSet, basename="medical-orders")
router.register(r"lab-results", LabResultViewSet, basename="lab-results")
router.register(r"patients/search", PatientSearchViewSet, basename="patient-search")

diagnostic_create = DiagnosticViewSet.as_view({"post": "create"})
diagnostics_by_record = DiagnosticViewSet.as_view({"get": "by_medical_record"})

urlpatterns = [
    # Diagnostics are keyed by patient on create, so they do not fit the router's {pk} shape
    path(
        "diagnostics/medical-record/<str:medical_record_id>/",
        diagnostics_by_record,
        name="diagnostics-by-medical-record",
    ),
    path("diagnostics/<str:patient_id>/", diagnostic_create, name="diagnostics-create"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
