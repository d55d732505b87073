# mr_core/diagnostics/tests/test_diagnostic_creation.py
from datetime import datetime, timezone

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from mr_core.common.api.exceptions import PrimaryDiagnosisExists
from mr_core.conftest import DOCTOR_ID, OTHER_PATIENT_ID, PATIENT_ID
from mr_core.diagnostics.models import Diagnostic, DiagnosticType
from mr_core.diagnostics.services import DiagnosticInput, DiagnosticService
from mr_core.documents.models import Document, DocumentCategory

pytestmark = pytest.mark.django_db


def _file(name="rx.png", content_type="image/png"):
    return SimpleUploadedFile(name, b"\x89PNG....", content_type=content_type)


def _payload(record, disease, **extra):
    return {
        "medical_record_id": str(record.id),
        "disease_code": disease.code,
        "title": "Resfriado común",
        "description": "Congestión nasal",
        "treatment": "Líquidos y reposo",
        **extra,
    }


def _url(patient_id=PATIENT_ID):
    return f"/api/v1/diagnostics/{patient_id}/"


def test_create_primary_with_documents(doctor_client, record, disease, upstream):
    payload = _payload(record, disease, type="primary", documents=[_file("a.png"), _file("b.pdf", "application/pdf")])
    r = doctor_client.post(_url(), payload, format="multipart")
    assert r.status_code == 201, r.data

    assert r.data["type"] == DiagnosticType.PRIMARY
    assert r.data["disease_name"] == "Common cold"
    assert r.data["diagnosis"] == "J00 - Common cold"
    assert len(r.data["documents"]) == 2
    assert {d["category"] for d in r.data["documents"]} == {DocumentCategory.DIAGNOSTIC_ATTACHMENT}

    event = [e for e in upstream.audit_events if e["action"] == "DIAGNOSIS_CREATE"][0]
    assert sorted(event["metadata"]["documentIds"]) == sorted(d["id"] for d in r.data["documents"])


def test_second_primary_is_rejected_before_any_write(doctor_client, record, disease, make_diagnostic, media_root):
    make_diagnostic(record)

    r = doctor_client.post(_url(), _payload(record, disease, type="PRIMARY", documents=[_file()]), format="multipart")
    assert r.status_code == 400
    assert r.data["error"]["code"] == "primary_diagnosis_exists"
    assert "ya existe un diagnóstico principal" in r.data["error"]["message"].lower()
    assert Diagnostic.objects.count() == 1
    assert Document.objects.count() == 0
    assert not list(media_root.rglob("*.png"))


def test_secondary_is_allowed_next_to_primary(doctor_client, record, disease, make_diagnostic):
    make_diagnostic(record)
    r = doctor_client.post(_url(), _payload(record, disease), format="json")
    assert r.status_code == 201, r.data
    assert r.data["type"] == DiagnosticType.SECONDARY


@pytest.mark.parametrize("blank", ["type", "next_appointment", "observations"])
def test_blank_optional_form_fields_use_defaults(doctor_client, record, disease, blank):
    r = doctor_client.post(_url(), _payload(record, disease, **{blank: ""}), format="multipart")
    assert r.status_code == 201, r.data
    assert r.data["type"] == DiagnosticType.SECONDARY
    assert r.data["next_appointment"] is None
    assert r.data["observations"] == ""


def test_form_fields_are_parsed(doctor_client, record, disease):
    payload = _payload(record, disease, type=" primary ", next_appointment="2026-11-02T09:30:00Z", observations="Control")
    r = doctor_client.post(_url(), payload, format="multipart")
    assert r.status_code == 201, r.data
    assert r.data["type"] == DiagnosticType.PRIMARY
    stored = Diagnostic.objects.get(id=r.data["id"])
    assert stored.next_appointment == datetime(2026, 11, 2, 9, 30, tzinfo=timezone.utc)
    assert r.data["observations"] == "Control"


def test_six_files_are_rejected_before_database_write(doctor_client, record, disease, upstream, media_root):
    files = [_file(f"f{i}.png") for i in range(6)]
    r = doctor_client.post(_url(), _payload(record, disease, documents=files), format="multipart")

    assert r.status_code == 400
    assert r.data["error"]["code"] == "too_many_files"
    assert Diagnostic.objects.count() == 0
    assert Document.objects.count() == 0
    assert not list(media_root.rglob("*.png"))
    assert upstream.requests == []


def test_missing_fields(doctor_client, record, disease):
    r = doctor_client.post(_url(), {"medical_record_id": str(record.id), "disease_code": "J00"}, format="json")
    assert r.status_code == 400
    assert Diagnostic.objects.count() == 0


def test_unknown_patient(doctor_client, record, disease):
    r = doctor_client.post(_url("ghost"), _payload(record, disease), format="json")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Paciente no existe"


def test_record_of_another_patient(doctor_client, record, disease):
    r = doctor_client.post(_url(OTHER_PATIENT_ID), _payload(record, disease), format="json")
    assert r.status_code == 400
    assert r.data["error"]["code"] == "record_patient_mismatch"


def test_record_of_another_physician(other_doctor_client, record, disease):
    r = other_doctor_client.post(_url(), _payload(record, disease), format="json")
    assert r.status_code == 403
    assert r.data["error"]["code"] == "record_physician_mismatch"


def test_inactive_disease_code(doctor_client, record, inactive_disease):
    r = doctor_client.post(_url(), _payload(record, inactive_disease), format="json")
    assert r.status_code == 400
    assert Diagnostic.objects.count() == 0


def test_nurse_cannot_create(nurse_client, record, disease):
    r = nurse_client.post(_url(), _payload(record, disease), format="json")
    assert r.status_code == 403


def test_failed_transaction_leaves_no_rows_and_no_files(record, disease, media_root, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(Document.objects, "bulk_create", boom)

    with pytest.raises(RuntimeError):
        DiagnosticService.create(
            data=DiagnosticInput(
                patient_id=PATIENT_ID,
                doctor_id=DOCTOR_ID,
                medical_record_id=str(record.id),
                disease_code=disease.code,
                title="t",
                description="d",
                treatment="tr",
            ),
            uploads=[_file("a.png"), _file("b.png")],
        )

    assert Diagnostic.objects.count() == 0
    assert Document.objects.count() == 0
    assert not [p for p in media_root.rglob("*") if p.is_file()]


def test_lost_race_maps_to_primary_exists(record, disease, make_diagnostic, monkeypatch):
    # Pre-check passes, the existing row only shows up at insert time
    from mr_core.diagnostics.selectors import DiagnosticSelector

    make_diagnostic(record)
    monkeypatch.setattr(DiagnosticSelector, "has_active_primary", staticmethod(lambda **kwargs: False))

    with pytest.raises(PrimaryDiagnosisExists):
        DiagnosticService.create(
            data=DiagnosticInput(
                patient_id=PATIENT_ID,
                doctor_id=DOCTOR_ID,
                medical_record_id=str(record.id),
                disease_code=disease.code,
                title="t",
                description="d",
                treatment="tr",
                type=DiagnosticType.PRIMARY,
            ),
        )
    assert Diagnostic.objects.count() == 1


def test_list_by_medical_record(nurse_client, record, make_diagnostic):
    from mr_core.diagnostics.models import DiagnosticState

    make_diagnostic(record)
    make_diagnostic(record, type=DiagnosticType.SECONDARY, state=DiagnosticState.INACTIVE)

    r = nurse_client.get(f"/api/v1/diagnostics/medical-record/{record.id}/")
    assert r.status_code == 200
    assert len(r.data) == 1
    assert r.data[0]["state"] == "ACTIVE"
