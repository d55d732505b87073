# mr_core/documents/tests/test_documents_api.py
import pytest
from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import SimpleUploadedFile

from mr_core.conftest import DOCTOR_ID, OTHER_PATIENT_ID, PATIENT_ID
from mr_core.documents.models import Document, DocumentCategory
from mr_core.records.models import MedicalRecord

pytestmark = pytest.mark.django_db


def _upload(client, **extra):
    payload = {
        "patient_id": PATIENT_ID,
        "encounter_id": "enc-1",
        "document": SimpleUploadedFile("laboratorio.pdf", b"%PDF-1.4 data", content_type="application/pdf"),
        **extra,
    }
    return client.post("/api/v1/documents/upload/", payload, format="multipart")


def test_upload_stores_file_and_row(doctor_client, upstream):
    r = _upload(doctor_client, tags="sangre, control", category="lab")
    assert r.status_code == 201, r.data

    doc = Document.objects.get(id=r.data["id"])
    assert doc.uploaded_by == DOCTOR_ID
    assert doc.category == DocumentCategory.LAB
    assert doc.tags == ["sangre", "control"]
    assert doc.file_type == "pdf"
    assert FileSystemStorage().exists(doc.file_path)
    assert "DOCUMENT_UPLOAD" in upstream.actions()


def test_unknown_category_falls_back_to_general(doctor_client):
    r = _upload(doctor_client, category="whatever")
    assert r.status_code == 201, r.data
    assert r.data["category"] == DocumentCategory.GENERAL


def test_upload_for_unknown_patient_writes_nothing(doctor_client, media_root):
    r = _upload(doctor_client, patient_id="ghost")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Paciente no existe"
    assert Document.objects.count() == 0
    assert not list(media_root.rglob("*.pdf"))


def test_upload_requires_file(doctor_client):
    r = doctor_client.post(
        "/api/v1/documents/upload/",
        {"patient_id": PATIENT_ID, "encounter_id": "enc-1"},
        format="multipart",
    )
    assert r.status_code == 400


def test_upload_rejects_wrong_type(doctor_client):
    r = _upload(doctor_client, document=SimpleUploadedFile("a.txt", b"x", content_type="text/plain"))
    assert r.status_code == 400
    assert r.data["error"]["code"] == "unsupported_file_type"


def test_list_by_patient_filters_and_hides_deleted(doctor_client):
    first = _upload(doctor_client, encounter_id="enc-1").data
    _upload(doctor_client, encounter_id="enc-2")
    Document.objects.filter(id=first["id"]).update(category=DocumentCategory.ADMIN)

    r = doctor_client.get(f"/api/v1/documents/patient/{PATIENT_ID}/")
    assert r.status_code == 200
    assert r.data["count"] == 2

    r = doctor_client.get(f"/api/v1/documents/patient/{PATIENT_ID}/", {"encounter_id": "enc-2"})
    assert r.data["count"] == 1

    r = doctor_client.get(f"/api/v1/documents/patient/{PATIENT_ID}/", {"category": "ADMIN"})
    assert [d["id"] for d in r.data["results"]] == [first["id"]]

    doctor_client.delete(f"/api/v1/documents/{first['id']}/")
    r = doctor_client.get(f"/api/v1/documents/patient/{PATIENT_ID}/")
    assert r.data["count"] == 1


def test_download_streams_file(nurse_client, doctor_client):
    doc_id = _upload(doctor_client).data["id"]

    r = nurse_client.get(f"/api/v1/documents/{doc_id}/")
    assert r.status_code == 200
    assert r["Content-Type"] == "application/pdf"
    assert "attachment" in r["Content-Disposition"]
    assert b"".join(r.streaming_content) == b"%PDF-1.4 data"


def test_download_missing_file_is_404(doctor_client):
    doc = Document.objects.get(id=_upload(doctor_client).data["id"])
    FileSystemStorage().delete(doc.file_path)

    r = doctor_client.get(f"/api/v1/documents/{doc.id}/")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Archivo no existe"


def test_only_owner_or_admin_can_delete(doctor_client, other_doctor_client, admin_client, upstream):
    doc_id = _upload(doctor_client).data["id"]

    r = other_doctor_client.delete(f"/api/v1/documents/{doc_id}/")
    assert r.status_code == 403
    assert r.data["error"]["message"] == "No autorizado"

    r = admin_client.delete(f"/api/v1/documents/{doc_id}/")
    assert r.status_code == 200
    assert r.data["message"] == "Documento eliminado"
    assert Document.objects.get(id=doc_id).deleted_at is not None
    assert "DOCUMENT_DELETE" in upstream.actions()

    r = doctor_client.get(f"/api/v1/documents/{doc_id}/")
    assert r.status_code == 404


def test_upload_links_record_and_diagnostic_of_same_patient(doctor_client, record, make_diagnostic):
    dx = make_diagnostic(record)
    r = _upload(doctor_client, medical_record_id=str(record.id), diagnostic_id=str(dx.id))
    assert r.status_code == 201, r.data

    doc = Document.objects.get(id=r.data["id"])
    assert doc.medical_record_id == record.id
    assert doc.diagnostic_id == dx.id


def test_upload_rejects_diagnostic_of_another_patient(doctor_client, record, make_diagnostic, media_root):
    dx = make_diagnostic(record)
    r = _upload(doctor_client, patient_id=OTHER_PATIENT_ID, diagnostic_id=str(dx.id))
    assert r.status_code == 400
    assert r.data["error"]["code"] == "record_patient_mismatch"
    assert Document.objects.count() == 0
    assert not dx.documents.exists()
    assert not list(media_root.rglob("*.pdf"))


def test_upload_rejects_record_of_another_patient(doctor_client, record):
    r = _upload(doctor_client, patient_id=OTHER_PATIENT_ID, medical_record_id=str(record.id))
    assert r.status_code == 400
    assert r.data["error"]["code"] == "record_patient_mismatch"
    assert Document.objects.count() == 0


def test_upload_rejects_diagnostic_outside_given_record(doctor_client, record, make_diagnostic):
    dx = make_diagnostic(record)
    second = MedicalRecord.objects.create(patient_id=PATIENT_ID, physician_id=DOCTOR_ID, symptoms="Cefalea")

    r = _upload(doctor_client, medical_record_id=str(second.id), diagnostic_id=str(dx.id))
    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
    assert Document.objects.count() == 0
