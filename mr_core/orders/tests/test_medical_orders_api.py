# mr_core/orders/tests/test_medical_orders_api.py
import pytest

from mr_core.conftest import DOCTOR_ID, OTHER_PATIENT_ID, PATIENT_ID
from mr_core.orders.models import MedicalOrder, MedicalOrderStatus, MedicalOrderType
from mr_core.orders.services import normalize_items

pytestmark = pytest.mark.django_db

URL = "/api/v1/medical-orders/"


def _lab(record, **extra):
    return {
        "patient_id": PATIENT_ID,
        "doctor_id": DOCTOR_ID,
        "medical_record_id": str(record.id),
        "tests": ["Hemograma", "Orina"],
        **extra,
    }


def test_normalize_items():
    assert normalize_items([" Hemograma ", "", None, "TAC"]) == ["Hemograma", "TAC"]
    assert normalize_items("Hemograma") == []
    assert normalize_items(None) == []


def test_templates(nurse_client):
    r = nurse_client.get(f"{URL}templates/")
    assert r.status_code == 200
    assert r.data["ok"] is True
    assert "Hemograma" in r.data["data"]["laboratory"]
    assert "TAC" in r.data["data"]["radiology"]
    assert r.data["data"]["priorities"] == ["ROUTINE", "URGENT", "STAT"]


def test_create_laboratory_order(doctor_client, record, upstream):
    r = doctor_client.post(f"{URL}laboratory/", _lab(record, priority="urgent"), format="json")
    assert r.status_code == 201, r.data
    data = r.data["data"]
    assert data["type"] == MedicalOrderType.LABORATORY
    assert data["status"] == MedicalOrderStatus.ORDERED
    assert data["priority"] == "URGENT"
    assert data["lab_tests"] == ["Hemograma", "Orina"]
    assert data["radiology_exams"] == []
    assert "MEDICAL_ORDER_CREATE" in upstream.actions()


def test_create_radiology_order(doctor_client, record):
    payload = {
        "patient_id": PATIENT_ID,
        "doctor_id": DOCTOR_ID,
        "medical_record_id": str(record.id),
        "exams": ["Rayos X"],
    }
    r = doctor_client.post(f"{URL}radiology/", payload, format="json")
    assert r.status_code == 201, r.data
    assert r.data["data"]["radiology_exams"] == ["Rayos X"]
    assert r.data["data"]["priority"] == "ROUTINE"


def test_invalid_items_are_listed(doctor_client, record):
    r = doctor_client.post(f"{URL}laboratory/", _lab(record, tests=["Hemograma", "Biopsia"]), format="json")
    assert r.status_code == 400
    assert r.data["error"]["message"] == "Exámenes de laboratorio inválidos"
    assert r.data["error"]["details"]["invalid"] == ["Biopsia"]
    assert MedicalOrder.objects.count() == 0


def test_empty_items(doctor_client, record):
    r = doctor_client.post(f"{URL}radiology/", {**_lab(record), "exams": []}, format="json")
    assert r.status_code == 400
    assert r.data["error"]["message"] == "Debe seleccionar al menos un estudio de radiología"


def test_invalid_priority(doctor_client, record):
    r = doctor_client.post(f"{URL}laboratory/", _lab(record, priority="later"), format="json")
    assert r.status_code == 400
    assert r.data["error"]["message"] == "Prioridad inválida"


def test_record_must_belong_to_patient(doctor_client, record):
    r = doctor_client.post(f"{URL}laboratory/", _lab(record, patient_id=OTHER_PATIENT_ID), format="json")
    assert r.status_code == 400
    assert r.data["error"]["message"] == "La historia clínica no pertenece al paciente indicado"


def test_record_is_required(doctor_client, record):
    r = doctor_client.post(f"{URL}laboratory/", _lab(record, medical_record_id=""), format="json")
    assert r.status_code == 400
    assert r.data["error"]["message"] == "medical_record_id es requerido para la orden"

    r = doctor_client.post(f"{URL}laboratory/", _lab(record, medical_record_id="nope"), format="json")
    assert r.status_code == 400
    assert r.data["error"]["message"] == "Historia clínica no existe"


def test_unknown_doctor(doctor_client, record):
    r = doctor_client.post(f"{URL}laboratory/", _lab(record, doctor_id="ghost"), format="json")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Doctor no existe"


def test_by_patient_filters_and_retrieve(doctor_client, record):
    doctor_client.post(f"{URL}laboratory/", _lab(record), format="json")
    radiology = doctor_client.post(f"{URL}radiology/", {**_lab(record), "exams": ["TAC"]}, format="json").data["data"]

    r = doctor_client.get(f"{URL}patient/{PATIENT_ID}/")
    assert len(r.data["data"]) == 2

    r = doctor_client.get(f"{URL}patient/{PATIENT_ID}/", {"type": "radiology"})
    assert [o["id"] for o in r.data["data"]] == [radiology["id"]]

    r = doctor_client.get(f"{URL}patient/{PATIENT_ID}/", {"type": "bogus", "status": "COMPLETED"})
    assert r.data["data"] == []

    r = doctor_client.get(f"{URL}{radiology['id']}/")
    assert r.status_code == 200
    assert r.data["data"]["id"] == radiology["id"]

    r = doctor_client.get(f"{URL}5f0e2b9e-1111-4222-8333-444455556666/")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Orden no encontrada"
