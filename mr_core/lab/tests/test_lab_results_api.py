# mr_core/lab/tests/test_lab_results_api.py
import pytest

from mr_core.lab.models import LabResult

pytestmark = pytest.mark.django_db

URL = "/api/v1/lab-results/"


def _payload(record, **extra):
    return {
        "medical_record_id": str(record.id),
        "test_type": "Hemograma completo",
        "result": "Leucocitos 7.2",
        "test_date": "2024-03-10T12:00:00Z",
        "reference_range": "4.5 - 11.0",
        **extra,
    }


def test_create_and_retrieve(nurse_client, record, upstream):
    r = nurse_client.post(URL, _payload(record), format="json")
    assert r.status_code == 201, r.data
    assert r.data["medical_record_id"] == str(record.id)
    assert "LAB_RESULT_CREATE" in upstream.actions()

    r = nurse_client.get(f"{URL}{r.data['id']}/")
    assert r.status_code == 200
    assert r.data["test_type"] == "Hemograma completo"


def test_create_for_unknown_record(nurse_client, record):
    r = nurse_client.post(URL, _payload(record, medical_record_id="5f0e2b9e-1111-4222-8333-444455556666"), format="json")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Registro médico no encontrado"
    assert LabResult.objects.count() == 0


def test_list_filters(nurse_client, record):
    nurse_client.post(URL, _payload(record), format="json")
    nurse_client.post(URL, _payload(record, test_type="Glucosa", test_date="2024-04-02T12:00:00Z"), format="json")

    assert nurse_client.get(URL).data["count"] == 2
    assert nurse_client.get(URL, {"test_type": "gluc"}).data["count"] == 1
    assert nurse_client.get(URL, {"from_date": "2024-04-01"}).data["count"] == 1
    assert nurse_client.get(URL, {"to_date": "2024-03-31"}).data["count"] == 1
    assert nurse_client.get(URL, {"medical_record_id": str(record.id)}).data["count"] == 2
    assert nurse_client.get(URL, {"medical_record_id": "nope"}).status_code == 400


def test_update_and_delete(doctor_client, nurse_client, record, upstream):
    created = nurse_client.post(URL, _payload(record), format="json").data

    r = nurse_client.patch(f"{URL}{created['id']}/", {"comments": "Repetir en 3 meses"}, format="json")
    assert r.status_code == 200
    assert r.data["comments"] == "Repetir en 3 meses"

    assert nurse_client.delete(f"{URL}{created['id']}/").status_code == 403

    r = doctor_client.delete(f"{URL}{created['id']}/")
    assert r.status_code == 200
    assert r.data["message"] == "Resultado de laboratorio eliminado exitosamente"

    r = doctor_client.get(f"{URL}{created['id']}/")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Resultado de laboratorio no encontrado"

    delete_event = [e for e in upstream.audit_events if e["action"] == "LAB_RESULT_DELETE"][0]
    assert delete_event["entityId"] == created["id"]
