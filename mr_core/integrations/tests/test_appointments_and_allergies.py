# mr_core/integrations/tests/test_appointments_and_allergies.py
from mr_core.conftest import PATIENT_ID
from mr_core.integrations.appointments import AppointmentProblem
from mr_core.integrations.registry import get_integrations


def test_appointment_for_patient_is_valid(upstream):
    upstream.appointments["a1"] = {"data": {"id": "a1", "patientId": PATIENT_ID, "status": "SCHEDULED"}}

    check = get_integrations().appointments.validate_for_patient("a1", PATIENT_ID)
    assert check.ok
    assert check.appointment["id"] == "a1"


def test_appointment_problems(upstream):
    upstream.appointments["other"] = {"id": "other", "patient_id": "someone-else", "status": "SCHEDULED"}
    upstream.appointments["gone"] = {"id": "gone", "patientId": PATIENT_ID, "status": "cancelled"}
    appointments = get_integrations().appointments

    assert appointments.validate_for_patient(None, PATIENT_ID).reason is AppointmentProblem.NO_APPOINTMENT
    assert appointments.validate_for_patient("missing", PATIENT_ID).reason is AppointmentProblem.NOT_FOUND
    assert appointments.validate_for_patient("other", PATIENT_ID).reason is AppointmentProblem.PATIENT_MISMATCH
    assert appointments.validate_for_patient("gone", PATIENT_ID).reason is AppointmentProblem.INVALID_STATUS


def test_allergies_accept_names_and_objects(upstream):
    upstream.allergies[PATIENT_ID] = ["Penicilina", {"name": "Ibuprofeno"}, {"other": 1}, ""]

    assert get_integrations().allergies.get_allergies(PATIENT_ID) == ["Penicilina", "Ibuprofeno"]


def test_allergies_failure_means_none(upstream):
    upstream.users_down = True
    assert get_integrations().allergies.get_allergies(PATIENT_ID) == []


def test_missing_allergy_record_means_none(upstream):
    assert get_integrations().allergies.get_allergies("nobody") == []
