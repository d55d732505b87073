# mr_core/search/tests/test_patient_search.py
from datetime import datetime, timezone

import pytest
from rest_framework.exceptions import ValidationError

from mr_core.conftest import DOCTOR_ID, OTHER_PATIENT_ID, PATIENT_ID
from mr_core.diagnostics.models import Diagnostic, DiagnosticState, DiagnosticType
from mr_core.records.models import MedicalRecord
from mr_core.search.services import PATIENT_UNAVAILABLE, PatientSearchService

pytestmark = pytest.mark.django_db

URL = "/api/v1/patients/search/advanced/"


def _at(diagnostic, *args):
    Diagnostic.objects.filter(id=diagnostic.id).update(created_at=datetime(*args, tzinfo=timezone.utc))


@pytest.fixture
def hits(record, make_diagnostic):
    """Two diagnostics for pat-1, one each for pat-2 and a patient unknown upstream."""
    older = make_diagnostic(record, diagnosis="J00 - Resfriado común")
    newer = make_diagnostic(record, type=DiagnosticType.SECONDARY, diagnosis="J02 - Faringitis por resfriado")
    _at(older, 2024, 3, 1, 10)
    _at(newer, 2024, 3, 5, 10)

    other = make_diagnostic(
        MedicalRecord.objects.create(patient_id=OTHER_PATIENT_ID, physician_id=DOCTOR_ID, symptoms="Tos"),
        diagnosis="J00 - Resfriado",
    )
    _at(other, 2024, 3, 3, 23, 30)

    ghost = make_diagnostic(
        MedicalRecord.objects.create(patient_id="pat-ghost", physician_id=DOCTOR_ID, symptoms="Tos"),
        diagnosis="Resfriado leve",
    )
    _at(ghost, 2024, 2, 1, 9)

    inactive = make_diagnostic(
        MedicalRecord.objects.create(patient_id="pat-3", physician_id=DOCTOR_ID, symptoms="Tos"),
        state=DiagnosticState.INACTIVE,
        diagnosis="Resfriado",
    )
    _at(inactive, 2024, 3, 2, 9)
    return {"older": older, "newer": newer, "other": other, "ghost": ghost}


def test_at_least_one_criterion():
    with pytest.raises(ValidationError) as exc:
        PatientSearchService.parse_criteria({})
    assert "al menos un criterio" in str(exc.value.detail["detail"])


def test_requires_criteria_over_http(nurse_client):
    r = nurse_client.get(URL)
    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"


def test_bad_date(nurse_client):
    r = nurse_client.get(URL, {"date_from": "03/01/2024"})
    assert r.status_code == 400
    assert r.data["error"]["message"] == "Formato de fecha inicial inválido. Use YYYY-MM-DD"

    r = nurse_client.get(URL, {"date_to": "2024-13-40"})
    assert r.data["error"]["message"] == "Formato de fecha final inválido. Use YYYY-MM-DD"


def test_one_row_per_patient_newest_first(nurse_client, hits):
    r = nurse_client.get(URL, {"diagnostic": "resfriado"})
    assert r.status_code == 200, r.data
    assert r.data["count"] == 3

    rows = r.data["results"]
    assert [row["diagnostic"]["id"] for row in rows] == [
        str(hits["newer"].id),
        str(hits["other"].id),
        str(hits["ghost"].id),
    ]
    assert rows[0]["patient"]["fullName"] == "Carlos Ruiz"
    assert rows[2]["patient"] == {"id": "pat-ghost", "message": PATIENT_UNAVAILABLE}


def test_date_range_covers_whole_days(nurse_client, hits):
    r = nurse_client.get(URL, {"date_from": "2024-03-03", "date_to": "2024-03-03"})
    assert [row["diagnostic"]["id"] for row in r.data["results"]] == [str(hits["other"].id)]

    # Newest match for pat-1 inside the window is the older diagnostic
    r = nurse_client.get(URL, {"date_from": "2024-03-01", "date_to": "2024-03-02"})
    assert [row["diagnostic"]["id"] for row in r.data["results"]] == [str(hits["older"].id)]


def test_pagination_and_audit(nurse_client, hits, upstream):
    r = nurse_client.get(URL, {"diagnostic": "resfriado", "limit": 2, "page": 2})
    assert r.data["count"] == 3
    assert len(r.data["results"]) == 1

    event = [e for e in upstream.audit_events if e["action"] == "ADVANCED_SEARCH"][-1]
    assert event["entity"] == "Patient"
    assert event["entityId"] is None
    assert event["metadata"]["filters"]["diagnostic"] == "resfriado"
    assert event["metadata"]["resultsCount"] == 1
    assert event["metadata"]["page"] == 2
