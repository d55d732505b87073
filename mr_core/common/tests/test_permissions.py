# mr_core/common/tests/test_permissions.py
from types import SimpleNamespace

from mr_core.common.permissions import DocumentPermission, is_admin, user_roles
from mr_core.iam.tokens import ServiceUser


def _request(user, method="GET"):
    return SimpleNamespace(user=user, method=method)


def test_roles_are_read_from_claims():
    user = ServiceUser({"id": "u1", "role": "medico", "roles": ["enfermero"]})
    assert user_roles(user) == {"MEDICO", "ENFERMERO"}
    assert not is_admin(user)


def test_admin_bypasses_action_map():
    admin = ServiceUser({"id": "a1", "role": "ADMINISTRADOR"})
    view = SimpleNamespace(action="anything", kwargs={})
    assert DocumentPermission().has_permission(_request(admin, "POST"), view)


def test_nurse_cannot_delete_documents():
    nurse = ServiceUser({"id": "n1", "role": "ENFERMERO"})
    view = SimpleNamespace(action="destroy", kwargs={"pk": "x"})
    assert not DocumentPermission().has_permission(_request(nurse, "DELETE"), view)


def test_unknown_write_action_is_denied():
    doctor = ServiceUser({"id": "d1", "role": "MEDICO"})
    view = SimpleNamespace(action="purge", kwargs={})
    assert not DocumentPermission().has_permission(_request(doctor, "POST"), view)
