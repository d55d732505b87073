# mr_core/common/tests/test_migrations.py
from io import StringIO

import pytest
from django.core.management import call_command
from django.db import connection

pytestmark = pytest.mark.django_db


def test_models_have_no_pending_migrations():
    out = StringIO()
    call_command("makemigrations", "--check", "--dry-run", stdout=out)
    assert "No changes detected" in out.getvalue()


def test_active_primary_constraint_is_installed():
    with connection.cursor() as cursor:
        constraints = connection.introspection.get_constraints(cursor, "diagnostics_diagnostic")
    assert "uq_active_primary_diagnostic_per_record" in constraints
