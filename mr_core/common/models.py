# mr_core/common/models.py
from __future__ import annotations

import uuid

from django.db import models


class RecordModel(models.Model):
    """
    Base for entities owned by this service: UUID key plus creation/update timestamps.
    Patient and doctor ids belong to other services and are kept as opaque strings on the rows.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
