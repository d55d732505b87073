# mr_core/diseases/models.py
from django.db import models

from mr_core.common.models import RecordModel


class DiseaseCatalog(RecordModel):
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "diseases_catalog"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"
