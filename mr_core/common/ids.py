# mr_core/common/ids.py
from __future__ import annotations

from typing import Optional
from uuid import UUID


def parse_uuid(value) -> Optional[UUID]:
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None
