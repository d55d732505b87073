# mr_core/integrations/allergies.py
from __future__ import annotations

import logging
from typing import Optional

from mr_core.integrations.http import ServiceClient, fill_id

logger = logging.getLogger(__name__)

ALLERGIES_PATH = "/patients/{id}/allergies"


class AllergyClient:
    """
    Reads a patient's recorded allergies from the user service.
    Best-effort: any failure means "no known allergies".
    """

    def __init__(self, client: Optional[ServiceClient]):
        self.client = client

    def get_allergies(self, patient_id: str, auth_token: Optional[str] = None) -> list[str]:
        if self.client is None:
            return []

        lookup = self.client.get(fill_id(ALLERGIES_PATH, patient_id), auth_token=auth_token)
        if not lookup.found:
            if lookup.status_code != 404:
                logger.warning("Allergies for patient %s unavailable (%s)", patient_id, lookup.resolution.value)
            return []

        raw = lookup.data.get("allergies") if isinstance(lookup.data, dict) else lookup.data
        if not isinstance(raw, list):
            return []

        names: list[str] = []
        for item in raw:
            name = item.get("name") if isinstance(item, dict) else item
            if isinstance(name, str) and name.strip():
                names.append(name.strip())
        return names
