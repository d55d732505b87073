# mr_core/integrations/identity.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from mr_core.integrations.config import IntegrationSettings
from mr_core.integrations.http import Lookup, Resolution, ServiceClient, fill_id

logger = logging.getLogger(__name__)

USER_SERVICE = "users"
AUTH_SERVICE = "auth"


class IdentityKind(str, Enum):
    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"


@dataclass(frozen=True)
class Endpoint:
    """One step of a fallback chain: a path template on a named upstream service."""
    service: str
    path: str

    def resolve(self, clients: Mapping[str, ServiceClient], identity_id: str, auth_token: Optional[str]) -> Lookup:
        client = clients.get(self.service)
        if client is None:
            return Lookup(Resolution.UNKNOWN)
        return client.get(fill_id(self.path, identity_id), auth_token=auth_token)


class IdentityClient:
    """
    Answers "does this patient/doctor exist?" against the user and auth services.

    Each chain is walked in order; the first FOUND wins. NOT_FOUND and UNKNOWN both move
    on to the next endpoint, so a down service and an absent identity look the same to callers.
    """

    def __init__(self, config: IntegrationSettings, clients: Mapping[str, ServiceClient]):
        self.config = config
        self.clients = dict(clients)

        users = USER_SERVICE if USER_SERVICE in self.clients else None
        auth = AUTH_SERVICE if AUTH_SERVICE in self.clients else None

        def chain(*steps: tuple[Optional[str], str]) -> list[Endpoint]:
            return [Endpoint(service, path) for service, path in steps if service]

        self.chains: dict[IdentityKind, list[Endpoint]] = {
            IdentityKind.PATIENT: chain(
                (users, "/api/v1/users/{id}"),
                (users, "/api/v1/users/patients/{id}"),
                (auth, config.auth_user_path),
                (auth, config.auth_patient_path),
            ),
            IdentityKind.DOCTOR: chain(
                (users, "/api/v1/users/{id}"),
                (auth, config.auth_user_path),
            ),
        }
        self.user_details_chain = chain(
            (users, "/api/v1/users/{id}"),
            (auth, config.auth_user_path),
        )
        self.patient_info_chain = chain(
            (users, "/api/v1/users/patients/{id}"),
            (users, "/api/v1/users/by-user/{id}"),
            (auth, config.auth_patient_path),
            (auth, config.auth_user_path),
        )

    def _enabled(self, kind: IdentityKind) -> bool:
        if kind is IdentityKind.PATIENT:
            return self.config.validate_patient
        return self.config.validate_doctor

    def first_found(self, chain: Sequence[Endpoint], identity_id: str, auth_token: Optional[str]) -> Optional[Any]:
        for endpoint in chain:
            lookup = endpoint.resolve(self.clients, identity_id, auth_token)
            if lookup.found:
                return lookup.data
        return None

    def verify_exists(self, kind: IdentityKind, identity_id: str, auth_token: Optional[str] = None) -> bool:
        if not self._enabled(kind):
            return True
        if not identity_id:
            return False

        found = self.first_found(self.chains[kind], str(identity_id), auth_token) is not None
        if not found:
            logger.info("%s %s not found in any identity service", kind.value, identity_id)
        return found

    def verify_patient_and_doctor(
        self,
        patient_id: str,
        doctor_id: str,
        auth_token: Optional[str] = None,
    ) -> tuple[bool, bool]:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="identity") as pool:
            patient = pool.submit(self.verify_exists, IdentityKind.PATIENT, patient_id, auth_token)
            doctor = pool.submit(self.verify_exists, IdentityKind.DOCTOR, doctor_id, auth_token)
            return patient.result(), doctor.result()

    def get_user_details(self, user_id: str, auth_token: Optional[str] = None) -> Optional[dict]:
        data = self.first_found(self.user_details_chain, str(user_id), auth_token)
        return _details(data)

    def get_patient_info(self, patient_id: str, auth_token: Optional[str] = None) -> Optional[dict]:
        data = self.first_found(self.patient_info_chain, str(patient_id), auth_token)
        return _details(data)


def unwrap(payload: Any) -> Optional[Any]:
    """Upstream services answer either the entity itself or `{"data": entity}`."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload


def _details(payload: Any) -> Optional[dict]:
    data = unwrap(payload)
    return data if isinstance(data, dict) else None
