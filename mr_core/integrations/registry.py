# mr_core/integrations/registry.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import httpx

from mr_core.integrations.allergies import AllergyClient
from mr_core.integrations.appointments import AppointmentClient
from mr_core.integrations.config import IntegrationSettings
from mr_core.integrations.http import ServiceClient
from mr_core.integrations.identity import AUTH_SERVICE, USER_SERVICE, IdentityClient

logger = logging.getLogger(__name__)


@dataclass
class Integrations:
    """Process-wide upstream clients, built once from settings."""
    config: IntegrationSettings
    identity: IdentityClient
    appointments: AppointmentClient
    allergies: AllergyClient
    audit: Optional[ServiceClient]
    clients: list[ServiceClient]

    def close(self) -> None:
        for c in self.clients:
            c.close()


_lock = threading.Lock()
_instance: Optional[Integrations] = None
_transport: Optional[httpx.BaseTransport] = None


def build_integrations(
    config: IntegrationSettings,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> Integrations:
    def client(name: str, base_url: str) -> Optional[ServiceClient]:
        if not base_url:
            return None
        return ServiceClient(name, base_url, timeout=config.timeout_seconds, transport=transport)

    users = client(USER_SERVICE, config.user_service_url)
    auth = client(AUTH_SERVICE, config.auth_service_url)
    audit = client("audit", config.audit_service_url)
    appointments = client("appointments", config.appointment_service_url)

    identity_clients = {name: c for name, c in ((USER_SERVICE, users), (AUTH_SERVICE, auth)) if c is not None}

    return Integrations(
        config=config,
        identity=IdentityClient(config, identity_clients),
        appointments=AppointmentClient(appointments, config.appointment_by_id_path),
        allergies=AllergyClient(users),
        audit=audit,
        clients=[c for c in (users, auth, audit, appointments) if c is not None],
    )


def get_integrations() -> Integrations:
    global _instance
    if _instance is None:
        with _lock:
            if _instance is None:
                _instance = build_integrations(IntegrationSettings.from_django(), transport=_transport)
    return _instance


def reset_integrations(*, transport: Optional[httpx.BaseTransport] = None) -> None:
    """
    Drop the cached clients; the next call rebuilds them from settings.
    `transport` replaces the network layer (used with httpx.MockTransport in tests).
    """
    global _instance, _transport
    with _lock:
        if _instance is not None:
            _instance.close()
        _instance = None
        _transport = transport


def on_setting_changed(*, setting, **kwargs) -> None:
    if setting == "INTEGRATIONS":
        global _instance
        with _lock:
            if _instance is not None:
                _instance.close()
            _instance = None
