# mr_core/integrations/http.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "medical-records-service/0.1"


class Resolution(str, Enum):
    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"
    # Network error, timeout or a non-2xx other than 404
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Lookup:
    resolution: Resolution
    data: Any = None
    status_code: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.resolution is Resolution.FOUND


def fill_id(template: str, value: str) -> str:
    """Substitute `{id}` in a path template with the URL-encoded value."""
    return (template or "").replace("{id}", quote(str(value), safe=""))


def auth_headers(auth_token: Optional[str]) -> dict[str, str]:
    # The inbound Authorization header is forwarded verbatim.
    return {"Authorization": auth_token} if auth_token else {}


def _is_empty(payload: Any) -> bool:
    return payload is None or payload == "" or payload == {} or payload == []


class ServiceClient:
    """
    Pooled synchronous client bound to one upstream base URL.

    GET lookups never raise: they resolve to FOUND / NOT_FOUND / UNKNOWN.
    There are no retries; a timeout is a negative result.
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.name = name
        self.base_url = base_url
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
        )

    def get(self, path: str, *, auth_token: Optional[str] = None) -> Lookup:
        try:
            r = self._client.get(path, headers=auth_headers(auth_token))
        except httpx.HTTPError as e:
            logger.warning("GET %s%s failed (%s): %s", self.base_url, path, self.name, e)
            return Lookup(Resolution.UNKNOWN)

        if r.status_code == 404:
            return Lookup(Resolution.NOT_FOUND, status_code=r.status_code)
        if not r.is_success:
            logger.warning("GET %s%s answered %s (%s)", self.base_url, path, r.status_code, self.name)
            return Lookup(Resolution.UNKNOWN, status_code=r.status_code)

        if not r.content:
            return Lookup(Resolution.NOT_FOUND, status_code=r.status_code)
        try:
            payload = r.json()
        except ValueError:
            # Any non-empty success body counts as found
            logger.info("GET %s%s returned a non-JSON body (%s)", self.base_url, path, self.name)
            return Lookup(Resolution.FOUND, data=r.text, status_code=r.status_code)

        if _is_empty(payload):
            return Lookup(Resolution.NOT_FOUND, status_code=r.status_code)
        return Lookup(Resolution.FOUND, data=payload, status_code=r.status_code)

    def post(self, path: str, payload: dict, *, auth_token: Optional[str] = None) -> httpx.Response:
        r = self._client.post(path, json=payload, headers=auth_headers(auth_token))
        r.raise_for_status()
        return r

    def close(self) -> None:
        self._client.close()
