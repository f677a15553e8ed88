"""Client side of the attendance session gateway.

The day-session state machine talks to the server only through the
:class:`AttendanceGateway` protocol. :class:`HttpAttendanceGateway` is the
cookie-session HTTP implementation on top of ``requests``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import requests

from ..common.logger import get_logger
from ..core.constants import DEFAULT_GATEWAY_TIMEOUT_SECONDS
from ..core.exceptions import GatewayRejectedError, GatewayUnavailableError

log = get_logger("client.gateway")


@dataclass(frozen=True)
class GatewayStatus:
    """Raw status payload: ``check_in_time`` is the UTC wall-clock string as sent."""

    status: str
    check_in_time: Optional[str] = None


@dataclass(frozen=True)
class GatewayTransition:
    message: str
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None


class AttendanceGateway(Protocol):
    async def get_status(self) -> GatewayStatus:
        raise NotImplementedError

    async def check_in(self) -> GatewayTransition:
        raise NotImplementedError

    async def check_out(self) -> GatewayTransition:
        raise NotImplementedError


class HttpAttendanceGateway(AttendanceGateway):
    """Talks to the Flask gateway; blocking calls run in a worker thread."""

    STATUS_PATH = "/api/attendance/status"
    CHECK_IN_PATH = "/api/attendance/check-in"
    CHECK_OUT_PATH = "/api/attendance/check-out"
    LOGIN_PATH = "/api/auth/login"

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_GATEWAY_TIMEOUT_SECONDS,
    ):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = float(timeout)

    @classmethod
    def from_settings(cls, settings, *, session: Optional[requests.Session] = None) -> "HttpAttendanceGateway":
        """Build from a settings module (`GATEWAY_BASE_URL`, `GATEWAY_TIMEOUT_SECONDS`)."""
        return cls(
            settings.GATEWAY_BASE_URL,
            session=session,
            timeout=getattr(settings, "GATEWAY_TIMEOUT_SECONDS", DEFAULT_GATEWAY_TIMEOUT_SECONDS),
        )

    def login(self, username: str, password: str) -> dict:
        """Obtain the session cookie; raises GatewayRejectedError on bad credentials."""
        return self._request("POST", self.LOGIN_PATH, json={"username": username, "password": password})

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            log.warning("%s %s failed: %s", method, path, e)
            raise GatewayUnavailableError(f"Could not reach the attendance service: {e}") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {"data": payload}

        if resp.status_code >= 500:
            raise GatewayUnavailableError(payload.get("message") or f"Attendance service error ({resp.status_code})")
        if not resp.ok:
            raise GatewayRejectedError(
                payload.get("message") or f"Request rejected ({resp.status_code})",
                status_code=resp.status_code,
            )
        return payload

    async def get_status(self) -> GatewayStatus:
        payload = await asyncio.to_thread(self._request, "GET", self.STATUS_PATH)
        return GatewayStatus(status=str(payload.get("status", "")), check_in_time=payload.get("checkInTime"))

    async def check_in(self) -> GatewayTransition:
        payload = await asyncio.to_thread(self._request, "POST", self.CHECK_IN_PATH)
        return GatewayTransition(
            message=payload.get("message", ""),
            check_in_time=payload.get("checkIn"),
            check_out_time=payload.get("checkOut"),
        )

    async def check_out(self) -> GatewayTransition:
        payload = await asyncio.to_thread(self._request, "POST", self.CHECK_OUT_PATH)
        return GatewayTransition(
            message=payload.get("message", ""),
            check_in_time=payload.get("checkIn"),
            check_out_time=payload.get("checkOut"),
        )
