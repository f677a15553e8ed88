from __future__ import annotations

from typing import Protocol

from ..common.logger import get_logger
from ..core.enums import Severity


class NotificationSink(Protocol):
    """Fire-and-forget toasts; implementations must not raise."""

    def notify(self, message: str, severity: Severity) -> None:
        raise NotImplementedError


class LoggingNotificationSink:
    """Default sink for headless use: toasts become log lines."""

    _levels = {
        Severity.SUCCESS: "info",
        Severity.INFO: "info",
        Severity.WARNING: "warning",
        Severity.ERROR: "error",
    }

    def __init__(self, name: str = "client.notifications"):
        self._log = get_logger(name)

    def notify(self, message: str, severity: Severity) -> None:
        getattr(self._log, self._levels.get(severity, "info"))("[%s] %s", severity.value, message)
