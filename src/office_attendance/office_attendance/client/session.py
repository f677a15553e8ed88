"""Day-session state machine for one employee.

Owns the client's view of today's attendance (``not_clocked_in`` →
``clocked_in`` → ``clocked_out``) and the anchor instant the duration ticker
counts from. The gateway is the authority: local state only moves after the
gateway confirmed a transition, and ``refresh_status`` replaces it wholesale.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Awaitable, Callable, Optional

from ..common.datetime_utils import anchor_from_utc_wall_clock, now_utc, parse_wall_clock
from ..common.logger import get_logger
from ..core.enums import SessionStatus, Severity, TransitionPhase
from ..core.exceptions import GatewayError, GatewayRejectedError, GatewayUnavailableError
from .gateway import AttendanceGateway, GatewayStatus, GatewayTransition
from .notifications import LoggingNotificationSink, NotificationSink

log = get_logger("client.session")

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class DaySessionView:
    status: SessionStatus = SessionStatus.NOT_CLOCKED_IN
    check_in_at: Optional[datetime] = None
    phase: TransitionPhase = TransitionPhase.IDLE
    pending: Optional[SessionStatus] = None
    error: Optional[str] = None
    needs_refresh: bool = False
    loaded: bool = False

    @property
    def is_checked_in(self) -> bool:
        return self.status == SessionStatus.CLOCKED_IN

    @property
    def has_checked_out(self) -> bool:
        return self.status == SessionStatus.CLOCKED_OUT


@dataclass(frozen=True)
class TransitionResult:
    ok: bool
    phase: TransitionPhase
    message: Optional[str] = None
    retryable: bool = False
    ignored: bool = False


Listener = Callable[[DaySessionView], None]


def reconcile_status(payload: GatewayStatus, *, now: datetime) -> tuple[SessionStatus, Optional[datetime]]:
    """Turn a raw status payload into ``(status, anchor)``.

    A ``clocked_in`` payload without a readable ``checkInTime`` cannot anchor
    the ticker and is read as ``not_clocked_in``.
    """

    try:
        status = SessionStatus(payload.status)
    except ValueError:
        log.warning("unknown session status from gateway: %r", payload.status)
        return SessionStatus.NOT_CLOCKED_IN, None

    if status != SessionStatus.CLOCKED_IN:
        return status, None

    try:
        wall_clock = parse_wall_clock(payload.check_in_time or "")
    except ValueError:
        log.warning("clocked_in without a usable checkInTime: %r", payload.check_in_time)
        return SessionStatus.NOT_CLOCKED_IN, None
    return status, anchor_from_utc_wall_clock(wall_clock, now=now)


class DaySession:
    """Single writer of the current-attendance view; readers subscribe."""

    def __init__(
        self,
        gateway: AttendanceGateway,
        *,
        notifier: Optional[NotificationSink] = None,
        clock: Clock = now_utc,
        timeout: Optional[float] = None,
        reconcile_on_conflict: bool = True,
    ):
        self._gateway = gateway
        self._notifier = notifier or LoggingNotificationSink()
        self._clock = clock
        self._timeout = timeout
        self._reconcile_on_conflict = reconcile_on_conflict
        self._view = DaySessionView()
        self._listeners: list[Listener] = []
        self._in_flight = False

    @property
    def view(self) -> DaySessionView:
        return self._view

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; it is called with the current view right away."""

        self._listeners.append(listener)
        listener(self._view)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, view: DaySessionView) -> None:
        self._view = view
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                log.exception("session listener %r failed", listener)

    async def _call(self, call: Callable[[], Awaitable]):
        if self._timeout is None:
            return await call()
        try:
            return await asyncio.wait_for(call(), self._timeout)
        except asyncio.TimeoutError as e:
            raise GatewayUnavailableError("The attendance service did not answer in time") from e

    async def refresh_status(self) -> DaySessionView:
        """Replace local state with the gateway's view of today."""

        try:
            payload = await self._call(self._gateway.get_status)
        except GatewayError as e:
            log.warning("status refresh failed: %s", e)
            self._publish(replace(self._view, loaded=True, error=str(e)))
            return self._view

        status, anchor = reconcile_status(payload, now=self._clock())
        self._publish(
            DaySessionView(
                status=status,
                check_in_at=anchor,
                phase=self._view.phase if self._in_flight else TransitionPhase.IDLE,
                pending=self._view.pending if self._in_flight else None,
                loaded=True,
            )
        )
        log.debug("status refreshed: %s anchor=%s", status.value, anchor)
        return self._view

    async def check_in(self) -> TransitionResult:
        if self._view.status != SessionStatus.NOT_CLOCKED_IN:
            return TransitionResult(
                ok=False,
                phase=self._view.phase,
                message="Already clocked in or out today",
                ignored=True,
            )
        return await self._transition(
            target=SessionStatus.CLOCKED_IN,
            call=self._gateway.check_in,
            label="Clock In",
            commit=self._commit_check_in,
        )

    async def check_out(self) -> TransitionResult:
        if self._view.status != SessionStatus.CLOCKED_IN:
            return TransitionResult(
                ok=False,
                phase=self._view.phase,
                message="Not clocked in",
                ignored=True,
            )
        return await self._transition(
            target=SessionStatus.CLOCKED_OUT,
            call=self._gateway.check_out,
            label="Clock Out",
            commit=self._commit_check_out,
        )

    def _commit_check_in(self, response: GatewayTransition) -> DaySessionView:
        now = self._clock()
        _, anchor = reconcile_status(
            GatewayStatus(status=SessionStatus.CLOCKED_IN.value, check_in_time=response.check_in_time),
            now=now,
        )
        return DaySessionView(
            status=SessionStatus.CLOCKED_IN,
            check_in_at=anchor or now,
            phase=TransitionPhase.COMMITTED,
            needs_refresh=True,
            loaded=True,
        )

    def _commit_check_out(self, response: GatewayTransition) -> DaySessionView:
        return DaySessionView(
            status=SessionStatus.CLOCKED_OUT,
            check_in_at=None,
            phase=TransitionPhase.COMMITTED,
            needs_refresh=True,
            loaded=True,
        )

    async def _transition(
        self,
        *,
        target: SessionStatus,
        call: Callable[[], Awaitable[GatewayTransition]],
        label: str,
        commit: Callable[[GatewayTransition], DaySessionView],
    ) -> TransitionResult:
        if self._in_flight:
            log.debug("%s ignored: another transition is in flight", label)
            return TransitionResult(ok=False, phase=TransitionPhase.PENDING, message="Request in progress", ignored=True)

        self._in_flight = True
        before = self._view
        self._publish(replace(before, phase=TransitionPhase.PENDING, pending=target, error=None))
        try:
            response = await self._call(call)
        except GatewayError as e:
            self._in_flight = False
            message = str(e) if not e.retryable else f"{label} failed: {e}. Please retry."
            self._publish(
                replace(
                    before,
                    phase=TransitionPhase.ROLLED_BACK,
                    pending=None,
                    error=message,
                    needs_refresh=True,
                )
            )
            self._notifier.notify(message, Severity.ERROR)
            log.info("%s rolled back: %s", label, e)
            if isinstance(e, GatewayRejectedError) and self._reconcile_on_conflict:
                await self.refresh_status()
            return TransitionResult(
                ok=False,
                phase=TransitionPhase.ROLLED_BACK,
                message=message,
                retryable=e.retryable,
            )
        except asyncio.CancelledError:
            self._in_flight = False
            self._publish(replace(before, phase=TransitionPhase.ROLLED_BACK, pending=None, error=f"{label} cancelled"))
            raise
        except Exception as e:
            self._in_flight = False
            log.exception("%s failed unexpectedly", label)
            message = f"{label} failed: {e!r}"
            self._publish(replace(before, phase=TransitionPhase.ROLLED_BACK, pending=None, error=message, needs_refresh=True))
            self._notifier.notify(message, Severity.ERROR)
            return TransitionResult(ok=False, phase=TransitionPhase.ROLLED_BACK, message=message)
        finally:
            self._in_flight = False

        self._publish(commit(response))
        self._notifier.notify(f"{label} successful!", Severity.SUCCESS)
        log.info("%s committed, anchor=%s", label, self._view.check_in_at)
        return TransitionResult(ok=True, phase=TransitionPhase.COMMITTED, message=response.message or None)
