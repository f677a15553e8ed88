from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import as_utc, format_hms, now_utc
from ..core.constants import IDLE_DURATION_DISPLAY, TICK_INTERVAL_SECONDS
from ..core.enums import SessionStatus
from .session import DaySession, DaySessionView


class DurationTicker:
    """Live ``HH:MM:SS`` since the check-in anchor.

    Display only: it is rebuilt from the session after a reload and never
    keeps elapsed time of its own. Runs as one asyncio task while a session
    is clocked in; without a running loop, call :meth:`tick` yourself.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = now_utc,
        interval: float = TICK_INTERVAL_SECONDS,
        on_tick: Optional[Callable[[str], None]] = None,
    ):
        self._clock = clock
        self._interval = float(interval)
        self._on_tick = on_tick
        self._anchor: Optional[datetime] = None
        self._display = IDLE_DURATION_DISPLAY
        self._task: Optional[asyncio.Task] = None

    @property
    def display(self) -> str:
        return self._display

    @property
    def anchor(self) -> Optional[datetime]:
        return self._anchor

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _show(self, text: str) -> None:
        self._display = text
        if self._on_tick:
            self._on_tick(text)

    def tick(self) -> str:
        if self._anchor is None:
            self._show(IDLE_DURATION_DISPLAY)
        else:
            self._show(format_hms((as_utc(self._clock()) - self._anchor).total_seconds()))
        return self._display

    def start(self, anchor: datetime) -> None:
        self._anchor = as_utc(anchor)
        self.tick()
        if self.running:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._anchor = None
        self._show(IDLE_DURATION_DISPLAY)

    async def _run(self) -> None:
        while self._anchor is not None:
            await asyncio.sleep(self._interval)
            if self._anchor is None:
                break
            self.tick()

    def follow(self, view: DaySessionView) -> None:
        """Start, re-anchor or stop according to a session view."""

        if view.status == SessionStatus.CLOCKED_IN and view.check_in_at is not None:
            if self._anchor != as_utc(view.check_in_at) or not self.running:
                self.start(view.check_in_at)
        elif self._anchor is not None or self._display != IDLE_DURATION_DISPLAY:
            self.stop()

    def bind(self, session: DaySession) -> Callable[[], None]:
        return session.subscribe(self.follow)
