# -*- coding: utf-8 -*-
"""Fasting — single active session state machine.

Idle --start()--> Active --end()--> Idle. The completed session is handed to
the event log store; the active singleton is a projection that the store
persists separately so the live timer never touches the log.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from ..config import settings
from ..store import EventLogStore
from ..timeutil import now_ms
from .models import ActiveFast, FastingSession, FastState, goal_ms

logger = logging.getLogger(__name__)

TickCallback = Callable[[int], None]


class GoalSignal:
    """One-shot "goal reached" notification with a fixed lifetime.

    Purely ephemeral feedback; whether a stored session met its goal is always
    recomputed from ``FastingSession.goal_reached``.
    """

    def __init__(self, lifetime_sec: float) -> None:
        self.lifetime_ms = int(lifetime_sec * 1000)
        self.fired_at: Optional[int] = None
        self.session: Optional[FastingSession] = None
        self._listeners: List[Callable[[FastingSession], None]] = []

    def subscribe(self, listener: Callable[[FastingSession], None]) -> None:
        self._listeners.append(listener)

    def fire(self, session: FastingSession, now: int) -> None:
        self.fired_at = now
        self.session = session
        for listener in list(self._listeners):
            listener(session)

    def active(self, now: int) -> bool:
        if self.fired_at is None:
            return False
        if now - self.fired_at >= self.lifetime_ms:
            self.clear()
            return False
        return True

    def clear(self) -> None:
        self.fired_at = None
        self.session = None


class FastingTimer:
    def __init__(
        self,
        store: EventLogStore,
        *,
        clock: Callable[[], int] = now_ms,
        tick_interval: Optional[float] = None,
        celebrate_sec: Optional[float] = None,
        protocol: Optional[float] = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.tick_interval = tick_interval if tick_interval is not None else settings.tick_sec
        self.protocol: float = protocol or settings.default_protocol
        self.elapsed: int = 0
        self.celebration = GoalSignal(settings.celebrate_sec if celebrate_sec is None else celebrate_sec)
        self._ticker: Optional[asyncio.Task] = None
        self._on_tick: Optional[TickCallback] = None

    # ---- state ----

    @property
    def active(self) -> Optional[ActiveFast]:
        return self.store.active_fast

    @property
    def state(self) -> FastState:
        return FastState.active if self.active is not None else FastState.idle

    def restore(self) -> FastState:
        """Adopt whatever active fast the store loaded."""
        self.tick()
        if self.active is None:
            self.stop_ticker()
        else:
            self._ensure_ticker()
        return self.state

    def select_protocol(self, protocol: float) -> bool:
        """Pick the protocol for the next fast; ignored while a fast is running."""
        if self.active is not None or protocol <= 0:
            return False
        self.protocol = protocol
        return True

    # ---- transitions ----

    def start(self, protocol: Optional[float] = None) -> Optional[ActiveFast]:
        if self.active is not None:
            logger.info("Fast already running since %s; start ignored", self.active.start)
            return None
        if protocol is not None and not self.select_protocol(protocol):
            logger.info("Rejected fast start with protocol %r", protocol)
            return None
        fast = ActiveFast(start=self.clock(), protocol=self.protocol)
        self.store.set_active_fast(fast)
        self.elapsed = 0
        logger.info("Fast started (%sh)", fast.protocol)
        self._ensure_ticker()
        return fast

    def end(self) -> Optional[FastingSession]:
        active = self.active
        if active is None:
            return None
        now = self.clock()
        session = FastingSession.completed(active, now)
        self.store.add_fasting(session)
        self.store.set_active_fast(None)
        self.elapsed = 0
        self.stop_ticker()
        logger.info("Fast ended after %.2fh (goal %sh)", session.duration / 3_600_000, session.protocol)
        if session.goal_reached:
            self.celebration.fire(session, now)
        return session

    # ---- live values ----

    def tick(self) -> int:
        active = self.active
        self.elapsed = max(0, self.clock() - active.start) if active is not None else 0
        return self.elapsed

    @property
    def goal_ms(self) -> float:
        active = self.active
        return goal_ms(active.protocol if active is not None else self.protocol)

    @property
    def progress(self) -> float:
        if self.active is None:
            return 0.0
        return min(self.elapsed / self.goal_ms * 100, 100.0)

    @property
    def goal_reached(self) -> bool:
        return self.active is not None and self.elapsed >= self.goal_ms

    @property
    def remaining_ms(self) -> int:
        if self.active is None:
            return 0
        return max(0, int(self.goal_ms - self.elapsed))

    # ---- ticker ----

    def start_ticker(self, on_tick: Optional[TickCallback] = None) -> Optional[asyncio.Task]:
        """Recompute elapsed every ``tick_interval`` seconds while a fast runs.

        Requires a running event loop; without one the caller polls ``tick()``.
        """
        if on_tick is not None:
            self._on_tick = on_tick
        return self._ensure_ticker()

    def _ensure_ticker(self) -> Optional[asyncio.Task]:
        if self.active is None:
            return None
        if self._ticker is not None and not self._ticker.done():
            return self._ticker
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None
        self._ticker = loop.create_task(self._run_ticker())
        return self._ticker

    async def _run_ticker(self) -> None:
        try:
            while self.active is not None:
                elapsed = self.tick()
                if self._on_tick is not None:
                    try:
                        self._on_tick(elapsed)
                    except Exception:
                        logger.exception("Fasting tick callback failed")
                await asyncio.sleep(self.tick_interval)
        except asyncio.CancelledError:
            logger.debug("Fasting ticker cancelled")
            raise

    def stop_ticker(self) -> None:
        task = self._ticker
        self._ticker = None
        if task is not None and not task.done():
            task.cancel()

    @property
    def ticking(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    async def aclose(self) -> None:
        task = self._ticker
        self.stop_ticker()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
