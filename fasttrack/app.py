# -*- coding: utf-8 -*-
"""Tracker facade — wires storage, store, fasting timer, edits and presets.

The presentation layer holds one ``TrackerApp`` and calls into it; views read
``dashboard()`` and the store's lists after every action.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .config import settings
from .edits import EditEngine
from .fasting.models import FastingSession
from .fasting.session import FastingTimer
from .persistence import JsonFileStorage, KeyValueStorage, StorageKeys
from .stats.aggregate import build_dashboard
from .stats.models import Dashboard
from .store import EventLogStore
from .timeutil import now_ms
from .water.models import WaterEntry
from .water.presets import WaterPresetPicker

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class TrackerApp:
    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        *,
        clock: Callable[[], int] = now_ms,
        keys: Optional[StorageKeys] = None,
        tick_interval: Optional[float] = None,
    ) -> None:
        self.clock = clock
        self.storage = storage if storage is not None else JsonFileStorage(settings.data_root)
        self.store = EventLogStore(self.storage, clock=clock, keys=keys)
        self.timer = FastingTimer(self.store, clock=clock, tick_interval=tick_interval)
        self.edits = EditEngine(self.store)
        self.water = WaterPresetPicker(self.store)

    def load(self) -> "TrackerApp":
        self.store.load()
        self.water = WaterPresetPicker(self.store)
        self.timer.restore()
        logger.info("Tracker loaded (%s)", self.timer.state.value)
        return self

    def dashboard(self) -> Dashboard:
        return build_dashboard(self.store.snapshot(), self.clock())

    def recent_fasts(self, limit: int = 5) -> List[FastingSession]:
        return list(self.store.fasting[:limit])

    def recent_water(self, limit: int = 20) -> List[WaterEntry]:
        return list(self.store.water[:limit])

    async def aclose(self) -> None:
        await self.timer.aclose()
