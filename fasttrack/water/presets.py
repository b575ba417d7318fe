# -*- coding: utf-8 -*-
"""Water — quick-select preset amounts and the current selection."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..store import EventLogStore
from .models import DEFAULT_PRESETS, FALLBACK_AMOUNT, MAX_PRESET, WaterEntry

logger = logging.getLogger(__name__)


class WaterPresetPicker:
    """Tracks which amount the next "log water" action records."""

    def __init__(self, store: EventLogStore, selected: Optional[int] = None) -> None:
        self.store = store
        presets = store.water_presets
        self.selected: float = selected or (presets[0] if presets else FALLBACK_AMOUNT)

    @property
    def presets(self) -> List[int]:
        return list(self.store.water_presets)

    def select(self, amount: float) -> float:
        if amount <= 0:
            raise ValueError("Water amount must be positive")
        self.selected = amount
        return self.selected

    def add_custom(self, value: object) -> bool:
        try:
            amount = int(str(value).strip())
        except (TypeError, ValueError):
            return False
        if amount <= 0 or amount > MAX_PRESET:
            return False
        if amount not in self.store.water_presets:
            self.store.set_water_presets([*self.store.water_presets, amount])
        self.selected = amount
        return True

    def remove(self, value: int) -> bool:
        if value in DEFAULT_PRESETS:
            logger.debug("Default preset %s cannot be removed", value)
            return False
        remaining = [p for p in self.store.water_presets if p != value]
        if len(remaining) == len(self.store.water_presets):
            return False
        self.store.set_water_presets(remaining)
        if self.selected == value:
            self.selected = self.store.water_presets[0] if self.store.water_presets else FALLBACK_AMOUNT
        return True

    def log(self) -> WaterEntry:
        return self.store.add_water(self.selected)
