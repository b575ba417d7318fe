# -*- coding: utf-8 -*-
"""Water — Pydantic models."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from pydantic import BaseModel, Field

DEFAULT_PRESETS: Tuple[int, ...] = (8, 16, 24)
MAX_PRESET = 9999
FALLBACK_AMOUNT = 8


class WaterEntry(BaseModel):
    id: int
    amount: float = Field(..., gt=0, description="fl oz")
    ts: int

    @property
    def key(self) -> int:
        return self.id


def normalize_presets(values: Iterable[object]) -> List[int]:
    """Deduplicate, drop non-positive values, merge defaults, sort ascending."""
    out = set(DEFAULT_PRESETS)
    for value in values or []:
        try:
            amount = int(value)
        except (TypeError, ValueError):
            continue
        if 0 < amount <= MAX_PRESET:
            out.add(amount)
    return sorted(out)
