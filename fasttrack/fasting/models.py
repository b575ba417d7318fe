# -*- coding: utf-8 -*-
"""Fasting — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, model_validator

from ..timeutil import MS_PER_HOUR


# label -> target fast length in hours
PROTOCOLS: Dict[str, int] = {
    "16:8": 16,
    "18:6": 18,
    "20:4": 20,
    "OMAD": 23,
}


def goal_ms(protocol: float) -> float:
    return protocol * MS_PER_HOUR


def protocol_label(protocol: float) -> str:
    for label, hours in PROTOCOLS.items():
        if hours == protocol:
            return label
    return f"{protocol:g}h"


class FastState(str, Enum):
    idle = "idle"
    active = "active"


class ActiveFast(BaseModel):
    start: int
    protocol: float = Field(..., gt=0)


class FastingSession(BaseModel):
    id: Optional[int] = None
    start: int
    end: Optional[int] = None
    duration: Optional[int] = None
    protocol: float = Field(..., gt=0)

    @model_validator(mode="after")
    def _fill_identity(self) -> "FastingSession":
        # Older records may lack an id; the start instant doubles as identity.
        if self.id is None:
            self.id = self.start
        if self.end is not None and self.duration is None:
            self.duration = self.end - self.start
        return self

    @property
    def key(self) -> int:
        return self.id if self.id is not None else self.start

    @property
    def is_active(self) -> bool:
        return self.end is None

    @property
    def goal_ms(self) -> float:
        return goal_ms(self.protocol)

    @property
    def goal_reached(self) -> bool:
        return self.duration is not None and self.duration >= self.goal_ms

    @property
    def goal_pct(self) -> int:
        if not self.duration:
            return 0
        return min(round(self.duration / self.goal_ms * 100), 100)

    @classmethod
    def completed(cls, active: ActiveFast, end: int) -> "FastingSession":
        return cls(
            id=active.start,
            start=active.start,
            end=end,
            duration=end - active.start,
            protocol=active.protocol,
        )
