# -*- coding: utf-8 -*-
"""Food — Pydantic models."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class FoodCategory(str, Enum):
    breakfast = "🥣 Breakfast"
    lunch = "🥗 Lunch"
    dinner = "🍽 Dinner"
    snack = "🍎 Snack"
    drink = "☕ Drink"


def parse_calories(value: object) -> int:
    """Lenient calorie parse: leading integer of the value, otherwise 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value) if value == value else 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


class FoodEntry(BaseModel):
    id: int
    name: str = ""
    cal: Optional[Union[int, float, str]] = Field("", description="Numeric string, number or empty")
    cat: FoodCategory = FoodCategory.breakfast
    note: Optional[str] = ""
    ts: int

    @property
    def key(self) -> int:
        return self.id

    @property
    def calories(self) -> int:
        return parse_calories(self.cal)
