# -*- coding: utf-8 -*-
"""Event log store — owns the fasting/food/water logs and water settings.

Every mutator updates memory first and then persists the affected key. A
failed write is logged and dropped; memory stays authoritative.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from .config import settings
from .fasting.models import ActiveFast, FastingSession
from .food.models import FoodCategory, FoodEntry
from .persistence import KeyValueStorage, StorageKeys, load_json, save_json
from .timeutil import now_ms
from .water.models import DEFAULT_PRESETS, WaterEntry, normalize_presets

logger = logging.getLogger(__name__)

Record = Union[FastingSession, FoodEntry, WaterEntry]


class Collection(str, Enum):
    fasting = "fasting"
    food = "food"
    water = "water"


_MODELS: Dict[Collection, Type[BaseModel]] = {
    Collection.fasting: FastingSession,
    Collection.food: FoodEntry,
    Collection.water: WaterEntry,
}


class InvalidEntry(ValueError):
    """Raised when a new entry fails its creation-time checks."""


@dataclass(frozen=True)
class StoreSnapshot:
    fasting: Tuple[FastingSession, ...]
    food: Tuple[FoodEntry, ...]
    water: Tuple[WaterEntry, ...]
    water_goal: float
    water_presets: Tuple[int, ...]
    active_fast: Optional[ActiveFast] = None


def _dump(record: BaseModel) -> Dict[str, Any]:
    return record.model_dump(mode="json", exclude_none=True)


def _load_records(raw: Any, model: Type[BaseModel], key: str) -> List[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Expected a list under %s, got %s; using empty log", key, type(raw).__name__)
        return []
    records: List[Any] = []
    for item in raw:
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning("Dropping invalid record under %s: %s", key, exc.errors()[:1])
            continue
    return records


class EventLogStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Callable[[], int] = now_ms,
        keys: Optional[StorageKeys] = None,
        default_water_goal: Optional[float] = None,
    ) -> None:
        self.storage = storage
        self.clock = clock
        self.keys = keys or StorageKeys.default()
        self.default_water_goal = float(default_water_goal or settings.water_goal)

        self.fasting: List[FastingSession] = []
        self.food: List[FoodEntry] = []
        self.water: List[WaterEntry] = []
        self.water_goal: float = self.default_water_goal
        self.water_presets: List[int] = list(DEFAULT_PRESETS)
        self.active_fast: Optional[ActiveFast] = None

    # ---- load / save ----

    def load(self) -> "EventLogStore":
        self.fasting = _load_records(load_json(self.storage, self.keys.fasting_log), FastingSession, self.keys.fasting_log)
        self.food = _load_records(load_json(self.storage, self.keys.food_log), FoodEntry, self.keys.food_log)
        self.water = _load_records(load_json(self.storage, self.keys.water_log), WaterEntry, self.keys.water_log)

        goal = load_json(self.storage, self.keys.water_goal)
        try:
            goal_value = float(goal) if goal is not None else None
        except (TypeError, ValueError):
            goal_value = None
        self.water_goal = goal_value if goal_value and goal_value > 0 else self.default_water_goal

        presets = load_json(self.storage, self.keys.water_presets)
        self.water_presets = normalize_presets(presets if isinstance(presets, list) else [])

        raw_active = load_json(self.storage, self.keys.active_fast)
        self.active_fast = None
        if raw_active:
            try:
                self.active_fast = ActiveFast.model_validate(raw_active)
            except ValidationError as exc:
                logger.warning("Ignoring malformed active fast: %s", exc.errors()[:1])

        logger.debug(
            "Loaded %d fasts, %d food entries, %d water entries",
            len(self.fasting),
            len(self.food),
            len(self.water),
        )
        return self

    def _key_for(self, collection: Collection) -> str:
        return {
            Collection.fasting: self.keys.fasting_log,
            Collection.food: self.keys.food_log,
            Collection.water: self.keys.water_log,
        }[collection]

    def records(self, collection: Union[Collection, str]) -> List[Any]:
        return getattr(self, Collection(collection).value)

    def _persist(self, collection: Collection) -> None:
        save_json(self.storage, self._key_for(collection), [_dump(r) for r in self.records(collection)])

    def _next_id(self, collection: Collection, candidate: int) -> int:
        taken = {r.key for r in self.records(collection)}
        while candidate in taken:
            candidate += 1
        return candidate

    # ---- create ----

    def add_fasting(self, session: FastingSession) -> FastingSession:
        if session.end is None:
            raise InvalidEntry("Only completed sessions belong in the fasting log")
        self.fasting.insert(0, session)
        self._persist(Collection.fasting)
        return session

    def add_food(
        self,
        name: str,
        cal: Union[int, str, None] = "",
        cat: Union[FoodCategory, str] = FoodCategory.breakfast,
        note: str = "",
        ts: Optional[int] = None,
    ) -> FoodEntry:
        if not (name or "").strip():
            raise InvalidEntry("Food name is required")
        created = self.clock()
        entry = FoodEntry(
            id=self._next_id(Collection.food, created),
            name=name,
            cal=cal if cal is not None else "",
            cat=FoodCategory(cat),
            note=note or "",
            ts=created if ts is None else ts,
        )
        self.food.insert(0, entry)
        self._persist(Collection.food)
        return entry

    def add_water(self, amount: float, ts: Optional[int] = None) -> WaterEntry:
        if not amount or amount <= 0:
            raise InvalidEntry("Water amount must be positive")
        created = self.clock()
        entry = WaterEntry(
            id=self._next_id(Collection.water, created),
            amount=amount,
            ts=created if ts is None else ts,
        )
        self.water.insert(0, entry)
        self._persist(Collection.water)
        return entry

    # ---- update / delete ----

    def update_at(self, collection: Union[Collection, str], index: int, changes: Dict[str, Any]) -> Record:
        collection = Collection(collection)
        records = self.records(collection)
        if index < 0 or index >= len(records):
            raise IndexError(f"{collection.value} index {index} out of range")
        merged = {**records[index].model_dump(), **changes}
        updated = _MODELS[collection].model_validate(merged)
        records[index] = updated
        self._persist(collection)
        return updated

    def delete_by_id(self, collection: Union[Collection, str], entry_id: int) -> int:
        """Remove entries whose identity equals ``entry_id``; returns how many went."""
        collection = Collection(collection)
        records = self.records(collection)
        kept = [r for r in records if r.key != entry_id]
        removed = len(records) - len(kept)
        if removed:
            records[:] = kept
            self._persist(collection)
            logger.debug("Deleted %s entry %s", collection.value, entry_id)
        return removed

    def find_index(self, collection: Union[Collection, str], entry_id: int) -> Optional[int]:
        for idx, record in enumerate(self.records(collection)):
            if record.key == entry_id:
                return idx
        return None

    # ---- settings ----

    def set_water_goal(self, value: float) -> float:
        goal = float(value)
        if goal <= 0:
            raise ValueError("Water goal must be positive")
        self.water_goal = goal
        save_json(self.storage, self.keys.water_goal, int(goal) if goal.is_integer() else goal)
        return goal

    def set_water_presets(self, values: Iterable[int]) -> List[int]:
        self.water_presets = normalize_presets(values)
        save_json(self.storage, self.keys.water_presets, self.water_presets)
        return self.water_presets

    def set_active_fast(self, active: Optional[ActiveFast]) -> None:
        """Singleton slot written by the fasting timer only."""
        self.active_fast = active
        save_json(self.storage, self.keys.active_fast, _dump(active) if active else None)

    # ---- read ----

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            fasting=tuple(self.fasting),
            food=tuple(self.food),
            water=tuple(self.water),
            water_goal=self.water_goal,
            water_presets=tuple(self.water_presets),
            active_fast=self.active_fast,
        )

    def counts(self) -> Dict[str, int]:
        return {c.value: len(self.records(c)) for c in Collection}
