# -*- coding: utf-8 -*-
"""Edit/reconciliation engine — corrections to completed log entries.

An edit copies one record into a draft addressed by its list position. The
draft is mutated freely, previewed, and only written back by ``commit`` once
it validates; ``cancel`` drops it without touching the store. Positions stay
valid because nothing else mutates the logs while a draft is open.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ValidationError

from .fasting.models import goal_ms
from .food.models import FoodCategory
from .store import Collection, EventLogStore
from .timeutil import from_local_iso, to_local_iso

logger = logging.getLogger(__name__)

ORDER_MESSAGE = "End time must be after start time"


class FastDraft(BaseModel):
    protocol: Union[float, str]
    start_iso: str
    end_iso: str


class FoodDraft(BaseModel):
    name: str = ""
    cal: Union[int, float, str] = ""
    cat: FoodCategory = FoodCategory.breakfast
    note: str = ""
    ts_iso: str


class WaterDraft(BaseModel):
    amount: Union[float, str]
    ts_iso: str


Draft = Union[FastDraft, FoodDraft, WaterDraft]


@dataclass
class EditSession:
    collection: Collection
    index: int
    draft: Draft


class FastPreview(BaseModel):
    duration_ms: Optional[int] = None
    pct_of_goal: Optional[int] = None
    valid: bool = False
    message: Optional[str] = None


def _coerce_positive(value: Any) -> Optional[float]:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(amount) or math.isinf(amount) or amount <= 0:
        return None
    return amount


def preview_fast(draft: FastDraft) -> FastPreview:
    start = from_local_iso(draft.start_iso)
    end = from_local_iso(draft.end_iso)
    if start is None or end is None:
        return FastPreview()
    duration = end - start
    if duration <= 0:
        return FastPreview(duration_ms=duration, message=ORDER_MESSAGE)
    protocol = _coerce_positive(draft.protocol)
    if protocol is None:
        return FastPreview(duration_ms=duration, message="Protocol must be a positive number")
    return FastPreview(
        duration_ms=duration,
        pct_of_goal=round(duration / goal_ms(protocol) * 100),
        valid=True,
    )


class EditEngine:
    def __init__(self, store: EventLogStore) -> None:
        self.store = store
        self.sessions: Dict[Collection, EditSession] = {}

    # ---- open ----

    def open(self, collection: Union[Collection, str], index: int) -> EditSession:
        collection = Collection(collection)
        records = self.store.records(collection)
        if index < 0 or index >= len(records):
            raise IndexError(f"{collection.value} index {index} out of range")
        record = records[index]
        if collection is Collection.fasting:
            if record.end is None:
                raise ValueError("An in-progress fast cannot be edited")
            draft: Draft = FastDraft(
                protocol=record.protocol,
                start_iso=to_local_iso(record.start),
                end_iso=to_local_iso(record.end),
            )
        elif collection is Collection.food:
            draft = FoodDraft(
                name=record.name,
                cal=record.cal if record.cal is not None else "",
                cat=record.cat,
                note=record.note or "",
                ts_iso=to_local_iso(record.ts),
            )
        else:
            draft = WaterDraft(amount=record.amount, ts_iso=to_local_iso(record.ts))
        session = EditSession(collection=collection, index=index, draft=draft)
        self.sessions[collection] = session
        return session

    def open_fasting(self, index: int) -> EditSession:
        return self.open(Collection.fasting, index)

    def open_food(self, index: int) -> EditSession:
        return self.open(Collection.food, index)

    def open_water(self, index: int) -> EditSession:
        return self.open(Collection.water, index)

    def current(self, collection: Union[Collection, str]) -> Optional[EditSession]:
        return self.sessions.get(Collection(collection))

    def update_draft(self, collection: Union[Collection, str], **fields: Any) -> Draft:
        session = self.sessions[Collection(collection)]
        try:
            session.draft = type(session.draft).model_validate({**session.draft.model_dump(), **fields})
        except ValidationError as exc:
            logger.info("Ignored %s draft update: %s", session.collection.value, exc.errors()[:1])
        return session.draft

    def cancel(self, collection: Union[Collection, str]) -> None:
        self.sessions.pop(Collection(collection), None)

    # ---- validate ----

    def preview_fasting(self) -> Optional[FastPreview]:
        session = self.current(Collection.fasting)
        if session is None:
            return None
        return preview_fast(session.draft)

    def _changes(self, session: EditSession) -> Optional[Dict[str, Any]]:
        draft = session.draft
        if isinstance(draft, FastDraft):
            preview = preview_fast(draft)
            if not preview.valid:
                return None
            start = from_local_iso(draft.start_iso)
            end = from_local_iso(draft.end_iso)
            return {
                "start": start,
                "end": end,
                "duration": end - start,
                "protocol": _coerce_positive(draft.protocol),
            }
        ts = from_local_iso(draft.ts_iso)
        if ts is None:
            return None
        if isinstance(draft, FoodDraft):
            # Name is not re-checked here; creation is the only place it must be non-blank.
            return {"name": draft.name, "cal": draft.cal, "cat": draft.cat, "note": draft.note, "ts": ts}
        amount = _coerce_positive(draft.amount)
        if amount is None:
            return None
        return {"amount": amount, "ts": ts}

    def can_commit(self, collection: Union[Collection, str]) -> bool:
        session = self.current(collection)
        if session is None or not 0 <= session.index < len(self.store.records(session.collection)):
            return False
        return self._changes(session) is not None

    # ---- commit ----

    def commit(self, collection: Union[Collection, str]) -> bool:
        collection = Collection(collection)
        session = self.current(collection)
        if session is None:
            return False
        changes = self._changes(session)
        if changes is None:
            logger.info("Rejected %s edit at index %d", collection.value, session.index)
            return False
        try:
            self.store.update_at(collection, session.index, changes)
        except (IndexError, ValidationError) as exc:
            logger.info("Rejected %s edit at index %d: %s", collection.value, session.index, exc)
            return False
        del self.sessions[collection]
        return True
