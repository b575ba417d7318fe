# -*- coding: utf-8 -*-
"""Persistence adapter — whole-collection JSON blobs keyed by logical name.

Writes are best-effort: adapter failures are logged and dropped, reads that
fail or return malformed JSON are treated as "no data".
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .config import settings

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class JsonFileStorage:
    """One ``<key>.json`` file per key under ``root``."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = Path(root or settings.data_root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        fp = self._path(key)
        if not fp.exists():
            return None
        return fp.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        fp = self._path(key)
        tmp = fp.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(fp)


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


@dataclass(frozen=True)
class StorageKeys:
    fasting_log: str
    food_log: str
    water_log: str
    active_fast: str
    water_goal: str
    water_presets: str

    @classmethod
    def with_prefix(cls, prefix: str) -> "StorageKeys":
        return cls(
            fasting_log=f"{prefix}fasting_log",
            food_log=f"{prefix}food_log",
            water_log=f"{prefix}water_log",
            active_fast=f"{prefix}active_fast",
            water_goal=f"{prefix}water_goal",
            water_presets=f"{prefix}water_presets",
        )

    @classmethod
    def default(cls) -> "StorageKeys":
        return cls.with_prefix(settings.key_prefix)


def load_json(storage: KeyValueStorage, key: str) -> Any:
    try:
        raw = storage.get(key)
    except Exception as exc:
        logger.warning("Storage read failed for %s: %s", key, exc)
        return None
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        logger.warning("Malformed JSON under %s, using defaults: %s", key, exc)
        return None


def save_json(storage: KeyValueStorage, key: str, value: Any) -> bool:
    """Serialize and write ``value``; returns False when the write was dropped."""
    try:
        storage.set(key, json.dumps(value, ensure_ascii=False))
    except Exception as exc:
        logger.warning("Storage write failed for %s (kept in memory): %s", key, exc)
        return False
    return True
