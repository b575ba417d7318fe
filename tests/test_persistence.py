# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from fasttrack.persistence import JsonFileStorage, MemoryStorage, StorageKeys, load_json, save_json


class BrokenStorage:
    def get(self, key: str):
        raise OSError("disk on fire")

    def set(self, key: str, value: str) -> None:
        raise OSError("disk on fire")


class TestPersistence(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="fasttrack-test-"))

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def test_file_storage_round_trip(self) -> None:
        storage = JsonFileStorage(self._tmp / "nested")
        self.assertIsNone(storage.get("ft_food_log"))
        self.assertTrue(save_json(storage, "ft_food_log", [{"id": 1, "name": "Oats"}]))
        self.assertTrue((self._tmp / "nested" / "ft_food_log.json").exists())
        self.assertEqual(load_json(storage, "ft_food_log"), [{"id": 1, "name": "Oats"}])

    def test_malformed_json_is_absent(self) -> None:
        storage = MemoryStorage({"k": "{not json"})
        with self.assertLogs("fasttrack.persistence", level="WARNING"):
            self.assertIsNone(load_json(storage, "k"))

    def test_failures_are_swallowed(self) -> None:
        storage = BrokenStorage()
        with self.assertLogs("fasttrack.persistence", level="WARNING"):
            self.assertIsNone(load_json(storage, "k"))
            self.assertFalse(save_json(storage, "k", [1, 2]))

    def test_null_round_trips_as_absent(self) -> None:
        storage = MemoryStorage()
        save_json(storage, "ft_active_fast", None)
        self.assertEqual(storage.data["ft_active_fast"], "null")
        self.assertIsNone(load_json(storage, "ft_active_fast"))

    def test_keys(self) -> None:
        keys = StorageKeys.with_prefix("ft_")
        self.assertEqual(keys.fasting_log, "ft_fasting_log")
        self.assertEqual(keys.water_presets, "ft_water_presets")
        self.assertEqual(len(set(vars(keys).values())), 6)


if __name__ == "__main__":
    unittest.main()
