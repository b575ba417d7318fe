# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import json
import unittest

from fasttrack.fasting.models import ActiveFast, FastingSession, FastState, protocol_label
from fasttrack.fasting.session import FastingTimer, GoalSignal
from fasttrack.persistence import MemoryStorage, StorageKeys
from fasttrack.store import EventLogStore

HOUR = 3_600_000
KEYS = StorageKeys.with_prefix("ft_")


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def make_timer(storage=None, clock=None, **kwargs):
    clock = clock or FakeClock()
    storage = storage or MemoryStorage()
    store = EventLogStore(storage, clock=clock, keys=KEYS)
    timer = FastingTimer(store, clock=clock, tick_interval=kwargs.pop("tick_interval", 0.01), **kwargs)
    return timer, store, storage, clock


class TestFastingTransitions(unittest.TestCase):
    def test_start_persists_singleton(self) -> None:
        timer, store, storage, clock = make_timer()
        fast = timer.start(18)
        self.assertEqual(timer.state, FastState.active)
        self.assertEqual(fast, ActiveFast(start=clock.now, protocol=18))
        self.assertEqual(json.loads(storage.data["ft_active_fast"]), {"start": clock.now, "protocol": 18.0})

    def test_start_while_active_is_rejected(self) -> None:
        timer, store, storage, clock = make_timer()
        first = timer.start(16)
        clock.now += 5_000
        self.assertIsNone(timer.start(20))
        self.assertEqual(store.active_fast, first)
        self.assertEqual(timer.protocol, 16)

    def test_end_while_idle_is_noop(self) -> None:
        timer, store, storage, clock = make_timer()
        self.assertIsNone(timer.end())
        self.assertEqual(store.fasting, [])
        self.assertNotIn("ft_fasting_log", storage.data)

    def test_end_moves_session_into_log(self) -> None:
        timer, store, storage, clock = make_timer()
        started = clock.now
        timer.start(16)
        clock.now += 10 * HOUR
        session = timer.end()

        self.assertEqual(timer.state, FastState.idle)
        self.assertEqual(session.id, started)
        self.assertEqual(session.duration, session.end - session.start)
        self.assertEqual(session.duration, 10 * HOUR)
        self.assertFalse(session.goal_reached)
        self.assertEqual(store.fasting, [session])
        self.assertEqual(storage.data["ft_active_fast"], "null")
        self.assertEqual(timer.elapsed, 0)
        self.assertFalse(timer.celebration.active(clock.now))

    def test_goal_boundary_is_inclusive(self) -> None:
        timer, store, storage, clock = make_timer(celebrate_sec=3)
        timer.start(16)
        clock.now += 16 * HOUR
        timer.tick()
        self.assertTrue(timer.goal_reached)
        self.assertEqual(timer.progress, 100.0)
        session = timer.end()
        self.assertTrue(session.goal_reached)
        self.assertEqual(session.goal_pct, 100)

        self.assertTrue(timer.celebration.active(clock.now + 2_999))
        self.assertFalse(timer.celebration.active(clock.now + 3_000))
        # The stored session still answers the question on its own.
        self.assertTrue(store.fasting[0].goal_reached)

    def test_progress_is_clamped(self) -> None:
        timer, store, storage, clock = make_timer()
        self.assertEqual(timer.progress, 0.0)
        timer.start(16)
        clock.now += 8 * HOUR
        timer.tick()
        self.assertAlmostEqual(timer.progress, 50.0)
        self.assertEqual(timer.remaining_ms, 8 * HOUR)
        clock.now += 20 * HOUR
        timer.tick()
        self.assertEqual(timer.progress, 100.0)
        self.assertEqual(timer.remaining_ms, 0)

    def test_start_with_non_positive_protocol_rejected(self) -> None:
        timer, store, storage, clock = make_timer()
        for bad in (0, -5):
            self.assertIsNone(timer.start(bad))
        self.assertEqual(timer.state, FastState.idle)
        self.assertIsNone(store.active_fast)
        self.assertNotIn("ft_active_fast", storage.data)

    def test_protocol_locked_while_active(self) -> None:
        timer, store, storage, clock = make_timer()
        self.assertTrue(timer.select_protocol(20))
        timer.start()
        self.assertFalse(timer.select_protocol(23))
        self.assertEqual(store.active_fast.protocol, 20)

    def test_restore_from_storage(self) -> None:
        clock = FakeClock()
        storage = MemoryStorage({"ft_active_fast": json.dumps({"start": clock.now - 2 * HOUR, "protocol": 16})})
        timer, store, _, _ = make_timer(storage, clock)
        store.load()
        self.assertEqual(timer.restore(), FastState.active)
        self.assertEqual(timer.elapsed, 2 * HOUR)


class TestGoalSignal(unittest.TestCase):
    def test_listeners_notified_once_per_fire(self) -> None:
        signal = GoalSignal(lifetime_sec=1)
        seen = []
        signal.subscribe(seen.append)
        session = FastingSession(start=0, end=HOUR, protocol=1)
        signal.fire(session, now=10)
        self.assertEqual(seen, [session])
        self.assertTrue(signal.active(500))
        self.assertFalse(signal.active(1_010))
        self.assertIsNone(signal.session)


class TestFastingModels(unittest.TestCase):
    def test_protocol_label(self) -> None:
        self.assertEqual(protocol_label(16), "16:8")
        self.assertEqual(protocol_label(23), "OMAD")
        self.assertEqual(protocol_label(14.5), "14.5h")


class TestFastingTicker(unittest.IsolatedAsyncioTestCase):
    async def test_ticker_runs_only_while_active(self) -> None:
        timer, store, storage, clock = make_timer(tick_interval=0.01)
        ticks = []
        timer.start(16)
        timer.start_ticker(ticks.append)
        self.assertTrue(timer.ticking)

        clock.now += 1_000
        await asyncio.sleep(0.05)
        self.assertTrue(ticks)
        self.assertEqual(ticks[-1], 1_000)

        timer.end()
        self.assertFalse(timer.ticking)
        count = len(ticks)
        await asyncio.sleep(0.03)
        self.assertEqual(len(ticks), count)

    async def test_failing_callback_keeps_ticker_alive(self) -> None:
        timer, store, storage, clock = make_timer(tick_interval=0.01)
        calls = []

        def on_tick(elapsed: int) -> None:
            calls.append(elapsed)
            raise RuntimeError("view went away")

        timer.start(16)
        with self.assertLogs("fasttrack.fasting.session", level="ERROR"):
            timer.start_ticker(on_tick)
            await asyncio.sleep(0.05)
        self.assertEqual(timer.state, FastState.active)
        self.assertTrue(timer.ticking)
        self.assertGreater(len(calls), 1)
        await timer.aclose()
        self.assertFalse(timer.ticking)

    async def test_restore_without_active_fast_cancels_ticker(self) -> None:
        timer, store, storage, clock = make_timer(tick_interval=0.01)
        timer.start(16)
        self.assertTrue(timer.ticking)
        store.active_fast = None
        timer.restore()
        self.assertFalse(timer.ticking)
        await timer.aclose()

    async def test_no_ticker_without_fast(self) -> None:
        timer, store, storage, clock = make_timer()
        self.assertIsNone(timer.start_ticker())
        self.assertFalse(timer.ticking)


if __name__ == "__main__":
    unittest.main()
