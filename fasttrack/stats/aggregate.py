# -*- coding: utf-8 -*-
"""Stats aggregation — pure functions over a store snapshot.

Nothing here caches: every call walks the current logs, so an edit or delete
anywhere in history is reflected on the next read.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..fasting.models import FastingSession
from ..food.models import FoodEntry
from ..store import StoreSnapshot
from ..timeutil import MS_PER_HOUR, day_index, local_date, same_local_day, week_start
from ..water.models import WaterEntry
from .models import Dashboard, LogSummary, SeriesSummary, TodaySummary, WeeklyChart

T = TypeVar("T")

DAYS_PER_WEEK = 7


def today_filter(entries: Iterable[T], now: int) -> List[T]:
    return [e for e in entries if same_local_day(e.ts, now)]


def today_calories(food: Iterable[FoodEntry], now: int) -> int:
    return sum(e.calories for e in today_filter(food, now))


def today_water_oz(water: Iterable[WaterEntry], now: int) -> float:
    return sum(e.amount for e in today_filter(water, now))


def hydration_pct(water_oz: float, goal: float) -> float:
    if not goal or goal <= 0:
        return 0.0
    return min(water_oz / goal * 100, 100.0)


def _bucket(
    entries: Iterable[T],
    start: date,
    when: Callable[[T], int],
    value: Callable[[T], float],
) -> Tuple[List[float], List[bool]]:
    buckets = [0.0] * DAYS_PER_WEEK
    seen = [False] * DAYS_PER_WEEK
    for entry in entries:
        idx = day_index(when(entry), start)
        if 0 <= idx < DAYS_PER_WEEK:
            buckets[idx] += value(entry)
            seen[idx] = True
    return buckets, seen


def _fasting_buckets(fasting: Iterable[FastingSession], start: date) -> Tuple[List[float], List[bool]]:
    return _bucket(
        (f for f in fasting if f.duration is not None),
        start,
        lambda f: f.start,
        lambda f: f.duration / MS_PER_HOUR,
    )


def _water_buckets(water: Iterable[WaterEntry], start: date) -> Tuple[List[float], List[bool]]:
    return _bucket(water, start, lambda e: e.ts, lambda e: e.amount)


def weekly_fasting_hours(fasting: Iterable[FastingSession], now: int) -> List[float]:
    """Hours fasted per day of the current Sunday-first week, keyed by start date."""
    return _fasting_buckets(fasting, week_start(now))[0]


def weekly_water_oz(water: Iterable[WaterEntry], now: int) -> List[float]:
    return _water_buckets(water, week_start(now))[0]


def summarize_series(
    buckets: Sequence[float],
    today_index: int,
    goal: Optional[float] = None,
) -> SeriesSummary:
    values = list(buckets) or [0.0]
    best = max(values)
    total = sum(values)
    today = values[today_index] if 0 <= today_index < len(values) else 0.0
    return SeriesSummary(
        best_day=best,
        best_index=values.index(best),
        avg_per_day=total / DAYS_PER_WEEK,
        today=today,
        total=total,
        goal_met=(today >= goal) if goal else None,
    )


def log_summary(snapshot: StoreSnapshot) -> LogSummary:
    durations = [f.duration for f in snapshot.fasting if f.duration is not None]
    return LogSummary(
        total_fasts=len(snapshot.fasting),
        avg_duration_ms=(sum(durations) / len(durations)) if durations else None,
        food_entries=len(snapshot.food),
        water_logs=len(snapshot.water),
    )


def _chart(
    buckets: List[float],
    seen: List[bool],
    start: date,
    today_index: int,
    unit: str,
    goal: Optional[float] = None,
) -> WeeklyChart:
    return WeeklyChart(
        week_start=start.isoformat(),
        values=buckets,
        has_data=seen,
        today_index=today_index,
        unit=unit,
        summary=summarize_series(buckets, today_index, goal=goal),
    )


def build_dashboard(snapshot: StoreSnapshot, now: int) -> Dashboard:
    start = week_start(now)
    today_idx = day_index(now, start)

    food_today = today_filter(snapshot.food, now)
    water_today = today_filter(snapshot.water, now)
    water_oz = today_water_oz(water_today, now)

    fast_buckets, fast_seen = _fasting_buckets(snapshot.fasting, start)
    water_buckets, water_seen = _water_buckets(snapshot.water, start)

    return Dashboard(
        today=TodaySummary(
            date=local_date(now).isoformat(),
            calories=today_calories(food_today, now),
            food_count=len(food_today),
            water_oz=water_oz,
            water_count=len(water_today),
            water_goal=snapshot.water_goal,
            hydration_pct=hydration_pct(water_oz, snapshot.water_goal),
        ),
        fasting_week=_chart(fast_buckets, fast_seen, start, today_idx, "h"),
        water_week=_chart(water_buckets, water_seen, start, today_idx, "fl oz", goal=snapshot.water_goal),
        summary=log_summary(snapshot),
    )
