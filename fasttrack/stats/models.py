# -*- coding: utf-8 -*-
"""Stats — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

DAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class SeriesSummary(BaseModel):
    best_day: float = 0.0
    best_index: int = Field(0, ge=0, le=6)
    avg_per_day: float = 0.0
    today: float = 0.0
    total: float = 0.0
    goal_met: Optional[bool] = Field(None, description="Today's bucket vs. goal, when a goal applies")


class WeeklyChart(BaseModel):
    week_start: str = Field(..., description="YYYY-MM-DD (Sunday)")
    labels: List[str] = Field(default_factory=lambda: list(DAY_LABELS))
    values: List[float]
    has_data: List[bool] = Field(..., description="False for buckets nothing contributed to")
    today_index: int = Field(..., ge=0, le=6)
    unit: str
    summary: SeriesSummary


class LogSummary(BaseModel):
    total_fasts: int = Field(0, ge=0)
    avg_duration_ms: Optional[float] = Field(None, description="None when there are no fasts")
    food_entries: int = Field(0, ge=0)
    water_logs: int = Field(0, ge=0)


class TodaySummary(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    calories: int = 0
    food_count: int = Field(0, ge=0)
    water_oz: float = Field(0.0, ge=0)
    water_count: int = Field(0, ge=0)
    water_goal: float
    hydration_pct: float = Field(0.0, ge=0, le=100)


class Dashboard(BaseModel):
    today: TodaySummary
    fasting_week: WeeklyChart
    water_week: WeeklyChart
    summary: LogSummary
