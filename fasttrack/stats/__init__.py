# -*- coding: utf-8 -*-
"""Stats domain — daily/weekly rollups derived from the logs on demand."""

from .aggregate import (
    build_dashboard,
    hydration_pct,
    log_summary,
    summarize_series,
    today_calories,
    today_filter,
    today_water_oz,
    weekly_fasting_hours,
    weekly_water_oz,
)

__all__ = [
    "build_dashboard",
    "hydration_pct",
    "log_summary",
    "summarize_series",
    "today_calories",
    "today_filter",
    "today_water_oz",
    "weekly_fasting_hours",
    "weekly_water_oz",
]
