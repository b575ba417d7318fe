# -*- coding: utf-8 -*-
"""fasttrack — intermittent-fasting, food and water tracking engine.

Domains:
- fasting: single active session state machine + completed session log
- food: meal log with optional calories
- water: hydration log, daily goal and quick-select presets
- stats: daily/weekly rollups recomputed from the logs
"""

from .app import TrackerApp

__all__ = ["TrackerApp"]
