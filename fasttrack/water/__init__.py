# -*- coding: utf-8 -*-
"""Water domain (hydration log, daily goal, quick-select presets)."""
