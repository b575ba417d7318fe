# -*- coding: utf-8 -*-
"""Fasting domain (active session timer + completed session log)."""
