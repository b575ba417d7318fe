from __future__ import annotations

import os
from pathlib import Path


class Settings:
    """Centralized configuration for the tracker engine."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        data_root_default = base_dir.parent / "data"

        self.data_root: Path = Path(
            os.environ.get("FASTTRACK_DATA_ROOT") or data_root_default
        ).expanduser()
        # Storage keys are "<prefix><name>", e.g. ft_fasting_log.
        self.key_prefix: str = os.environ.get("FASTTRACK_KEY_PREFIX", "ft_")

        self.water_goal: float = float(os.environ.get("FASTTRACK_WATER_GOAL") or "64")
        self.default_protocol: float = float(
            os.environ.get("FASTTRACK_DEFAULT_PROTOCOL") or "16"
        )
        self.tick_sec: float = float(os.environ.get("FASTTRACK_TICK_SEC") or "1.0")
        self.celebrate_sec: float = float(
            os.environ.get("FASTTRACK_CELEBRATE_SEC") or "3.0"
        )
        self.log_level: str = (os.environ.get("FASTTRACK_LOG_LEVEL") or "INFO").upper()


settings = Settings()
