"""
Central configuration for the RSI break assistant.
All values can be overridden via environment variables or a local config.json.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

_ROOT = Path(__file__).parent.parent
_CONFIG_FILE = _ROOT / "config.json"

_TRUE_STRINGS = {"1", "true", "yes", "on"}


@dataclass
class Config:
    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8765

    # Driver loop
    tick_interval_ms: int = 1000             # one discrete timer step
    idle_threshold_s: int = 5                # input older than this counts as idle
    repeat_prompt_interval_s: int = 300      # re-notify while overdue; 0 disables
    reset_usage_at_midnight: bool = False    # keep daily usage cumulative by default
    notifications_enabled: bool = True

    # Storage
    data_dir: Path = field(default_factory=lambda: _ROOT / "data")
    stats_db: str = "stats.db"
    settings_file: str = "settings.json"
    stats_flush_interval_s: int = 30

    # Logging
    log_level: str = "info"

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load(cls) -> "Config":
        cfg = cls()
        if _CONFIG_FILE.exists():
            overrides = json.loads(_CONFIG_FILE.read_text())
            for k, v in overrides.items():
                if hasattr(cfg, k):
                    setattr(cfg, k, v)
        # environment variable overrides (RSI_*)
        for k in cfg.__dataclass_fields__:  # type: ignore[attr-defined]
            env_key = f"RSI_{k.upper()}"
            if env_key in os.environ:
                setattr(cfg, k, _coerce(getattr(cfg, k), os.environ[env_key]))
        cfg.data_dir = Path(cfg.data_dir)
        cfg.data_dir.mkdir(parents=True, exist_ok=True)
        return cfg


def _coerce(current, raw: str):
    if isinstance(current, bool):
        return raw.strip().lower() in _TRUE_STRINGS
    return type(current)(raw)


# Module-level singleton
config = Config.load()
