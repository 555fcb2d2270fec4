"""
User break settings — the BreakConfig persisted to data/settings.json.

load_break_config() reads the stored config (defaults if absent or unreadable).
save_break_config(cfg) writes the full config; there is no partial merge.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import config
from .timer.models import BreakConfig

logger = logging.getLogger(__name__)

_FILE: Path = config.data_dir / config.settings_file

DEFAULTS: Dict[str, Any] = BreakConfig().to_dict()


def load_break_config(path: Optional[Path] = None) -> BreakConfig:
    path = path or _FILE
    if not path.exists():
        return BreakConfig()
    try:
        saved = json.loads(path.read_text())
        return BreakConfig.from_dict(saved)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return BreakConfig()


def save_break_config(cfg: BreakConfig, path: Optional[Path] = None) -> BreakConfig:
    path = path or _FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg.to_dict(), indent=2))
    return cfg
