"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/RepTimer/settings.json

Usage::

    settings = load_settings()
    settings.sounds_enabled = False
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import Any

from .timer.base import SETTLE_DELAY_MS, TICK_INTERVAL_MS

logger = logging.getLogger(__name__)


# Reuse the app-support directory from db.py
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "RepTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── cues ──────────────────────────────────────────────────────────
    sounds_enabled: bool = True
    vibration_enabled: bool = True

    # ── last workout (defaults for the next run) ──────────────────────
    last_mode: str = "interval"
    last_config: dict[str, Any] = field(default_factory=dict)

    # ── timing ────────────────────────────────────────────────────────
    tick_interval_ms: int = TICK_INTERVAL_MS
    settle_delay_ms: int = SETTLE_DELAY_MS


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
