"""
User preferences.

Two string preferences survive restarts: ``darkMode`` ("true"/"false") and
``speed`` (a positive number as text). They are kept in a small JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .config import DEFAULT_SETTINGS_PATH, DEFAULT_SPEED

logger = logging.getLogger(__name__)

DARK_MODE_KEY = "darkMode"
SPEED_KEY = "speed"


class Preferences:
    """String key/value store backed by a JSON file."""

    def __init__(self, path: Union[str, Path] = DEFAULT_SETTINGS_PATH) -> None:
        self.path = Path(path)
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._values, f, indent=2)
        except OSError as exc:
            logger.error("Could not write settings to %s: %s", self.path, exc)

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: object) -> None:
        if isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        self._values[key] = text
        logger.debug("Preference %s=%s", key, text)
        self._save()

    def clear(self) -> None:
        self._values.clear()
        if self.path.exists():
            try:
                self.path.unlink()
            except OSError as exc:
                logger.error("Could not remove settings file %s: %s", self.path, exc)

    # Typed accessors for the two known preferences.

    @property
    def dark_mode(self) -> bool:
        return self.get(DARK_MODE_KEY) == "true"

    @dark_mode.setter
    def dark_mode(self, value: bool) -> None:
        self.set(DARK_MODE_KEY, bool(value))

    @property
    def speed(self) -> float:
        text = self.get(SPEED_KEY) or str(DEFAULT_SPEED)
        try:
            speed = float(text)
        except ValueError:
            return DEFAULT_SPEED
        return speed if speed > 0 else DEFAULT_SPEED

    @speed.setter
    def speed(self, value: float) -> None:
        if not float(value) > 0:
            raise ValueError(f"Speed must be positive, got {value}")
        self.set(SPEED_KEY, format_speed(float(value)))


def format_speed(value: float) -> str:
    """1.0 -> "1", 0.5 -> "0.5" (matches the option menu labels)."""
    return str(int(value)) if value.is_integer() else str(value)
