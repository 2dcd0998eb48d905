"""
Application configuration.

Timing and geometry constants used by the Gantt renderer and the playback
controller live here as module-level values; deployment settings (backend
URL, request timeout, where preferences are stored) are gathered into
:class:`AppConfig`, which can be overridden through environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path


# ---------------------------------------------------------------------------
# Playback timing
# ---------------------------------------------------------------------------

# Milliseconds of wall-clock time per simulated time unit at speed 1.
UNIT_MS = 200

# Lower bound on one segment's on-screen duration.
MIN_STEP_MS = 100

DEFAULT_SPEED = 1.0
SPEED_CHOICES = ("0.5", "1", "2", "4")


# ---------------------------------------------------------------------------
# Gantt chart geometry
# ---------------------------------------------------------------------------

MIN_CHART_WIDTH = 700
PIXELS_PER_UNIT = 30
CHART_HEIGHT = 120
BAR_TOP = 30
BAR_HEIGHT = 50
LABEL_INSET = 4
LABEL_Y = 60
LABEL_FONT = ("Arial", 9)

LABEL_COLOR_LIGHT = "#000000"
LABEL_COLOR_DARK = "#F9FAFB"
CANVAS_BG_LIGHT = "#FFFFFF"
CANVAS_BG_DARK = "#020617"

# Hue saturation / lightness for process colors (percent).
COLOR_SATURATION = 70
COLOR_LIGHTNESS = 60


# ---------------------------------------------------------------------------
# Deployment settings
# ---------------------------------------------------------------------------

DEFAULT_BACKEND_URL = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT = 10.0
DEFAULT_SETTINGS_PATH = Path.home() / ".gantt_player" / "settings.json"


@dataclass(frozen=True)
class AppConfig:
    """
    Settings that vary between installations.

    Attributes:
        backend_url:     Base URL of the simulation service.
        request_timeout: Seconds to wait for the service before giving up.
        settings_path:   JSON file that holds the user's preferences.
        log_level:       Name of the root logging level.
    """

    backend_url: str = DEFAULT_BACKEND_URL
    request_timeout: float = DEFAULT_TIMEOUT
    settings_path: Path = DEFAULT_SETTINGS_PATH
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config, letting GANTT_PLAYER_* variables override defaults."""
        timeout_text = os.environ.get("GANTT_PLAYER_TIMEOUT", "").strip()
        try:
            timeout = float(timeout_text) if timeout_text else DEFAULT_TIMEOUT
        except ValueError:
            timeout = DEFAULT_TIMEOUT
        if timeout <= 0:
            timeout = DEFAULT_TIMEOUT

        settings_text = os.environ.get("GANTT_PLAYER_SETTINGS", "").strip()
        settings_path = Path(settings_text) if settings_text else DEFAULT_SETTINGS_PATH

        return cls(
            backend_url=os.environ.get("GANTT_PLAYER_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
            request_timeout=timeout,
            settings_path=settings_path,
            log_level=os.environ.get("GANTT_PLAYER_LOG_LEVEL", "INFO").upper(),
        )
