"""
Application configuration for Pro Timer.
Constants, colour themes and the runtime settings read from the environment.
"""

import os
import platform
from dataclasses import dataclass
from pathlib import Path

# ===================== IDENTITY =====================

APP_NAME = "Pro Timer"
APP_VERSION = "1.0.0"
APP_DIRNAME = "protimer"

# Key of the single blob holding the whole application state
STORAGE_KEY = "proTimerData"

# ===================== TIMING =====================

TICK_INTERVAL_MS = 1000
DEFAULT_TIMER_SECONDS = 60

# ===================== CHOICES =====================

SOUND_NONE = "none"
SOUND_KINDS = ("none", "beep", "beep2", "alarm")
SOUND_LABELS = {
    "none": "No Sound",
    "beep": "Beep (Long)",
    "beep2": "Beep 2 (Double)",
    "alarm": "Alarm",
}

LAYOUTS = ("list", "grid")
DEFAULT_LAYOUT = "list"
GRID_COLUMNS = 3

THEMES = {
    "theme-dark": {"bg": "#1e1e1e", "fg": "#f0f0f0", "accent": "#3875d7", "card": "#2d2d30", "paused": "#d7a238"},
    "theme-light": {"bg": "#f4f4f4", "fg": "#1e1e1e", "accent": "#2a7ae2", "card": "#ffffff", "paused": "#e07b00"},
    "theme-matrix": {"bg": "#000000", "fg": "#00FF00", "accent": "#008800", "card": "#0a140a", "paused": "#88aa00"},
    "theme-ocean": {"bg": "#001a33", "fg": "#00ffff", "accent": "#0099cc", "card": "#002647", "paused": "#ff9966"},
    "theme-fire": {"bg": "#1a0000", "fg": "#ff3300", "accent": "#cc0000", "card": "#2a0505", "paused": "#ffcc00"},
}
DEFAULT_THEME = "theme-dark"

# ===================== PATHS =====================

def _appdata_base():
    system = platform.system()
    if system == "Windows":
        base = os.getenv("APPDATA") or (Path.home() / "AppData" / "Roaming")
    elif system == "Darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return Path(base) / APP_DIRNAME


DATA_DIR = _appdata_base()
LOG_DIR = DATA_DIR / "logs"

# ===================== RUNTIME SETTINGS =====================

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_flag(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be one of {sorted(_TRUE | _FALSE)}, got {raw!r}")


@dataclass
class Settings:
    """Runtime options; everything persisted with the timers lives in AppState instead."""
    data_dir: Path = DATA_DIR
    pause_on_edit: bool = True
    catch_up: bool = False
    log_level: str = "INFO"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"


def load_settings(**overrides) -> Settings:
    """
    Build Settings from PROTIMER_* environment variables.
    Keyword overrides (usually from the command line) win when not None.
    """
    settings = Settings(
        data_dir=Path(os.getenv("PROTIMER_DATA_DIR") or DATA_DIR),
        pause_on_edit=_env_flag("PROTIMER_PAUSE_ON_EDIT", True),
        catch_up=_env_flag("PROTIMER_CATCH_UP", False),
        log_level=os.getenv("PROTIMER_LOG_LEVEL", "INFO").upper(),
    )
    for key, value in overrides.items():
        if not hasattr(settings, key):
            raise TypeError(f"Unknown setting: {key}")
        if value is not None:
            if key == "data_dir":
                value = Path(value)
            setattr(settings, key, value)
    return settings


def ensure_app_dirs(settings: Settings) -> None:
    """Create the data and log folders if they don't exist."""
    for p in (settings.data_dir, settings.log_dir):
        p.mkdir(parents=True, exist_ok=True)
