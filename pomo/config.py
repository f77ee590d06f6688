"""Timer configuration loaded from the environment"""
import os
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv(dotenv_path=".env")

ENV_PREFIX = "POMO_"


class LogDestination(str, Enum):
    """Where finished sessions are written"""
    FIXED_FILE = "fixed_file"
    ACTIVE_DAILY_NOTE = "active_daily_note"
    CUSTOM_NOTE = "custom_note"


class ConfirmationMode(str, Enum):
    """How confirmation prompts are answered"""
    AUTO = "auto"
    PROMPT = "prompt"


class TimerSettings(BaseModel):
    """Read-only settings consumed by the timer and the session logger"""
    pomo_minutes: float = Field(default=25, gt=0)
    short_break_minutes: float = Field(default=5, gt=0)
    long_break_minutes: float = Field(default=15, gt=0)
    long_break_interval: int = Field(default=4, ge=1)
    custom_pomo_minutes: float = Field(default=25, gt=0)
    custom_break_minutes: float = Field(default=5, gt=0)

    logging_enabled: bool = True
    log_destination: LogDestination = LogDestination.FIXED_FILE
    log_file: str = "Pomodoro Log.md"
    log_note: str = "Pomodoro Sessions.md"
    daily_note_folder: str = ""
    daily_note_format: str = "%Y-%m-%d"
    unsuccessful_log_file: Optional[str] = None

    confirm_on_session_start: bool = False
    confirm_on_session_end: bool = False
    manual_advance: bool = False
    auto_start_next: bool = True
    auto_stop_after_cycles: int = Field(default=0, ge=0)

    include_active_note_link: bool = False
    use_emoji: bool = True
    play_sound_on_end: bool = True
    show_system_notification_on_end: bool = False
    white_noise: bool = False


class AppSettings(BaseModel):
    """Process-level settings for the HTTP service"""
    vault_dir: str = "."
    notification_webhook_url: Optional[str] = None
    confirmation_mode: ConfirmationMode = ConfirmationMode.PROMPT
    timer: TimerSettings = Field(default_factory=TimerSettings)


def _read_env(fields, prefix: str) -> dict:
    values = {}
    for name in fields:
        raw = os.getenv(f"{prefix}{name.upper()}")
        if raw is not None and raw != "":
            values[name] = raw
    return values


def load_settings() -> AppSettings:
    """
    Build settings from POMO_* environment variables.

    Timer fields use their upper-cased name, e.g. POMO_POMO_MINUTES=50 or
    POMO_CONFIRM_ON_SESSION_END=true. Unset variables keep their defaults.
    """
    timer_values = _read_env(TimerSettings.model_fields, ENV_PREFIX)
    app_fields = [name for name in AppSettings.model_fields if name != "timer"]
    app_values = _read_env(app_fields, ENV_PREFIX)
    return AppSettings(timer=TimerSettings(**timer_values), **app_values)


_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get or create the settings singleton"""
    global _settings

    if _settings is None:
        _settings = load_settings()

    return _settings


def reset_settings():
    """Reset the settings singleton (useful for testing)"""
    global _settings
    _settings = None
