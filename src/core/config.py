"""
Configuration constants and environment setup.
"""

import os
from dataclasses import dataclass
from datetime import time
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from core.errors import ConfigError
from core.validation import parse_clock, parse_int, parse_timezone, parse_weekdays

load_dotenv()

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

GRAPH_SCOPE = "https://graph.microsoft.com/.default"

# =============================================================================
# SCHEDULE DEFAULTS
# =============================================================================

DEFAULT_WORK_TIMEZONE = "UTC"
DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"
DEFAULT_WORK_DAYS = "0,1,2,3,4"  # Monday-Friday
DEFAULT_TICK_INTERVAL_MINUTES = 15
DEFAULT_LOOKAHEAD_MINUTES = 30
DEFAULT_FETCH_TIMEOUT_SECONDS = 60

# =============================================================================
# DISPLAY
# =============================================================================

BUSY_MESSAGE = "Meeting in\nProgress!"
FREE_MESSAGE = "I'm free!"
DEFAULT_LCD_I2C_ADDRESS = "0x20"

# =============================================================================
# NOTIFICATIONS
# =============================================================================

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"
NOTIFICATION_TITLE = "Meeting Indicator Error"

# =============================================================================
# MS GRAPH CREDENTIALS (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")

# =============================================================================
# API CONFIGURATION
# =============================================================================

INDICATOR_API_KEY = os.environ.get("INDICATOR_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class Settings:
    """Validated runtime settings for one indicator process."""

    calendar_id: str = ""
    user_id: str = ""
    work_timezone: ZoneInfo = ZoneInfo(DEFAULT_WORK_TIMEZONE)
    work_start: time = time(9, 0)
    work_end: time = time(17, 0)
    work_days: frozenset[int] = frozenset({0, 1, 2, 3, 4})
    tick_interval_minutes: int = DEFAULT_TICK_INTERVAL_MINUTES
    tick_cron: str = ""
    lookahead_minutes: int = DEFAULT_LOOKAHEAD_MINUTES
    fetch_timeout_seconds: int = DEFAULT_FETCH_TIMEOUT_SECONDS
    display_backend: str = "console"
    lcd_i2c_address: int = 0x20
    notify_backend: str = "log"
    pushover_token: str = ""
    pushover_user: str = ""
    from_email: str = ""
    error_email: str = ""

    @property
    def cron_expression(self) -> str:
        """Cron schedule for the trigger; derived from the interval unless set."""
        if self.tick_cron:
            return self.tick_cron
        if self.tick_interval_minutes < 60:
            return f"*/{self.tick_interval_minutes} * * * *"
        return f"0 */{self.tick_interval_minutes // 60} * * *"


def check_tick_interval(minutes: int) -> None:
    """
    Reject intervals that a step cron expression cannot repeat evenly.

    Steps restart at the top of each hour (minutes) or day (hours), so the
    interval must divide 60, or be whole hours that divide 24.

    Raises:
        ConfigError: if the interval would produce uneven gaps
    """
    if minutes < 60 and 60 % minutes == 0:
        return
    if minutes % 60 == 0 and 1440 % minutes == 0:
        return
    raise ConfigError(
        f"TICK_INTERVAL_MINUTES={minutes} does not repeat evenly; "
        "use a divisor of 60, whole hours dividing 24, or set TICK_CRON"
    )


def load_settings(environ=None) -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        ConfigError: if any value fails validation
    """
    env = os.environ if environ is None else environ

    pushover_token = env.get("PUSHOVER_TOKEN", "")
    default_notify = "pushover" if pushover_token else "log"

    tick_cron = env.get("TICK_CRON", "").strip()
    tick_interval = parse_int(
        env.get("TICK_INTERVAL_MINUTES", str(DEFAULT_TICK_INTERVAL_MINUTES)),
        "TICK_INTERVAL_MINUTES",
    )
    if not tick_cron:
        check_tick_interval(tick_interval)

    return Settings(
        calendar_id=env.get("OUTLOOK_CALENDAR_ID", ""),
        user_id=env.get("OUTLOOK_USER_ID", ""),
        work_timezone=parse_timezone(
            env.get("WORK_TIMEZONE", DEFAULT_WORK_TIMEZONE), "WORK_TIMEZONE"
        ),
        work_start=parse_clock(env.get("WORK_START", DEFAULT_WORK_START), "WORK_START"),
        work_end=parse_clock(env.get("WORK_END", DEFAULT_WORK_END), "WORK_END"),
        work_days=parse_weekdays(env.get("WORK_DAYS", DEFAULT_WORK_DAYS), "WORK_DAYS"),
        tick_interval_minutes=tick_interval,
        tick_cron=tick_cron,
        lookahead_minutes=parse_int(
            env.get("LOOKAHEAD_MINUTES", str(DEFAULT_LOOKAHEAD_MINUTES)), "LOOKAHEAD_MINUTES"
        ),
        fetch_timeout_seconds=parse_int(
            env.get("FETCH_TIMEOUT_SECONDS", str(DEFAULT_FETCH_TIMEOUT_SECONDS)),
            "FETCH_TIMEOUT_SECONDS",
        ),
        display_backend=env.get("DISPLAY_BACKEND", "console").strip().lower(),
        lcd_i2c_address=parse_int(
            env.get("LCD_I2C_ADDRESS", DEFAULT_LCD_I2C_ADDRESS), "LCD_I2C_ADDRESS", minimum=0
        ),
        notify_backend=env.get("NOTIFY_BACKEND", default_notify).strip().lower(),
        pushover_token=pushover_token,
        pushover_user=env.get("PUSHOVER_USER", ""),
        from_email=env.get("FROM_EMAIL", ""),
        error_email=env.get("ERROR_EMAIL", ""),
    )
