import logging.config
import os
from pathlib import Path

import structlog

# Optionally load .env file if using python-dotenv
from dotenv import load_dotenv

from apps.bookings.domain.selector import BoundaryTapPolicy
from apps.locations.domain.rating import RatingRounding

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


class ImproperlyConfigured(Exception):
    """An environment variable holds a value the app cannot use."""


# Helper to get environment variables or raise


def get_env(var_name: str, default=None, required: bool = False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ""):
        raise ImproperlyConfigured(f"Missing required environment variable: {var_name}")
    return value


def _get_choice(var_name: str, choices, default):
    raw = str(get_env(var_name, default.value)).strip().lower()
    for choice in choices:
        if choice.value == raw:
            return choice
    allowed = ", ".join(choice.value for choice in choices)
    raise ImproperlyConfigured(f"{var_name}={raw!r} is not one of: {allowed}")


def _get_int(var_name: str, default: int, minimum: int = 1) -> int:
    raw = get_env(var_name, str(default))
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ImproperlyConfigured(f"{var_name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ImproperlyConfigured(f"{var_name} must be at least {minimum}")
    return value


# BOOKING WINDOW
# restart: tapping the anchor again restarts the selection
# single_day: tapping the anchor again selects that one day
LOCKER_DATE_BOUNDARY_POLICY = _get_choice(
    "LOCKER_DATE_BOUNDARY_POLICY", list(BoundaryTapPolicy), BoundaryTapPolicy.RESTART
)

# Billable hours in one day when pricing in daily mode
LOCKER_DAILY_RATE_HOURS = _get_int("LOCKER_DAILY_RATE_HOURS", 24)

LOCKER_CURRENCY = get_env("LOCKER_CURRENCY", "USD").upper()
if LOCKER_CURRENCY not in ("USD", "EUR", "GBP", "KZT"):
    raise ImproperlyConfigured(f"Unsupported LOCKER_CURRENCY: {LOCKER_CURRENCY}")

# REVIEWS
LOCKER_RATING_ROUNDING = _get_choice(
    "LOCKER_RATING_ROUNDING", list(RatingRounding), RatingRounding.HALF_UP
)

# LOGGING
LOCKER_LOG_LEVEL = get_env("LOCKER_LOG_LEVEL", "INFO").upper()
LOCKER_LOG_FORMAT = get_env("LOCKER_LOG_FORMAT", "json").lower()
if LOCKER_LOG_FORMAT not in ("json", "console"):
    raise ImproperlyConfigured("LOCKER_LOG_FORMAT must be 'json' or 'console'")


def build_logging_config(level: str = LOCKER_LOG_LEVEL, fmt: str = LOCKER_LOG_FORMAT) -> dict:
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": "structlog.stdlib.ProcessorFormatter",
                "processor": renderer,
                "foreign_pre_chain": [
                    structlog.processors.TimeStamper(fmt="iso"),
                    structlog.stdlib.add_log_level,
                ],
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "level": level,
            }
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
        "loggers": {
            "apps": {"handlers": ["console"], "level": level, "propagate": False},
            "shared": {"handlers": ["console"], "level": level, "propagate": False},
        },
    }


def configure_logging(level: str = LOCKER_LOG_LEVEL, fmt: str = LOCKER_LOG_FORMAT) -> None:
    """Route structlog and stdlib logging through one JSON (or console) handler."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(build_logging_config(level, fmt))
