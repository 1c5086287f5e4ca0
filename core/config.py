"""Environment-driven settings for the Horizon Events service."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .astro import SR_WINDOW, TWILIGHT_ANGLES

LOGGER = logging.getLogger(__name__)

DEFAULT_TWILIGHT = "official"
DEFAULT_CORS_ORIGINS: Tuple[str, ...] = ("*",)
DEFAULT_LOG_LEVEL = "INFO"


class ConfigurationError(RuntimeError):
    """Raised when an environment setting cannot be used."""


@dataclass(frozen=True)
class Settings:
    window_hours: int = SR_WINDOW
    twilight: str = DEFAULT_TWILIGHT
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = DEFAULT_LOG_LEVEL


def _window_hours(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return SR_WINDOW
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"RISESET_WINDOW_HOURS must be an integer: {raw!r}") from exc
    if value <= 0 or value % 2:
        raise ConfigurationError(
            f"RISESET_WINDOW_HOURS must be a positive even integer: {value}"
        )
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from *environ* (defaults to :data:`os.environ`).

    Recognised variables are ``RISESET_WINDOW_HOURS``, ``RISESET_TWILIGHT``,
    ``RISESET_CORS_ORIGINS`` (comma separated) and ``RISESET_LOG_LEVEL``.
    """

    env = os.environ if environ is None else environ

    twilight = env.get("RISESET_TWILIGHT", DEFAULT_TWILIGHT).strip().lower()
    if twilight not in TWILIGHT_ANGLES:
        raise ConfigurationError(f"Unsupported RISESET_TWILIGHT value: {twilight!r}")

    origins_raw = env.get("RISESET_CORS_ORIGINS")
    if origins_raw:
        origins = tuple(item.strip() for item in origins_raw.split(",") if item.strip())
    else:
        origins = DEFAULT_CORS_ORIGINS

    log_level = env.get("RISESET_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Unknown RISESET_LOG_LEVEL: {log_level!r}")

    settings = Settings(
        window_hours=_window_hours(env.get("RISESET_WINDOW_HOURS")),
        twilight=twilight,
        cors_origins=origins or DEFAULT_CORS_ORIGINS,
        log_level=log_level,
    )
    LOGGER.debug(
        json.dumps(
            {
                "event": "settings_loaded",
                "window_hours": settings.window_hours,
                "twilight": settings.twilight,
                "cors_origins": list(settings.cors_origins),
                "log_level": settings.log_level,
            }
        )
    )
    return settings
