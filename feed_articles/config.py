from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import structlog

__version__ = "0.1.0"

logger = structlog.get_logger()

_TRUE_VALUES = {"1", "true", "yes", "on"}
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning("invalid_setting", name=name, value=raw, default=default)
        return default


@dataclass(frozen=True)
class Settings:
    """
    Transport and logging settings.

    `Settings.from_env()` reads FEED_* environment variables; fields not set
    in the environment, or set to unusable values, keep the defaults below.
    """
    timeout: float = 30.0
    user_agent: str = f"feed-articles/{__version__}"
    follow_redirects: bool = True
    max_concurrency: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = _env_number("FEED_TIMEOUT", cls.timeout, float)
        if not timeout > 0:
            timeout = cls.timeout
        max_concurrency = _env_number("FEED_MAX_CONCURRENCY", 0, int)
        log_level = os.getenv("FEED_LOG_LEVEL", cls.log_level).strip().upper()
        if log_level not in LOG_LEVELS:
            logger.warning("invalid_setting", name="FEED_LOG_LEVEL", value=log_level, default=cls.log_level)
            log_level = cls.log_level
        return cls(
            timeout=timeout,
            user_agent=os.getenv("FEED_USER_AGENT", cls.user_agent),
            follow_redirects=os.getenv("FEED_FOLLOW_REDIRECTS", "true").strip().lower() in _TRUE_VALUES,
            # 0 means no cap on in-flight requests
            max_concurrency=max_concurrency if max_concurrency > 0 else None,
            log_level=log_level,
        )
