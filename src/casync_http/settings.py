"""
Settings and configuration for casync-http.

Centralizes configuration values and provides validation with fail-fast behavior.
Loads settings from environment variables when the CLI starts.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from . import __version__

__all__ = ["Settings", "create_settings_from_env", "DEFAULT_USER_AGENT"]

DEFAULT_USER_AGENT = f"casync-http/{__version__}"


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for casync-http.

    HTTP Settings:
        http_timeout_s: HTTP timeout in seconds (None waits indefinitely)
        http_retry: Number of retries for failed connection attempts (0=no retry)
        user_agent: User-Agent header sent with every request

    Chunk Settings:
        round_robin: Rotate chunk requests across all stores instead of
            always asking the first one

    Engine Settings:
        engine_factory: "module:attribute" path of the protocol engine factory
    """
    # HTTP settings
    http_timeout_s: Optional[float] = None
    http_retry: int = 0
    user_agent: str = DEFAULT_USER_AGENT

    round_robin: bool = False

    engine_factory: Optional[str] = None

    def __post_init__(self):
        """Validate settings on construction."""
        # Validate timeout is positive when set
        if self.http_timeout_s is not None and self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

        # Validate retry count is non-negative
        if self.http_retry < 0:
            raise ValueError(f"http_retry must be non-negative, got {self.http_retry}")

        if not self.user_agent:
            raise ValueError("user_agent cannot be empty")

        if self.engine_factory is not None:
            factory_pattern = r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$"
            if not re.match(factory_pattern, self.engine_factory):
                raise ValueError(
                    f"Invalid engine_factory format: {self.engine_factory}. Expected 'module:attribute'"
                )


# Settings loading functions (no caching)


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - CASYNC_HTTP_TIMEOUT (default: unset, no timeout)
        - CASYNC_HTTP_RETRY (default: 0)
        - CASYNC_HTTP_USER_AGENT (default: casync-http/<version>)
        - CASYNC_HTTP_ROUND_ROBIN (default: false)
        - CASYNC_HTTP_ENGINE (optional, "module:attribute")

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
        This ensures test isolation and eliminates global state.
    """
    return _load_settings_impl()


def _load_settings_impl() -> Settings:
    """Internal implementation of settings loading."""
    # Helper to convert string to bool
    def str_to_bool(value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on')

    # Helper to get optional float from env
    def get_float(key: str) -> Optional[float]:
        value = os.getenv(key)
        return float(value) if value else None

    # Helper to get int from env
    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    return Settings(
        http_timeout_s=get_float("CASYNC_HTTP_TIMEOUT"),
        http_retry=get_int("CASYNC_HTTP_RETRY", 0),
        user_agent=os.getenv("CASYNC_HTTP_USER_AGENT") or DEFAULT_USER_AGENT,
        round_robin=str_to_bool(os.getenv("CASYNC_HTTP_ROUND_ROBIN", "false")),
        engine_factory=os.getenv("CASYNC_HTTP_ENGINE") or None,
    )
