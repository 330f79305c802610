"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_API_BASE_URL = "http://localhost:5001/api"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_FALSE = ("0", "false", "no")


class ConfigError(Exception):
    """Environment holds an invalid setting."""


@dataclass(frozen=True)
class Settings:
    """Settings for the tracker backend client and logging.

    Attributes:
        api_base_url: Base URL of the backend REST API.
        api_token: Optional bearer token sent with every request.
        http_timeout: Per-request timeout in seconds.
        log_dir: Directory for the rotating log file; None logs to the console only.
        log_level: Level name for the govboard logger.
        log_console: Whether to also log to stderr.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_dir: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    log_console: bool = True


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from GOVBOARD_* environment variables.

    Raises:
        ConfigError: If GOVBOARD_HTTP_TIMEOUT is not a positive number, or
            GOVBOARD_LOG_LEVEL is not a logging level name.
    """
    env = os.environ if environ is None else environ

    raw_timeout = env.get("GOVBOARD_HTTP_TIMEOUT")
    timeout = DEFAULT_HTTP_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"GOVBOARD_HTTP_TIMEOUT must be a number, got {raw_timeout!r}") from e
        if timeout <= 0:
            raise ConfigError(f"GOVBOARD_HTTP_TIMEOUT must be positive, got {raw_timeout!r}")

    log_level = (env.get("GOVBOARD_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"GOVBOARD_LOG_LEVEL must be one of {_LOG_LEVELS}, got {log_level!r}")

    return Settings(
        api_base_url=env.get("GOVBOARD_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        api_token=env.get("GOVBOARD_API_TOKEN") or None,
        http_timeout=timeout,
        log_dir=env.get("GOVBOARD_LOG_DIR") or None,
        log_level=log_level,
        log_console=env.get("GOVBOARD_LOG_CONSOLE", "true").strip().lower() not in _FALSE,
    )
