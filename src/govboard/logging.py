"""Logging configuration for govboard.

The ``govboard`` logger gets a console handler and, when a log directory is
configured, a rotating file handler. Component modules log through
``logging.getLogger(__name__)`` and inherit this setup.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from govboard.config import load_settings

if TYPE_CHECKING:
    from govboard.config import Settings

LOG_FILE = "govboard.log"
MAX_BYTES = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-request chatter from the HTTP stack, shown only at DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore")

_SECRET_PATTERNS = [
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._-]+"), "token=[REDACTED]"),
    (
        re.compile(r'"(access_?[tT]oken|refresh_?[tT]oken|password)"\s*:\s*"[^"]*"'),
        r'"\1": "[REDACTED]"',
    ),
]


def setup_logging(
    settings: Settings | None = None,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
) -> logging.Logger:
    """Configure the ``govboard`` logger from settings.

    Safe to call repeatedly; handlers from an earlier call are replaced.

    Args:
        settings: Logging settings; read from the environment when None.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.

    Returns:
        The ``govboard`` logger.
    """
    settings = settings or load_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logger = logging.getLogger("govboard")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = []
    if settings.log_console:
        handlers.append(logging.StreamHandler())

    log_path = None
    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILE
        handlers.append(
            RotatingFileHandler(
                log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    http_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    logger.info(
        "govboard logging initialized (level=%s, file=%s)", settings.log_level, log_path or "-"
    )
    return logger


def format_fallbacks(hits: Counter[str], limit: int = 5) -> str:
    """Summarize status fallback counts, most frequent first.

    >>> format_fallbacks(Counter({"PARKED": 3, "": 1}))
    'PARKED x3, <empty> x1'
    """
    shown = hits.most_common(limit)
    parts = [f"{status or '<empty>'} x{count}" for status, count in shown]
    hidden = len(hits) - len(shown)
    if hidden > 0:
        parts.append(f"(+{hidden} more)")
    return ", ".join(parts)


def truncate_output(output: str, max_length: int = 500) -> str:
    """Truncate a long upstream response body for logging."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Redact bearer tokens, token query parameters and JSON secrets."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text
