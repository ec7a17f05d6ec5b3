"""Logging setup for the DRAV API.

Every record passes through `SecretRedactingFilter` so Lark credentials,
user access tokens and our own session JWTs never reach the log stream.
"""

import logging
import re
import sys
from collections.abc import Iterable, MutableMapping
from typing import Any, Literal

from src.config import get_settings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_BEARER_RE = re.compile(r"(Bearer\s+)([A-Za-z0-9\-_.~+/=]+)")

_NOISY_LOGGERS = ("httpx", "httpcore", "asyncpg", "sqlalchemy.engine", "uvicorn.access")


def mask_secret(secret: str, visible_chars: int = 4) -> str:
    """Mask a secret, keeping a few characters at each end ("abcd...wxyz")."""
    if len(secret) <= visible_chars * 2:
        return "*" * len(secret)
    return f"{secret[:visible_chars]}...{secret[-visible_chars:]}"


class SecretRedactingFilter(logging.Filter):
    """Mask known secrets and bearer tokens in formatted log messages."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        # Short values would mask unrelated text
        self.secrets = [s for s in secrets if s and len(s) >= 8]

    def redact(self, message: str) -> str:
        message = _BEARER_RE.sub(lambda m: m.group(1) + mask_secret(m.group(2)), message)
        for secret in self.secrets:
            message = message.replace(secret, mask_secret(secret))
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure root logging.

    The level comes from the argument, then LOG_LEVEL, then the environment
    (INFO in production, DEBUG elsewhere).
    """
    settings = get_settings()
    level = level or settings.log_level or ("INFO" if settings.is_production else "DEBUG")

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(SecretRedactingFilter([settings.lark_app_secret, settings.jwt_secret]))

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with `[key=value]` pairs.

        ctx = LogContext(logger, lark_id="ou_123")
        ctx.info("User logged in")  # "[lark_id=ou_123] User logged in"
    """

    def __init__(self, logger: logging.Logger, **context: object) -> None:
        super().__init__(logger, context)
        self.prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix} {msg}", kwargs
