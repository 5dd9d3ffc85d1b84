"""Logging configuration for the application.

Every record carries the current request id (set by RequestIDMiddleware via
request_id_ctx); records emitted outside a request show "-".
"""

import logging
import sys
from contextvars import ContextVar

from app.core.config import get_settings

# Ownership-scope overrides are written here so operators can route them separately.
AUDIT_LOGGER_NAME = "app.audit"

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Attach request_id from request_id_ctx to each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        handlers=[handler],
    )


def get_audit_logger() -> logging.Logger:
    """Return the audit logger (administrative overrides, access bypasses)."""
    return logging.getLogger(AUDIT_LOGGER_NAME)
