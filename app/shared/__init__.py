"""Shared utilities: logging and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.logging import (
    get_audit_logger,
    request_id_ctx,
    setup_logging,
)
from app.shared.utils import ensure_utc, generate_cuid, parse_utc

__all__ = [
    "get_audit_logger",
    "request_id_ctx",
    "setup_logging",
    "generate_cuid",
    "ensure_utc",
    "parse_utc",
]
