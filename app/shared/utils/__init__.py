"""Shared utilities: datetime and id generators."""

from app.shared.utils.datetime import ensure_utc, parse_utc
from app.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "ensure_utc",
    "parse_utc",
]
