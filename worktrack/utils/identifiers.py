"""Identifier normalization helpers.

Identifiers reach the workflow from several places (UUID columns, JSON
payloads, request headers) and are compared as opaque canonical strings.
"""
from __future__ import annotations

import uuid
from typing import Any, Optional


def normalize_id(value: Any) -> Optional[str]:
    """Return the canonical string form of an identifier, or None if empty."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return str(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return str(uuid.UUID(text))
    except ValueError:
        return text


def ids_match(left: Any, right: Any) -> bool:
    """Compare two identifiers by normalized value; empty ids never match."""
    left_norm = normalize_id(left)
    return left_norm is not None and left_norm == normalize_id(right)


def as_uuid(value: Any) -> Optional[uuid.UUID]:
    """Parse a record identifier, returning None when it cannot resolve."""
    if isinstance(value, uuid.UUID):
        return value
    normalized = normalize_id(value)
    if normalized is None:
        return None
    try:
        return uuid.UUID(normalized)
    except ValueError:
        return None
