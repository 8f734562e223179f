"""Caller identity as supplied by an upstream identity provider.

No authentication happens here: an authenticating proxy in front of the API is
expected to forward the caller's display name in a request header (see
``EXPENSE_IDENTITY_HEADER``). The value is handed to the create operations
explicitly instead of being read from request-scoped globals.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Request

from .config import DEFAULT_IDENTITY_HEADER


def current_identity(request: Request) -> Optional[str]:
    """FastAPI dependency returning the caller identity, or ``None``."""
    settings = getattr(request.app.state, "settings", None)
    header = settings.identity_header if settings is not None else DEFAULT_IDENTITY_HEADER
    value = request.headers.get(header)
    if value is None or not value.strip():
        return None
    return value.strip()
