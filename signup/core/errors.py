# signup/core/errors.py
"""Error kinds returned by the session registry and the attendance ledger.

Core operations return ``(result, error)`` tuples; ``error`` is ``None`` on
success or one of the constants below. The HTTP layer turns them into
responses with :func:`raise_for_error`.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from fastapi import HTTPException, status

VALIDATION = "validation"
NOT_FOUND = "not_found"
UNAUTHORIZED = "unauthorized"
FORBIDDEN = "forbidden"
FULL = "full"
NO_FIELDS = "no_fields"
CONFLICT = "conflict"

HTTP_MAPPING: Dict[str, Tuple[int, str]] = {
    VALIDATION: (status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid session data"),
    NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Not found"),
    UNAUTHORIZED: (status.HTTP_403_FORBIDDEN, "Incorrect management code"),
    FORBIDDEN: (status.HTTP_403_FORBIDDEN, "Access denied to private session"),
    FULL: (status.HTTP_409_CONFLICT, "Session is already full"),
    NO_FIELDS: (status.HTTP_400_BAD_REQUEST, "No fields to update"),
    CONFLICT: (status.HTTP_503_SERVICE_UNAVAILABLE, "Could not generate a unique code, retry"),
}


def raise_for_error(err: Optional[str], not_found: str | None = None) -> None:
    """Raise the HTTPException matching ``err``; no-op when ``err`` is None."""
    if err is None:
        return
    sc, msg = HTTP_MAPPING.get(err, (status.HTTP_500_INTERNAL_SERVER_ERROR, err))
    if err == NOT_FOUND and not_found:
        msg = not_found
    raise HTTPException(status_code=sc, detail=msg)
