"""Event ids and the default calendar anchor."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """UUID4 string used for event and correlation ids."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Aware UTC now; the default ``start`` of a calendar."""
    return datetime.now(timezone.utc)
