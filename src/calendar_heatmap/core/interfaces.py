"""Protocol interfaces for the calendar engine.

Data sources are the only pluggable boundary: anything with an async
``fetch(start, end)`` returning timestamp -> value can feed the calendar.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Data source
# ---------------------------------------------------------------------------

@runtime_checkable
class DataSource(Protocol):
    """Supplies raw values for a date range.

    Keys may be datetimes, ISO strings or epoch seconds.  Values outside
    ``[start, end)`` are allowed and are filtered by the caller.
    """

    async def fetch(self, start: datetime, end: datetime) -> Mapping[Any, Any]: ...


class StaticDataSource:
    """In-memory data source over a fixed mapping."""

    def __init__(self, data: Mapping[Any, Any] | None = None) -> None:
        self._data: dict[Any, Any] = dict(data or {})
        self.calls: list[tuple[datetime, datetime]] = []

    async def fetch(self, start: datetime, end: datetime) -> Mapping[Any, Any]:
        self.calls.append((start, end))
        return dict(self._data)

    def set(self, data: Mapping[Any, Any]) -> None:
        """Replace the served mapping."""
        self._data = dict(data)
