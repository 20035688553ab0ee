"""Calendar events published on the event bus.

Design invariants
-----------------
1.  Every event is **immutable** (``frozen=True``).
2.  Every event type has exactly **one writer** -- see ``WRITE_OWNERSHIP``.
3.  ``event_id`` is a UUID4 generated at creation time.
4.  ``correlation_id`` links all events emitted by the *same* navigation
    or fill call.

Renderers and navigation controls subscribe to these instead of
registering callbacks on the calendar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from calendar_heatmap.core.enums import ScrollDirection
from calendar_heatmap.core.ids import new_id as _uuid
from calendar_heatmap.core.ids import utc_now as _now

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CalendarEvent:
    """Immutable base for every calendar event.

    Shared fields
    ~~~~~~~~~~~~~
    event_id        Unique identity (UUID4).
    timestamp       UTC creation time.
    correlation_id  Groups events from the same call.
    source          Writer component that produced this event.
    """

    event_id: str = field(default_factory=_uuid)
    timestamp: datetime = field(default_factory=_now)
    correlation_id: str = ""
    source: str = ""


# =========================================================================
# Navigation  (writer: navigator)
# =========================================================================

@dataclass(frozen=True)
class DomainsLoaded(CalendarEvent):
    """New domains entered the window."""

    direction: ScrollDirection = ScrollDirection.SCROLL_NONE
    domains: tuple[datetime, ...] = ()


@dataclass(frozen=True)
class DomainsEvicted(CalendarEvent):
    """Domains left the window to keep it within ``range``."""

    domains: tuple[datetime, ...] = ()


@dataclass(frozen=True)
class BoundaryEvent(CalendarEvent):
    """Base of the four min/max transitions; subscribe here for all of them."""

    boundary: datetime | None = None


@dataclass(frozen=True)
class MinDateReached(BoundaryEvent):
    """The window now starts at the configured min date."""


@dataclass(frozen=True)
class MinDateNotReached(BoundaryEvent):
    """The window moved away from the configured min date."""


@dataclass(frozen=True)
class MaxDateReached(BoundaryEvent):
    """The window now ends at the configured max date."""


@dataclass(frozen=True)
class MaxDateNotReached(BoundaryEvent):
    """The window moved away from the configured max date."""


# =========================================================================
# Data  (writer: populator)
# =========================================================================

@dataclass(frozen=True)
class CellsFilled(CalendarEvent):
    """Cell values changed in the listed domains."""

    domains: tuple[datetime, ...] = ()
    cell_count: int = 0
    skipped: int = 0  # Values ignored: stale, out of range or unparseable


# ---------------------------------------------------------------------------
# Write ownership
# ---------------------------------------------------------------------------

WRITE_OWNERSHIP: dict[type[CalendarEvent], str] = {
    DomainsLoaded: "navigator",
    DomainsEvicted: "navigator",
    MinDateReached: "navigator",
    MinDateNotReached: "navigator",
    MaxDateReached: "navigator",
    MaxDateNotReached: "navigator",
    CellsFilled: "populator",
}
