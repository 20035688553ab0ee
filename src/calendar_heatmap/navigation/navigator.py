"""Scroll / jump state machine over the live domain window.

The navigator turns navigation requests into *candidate* collections,
trims them against the configured date bounds and the window size, merges
them into the live ``DomainCollection`` and tracks whether the window sits
on the min/max boundary.

Design decisions
----------------
* **Synchronous mutation** -- Every window change happens before the first
  ``await`` of a call; only event publication is asynchronous.  A second
  call issued while a data fetch for the first one is pending therefore
  always sees a consistent window.
* **Symmetry** -- Forward loads keep the newest ``range`` domains,
  backward loads the oldest ``range``.  Anything else makes the window
  drift across repeated scrolls.
* **Transitions only** -- Boundary events fire when ``min_reached`` /
  ``max_reached`` flip, never while the window stays on a boundary.  The
  two flags are independent.
"""

from __future__ import annotations

import logging
from datetime import datetime

from calendar_heatmap.core.config import CalendarOptions
from calendar_heatmap.core.enums import ScrollDirection
from calendar_heatmap.core.ids import new_id
from calendar_heatmap.core.models import Cell
from calendar_heatmap.domain.events import (
    BoundaryEvent,
    DomainsEvicted,
    DomainsLoaded,
    MaxDateNotReached,
    MaxDateReached,
    MinDateNotReached,
    MinDateReached,
)
from calendar_heatmap.infrastructure.event_bus import IEventBus
from calendar_heatmap.layout.skeleton import DomainSkeleton

from .domain_collection import DomainCollection

logger = logging.getLogger(__name__)

_SOURCE = "navigator"


class Navigator:
    """Loads domains into the window and tracks the boundary state.

    Parameters
    ----------
    options:
        Frozen calendar options (range, bounds, units).
    skeleton:
        Layout used to build the cells of newly loaded domains.
    collection:
        The live window, mutated in place.
    event_bus:
        Bus receiving ``DomainsLoaded``/``DomainsEvicted`` and boundary
        transition events.
    """

    def __init__(
        self,
        options: CalendarOptions,
        skeleton: DomainSkeleton,
        collection: DomainCollection,
        event_bus: IEventBus,
    ) -> None:
        self._options = options
        self._skeleton = skeleton
        self._helper = skeleton.helper
        self._collection = collection
        self._event_bus = event_bus

        unit = options.domain
        self._min_date = (
            self._helper.extract_unit(options.min_date, unit)
            if options.min_date is not None else None
        )
        self._max_date = (
            self._helper.extract_unit(options.max_date, unit)
            if options.max_date is not None else None
        )

        self._min_reached = False
        self._max_reached = False
        self._last_loaded: list[datetime] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def collection(self) -> DomainCollection:
        return self._collection

    @property
    def min_reached(self) -> bool:
        return self._min_reached

    @property
    def max_reached(self) -> bool:
        return self._max_reached

    @property
    def min_date(self) -> datetime | None:
        """Configured min date, normalized to its domain start."""
        return self._min_date

    @property
    def max_date(self) -> datetime | None:
        """Configured max date, normalized to its domain start."""
        return self._max_date

    @property
    def last_loaded(self) -> list[datetime]:
        """Domains inserted by the most recent load."""
        return list(self._last_loaded)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def initialize(self, anchor: datetime | None = None) -> ScrollDirection:
        """Build the first window from *anchor* (defaults to ``options.start``).

        The anchor is pulled inside ``[min_date, max_date]`` first so the
        window is never empty.
        """
        anchor = anchor if anchor is not None else self._options.start
        anchor = self._helper.extract_unit(anchor, self._options.domain)
        if self._max_date is not None and anchor > self._max_date:
            anchor = self._max_date
        if self._min_date is not None and anchor < self._min_date:
            anchor = self._min_date

        window = DomainCollection.create_initial(
            self._skeleton, anchor, self._options.range,
        ).clamp(self._min_date, self._max_date)

        inserted = self._collection.merge(
            window,
            self._options.range,
            lambda key, _index: window.get(key) or [],
            ScrollDirection.SCROLL_FORWARD,
        )
        logger.info(
            "Calendar window initialized: %d %s domain(s) from %s",
            len(inserted),
            self._options.domain.value,
            anchor.isoformat(),
        )
        return await self._finish_load(inserted, ScrollDirection.SCROLL_FORWARD)

    async def load_new_domains(
        self,
        candidates: DomainCollection,
        direction: ScrollDirection = ScrollDirection.SCROLL_FORWARD,
    ) -> ScrollDirection:
        """Merge *candidates* into the window.

        Returns the direction applied, or ``SCROLL_NONE`` when the window
        already sits on the boundary in that direction or nothing new was
        inserted.
        """
        if self._boundary_blocks(candidates, direction):
            logger.debug(
                "Scroll %s ignored: boundary already reached", direction.value,
            )
            self._last_loaded = []
            return ScrollDirection.SCROLL_NONE

        candidates.clamp(self._min_date, self._max_date).slice(
            self._options.range,
            keep_newest=direction == ScrollDirection.SCROLL_FORWARD,
        )

        inserted = self._collection.merge(
            candidates,
            self._options.range,
            self._build_sub_domains,
            direction,
        )
        return await self._finish_load(inserted, direction)

    async def next(self, n: int = 1) -> ScrollDirection:
        """Load the *n* domains following the window."""
        self._last_loaded = []
        if n <= 0 or self._collection.max is None:
            return ScrollDirection.SCROLL_NONE
        unit = self._options.domain
        start = self._helper.shift(self._collection.max, 1, unit)
        candidates = DomainCollection.from_interval(unit, self._helper, start, n)
        return await self.load_new_domains(
            candidates, ScrollDirection.SCROLL_FORWARD,
        )

    async def previous(self, n: int = 1) -> ScrollDirection:
        """Load the *n* domains preceding the window."""
        self._last_loaded = []
        if n <= 0 or self._collection.min is None:
            return ScrollDirection.SCROLL_NONE
        candidates = DomainCollection.from_interval(
            self._options.domain, self._helper, self._collection.min, -n,
        )
        return await self.load_new_domains(
            candidates, ScrollDirection.SCROLL_BACKWARD,
        )

    async def jump_to(self, date: datetime, reset: bool = False) -> ScrollDirection:
        """Scroll until the domain containing *date* is in the window.

        With ``reset`` the target domain becomes the first domain of the
        window.
        """
        self._last_loaded = []
        lower, upper = self._collection.min, self._collection.max
        if lower is None or upper is None:
            return ScrollDirection.SCROLL_NONE

        unit = self._options.domain
        target = self._helper.extract_unit(self._helper.to_datetime(date, lower), unit)

        if target < lower:
            candidates = DomainCollection.from_interval(
                unit, self._helper, target, lower,
            )
            return await self.load_new_domains(
                candidates, ScrollDirection.SCROLL_BACKWARD,
            )

        if reset:
            # Past the window, start right after it so a clamped load
            # stays contiguous with the kept domains.
            first = min(target, self._helper.shift(upper, 1, unit))
            candidates = DomainCollection.from_interval(
                unit,
                self._helper,
                first,
                self._helper.shift(target, self._options.range, unit),
            )
            direction = (
                ScrollDirection.SCROLL_FORWARD
                if lower < target
                else ScrollDirection.SCROLL_BACKWARD
            )
            return await self.load_new_domains(candidates, direction)

        if target > upper:
            candidates = DomainCollection.from_interval(
                unit,
                self._helper,
                self._helper.shift(upper, 1, unit),
                self._helper.shift(target, 1, unit),
            )
            return await self.load_new_domains(
                candidates, ScrollDirection.SCROLL_FORWARD,
            )

        return ScrollDirection.SCROLL_NONE

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_sub_domains(self, key: datetime, _index: int) -> list[Cell]:
        return self._skeleton.cells(key)

    def _boundary_blocks(
        self, candidates: DomainCollection, direction: ScrollDirection,
    ) -> bool:
        if direction == ScrollDirection.SCROLL_FORWARD:
            return (
                self._max_reached
                and self._max_date is not None
                and (candidates.max is None or candidates.max >= self._max_date)
            )
        if direction == ScrollDirection.SCROLL_BACKWARD:
            return (
                self._min_reached
                and self._min_date is not None
                and (candidates.min is None or candidates.min <= self._min_date)
            )
        return False

    def _update_boundaries(self, correlation_id: str) -> list[BoundaryEvent]:
        """Recompute the boundary flags, returning transition events."""
        events: list[BoundaryEvent] = []

        if self._min_date is not None:
            lower = self._collection.min
            reached = lower is not None and lower <= self._min_date
            if reached != self._min_reached:
                self._min_reached = reached
                event_cls = MinDateReached if reached else MinDateNotReached
                events.append(event_cls(
                    source=_SOURCE,
                    correlation_id=correlation_id,
                    boundary=self._min_date,
                ))

        if self._max_date is not None:
            upper = self._collection.max
            reached = upper is not None and upper >= self._max_date
            if reached != self._max_reached:
                self._max_reached = reached
                event_cls = MaxDateReached if reached else MaxDateNotReached
                events.append(event_cls(
                    source=_SOURCE,
                    correlation_id=correlation_id,
                    boundary=self._max_date,
                ))

        return events

    async def _finish_load(
        self, inserted: list[datetime], direction: ScrollDirection,
    ) -> ScrollDirection:
        """Publish the outcome of a merge that already happened."""
        self._last_loaded = list(inserted)
        evicted = self._collection.drain_evicted()
        correlation_id = new_id()
        transitions = self._update_boundaries(correlation_id)

        if evicted:
            await self._event_bus.publish(DomainsEvicted(
                source=_SOURCE,
                correlation_id=correlation_id,
                domains=tuple(evicted),
            ))
        if inserted:
            await self._event_bus.publish(DomainsLoaded(
                source=_SOURCE,
                correlation_id=correlation_id,
                direction=direction,
                domains=tuple(inserted),
            ))
        for event in transitions:
            logger.info("%s at %s", type(event).__name__, event.boundary)
            await self._event_bus.publish(event)

        return direction if inserted else ScrollDirection.SCROLL_NONE
