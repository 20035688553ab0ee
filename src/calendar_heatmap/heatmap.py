"""``CalHeatmap``: the calendar engine wired together.

Owns one options instance, one date helper, one skeleton, one live window,
the navigator and the populator, all sharing one event bus.  After every
load the newly inserted domains are fetched from the data source (if one
is configured) and filled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from calendar_heatmap.core.config import CalendarOptions, Settings
from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.core.enums import ScrollDirection, UpdateMode
from calendar_heatmap.core.ids import utc_now
from calendar_heatmap.core.interfaces import DataSource
from calendar_heatmap.core.models import Cell
from calendar_heatmap.infrastructure.event_bus import IEventBus, InMemoryEventBus
from calendar_heatmap.layout.skeleton import DomainSkeleton
from calendar_heatmap.navigation.domain_collection import DomainCollection
from calendar_heatmap.navigation.navigator import Navigator
from calendar_heatmap.navigation.populator import Populator
from calendar_heatmap.observability.logger import get_logger, setup_logging

logger = logging.getLogger(__name__)


class CalHeatmap:
    """Headless calendar heatmap.

    Parameters
    ----------
    options:
        Calendar options; defaults to ``CalendarOptions()``.
    event_bus:
        Bus to publish on; a private ``InMemoryEventBus`` otherwise.
    data_source:
        Optional source queried after every load.
    """

    def __init__(
        self,
        options: CalendarOptions | None = None,
        *,
        event_bus: IEventBus | None = None,
        data_source: DataSource | None = None,
    ) -> None:
        self.options = options or CalendarOptions()
        self.helper = DateHelper(self.options.week_starts_monday)
        self.skeleton = DomainSkeleton.from_options(self.options, self.helper)
        self.event_bus = event_bus or InMemoryEventBus()
        self.domain_collection = DomainCollection(self.options.domain, self.helper)
        self.navigator = Navigator(
            self.options, self.skeleton, self.domain_collection, self.event_bus,
        )
        self.populator = Populator(
            self.options, self.domain_collection, self.event_bus, self.helper,
        )
        self.data_source = data_source

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> CalHeatmap:
        """Build from loaded settings and configure logging."""
        setup_logging(
            settings.observability.log_level, settings.observability.log_format,
        )
        get_logger(__name__).info(
            "calendar_configured",
            domain=settings.calendar.domain.value,
            sub_domain=settings.calendar.sub_domain.value,
            range=settings.calendar.range,
        )
        return cls(settings.calendar, **kwargs)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def init(self) -> ScrollDirection:
        """Build the first window and load its data."""
        direction = await self.navigator.initialize(self.options.start)
        await self._load_data(self.navigator.last_loaded)
        return direction

    async def next(self, n: int = 1) -> ScrollDirection:
        direction = await self.navigator.next(n)
        await self._load_data(self.navigator.last_loaded)
        return direction

    async def previous(self, n: int = 1) -> ScrollDirection:
        direction = await self.navigator.previous(n)
        await self._load_data(self.navigator.last_loaded)
        return direction

    async def jump_to(self, date: datetime, reset: bool = False) -> ScrollDirection:
        direction = await self.navigator.jump_to(date, reset)
        await self._load_data(self.navigator.last_loaded)
        return direction

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    async def fill(
        self,
        data: Mapping[Any, Any],
        mode: UpdateMode = UpdateMode.APPEND,
    ) -> list[datetime]:
        """Write *data* into the current window."""
        return await self.populator.populate(data, mode)

    async def update(
        self,
        data_source: DataSource | None = None,
        mode: UpdateMode = UpdateMode.RESET_ALL,
    ) -> list[datetime]:
        """Refetch the whole window from *data_source* (or the configured one)."""
        source = data_source or self.data_source
        if source is None or not len(self.domain_collection):
            return []
        lower, upper = self.domain_collection.min, self.domain_collection.max
        data = await source.fetch(lower, self.skeleton.span_end(upper))
        return await self.populator.populate(
            data, mode, lower, self.skeleton.domain_end(upper),
        )

    async def _load_data(self, domains: list[datetime]) -> None:
        if self.data_source is None or not domains:
            return
        start = domains[0]
        end = self.skeleton.domain_end(domains[-1])
        data = await self.data_source.fetch(
            start, self.skeleton.span_end(domains[-1]),
        )
        touched = await self.populator.populate(data, UpdateMode.APPEND, start, end)
        logger.debug(
            "Fetched data for %s..%s, %d domain(s) touched",
            start.isoformat(), end.isoformat(), len(touched),
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def domain_keys(self) -> list[datetime]:
        return self.domain_collection.keys

    @property
    def min_reached(self) -> bool:
        return self.navigator.min_reached

    @property
    def max_reached(self) -> bool:
        return self.navigator.max_reached

    def cells(self, domain: datetime) -> list[Cell] | None:
        """Cells of the domain holding *domain*'s subdomain bucket.

        ``None`` outside the window.
        """
        return self.domain_collection.get(self.skeleton.owner_domain(domain))

    def position(self, date: datetime) -> tuple[int, int]:
        """``(x, y)`` of *date*'s cell inside its domain."""
        return self.skeleton.position(date)

    def highlighted(
        self, dates: Iterable[datetime | str] | None = None,
    ) -> list[Cell]:
        """Window cells sharing a subdomain bucket with one of *dates*.

        Defaults to the configured ``highlight`` dates.  ``"now"`` is read
        from the clock on every call.
        """
        reference = self.domain_collection.min
        targets = [
            self.helper.to_datetime(utc_now() if d == "now" else d, reference)
            for d in (self.options.highlight if dates is None else dates)
        ]
        if not targets:
            return []
        unit = self.options.sub_domain
        return [
            cell
            for _key, cells in self.domain_collection.items()
            for cell in cells
            if any(
                self.helper.dates_from_same_interval(unit, cell.timestamp, d)
                for d in targets
            )
        ]
