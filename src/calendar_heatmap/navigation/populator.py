"""Writes data values into the cells of the live window.

Values are keyed by anything ``DateHelper.to_datetime`` understands
(datetimes, ISO strings, epoch seconds).  Each value is bucketed into its
domain and subdomain; values whose domain is not in the window are
skipped, which makes a fill that completes after its domain was scrolled
away a harmless no-op.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from calendar_heatmap.core.config import CalendarOptions
from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.core.enums import UpdateMode
from calendar_heatmap.core.ids import new_id
from calendar_heatmap.core.models import Cell
from calendar_heatmap.domain.events import CellsFilled
from calendar_heatmap.infrastructure.event_bus import IEventBus

from .domain_collection import DomainCollection

logger = logging.getLogger(__name__)

_SOURCE = "populator"


class Populator:
    """Fills cell values of the domains currently in the window."""

    def __init__(
        self,
        options: CalendarOptions,
        collection: DomainCollection,
        event_bus: IEventBus,
        helper: DateHelper,
    ) -> None:
        self._options = options
        self._collection = collection
        self._event_bus = event_bus
        self._helper = helper

    async def populate(
        self,
        data: Mapping[Any, Any],
        mode: UpdateMode = UpdateMode.APPEND,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[datetime]:
        """Write *data* into the window.

        Parameters
        ----------
        data:
            Timestamp -> value.  ``None`` values are ignored.
        mode:
            ``RESET_ALL`` clears every cell of the window first and then
            accumulates, ``REPLACE`` overwrites the touched cells,
            ``APPEND`` adds to their current value.
        start, end:
            Optional ``[start, end)`` restriction on the domain keys.

        Returns the touched domain keys, ascending.
        """
        mode = UpdateMode(mode)
        if mode == UpdateMode.RESET_ALL:
            for _key, cells in self._collection.items():
                for cell in cells:
                    cell.value = None

        reference = self._collection.min
        touched: set[datetime] = set()
        filled = 0
        skipped = 0

        for raw_ts, raw_value in data.items():
            if raw_value is None:
                skipped += 1
                continue
            try:
                ts = self._helper.to_datetime(raw_ts, reference)
                value = float(raw_value)
            except (ValueError, TypeError, OverflowError, OSError):
                logger.warning("Skipping unparseable datum %r=%r", raw_ts, raw_value)
                skipped += 1
                continue

            sub_key = self._helper.extract_unit(ts, self._options.sub_domain)
            domain_key = self._helper.extract_unit(sub_key, self._options.domain)
            if (start is not None and domain_key < start) or (
                end is not None and domain_key >= end
            ):
                skipped += 1
                continue

            cells = self._collection.get(domain_key)
            if cells is None:
                logger.debug(
                    "Skipping datum for %s: domain not in window",
                    domain_key.isoformat(),
                )
                skipped += 1
                continue

            cell = _find_cell(cells, sub_key)
            if cell is None:
                skipped += 1
                continue

            if mode == UpdateMode.REPLACE or cell.value is None:
                cell.value = value
            else:
                cell.value += value
            touched.add(domain_key)
            filled += 1

        domains = sorted(touched)
        if domains or mode == UpdateMode.RESET_ALL:
            await self._event_bus.publish(CellsFilled(
                source=_SOURCE,
                correlation_id=new_id(),
                domains=tuple(domains),
                cell_count=filled,
                skipped=skipped,
            ))
        logger.debug(
            "Filled %d value(s) in %d domain(s), %d skipped (%s)",
            filled, len(domains), skipped, mode.value,
        )
        return domains


def _find_cell(cells: list[Cell], timestamp: datetime) -> Cell | None:
    i = bisect_left(cells, timestamp, key=lambda c: c.timestamp)
    if i < len(cells) and cells[i].timestamp == timestamp:
        return cells[i]
    return None
