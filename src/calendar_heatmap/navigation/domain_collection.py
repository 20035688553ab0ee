"""Ordered window of materialized domains.

A ``DomainCollection`` maps unit-start-normalized domain keys to their
subdomain cells.  The same class is used for the live window and for the
short-lived *candidate* collections the navigator builds before merging
(candidates carry keys only, with empty cell lists).

Design decisions
----------------
* **Sorted keys** -- Keys are kept sorted ascending after every mutation.
* **Atomic merge** -- ``merge`` validates and builds every incoming domain
  before touching the window, so a failing builder or a mismatched
  candidate leaves the window unchanged.
* **Eviction** -- A forward merge evicts the oldest domains, a backward
  merge the newest.  Domains inserted by the same call are never evicted.
* **Live cells** -- ``get`` returns the stored list itself; the fill step
  mutates cell values in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime

from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.core.enums import ScrollDirection, TimeUnit
from calendar_heatmap.core.errors import DataMismatchError
from calendar_heatmap.core.models import Cell
from calendar_heatmap.layout.skeleton import DomainSkeleton

logger = logging.getLogger(__name__)

# (domain key, index of the key in the candidate collection) -> cells
SubDomainBuilder = Callable[[datetime, int], list[Cell]]


class DomainCollection:
    """Sorted mapping of domain start -> subdomain cells."""

    def __init__(
        self,
        unit: TimeUnit,
        helper: DateHelper,
        keys: Iterable[datetime] = (),
    ) -> None:
        self._unit = unit
        self._helper = helper
        self._domains: dict[datetime, list[Cell]] = {k: [] for k in keys}
        self._keys: list[datetime] = sorted(self._domains)
        self._evicted: list[datetime] = []

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create_initial(
        cls,
        skeleton: DomainSkeleton,
        anchor: datetime,
        range_size: int,
    ) -> DomainCollection:
        """Build ``range_size`` consecutive domains starting at *anchor*'s.

        Every domain is populated with empty cells.
        """
        collection = cls(skeleton.domain, skeleton.helper)
        for key in skeleton.helper.intervals(skeleton.domain, anchor, range_size):
            collection._domains[key] = skeleton.cells(key)
        collection._resort()
        return collection

    @classmethod
    def from_interval(
        cls,
        unit: TimeUnit,
        helper: DateHelper,
        anchor: datetime,
        count_or_end: int | datetime,
    ) -> DomainCollection:
        """Candidate collection (keys only), see ``DateHelper.intervals``."""
        return cls(unit, helper, helper.intervals(unit, anchor, count_or_end))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def unit(self) -> TimeUnit:
        return self._unit

    @property
    def keys(self) -> list[datetime]:
        """Domain keys, ascending."""
        return list(self._keys)

    @property
    def min(self) -> datetime | None:
        return self._keys[0] if self._keys else None

    @property
    def max(self) -> datetime | None:
        return self._keys[-1] if self._keys else None

    def at(self, index: int) -> datetime | None:
        """Key at *index* (negative indexes allowed), ``None`` when out of range."""
        try:
            return self._keys[index]
        except IndexError:
            return None

    def get(self, key: datetime) -> list[Cell] | None:
        """Live cell list of *key*, or ``None`` when the domain is absent."""
        return self._domains.get(key)

    def items(self) -> Iterator[tuple[datetime, list[Cell]]]:
        for key in self._keys:
            yield key, self._domains[key]

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._domains

    def __iter__(self) -> Iterator[datetime]:
        return iter(list(self._keys))

    def __repr__(self) -> str:
        return (
            f"DomainCollection(unit={self._unit.value}, size={len(self)}, "
            f"min={self.min}, max={self.max})"
        )

    # ------------------------------------------------------------------
    # Trimming
    # ------------------------------------------------------------------

    def clamp(
        self,
        min_bound: datetime | None = None,
        max_bound: datetime | None = None,
    ) -> DomainCollection:
        """Drop keys outside ``[min_bound, max_bound]``."""
        dropped = [
            k for k in self._keys
            if (min_bound is not None and k < min_bound)
            or (max_bound is not None and k > max_bound)
        ]
        for key in dropped:
            del self._domains[key]
        if dropped:
            self._resort()
        return self

    def slice(self, range_size: int, keep_newest: bool = True) -> DomainCollection:
        """Keep at most ``range_size`` keys from the newest or oldest end."""
        if len(self._keys) <= range_size:
            return self
        if keep_newest:
            dropped = self._keys[: len(self._keys) - range_size]
        else:
            dropped = self._keys[range_size:]
        for key in dropped:
            del self._domains[key]
        self._resort()
        return self

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def merge(
        self,
        new_domains: DomainCollection,
        range_size: int,
        builder: SubDomainBuilder,
        direction: ScrollDirection | None = None,
    ) -> list[datetime]:
        """Insert the domains of *new_domains* that are not present yet.

        Returns the inserted keys, ascending.

        Raises
        ------
        DataMismatchError
            If *new_domains* has another unit or holds a key that is not a
            start of this collection's unit.
        """
        self._check_compatible(new_domains)

        if direction is None or direction == ScrollDirection.SCROLL_NONE:
            incoming_max = new_domains.max
            forward = (
                not self._keys
                or (incoming_max is not None and incoming_max > self._keys[-1])
            )
        else:
            forward = direction == ScrollDirection.SCROLL_FORWARD

        incoming = [
            (index, key) for index, key in enumerate(new_domains.keys)
            if key not in self._domains
        ]
        if len(incoming) > range_size:
            incoming = incoming[-range_size:] if forward else incoming[:range_size]

        built = {key: builder(key, index) for index, key in incoming}

        self._domains.update(built)
        self._resort()

        while len(self._keys) > range_size:
            evictable = [k for k in self._keys if k not in built]
            victim = evictable[0] if forward else evictable[-1]
            del self._domains[victim]
            self._keys.remove(victim)
            self._evicted.append(victim)

        inserted = sorted(built)
        if inserted:
            logger.debug(
                "Merged %d %s domain(s) %s..%s (%s), window %s..%s",
                len(inserted),
                self._unit.value,
                inserted[0].isoformat(),
                inserted[-1].isoformat(),
                "forward" if forward else "backward",
                self.min.isoformat() if self.min else None,
                self.max.isoformat() if self.max else None,
            )
        return inserted

    @property
    def evicted(self) -> list[datetime]:
        """Keys evicted by merges since the last ``drain_evicted``."""
        return list(self._evicted)

    def drain_evicted(self) -> list[datetime]:
        drained = self._evicted[:]
        self._evicted.clear()
        return drained

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_compatible(self, other: DomainCollection) -> None:
        if other.unit != self._unit:
            raise DataMismatchError(
                f"Cannot merge {other.unit.value} domains into a "
                f"{self._unit.value} collection"
            )
        for key in other.keys:
            if self._helper.extract_unit(key, self._unit) != key:
                raise DataMismatchError(
                    f"Domain key {key.isoformat()} is not the start of a "
                    f"{self._unit.value}"
                )

    def _resort(self) -> None:
        self._keys = sorted(self._domains)
