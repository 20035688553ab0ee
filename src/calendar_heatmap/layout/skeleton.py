"""Domain skeleton: the grid of one (domain, subdomain) unit pair.

The skeleton validates the pair once, picks the template for the
subdomain unit from ``TEMPLATES`` and exposes the grid dimensions, cell
positions and the ordered subdomain buckets of any domain.
"""

from __future__ import annotations

import logging
from datetime import datetime

from calendar_heatmap.core.config import CalendarOptions
from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.core.enums import TimeUnit
from calendar_heatmap.core.errors import ConfigurationError
from calendar_heatmap.core.models import Cell
from calendar_heatmap.core.units import validate_unit_pair

from .templates import TEMPLATES, Template

logger = logging.getLogger(__name__)


class DomainSkeleton:
    """Layout of ``sub_domain`` cells inside ``domain`` blocks.

    Parameters
    ----------
    domain, sub_domain:
        Unit pair.  The subdomain must be strictly finer than the domain.
    helper:
        Date helper carrying the week-start convention.
    col_limit, row_limit:
        Optional, mutually exclusive grid limits.
    dynamic_dimension:
        When ``False``, every domain is sized for the longest possible
        domain of its unit (31-day months, 366-day years).
    """

    def __init__(
        self,
        domain: TimeUnit | str,
        sub_domain: TimeUnit | str,
        helper: DateHelper | None = None,
        *,
        col_limit: int | None = None,
        row_limit: int | None = None,
        dynamic_dimension: bool = True,
    ) -> None:
        self._domain = TimeUnit.parse(domain)
        self._sub_domain = TimeUnit.parse(sub_domain)
        validate_unit_pair(self._domain, self._sub_domain)

        if col_limit is not None and row_limit is not None:
            raise ConfigurationError("colLimit and rowLimit are mutually exclusive")

        self._helper = helper or DateHelper()
        template_cls, transpose = TEMPLATES[self._sub_domain]
        self._template: Template = template_cls(
            self._domain,
            self._helper,
            col_limit=col_limit,
            row_limit=row_limit,
            dynamic_dimension=dynamic_dimension,
            transpose=transpose,
        )

    @classmethod
    def from_options(
        cls, options: CalendarOptions, helper: DateHelper | None = None,
    ) -> DomainSkeleton:
        return cls(
            options.domain,
            options.sub_domain,
            helper or DateHelper(options.week_starts_monday),
            col_limit=options.col_limit,
            row_limit=options.row_limit,
            dynamic_dimension=options.dynamic_dimension,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def domain(self) -> TimeUnit:
        return self._domain

    @property
    def sub_domain(self) -> TimeUnit:
        return self._sub_domain

    @property
    def helper(self) -> DateHelper:
        return self._helper

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def rows(self, d: datetime) -> int:
        """Row count of the domain containing *d*."""
        return self._template.rows(d)

    def columns(self, d: datetime) -> int:
        """Column count of the domain containing *d*."""
        return self._template.columns(d)

    def position(self, d: datetime) -> tuple[int, int]:
        """``(x, y)`` of *d*'s subdomain cell.

        The cell lives in ``owner_domain(d)``, and the position is bounded
        by that domain's ``columns``/``rows``.
        """
        return self._template.position(d)

    def count(self, d: datetime) -> int:
        """Number of subdomain buckets in the domain containing *d*."""
        return self._template.count(d)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def domain_start(self, d: datetime) -> datetime:
        return self._helper.extract_unit(d, self._domain)

    def owner_domain(self, d: datetime) -> datetime:
        """Domain key whose cells include *d*'s subdomain bucket."""
        return self._helper.owner_domain(d, self._domain, self._sub_domain)

    def domain_end(self, d: datetime) -> datetime:
        """Start of the domain following the one containing *d*."""
        return self._helper.shift(self.domain_start(d), 1, self._domain)

    def span_end(self, d: datetime) -> datetime:
        """End of the time covered by the cells of *d*'s domain.

        Past ``domain_end`` when the last week cell runs into the next
        month or year.
        """
        return self._helper.ceil_unit(self.domain_end(d), self._sub_domain)

    def mapping(self, domain_start: datetime, domain_end: datetime) -> list[datetime]:
        """Ordered subdomain bucket starts in ``[domain_start, domain_end)``."""
        return self._template.mapping(domain_start, domain_end)

    def cells(
        self, domain_start: datetime, domain_end: datetime | None = None,
    ) -> list[Cell]:
        """Materialize the mapping of a domain as empty cells."""
        if domain_end is None:
            domain_end = self.domain_end(domain_start)
        cells = []
        for t in self.mapping(domain_start, domain_end):
            x, y = self.position(t)
            cells.append(Cell(timestamp=t, value=None, x=x, y=y))
        logger.debug(
            "Built %d %s cells for %s domain %s",
            len(cells), self._sub_domain.value, self._domain.value,
            domain_start.isoformat(),
        )
        return cells
