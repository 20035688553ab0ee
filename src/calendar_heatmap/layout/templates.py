"""Per-subdomain layout templates.

A template knows how one subdomain unit (minute, hour, day, week, month)
is arranged inside any coarser domain.  Each template is written once in
its canonical, horizontal form; the transposed (``x_*``) variants reuse
the same class with ``transpose=True``, which swaps rows/columns and x/y
at the public boundary.

Geometry rules
--------------
* **Limited layouts** -- With ``col_limit=c`` the grid has ``c`` columns
  and ``ceil(total / c)`` rows; with ``row_limit=r`` it has ``r`` rows and
  ``ceil(total / r)`` columns.  Cells fill column by column.
* **Default layouts** -- Linear column-major fill over ``default_rows``
  rows, except days, which are aligned on the week grid.
* **Totals** -- ``total`` is the number of subdomain buckets in the domain,
  or the largest possible number for the pair when ``dynamic_dimension``
  is off, so that every domain of a calendar has the same size.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import ClassVar

from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.core.enums import TimeUnit

# Longest possible span of each domain unit.
_MAX_DOMAIN_SPAN: dict[TimeUnit, timedelta] = {
    TimeUnit.HOUR: timedelta(hours=1),
    TimeUnit.DAY: timedelta(days=1),
    TimeUnit.WEEK: timedelta(days=7),
    TimeUnit.MONTH: timedelta(days=31),
    TimeUnit.YEAR: timedelta(days=366),
}


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


class Template:
    """Canonical layout of ``unit`` cells inside a ``domain``."""

    unit: ClassVar[TimeUnit]
    default_rows: ClassVar[int] = 1

    def __init__(
        self,
        domain: TimeUnit,
        helper: DateHelper,
        *,
        col_limit: int | None = None,
        row_limit: int | None = None,
        dynamic_dimension: bool = True,
        transpose: bool = False,
    ) -> None:
        self.domain = domain
        self.helper = helper
        self.col_limit = col_limit
        self.row_limit = row_limit
        self.dynamic_dimension = dynamic_dimension
        self.transpose = transpose

    # ------------------------------------------------------------------
    # Public, transpose-aware geometry
    # ------------------------------------------------------------------

    def rows(self, d: datetime) -> int:
        return self._columns(d) if self.transpose else self._rows(d)

    def columns(self, d: datetime) -> int:
        return self._rows(d) if self.transpose else self._columns(d)

    def position(self, d: datetime) -> tuple[int, int]:
        """Cell of *d* inside the domain owning its bucket."""
        x, y = self._position(self.helper.extract_unit(d, self.unit))
        return (y, x) if self.transpose else (x, y)

    # ------------------------------------------------------------------
    # Bucket counting
    # ------------------------------------------------------------------

    def domain_start(self, d: datetime) -> datetime:
        return self.helper.extract_unit(d, self.domain)

    def mapping(self, start: datetime, end: datetime) -> list[datetime]:
        """Subdomain bucket starts in ``[start, end)``."""
        first = self.helper.ceil_unit(start, self.unit)
        return self.helper.intervals(self.unit, first, end)

    def count(self, d: datetime) -> int:
        """Number of subdomain buckets in the domain containing *d*."""
        start = self.domain_start(d)
        end = self.helper.shift(start, 1, self.domain)
        first = self.helper.ceil_unit(start, self.unit)
        return max(0, self._distance(first, end, ceil=True))

    def max_count(self) -> int:
        """Largest ``count`` any domain of this pair can have."""
        step = self.helper.step(self.unit)
        if step is None:
            return 12  # months in a year
        return _ceil_div(
            int(_MAX_DOMAIN_SPAN[self.domain].total_seconds()),
            int(step.total_seconds()),
        )

    def capacity(self, d: datetime) -> int:
        return self.count(d) if self.dynamic_dimension else self.max_count()

    def index(self, d: datetime) -> int:
        """0-based ordinal of *d*'s bucket inside the domain owning it."""
        bucket = self.helper.extract_unit(d, self.unit)
        first = self.helper.ceil_unit(self.domain_start(bucket), self.unit)
        return self._distance(first, bucket)

    def _distance(self, a: datetime, b: datetime, ceil: bool = False) -> int:
        """Whole buckets from *a* to *b*."""
        step = self.helper.step(self.unit)
        if step is None:
            months = (b.year - a.year) * 12 + (b.month - a.month)
            if ceil and b.replace(year=a.year, month=a.month) > a:
                months += 1
            return months
        if ceil:
            return -(-(b - a) // step)
        return (b - a) // step

    # ------------------------------------------------------------------
    # Canonical geometry
    # ------------------------------------------------------------------

    @property
    def limited(self) -> bool:
        return self.col_limit is not None or self.row_limit is not None

    def _rows(self, d: datetime) -> int:
        if self.col_limit is not None:
            return max(1, _ceil_div(self.capacity(d), self.col_limit))
        if self.row_limit is not None:
            return self.row_limit
        return self._default_rows(d)

    def _columns(self, d: datetime) -> int:
        if self.col_limit is not None:
            return self.col_limit
        if self.row_limit is not None:
            return max(1, _ceil_div(self.capacity(d), self.row_limit))
        return self._default_columns(d)

    def _position(self, d: datetime) -> tuple[int, int]:
        if self.limited:
            rows = self._rows(d)
            i = self.index(d)
            return i // rows, i % rows
        return self._default_position(d)

    def _default_rows(self, d: datetime) -> int:
        return self.default_rows

    def _default_columns(self, d: datetime) -> int:
        return max(1, _ceil_div(self.capacity(d), self.default_rows))

    def _default_position(self, d: datetime) -> tuple[int, int]:
        i = self.index(d)
        return i // self.default_rows, i % self.default_rows


class MinuteTemplate(Template):
    unit = TimeUnit.MINUTE
    default_rows = 10


class HourTemplate(Template):
    unit = TimeUnit.HOUR
    default_rows = 6


class DayTemplate(Template):
    """Days sit on the week grid unless a limit is set.

    * week  -- one column, one row per weekday
    * month -- one row per week, one column per weekday
    * year  -- one row per weekday, one column per week
    """

    unit = TimeUnit.DAY
    default_rows = 7

    def _default_rows(self, d: datetime) -> int:
        if self.domain == TimeUnit.MONTH:
            if self.dynamic_dimension:
                return self.helper.weeks_spanned_in_month(d)
            return 6
        return 7

    def _default_columns(self, d: datetime) -> int:
        if self.domain == TimeUnit.MONTH:
            return 7
        if self.domain == TimeUnit.YEAR:
            if self.dynamic_dimension:
                return self.helper.weeks_spanned_in_year(d)
            return 54
        return 1

    def _default_position(self, d: datetime) -> tuple[int, int]:
        weekday = self.helper.weekday(d)
        if self.domain == TimeUnit.MONTH:
            return weekday, self.helper.week_of_month_index(d)
        if self.domain == TimeUnit.YEAR:
            return self.helper.week_of_year_index(d), weekday
        return 0, weekday


class WeekTemplate(Template):
    unit = TimeUnit.WEEK


class MonthTemplate(Template):
    unit = TimeUnit.MONTH


# Unit -> (template class, transpose flag), built once.
TEMPLATES: dict[TimeUnit, tuple[type[Template], bool]] = {}
for _cls in (MinuteTemplate, HourTemplate, DayTemplate, WeekTemplate, MonthTemplate):
    for _unit in TimeUnit:
        if _unit.base == _cls.unit:
            TEMPLATES[_unit] = (_cls, _unit.transposed)
del _cls, _unit
