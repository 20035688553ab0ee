"""Time-unit arithmetic for the calendar grid.

``DateHelper`` is the only place that knows how a ``datetime`` is bucketed
into a ``TimeUnit``.  Everything above it (layout templates, the domain
collection, the navigator) works on unit-start-normalized timestamps.

Design decisions
----------------
* **Wall-clock arithmetic** -- Buckets are computed on the datetime fields
  and ``tzinfo`` is carried through untouched, so naive and aware
  datetimes both work.  Naive datetimes are treated as UTC wall-clock when
  converting epoch timestamps.
* **No drift** -- ``intervals`` derives every bucket from the anchor
  (``shift(start, i)``), never by adding to the previous bucket, so month
  and year walks stay exact across variable lengths.
* **Week start** -- Week buckets and weekday indexes follow the configured
  first weekday (Monday or Sunday).
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from numbers import Real

from .enums import TimeUnit

_FIXED_STEPS: dict[TimeUnit, timedelta] = {
    TimeUnit.MINUTE: timedelta(minutes=1),
    TimeUnit.HOUR: timedelta(hours=1),
    TimeUnit.DAY: timedelta(days=1),
    TimeUnit.WEEK: timedelta(weeks=1),
}


class DateHelper:
    """Pure bucketing and calendar arithmetic.

    Parameters
    ----------
    week_starts_monday:
        ``True`` for ISO weeks (Monday first), ``False`` for Sunday-first
        weeks.
    """

    def __init__(self, week_starts_monday: bool = True) -> None:
        self._week_starts_monday = week_starts_monday

    @property
    def week_starts_monday(self) -> bool:
        return self._week_starts_monday

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    def extract_unit(self, d: datetime, unit: TimeUnit | str) -> datetime:
        """Return the start of the *unit* bucket containing *d*."""
        unit = TimeUnit.parse(unit).base

        if unit == TimeUnit.MINUTE:
            return d.replace(second=0, microsecond=0)
        if unit == TimeUnit.HOUR:
            return d.replace(minute=0, second=0, microsecond=0)

        day = d.replace(hour=0, minute=0, second=0, microsecond=0)
        if unit == TimeUnit.DAY:
            return day
        if unit == TimeUnit.WEEK:
            return day - timedelta(days=self.weekday(day))
        if unit == TimeUnit.MONTH:
            return day.replace(day=1)
        return day.replace(month=1, day=1)

    def ceil_unit(self, d: datetime, unit: TimeUnit | str) -> datetime:
        """Return the first *unit* bucket start at or after *d*."""
        floor = self.extract_unit(d, unit)
        if floor == d:
            return floor
        return self.shift(floor, 1, unit)

    def shift(self, d: datetime, count: int, unit: TimeUnit | str) -> datetime:
        """Move *d* by *count* units.

        Month and year moves keep the day-of-month when possible and clamp
        it to the target month's length otherwise (Jan 31 + 1 month is
        Feb 28/29).
        """
        unit = TimeUnit.parse(unit).base

        step = _FIXED_STEPS.get(unit)
        if step is not None:
            return d + step * count

        if unit == TimeUnit.MONTH:
            year, month0 = divmod(d.year * 12 + (d.month - 1) + count, 12)
            month = month0 + 1
        else:
            year, month = d.year + count, d.month

        day = min(d.day, calendar.monthrange(year, month)[1])
        return d.replace(year=year, month=month, day=day)

    def intervals(
        self,
        unit: TimeUnit | str,
        anchor: datetime,
        count_or_end: int | datetime,
    ) -> list[datetime]:
        """Return consecutive *unit* bucket starts, ascending.

        * ``count >= 0`` -- the anchor's bucket and the ``count - 1``
          following ones.
        * ``count < 0`` -- the ``|count|`` buckets *preceding* the anchor's
          bucket.
        * ``datetime`` end -- every bucket start in
          ``[extract_unit(anchor), end)``.
        """
        unit = TimeUnit.parse(unit)
        start = self.extract_unit(anchor, unit)

        if isinstance(count_or_end, datetime):
            result: list[datetime] = []
            i = 0
            current = start
            while current < count_or_end:
                result.append(current)
                i += 1
                current = self.shift(start, i, unit)
            return result

        count = int(count_or_end)
        if count >= 0:
            return [self.shift(start, i, unit) for i in range(count)]
        return [self.shift(start, i, unit) for i in range(count, 0)]

    def step(self, unit: TimeUnit | str) -> timedelta | None:
        """Fixed duration of *unit*, or ``None`` for month/year."""
        return _FIXED_STEPS.get(TimeUnit.parse(unit).base)

    def owner_domain(
        self, d: datetime, domain: TimeUnit | str, sub_domain: TimeUnit | str,
    ) -> datetime:
        """Start of the *domain* holding the *sub_domain* cell of *d*.

        Differs from ``extract_unit(d, domain)`` only for weeks: a week that
        starts in the previous month or year belongs to that domain.
        """
        return self.extract_unit(self.extract_unit(d, sub_domain), domain)

    def dates_from_same_interval(
        self, unit: TimeUnit | str, a: datetime, b: datetime,
    ) -> bool:
        return self.extract_unit(a, unit) == self.extract_unit(b, unit)

    # ------------------------------------------------------------------
    # Calendar facts
    # ------------------------------------------------------------------

    def weekday(self, d: date) -> int:
        """Day index inside the week, 0 being the configured first weekday."""
        if self._week_starts_monday:
            return d.weekday()
        return (d.weekday() + 1) % 7

    def week_number(self, d: date) -> int:
        """Week number of *d* in its year.

        Monday-start calendars use ISO-8601 numbering.  Sunday-start
        calendars use the US convention: week 1 is the week containing
        January 1st and weeks begin on Sunday.
        """
        if self._week_starts_monday:
            return d.isocalendar()[1]
        jan1 = date(d.year, 1, 1)
        offset = (jan1.weekday() + 1) % 7
        return (self.day_of_year(d) - 1 + offset) // 7 + 1

    @staticmethod
    def iso_weeks_in_year(d: date) -> int:
        """ISO-8601 week count (52 or 53) of *d*'s year."""
        # Dec 28th always falls in the last ISO week of its year.
        return date(d.year, 12, 28).isocalendar()[1]

    def week_of_year_index(self, d: date) -> int:
        """0-based index of *d*'s week inside its year (Jan 1st's week is 0)."""
        jan1 = date(d.year, 1, 1)
        return (self.day_of_year(d) - 1 + self.weekday(jan1)) // 7

    def week_of_month_index(self, d: date) -> int:
        """0-based index of *d*'s week inside its month."""
        first = date(d.year, d.month, 1)
        return (d.day - 1 + self.weekday(first)) // 7

    def weeks_spanned_in_month(self, d: date) -> int:
        """Number of (partial) weeks the month of *d* touches: 4 to 6."""
        last = date(d.year, d.month, self.days_in_month(d))
        return self.week_of_month_index(last) + 1

    def weeks_spanned_in_year(self, d: date) -> int:
        """Number of (partial) weeks the year of *d* touches: 53 or 54."""
        return self.week_of_year_index(date(d.year, 12, 31)) + 1

    @staticmethod
    def day_of_year(d: date) -> int:
        return d.timetuple().tm_yday

    @staticmethod
    def is_leap_year(d: date) -> bool:
        return calendar.isleap(d.year)

    @staticmethod
    def days_in_month(d: date) -> int:
        return calendar.monthrange(d.year, d.month)[1]

    @classmethod
    def days_in_year(cls, d: date) -> int:
        return 366 if cls.is_leap_year(d) else 365

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @staticmethod
    def to_datetime(
        value: datetime | date | Real | str,
        reference: datetime | None = None,
    ) -> datetime:
        """Coerce *value* into a datetime of the same flavour as *reference*.

        Numbers (and numeric strings) are epoch seconds.  They become aware
        datetimes in ``reference.tzinfo`` when the reference is aware, and
        naive UTC wall-clock datetimes otherwise.

        Datetimes are converted to the reference's flavour, naive ones being
        read as UTC.  Dates become midnight in the reference's zone.

        Raises ``ValueError``/``TypeError`` for anything unparseable.
        """
        if isinstance(value, datetime):
            return _match_flavour(value, reference)
        if isinstance(value, date):
            # A bare date is midnight in the reference's zone.
            tz = reference.tzinfo if reference is not None else None
            return datetime(value.year, value.month, value.day, tzinfo=tz)
        if isinstance(value, bool):
            raise TypeError(f"Cannot interpret {value!r} as a timestamp")

        if isinstance(value, str):
            text = value.strip()
            try:
                value = float(text)
            except ValueError:
                return _match_flavour(datetime.fromisoformat(text), reference)

        if not isinstance(value, Real):
            raise TypeError(f"Cannot interpret {value!r} as a timestamp")

        tz = reference.tzinfo if reference is not None else None
        if tz is not None:
            return datetime.fromtimestamp(float(value), tz=tz)
        return datetime.fromtimestamp(float(value), tz=timezone.utc).replace(
            tzinfo=None
        )


def _match_flavour(d: datetime, reference: datetime | None) -> datetime:
    if reference is None:
        return d
    if reference.tzinfo is not None:
        if d.tzinfo is None:
            d = d.replace(tzinfo=timezone.utc)
        return d.astimezone(reference.tzinfo)
    if d.tzinfo is not None:
        return d.astimezone(timezone.utc).replace(tzinfo=None)
    return d
