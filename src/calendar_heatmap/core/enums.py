"""Enumerations used across the calendar heatmap."""

from __future__ import annotations

from enum import Enum

from .errors import ConfigurationError


class TimeUnit(str, Enum):
    """Calendar granularities, ordered minute < hour < day < week < month < year.

    ``X_*`` members are the transposed variants used for vertical layouts:
    they bucket time exactly like their base unit but swap rows/columns.
    """

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    X_MINUTE = "x_minute"
    X_HOUR = "x_hour"
    X_DAY = "x_day"
    X_WEEK = "x_week"
    X_MONTH = "x_month"

    @property
    def transposed(self) -> bool:
        return self.value.startswith("x_")

    @property
    def base(self) -> TimeUnit:
        """The non-transposed unit sharing this unit's bucketing."""
        if self.transposed:
            return TimeUnit(self.value[2:])
        return self

    @property
    def level(self) -> int:
        """Numeric rank for comparisons (0-5)."""
        return _BASE_ORDER.index(self.base)

    def is_finer_than(self, other: TimeUnit) -> bool:
        return self.level < other.level

    @classmethod
    def parse(cls, value: TimeUnit | str) -> TimeUnit:
        """Resolve a unit name, accepting the legacy ``min``/``x_min`` aliases.

        Raises ``ConfigurationError`` for anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ConfigurationError(f"Time unit must be a string, got {value!r}")
        name = value.strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(f"Unknown time unit: {value!r}") from None


_BASE_ORDER: tuple[TimeUnit, ...] = (
    TimeUnit.MINUTE,
    TimeUnit.HOUR,
    TimeUnit.DAY,
    TimeUnit.WEEK,
    TimeUnit.MONTH,
    TimeUnit.YEAR,
)

_ALIASES = {"min": "minute", "x_min": "x_minute"}


class ScrollDirection(str, Enum):
    SCROLL_NONE = "none"
    SCROLL_BACKWARD = "backward"
    SCROLL_FORWARD = "forward"


class UpdateMode(str, Enum):
    """How a fill combines incoming values with the cells' current values."""

    RESET_ALL = "reset_all"  # Clear every cell, then accumulate
    REPLACE = "replace"  # Overwrite touched cells only
    APPEND = "append"  # Add to the current value


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"
