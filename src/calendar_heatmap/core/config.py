"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.

``CalendarOptions`` is immutable: every component receives the same frozen
instance at construction and never reaches into shared state.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from .enums import TimeUnit
from .errors import ConfigurationError
from .ids import utc_now
from .units import optimal_sub_domain, validate_unit_pair


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class CalendarOptions(BaseModel):
    """Calendar layout and navigation options."""

    model_config = ConfigDict(frozen=True)

    domain: TimeUnit = TimeUnit.HOUR
    sub_domain: TimeUnit = TimeUnit.MINUTE  # Defaults to the domain's optimal subdomain
    range: int = 12  # Number of domains kept in the window
    start: datetime = Field(default_factory=utc_now)
    week_starts_monday: bool = True

    # Layout limits, mutually exclusive
    col_limit: int | None = None
    row_limit: int | None = None
    dynamic_dimension: bool = True  # Size each domain from its own length

    # Navigation bounds
    min_date: datetime | None = None
    max_date: datetime | None = None

    highlight: tuple[datetime | Literal["now"], ...] = ()  # "now" tracks the clock

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("sub_domain") is None:
            domain = TimeUnit.parse(data.get("domain", TimeUnit.HOUR))
            data["sub_domain"] = optimal_sub_domain(domain)
        if data.get("start") is None:
            # Match the flavour of the configured bounds so comparisons work.
            bounds = [
                b for b in (data.get("min_date"), data.get("max_date"))
                if isinstance(b, datetime)
            ]
            now = utc_now()
            if bounds and bounds[0].tzinfo is None:
                now = now.replace(tzinfo=None)
            data["start"] = now
        return data

    @field_validator("domain", "sub_domain", mode="before")
    @classmethod
    def _parse_unit(cls, value: Any) -> TimeUnit:
        return TimeUnit.parse(value)

    @field_validator("col_limit", "row_limit")
    @classmethod
    def _parse_limit(cls, value: int | None) -> int | None:
        if value is None or value == 0:
            return None
        if value < 0:
            raise ConfigurationError(f"Layout limits must be positive, got {value}")
        return value

    @model_validator(mode="after")
    def _check(self) -> CalendarOptions:
        self.validate_options()
        return self

    def validate_options(self) -> None:
        """Enforce cross-field rules.  Raises ``ConfigurationError``."""
        validate_unit_pair(self.domain, self.sub_domain)

        if self.range < 1:
            raise ConfigurationError(f"range must be at least 1, got {self.range}")

        if self.col_limit is not None and self.row_limit is not None:
            raise ConfigurationError(
                "colLimit and rowLimit are mutually exclusive"
            )

        dates = [self.start, *(d for d in self.highlight if d != "now")]
        dates += [d for d in (self.min_date, self.max_date) if d is not None]
        if len({d.tzinfo is None for d in dates}) > 1:
            raise ConfigurationError(
                "start, min_date, max_date and highlight must all be naive "
                "or all be timezone-aware"
            )

        if self.min_date is not None and self.max_date is not None:
            if self.min_date > self.max_date:
                raise ConfigurationError(
                    f"min_date {self.min_date.isoformat()} is after "
                    f"max_date {self.max_date.isoformat()}"
                )


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    calendar: CalendarOptions = Field(default_factory=CalendarOptions)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "CALHEATMAP_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    return Settings(**data)
