"""Shared fixtures for the calendar-heatmap test suite."""

from __future__ import annotations

from datetime import datetime

import pytest

from calendar_heatmap.core.config import CalendarOptions
from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.infrastructure.event_bus import InMemoryEventBus
from calendar_heatmap.layout.skeleton import DomainSkeleton
from calendar_heatmap.navigation.domain_collection import DomainCollection
from calendar_heatmap.navigation.navigator import Navigator
from calendar_heatmap.navigation.populator import Populator


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

@pytest.fixture
def helper() -> DateHelper:
    """Monday-first date helper."""
    return DateHelper(week_starts_monday=True)


@pytest.fixture
def sunday_helper() -> DateHelper:
    return DateHelper(week_starts_monday=False)


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

@pytest.fixture
def bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def day_options() -> CalendarOptions:
    """Three day domains split in hours, starting 2024-03-10."""
    return CalendarOptions(
        domain="day",
        sub_domain="hour",
        range=3,
        start=datetime(2024, 3, 10),
    )


def build_engine(
    options: CalendarOptions, bus: InMemoryEventBus,
) -> tuple[Navigator, Populator, DomainCollection]:
    """Wire a navigator and a populator around one live window."""
    helper = DateHelper(options.week_starts_monday)
    skeleton = DomainSkeleton.from_options(options, helper)
    collection = DomainCollection(options.domain, helper)
    navigator = Navigator(options, skeleton, collection, bus)
    populator = Populator(options, collection, bus, helper)
    return navigator, populator, collection


@pytest.fixture
def engine(day_options, bus):
    return build_engine(day_options, bus)


@pytest.fixture
def make_engine(bus):
    """Factory: ``make_engine(options)`` wires an engine on the shared bus."""
    def _make(options: CalendarOptions):
        return build_engine(options, bus)
    return _make
