"""Tests for layout templates and DomainSkeleton geometry."""

from __future__ import annotations

from datetime import datetime

import pytest

from calendar_heatmap.core.config import CalendarOptions
from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.core.enums import TimeUnit
from calendar_heatmap.core.errors import ConfigurationError
from calendar_heatmap.layout.skeleton import DomainSkeleton
from calendar_heatmap.layout.templates import TEMPLATES, DayTemplate, HourTemplate


class TestTemplateRegistry:
    def test_every_subdomain_unit_has_a_template(self):
        for unit in TimeUnit:
            if unit.base != TimeUnit.YEAR:
                assert unit in TEMPLATES

    def test_transposed_units_reuse_base_template(self):
        assert TEMPLATES[TimeUnit.X_DAY] == (DayTemplate, True)
        assert TEMPLATES[TimeUnit.HOUR] == (HourTemplate, False)


class TestConstruction:
    def test_rejects_invalid_pair(self):
        with pytest.raises(ConfigurationError):
            DomainSkeleton("hour", "day")

    def test_rejects_both_limits(self):
        with pytest.raises(ConfigurationError):
            DomainSkeleton("day", "hour", col_limit=2, row_limit=2)

    def test_from_options(self):
        opts = CalendarOptions(domain="month", week_starts_monday=False)
        skeleton = DomainSkeleton.from_options(opts)
        assert skeleton.sub_domain is TimeUnit.DAY
        assert skeleton.helper.week_starts_monday is False


class TestDefaultLayouts:
    def test_days_in_month_on_week_grid(self):
        skeleton = DomainSkeleton("month", "day")
        feb = datetime(2024, 2, 1)  # Thursday
        assert skeleton.count(feb) == 29
        assert skeleton.columns(feb) == 7
        assert skeleton.rows(feb) == 5
        assert skeleton.position(datetime(2024, 2, 1)) == (3, 0)
        assert skeleton.position(datetime(2024, 2, 29)) == (3, 4)

    def test_months_in_year_single_row(self):
        skeleton = DomainSkeleton("year", "month")
        year = datetime(2024, 6, 1)
        assert (skeleton.rows(year), skeleton.columns(year)) == (1, 12)
        assert skeleton.position(datetime(2024, 3, 20)) == (2, 0)

    def test_hours_in_day(self):
        skeleton = DomainSkeleton("day", "hour")
        day = datetime(2024, 3, 10)
        assert (skeleton.rows(day), skeleton.columns(day)) == (6, 4)
        assert skeleton.position(datetime(2024, 3, 10, 13, 30)) == (2, 1)

    def test_minutes_in_hour(self):
        skeleton = DomainSkeleton("hour", "minute")
        hour = datetime(2024, 3, 10, 9)
        assert (skeleton.rows(hour), skeleton.columns(hour)) == (10, 6)
        assert skeleton.position(datetime(2024, 3, 10, 9, 42)) == (4, 2)

    def test_transposed_hours_swap_axes(self):
        skeleton = DomainSkeleton("day", "x_hour")
        day = datetime(2024, 3, 10)
        assert (skeleton.rows(day), skeleton.columns(day)) == (4, 6)
        assert skeleton.position(datetime(2024, 3, 10, 13)) == (1, 2)

    def test_days_in_week_single_column(self):
        skeleton = DomainSkeleton("week", "day")
        week = datetime(2024, 3, 11)
        assert (skeleton.rows(week), skeleton.columns(week)) == (7, 1)
        assert skeleton.position(datetime(2024, 3, 13)) == (0, 2)

    def test_days_in_year(self):
        skeleton = DomainSkeleton("year", "day")
        year = datetime(2024, 1, 1)
        assert (skeleton.rows(year), skeleton.columns(year)) == (7, 53)
        assert skeleton.position(datetime(2024, 1, 10)) == (1, 2)

    def test_weeks_in_month_start_inside_month(self):
        skeleton = DomainSkeleton("month", "week")
        march = datetime(2024, 3, 1)
        assert skeleton.mapping(march, skeleton.domain_end(march)) == [
            datetime(2024, 3, 4),
            datetime(2024, 3, 11),
            datetime(2024, 3, 18),
            datetime(2024, 3, 25),
        ]
        assert skeleton.count(march) == 4
        assert skeleton.columns(march) == 4


class TestLimitedLayouts:
    def test_col_limit_fills_column_major(self):
        skeleton = DomainSkeleton("day", "hour", col_limit=4)
        day = datetime(2024, 3, 10)
        assert (skeleton.rows(day), skeleton.columns(day)) == (6, 4)
        assert skeleton.position(datetime(2024, 3, 10, 13)) == (2, 1)

    def test_row_limit(self):
        skeleton = DomainSkeleton("day", "hour", row_limit=3)
        day = datetime(2024, 3, 10)
        assert (skeleton.rows(day), skeleton.columns(day)) == (3, 8)
        assert skeleton.position(datetime(2024, 3, 10, 13)) == (4, 1)

    def test_limit_overrides_week_grid(self):
        skeleton = DomainSkeleton("month", "day", col_limit=10)
        feb = datetime(2024, 2, 1)
        assert (skeleton.rows(feb), skeleton.columns(feb)) == (3, 10)


class TestStaticDimension:
    def test_month_grid_sized_for_longest_month(self):
        skeleton = DomainSkeleton("month", "day", dynamic_dimension=False)
        for month in (datetime(2021, 2, 1), datetime(2024, 3, 1)):
            assert (skeleton.rows(month), skeleton.columns(month)) == (6, 7)

    def test_limited_grid_uses_max_count(self):
        skeleton = DomainSkeleton("month", "day", col_limit=7, dynamic_dimension=False)
        assert skeleton.rows(datetime(2021, 2, 1)) == 5

    def test_year_grid(self):
        skeleton = DomainSkeleton("year", "day", dynamic_dimension=False)
        assert skeleton.columns(datetime(2023, 1, 1)) == 54


class TestCells:
    def test_full_month_of_cells(self):
        skeleton = DomainSkeleton("month", "day")
        cells = skeleton.cells(datetime(2024, 2, 1))
        assert len(cells) == 29
        assert cells[0].timestamp == datetime(2024, 2, 1)
        assert cells[-1].timestamp == datetime(2024, 2, 29)
        assert all(c.value is None for c in cells)
        assert len({(c.x, c.y) for c in cells}) == 29

    def test_cells_carry_positions(self):
        skeleton = DomainSkeleton("day", "hour")
        cells = skeleton.cells(datetime(2024, 3, 10))
        assert (cells[13].x, cells[13].y) == (2, 1)

    def test_sunday_first_week_grid(self):
        skeleton = DomainSkeleton("week", "day", DateHelper(week_starts_monday=False))
        cells = skeleton.cells(datetime(2024, 3, 10))
        assert cells[0].timestamp == datetime(2024, 3, 10)
        assert [c.y for c in cells] == list(range(7))


class TestWeeksAcrossDomains:
    def test_month_week_position_uses_owning_month(self):
        skeleton = DomainSkeleton("month", "week")
        feb1 = datetime(2024, 2, 1)  # Thursday, week of Jan 29th
        assert skeleton.owner_domain(feb1) == datetime(2024, 1, 1)
        assert skeleton.position(feb1) == (4, 0)
        assert skeleton.columns(skeleton.owner_domain(feb1)) == 5
        assert skeleton.cells(datetime(2024, 1, 1))[4].timestamp == datetime(2024, 1, 29)

    def test_year_week_position_uses_owning_year(self):
        skeleton = DomainSkeleton("year", "week")
        new_year = datetime(2025, 1, 1)  # Wednesday, week of Dec 30th 2024
        assert skeleton.owner_domain(new_year) == datetime(2024, 1, 1)
        assert skeleton.position(new_year) == (52, 0)
        assert skeleton.columns(datetime(2024, 1, 1)) == 53

    def test_span_end_covers_trailing_week(self):
        skeleton = DomainSkeleton("month", "week")
        assert skeleton.domain_end(datetime(2024, 1, 1)) == datetime(2024, 2, 1)
        assert skeleton.span_end(datetime(2024, 1, 1)) == datetime(2024, 2, 5)
        day_skeleton = DomainSkeleton("month", "day")
        assert day_skeleton.span_end(datetime(2024, 1, 1)) == datetime(2024, 2, 1)
