"""Property test: grid layout invariants for every valid unit pair.

For any date and any (domain, subdomain) pair:
- every mapped cell lies inside the ``columns x rows`` grid,
- no two cells of a domain share a position,
- any date maps to the cell of its bucket in the domain owning it,
- the grid holds the whole mapping, exactly when the layout is a plain
  linear fill of a full domain.
"""

from datetime import datetime, timedelta

from hypothesis import given, settings, strategies as st

from calendar_heatmap.core.date_helper import DateHelper
from calendar_heatmap.core.enums import TimeUnit
from calendar_heatmap.layout.skeleton import DomainSkeleton


DOMAINS = [TimeUnit.HOUR, TimeUnit.DAY, TimeUnit.WEEK, TimeUnit.MONTH, TimeUnit.YEAR]

# Pairs whose default grid is exactly filled by a full domain.
EXACT_FILL = {
    (TimeUnit.HOUR, TimeUnit.MINUTE),
    (TimeUnit.DAY, TimeUnit.HOUR),
    (TimeUnit.WEEK, TimeUnit.DAY),
    (TimeUnit.YEAR, TimeUnit.MONTH),
}

# Minute cells beyond an hour and hour cells in a year make examples slow.
_SLOW_PAIRS = {
    (TimeUnit.DAY, TimeUnit.MINUTE),
    (TimeUnit.WEEK, TimeUnit.MINUTE),
    (TimeUnit.MONTH, TimeUnit.MINUTE),
    (TimeUnit.YEAR, TimeUnit.MINUTE),
    (TimeUnit.YEAR, TimeUnit.HOUR),
}

dates = st.datetimes(
    min_value=datetime(1990, 1, 1),
    max_value=datetime(2060, 12, 31),
)


@st.composite
def unit_pairs(draw):
    domain = draw(st.sampled_from(DOMAINS))
    subs = [
        u for u in TimeUnit
        if u.base != TimeUnit.YEAR
        and u.is_finer_than(domain)
        and (domain, u.base) not in _SLOW_PAIRS
    ]
    return domain, draw(st.sampled_from(subs))


limits = st.one_of(
    st.just({}),
    st.integers(min_value=1, max_value=12).map(lambda n: {"col_limit": n}),
    st.integers(min_value=1, max_value=12).map(lambda n: {"row_limit": n}),
)


@given(
    pair=unit_pairs(),
    d=dates,
    monday=st.booleans(),
    layout=limits,
    dynamic=st.booleans(),
)
@settings(max_examples=150, deadline=None)
def test_positions_in_bounds_and_unique(pair, d, monday, layout, dynamic):
    domain, sub = pair
    skeleton = DomainSkeleton(
        domain, sub, DateHelper(monday), dynamic_dimension=dynamic, **layout,
    )
    start = skeleton.domain_start(d)
    cells = skeleton.cells(start)
    rows, columns = skeleton.rows(start), skeleton.columns(start)

    assert len(cells) <= rows * columns
    for cell in cells:
        assert 0 <= cell.x < columns
        assert 0 <= cell.y < rows
    assert len({(c.x, c.y) for c in cells}) == len(cells)


@given(
    pair=st.sampled_from(sorted(EXACT_FILL, key=lambda p: p[0].level)),
    d=dates,
    monday=st.booleans(),
)
@settings(max_examples=60, deadline=None)
def test_exact_fill_pairs_fill_the_grid(pair, d, monday):
    domain, sub = pair
    skeleton = DomainSkeleton(domain, sub, DateHelper(monday))
    start = skeleton.domain_start(d)
    mapping = skeleton.mapping(start, skeleton.domain_end(start))
    assert len(mapping) == skeleton.rows(start) * skeleton.columns(start)


@given(pair=unit_pairs(), d=dates, monday=st.booleans())
@settings(max_examples=100, deadline=None)
def test_mapping_is_ascending_and_inside_domain(pair, d, monday):
    domain, sub = pair
    skeleton = DomainSkeleton(domain, sub, DateHelper(monday))
    start = skeleton.domain_start(d)
    end = skeleton.domain_end(start)
    mapping = skeleton.mapping(start, end)

    assert mapping == sorted(set(mapping))
    assert all(start <= t < end for t in mapping)
    assert len(mapping) == skeleton.count(start)


@given(
    d=dates,
    unit=st.sampled_from(list(TimeUnit)),
    monday=st.booleans(),
    offset=st.integers(min_value=0, max_value=10_000),
)
@settings(max_examples=200)
def test_extract_unit_idempotent(d, unit, monday, offset):
    helper = DateHelper(monday)
    d = d.replace(microsecond=0) - timedelta(minutes=offset)
    once = helper.extract_unit(d, unit)
    assert helper.extract_unit(once, unit) == once
    assert once <= d


@given(
    pair=unit_pairs(),
    d=dates,
    monday=st.booleans(),
    layout=limits,
    dynamic=st.booleans(),
)
@settings(max_examples=150, deadline=None)
def test_position_of_any_date_matches_its_cell(pair, d, monday, layout, dynamic):
    domain, sub = pair
    helper = DateHelper(monday)
    skeleton = DomainSkeleton(
        domain, sub, helper, dynamic_dimension=dynamic, **layout,
    )
    owner = skeleton.owner_domain(d)
    x, y = skeleton.position(d)

    assert 0 <= x < skeleton.columns(owner)
    assert 0 <= y < skeleton.rows(owner)
    bucket = helper.extract_unit(d, sub)
    matching = [c for c in skeleton.cells(owner) if (c.x, c.y) == (x, y)]
    assert [c.timestamp for c in matching] == [bucket]
