"""Tests for page planning."""

from __future__ import annotations

import pytest

from studiodocs.core.aggregator import aggregate
from studiodocs.core.models import BudgetItem
from studiodocs.core.pagination import grid_capacity, image_grid, list_capacity, paginate, paginate_groups


class TestPaginate:
    def test_splits_by_capacity(self):
        pages = paginate(list(range(26)), 15)
        assert [len(p.items) for p in pages] == [15, 11]
        assert [p.indicator for p in pages] == ["(1/2)", "(2/2)"]

    def test_preserves_order(self):
        pages = paginate(list(range(10)), 3)
        assert [x for p in pages for x in p.items] == list(range(10))

    def test_exact_multiple(self):
        assert len(paginate(list(range(12)), 6)) == 2

    def test_single_page_has_no_indicator(self):
        pages = paginate(["a"], 5)
        assert pages[0].indicator == ""
        assert pages[0].is_first and pages[0].is_last

    def test_empty(self):
        assert paginate([], 4) == []

    def test_limit_records_overflow_on_last_page(self):
        pages = paginate(list(range(20)), 5, limit=12)
        assert sum(len(p.items) for p in pages) == 12
        assert pages[-1].overflow == 8
        assert all(p.overflow == 0 for p in pages[:-1])

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            paginate([1], 0)


class TestCapacity:
    def test_grid_capacity(self):
        assert grid_capacity(2, 5.37, 2.2, 0.1) == 4
        assert grid_capacity(3, 10.0, 3.0, 0.0) == 9

    def test_grid_capacity_at_least_one_row(self):
        assert grid_capacity(2, 1.0, 3.0) == 2

    def test_list_capacity(self):
        assert list_capacity(15) == 15
        with pytest.raises(ValueError):
            list_capacity(0)


class TestPaginateGroups:
    def test_pages_never_mix_groups(self):
        items = [BudgetItem(number=i, name=f"i{i}", category="mobiliario" if i < 5 else "decoracao")
                 for i in range(1, 8)]
        planned = paginate_groups(aggregate(items), 3)
        for group, pages in planned:
            for page in pages:
                assert all(item.category == group.category for item in page.items)


@pytest.mark.parametrize("count,expected", [(1, (1, 1)), (2, (2, 1)), (4, (2, 2)), (6, (3, 2)), (9, (3, 3)),
                                            (10, (4, 3))])
def test_image_grid(count, expected):
    assert image_grid(count) == expected
