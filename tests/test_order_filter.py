"""
Tests for OrderFilterService.

Validates:
- Inclusive calendar-day date range
- Status membership (with legacy wc- prefix)
- Category closure (descendants, variations via parent product)
- Graceful handling of invalid input
"""
import pytest

from delivery_export.services import (
    OrderFilterService,
    filter_orders,
    parse_iso_date,
)
from orders.models import OrderStatus

from .conftest import local_dt

pytestmark = pytest.mark.django_db

ALL_STATUSES = ['processing', 'completed', 'on-hold', 'pending', 'cancelled']


def ids(orders):
    return [order.id for order in orders]


class TestParseIsoDate:
    """Strict YYYY-MM-DD parsing."""

    def test_valid_date(self):
        assert parse_iso_date('2024-03-05').isoformat() == '2024-03-05'

    @pytest.mark.parametrize('value', [
        '2024-1-5',
        '2024-13-40',
        '2024-02-30',
        '05/03/2024',
        '2024-03-05T10:00:00',
        '',
        None,
        20240305,
    ])
    def test_rejects_malformed(self, value):
        assert parse_iso_date(value) is None


class TestDateRange:
    """Date range is inclusive on both ends, compared by local calendar day."""

    def test_inclusive_bounds(self, make_order):
        first = make_order(local_dt(2024, 3, 1, 0, 0, 0))
        last = make_order(local_dt(2024, 3, 31, 23, 59, 59))
        make_order(local_dt(2024, 2, 29, 23, 59, 59))
        make_order(local_dt(2024, 4, 1, 0, 0, 0))

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'], [])

        assert ids(result) == [last.id, first.id]

    def test_single_day(self, make_order):
        order = make_order(local_dt(2024, 3, 5, 14, 30))
        make_order(local_dt(2024, 3, 6, 9, 0))

        assert ids(filter_orders('2024-03-05', '2024-03-05', ['processing'])) == [order.id]

    def test_start_after_end_returns_empty(self, make_order):
        make_order(local_dt(2024, 3, 5))

        assert filter_orders('2024-03-10', '2024-03-01', ['processing']) == []

    @pytest.mark.parametrize('start, end', [
        ('2024-1-5', '2024-03-31'),
        ('2024-03-01', '2024-13-40'),
        ('', '2024-03-31'),
        (None, None),
        ('garbage', 'garbage'),
    ])
    def test_invalid_dates_return_empty(self, make_order, start, end):
        make_order(local_dt(2024, 3, 5))

        assert filter_orders(start, end, ['processing']) == []

    def test_accepts_date_objects(self, make_order):
        order = make_order(local_dt(2024, 3, 5))

        result = filter_orders(parse_iso_date('2024-03-01'), parse_iso_date('2024-03-31'), ['processing'])

        assert ids(result) == [order.id]

    def test_newest_first(self, make_order):
        older = make_order(local_dt(2024, 3, 2))
        newer = make_order(local_dt(2024, 3, 20))
        middle = make_order(local_dt(2024, 3, 10))

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'])

        assert ids(result) == [newer.id, middle.id, older.id]


class TestStatuses:
    """Only orders in one of the requested statuses are returned."""

    def test_status_membership(self, make_order):
        processing = make_order(local_dt(2024, 3, 5), status=OrderStatus.PROCESSING)
        completed = make_order(local_dt(2024, 3, 6), status=OrderStatus.COMPLETED)
        make_order(local_dt(2024, 3, 7), status=OrderStatus.CANCELLED)

        result = filter_orders('2024-03-01', '2024-03-31', ['processing', 'completed'])

        assert set(ids(result)) == {processing.id, completed.id}

    def test_legacy_prefix(self, make_order):
        order = make_order(local_dt(2024, 3, 5), status=OrderStatus.ON_HOLD)

        result = filter_orders('2024-03-01', '2024-03-31', ['wc-on-hold'])

        assert ids(result) == [order.id]

    def test_unknown_statuses_dropped(self, make_order):
        order = make_order(local_dt(2024, 3, 5))

        result = filter_orders('2024-03-01', '2024-03-31', ['processing', 'wc-unknown', 'shipped'])

        assert ids(result) == [order.id]

    def test_no_valid_statuses_returns_empty(self, make_order):
        make_order(local_dt(2024, 3, 5))

        assert filter_orders('2024-03-01', '2024-03-31', ['shipped']) == []
        assert filter_orders('2024-03-01', '2024-03-31', []) == []

    def test_validate_statuses_deduplicates(self):
        assert OrderFilterService.validate_statuses(
            ['processing', 'wc-processing', 'completed', 'bogus']
        ) == ['processing', 'completed']


class TestCategories:
    """Category filter matches the selected categories and all their descendants."""

    def test_empty_selection_disables_filter(self, make_order, products):
        with_plate = make_order(local_dt(2024, 3, 5), items=[products['plate']])
        without_items = make_order(local_dt(2024, 3, 6))

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'], [])

        assert set(ids(result)) == {with_plate.id, without_items.id}

    def test_descendants_match(self, make_order, categories, products):
        cheese_order = make_order(local_dt(2024, 3, 5), items=[products['cheese']])
        make_order(local_dt(2024, 3, 6), items=[products['plate']])

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'], [categories['A'].id])

        assert ids(result) == [cheese_order.id]

    def test_sibling_tree_excluded(self, make_order, categories, products):
        make_order(local_dt(2024, 3, 5), items=[products['cheese']])
        plate_order = make_order(local_dt(2024, 3, 6), items=[products['plate']])

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'], [categories['E'].id])

        assert ids(result) == [plate_order.id]

    def test_variation_uses_parent_categories(self, make_order, categories, products):
        order = make_order(local_dt(2024, 3, 5), items=[products['bread_small']])

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'], [str(categories['C'].id)])

        assert ids(result) == [order.id]

    def test_order_counted_once(self, make_order, categories, products):
        order = make_order(
            local_dt(2024, 3, 5),
            items=[products['cheese'], products['bread'], products['bread_small']],
        )

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'], [categories['A'].id])

        assert ids(result) == [order.id]

    def test_deleted_product_skipped(self, make_order, categories, products):
        only_deleted = make_order(local_dt(2024, 3, 5), items=[None])
        mixed = make_order(local_dt(2024, 3, 6), items=[None, products['cheese']])

        filtered = filter_orders('2024-03-01', '2024-03-31', ['processing'], [categories['B'].id])
        unfiltered = filter_orders('2024-03-01', '2024-03-31', ['processing'], [])

        assert ids(filtered) == [mixed.id]
        assert set(ids(unfiltered)) == {only_deleted.id, mixed.id}

    def test_uncategorized_product_never_matches(self, make_order, categories, products):
        make_order(local_dt(2024, 3, 5), items=[products['gift_card']])

        assert filter_orders('2024-03-01', '2024-03-31', ['processing'], [categories['A'].id]) == []

    def test_nonexistent_categories_dropped(self, make_order, categories, products):
        cheese_order = make_order(local_dt(2024, 3, 5), items=[products['cheese']])
        plate_order = make_order(local_dt(2024, 3, 6), items=[products['plate']])

        only_missing = filter_orders('2024-03-01', '2024-03-31', ['processing'], [999999, 'abc'])
        mixed = filter_orders('2024-03-01', '2024-03-31', ['processing'], [999999, categories['D'].id])

        assert set(ids(only_missing)) == {cheese_order.id, plate_order.id}
        assert ids(mixed) == [cheese_order.id]

    @pytest.mark.parametrize('huge', ['99999999999999999999', 2 ** 63, -(2 ** 64)])
    def test_out_of_range_ids_dropped(self, make_order, categories, products, huge):
        cheese_order = make_order(local_dt(2024, 3, 5), items=[products['cheese']])
        plate_order = make_order(local_dt(2024, 3, 6), items=[products['plate']])

        only_huge = filter_orders('2024-03-01', '2024-03-31', ['processing'], [huge])
        with_valid = filter_orders('2024-03-01', '2024-03-31', ['processing'], [huge, categories['E'].id])

        assert set(ids(only_huge)) == {cheese_order.id, plate_order.id}
        assert ids(with_valid) == [plate_order.id]

    def test_negative_id_uses_absolute_value(self, make_order, categories, products):
        make_order(local_dt(2024, 3, 5), items=[products['cheese']])
        plate_order = make_order(local_dt(2024, 3, 6), items=[products['plate']])

        result = filter_orders('2024-03-01', '2024-03-31', ['processing'], [str(-categories['E'].id)])

        assert ids(result) == [plate_order.id]

    def test_validate_category_ids(self, categories):
        e = categories['E'].id

        assert OrderFilterService.validate_category_ids([0, -e, e, 'x', None, 2 ** 63]) == [e]


class TestFilterCombination:
    """All three filters must hold together; repeated calls are stable."""

    def test_all_filters_combined(self, make_order, categories, products):
        expected = make_order(local_dt(2024, 3, 5), items=[products['cheese']])
        make_order(local_dt(2024, 3, 5), status=OrderStatus.CANCELLED, items=[products['cheese']])
        make_order(local_dt(2024, 4, 5), items=[products['cheese']])
        make_order(local_dt(2024, 3, 5), items=[products['plate']])

        result = filter_orders('2024-03-01', '2024-03-31', ALL_STATUSES[:2], [categories['B'].id])

        assert ids(result) == [expected.id]

    def test_repeated_calls_identical(self, make_order, categories, products):
        make_order(local_dt(2024, 3, 5), items=[products['cheese']])
        make_order(local_dt(2024, 3, 6), items=[products['bread_small']])

        args = ('2024-03-01', '2024-03-31', ALL_STATUSES, [categories['A'].id])

        assert ids(filter_orders(*args)) == ids(filter_orders(*args))

    def test_build_criteria(self, categories):
        criteria = OrderFilterService.build_criteria(
            '2024-03-01', '2024-03-31', ['wc-completed', 'nope'], [categories['A'].id, 'x']
        )

        assert criteria.to_dict() == {
            'start_date': '2024-03-01',
            'end_date': '2024-03-31',
            'order_status': ['completed'],
            'parent_categories': [categories['A'].id],
        }
        assert OrderFilterService.build_criteria('2024-3-1', '2024-03-31', [], []) is None
