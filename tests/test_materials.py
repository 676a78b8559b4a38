"""Tests for material totals, merging and the timezone correction."""

from datetime import date, datetime, timedelta, timezone

import pytest

from eventplanner.materials import (
    adjust_for_timezone,
    daily_summary,
    event_total,
    line_total,
    merge_materials,
    to_calendar_date,
)


# ---------------------------------------------------------------------------
# line_total / event_total
# ---------------------------------------------------------------------------


class TestLineTotal:
    def test_quantity_times_cost(self):
        assert line_total({'quantity': 3, 'cost': 10}) == 30

    def test_non_numeric_quantity_counts_as_one(self):
        assert line_total({'quantity': 'x', 'cost': 10}) == 10

    def test_missing_cost_counts_as_zero(self):
        assert line_total({'quantity': 2, 'cost': None}) == 0
        assert line_total({'quantity': 2}) == 0

    def test_missing_quantity_counts_as_one(self):
        assert line_total({'cost': 7}) == 7

    def test_numeric_strings_are_used(self):
        assert line_total({'quantity': '4', 'cost': '2.5'}) == 10

    @pytest.mark.parametrize('bad', ['', '  ', 'nan', 'inf', True, [1]])
    def test_other_junk_falls_back(self, bad):
        assert line_total({'quantity': bad, 'cost': 6}) == 6
        assert line_total({'quantity': 2, 'cost': bad}) == 0

    def test_input_is_not_mutated(self):
        item = {'materialName': 'Chair', 'quantity': 'x', 'cost': None}
        line_total(item)
        assert item == {'materialName': 'Chair', 'quantity': 'x', 'cost': None}


class TestEventTotal:
    def test_empty_and_absent(self):
        assert event_total([]) == 0
        assert event_total(None) == 0

    def test_sums_line_totals(self):
        assert event_total([{'quantity': 2, 'cost': 5}, {'quantity': 1, 'cost': 3}]) == 13

    def test_fractional_costs(self):
        assert event_total([{'quantity': 3, 'cost': 0.5}]) == pytest.approx(1.5)

    def test_never_negative_for_valid_lists(self):
        materials = [{'materialName': f'm{i}', 'quantity': i + 1, 'cost': i * 1.25}
                     for i in range(10)]
        assert event_total(materials) >= 0


# ---------------------------------------------------------------------------
# merge_materials
# ---------------------------------------------------------------------------


class TestMergeMaterials:
    def test_same_name_and_cost_sum_quantities(self):
        merged = merge_materials([
            [{'materialName': 'Chair', 'quantity': 2, 'cost': 5}],
            [{'materialName': 'Chair', 'quantity': 3, 'cost': 5}],
        ])
        assert merged == [{'materialName': 'Chair', 'quantity': 5, 'cost': 5}]

    def test_cost_is_not_summed(self):
        merged = merge_materials([
            [{'materialName': 'Tent', 'quantity': 1, 'cost': 100}],
            [{'materialName': 'Tent', 'quantity': 1, 'cost': 100}],
            [{'materialName': 'Tent', 'quantity': 1, 'cost': 100}],
        ])
        assert merged == [{'materialName': 'Tent', 'quantity': 3, 'cost': 100}]

    def test_different_costs_stay_separate(self):
        merged = merge_materials([
            [{'materialName': 'Chair', 'quantity': 2, 'cost': 5}],
            [{'materialName': 'Chair', 'quantity': 1, 'cost': 7}],
        ])
        assert merged == [
            {'materialName': 'Chair', 'quantity': 2, 'cost': 5},
            {'materialName': 'Chair', 'quantity': 1, 'cost': 7},
        ]

    def test_order_of_first_appearance(self):
        merged = merge_materials([
            [{'materialName': 'Table', 'quantity': 1, 'cost': 3},
             {'materialName': 'Chair', 'quantity': 2, 'cost': 5}],
            [{'materialName': 'Balloon', 'quantity': 10, 'cost': 1},
             {'materialName': 'Table', 'quantity': 4, 'cost': 3}],
        ])
        assert [m['materialName'] for m in merged] == ['Table', 'Chair', 'Balloon']
        assert merged[0]['quantity'] == 5

    def test_single_list_is_unchanged(self):
        materials = [
            {'materialName': 'Chair', 'quantity': 2, 'cost': 5},
            {'materialName': 'Table', 'quantity': 1, 'cost': 3},
            {'materialName': 'Chair', 'quantity': 4, 'cost': 6},
        ]
        assert merge_materials([materials]) == materials

    def test_inputs_are_not_mutated(self):
        first = [{'materialName': 'Chair', 'quantity': 2, 'cost': 5}]
        second = [{'materialName': 'Chair', 'quantity': 3, 'cost': 5}]
        merge_materials([first, second])
        assert first == [{'materialName': 'Chair', 'quantity': 2, 'cost': 5}]
        assert second == [{'materialName': 'Chair', 'quantity': 3, 'cost': 5}]

    def test_unhashable_cost_counts_as_zero(self):
        merged = merge_materials([
            [{'materialName': 'Chair', 'quantity': 2, 'cost': [5]}],
            [{'materialName': 'Chair', 'quantity': 1, 'cost': None}],
        ])
        assert merged == [{'materialName': 'Chair', 'quantity': 3, 'cost': 0}]

    def test_numeric_string_cost_merges_with_number(self):
        merged = merge_materials([
            [{'materialName': 'Chair', 'quantity': 2, 'cost': '5'}],
            [{'materialName': 'Chair', 'quantity': 3, 'cost': 5}],
        ])
        assert merged == [{'materialName': 'Chair', 'quantity': 5, 'cost': 5}]

    def test_empty_and_absent_lists(self):
        assert merge_materials([]) == []
        assert merge_materials(None) == []
        assert merge_materials([[], None]) == []

    def test_daily_summary_total(self):
        materials, total = daily_summary([
            [{'materialName': 'Chair', 'quantity': 2, 'cost': 5}],
            [{'materialName': 'Chair', 'quantity': 3, 'cost': 5},
             {'materialName': 'Table', 'quantity': 1, 'cost': 3}],
        ])
        assert len(materials) == 2
        assert total == 28


# ---------------------------------------------------------------------------
# adjust_for_timezone / to_calendar_date
# ---------------------------------------------------------------------------


class TestTimezone:
    def test_zero_offset_is_identity(self):
        value = datetime(2025, 3, 10, 0, 0, tzinfo=timezone.utc)
        assert adjust_for_timezone(value) == value
        naive = datetime(2025, 3, 10, 0, 0)
        assert adjust_for_timezone(naive, timedelta(0)) == naive

    def test_positive_offset_adds(self):
        value = datetime(2025, 3, 10, 0, 0)
        assert adjust_for_timezone(value, timedelta(hours=8)) == datetime(2025, 3, 10, 8, 0)

    def test_negative_offset_subtracts(self):
        value = datetime(2025, 3, 10, 0, 0)
        assert adjust_for_timezone(value, timedelta(hours=-5)) == datetime(2025, 3, 9, 19, 0)

    @pytest.mark.parametrize('hours', [-10, -5, 0, 5.5, 8, 14])
    def test_local_midnight_keeps_calendar_day(self, hours):
        tz = timezone(timedelta(hours=hours))
        picked = datetime(2025, 3, 10, 0, 0, tzinfo=tz)
        assert to_calendar_date(picked) == date(2025, 3, 10)

    def test_naive_with_explicit_offset(self):
        picked = datetime(2025, 3, 10, 0, 0)
        assert to_calendar_date(picked, timedelta(hours=-5)) == date(2025, 3, 10)
        assert to_calendar_date(picked, timedelta(hours=8)) == date(2025, 3, 10)

    def test_plain_dates_pass_through(self):
        assert to_calendar_date(date(2025, 3, 10)) == date(2025, 3, 10)

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            to_calendar_date('2025-03-10')
