"""Tests for trend direction, growth and the summary panel."""

import math

import pytest

from church_trends import calculate_growth, format_growth, get_church_trend, summarize_church


def _church(*points):
    """points: (year, attendance, ranking)"""
    return {
        'name': 'Test Church', 'location': 'Plano, TX', 'pastor': 'Jack Graham',
        'data': [{'year': y, 'attendance': a, 'ranking': r} for y, a, r in points],
    }


class TestTrend:

    def test_needs_two_data_points(self):
        assert get_church_trend(_church((2024, 1000, 1))) is None
        assert get_church_trend(_church()) is None

    def test_attendance_up(self):
        assert get_church_trend(_church((2023, 100, 2), (2024, 120, 2))) == 'up'

    def test_equal_attendance_counts_as_down(self):
        assert get_church_trend(_church((2023, 100, 2), (2024, 100, 2))) == 'down'

    def test_only_latest_two_points_matter(self):
        church = _church((2015, 5000, 1), (2023, 1000, 4), (2024, 1100, 4))
        assert get_church_trend(church) == 'up'

    def test_lower_ranking_is_up(self):
        assert get_church_trend(_church((2023, 100, 5), (2024, 90, 3)), 'ranking') == 'up'

    def test_same_ranking_is_down(self):
        assert get_church_trend(_church((2023, 100, 3), (2024, 200, 3)), 'ranking') == 'down'

    def test_missing_attendance_has_no_trend(self):
        assert get_church_trend(_church((2023, None, 3), (2024, 200, 3))) is None

    def test_unknown_view_mode(self):
        with pytest.raises(ValueError):
            get_church_trend(_church((2023, 1, 1), (2024, 2, 1)), 'members')


class TestGrowth:

    def test_attendance_percentage_over_full_span(self):
        church = _church((2015, 1000, 4), (2020, 400, 9), (2024, 1500, 2))
        assert calculate_growth(church) == 50.0
        assert format_growth(calculate_growth(church)) == '+50.0%'

    def test_attendance_decline(self):
        church = _church((2015, 2000, 1), (2024, 1500, 1))
        assert format_growth(calculate_growth(church)) == '-25.0%'

    def test_rounds_to_one_decimal(self):
        church = _church((2015, 3000, 1), (2024, 3001, 1))
        assert calculate_growth(church) == 0.0
        assert format_growth(calculate_growth(church)) == '0.0%'

    def test_tiny_decline_is_not_negative_zero(self):
        church = _church((2015, 3000, 1), (2024, 2999, 1))
        growth = calculate_growth(church)
        assert math.copysign(1, growth) == 1
        assert format_growth(growth) == '0.0%'
        assert format_growth(-0.04) == '0.0%'

    def test_ranking_improvement(self):
        church = _church((2015, 1000, 8), (2024, 1500, 3))
        assert calculate_growth(church, 'ranking') == 5
        assert format_growth(5, 'ranking') == '+5'

    def test_ranking_drop(self):
        church = _church((2015, 1000, 2), (2024, 900, 6))
        assert format_growth(calculate_growth(church, 'ranking'), 'ranking') == '-4'

    def test_zero_baseline_is_undefined(self):
        church = _church((2015, 0, 10), (2024, 1500, 3))
        assert calculate_growth(church) is None
        assert format_growth(None) == 'N/A'

    def test_missing_baseline_is_undefined(self):
        assert calculate_growth(_church((2015, None, 10), (2024, 1500, 3))) is None

    def test_no_data(self):
        assert calculate_growth(_church()) is None
        assert calculate_growth(_church(), 'ranking') is None


class TestSummarizeChurch:

    def test_attendance_summary(self):
        summary = summarize_church(_church((2015, 1000, 8), (2024, 52000, 3)))
        assert summary['direction'] == 'up'
        assert summary['current_label'] == '52,000'
        assert summary['growth_label'] == '+5100.0%'

    def test_ranking_summary(self):
        summary = summarize_church(_church((2015, 1000, 8), (2024, 52000, 3)), 'ranking')
        assert summary['current'] == 3
        assert summary['current_label'] == '#3'
        assert summary['growth'] == 5
        assert summary['growth_label'] == '+5'
