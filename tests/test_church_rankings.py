"""Tests for per-year ranking normalization."""

from church_rankings import get_year_data, get_years, normalize_all_rankings, normalize_year_rankings
from sample_data import generate_sample_data


def _church(name, *points):
    return {
        'name': name, 'location': 'Somewhere, TX', 'pastor': 'Someone',
        'data': [{'year': year, 'attendance': attendance, 'ranking': 99} for year, attendance in points],
    }


def _rankings(churches, year):
    return [get_year_data(c, year)['ranking'] for c in churches]


class TestNormalizeYearRankings:

    def test_highest_attendance_ranks_first(self):
        churches = [_church('A', (2020, 100)), _church('B', (2020, 300)), _church('C', (2020, 200))]
        normalize_year_rankings(2020, churches)
        assert _rankings(churches, 2020) == [3, 1, 2]

    def test_ties_keep_input_order(self):
        churches = [_church('A', (2020, 200)), _church('B', (2020, 200)), _church('C', (2020, 100))]
        normalize_year_rankings(2020, churches)
        assert _rankings(churches, 2020) == [1, 2, 3]

    def test_missing_attendance_ranks_last(self):
        churches = [_church('A', (2020, None)), _church('B', (2020, 1500)), _church('C', (2020, 'n/a'))]
        normalize_year_rankings(2020, churches)
        assert _rankings(churches, 2020) == [2, 1, 3]

    def test_existing_ranking_breaks_attendance_ties(self):
        churches = [_church('A', (2020, None)), _church('B', (2020, None)), _church('C', (2020, 500))]
        get_year_data(churches[0], 2020)['ranking'] = 4
        get_year_data(churches[1], 2020)['ranking'] = 2
        normalize_year_rankings(2020, churches)
        assert _rankings(churches, 2020) == [3, 2, 1]

    def test_thousands_separators_are_understood(self):
        churches = [_church('A', (2020, '1,500')), _church('B', (2020, 1200))]
        normalize_year_rankings(2020, churches)
        assert _rankings(churches, 2020) == [1, 2]

    def test_churches_without_the_year_are_left_alone(self):
        churches = [_church('A', (2020, 100)), _church('B', (2021, 500)), _church('C', (2020, 300))]
        normalize_year_rankings(2020, churches)
        assert get_year_data(churches[0], 2020)['ranking'] == 2
        assert get_year_data(churches[2], 2020)['ranking'] == 1
        assert get_year_data(churches[1], 2021)['ranking'] == 99

    def test_is_idempotent(self, two_year_churches):
        normalize_year_rankings(2020, two_year_churches)
        first = _rankings(two_year_churches, 2020)
        normalize_year_rankings(2020, two_year_churches)
        assert _rankings(two_year_churches, 2020) == first

    def test_empty_year_is_a_no_op(self):
        churches = [_church('A', (2020, 100))]
        assert normalize_year_rankings(2019, churches) is churches
        assert _rankings(churches, 2020) == [99]


class TestNormalizeAllRankings:

    def test_years_are_ranked_independently(self, two_year_churches):
        normalize_all_rankings(two_year_churches)
        assert _rankings(two_year_churches, 2020) == [2, 1, 3]
        assert _rankings(two_year_churches, 2021) == [2, 3, 1]

    def test_every_year_has_dense_rankings(self):
        churches = generate_sample_data(seed=7)
        for year in get_years(churches):
            ranks = sorted(_rankings(churches, year))
            assert ranks == list(range(1, len(churches) + 1))

    def test_more_attendance_means_better_rank(self):
        churches = generate_sample_data(seed=3)
        for year in get_years(churches):
            points = [get_year_data(c, year) for c in churches]
            for a in points:
                for b in points:
                    if a['attendance'] > b['attendance']:
                        assert a['ranking'] < b['ranking']


def test_get_years_is_sorted_and_distinct(two_year_churches):
    assert get_years(two_year_churches) == [2020, 2021]
    assert get_years([]) == []
