"""
Church ranking normalization

Each church is a dict:
    {'name': ..., 'location': ..., 'pastor': ...,
     'data': [{'year': 2015, 'attendance': 52000, 'ranking': 1}, ...]}

Rankings are recomputed per year from attendance so every year has a
dense 1..N ranking. The scraped ranking only breaks attendance ties.
"""

import pandas as pd


def get_year_data(church, year):
    """Return the church's data point for a year, or None"""
    return next((d for d in church.get('data', []) if d.get('year') == year), None)


def get_years(churches):
    """All years present in the dataset, ascending"""
    years = set()
    for church in churches:
        for data_point in church.get('data', []):
            if data_point.get('year') is not None:
                years.add(data_point['year'])
    return sorted(years)


def _attendance_sort_value(value):
    # Missing or unparseable attendance sorts below every real count
    try:
        return float(str(value).replace(',', '')) if value is not None else -1.0
    except ValueError:
        return -1.0


def _ranking_sort_value(value):
    # Unranked entries go after every ranked one
    try:
        return float(value) if value is not None else float('inf')
    except (TypeError, ValueError):
        return float('inf')


def normalize_year_rankings(year, churches):
    """Rank churches for a single year by attendance (highest = #1).

    Equal attendance (including none at all) falls back to the ranking
    already on the data point, then to the churches' original order.
    Churches without a data point for the year are left alone. Rankings
    are written back into each church's data point and the same list is
    returned.
    """
    rows = []
    for position, church in enumerate(churches):
        data_point = get_year_data(church, year)
        if data_point is None:
            continue
        rows.append({
            'position': position,
            'attendance': _attendance_sort_value(data_point.get('attendance')),
            'previous_ranking': _ranking_sort_value(data_point.get('ranking')),
            'data_point': data_point,
        })

    if not rows:
        return churches

    year_df = pd.DataFrame(rows)
    year_df = year_df.sort_values(['attendance', 'previous_ranking'], ascending=[False, True],
                                kind='mergesort')

    for ranking, data_point in enumerate(year_df['data_point'], 1):
        data_point['ranking'] = ranking

    return churches


def normalize_all_rankings(churches):
    """Normalize rankings separately for every year in the dataset"""
    for year in get_years(churches):
        normalize_year_rankings(year, churches)
    return churches


def sort_church_data(church):
    """Order a church's data points by year"""
    church['data'] = sorted(church.get('data', []), key=lambda d: d['year'])
    return church
