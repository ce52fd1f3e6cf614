"""
Trend and growth figures for a single church

view_mode is 'attendance' or 'ranking'. For rankings a lower number is
better, so 'up' means the church moved up the list.
"""

from config import VIEW_MODES


def _check_view_mode(view_mode):
    if view_mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode: {view_mode!r} (expected one of {', '.join(VIEW_MODES)})")


def get_church_trend(church, view_mode='attendance'):
    """Compare the latest two data points: 'up', 'down' or None"""
    _check_view_mode(view_mode)

    data = church.get('data', [])
    if len(data) < 2:
        return None

    latest = data[-1]
    previous = data[-2]

    if view_mode == 'attendance':
        if latest.get('attendance') is None or previous.get('attendance') is None:
            return None
        # A flat year counts as 'down'
        return 'up' if latest['attendance'] > previous['attendance'] else 'down'

    if latest.get('ranking') is None or previous.get('ranking') is None:
        return None
    return 'up' if latest['ranking'] < previous['ranking'] else 'down'


def calculate_growth(church, view_mode='attendance'):
    """Growth from the first to the last data point.

    Attendance: percentage change rounded to one decimal place.
    Ranking: places gained (first ranking - last ranking).
    Returns None when growth is undefined (no data, missing values, or a
    zero attendance baseline).
    """
    _check_view_mode(view_mode)

    data = church.get('data', [])
    if not data:
        return None

    earliest = data[0]
    latest = data[-1]

    if view_mode == 'attendance':
        first = earliest.get('attendance')
        last = latest.get('attendance')
        if first is None or last is None or first == 0:
            return None
        # A decline that rounds away is 0.0, not -0.0
        return round((last - first) / first * 100, 1) or 0.0

    first = earliest.get('ranking')
    last = latest.get('ranking')
    if first is None or last is None:
        return None
    return int(first - last)


def format_growth(growth, view_mode='attendance'):
    """'+50.0%' / '-3.2%' for attendance, '+5' / '-2' for ranking, 'N/A' when undefined"""
    _check_view_mode(view_mode)

    if growth is None:
        return 'N/A'

    if view_mode == 'attendance':
        # -0.04 prints as 0.0%, not -0.0%
        growth = round(growth, 1) or 0.0
        sign = '+' if growth > 0 else ''
        return f"{sign}{growth:.1f}%"
    sign = '+' if growth > 0 else ''
    return f"{sign}{int(growth)}"


def summarize_church(church, view_mode='attendance'):
    """Trend, growth and current value for the summary statistics panel"""
    _check_view_mode(view_mode)

    data = church.get('data', [])
    latest = data[-1] if data else {}

    if view_mode == 'attendance':
        current = latest.get('attendance')
        current_label = f"{current:,.0f}" if current is not None else 'N/A'
    else:
        current = latest.get('ranking')
        current_label = f"#{current}" if current is not None else 'N/A'

    growth = calculate_growth(church, view_mode)

    return {
        'name': church.get('name'),
        'direction': get_church_trend(church, view_mode),
        'growth': growth,
        'growth_label': format_growth(growth, view_mode),
        'current': current,
        'current_label': current_label,
    }
