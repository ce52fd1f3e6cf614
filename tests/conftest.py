"""Shared fixtures for the church ranking tests.

No test touches the network: page fetchers and HTTP sessions are fakes.
"""

import sys
from pathlib import Path

import pytest

# Modules live at the repository root
sys.path.insert(0, str(Path(__file__).parent.parent))


def build_listing_page(churches, start_rank=1):
    """Ranking table in the shape the source uses.

    churches: list of (name, location, pastor, attendance) tuples.
    """
    rows = []
    for rank, (name, location, pastor, attendance) in enumerate(churches, start_rank):
        slug = name.lower().replace(' ', '-')
        rows.append(
            f"<tr><td>{rank}</td>"
            f"<td><a href=\"/churches/{slug}\">{name}</a></td>"
            f"<td>{location}</td><td>{pastor}</td><td>{attendance:,}</td></tr>"
        )
    return (
        "<html><body><h1>Largest Churches</h1>"
        "<table><tr><th>Rank</th><th>Church</th><th>Location</th><th>Pastor</th><th>Attendance</th></tr>"
        + "".join(rows)
        + "</table></body></html>"
    )


@pytest.fixture
def listing_page():
    return build_listing_page


@pytest.fixture
def sample_listing_html():
    return build_listing_page([
        ("Life.Church", "Edmond, OK", "Craig Groeschel - Senior Pastor", 85000),
        ("Church of the Highlands", "Birmingham, AL", "Chris Hodges - Senior Pastor", 60000),
        ("Lakewood Church", "Houston, TX", "Joel Osteen - Pastor", 45000),
    ])


@pytest.fixture
def two_year_churches():
    """Three churches, two years, stale rankings"""
    return [
        {
            'name': "Gateway Church", 'location': "Southlake, TX", 'pastor': "Robert Morris",
            'data': [
                {'year': 2020, 'attendance': 20000, 'ranking': 9},
                {'year': 2021, 'attendance': 30000, 'ranking': 9},
            ],
        },
        {
            'name': "Crossroads Church", 'location': "Cincinnati, OH", 'pastor': "Brian Tome",
            'data': [
                {'year': 2020, 'attendance': 35000, 'ranking': 9},
                {'year': 2021, 'attendance': 25000, 'ranking': 9},
            ],
        },
        {
            'name': "Central Church", 'location': "Henderson, NV", 'pastor': "Jud Wilhite",
            'data': [
                {'year': 2020, 'attendance': 10000, 'ranking': 9},
                {'year': 2021, 'attendance': 40000, 'ranking': 9},
            ],
        },
    ]
