"""
Sample dataset for running the dashboard without live data

Real church names with synthetic 2015-2024 attendance. Some churches grow,
some decline, the rest wander; 2020-2022 follow the pandemic dip and
rebound. Rankings are then recomputed from the attendance.
"""

import numpy as np

from church_rankings import normalize_all_rankings
from config import YEARS

SAMPLE_CHURCHES = [
    {'name': "Life.Church", 'location': "Edmond, OK", 'pastor': "Craig Groeschel"},
    {'name': "Church of the Highlands", 'location': "Birmingham, AL", 'pastor': "Chris Hodges"},
    {'name': "CCV (Christ's Church of the Valley)", 'location': "Peoria, AZ", 'pastor': "Ashley Wooldridge"},
    {'name': "Lakewood Church", 'location': "Houston, TX", 'pastor': "Joel Osteen"},
    {'name': "North Point Ministries", 'location': "Alpharetta, GA", 'pastor': "Andy Stanley"},
    {'name': "Christ Fellowship Church", 'location': "Palm Beach Gardens, FL", 'pastor': "Todd Mullins"},
    {'name': "Saddleback Church", 'location': "Lake Forest, CA", 'pastor': "Andy Wood"},
    {'name': "Gateway Church", 'location': "Southlake, TX", 'pastor': "Robert Morris"},
    {'name': "Crossroads Church", 'location': "Cincinnati, OH", 'pastor': "Brian Tome"},
    {'name': "Eagle Brook Church", 'location': "Centerville, MN", 'pastor': "Jason Strand"},
    {'name': "Southeast Christian Church", 'location': "Louisville, KY", 'pastor': "Kyle Idleman"},
    {'name': "Fellowship Church", 'location': "Grapevine, TX", 'pastor': "Ed Young"},
    {'name': "Central Church", 'location': "Henderson, NV", 'pastor': "Jud Wilhite"},
    {'name': "Bayside Church", 'location': "Roseville, CA", 'pastor': "Ray Johnston"},
    {'name': "Second Baptist Church", 'location': "Houston, TX", 'pastor': "H. Edwin Young"},
    {'name': "Prestonwood Baptist Church", 'location': "Plano, TX", 'pastor': "Jack Graham"},
    {'name': "The Church of Eleven22", 'location': "Jacksonville, FL", 'pastor': "Joby Martin"},
    {'name': "Lakepointe Church", 'location': "Rockwall, TX", 'pastor': "Josh Howerton"},
    {'name': "Harvest Christian Fellowship", 'location': "Riverside, CA", 'pastor': "Greg Laurie"},
    {'name': "NewSpring Church", 'location': "Anderson, SC", 'pastor': "Perry Noble"},
    {'name': "The Summit Church", 'location': "Durham, NC", 'pastor': "J.D. Greear"},
    {'name': "Flatirons Community Church", 'location': "Lafayette, CO", 'pastor': "Jim Burgen"},
    {'name': "Houston's First Baptist Church", 'location': "Houston, TX", 'pastor': "Gregg Matte"},
    {'name': "Willow Creek Community Church", 'location': "South Barrington, IL", 'pastor': "Dave Dummitt"},
    {'name': "Elevation Church", 'location': "Charlotte, NC", 'pastor': "Steven Furtick"},
]

GROWING = ("CCV", "Eleven22", "Eagle Brook")
DECLINING = ("Willow Creek", "Saddleback")

# Pandemic years
YEAR_ADJUSTMENTS = {2020: 0.7, 2021: 0.8, 2022: 1.1}

MIN_ATTENDANCE = 1000


def year_multiplier(name, year, first_year):
    elapsed = year - first_year

    if any(key in name for key in GROWING):
        multiplier = 0.7 + elapsed * 0.08
    elif any(key in name for key in DECLINING):
        multiplier = 1.2 - elapsed * 0.03
    else:
        multiplier = 0.9 + np.sin(elapsed * 0.5) * 0.15

    return multiplier * YEAR_ADJUSTMENTS.get(year, 1)


def generate_sample_data(seed=None, years=None):
    """Build the sample churches with attendance and normalized rankings"""
    years = sorted(years if years is not None else YEARS)
    rng = np.random.default_rng(seed)
    first_year = years[0] if years else 0

    churches = []
    for index, church in enumerate(SAMPLE_CHURCHES):
        base_ranking = index + 1
        base_attendance = 50000 - base_ranking * 1200

        data = []
        for year in years:
            noise = (rng.random() - 0.5) * 2000
            attendance = int(max(MIN_ATTENDANCE, np.floor(base_attendance * year_multiplier(church['name'], year, first_year) + noise)))
            data.append({'year': year, 'attendance': attendance, 'ranking': base_ranking})

        churches.append({**church, 'data': data})

    return normalize_all_rankings(churches)
