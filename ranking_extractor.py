"""
Best-effort extraction of ranked churches from a listing page

The ranking pages have no stable structure, so every field is inferred
from the text around each link to a church detail page. Each field has an
ordered list of strategies; the first one that finds something wins.

Known limitation: when no rank number can be found near a link, the
link's position on the page is used. That is only right on page 1 - on
later pages it restarts at 1. Such candidates carry rank_source='position'
and their ranking gets recomputed from attendance afterwards anyway.
"""

import re

from bs4 import BeautifulSoup

from config import DETAIL_LINK_PATTERN, LOCATION_PLACEHOLDER, PASTOR_PLACEHOLDER

CONTAINER_TAGS = ['tr', 'li', 'article', 'section', 'div']
HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']

LEADING_NUMBER = re.compile(r'^\s*#?\s*(\d+)')
BARE_NUMBER = re.compile(r'^#?(\d{1,3})\.?$')
# "Edmond, OK", "Palm Beach Gardens, FL"
LOCATION_PATTERN = re.compile(r"^[A-Z][\w.'\- ]*,\s*[A-Z][A-Za-z]{1,3}\.?$")
# 3-6 digits, optionally with thousands separators ("52,000")
ATTENDANCE_NUMBER = re.compile(r'(?<!\d)(?<!\d,)(\d{1,3}(?:,\d{3})+|\d{3,6})(?!,?\d)')

MAX_CONTAINER_RANK = 100
MIN_ATTENDANCE = 1000
MAX_ATTENDANCE = 100000


def find_container(anchor):
    """Nearest block element around a link, else its parent"""
    return anchor.find_parent(CONTAINER_TAGS) or anchor.parent


def _text(element):
    return element.get_text(' ', strip=True)


# ============================================
# RANK
# ============================================

def rank_from_previous_sibling(anchor, container, year):
    """Leading number in the element right before the link ('#3', '3.')"""
    sibling = anchor.find_previous_sibling(True)
    if sibling is None:
        return None
    match = LEADING_NUMBER.match(_text(sibling))
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return None


def rank_from_container(anchor, container, year):
    """A bare number (1-100) anywhere in the link's container"""
    if container is None:
        return None
    for text in container.stripped_strings:
        match = BARE_NUMBER.match(text)
        if match and 1 <= int(match.group(1)) <= MAX_CONTAINER_RANK:
            return int(match.group(1))
    return None


RANK_STRATEGIES = (
    ('sibling', rank_from_previous_sibling),
    ('container', rank_from_container),
)


# ============================================
# NAME
# ============================================

def name_from_anchor(anchor, container, year):
    return _text(anchor) or None


def name_from_heading(anchor, container, year):
    """First heading in the container (image-only links have no text)"""
    if container is None:
        return None
    heading = container.find(HEADING_TAGS)
    if heading is None:
        return None
    return _text(heading) or None


NAME_STRATEGIES = (name_from_anchor, name_from_heading)


# ============================================
# LOCATION / PASTOR / ATTENDANCE
# ============================================

def location_from_text(anchor, container, year):
    """First short 'City, ST' string in the container"""
    if container is None:
        return None
    for text in container.stripped_strings:
        if len(text) < 50 and LOCATION_PATTERN.match(text):
            return text
    return None


def pastor_from_text(anchor, container, year):
    """First 'Name - Title' style string in the container"""
    if container is None:
        return None
    for text in container.stripped_strings:
        if '-' not in text or not 5 <= len(text) <= 100:
            continue
        parts = text.split('-')
        if len(parts) != 2:
            continue
        first, second = parts[0].strip(), parts[1].strip()
        # Both sides must have letters so year spans like 2015-2024 are skipped
        if not re.search(r'[A-Za-z]', first) or not re.search(r'[A-Za-z]', second):
            continue
        if ',' in second or len(second) >= 50:
            continue
        return text
    return None


def attendance_from_text(anchor, container, year):
    """First 3-6 digit number between 1,000 and 100,000 in the container"""
    if container is None:
        return None
    for text in container.stripped_strings:
        for match in ATTENDANCE_NUMBER.finditer(text):
            digits = match.group(1).replace(',', '')
            if not 3 <= len(digits) <= 6:
                continue
            value = int(digits)
            # The ranking year itself shows up all over the page
            if value == year:
                continue
            if MIN_ATTENDANCE <= value <= MAX_ATTENDANCE:
                return value
    return None


LOCATION_STRATEGIES = (location_from_text,)
PASTOR_STRATEGIES = (pastor_from_text,)
ATTENDANCE_STRATEGIES = (attendance_from_text,)


def first_match(strategies, anchor, container, year):
    for strategy in strategies:
        value = strategy(anchor, container, year)
        if value is not None:
            return value
    return None


def extract_candidate(anchor, position, year):
    """Build one candidate from a detail-page link, or None without a name"""
    container = find_container(anchor)

    name = first_match(NAME_STRATEGIES, anchor, container, year)
    if not name:
        return None

    ranking = None
    rank_source = None
    for source, strategy in RANK_STRATEGIES:
        ranking = strategy(anchor, container, year)
        if ranking is not None:
            rank_source = source
            break
    if ranking is None:
        ranking = position
        rank_source = 'position'

    location = first_match(LOCATION_STRATEGIES, anchor, container, year)
    pastor = first_match(PASTOR_STRATEGIES, anchor, container, year)

    return {
        'name': name,
        'location': location or LOCATION_PLACEHOLDER,
        'pastor': pastor or PASTOR_PLACEHOLDER,
        'attendance': first_match(ATTENDANCE_STRATEGIES, anchor, container, year),
        'ranking': ranking,
        'rank_source': rank_source,
    }


def extract_churches(html, year, detail_pattern=DETAIL_LINK_PATTERN):
    """Extract ranked churches from one listing page, sorted by ranking"""
    if not html:
        return []

    soup = BeautifulSoup(html, 'html.parser')
    anchors = soup.find_all('a', href=re.compile(detail_pattern))
    if not anchors:
        return []

    churches = []
    seen_names = set()

    for position, anchor in enumerate(anchors, 1):
        try:
            candidate = extract_candidate(anchor, position, year)
        except (AttributeError, TypeError, ValueError) as e:
            print(f"   ⚠️ Skipping link {position} ({anchor.get('href', '?')}): {e}")
            continue

        if candidate is None or candidate['name'] in seen_names:
            continue

        seen_names.add(candidate['name'])
        churches.append(candidate)

    churches.sort(key=lambda c: c['ranking'])

    position_ranked = sum(1 for c in churches if c['rank_source'] == 'position')
    if position_ranked:
        print(f"   ⚠️ {position_ranked} of {len(churches)} rankings guessed from page position")

    return churches
