"""
Multi-year church ranking scraper

Two ways to get data:
- Backend: GET {BACKEND_URL}/api/scrape-all, which already returns the
  consolidated multi-year dataset
- Direct: walk the ranking source page by page for each year and extract
  churches from the HTML (often refused by the source)

Both return {'consolidatedData': [churches...], 'errors': [{'year', 'message', 'type'}]}
"""

import time
from concurrent.futures import ThreadPoolExecutor

import requests

from church_rankings import normalize_all_rankings, sort_church_data
from config import (BACKEND_URL, DETAIL_LINK_PATTERN, MAX_PAGES, MAX_WORKERS, PAGE_DELAY,
                    REQUEST_TIMEOUT, SOURCE_BASE_URL, USE_BACKEND, USER_AGENT, YEARS)
from ranking_extractor import extract_churches

BLOCKED_STATUS_CODES = (401, 403, 451)
CANCELLED_MESSAGE = 'Cancelled'


class ScrapingError(Exception):
    """Base class for refresh failures"""


class SourceUnavailable(ScrapingError):
    """The ranking source could not be fetched"""


class CrossOriginBlocked(SourceUnavailable):
    """The ranking source refused direct access - use the backend instead"""


class BackendError(ScrapingError):
    """The backend could not be reached or returned an error status"""


class BackendContractViolation(BackendError):
    """The backend answered but sent no consolidatedData"""


class NoDataError(ScrapingError):
    """Nothing usable came back for any year"""


class ConfigurationError(ScrapingError):
    """Backend mode without a backend URL"""


HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.9',
}


def _make_session():
    session = requests.Session()
    session.headers.update(HEADERS)
    return session


def _get(url, session, timeout):
    # Without a session, a one-off request carries the same headers
    if session is None:
        return requests.get(url, headers=HEADERS, timeout=timeout)
    return session.get(url, timeout=timeout)


# ============================================
# PAGE FETCHING
# ============================================

def build_page_url(year, page=1, base_url=SOURCE_BASE_URL):
    """Page 1 is the bare year URL, later pages add ?page=N"""
    url = f"{base_url.rstrip('/')}/{year}"
    if page > 1:
        url += f"?page={page}"
    return url


def fetch_page(url, session=None, timeout=REQUEST_TIMEOUT):
    """Fetch one listing page and return its HTML"""
    try:
        response = _get(url, session, timeout)
    except requests.RequestException as e:
        raise SourceUnavailable(f"Could not reach {url}: {e}") from e

    if response.status_code in BLOCKED_STATUS_CODES:
        raise CrossOriginBlocked(
            f"Direct access refused by {url} (HTTP {response.status_code}). "
            f"Configure BACKEND_URL to scrape through the backend."
        )
    if not 200 <= response.status_code < 300:
        raise SourceUnavailable(f"HTTP {response.status_code} from {url}")

    return response.text


# ============================================
# PAGINATION
# ============================================

def iter_year_pages(year, fetch=fetch_page, base_url=SOURCE_BASE_URL, max_pages=MAX_PAGES,
                    delay=PAGE_DELAY, detail_pattern=DETAIL_LINK_PATTERN, cancel_event=None):
    """Yield (page, churches) for one year until the results run out.

    Stops at the first empty page, after max_pages, or when cancel_event
    is set. A failure on page 1 is raised; a failure on a later page just
    ends the walk with the pages collected so far. The generator returns
    True only when cancel_event cut the walk short.
    """
    for page in range(1, max_pages + 1):
        if cancel_event is not None and cancel_event.is_set():
            print(f"   ⚠️ {year}: cancelled before page {page}")
            return True

        if page > 1 and delay:
            time.sleep(delay)

        url = build_page_url(year, page, base_url)
        try:
            html = fetch(url)
        except Exception as e:
            if page == 1:
                raise
            print(f"   ⚠️ {year} page {page} failed, keeping {page - 1} page(s): {e}")
            return

        churches = extract_churches(html, year, detail_pattern)
        if not churches:
            print(f"   📄 {year} page {page}: no churches, end of results")
            return

        print(f"   📄 {year} page {page}: {len(churches)} churches")
        yield page, churches

    print(f"   ⚠️ {year}: stopped at the {max_pages}-page limit")


def _collect_year(year, **options):
    """(churches, cancelled) for one year across its pages"""
    print(f"\n🔍 Scraping {year}...")

    year_churches = []
    seen_names = set()
    walk = iter_year_pages(year, **options)

    while True:
        try:
            page, churches = next(walk)
        except StopIteration as stop:
            cancelled = bool(stop.value)
            break
        for church in churches:
            if church['name'] in seen_names:
                continue
            seen_names.add(church['name'])
            year_churches.append(church)

    print(f"   ✅ {year}: {len(year_churches)} churches")
    return year_churches, cancelled


def scrape_year(year, **options):
    """All churches for one year across its pages"""
    churches, _ = _collect_year(year, **options)
    return churches


# ============================================
# MULTI-YEAR
# ============================================

def merge_year_candidates(churches_by_name, year, candidates):
    """Fold one year's candidates into the name -> church mapping.

    The first location/pastor seen for a church is kept. A second data
    point for the same year replaces the first.
    """
    for candidate in candidates:
        name = candidate['name']
        church = churches_by_name.get(name)
        if church is None:
            church = {
                'name': name,
                'location': candidate.get('location'),
                'pastor': candidate.get('pastor'),
                'data': [],
            }
            churches_by_name[name] = church

        church['data'] = [d for d in church['data'] if d['year'] != year]
        church['data'].append({
            'year': year,
            'attendance': candidate.get('attendance'),
            'ranking': candidate.get('ranking'),
        })

    return churches_by_name


def _year_error(year, error):
    if isinstance(error, str):
        return {'year': year, 'message': error, 'type': 'Cancelled'}
    return {'year': year, 'message': str(error), 'type': type(error).__name__}


def _scrape_year_safely(year, cancel_event, options):
    """(year, churches or None, error or None) - never raises"""
    if cancel_event is not None and cancel_event.is_set():
        return year, None, _year_error(year, CANCELLED_MESSAGE)
    try:
        churches, cancelled = _collect_year(year, cancel_event=cancel_event, **options)
    except Exception as e:
        print(f"   ❌ {year} failed: {e}")
        return year, None, _year_error(year, e)

    if cancelled:
        return year, churches, _year_error(year, f"{CANCELLED_MESSAGE} (partial results kept)")
    return year, churches, None


def scrape_all_years(years=None, max_workers=MAX_WORKERS, cancel_event=None, **options):
    """Scrape every year, keeping whatever succeeded.

    A failed year is recorded in 'errors' and the other years carry on.
    Rankings are recomputed per year from attendance once everything is
    merged. Extra options go to iter_year_pages.
    """
    years = sorted(years if years is not None else YEARS)
    print(f"\n🚀 Scraping {len(years)} years: {years[0]}-{years[-1]}" if years else "\n⚠️ No years to scrape")

    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(lambda y: _scrape_year_safely(y, cancel_event, options), years))
    else:
        results = [_scrape_year_safely(year, cancel_event, options) for year in years]

    churches_by_name = {}
    errors = []

    for year, candidates, error in sorted(results, key=lambda r: r[0]):
        if candidates:
            merge_year_candidates(churches_by_name, year, candidates)
        if error is not None:
            errors.append(error)

    churches = [sort_church_data(church) for church in churches_by_name.values()]
    normalize_all_rankings(churches)

    print(f"\n📊 Merged {len(churches)} churches, {len(errors)} year(s) with errors")

    return {'consolidatedData': churches, 'errors': errors}


# ============================================
# BACKEND
# ============================================

def fetch_backend_data(backend_url, session=None, timeout=REQUEST_TIMEOUT):
    """Get the consolidated dataset from the backend"""
    url = f"{backend_url.rstrip('/')}/api/scrape-all"
    print(f"\n🔗 Connecting to backend: {url}")

    try:
        response = _get(url, session, timeout)
    except requests.RequestException as e:
        raise BackendError(f"Could not reach backend: {e}") from e

    if not 200 <= response.status_code < 300:
        raise BackendError(f"Backend error: {response.status_code}")

    try:
        result = response.json()
    except ValueError as e:
        raise BackendContractViolation(f"Backend did not return JSON: {e}") from e

    churches = result.get('consolidatedData') if isinstance(result, dict) else None
    if not churches:
        raise BackendContractViolation('No data returned from backend')

    valid = [c for c in churches if isinstance(c, dict) and c.get('name')]
    if len(valid) < len(churches):
        print(f"   ⚠️ Ignored {len(churches) - len(valid)} backend entries without a name")
    if not valid:
        raise BackendContractViolation('Backend data has no named churches')

    return {'consolidatedData': valid, 'errors': result.get('errors') or []}


# ============================================
# REFRESH
# ============================================

def refresh_church_data(use_backend=USE_BACKEND, backend_url=BACKEND_URL, years=None,
                        session=None, **options):
    """Refresh the dataset from the backend or by scraping directly.

    Raises a ScrapingError subclass when the refresh as a whole fails:
    backend errors, or direct scraping that produced no churches at all.
    Per-year failures come back in result['errors'].
    """
    if use_backend:
        if not backend_url:
            raise ConfigurationError('Backend mode is on but no BACKEND_URL is configured')
        return fetch_backend_data(backend_url, session=session)

    print("\n⚠️ No backend configured, scraping the ranking source directly")
    if 'fetch' in options:
        result = scrape_all_years(years, **options)
    elif session is not None:
        result = scrape_all_years(years, fetch=lambda url: fetch_page(url, session=session), **options)
    else:
        # One connection pool for every page of every year
        with _make_session() as own_session:
            result = scrape_all_years(years, fetch=lambda url: fetch_page(url, session=own_session), **options)

    if not result['consolidatedData']:
        errors = result['errors']
        if errors and all(e.get('type') == CrossOriginBlocked.__name__ for e in errors):
            raise CrossOriginBlocked(
                'The ranking source blocks direct scraping. '
                'Configure BACKEND_URL to load live data through the backend.'
            )
        raise NoDataError(f"No church data found ({len(result['errors'])} year(s) had errors)")

    return result


def build_status_message(result, source='backend'):
    """One-line summary for the dashboard"""
    churches = result.get('consolidatedData') or []
    errors = result.get('errors') or []

    message = f"✅ Successfully loaded {len(churches)} churches with multi-year data from {source}!"
    if errors:
        message += f" ({len(errors)} years had errors)"
    return message
