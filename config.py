
import os
from dotenv import load_dotenv

load_dotenv()

# ============================================
# BACKEND
# ============================================
# The backend scrapes every year server-side and returns
# {"consolidatedData": [...], "errors": [...]} from /api/scrape-all

BACKEND_URL = os.getenv('BACKEND_URL', '').rstrip('/')

_use_backend = os.getenv('USE_BACKEND')
if _use_backend is None:
    USE_BACKEND = bool(BACKEND_URL)
else:
    USE_BACKEND = _use_backend.strip().lower() in ('1', 'true', 'yes', 'y')

# ============================================
# RANKING SOURCE (direct scraping)
# ============================================
# Page 1: {SOURCE_BASE_URL}/{year}, page N: {SOURCE_BASE_URL}/{year}?page=N

SOURCE_BASE_URL = os.getenv('SOURCE_BASE_URL', 'https://outreach100.com/largest-churches-in-america').rstrip('/')

# Links to a church's detail page mark one ranked entry
DETAIL_LINK_PATTERN = os.getenv('DETAIL_LINK_PATTERN', r'/church(?:es)?/')

USER_AGENT = os.getenv(
    'USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

# ============================================
# YEARS
# ============================================

START_YEAR = int(os.getenv('START_YEAR', '2015'))
END_YEAR = int(os.getenv('END_YEAR', '2024'))
YEARS = list(range(START_YEAR, END_YEAR + 1))

# ============================================
# SCRAPING LIMITS
# ============================================

MAX_PAGES = int(os.getenv('MAX_PAGES', '10'))
PAGE_DELAY = float(os.getenv('PAGE_DELAY', '0.2'))       # seconds between page fetches
REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '30'))
MAX_WORKERS = int(os.getenv('MAX_WORKERS', '1'))          # years scraped at once

# ============================================
# PLACEHOLDERS
# ============================================

LOCATION_PLACEHOLDER = 'Location not found'
PASTOR_PLACEHOLDER = 'Pastor not found'

VIEW_MODES = ('attendance', 'ranking')
