import re
from typing import Optional
from urllib.parse import quote, quote_plus

from desidub.config.settings import settings

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")
DIGITS_PATTERN = re.compile(r"(\d+)")


# ===========================
# Cache Key Creation
# ===========================
def create_cache_key(resource: str, *parts) -> str:
    cache_key = f"{settings.PROVIDER_PREFIX}:{resource}"
    for part in parts:
        cache_key += f":{quote_plus(str(part))}"
    return cache_key


# ===========================
# URL Building
# ===========================
def build_search_url(query: str, page: int) -> str:
    return f"{settings.DESIDUB_URL}/page/{page}/?s={quote(query, safe='')}"


# ===========================
# Path Segment Extraction
# ===========================
def segment_after(url: Optional[str], marker: str) -> Optional[str]:
    """Return what follows ``marker`` in ``url``, without a trailing slash.

    ``segment_after("https://site/anime/naruto/", "/anime/")`` gives
    ``"naruto"``. Returns ``None`` when the marker is missing or nothing
    follows it.
    """
    if not url or marker not in url:
        return None
    segment = url.split(marker)[1]
    if segment.endswith("/"):
        segment = segment[:-1]
    return segment or None


def last_path_segment(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    segments = [part for part in url.split("/") if part]
    return segments[-1] if segments else None


# ===========================
# Number Parsing
# ===========================
def parse_leading_int(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    match = LEADING_INT_PATTERN.match(value)
    if not match:
        return None
    return int(match.group(1))


def first_number(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    match = DIGITS_PATTERN.search(value)
    return int(match.group(1)) if match else None
