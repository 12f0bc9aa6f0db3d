import urllib.parse
from io import BytesIO
from typing import Optional

import requests
from PIL import Image
from duckduckgo_search import DDGS

from moodmatch.schemas.recommendation import PosterFallback, PosterFound, PosterLookup

# --- CONFIGURATION ---
BING_THUMBNAIL_URL = "https://tse4.mm.bing.net/th"
IMAGE_TIMEOUT = 4
MIN_IMAGE_SIDE = 50
MIN_IMAGE_BYTES = 2500
THUMBNAIL_SIZE = (400, 600)


# --- UTILITY HELPERS ---
def poster_query(title: str, year) -> str:
    return f"{title} {year} movie poster".strip()


def build_thumbnail_url(title: str, year) -> str:
    """Search-keyed thumbnail URL; the endpoint answers with the top image hit."""
    width, height = THUMBNAIL_SIZE
    params = {"q": poster_query(title, year), "w": width, "h": height, "c": 7, "rs": 1, "p": 0}
    return f"{BING_THUMBNAIL_URL}?{urllib.parse.urlencode(params, quote_via=urllib.parse.quote)}"


def poster_problem(content: bytes) -> Optional[str]:
    """Why a downloaded body can't be shown as a poster, or None when it can."""
    if len(content) < MIN_IMAGE_BYTES:
        return f"only {len(content)} bytes"
    try:
        with Image.open(BytesIO(content)) as img:
            width, height = img.size
    except OSError:
        return "not an image"
    if min(width, height) < MIN_IMAGE_SIDE:
        return f"{width}x{height} is too small"
    return None


def search_image_fallback(query: str):
    """Asks DuckDuckGo image search once; None when it has nothing."""
    with DDGS() as ddgs:
        results = list(ddgs.images(query, max_results=1, safesearch="moderate"))
    if results:
        return results[0].get("image")
    return None


# --- POSTER RESOLVER ---
class PosterSearch:
    """
    Poster lookups for one render pass. All cards share one HTTP session,
    so the thumbnail host connection is opened once instead of once per card.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session if session is not None else requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        self.session.close()

    def thumbnail_is_usable(self, url: str) -> bool:
        try:
            response = self.session.get(url, timeout=IMAGE_TIMEOUT)
        except requests.RequestException as e:
            print(f"⚠️ Thumbnail request failed: {e} - {url}")
            return False

        if response.status_code != 200:
            print(f"⚠️ Thumbnail rejected (status {response.status_code}): {url}")
            return False
        problem = poster_problem(response.content)
        if problem is not None:
            print(f"⚠️ Thumbnail rejected ({problem}): {url}")
            return False
        return True

    def lookup(self, title: str, year) -> PosterLookup:
        """
        Best-effort poster for one card: the thumbnail endpoint first, one DuckDuckGo query second,
        the placeholder otherwise. Unauthenticated and never retried.
        """
        thumbnail_url = build_thumbnail_url(title, year)
        if self.thumbnail_is_usable(thumbnail_url):
            return PosterFound(url=thumbnail_url)

        try:
            image_url = search_image_fallback(poster_query(title, year))
        except Exception as e:
            print(f"⚠️ Image search failed for '{title}': {e}")
            image_url = None

        if image_url:
            return PosterFound(url=image_url)
        return PosterFallback()


def lookup_poster(title: str, year) -> PosterLookup:
    """Single lookup with a session of its own."""
    with PosterSearch() as search:
        return search.lookup(title, year)
