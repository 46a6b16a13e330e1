"""
Genius lyrics provider: public search API plus song page scraping

Genius serves as the primary lyrics source. No API key is needed: the
provider uses the same multi-section search endpoint the website uses and then
scrapes the song page.

Search Strategy:
1. Query `/api/search/multi` with "<song> <artist>"
2. Prefer the `top_hit` section when its first hit is a song
3. Otherwise take the first hit of the dedicated `song` section
4. No usable hit in either section means NotFound

Scrape Strategy:
1. Fetch the song's canonical page
2. Collect every `[data-lyrics-container="true"]` element in document order
3. Drop `[data-exclude-from-selection="true"]` children (contributor
   header, embed hints)
4. Turn `<br>` elements into newlines *before* extracting text, otherwise
   line structure is lost
5. Join containers with one trailing newline each and clean annotations

Quality Assurance:
- A page without lyrics containers is an ExtractionFailed failure
- Containers that are empty once annotations are removed count as the same
"""

from typing import Optional, Dict, Any, Tuple

from bs4 import BeautifulSoup

from ..core.exceptions import NotFoundError, ExtractionFailedError, NetworkError
from ..utils.helpers import clean_lyrics_text
from ..utils.logger import get_logger
from .models import AcquisitionQuery, SongMatch

SEARCH_PATH = "/api/search/multi"
LYRICS_CONTAINER_SELECTOR = '[data-lyrics-container="true"]'
EXCLUDED_SELECTOR = '[data-exclude-from-selection="true"]'


def pick_search_hit(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Select the song result from a Genius multi-search response

    Args:
        payload: Decoded JSON body of `/api/search/multi`

    Returns:
        The chosen `result` object, or None when neither section has a song
    """
    try:
        sections = payload['response']['sections'] or []

        by_type = {}
        for section in sections:
            # First section of each type wins, matching website behaviour
            by_type.setdefault(section.get('type'), section)

        top_hit = by_type.get('top_hit')
        if top_hit and top_hit.get('hits'):
            hit = top_hit['hits'][0]
            # Top hits can be artists or albums, which have no lyrics page
            if hit.get('type', 'song') == 'song' and (hit.get('result') or {}).get('url'):
                return hit['result']

        songs = by_type.get('song')
        if songs and songs.get('hits'):
            result = songs['hits'][0].get('result') or {}
            if result.get('url'):
                return result
    except (KeyError, TypeError, AttributeError, IndexError) as e:
        raise NetworkError("Unexpected Genius search payload") from e

    return None


def extract_lyrics(html: str) -> str:
    """
    Extract cleaned lyrics from a Genius song page

    Args:
        html: Raw page markup

    Returns:
        Cleaned lyrics text

    Raises:
        ExtractionFailedError: If the page holds no (non-empty) lyrics container
    """
    soup = BeautifulSoup(html, 'html.parser')
    containers = soup.select(LYRICS_CONTAINER_SELECTOR)

    if not containers:
        raise ExtractionFailedError("Could not extract lyrics from the page")

    parts = []
    for container in containers:
        # Contributor header and similar chrome live inside the first container
        for excluded in container.select(EXCLUDED_SELECTOR):
            excluded.decompose()
        for line_break in container.find_all('br'):
            line_break.replace_with('\n')
        parts.append(container.get_text() + '\n')

    lyrics = clean_lyrics_text(''.join(parts))
    if not lyrics:
        raise ExtractionFailedError("Lyrics containers were empty")

    return lyrics


class GeniusLyricsProvider:
    """
    Genius search + scrape provider

    The provider is bound to one fetcher. The resolver builds one instance
    over the direct fetcher and, when the proxy fallback is enabled, a second
    one over the proxied fetcher.
    """

    def __init__(self, fetcher, base_url: str = "https://genius.com"):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip('/')
        self.logger = get_logger(__name__)

    async def search(self, term: str) -> SongMatch:
        """
        Run the search stage for a free-text term

        Raises:
            NotFoundError: No song hit in the top or song sections
            NetworkError: Transport failure or malformed response
        """
        self.logger.debug(f"Genius search ({self.fetcher.name}): '{term}'")
        payload = await self.fetcher.get_json(f"{self.base_url}{SEARCH_PATH}", params={'q': term})

        result = pick_search_hit(payload)
        if result is None:
            raise NotFoundError("Song not found on Genius", details={'term': term})

        match = SongMatch.from_genius_result(result)
        self.logger.info(f"Genius match: {match.artist_name} - {match.title} ({match.canonical_url})")
        return match

    async def scrape(self, match: SongMatch) -> str:
        """Fetch the song page and extract its lyrics"""
        html = await self.fetcher.get_text(match.canonical_url)
        return extract_lyrics(html)

    async def fetch_lyrics(self, query: AcquisitionQuery) -> Tuple[str, SongMatch]:
        """
        Search then scrape

        Returns:
            Tuple of (cleaned lyrics, matched song)
        """
        match = await self.search(query.search_term)
        lyrics = await self.scrape(match)
        return lyrics, match
