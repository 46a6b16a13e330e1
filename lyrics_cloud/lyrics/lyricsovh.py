"""
lyrics.ovh provider - keyless fallback lyrics source

`GET /v1/<artist>/<song>` answers `{"lyrics": "..."}` or a 404 with
`{"error": "No lyrics found"}`. There is no search stage and no song page, so
the SongMatch is built from the query itself with the API URL as its
canonical URL.
"""

from typing import Tuple
from urllib.parse import quote

from ..core.exceptions import NotFoundError, ExtractionFailedError, UpstreamStatusError
from ..utils.helpers import clean_lyrics_text
from ..utils.logger import get_logger
from .models import AcquisitionQuery, SongMatch


class LyricsOvhProvider:
    """Direct artist/title lookup against lyrics.ovh"""

    def __init__(self, fetcher, base_url: str = "https://api.lyrics.ovh"):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip('/')
        self.logger = get_logger(__name__)

    def lyrics_url(self, query: AcquisitionQuery) -> str:
        artist = quote(query.artist.strip(), safe='')
        song = quote(query.song.strip(), safe='')
        return f"{self.base_url}/v1/{artist}/{song}"

    async def fetch_lyrics(self, query: AcquisitionQuery) -> Tuple[str, SongMatch]:
        """
        Look lyrics up by artist and title

        Raises:
            NotFoundError: lyrics.ovh has no entry for the pair
            ExtractionFailedError: The entry exists but its lyrics are empty
            NetworkError: Transport failure or any other HTTP error
        """
        url = self.lyrics_url(query)
        self.logger.debug(f"lyrics.ovh lookup ({self.fetcher.name}): {query}")

        try:
            payload = await self.fetcher.get_json(url)
        except UpstreamStatusError as e:
            if e.status == 404:
                raise NotFoundError("Song not found on lyrics.ovh", details={'url': url}) from e
            raise

        raw = payload.get('lyrics') if isinstance(payload, dict) else None
        if raw is None:
            raise NotFoundError("Song not found on lyrics.ovh", details={'url': url})

        lyrics = clean_lyrics_text(raw)
        if not lyrics:
            raise ExtractionFailedError("lyrics.ovh returned empty lyrics", details={'url': url})

        match = SongMatch(title=query.song, artist_name=query.artist, canonical_url=url)
        return lyrics, match
