"""
Data models for lyrics acquisition

AcquisitionQuery is what the user asked for, SongMatch is what a provider's
search stage found, and the two result containers carry either a value or a
FailureKind back to the caller. Result objects are what crosses the resolver
boundary; exceptions never do.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List

from ..core.exceptions import FailureKind, InvalidQueryError
from ..utils.validation import validate_query


class LyricsSource(Enum):
    """
    Enumeration of supported lyrics providers

    MANUAL marks lyrics pasted by the user (the resolver is bypassed).
    """
    GENIUS = "genius"
    LYRICS_OVH = "lyrics_ovh"
    MANUAL = "manual"


@dataclass(frozen=True)
class AcquisitionQuery:
    """
    Artist/song pair to resolve

    Values are kept verbatim for display; matching is the provider's concern.
    """
    artist: str
    song: str

    @classmethod
    def from_values(cls, artist: Optional[str], song: Optional[str]) -> 'AcquisitionQuery':
        """Build a query from possibly missing form values"""
        return cls(artist=artist or "", song=song or "")

    @property
    def is_valid(self) -> bool:
        """Both fields are non-empty after trimming"""
        return validate_query(self.artist, self.song)[0]

    def validate(self) -> None:
        """
        Raises:
            InvalidQueryError: Artist or song is missing, blank or not text
        """
        is_valid, message = validate_query(self.artist, self.song)
        if not is_valid:
            raise InvalidQueryError(message, details={'artist': self.artist, 'song': self.song})

    @property
    def search_term(self) -> str:
        """Full-text search string, song first"""
        return f"{self.song.strip()} {self.artist.strip()}"

    def __str__(self) -> str:
        return f"{self.artist} - {self.song}"


@dataclass(frozen=True)
class SongMatch:
    """
    Song found by a provider's search stage

    Attributes:
        title: Song title as the provider stores it
        artist_name: Primary artist name as the provider stores it
        canonical_url: Page holding the lyrics
        thumbnail_url: Cover art thumbnail, when the provider has one
    """
    title: str
    artist_name: str
    canonical_url: str
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_genius_result(cls, result: Dict[str, Any]) -> 'SongMatch':
        """Build a match from one `result` object of the Genius search API"""
        primary_artist = result.get('primary_artist') or {}
        return cls(
            title=result.get('title') or "",
            artist_name=primary_artist.get('name') or "",
            canonical_url=result['url'],
            thumbnail_url=result.get('song_art_image_thumbnail_url'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the public API field names"""
        return {
            'artist': self.artist_name,
            'song': self.title,
            'url': self.canonical_url,
            'thumbnail': self.thumbnail_url,
        }


@dataclass
class ResolutionResult:
    """
    Outcome of resolving an AcquisitionQuery

    On success `lyrics` holds the cleaned LyricsText and `match` the song it
    came from. On failure `failure` names the kind and `error_message`
    describes it. `attempts` lists the strategies that ran, in order.
    """
    success: bool
    lyrics: Optional[str] = None
    match: Optional[SongMatch] = None
    source: Optional[LyricsSource] = None
    failure: Optional[FailureKind] = None
    error_message: Optional[str] = None
    attempts: List[str] = field(default_factory=list)

    @classmethod
    def failed(cls, failure: FailureKind, message: str, attempts: Optional[List[str]] = None) -> 'ResolutionResult':
        return cls(success=False, failure=failure, error_message=message, attempts=attempts or [])


@dataclass
class SearchResult:
    """Outcome of the search stage alone (no lyrics body)"""
    success: bool
    match: Optional[SongMatch] = None
    failure: Optional[FailureKind] = None
    error_message: Optional[str] = None
