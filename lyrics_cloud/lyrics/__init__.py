"""
Lyrics acquisition package

Providers (Genius search + scrape, lyrics.ovh) are bound to async fetchers and
chained by the resolver, which tries them in order and reports a typed result:

    async with open_resolver() as resolver:
        result = await resolver.resolve(AcquisitionQuery("Adele", "Hello"))
        if result.success:
            print(result.lyrics)
        elif result.failure.allows_manual_paste:
            ...

The resolver is the only component that performs network I/O.
"""

from .models import (
    AcquisitionQuery,
    SongMatch,
    LyricsSource,
    ResolutionResult,
    SearchResult
)
from .genius import GeniusLyricsProvider, pick_search_hit, extract_lyrics
from .lyricsovh import LyricsOvhProvider
from .http import HttpFetcher, ProxiedFetcher
from .resolver import (
    LyricsResolver,
    LyricsStrategy,
    SearchStrategy,
    build_resolver,
    open_resolver
)

__all__ = [
    # Models
    'AcquisitionQuery',
    'SongMatch',
    'LyricsSource',
    'ResolutionResult',
    'SearchResult',

    # Providers and transport
    'GeniusLyricsProvider',
    'LyricsOvhProvider',
    'pick_search_hit',
    'extract_lyrics',
    'HttpFetcher',
    'ProxiedFetcher',

    # Resolver
    'LyricsResolver',
    'LyricsStrategy',
    'SearchStrategy',
    'build_resolver',
    'open_resolver',
]
