"""
Lyrics resolver - ordered, fault-tolerant acquisition chain

The resolver turns an AcquisitionQuery into cleaned lyrics by running an
ordered list of strategies and stopping at the first success. Each strategy
is a provider bound to a fetcher (direct or through the forwarding proxy).
New fallback stages are added by appending a strategy to the list.

Strategy gating:
Every strategy declares the failure kinds after which it is worth running.
A proxy retry only makes sense when the previous attempt could not reach the
provider (NETWORK_ERROR); an independent provider runs after any failure.
The first strategy always runs.

Failure reporting:
When every strategy fails, the reported failure is the first one that is not
a NETWORK_ERROR (a definite "not found" outranks a later unreachable proxy),
otherwise NETWORK_ERROR. Invalid queries fail before any network call.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Awaitable, Callable, FrozenSet, List, Optional, Tuple

import aiohttp

from ..config.settings import Settings, get_settings
from ..core.exceptions import FailureKind, InvalidQueryError, LyricsCloudError
from ..utils.logger import get_logger
from ..utils.validation import validate_search_term
from .genius import GeniusLyricsProvider
from .http import HttpFetcher, ProxiedFetcher
from .lyricsovh import LyricsOvhProvider
from .models import AcquisitionQuery, LyricsSource, ResolutionResult, SearchResult, SongMatch

ANY_FAILURE: FrozenSet[FailureKind] = frozenset(FailureKind)
UNREACHABLE: FrozenSet[FailureKind] = frozenset({FailureKind.NETWORK_ERROR})

FetchLyrics = Callable[[AcquisitionQuery], Awaitable[Tuple[str, SongMatch]]]
SearchSongs = Callable[[str], Awaitable[SongMatch]]


@dataclass(frozen=True)
class LyricsStrategy:
    """
    One acquisition attempt

    Attributes:
        name: Label used in logs and `ResolutionResult.attempts`
        source: Provider the lyrics come from
        fetch: Coroutine function returning (lyrics, match) or raising LyricsCloudError
        runs_after: Failure kinds of the previous attempt that allow this one to run
    """
    name: str
    source: LyricsSource
    fetch: FetchLyrics
    runs_after: FrozenSet[FailureKind] = ANY_FAILURE


@dataclass(frozen=True)
class SearchStrategy:
    """One attempt at the search stage only (used by the search endpoint)"""
    name: str
    search: SearchSongs
    runs_after: FrozenSet[FailureKind] = ANY_FAILURE


def _pick_failure(failures: List[LyricsCloudError]) -> LyricsCloudError:
    for failure in failures:
        if failure.kind is not FailureKind.NETWORK_ERROR:
            return failure
    return failures[0]


class LyricsResolver:
    """
    Runs lyrics strategies in order until one succeeds

    `resolve` and `search` never raise LyricsCloudError: every failure comes
    back as a typed result so callers can tell "try manual paste" apart from
    "retry later".
    """

    def __init__(
        self,
        strategies: List[LyricsStrategy],
        search_strategies: Optional[List[SearchStrategy]] = None
    ):
        if not strategies:
            raise ValueError("LyricsResolver needs at least one strategy")
        self.strategies = list(strategies)
        self.search_strategies = list(search_strategies or [])
        self.logger = get_logger(__name__)

    def append(self, strategy: LyricsStrategy) -> None:
        """Add a fallback stage at the end of the chain"""
        self.strategies.append(strategy)

    async def resolve(self, query: AcquisitionQuery) -> ResolutionResult:
        """
        Resolve lyrics for an artist/song pair

        Args:
            query: Artist and song to look up

        Returns:
            ResolutionResult with lyrics and match, or the failure kind
        """
        try:
            query.validate()
        except InvalidQueryError as e:
            return ResolutionResult.failed(e.kind, e.message)

        self.logger.info(f"Resolving lyrics for: {query}")
        failures: List[LyricsCloudError] = []
        attempts: List[str] = []

        for strategy in self.strategies:
            if failures and failures[-1].kind not in strategy.runs_after:
                continue

            attempts.append(strategy.name)
            try:
                lyrics, match = await strategy.fetch(query)
            except LyricsCloudError as e:
                self.logger.info(f"Strategy {strategy.name} failed ({e.kind.value}): {e}")
                failures.append(e)
                continue

            self.logger.info(f"Lyrics resolved by {strategy.name}: {match.artist_name} - {match.title}")
            return ResolutionResult(
                success=True,
                lyrics=lyrics,
                match=match,
                source=strategy.source,
                attempts=attempts
            )

        failure = _pick_failure(failures)
        self.logger.warning(f"Could not resolve lyrics for {query}: {failure}")
        return ResolutionResult.failed(failure.kind, failure.message, attempts)

    async def search(self, term: str) -> SearchResult:
        """
        Run only the search stage for a free-text term

        Returns:
            SearchResult with the match metadata, or the failure kind
        """
        is_valid, message = validate_search_term(term)
        if not is_valid:
            return SearchResult(success=False, failure=FailureKind.INVALID_QUERY, error_message=message)

        if not self.search_strategies:
            return SearchResult(
                success=False,
                failure=FailureKind.NOT_FOUND,
                error_message="No search provider configured"
            )

        failures: List[LyricsCloudError] = []
        for strategy in self.search_strategies:
            if failures and failures[-1].kind not in strategy.runs_after:
                continue
            try:
                match = await strategy.search(term.strip())
            except LyricsCloudError as e:
                self.logger.info(f"Search {strategy.name} failed ({e.kind.value}): {e}")
                failures.append(e)
                continue
            return SearchResult(success=True, match=match)

        failure = _pick_failure(failures)
        return SearchResult(success=False, failure=failure.kind, error_message=failure.message)


def build_resolver(session: aiohttp.ClientSession, settings: Optional[Settings] = None) -> LyricsResolver:
    """
    Build the configured strategy chain over one aiohttp session

    For every configured source (primary first, then fallbacks) a direct
    strategy is added, followed by a proxy retry when the proxy fallback is
    enabled.
    """
    settings = settings or get_settings()
    config = settings.lyrics
    user_agent = settings.network.user_agent

    direct = HttpFetcher(session, user_agent, config.min_request_interval)
    fetchers = [(direct, ANY_FAILURE)]
    if config.use_proxy_fallback and config.proxy_url:
        proxied = ProxiedFetcher(session, user_agent, config.proxy_url, config.min_request_interval)
        fetchers.append((proxied, UNREACHABLE))

    strategies: List[LyricsStrategy] = []
    search_strategies: List[SearchStrategy] = []
    sources = [config.primary_source] + [s for s in config.fallback_sources if s != config.primary_source]

    for source_name in sources:
        source = LyricsSource(source_name)
        for fetcher, runs_after in fetchers:
            if source is LyricsSource.GENIUS:
                provider = GeniusLyricsProvider(fetcher, config.genius_base_url)
                search_strategies.append(SearchStrategy(f"genius:{fetcher.name}", provider.search, runs_after))
            elif source is LyricsSource.LYRICS_OVH:
                provider = LyricsOvhProvider(fetcher, config.lyrics_ovh_base_url)
            else:
                raise ValueError(f"Unsupported lyrics source: {source_name}")

            strategies.append(LyricsStrategy(
                name=f"{source.value}:{fetcher.name}",
                source=source,
                fetch=provider.fetch_lyrics,
                runs_after=runs_after
            ))

    return LyricsResolver(strategies, search_strategies)


@asynccontextmanager
async def open_resolver(settings: Optional[Settings] = None):
    """
    Async context manager owning the HTTP session behind a resolver

    Usage:
        async with open_resolver() as resolver:
            result = await resolver.resolve(query)
    """
    # The resolver enforces no deadline of its own
    timeout = aiohttp.ClientTimeout(total=None)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        yield build_resolver(session, settings)
