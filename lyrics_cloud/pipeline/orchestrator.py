"""
Pipeline orchestrator: sequences acquisition and word cloud stages

    from_query:    Resolver -> Tokenizer -> Aggregator -> Layout
    from_raw_text: (manual paste)  Tokenizer -> Aggregator -> Layout
    export:        Layout entries -> PNG artifact

Every failure of every stage reaches the caller as `PipelineResult.failure`
with its original kind. The orchestrator never retries on its own: the
resolver's fallback chain is the only retry, and choosing a remedy (manual
paste, waiting, retrying later) is the caller's decision.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..cloud.aggregator import WordStat, aggregate, TOP_N
from ..cloud.exporter import WordCloudExporter, PNG_CONTENT_TYPE
from ..cloud.layout import WordCloudEntry, layout
from ..cloud.tokenizer import TokenStream, MIN_TOKENS, MIN_WORD_LENGTH
from ..config.settings import Settings, get_settings
from ..core.exceptions import FailureKind, LyricsCloudError, RateLimitedError
from ..core.rate_limiter import RateLimiter
from ..lyrics.models import AcquisitionQuery, LyricsSource, SongMatch
from ..lyrics.resolver import LyricsResolver
from ..utils.helpers import create_export_filename
from ..utils.logger import get_logger


@dataclass
class PipelineResult:
    """
    Outcome of one word cloud generation

    On success `entries` holds the layout and `stats` the ranked words it was
    built from. `lyrics`, `match` and `source` are set whenever lyrics were
    obtained, even if a later stage failed.
    """
    success: bool
    entries: List[WordCloudEntry] = field(default_factory=list)
    stats: List[WordStat] = field(default_factory=list)
    lyrics: Optional[str] = None
    match: Optional[SongMatch] = None
    source: Optional[LyricsSource] = None
    token_count: int = 0
    failure: Optional[FailureKind] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'success': self.success}
        if self.success:
            data['words'] = [entry.to_dict() for entry in self.entries]
            data['stats'] = [stat.to_dict() for stat in self.stats]
            data['token_count'] = self.token_count
        else:
            data['error'] = self.error_message
            data['kind'] = self.failure.value if self.failure else None
        if self.lyrics is not None:
            data['lyrics'] = self.lyrics
        if self.match is not None:
            data.update(self.match.to_dict())
        if self.source is not None:
            data['source'] = self.source.value
        return data


@dataclass(frozen=True)
class ExportArtifact:
    """Downloadable PNG produced from a layout"""
    filename: str
    data: bytes
    content_type: str = PNG_CONTENT_TYPE


class WordCloudPipeline:
    """
    Sequences the resolver and the cloud stages

    Args:
        resolver: Lyrics resolver, required only for `from_query`
        exporter: Raster exporter, built from settings when omitted
        rate_limiter: When given, `from_query` calls with a client id are
            admitted through it before any acquisition work
        top_n: Maximum number of words kept
        min_tokens: Smallest acceptable token stream
        min_word_length: Shortest word kept by the tokenizer
        rng: Random source for the layout (unseeded by default)
    """

    def __init__(
        self,
        resolver: Optional[LyricsResolver] = None,
        exporter: Optional[WordCloudExporter] = None,
        rate_limiter: Optional[RateLimiter] = None,
        top_n: int = TOP_N,
        min_tokens: int = MIN_TOKENS,
        min_word_length: int = MIN_WORD_LENGTH,
        rng: Optional[random.Random] = None
    ):
        self.resolver = resolver
        self.exporter = exporter
        self.rate_limiter = rate_limiter
        self.top_n = top_n
        self.min_tokens = min_tokens
        self.min_word_length = min_word_length
        self.rng = rng
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        resolver: Optional[LyricsResolver] = None,
        settings: Optional[Settings] = None,
        rate_limiter: Optional[RateLimiter] = None,
        rng: Optional[random.Random] = None
    ) -> 'WordCloudPipeline':
        settings = settings or get_settings()
        return cls(
            resolver=resolver,
            exporter=WordCloudExporter.from_settings(settings),
            rate_limiter=rate_limiter,
            top_n=settings.cloud.top_n,
            min_tokens=settings.cloud.min_tokens,
            min_word_length=settings.cloud.min_word_length,
            rng=rng
        )

    async def from_query(self, query: AcquisitionQuery, client_id: Optional[str] = None) -> PipelineResult:
        """
        Resolve lyrics for a query and build the cloud

        Args:
            query: Artist and song
            client_id: Identity checked against the rate limiter, if any

        Returns:
            PipelineResult carrying entries or the first failure
        """
        if self.resolver is None:
            raise ValueError("from_query requires a resolver")

        if self.rate_limiter is not None and client_id is not None:
            try:
                self.rate_limiter.check(client_id)
            except RateLimitedError as e:
                return PipelineResult(success=False, failure=e.kind, error_message=e.message)

        resolution = await self.resolver.resolve(query)
        if not resolution.success:
            return PipelineResult(
                success=False,
                failure=resolution.failure,
                error_message=resolution.error_message
            )

        result = self.from_raw_text(resolution.lyrics, source=resolution.source)
        result.match = resolution.match
        return result

    def from_raw_text(self, text: str, source: LyricsSource = LyricsSource.MANUAL) -> PipelineResult:
        """
        Build the cloud from text supplied directly (manual-paste bypass)

        Returns:
            PipelineResult; INSUFFICIENT_CONTENT when too few words survive
        """
        tokens = TokenStream(text or "", min_length=self.min_word_length)

        try:
            tokens.ensure_sufficient(self.min_tokens)
        except LyricsCloudError as e:
            self.logger.info(f"Cloud not generated: {e}")
            return PipelineResult(
                success=False,
                lyrics=text,
                source=source,
                token_count=getattr(e, 'token_count', 0),
                failure=e.kind,
                error_message=e.message
            )

        stats = aggregate(tokens, self.top_n)
        entries = layout(stats, self.rng)
        self.logger.info(f"Generated word cloud with {len(entries)} words")

        return PipelineResult(
            success=True,
            entries=entries,
            stats=stats,
            lyrics=text,
            source=source,
            token_count=tokens.count()
        )

    def export(self, entries: Sequence[WordCloudEntry], artist: str = "", song: str = "") -> ExportArtifact:
        """Render entries to a PNG artifact named after the artist and song"""
        exporter = self.exporter or WordCloudExporter.from_settings()
        return ExportArtifact(
            filename=create_export_filename(artist, song),
            data=exporter.export(entries)
        )
