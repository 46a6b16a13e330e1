"""Test the lyrics resolver strategy chain"""

import pytest

from lyrics_cloud.config.settings import Settings
from lyrics_cloud.core.exceptions import (
    ExtractionFailedError,
    FailureKind,
    InvalidQueryError,
    NetworkError,
    NotFoundError,
)
from lyrics_cloud.lyrics.models import AcquisitionQuery, LyricsSource, SongMatch
from lyrics_cloud.lyrics.resolver import (
    UNREACHABLE,
    LyricsResolver,
    LyricsStrategy,
    SearchStrategy,
    build_resolver,
)

QUERY = AcquisitionQuery("Adele", "Hello")
MATCH = SongMatch("Hello", "Adele", "https://genius.com/Adele-hello-lyrics")


class ScriptedStep:
    """Async strategy callable that either raises or answers, counting calls"""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = 0

    async def __call__(self, value):
        self.calls += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def strategy(name, outcome, runs_after=None, source=LyricsSource.GENIUS):
    step = ScriptedStep(outcome)
    if runs_after is None:
        return LyricsStrategy(name, source, step), step
    return LyricsStrategy(name, source, step, runs_after), step


class TestResolve:
    """Test ordering, gating and failure reporting"""

    @pytest.mark.asyncio
    async def test_invalid_query_skips_network(self):
        """Test an empty field fails before any strategy runs"""
        first, step = strategy("genius:direct", ("lyrics", MATCH))
        resolver = LyricsResolver([first])

        for query in (AcquisitionQuery("", "Hello"), AcquisitionQuery("Adele", "   ")):
            result = await resolver.resolve(query)
            assert not result.success
            assert result.failure is FailureKind.INVALID_QUERY
            assert result.error_message == "Both artist and song parameters are required"
            assert result.attempts == []

        assert step.calls == 0

    @pytest.mark.asyncio
    async def test_non_text_fields_are_invalid(self):
        """Test values decoded from JSON that are not strings fail validation"""
        first, step = strategy("genius:direct", ("lyrics", MATCH))

        result = await LyricsResolver([first]).resolve(AcquisitionQuery(123, "Hello"))

        assert result.failure is FailureKind.INVALID_QUERY
        assert step.calls == 0

    def test_query_validate_raises(self):
        with pytest.raises(InvalidQueryError) as exc_info:
            AcquisitionQuery("Adele", " ").validate()
        assert exc_info.value.kind is FailureKind.INVALID_QUERY
        AcquisitionQuery("Adele", "Hello").validate()

    @pytest.mark.asyncio
    async def test_first_success_short_circuits(self):
        first, _ = strategy("genius:direct", ("some lyrics", MATCH))
        second, second_step = strategy("lyrics_ovh:direct", ("other", MATCH), source=LyricsSource.LYRICS_OVH)

        result = await LyricsResolver([first, second]).resolve(QUERY)

        assert result.success
        assert result.lyrics == "some lyrics"
        assert result.match == MATCH
        assert result.source is LyricsSource.GENIUS
        assert result.attempts == ["genius:direct"]
        assert second_step.calls == 0

    @pytest.mark.asyncio
    async def test_proxy_retry_after_network_error(self):
        """Test a proxy stage runs when the direct attempt was unreachable"""
        direct, _ = strategy("genius:direct", NetworkError("timeout"))
        proxy, proxy_step = strategy("genius:proxy", ("lyrics via proxy", MATCH), runs_after=UNREACHABLE)

        result = await LyricsResolver([direct, proxy]).resolve(QUERY)

        assert result.success
        assert result.lyrics == "lyrics via proxy"
        assert result.attempts == ["genius:direct", "genius:proxy"]
        assert proxy_step.calls == 1

    @pytest.mark.asyncio
    async def test_proxy_skipped_after_not_found(self):
        """Test a definite answer is not retried through the proxy"""
        direct, _ = strategy("genius:direct", NotFoundError("Song not found on Genius"))
        proxy, proxy_step = strategy("genius:proxy", ("x", MATCH), runs_after=UNREACHABLE)

        result = await LyricsResolver([direct, proxy]).resolve(QUERY)

        assert result.failure is FailureKind.NOT_FOUND
        assert result.error_message == "Song not found on Genius"
        assert proxy_step.calls == 0

    @pytest.mark.asyncio
    async def test_next_provider_after_any_failure(self):
        genius, _ = strategy("genius:direct", ExtractionFailedError("Could not extract lyrics from the page"))
        proxy, proxy_step = strategy("genius:proxy", ("x", MATCH), runs_after=UNREACHABLE)
        ovh, _ = strategy("lyrics_ovh:direct", ("ovh lyrics", MATCH), source=LyricsSource.LYRICS_OVH)

        result = await LyricsResolver([genius, proxy, ovh]).resolve(QUERY)

        assert result.success
        assert result.source is LyricsSource.LYRICS_OVH
        assert result.attempts == ["genius:direct", "lyrics_ovh:direct"]
        assert proxy_step.calls == 0

    @pytest.mark.asyncio
    async def test_first_definite_failure_is_reported(self):
        """Test a later unreachable stage does not hide a NotFound"""
        direct, _ = strategy("genius:direct", NetworkError("reset"))
        proxy, _ = strategy("genius:proxy", NotFoundError("Song not found on Genius"), runs_after=UNREACHABLE)
        ovh, _ = strategy("lyrics_ovh:direct", NetworkError("dns"), source=LyricsSource.LYRICS_OVH)

        result = await LyricsResolver([direct, proxy, ovh]).resolve(QUERY)

        assert result.failure is FailureKind.NOT_FOUND
        assert result.attempts == ["genius:direct", "genius:proxy", "lyrics_ovh:direct"]

    @pytest.mark.asyncio
    async def test_all_unreachable(self):
        direct, _ = strategy("genius:direct", NetworkError("first"))
        proxy, _ = strategy("genius:proxy", NetworkError("second"), runs_after=UNREACHABLE)

        result = await LyricsResolver([direct, proxy]).resolve(QUERY)

        assert result.failure is FailureKind.NETWORK_ERROR
        assert result.error_message == "first"

    @pytest.mark.asyncio
    async def test_append_adds_stage(self):
        first, _ = strategy("genius:direct", NotFoundError("missing"))
        resolver = LyricsResolver([first])
        extra, extra_step = strategy("manual:cache", ("cached", MATCH))
        resolver.append(extra)

        result = await resolver.resolve(QUERY)

        assert result.success
        assert extra_step.calls == 1

    def test_needs_a_strategy(self):
        with pytest.raises(ValueError):
            LyricsResolver([])


class TestSearch:
    """Test the search-only path"""

    @pytest.mark.asyncio
    async def test_search_success(self):
        step = ScriptedStep(MATCH)
        resolver = LyricsResolver([strategy("s", ("x", MATCH))[0]], [SearchStrategy("genius:direct", step)])

        result = await resolver.search("  hello adele ")

        assert result.success
        assert result.match == MATCH
        assert step.calls == 1

    @pytest.mark.asyncio
    async def test_empty_term(self):
        step = ScriptedStep(MATCH)
        resolver = LyricsResolver([strategy("s", ("x", MATCH))[0]], [SearchStrategy("genius:direct", step)])

        result = await resolver.search("   ")

        assert result.failure is FailureKind.INVALID_QUERY
        assert result.error_message == "Query parameter is required"
        assert step.calls == 0

    @pytest.mark.asyncio
    async def test_search_proxy_retry(self):
        direct = SearchStrategy("genius:direct", ScriptedStep(NetworkError("down")))
        proxy = SearchStrategy("genius:proxy", ScriptedStep(MATCH), UNREACHABLE)
        resolver = LyricsResolver([strategy("s", ("x", MATCH))[0]], [direct, proxy])

        assert (await resolver.search("hello")).match == MATCH

    @pytest.mark.asyncio
    async def test_no_search_provider(self):
        resolver = LyricsResolver([strategy("s", ("x", MATCH))[0]])
        result = await resolver.search("hello")
        assert result.failure is FailureKind.NOT_FOUND


class TestBuildResolver:
    """Test the configured chain"""

    def test_default_chain(self, temp_dir):
        settings = Settings(config_path=str(temp_dir / "missing.yaml"))
        resolver = build_resolver(None, settings)

        assert [s.name for s in resolver.strategies] == [
            "genius:direct", "genius:proxy", "lyrics_ovh:direct", "lyrics_ovh:proxy",
        ]
        assert [s.name for s in resolver.search_strategies] == ["genius:direct", "genius:proxy"]
        assert resolver.strategies[1].runs_after == UNREACHABLE

    def test_without_proxy_and_fallback(self, temp_dir):
        settings = Settings(config_path=str(temp_dir / "missing.yaml"))
        settings.lyrics.use_proxy_fallback = False
        settings.lyrics.fallback_sources = []

        resolver = build_resolver(None, settings)

        assert [s.name for s in resolver.strategies] == ["genius:direct"]

    def test_unknown_source(self, temp_dir):
        settings = Settings(config_path=str(temp_dir / "missing.yaml"))
        settings.lyrics.fallback_sources = ["musixmatch"]

        with pytest.raises(ValueError):
            build_resolver(None, settings)
