"""
HTTP surface of lyrics-wordcloud (aiohttp.web)

Routes:
    GET  /api/lyrics?artist&song       lyrics and song metadata
    GET  /api/search?query             song metadata only
    POST /api/wordcloud                cloud from {text} or {artist, song}
    GET  /api/wordcloud.png?artist&song  PNG attachment
    GET  /health                       liveness probe

Resolver-backed routes pass through the rate limiter before any acquisition
work. Generating a cloud from pasted text is never rate limited. Every error
body has the shape `{success: false, error, kind}`.
"""

import asyncio
import contextlib
import random
from typing import Awaitable, Optional, TypeVar

from aiohttp import web

from ..config.settings import Settings, get_settings
from ..core.exceptions import FailureKind, RateLimitedError
from ..core.rate_limiter import RateLimiter
from ..lyrics.models import AcquisitionQuery
from ..lyrics.resolver import LyricsResolver, open_resolver
from ..pipeline.orchestrator import WordCloudPipeline
from ..utils.helpers import get_current_timestamp
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

SETTINGS_KEY = web.AppKey("settings", Settings)
PIPELINE_KEY = web.AppKey("pipeline", WordCloudPipeline)
RATE_LIMITER_KEY = web.AppKey("rate_limiter", RateLimiter)

INTERNAL_ERROR = "Internal server error"

STATUS_BY_KIND = {
    FailureKind.INVALID_QUERY: 400,
    FailureKind.NOT_FOUND: 404,
    FailureKind.EXTRACTION_FAILED: 404,
    FailureKind.RATE_LIMITED: 429,
    FailureKind.INSUFFICIENT_CONTENT: 422,
    FailureKind.NETWORK_ERROR: 500,
}

# Provider-specific wording stays in the log, clients see one text per kind
LOOKUP_MESSAGES = {
    FailureKind.NOT_FOUND: "Song not found on Genius",
    FailureKind.EXTRACTION_FAILED: "Could not extract lyrics from the page",
}


def error_response(request: web.Request, kind: Optional[FailureKind], message: Optional[str]) -> web.Response:
    """JSON error body with the HTTP status matching the failure kind"""
    status = STATUS_BY_KIND.get(kind, 500)
    if status == 500:
        # Upstream and transport details stay in the log
        message = INTERNAL_ERROR

    headers = {}
    if kind is FailureKind.RATE_LIMITED:
        window = request.app[SETTINGS_KEY].rate_limit.window_seconds
        headers['Retry-After'] = str(int(window))

    return web.json_response(
        {'success': False, 'error': message, 'kind': kind.value if kind else None},
        status=status,
        headers=headers
    )


def lookup_error_response(request: web.Request, kind: Optional[FailureKind], message: Optional[str]) -> web.Response:
    """Error response for a failed lyrics lookup"""
    if kind in LOOKUP_MESSAGES:
        logger.info(f"Lookup failed ({kind.value}): {message}")
        message = LOOKUP_MESSAGES[kind]
    return error_response(request, kind, message)


def client_identity(request: web.Request) -> str:
    return request.remote or "unknown"


def admit(request: web.Request) -> Optional[web.Response]:
    """Rate limit check, returns the 429 response when the client is over its window"""
    try:
        request.app[RATE_LIMITER_KEY].check(client_identity(request))
    except RateLimitedError as e:
        return error_response(request, e.kind, e.message)
    return None


def resolver_of(request: web.Request) -> LyricsResolver:
    resolver = request.app[PIPELINE_KEY].resolver
    if resolver is None:
        raise RuntimeError("Lyrics resolver is not available")
    return resolver


async def within_deadline(request: web.Request, lookup: Awaitable[T]) -> Optional[T]:
    """Await an upstream lookup, None when it outlives the request timeout"""
    timeout = request.app[SETTINGS_KEY].network.request_timeout
    try:
        return await asyncio.wait_for(lookup, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Lookup for {request.path} timed out after {timeout}s")
        return None


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Turn unexpected exceptions into the generic 500 payload"""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return web.json_response(
            {'success': False, 'error': INTERNAL_ERROR, 'kind': None},
            status=500
        )


async def get_lyrics(request: web.Request) -> web.Response:
    rejected = admit(request)
    if rejected is not None:
        return rejected

    query = AcquisitionQuery.from_values(request.query.get('artist'), request.query.get('song'))
    result = await within_deadline(request, resolver_of(request).resolve(query))
    if result is None:
        return error_response(request, FailureKind.NETWORK_ERROR, None)
    if not result.success:
        return lookup_error_response(request, result.failure, result.error_message)

    payload = {'success': True, 'lyrics': result.lyrics, 'source': result.source.value}
    payload.update(result.match.to_dict())
    return web.json_response(payload)


async def search(request: web.Request) -> web.Response:
    rejected = admit(request)
    if rejected is not None:
        return rejected

    result = await within_deadline(request, resolver_of(request).search(request.query.get('query', '')))
    if result is None:
        return error_response(request, FailureKind.NETWORK_ERROR, None)
    if not result.success:
        message = "No results found" if result.failure is FailureKind.NOT_FOUND else result.error_message
        return error_response(request, result.failure, message)

    return web.json_response({'success': True, 'result': result.match.to_dict()})


async def create_wordcloud(request: web.Request) -> web.Response:
    """
    Build a cloud from pasted text or from an artist/song lookup

    Body: `{"text": "..."}` or `{"artist": "...", "song": "..."}`.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return error_response(request, FailureKind.INVALID_QUERY, "Request body must be a JSON object")

    pipeline = request.app[PIPELINE_KEY]
    if body.get('text') is not None:
        if not isinstance(body['text'], str):
            return error_response(request, FailureKind.INVALID_QUERY, "Field 'text' must be a string")
        result = pipeline.from_raw_text(body['text'])
    else:
        query = AcquisitionQuery.from_values(body.get('artist'), body.get('song'))
        result = await within_deadline(
            request,
            pipeline.from_query(query, client_id=client_identity(request))
        )
        if result is None:
            return error_response(request, FailureKind.NETWORK_ERROR, None)

    if not result.success:
        return lookup_error_response(request, result.failure, result.error_message)
    return web.json_response(result.to_dict())


async def wordcloud_png(request: web.Request) -> web.Response:
    artist = request.query.get('artist', '')
    song = request.query.get('song', '')
    pipeline = request.app[PIPELINE_KEY]

    result = await within_deadline(
        request,
        pipeline.from_query(AcquisitionQuery.from_values(artist, song), client_id=client_identity(request))
    )
    if result is None:
        return error_response(request, FailureKind.NETWORK_ERROR, None)
    if not result.success:
        return lookup_error_response(request, result.failure, result.error_message)

    artifact = pipeline.export(result.entries, artist, song)
    return web.Response(
        body=artifact.data,
        content_type=artifact.content_type,
        headers={'Content-Disposition': f'attachment; filename="{artifact.filename}"'}
    )


async def health(request: web.Request) -> web.Response:
    return web.json_response({'status': 'ok', 'timestamp': get_current_timestamp()})


async def resolver_context(app: web.Application):
    """Own the HTTP session behind the resolver for the application lifetime"""
    pipeline = app[PIPELINE_KEY]
    async with open_resolver(app[SETTINGS_KEY]) as resolver:
        pipeline.resolver = resolver
        yield
        pipeline.resolver = None


async def sweeper_context(app: web.Application):
    """Run the rate-limit sweep in the background while the application is up"""
    interval = app[SETTINGS_KEY].sweep_interval
    task = asyncio.create_task(app[RATE_LIMITER_KEY].run_sweeper(interval))
    logger.debug(f"Rate limit sweeper started (every {interval:g}s)")
    yield
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


def create_app(
    settings: Optional[Settings] = None,
    resolver: Optional[LyricsResolver] = None,
    rate_limiter: Optional[RateLimiter] = None,
    rng: Optional[random.Random] = None
) -> web.Application:
    """
    Build the web application

    Args:
        settings: Configuration, defaults to the global settings
        resolver: Lyrics resolver to use; when omitted one is opened on
            startup and closed on cleanup
        rate_limiter: Admission gate shared by the resolver-backed routes
        rng: Random source for cloud layouts

    Returns:
        Configured aiohttp Application
    """
    settings = settings or get_settings()
    rate_limiter = rate_limiter or RateLimiter(
        max_requests=settings.rate_limit.max_requests,
        window_seconds=settings.rate_limit.window_seconds
    )

    app = web.Application(middlewares=[error_middleware])
    app[SETTINGS_KEY] = settings
    app[RATE_LIMITER_KEY] = rate_limiter
    app[PIPELINE_KEY] = WordCloudPipeline.from_settings(
        resolver=resolver,
        settings=settings,
        rate_limiter=rate_limiter,
        rng=rng
    )

    if resolver is None:
        app.cleanup_ctx.append(resolver_context)
    app.cleanup_ctx.append(sweeper_context)

    app.router.add_get('/api/lyrics', get_lyrics)
    app.router.add_get('/api/search', search)
    app.router.add_post('/api/wordcloud', create_wordcloud)
    app.router.add_get('/api/wordcloud.png', wordcloud_png)
    app.router.add_get('/health', health)

    return app


def run_server(settings: Optional[Settings] = None, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the application until interrupted"""
    settings = settings or get_settings()
    host = host or settings.server.host
    port = port or settings.server.port

    logger.console_info(f"Lyrics API listening on http://{host}:{port}")
    web.run_app(create_app(settings), host=host, port=port, print=None)
