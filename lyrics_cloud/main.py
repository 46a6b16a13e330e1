"""
Main CLI interface for Lyrics-WordCloud

This module provides the command-line interface for every feature: lyrics
lookup, song search, word cloud generation and export, the HTTP server,
configuration management and system diagnostics.

The CLI is built using Click framework and provides commands for:
- Lyrics operations (fetch, search)
- Word cloud generation from a lookup or from pasted lyrics (cloud)
- The HTTP API (serve)
- Configuration management (config show, config save)
- System diagnostics (doctor)

Lookups run on a private event loop per command, bounded by the configured
network timeout.
"""

import sys
import json
import random
import asyncio
import functools

import click

from . import __version__
from .config.settings import get_settings, reload_settings
from .core.exceptions import FailureKind
from .lyrics.models import AcquisitionQuery, ResolutionResult, SearchResult
from .lyrics.resolver import open_resolver
from .pipeline.orchestrator import WordCloudPipeline, PipelineResult
from .utils.logger import configure_from_settings, get_logger, get_current_log_file, create_operation_logger
from .utils.helpers import genius_search_url, web_search_url, truncate_string
from .utils.validation import validate_query, validate_output_directory, validate_port


# Initialize logging system from configuration settings
configure_from_settings()
logger = get_logger(__name__)


def print_banner():
    """Print application banner to console"""
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                       Lyrics-WordCloud                        ║
║                                                               ║
║        Turn song lyrics into word cloud analytics             ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝
    """
    click.echo(click.style(banner, fg='green', bold=True))


def handle_error(func):
    """
    Decorator to handle common CLI errors gracefully

    Wraps CLI command functions to provide consistent error handling across
    all commands. Typed lookup failures are reported by the commands
    themselves; this only catches cancellation and unexpected errors.

    Args:
        func: The CLI command function to wrap

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


def print_failure(failure, message, artist="", song=""):
    """
    Report a typed failure and the remedy that fits it

    Lookup failures point to a manual search and the paste bypass, rate
    limiting asks to wait, too little text asks for more lyrics.
    """
    click.echo(click.style(f"Error: {message}", fg='red'), err=True)

    if failure is None:
        return

    if failure.allows_manual_paste and artist and song:
        click.echo("\nFind the lyrics yourself:")
        click.echo(f"   Genius: {genius_search_url(song, artist)}")
        click.echo(f"   Web:    {web_search_url(song, artist)}")
        click.echo("Then build the cloud from them: lyrics-cloud cloud --file lyrics.txt")
    elif failure is FailureKind.RATE_LIMITED:
        click.echo("Wait a minute and try again.")
    elif failure is FailureKind.INSUFFICIENT_CONTENT:
        click.echo("Paste the complete lyrics, short fragments rarely have enough words.")


def timed_out(timeout) -> str:
    return f"Lookup timed out after {timeout}s"


async def resolve_lyrics(query, settings) -> ResolutionResult:
    """Resolve one query on a fresh session, bounded by the network timeout"""
    timeout = settings.network.request_timeout
    async with open_resolver(settings) as resolver:
        try:
            return await asyncio.wait_for(resolver.resolve(query), timeout=timeout)
        except asyncio.TimeoutError:
            return ResolutionResult.failed(FailureKind.NETWORK_ERROR, timed_out(timeout))


async def search_song(term, settings) -> SearchResult:
    timeout = settings.network.request_timeout
    async with open_resolver(settings) as resolver:
        try:
            return await asyncio.wait_for(resolver.search(term), timeout=timeout)
        except asyncio.TimeoutError:
            return SearchResult(success=False, failure=FailureKind.NETWORK_ERROR, error_message=timed_out(timeout))


async def cloud_from_query(pipeline, query, settings) -> PipelineResult:
    timeout = settings.network.request_timeout
    async with open_resolver(settings) as resolver:
        pipeline.resolver = resolver
        try:
            return await asyncio.wait_for(pipeline.from_query(query), timeout=timeout)
        except asyncio.TimeoutError:
            return PipelineResult(success=False, failure=FailureKind.NETWORK_ERROR, error_message=timed_out(timeout))
        finally:
            pipeline.resolver = None


# Main CLI group - root command that all subcommands attach to
@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    Lyrics-WordCloud - Turn song lyrics into word clouds

    Fetches lyrics from Genius (with lyrics.ovh as fallback), counts the
    meaningful words and renders them as a word cloud.
    """
    ctx.ensure_object(dict)

    if version:
        click.echo(f"Lyrics-WordCloud v{__version__}")
        return

    if config:
        reload_settings(config)
        click.echo(f"Loaded config: {config}")

    ctx.obj['verbose'] = verbose
    if verbose:
        logger.info("Verbose mode enabled")

    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


@cli.command()
@click.argument('artist')
@click.argument('song')
@click.pass_context
@handle_error
def fetch(ctx, artist, song):
    """
    Print the lyrics of a song

    Tries Genius first, then the configured fallbacks. When every source
    fails, prints links to look the lyrics up by hand.
    """
    is_valid, error_msg = validate_query(artist, song)
    if not is_valid:
        click.echo(click.style(error_msg, fg='red'), err=True)
        sys.exit(1)

    settings = get_settings()
    query = AcquisitionQuery(artist=artist, song=song)

    click.echo(f"Looking up lyrics for: {query}")
    result = asyncio.run(resolve_lyrics(query, settings))

    if ctx.obj.get('verbose') and result.attempts:
        click.echo(f"Attempts: {', '.join(result.attempts)}")

    if not result.success:
        print_failure(result.failure, result.error_message, artist, song)
        sys.exit(1)

    click.echo(click.style(
        f"\n{result.match.artist_name} - {result.match.title} ({result.source.value})",
        fg='green', bold=True
    ))
    click.echo(f"{result.match.canonical_url}\n")
    click.echo(result.lyrics)


@cli.command()
@click.argument('query')
@handle_error
def search(query):
    """Find the song a free-text query points to"""
    result = asyncio.run(search_song(query, get_settings()))

    if not result.success:
        print_failure(result.failure, result.error_message)
        sys.exit(1)

    match = result.match
    click.echo(f"Artist:    {match.artist_name}")
    click.echo(f"Song:      {match.title}")
    click.echo(f"URL:       {match.canonical_url}")
    if match.thumbnail_url:
        click.echo(f"Thumbnail: {truncate_string(match.thumbnail_url, 80)}")


@cli.command()
@click.argument('artist', required=False, default='')
@click.argument('song', required=False, default='')
@click.option('--file', '-f', 'lyrics_file', type=click.File('r', encoding='utf-8'),
              help="Build the cloud from a lyrics file ('-' reads stdin)")
@click.option('--output', '-o', type=click.Path(), help='Export directory')
@click.option('--json', 'as_json', is_flag=True, help='Print the cloud as JSON')
@click.option('--no-export', is_flag=True, help='Skip the PNG export')
@click.option('--seed', type=int, help='Seed for a reproducible layout')
@handle_error
def cloud(artist, song, lyrics_file, output, as_json, no_export, seed):
    """
    Generate a word cloud

    Looks the lyrics of ARTIST SONG up, or reads them from --file, then
    exports the cloud as `<artist>-<song>-wordcloud.png`.

    Args:
        artist: Artist name (also used for the export filename)
        song: Song title (also used for the export filename)
        lyrics_file: Lyrics to use instead of a lookup
        output: Export directory (overrides config)
        as_json: Print words and stats as JSON
        no_export: Do not write a PNG
        seed: Layout random seed
    """
    settings = get_settings()

    if output:
        is_valid, error_msg = validate_output_directory(output)
        if not is_valid:
            click.echo(click.style(f"Invalid output directory: {error_msg}", fg='red'), err=True)
            sys.exit(1)
        settings.export.output_directory = output

    if lyrics_file is None:
        is_valid, error_msg = validate_query(artist, song)
        if not is_valid:
            click.echo(click.style(f"{error_msg} (or use --file)", fg='red'), err=True)
            sys.exit(1)

    rng = random.Random(seed) if seed is not None else None
    pipeline = WordCloudPipeline.from_settings(settings=settings, rng=rng)
    # Keep stdout clean for JSON consumers
    operation = None if as_json else create_operation_logger(__name__, "Word cloud")
    if operation:
        operation.start()

    if lyrics_file is not None:
        result = pipeline.from_raw_text(lyrics_file.read())
    else:
        if operation:
            operation.progress(f"Fetching lyrics for {artist} - {song}")
        result = asyncio.run(cloud_from_query(pipeline, AcquisitionQuery(artist, song), settings))

    if not result.success:
        if operation:
            operation.error(result.error_message)
        print_failure(result.failure, result.error_message, artist, song)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(f"\nTop words ({result.token_count} tokens):")
        for stat in result.stats[:10]:
            click.echo(f"   {stat.word:<20} {stat.frequency}")

    if not no_export:
        path = pipeline.exporter.save(result.entries, settings.get_output_directory(), artist, song)
        click.echo(click.style(f"\nSaved: {path}", fg='green'), err=as_json)

    if operation:
        operation.complete()


@cli.command()
@click.option('--host', help='Bind address (overrides config)')
@click.option('--port', '-p', type=int, help='Port (overrides config)')
@handle_error
def serve(host, port):
    """
    Run the HTTP API

    Serves /api/lyrics, /api/search, /api/wordcloud, /api/wordcloud.png
    and /health until interrupted.
    """
    if port is not None:
        is_valid, error_msg = validate_port(port)
        if not is_valid:
            click.echo(click.style(error_msg, fg='red'), err=True)
            sys.exit(1)

    # Imported here so the other commands don't load aiohttp.web
    from .server.app import run_server
    run_server(get_settings(), host=host, port=port)


# Configuration commands group
@cli.group()
def config():
    """
    Configuration management

    Command group for viewing and saving the application configuration.
    """
    pass


@config.command()
@handle_error
def show():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:\n")

    click.echo("Server:")
    click.echo(f"   Address: {settings.server.host}:{settings.server.port}")

    click.echo("\nRate limit:")
    click.echo(f"   Requests per window: {settings.rate_limit.max_requests}")
    click.echo(f"   Window: {settings.rate_limit.window_seconds:g}s")
    click.echo(f"   Sweep interval: {settings.sweep_interval:g}s")

    click.echo("\nLyrics:")
    click.echo(f"   Primary source: {settings.lyrics.primary_source}")
    click.echo(f"   Fallback sources: {', '.join(settings.lyrics.fallback_sources) or 'none'}")
    click.echo(f"   Proxy fallback: {settings.lyrics.use_proxy_fallback} ({settings.lyrics.proxy_url})")
    click.echo(f"   Min request interval: {settings.lyrics.min_request_interval:g}s")

    click.echo("\nWord cloud:")
    click.echo(f"   Top words: {settings.cloud.top_n}")
    click.echo(f"   Min word length: {settings.cloud.min_word_length}")
    click.echo(f"   Min tokens: {settings.cloud.min_tokens}")

    click.echo("\nExport:")
    click.echo(f"   Canvas: {settings.export.width}x{settings.export.height} on {settings.export.background}")
    click.echo(f"   Font: {settings.export.font_path or 'system bold font'}")
    click.echo(f"   Output directory: {settings.get_output_directory()}")


@config.command()
@click.option('--path', type=click.Path(), help='Target file (default: ~/.lyrics-wordcloud/config.yaml)')
@handle_error
def save(path):
    """Write the current configuration to a YAML file"""
    settings = get_settings()
    settings.save_config(path)
    click.echo(f"Configuration saved to {path or settings.get_config_directory() / 'config.yaml'}")


@cli.command()
@handle_error
def doctor():
    """
    Run system diagnostics

    Validates the configuration, checks that the libraries and a bold font
    for the PNG export are available, and shows where output goes.
    """
    click.echo("Running diagnostics...\n")

    issues = []
    settings = get_settings()

    problems = settings.validate()
    if problems:
        click.echo("Configuration: Invalid")
        issues.extend(problems)
    else:
        click.echo("Configuration: OK")

    dependencies = [
        ('aiohttp', 'aiohttp', 'required for lyrics lookups and the server'),
        ('bs4', 'beautifulsoup4', 'required for scraping Genius pages'),
        ('PIL', 'Pillow', 'required for PNG export'),
    ]

    for module_name, display_name, purpose in dependencies:
        try:
            __import__(module_name)
            click.echo(f"{display_name}: OK")
        except ImportError:
            click.echo(f"{display_name}: Not installed")
            issues.append(f"{display_name} is {purpose}")

    try:
        from PIL import ImageFont
        from .cloud.exporter import WordCloudExporter

        font = WordCloudExporter.from_settings(settings).font(20)
        if isinstance(font, ImageFont.FreeTypeFont) and isinstance(font.path, str):
            click.echo(f"Export font: {font.path}")
        else:
            click.echo("Export font: Pillow default")
            issues.append("No bold TrueType font found, set export.font_path for nicer PNGs")
    except ImportError:
        click.echo("Export font: Unavailable")

    output_dir = settings.get_output_directory()
    if output_dir.exists() and output_dir.is_dir():
        click.echo(f"Output directory: {output_dir}")
    else:
        click.echo(f"Output directory: {output_dir} (will be created)")

    current_log = get_current_log_file()
    if current_log:
        click.echo(f"Logging: {current_log}")
    else:
        click.echo("Logging: Console only")

    if issues:
        click.echo(f"\nFound {len(issues)} issues:")
        for issue in issues:
            click.echo(f"   • {issue}")
    else:
        click.echo("\nAll systems operational!")


# Entry point for module execution
if __name__ == '__main__':
    cli()
