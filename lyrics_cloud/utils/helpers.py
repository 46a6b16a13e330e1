"""
Utility functions and helpers for Lyrics-WordCloud
Common functions for lyrics text cleanup, export file naming and manual lookup links
"""

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Union
from urllib.parse import quote_plus


# Bracketed annotations such as [Chorus] or [Verse 2: Artist]
_ANNOTATION_PATTERN = re.compile(r'\[.*?\]')
_EXCESS_NEWLINES_PATTERN = re.compile(r'\n{3,}')
_NON_ALPHANUMERIC_PATTERN = re.compile(r'[^a-z0-9]', re.IGNORECASE)


def clean_lyrics_text(lyrics: str) -> str:
    """
    Clean scraped lyrics text

    Strips every bracketed annotation span, collapses runs of three or more
    newlines to a single blank line and trims surrounding whitespace.

    Args:
        lyrics: Raw lyrics text

    Returns:
        Cleaned lyrics text (empty string for empty input)
    """
    if not lyrics:
        return ""

    cleaned = lyrics.replace('\r\n', '\n').replace('\r', '\n')
    cleaned = _ANNOTATION_PATTERN.sub('', cleaned)
    cleaned = _EXCESS_NEWLINES_PATTERN.sub('\n\n', cleaned)

    return cleaned.strip()


def sanitize_name_component(value: str) -> str:
    """
    Make an artist or song name safe for an export filename

    Every character outside [a-zA-Z0-9] becomes a hyphen, the result is lowercased.

    Args:
        value: Original artist or song name

    Returns:
        Sanitized, lowercase name component
    """
    return _NON_ALPHANUMERIC_PATTERN.sub('-', value or '').lower()


def create_export_filename(artist: str = "", song: str = "") -> str:
    """
    Build the PNG filename for an exported word cloud

    Args:
        artist: Artist name as entered by the user
        song: Song title as entered by the user

    Returns:
        `<artist>-<song>-wordcloud.png`, or `song-wordcloud.png` when either is empty
    """
    if not artist or not song:
        return "song-wordcloud.png"

    return f"{sanitize_name_component(artist)}-{sanitize_name_component(song)}-wordcloud.png"


def genius_search_url(song: str, artist: str) -> str:
    """Genius website search link for looking lyrics up by hand"""
    query = f"{song} {artist}".strip()
    return f"https://genius.com/search?q={quote_plus(query)}"


def web_search_url(song: str, artist: str) -> str:
    """Generic web search link for "<song> <artist> lyrics\""""
    query = f"{song} {artist} lyrics".strip()
    return f"https://google.com/search?q={quote_plus(query)}"


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure directory exists, create if necessary

    Args:
        path: Directory path

    Returns:
        Path object of the (expanded) directory
    """
    path_obj = Path(path).expanduser()
    path_obj.mkdir(parents=True, exist_ok=True)
    return path_obj


def get_current_timestamp() -> str:
    """Get current UTC timestamp in ISO-8601 format"""
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate string to maximum length

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix
