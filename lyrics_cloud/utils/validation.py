"""
Input validation utilities
"""
from pathlib import Path
from typing import Optional, Tuple


def validate_query(artist: Optional[str], song: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate an artist/song pair before any lookup is attempted

    Args:
        artist: Artist name
        song: Song title

    Returns:
        Tuple of (is_valid, error_message)
    """
    # JSON bodies can carry numbers or nulls
    if not all(isinstance(value, str) and value.strip() for value in (artist, song)):
        return False, "Both artist and song parameters are required"

    return True, None


def validate_search_term(query: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a free-text search term

    Args:
        query: Search text

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(query, str) or not query.strip():
        return False, "Query parameter is required"

    return True, None


def validate_output_directory(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate export output directory path

    The directory does not need to exist yet, but it must not be a file and
    its closest existing parent must be a directory.

    Args:
        path: Directory path to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not path:
        return False, "Output directory cannot be empty"

    target = Path(path).expanduser()
    if target.exists() and not target.is_dir():
        return False, f"Not a directory: {target}"

    parent = target
    while not parent.exists():
        if parent.parent == parent:
            return False, f"No existing parent directory for: {target}"
        parent = parent.parent

    if not parent.is_dir():
        return False, f"Parent is not a directory: {parent}"

    return True, None


def validate_port(port: int) -> Tuple[bool, Optional[str]]:
    """
    Validate TCP port number

    Args:
        port: Port to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(port, int) or not 0 < port < 65536:
        return False, f"Invalid port: {port}"

    return True, None
