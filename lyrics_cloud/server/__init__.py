"""aiohttp web application exposing lyrics lookup and word cloud generation."""

from .app import create_app, run_server, STATUS_BY_KIND

__all__ = [
    'create_app',
    'run_server',
    'STATUS_BY_KIND',
]
