"""
Configuration management package for Lyrics-WordCloud

Settings are loaded from YAML files and environment variables into dataclass
sections and shared through a module-level singleton:

    from lyrics_cloud.config import get_settings

    settings = get_settings()
    settings.rate_limit.max_requests

Sources in order of precedence:
1. Environment variables
2. YAML configuration file
3. Dataclass defaults
"""

from .settings import get_settings, reload_settings, Settings

__all__ = [
    'get_settings',      # Singleton settings access
    'reload_settings',   # Re-read settings from files and environment
    'Settings'           # Settings class for direct instantiation (tests)
]
