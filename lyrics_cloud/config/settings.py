"""
Configuration management for Lyrics-WordCloud

This module handles loading, validation, and management of application settings
from multiple sources including YAML files and environment variables. It provides
a centralized configuration system that supports hot-reloading and validation.

The configuration is organized into logical sections using dataclasses:
- HTTP server settings (bind address)
- Request rate limiting policy
- Lyrics acquisition settings (sources, proxy fallback, outbound pacing)
- Word cloud generation parameters (top-N, token filtering)
- Raster export options (canvas, background, font)
- Network, logging and storage configuration

Nothing here is secret, but every value can still be overridden from the
environment so the server can be deployed without a configuration file.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field, asdict
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


@dataclass
class ServerConfig:
    """
    HTTP server bind configuration

    Used by the `serve` command and by the web application factory.
    """
    host: str = "127.0.0.1"
    port: int = 3001


@dataclass
class RateLimitConfig:
    """
    Fixed-window request admission policy

    Each client identity may perform `max_requests` lyrics lookups within
    `window_seconds`. Idle client entries are swept every
    `window_seconds * sweep_multiplier` seconds.
    """
    max_requests: int = 10
    window_seconds: float = 60.0
    sweep_multiplier: int = 5


@dataclass
class LyricsConfig:
    """
    Lyrics acquisition configuration

    Controls which providers are tried and in which order, whether each
    provider gets a second attempt through a forwarding proxy, and how
    outbound requests are paced.
    """
    primary_source: str = "genius"
    fallback_sources: list = field(default_factory=lambda: ["lyrics_ovh"])
    use_proxy_fallback: bool = True
    proxy_url: str = "https://corsproxy.io/?"
    genius_base_url: str = "https://genius.com"
    lyrics_ovh_base_url: str = "https://api.lyrics.ovh"
    min_request_interval: float = 1.0


@dataclass
class CloudConfig:
    """
    Word cloud generation parameters

    `top_n` bounds the number of words kept after frequency ranking,
    `min_tokens` is the smallest token stream accepted for a cloud.
    """
    top_n: int = 50
    min_word_length: int = 3
    min_tokens: int = 5


@dataclass
class ExportConfig:
    """
    Raster export configuration

    The canvas is fixed per deployment. When `font_path` is empty the exporter
    looks for DejaVu Sans Bold and finally falls back to Pillow's built-in font.
    """
    width: int = 1200
    height: int = 800
    background: str = "#1a1a2e"
    font_path: str = ""
    output_directory: str = "~/Pictures/Lyrics Word Clouds"


@dataclass
class NetworkConfig:
    """
    Network and HTTP configuration settings

    `request_timeout` is the deadline callers (the CLI and the HTTP server)
    place around a whole lyrics lookup. The resolver itself never enforces a
    timeout.
    """
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    )
    request_timeout: int = 30


@dataclass
class LoggingConfig:
    """
    Logging configuration and output settings

    Controls application logging behavior including log levels, file output,
    rotation, and console formatting.
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


@dataclass
class StorageConfig:
    """Location of the per-user configuration directory"""
    config_directory: str = "~/.lyrics-wordcloud/"


class Settings:
    """
    Main settings class that manages all configuration

    Loads settings from YAML files and environment variables and exposes
    one dataclass instance per configuration section.
    """

    SECTIONS = (
        'server', 'rate_limit', 'lyrics', 'cloud',
        'export', 'network', 'logging', 'storage',
    )

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file or environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".lyrics-wordcloud"

        self.server = ServerConfig()
        self.rate_limit = RateLimitConfig()
        self.lyrics = LyricsConfig()
        self.cloud = CloudConfig()
        self.export = ExportConfig()
        self.network = NetworkConfig()
        self.logging = LoggingConfig()
        self.storage = StorageConfig()

        # Later sources override earlier ones
        self._load_config()
        self._load_environment_variables()
        self._create_directories()

    def _load_config(self) -> None:
        """
        Load configuration from the first YAML file found

        Searches the explicit path, the user config directory and the
        working directory in that order.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config/config.yaml"),
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: Failed to load config from {path}: {e}")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Only keys that exist on the matching dataclass are applied, anything
        else in the file is ignored.

        Args:
            config_data: Dictionary containing configuration sections
        """
        for section_name, section_data in config_data.items():
            if section_name in self.SECTIONS and isinstance(section_data, dict):
                config_obj = getattr(self, section_name)
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """Apply environment variable overrides"""
        env_mappings = {
            'PORT': lambda v: setattr(self.server, 'port', int(v)),
            'LYRICS_CLOUD_HOST': lambda v: setattr(self.server, 'host', v),
            'LYRICS_CLOUD_PORT': lambda v: setattr(self.server, 'port', int(v)),
            'LYRICS_CLOUD_PROXY_URL': lambda v: setattr(self.lyrics, 'proxy_url', v),
            'LYRICS_CLOUD_OUTPUT_DIR': lambda v: setattr(self.export, 'output_directory', v),
            'LYRICS_CLOUD_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                try:
                    setter(value)
                except ValueError:
                    print(f"Warning: Ignoring invalid value for {env_var}: {value!r}")

    def _create_directories(self) -> None:
        """Create the configuration directory if it does not exist yet"""
        directory = self.get_config_directory()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"Warning: Failed to create directory {directory}: {e}")

    def get_output_directory(self) -> Path:
        """Get the expanded export output directory"""
        return Path(self.export.output_directory).expanduser()

    def get_config_directory(self) -> Path:
        """Get the expanded config directory path"""
        return Path(self.storage.config_directory).expanduser()

    @property
    def sweep_interval(self) -> float:
        """Seconds between two sweeps of idle rate-limit entries"""
        return self.rate_limit.window_seconds * self.rate_limit.sweep_multiplier

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Serialize every section to plain dictionaries"""
        return {name: asdict(getattr(self, name)) for name in self.SECTIONS}

    def save_config(self, path: Optional[str] = None) -> None:
        """
        Save current configuration to a YAML file

        Args:
            path: Custom path to save config, defaults to user config directory

        Raises:
            OSError: If the configuration cannot be written
        """
        target = Path(path) if path else self.get_config_directory() / "config.yaml"
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, indent=2)

    def validate(self) -> List[str]:
        """
        Validate current configuration

        Returns:
            List of human-readable problems, empty when the configuration is valid
        """
        errors = []

        valid_sources = ['genius', 'lyrics_ovh']
        if self.lyrics.primary_source not in valid_sources:
            errors.append(f"Invalid primary lyrics source: {self.lyrics.primary_source}")
        for source in self.lyrics.fallback_sources:
            if source not in valid_sources:
                errors.append(f"Invalid fallback lyrics source: {source}")

        if self.rate_limit.max_requests < 1:
            errors.append("rate_limit.max_requests must be at least 1")
        if self.rate_limit.window_seconds <= 0:
            errors.append("rate_limit.window_seconds must be positive")
        if self.rate_limit.sweep_multiplier < 1:
            errors.append("rate_limit.sweep_multiplier must be at least 1")

        if self.cloud.top_n < 1:
            errors.append("cloud.top_n must be at least 1")
        if self.cloud.min_word_length < 1:
            errors.append("cloud.min_word_length must be at least 1")

        if self.export.width <= 0 or self.export.height <= 0:
            errors.append(
                f"Invalid canvas size: {self.export.width}x{self.export.height}"
            )

        if not 0 < int(self.server.port) < 65536:
            errors.append(f"Invalid server port: {self.server.port}")

        return errors

    def __str__(self) -> str:
        sections = [
            f"Server: {self.server.host}:{self.server.port}",
            f"Sources: {', '.join([self.lyrics.primary_source] + list(self.lyrics.fallback_sources))}",
            f"Rate limit: {self.rate_limit.max_requests}/{self.rate_limit.window_seconds:g}s",
            f"Top words: {self.cloud.top_n}",
        ]
        return f"Settings({', '.join(sections)})"


# Global settings instance for singleton pattern
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance

    Returns:
        The global Settings instance
    """
    return settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files

    Creates a new settings instance with updated configuration from files
    and environment variables.

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global settings
    settings = Settings(config_path)
    return settings
