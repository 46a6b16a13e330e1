"""Integration tests"""

import json
import logging

import yaml
from click.testing import CliRunner

from lyrics_cloud.config.settings import Settings
from lyrics_cloud.core.exceptions import FailureKind
from lyrics_cloud.lyrics.models import ResolutionResult, SearchResult


class TestSettings:
    """Test configuration loading"""

    def test_defaults(self, temp_dir):
        settings = Settings(config_path=str(temp_dir / "missing.yaml"))

        assert settings.rate_limit.max_requests == 10
        assert settings.sweep_interval == 300
        assert settings.cloud.top_n == 50
        assert settings.export.background == "#1a1a2e"

    def test_yaml_file_is_applied(self, temp_dir):
        """Test known keys are applied and unknown ones ignored"""
        config_file = temp_dir / "config.yaml"
        config_file.write_text(yaml.dump({
            'rate_limit': {'max_requests': 3, 'window_seconds': 10},
            'cloud': {'top_n': 20, 'colour': 'red'},
            'unknown_section': {'x': 1},
        }))

        settings = Settings(config_path=str(config_file))

        assert settings.rate_limit.max_requests == 3
        assert settings.sweep_interval == 50
        assert settings.cloud.top_n == 20
        assert not hasattr(settings.cloud, 'colour')

    def test_environment_overrides(self, temp_dir, monkeypatch):
        monkeypatch.setenv('LYRICS_CLOUD_PORT', '4242')
        monkeypatch.setenv('LYRICS_CLOUD_PROXY_URL', 'https://proxy.test/?url=')

        settings = Settings(config_path=str(temp_dir / "missing.yaml"))

        assert settings.server.port == 4242
        assert settings.lyrics.proxy_url == 'https://proxy.test/?url='

    def test_invalid_environment_value_is_ignored(self, temp_dir, monkeypatch):
        monkeypatch.delenv('PORT', raising=False)
        monkeypatch.setenv('LYRICS_CLOUD_PORT', 'not-a-port')

        settings = Settings(config_path=str(temp_dir / "missing.yaml"))

        assert settings.server.port == 3001

    def test_validation(self, temp_dir):
        settings = Settings(config_path=str(temp_dir / "missing.yaml"))
        settings.server.port = 3001
        assert settings.validate() == []

        settings.lyrics.primary_source = "musixmatch"
        settings.cloud.top_n = 0
        errors = settings.validate()
        assert len(errors) == 2

    def test_save_and_reload(self, temp_dir):
        settings = Settings(config_path=str(temp_dir / "missing.yaml"))
        settings.cloud.top_n = 12
        target = temp_dir / "saved.yaml"

        settings.save_config(str(target))

        assert Settings(config_path=str(target)).cloud.top_n == 12


class TestLogging:
    """Test logger configuration"""

    def test_file_logging(self, temp_dir):
        from lyrics_cloud.utils.logger import setup_logging, get_logger, get_current_log_file

        root_logger = logging.getLogger()
        saved_handlers = root_logger.handlers[:]
        log_file = temp_dir / "logs" / "lyrics.log"

        try:
            setup_logging(level="DEBUG", log_file=str(log_file), console_output=False)
            logger = get_logger("lyrics_cloud.test")
            logger.console_info("visible to users")
            logger.debug("detail")

            for handler in root_logger.handlers:
                handler.flush()

            assert get_current_log_file() == log_file
            content = log_file.read_text(encoding="utf-8")
            assert "visible to users" in content
            assert "detail" in content
        finally:
            for handler in root_logger.handlers[:]:
                root_logger.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root_logger.addHandler(handler)

    def test_parse_size(self):
        from lyrics_cloud.utils.logger import parse_size

        assert parse_size("10MB") == 10 * 1024 * 1024
        assert parse_size("512KB") == 512 * 1024


class TestCli:
    """Test the command-line interface"""

    def test_version(self):
        from lyrics_cloud.main import cli

        result = CliRunner().invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert "Lyrics-WordCloud v1.0.0" in result.output

    def test_cloud_from_stdin_as_json(self):
        from lyrics_cloud.main import cli

        result = CliRunner().invoke(
            cli, ['cloud', '--file', '-', '--json', '--no-export', '--seed', '3'],
            input="love love love pain pain heart"
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [word['word'] for word in data['words']] == ['love', 'pain', 'heart']

    def test_cloud_export(self, temp_dir):
        from lyrics_cloud.main import cli

        lyrics_file = temp_dir / "lyrics.txt"
        lyrics_file.write_text("fire night fire dance night fire burning", encoding="utf-8")

        result = CliRunner().invoke(
            cli, ['cloud', 'Adele', 'Hello', '--file', str(lyrics_file), '--output', str(temp_dir)]
        )

        assert result.exit_code == 0
        assert (temp_dir / "adele-hello-wordcloud.png").exists()

    def test_cloud_needs_query_or_file(self):
        from lyrics_cloud.main import cli

        result = CliRunner().invoke(cli, ['cloud'])

        assert result.exit_code == 1

    def test_cloud_insufficient_text(self):
        from lyrics_cloud.main import cli

        result = CliRunner().invoke(cli, ['cloud', '--file', '-', '--no-export'], input="the a an")

        assert result.exit_code == 1
        assert "Not enough meaningful words" in result.output

    def test_fetch_failure_shows_remedy(self, monkeypatch):
        """Test a lookup failure points to manual search and paste"""
        from lyrics_cloud import main

        async def not_found(query, settings):
            return ResolutionResult.failed(FailureKind.NOT_FOUND, "Song not found on Genius", ["genius:direct"])

        monkeypatch.setattr(main, 'resolve_lyrics', not_found)

        result = CliRunner().invoke(main.cli, ['fetch', 'Adele', 'Hello'])

        assert result.exit_code == 1
        assert "Song not found on Genius" in result.output
        assert "https://genius.com/search?q=Hello+Adele" in result.output
        assert "--file" in result.output

    def test_search_prints_match(self, monkeypatch):
        from lyrics_cloud import main
        from lyrics_cloud.lyrics.models import SongMatch

        async def found(term, settings):
            return SearchResult(success=True, match=SongMatch("Hello", "Adele", "https://genius.com/Adele-hello-lyrics"))

        monkeypatch.setattr(main, 'search_song', found)

        result = CliRunner().invoke(main.cli, ['search', 'hello adele'])

        assert result.exit_code == 0
        assert "https://genius.com/Adele-hello-lyrics" in result.output

    def test_config_show(self):
        from lyrics_cloud.main import cli

        result = CliRunner().invoke(cli, ['config', 'show'])

        assert result.exit_code == 0
        assert "Rate limit:" in result.output
        assert "Top words:" in result.output

    def test_serve_rejects_bad_port(self):
        from lyrics_cloud.main import cli

        result = CliRunner().invoke(cli, ['serve', '--port', '70000'])

        assert result.exit_code == 1
