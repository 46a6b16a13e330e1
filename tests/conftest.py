"""Test configuration and fixtures"""

import random
import tempfile
from pathlib import Path

import pytest

from lyrics_cloud.config.settings import Settings


class FakeFetcher:
    """
    Stand-in for HttpFetcher answering from canned responses

    Responses are keyed by URL. A response that is an exception instance is
    raised instead of returned. Every call is recorded in `calls`.
    """

    def __init__(self, json_responses=None, text_responses=None, name="direct"):
        self.json_responses = json_responses or {}
        self.text_responses = text_responses or {}
        self.name = name
        self.calls = []

    def _answer(self, responses, url):
        response = responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    async def get_json(self, url, params=None):
        self.calls.append((url, params))
        return self._answer(self.json_responses, url)

    async def get_text(self, url, params=None):
        self.calls.append((url, params))
        return self._answer(self.text_responses, url)


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def seeded_rng():
    """Deterministic random source for layouts"""
    return random.Random(1234)


@pytest.fixture
def test_settings(temp_dir):
    """Default settings with a small canvas and a temporary output directory"""
    settings = Settings(config_path=str(temp_dir / "missing.yaml"))
    settings.export.width = 300
    settings.export.height = 200
    settings.export.output_directory = str(temp_dir / "exports")
    return settings


@pytest.fixture
def sample_lyrics():
    """Lyrics with annotations, stopwords and repeated words"""
    return (
        "[Verse 1]\n"
        "Fire in the night, burning light\n"
        "Dance with me until the morning light\n"
        "\n"
        "[Chorus]\n"
        "Fire, fire, burning bright\n"
        "Oh yeah, we dance tonight\n"
    )


@pytest.fixture
def genius_song_result():
    """One `result` object of the Genius search API"""
    return {
        'title': 'Hello',
        'url': 'https://genius.com/Adele-hello-lyrics',
        'song_art_image_thumbnail_url': 'https://images.genius.com/hello.300x300x1.jpg',
        'primary_artist': {'name': 'Adele'},
    }


@pytest.fixture
def genius_search_payload(genius_song_result):
    """Genius multi-search response whose top hit is a song"""
    return {
        'response': {
            'sections': [
                {'type': 'top_hit', 'hits': [{'type': 'song', 'result': genius_song_result}]},
                {'type': 'song', 'hits': [{'type': 'song', 'result': genius_song_result}]},
            ]
        }
    }


@pytest.fixture
def genius_song_page():
    """Song page markup with two lyrics containers"""
    return """
    <html><body>
      <div class="header">Adele - Hello</div>
      <div data-lyrics-container="true">[Verse 1]<br/>Hello, it's me<br/><i>I was wondering</i></div>
      <div data-exclude-from-selection="true">Embed</div>
      <div data-lyrics-container="true">[Chorus]<br/>Hello from the other side</div>
    </body></html>
    """


@pytest.fixture
def genius_page_with_header():
    """Current page layout: contributor header inside the first lyrics container"""
    return """
    <html><body>
      <div data-lyrics-container="true"><div data-exclude-from-selection="true"><span>254 Contributors</span><span>Translations</span><h2>Hello Lyrics</h2></div>[Verse 1]<br/>Hello, it's me<br/>I was wondering</div>
      <div data-lyrics-container="true">[Chorus]<br/>Hello from the other side</div>
    </body></html>
    """
