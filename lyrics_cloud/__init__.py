"""
Lyrics-WordCloud: turn song lyrics into word cloud analytics

Lyrics-WordCloud fetches the lyrics of a song from public sources and turns
them into a styled, positioned word cloud that can be returned as JSON or
exported as a PNG image. It runs as a small HTTP service or from the command
line.

## Core Architecture

**Configuration (`lyrics_cloud/config/`)**
- Dataclass settings loaded from YAML files and environment variables

**Core (`lyrics_cloud/core/`)**
- Failure taxonomy shared by every component
- Fixed-window request rate limiter with an explicit, sweepable store

**Lyrics Acquisition (`lyrics_cloud/lyrics/`)**
- Genius search and page scraping, lyrics.ovh as a keyless fallback
- Direct and forwarding-proxy fetchers over one aiohttp session
- Resolver running an ordered, gated list of strategies

**Word Cloud (`lyrics_cloud/cloud/`)**
- Tokenizer with a curated stopword set
- Frequency aggregation, randomized layout and Pillow PNG export

**Pipeline (`lyrics_cloud/pipeline/`)**
- Orchestrates query -> lyrics -> tokens -> stats -> layout, or skips the
  lookup entirely for pasted lyrics

**Server (`lyrics_cloud/server/`)**
- aiohttp web application exposing lyrics lookup and cloud generation

## Quick Start
```bash
pip install -e .

# Print lyrics
lyrics-cloud fetch "Adele" "Hello"

# Export a word cloud PNG
lyrics-cloud cloud "Adele" "Hello" --output ~/Pictures

# Build a cloud from pasted lyrics
pbpaste | lyrics-cloud cloud --file -

# Serve the HTTP API on port 3001
lyrics-cloud serve
```

Failures never crash a lookup: every stage reports a typed failure so the
caller can retry later, wait out the rate limit, or paste the lyrics by hand.
"""

__version__ = "1.0.0"

__author__ = "Lyrics-WordCloud Team"

__description__ = "Fetch song lyrics and build word cloud analytics from them"

__all__ = [
    "__version__",
    "__author__",
    "__description__"
]
