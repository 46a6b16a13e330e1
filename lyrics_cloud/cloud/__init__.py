"""
Word cloud analytics package

Text flows one way through these stages:

    tokenize(text) -> aggregate(tokens) -> layout(stats) -> WordCloudExporter.export(entries)

Tokenizer, aggregator and layout generator are pure and synchronous. The
exporter is CPU-bound and depends only on Pillow.
"""

from .stopwords import STOP_WORDS
from .tokenizer import TokenStream, tokenize, MIN_WORD_LENGTH, MIN_TOKENS
from .aggregator import WordStat, aggregate, TOP_N
from .layout import WordCloudEntry, layout, compute_size
from .exporter import WordCloudExporter, PNG_CONTENT_TYPE

__all__ = [
    'STOP_WORDS',
    'TokenStream',
    'tokenize',
    'MIN_WORD_LENGTH',
    'MIN_TOKENS',
    'WordStat',
    'aggregate',
    'TOP_N',
    'WordCloudEntry',
    'layout',
    'compute_size',
    'WordCloudExporter',
    'PNG_CONTENT_TYPE',
]
