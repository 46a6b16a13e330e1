"""
Tokenizer and stopword filter

Normalizes raw text into the stream of words a cloud is built from:
lowercase everything, turn every character outside [a-z0-9] and whitespace
into a space, split on whitespace runs, then drop short words and stopwords.
Only space-delimited Latin-script text is supported.
"""

import re
from typing import Iterator, FrozenSet, Optional

from ..core.exceptions import InsufficientContentError
from .stopwords import STOP_WORDS

_STRIP_PATTERN = re.compile(r'[^a-z0-9\s]')
_WORD_PATTERN = re.compile(r'\S+')

MIN_WORD_LENGTH = 3
MIN_TOKENS = 5


class TokenStream:
    """
    Lazy, restartable sequence of tokens

    Iterating twice re-reads the source text, so the stream can be counted
    and then aggregated without materializing a list. Order follows the
    source text.
    """

    def __init__(
        self,
        text: str,
        min_length: int = MIN_WORD_LENGTH,
        stopwords: Optional[FrozenSet[str]] = None
    ):
        self.text = text or ""
        self.min_length = min_length
        self.stopwords = STOP_WORDS if stopwords is None else stopwords

    def __iter__(self) -> Iterator[str]:
        normalized = _STRIP_PATTERN.sub(' ', self.text.lower())
        for match in _WORD_PATTERN.finditer(normalized):
            word = match.group()
            if len(word) >= self.min_length and word not in self.stopwords:
                yield word

    def count(self) -> int:
        return sum(1 for _ in self)

    def ensure_sufficient(self, minimum: int = MIN_TOKENS) -> 'TokenStream':
        """
        Check the stream is long enough to build a meaningful cloud

        Returns:
            The stream itself, for chaining

        Raises:
            InsufficientContentError: Fewer than `minimum` tokens survive filtering
        """
        total = 0
        for _ in self:
            total += 1
            if total >= minimum:
                return self

        raise InsufficientContentError(
            "Not enough meaningful words found. Please add more lyrics.",
            token_count=total,
            details={'minimum': minimum}
        )


def tokenize(text: str, min_length: int = MIN_WORD_LENGTH) -> TokenStream:
    """
    Tokenize text into normalized, filtered words

    Args:
        text: Raw or cleaned lyrics text
        min_length: Shortest word kept

    Returns:
        TokenStream over the surviving words
    """
    return TokenStream(text, min_length=min_length)
