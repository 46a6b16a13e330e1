"""Test tokenizer and stopword filter"""

from collections import Counter

import pytest

from lyrics_cloud.cloud.stopwords import STOP_WORDS
from lyrics_cloud.cloud.tokenizer import TokenStream, tokenize
from lyrics_cloud.core.exceptions import FailureKind, InsufficientContentError


class TestTokenize:
    """Test normalization and filtering"""

    def test_only_stopwords_yield_nothing(self):
        """Test that pure stopword text is empty"""
        assert list(tokenize("The the a an")) == []

    def test_tokens_are_long_and_meaningful(self, sample_lyrics):
        """Test every token has length >= 3 and is not a stopword"""
        tokens = list(tokenize(sample_lyrics))
        assert tokens
        for token in tokens:
            assert len(token) >= 3
            assert token not in STOP_WORDS

    def test_lowercase_and_punctuation(self):
        """Test case folding and punctuation stripping"""
        assert list(tokenize("FIRE! Fire, fire...")) == ['fire', 'fire', 'fire']

    def test_punctuation_splits_words(self):
        """Test characters outside [a-z0-9] act as separators"""
        assert list(tokenize("rock-n-roll heart_break")) == ['rock', 'roll', 'heart', 'break']

    def test_numbers_are_kept(self):
        """Test digits survive normalization"""
        assert list(tokenize("1999 party 99")) == ['1999', 'party']

    def test_non_latin_letters_are_dropped(self):
        """Test accented letters are treated as separators"""
        assert list(tokenize("café corazón")) == ['caf', 'coraz']

    def test_source_order_is_preserved(self):
        """Test tokens come out in source order"""
        assert list(tokenize("heart love heart pain")) == ['heart', 'love', 'heart', 'pain']

    def test_empty_input(self):
        """Test empty and None input"""
        assert list(tokenize("")) == []
        assert list(TokenStream(None)) == []

    def test_custom_minimum_length(self):
        """Test configurable minimum word length"""
        assert list(tokenize("sky blue ocean", min_length=5)) == ['ocean']

    def test_retokenizing_is_idempotent(self, sample_lyrics):
        """Test re-tokenizing space-joined tokens yields the same multiset"""
        first = list(tokenize(sample_lyrics))
        second = list(tokenize(" ".join(first)))
        assert Counter(first) == Counter(second)


class TestTokenStream:
    """Test stream behaviour"""

    def test_stream_is_restartable(self):
        """Test iterating twice gives the same tokens"""
        stream = TokenStream("love love pain")
        assert list(stream) == list(stream)
        assert stream.count() == 3

    def test_custom_stopwords(self):
        """Test an explicit stopword set replaces the default"""
        stream = TokenStream("the love song", stopwords=frozenset({'love'}))
        assert list(stream) == ['the', 'song']

    def test_ensure_sufficient_returns_stream(self):
        """Test a long enough stream passes the check"""
        stream = TokenStream("love love love pain pain heart")
        assert stream.ensure_sufficient(5) is stream

    def test_ensure_sufficient_raises(self):
        """Test too few tokens raise InsufficientContentError"""
        with pytest.raises(InsufficientContentError) as exc_info:
            TokenStream("love and the pain").ensure_sufficient(5)

        error = exc_info.value
        assert error.kind is FailureKind.INSUFFICIENT_CONTENT
        assert error.token_count == 2
        assert "Not enough meaningful words" in str(error)
