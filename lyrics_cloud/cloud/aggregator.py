"""
Frequency aggregation: tokens -> ranked WordStat list
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Dict, Any

TOP_N = 50


@dataclass(frozen=True)
class WordStat:
    """A distinct token and how often it occurs"""
    word: str
    frequency: int

    def to_dict(self) -> Dict[str, Any]:
        return {'word': self.word, 'frequency': self.frequency}


def aggregate(tokens: Iterable[str], top_n: int = TOP_N) -> List[WordStat]:
    """
    Count tokens and keep the most frequent ones

    Ties keep first-occurrence order: Counter preserves insertion order and
    sorted() is stable.

    Args:
        tokens: Token stream in source order
        top_n: Maximum number of entries returned

    Returns:
        WordStat list ordered by descending frequency
    """
    counts = Counter(tokens)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [WordStat(word=word, frequency=frequency) for word, frequency in ranked[:top_n]]
