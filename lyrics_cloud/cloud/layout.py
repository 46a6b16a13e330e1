"""
Layout generator: WordStat list -> styled, positioned WordCloudEntry list

Sizing is deterministic. Position, rotation and color are random on every
call, so two layouts of the same stats differ. Words may overlap: there is no
collision avoidance.

Attributes per entry:
- size: linear map of frequency into [14, 54]; 34 when all frequencies match
- x, y: independent uniform percentages in [10, 90]
- rotation: 0 degrees with probability 0.7, otherwise -45 degrees
- color: `hsl(<hue>, 70%, 50%)` with hue uniform in [0, 360)
"""

import random
from dataclasses import dataclass
from typing import Sequence, List, Optional, Dict, Any

from .aggregator import WordStat

MIN_SIZE = 14.0
SIZE_RANGE = 40.0
UNIFORM_SIZE = 34.0

MIN_POSITION = 10.0
MAX_POSITION = 90.0

ROTATED_ANGLE = -45
ROTATION_PROBABILITY = 0.3

SATURATION = 70
LIGHTNESS = 50


@dataclass(frozen=True)
class WordCloudEntry:
    """
    A word ready to be drawn

    Attributes:
        word: Token text
        frequency: Occurrence count
        size_px: Display font size in pixels (exports draw at twice this size)
        x_percent: Horizontal center as a percentage of the canvas width
        y_percent: Vertical center as a percentage of the canvas height
        rotation_deg: 0 or -45
        color_hsl: CSS-style HSL color string
    """
    word: str
    frequency: int
    size_px: float
    x_percent: float
    y_percent: float
    rotation_deg: int
    color_hsl: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'word': self.word,
            'frequency': self.frequency,
            'size': self.size_px,
            'x': self.x_percent,
            'y': self.y_percent,
            'rotation': self.rotation_deg,
            'color': self.color_hsl,
        }


def compute_size(frequency: int, min_frequency: int, max_frequency: int) -> float:
    """Font size for a frequency given the frequency bounds of one generation"""
    if min_frequency == max_frequency:
        return UNIFORM_SIZE
    return (frequency - min_frequency) / (max_frequency - min_frequency) * SIZE_RANGE + MIN_SIZE


def random_color(rng: random.Random) -> str:
    hue = int(rng.random() * 360)
    return f"hsl({hue}, {SATURATION}%, {LIGHTNESS}%)"


def layout(stats: Sequence[WordStat], rng: Optional[random.Random] = None) -> List[WordCloudEntry]:
    """
    Generate one cloud layout

    Args:
        stats: Ranked word statistics
        rng: Random source; pass a seeded `random.Random` for reproducible
            layouts, defaults to a fresh unseeded generator

    Returns:
        One entry per stat, in the same order
    """
    if not stats:
        return []

    rng = rng or random.Random()
    frequencies = [stat.frequency for stat in stats]
    min_frequency, max_frequency = min(frequencies), max(frequencies)

    entries = []
    for stat in stats:
        entries.append(WordCloudEntry(
            word=stat.word,
            frequency=stat.frequency,
            size_px=compute_size(stat.frequency, min_frequency, max_frequency),
            x_percent=rng.uniform(MIN_POSITION, MAX_POSITION),
            y_percent=rng.uniform(MIN_POSITION, MAX_POSITION),
            rotation_deg=ROTATED_ANGLE if rng.random() < ROTATION_PROBABILITY else 0,
            color_hsl=random_color(rng),
        ))

    return entries
