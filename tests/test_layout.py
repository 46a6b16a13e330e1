"""Test layout generation"""

import random
import re

from lyrics_cloud.cloud.aggregator import WordStat
from lyrics_cloud.cloud.layout import WordCloudEntry, compute_size, layout

HSL_PATTERN = re.compile(r'^hsl\((\d{1,3}), 70%, 50%\)$')


class TestComputeSize:
    """Test deterministic font sizing"""

    def test_linear_bounds(self):
        """Test the minimum and maximum frequencies map to 14 and 54"""
        assert compute_size(1, 1, 5) == 14
        assert compute_size(5, 1, 5) == 54
        assert compute_size(3, 1, 5) == 34

    def test_equal_frequencies(self):
        """Test all-equal frequencies give the middle size"""
        assert compute_size(7, 7, 7) == 34


class TestLayout:
    """Test positioned entries"""

    def test_one_entry_per_stat_in_order(self, seeded_rng):
        stats = [WordStat("love", 3), WordStat("pain", 2), WordStat("heart", 1)]
        entries = layout(stats, seeded_rng)

        assert [entry.word for entry in entries] == ["love", "pain", "heart"]
        assert [entry.frequency for entry in entries] == [3, 2, 1]
        assert [entry.size_px for entry in entries] == [54, 34, 14]

    def test_attribute_ranges(self, seeded_rng):
        """Test position, rotation and color stay inside their domains"""
        stats = [WordStat(f"word{i}", i + 1) for i in range(200)]

        for entry in layout(stats, seeded_rng):
            assert 10 <= entry.x_percent <= 90
            assert 10 <= entry.y_percent <= 90
            assert entry.rotation_deg in (0, -45)
            match = HSL_PATTERN.match(entry.color_hsl)
            assert match is not None
            assert 0 <= int(match.group(1)) < 360
            assert 14 <= entry.size_px <= 54

    def test_rotation_is_minority(self, seeded_rng):
        """Test roughly 30% of words are rotated"""
        stats = [WordStat(f"word{i}", 1) for i in range(2000)]
        rotated = sum(1 for entry in layout(stats, seeded_rng) if entry.rotation_deg)
        assert 450 < rotated < 750

    def test_same_seed_same_layout(self):
        """Test a seeded source makes the layout reproducible"""
        stats = [WordStat("fire", 2), WordStat("night", 1)]
        assert layout(stats, random.Random(7)) == layout(stats, random.Random(7))

    def test_unseeded_layouts_differ(self):
        """Test the default random source varies between calls"""
        stats = [WordStat(f"word{i}", 1) for i in range(20)]
        assert layout(stats) != layout(stats)

    def test_empty(self):
        assert layout([]) == []

    def test_to_dict(self):
        entry = WordCloudEntry("fire", 2, 34.0, 50.0, 25.0, -45, "hsl(120, 70%, 50%)")
        assert entry.to_dict() == {
            'word': 'fire',
            'frequency': 2,
            'size': 34.0,
            'x': 50.0,
            'y': 25.0,
            'rotation': -45,
            'color': 'hsl(120, 70%, 50%)',
        }
