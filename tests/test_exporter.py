"""Test PNG export"""

import io

from PIL import Image

from lyrics_cloud.cloud.exporter import WordCloudExporter
from lyrics_cloud.cloud.layout import WordCloudEntry

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


def make_entry(word="fire", rotation=0, x=50.0, y=50.0, size=34.0):
    return WordCloudEntry(word, 3, size, x, y, rotation, "hsl(0, 70%, 50%)")


class TestWordCloudExporter:
    """Test rendering onto the fixed canvas"""

    def test_export_is_png_of_canvas_size(self):
        exporter = WordCloudExporter(width=1200, height=800)
        data = exporter.export([make_entry(), make_entry("night", rotation=-45, x=20, y=70)])

        assert data.startswith(PNG_SIGNATURE)
        image = Image.open(io.BytesIO(data))
        assert image.size == (1200, 800)

    def test_background_color(self):
        """Test untouched pixels keep the background"""
        image = WordCloudExporter(width=400, height=300).render([make_entry(size=14)])
        assert image.getpixel((0, 0)) == (0x1a, 0x1a, 0x2e)
        assert image.getpixel((399, 299)) == (0x1a, 0x1a, 0x2e)

    def test_word_is_drawn_at_its_position(self):
        """Test pixels near the word center differ from the background"""
        image = WordCloudExporter(width=400, height=300).render([make_entry("mmmmmm", size=40)])
        center = image.crop((150, 120, 250, 180))
        colors = {color for _, color in center.getcolors(maxcolors=100000)}
        assert colors != {(0x1a, 0x1a, 0x2e)}

    def test_edge_words_are_clipped_not_fitted(self):
        """Test a huge word at the edge renders without error"""
        entry = make_entry("extraordinarilylongword", x=90, y=90, size=54)
        image = WordCloudExporter(width=300, height=200).render([entry])
        assert image.size == (300, 200)

    def test_empty_layout(self):
        image = Image.open(io.BytesIO(WordCloudExporter(width=50, height=40).export([])))
        assert image.getcolors() == [(50 * 40, (0x1a, 0x1a, 0x2e))]

    def test_fonts_are_cached(self):
        exporter = WordCloudExporter()
        assert exporter.font(20) is exporter.font(20)

    def test_missing_font_path_falls_back(self, temp_dir):
        """Test an unreadable configured font does not break rendering"""
        exporter = WordCloudExporter(width=100, height=100, font_path=str(temp_dir / "missing.ttf"))
        assert exporter.export([make_entry()]).startswith(PNG_SIGNATURE)

    def test_save_uses_export_filename(self, temp_dir):
        exporter = WordCloudExporter(width=100, height=100)
        path = exporter.save([make_entry()], temp_dir / "out", "AC/DC", "Back In Black")

        assert path == temp_dir / "out" / "ac-dc-back-in-black-wordcloud.png"
        assert path.read_bytes().startswith(PNG_SIGNATURE)

    def test_from_settings(self, test_settings):
        exporter = WordCloudExporter.from_settings(test_settings)
        assert (exporter.width, exporter.height) == (300, 200)
        assert exporter.background == (0x1a, 0x1a, 0x2e)
