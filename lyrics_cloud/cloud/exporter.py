"""
Raster exporter: renders a cloud layout to a PNG image with Pillow

The canvas has a fixed size and a solid dark background. Each word is drawn
in bold at twice its display size, centered on its percentage position,
rotated by its angle and backed by a soft drop shadow. Words are not fitted
or clipped to the canvas: long words near an edge are cut off by it.
"""

import io
from pathlib import Path
from typing import Dict, Optional, Sequence

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont

from ..config.settings import Settings, get_settings
from ..utils.helpers import create_export_filename, ensure_directory
from ..utils.logger import get_logger, log_performance
from .layout import WordCloudEntry

FALLBACK_FONTS = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")

SHADOW_COLOR = (0, 0, 0, 128)
SHADOW_OFFSET = (2, 2)
SHADOW_BLUR = 4

PNG_CONTENT_TYPE = "image/png"


class WordCloudExporter:
    """
    Renders WordCloudEntry lists to PNG

    Fonts are loaded once per pixel size and cached on the instance.
    """

    def __init__(
        self,
        width: int = 1200,
        height: int = 800,
        background: str = "#1a1a2e",
        font_path: str = ""
    ):
        self.width = width
        self.height = height
        self.background = ImageColor.getrgb(background)
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.ImageFont] = {}
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'WordCloudExporter':
        settings = settings or get_settings()
        return cls(
            width=settings.export.width,
            height=settings.export.height,
            background=settings.export.background,
            font_path=settings.export.font_path
        )

    def font(self, size: int):
        """
        Bold font at a pixel size

        Tries the configured font, then common bold system fonts, then
        Pillow's built-in font.
        """
        if size not in self._fonts:
            candidates = ([self.font_path] if self.font_path else []) + list(FALLBACK_FONTS)
            for candidate in candidates:
                try:
                    self._fonts[size] = ImageFont.truetype(candidate, size)
                    break
                except OSError:
                    continue
            else:
                self.logger.debug(f"No TrueType bold font found, using Pillow default at {size}px")
                self._fonts[size] = ImageFont.load_default(size=size)
        return self._fonts[size]

    def _render_word(self, entry: WordCloudEntry) -> Image.Image:
        """Draw one word with its shadow on a transparent, rotated layer"""
        font = self.font(max(1, round(entry.size_px * 2)))
        left, top, right, bottom = font.getbbox(entry.word)
        padding = SHADOW_BLUR * 2 + max(SHADOW_OFFSET)

        layer = Image.new(
            'RGBA',
            (right - left + 2 * padding, bottom - top + 2 * padding),
            (0, 0, 0, 0)
        )
        origin = (padding - left, padding - top)

        ImageDraw.Draw(layer).text(
            (origin[0] + SHADOW_OFFSET[0], origin[1] + SHADOW_OFFSET[1]),
            entry.word, font=font, fill=SHADOW_COLOR
        )
        layer = layer.filter(ImageFilter.GaussianBlur(SHADOW_BLUR / 2))

        fill = ImageColor.getrgb(entry.color_hsl) + (255,)
        ImageDraw.Draw(layer).text(origin, entry.word, font=font, fill=fill)

        if entry.rotation_deg:
            # Pillow rotates counter-clockwise; the layout angle is screen-space
            layer = layer.rotate(-entry.rotation_deg, resample=Image.Resampling.BICUBIC, expand=True)
        return layer

    def render(self, entries: Sequence[WordCloudEntry]) -> Image.Image:
        """
        Render entries onto a fresh canvas

        Returns:
            RGB image of the configured canvas size
        """
        canvas = Image.new('RGB', (self.width, self.height), self.background)

        for entry in entries:
            layer = self._render_word(entry)
            center_x = entry.x_percent / 100 * self.width
            center_y = entry.y_percent / 100 * self.height
            position = (round(center_x - layer.width / 2), round(center_y - layer.height / 2))
            # paste() clips at the canvas edge
            canvas.paste(layer, position, layer)

        return canvas

    @log_performance
    def export(self, entries: Sequence[WordCloudEntry]) -> bytes:
        """Render entries and encode the image as PNG bytes"""
        buffer = io.BytesIO()
        self.render(entries).save(buffer, format='PNG')
        return buffer.getvalue()

    def save(
        self,
        entries: Sequence[WordCloudEntry],
        directory,
        artist: str = "",
        song: str = ""
    ) -> Path:
        """
        Export entries to `<directory>/<artist>-<song>-wordcloud.png`

        Returns:
            Path of the written file
        """
        target = ensure_directory(directory) / create_export_filename(artist, song)
        target.write_bytes(self.export(entries))
        self.logger.info(f"Word cloud saved to {target}")
        return target
