"""
BannerRenderer - Pillow-based drawing for banner generation.

Draws layers in a fixed z-order:
1. Background fill and optional background image
2. Overlay image
3. Main text (shadow, stroke, fill per line)
4. Heading label with underline
5. Options list

Every text draw takes an immutable TextStyle, so no shadow or stroke
setting can leak from one layer into the next.
"""

import io
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont

from .fonts import FontProvider
from .layout import LayoutBox
from .models import BannerConfig, BannerRequest
from .text_fitter import TextBlock

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ShadowStyle:
    """Soft drop shadow."""
    offset: Tuple[int, int] = (4, 4)
    blur_radius: int = 6
    color: Color = (0, 0, 0, 128)


@dataclass(frozen=True)
class TextStyle:
    """Everything one text draw call needs besides the text and font."""
    fill: Color
    stroke_fill: Optional[Color] = None
    stroke_width: int = 0
    shadow: Optional[ShadowStyle] = None


def parse_color(color: str) -> Color:
    """Parse any Pillow color string ("#fff", "black", "rgb(...)") to RGBA."""
    return ImageColor.getcolor(color, "RGBA")


class BannerRenderer:
    """
    Renders banners using Pillow.

    The renderer keeps no per-banner state; everything it needs arrives
    with each call.
    """

    def __init__(self, config: BannerConfig, fonts: FontProvider):
        self.config = config
        self.fonts = fonts

    def create_canvas(self, width: int, height: int, color: str) -> Image.Image:
        """Allocate a fresh RGBA surface filled with `color`."""
        return Image.new("RGBA", (width, height), parse_color(color))

    def main_text_style(self, request: BannerRequest) -> TextStyle:
        cfg = self.config
        return TextStyle(
            fill=parse_color(request.text_color),
            stroke_fill=parse_color(request.stroke_color),
            stroke_width=request.stroke_width,
            shadow=ShadowStyle(
                offset=tuple(cfg.shadow_offset),
                blur_radius=cfg.shadow_blur,
                color=tuple(cfg.shadow_color)
            )
        )

    def draw_background(self, canvas: Image.Image, request: BannerRequest, region: LayoutBox):
        """Background image over the image region; the fill is already on the canvas."""
        if request.background_image is None:
            return

        bg = request.background_image.convert("RGBA").resize(
            (int(region.width), max(1, int(region.height))), Image.Resampling.LANCZOS
        )
        canvas.paste(bg, (int(region.x), int(region.y) + self.config.background_offset_y), bg)

    def draw_overlay(self, canvas: Image.Image, overlay: Image.Image, box: LayoutBox):
        resized = overlay.convert("RGBA").resize(
            (int(box.width), int(box.height)), Image.Resampling.LANCZOS
        )
        canvas.paste(resized, (int(box.x), int(box.y)), resized)

    def draw_text_line(
        self,
        canvas: Image.Image,
        text: str,
        center: Tuple[float, float],
        font: ImageFont.FreeTypeFont,
        style: TextStyle
    ):
        """
        Draw one line centered on `center`.

        Order is shadow, then stroke, then fill, so the stroke sits beneath
        the fill.
        """
        if style.shadow:
            self._draw_shadow(canvas, text, center, font, style)

        draw = ImageDraw.Draw(canvas)

        if style.stroke_width > 0 and style.stroke_fill:
            draw.text(
                center, text, font=font, anchor="mm",
                fill=style.stroke_fill,
                stroke_width=style.stroke_width,
                stroke_fill=style.stroke_fill
            )

        draw.text(center, text, font=font, anchor="mm", fill=style.fill)

    def _draw_shadow(
        self,
        canvas: Image.Image,
        text: str,
        center: Tuple[float, float],
        font: ImageFont.FreeTypeFont,
        style: TextStyle
    ):
        shadow = style.shadow
        cx = center[0] + shadow.offset[0]
        cy = center[1] + shadow.offset[1]

        # Blur only a padded patch around the text, clamped to the canvas
        probe = ImageDraw.Draw(canvas)
        left, top, right, bottom = probe.textbbox(
            (cx, cy), text, font=font, anchor="mm", stroke_width=style.stroke_width
        )
        pad = shadow.blur_radius * 3
        x0 = max(0, int(left) - pad)
        y0 = max(0, int(top) - pad)
        x1 = min(canvas.width, int(right) + pad + 1)
        y1 = min(canvas.height, int(bottom) + pad + 1)
        if x1 <= x0 or y1 <= y0:
            return

        layer = Image.new("RGBA", (x1 - x0, y1 - y0), (0, 0, 0, 0))
        ImageDraw.Draw(layer).text(
            (cx - x0, cy - y0), text, font=font, anchor="mm",
            fill=shadow.color,
            stroke_width=style.stroke_width,
            stroke_fill=shadow.color
        )
        if shadow.blur_radius > 0:
            layer = layer.filter(ImageFilter.GaussianBlur(shadow.blur_radius))

        canvas.alpha_composite(layer, dest=(x0, y0))

    def draw_block(
        self,
        canvas: Image.Image,
        block: TextBlock,
        box: LayoutBox,
        style: TextStyle,
        line_advance: Optional[float] = None
    ):
        """Draw each line of a block centered on the canvas midline."""
        font = self.fonts.get_font(block.font_size)
        advance = line_advance or block.line_height
        cx = canvas.width / 2

        for i, line in enumerate(block.lines):
            self.draw_text_line(canvas, line, (cx, box.y + advance * (i + 0.5)), font, style)

    def draw_underline(self, canvas: Image.Image, box: LayoutBox, color: Color):
        if box.width <= 0:
            return
        draw = ImageDraw.Draw(canvas)
        y = box.y + box.height / 2
        draw.line([(box.x, y), (box.x + box.width, y)], fill=color, width=max(1, int(box.height)))

    def render(
        self,
        canvas: Image.Image,
        request: BannerRequest,
        blocks: Dict,
        layout: Dict[str, LayoutBox]
    ):
        """
        Draw every layer onto `canvas` in place.

        Args:
            canvas: RGBA surface of request.width x request.height
            request: Resolved banner request
            blocks: Fitted text blocks ("main_text", "heading", "options")
            layout: Boxes from LayoutEngine.layout
        """
        # 1. Background
        self.draw_background(canvas, request, layout["image"])

        # 2. Overlay
        if request.overlay_image is not None and "overlay" in layout:
            self.draw_overlay(canvas, request.overlay_image, layout["overlay"])

        # 3. Main text
        self.draw_block(canvas, blocks["main_text"], layout["main_text"], self.main_text_style(request))

        # 4. Heading and underline
        heading_style = TextStyle(fill=parse_color(request.text_color))
        self.draw_block(canvas, blocks["heading"], layout["heading"], heading_style)
        self.draw_underline(canvas, layout["underline"], heading_style.fill)

        # 5. Options, in the display order chosen by the layout
        option_style = TextStyle(fill=parse_color(request.option_color))
        options = blocks.get("options") or []
        for name, box in layout.items():
            if not name.startswith("option_"):
                continue
            block = options[int(name[len("option_"):])]
            self.draw_block(
                canvas, block, box, option_style,
                line_advance=block.font_size * self.config.option_spacing
            )


def export_image(image: Image.Image, format: str = "PNG") -> bytes:
    """Serialize a finished banner to bytes (opaque RGB)."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format=format)
    return buffer.getvalue()
