"""
LayoutEngine - Region partitioning and block placement for banners.

Handles:
1. Fixed-ratio split into image region (top) and text region (bottom)
2. Main text centered in the text region, raised by a configurable offset
3. Heading label and underline beneath the main text
4. Options list below the heading, widest option first
5. Uniform scaling and centering of the overlay image
"""

import logging
from typing import Dict, List
from dataclasses import dataclass

from PIL import Image

from .errors import LayoutError
from .models import BannerConfig, BannerRequest
from .text_fitter import TextBlock, TextMetrics

logger = logging.getLogger(__name__)

# Float slack when comparing box edges with the canvas
BOUNDS_TOLERANCE = 1e-6


@dataclass
class LayoutBox:
    """A computed region of the canvas, in pixels."""
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


class LayoutEngine:
    """
    Computes placement boxes for every banner layer.

    The returned mapping holds `image`, `text`, `main_text`, `heading`,
    `underline`, `overlay` (only with an overlay image) and one
    `option_<index>` per non-empty option, inserted in display order.
    """

    def __init__(self, config: BannerConfig, metrics: TextMetrics):
        """
        Initialize layout engine.

        Args:
            config: Layout constants
            metrics: Glyph metrics used to order options by width
        """
        self.config = config
        self.metrics = metrics

    def image_region(self, width: int, height: int) -> LayoutBox:
        return LayoutBox(0, 0, width, int(height * self.config.image_height_ratio))

    def text_region(self, width: int, height: int) -> LayoutBox:
        image_height = int(height * self.config.image_height_ratio)
        return LayoutBox(0, image_height, width, height - image_height)

    def block_width(self, block: TextBlock) -> float:
        """Width of the widest line of a block."""
        return max((self.metrics.measure(line, block.font_size) for line in block.lines), default=0.0)

    def order_options(self, options: List[TextBlock]) -> List[int]:
        """
        Indices of non-empty options, widest first.

        Ties keep the caller's order.
        """
        indexed = [(i, self.block_width(block)) for i, block in enumerate(options) if not block.is_empty]
        return [i for i, _ in sorted(indexed, key=lambda item: -item[1])]

    def overlay_box(self, overlay: Image.Image, region: LayoutBox, request: BannerRequest) -> LayoutBox:
        """Scale the overlay uniformly from its height and center it in `region`."""
        target_height = request.height * self.config.overlay_height_ratio * request.scale_factor
        scale = target_height / overlay.height

        width = max(1, round(overlay.width * scale))
        height = max(1, round(overlay.height * scale))

        return LayoutBox(
            x=region.x + (region.width - width) // 2,
            y=region.y + (region.height - height) // 2,
            width=width,
            height=height
        )

    def _centered(self, y: float, width: float, height: float, canvas_width: int) -> LayoutBox:
        return LayoutBox((canvas_width - width) / 2, y, width, height)

    def main_text_box(self, text: LayoutBox, block: TextBlock, canvas_width: int) -> LayoutBox:
        """Main text centered in the text region, shifted up to leave room below."""
        center = text.center_y - text.height * self.config.main_text_offset
        return self._centered(center - block.height / 2, self.block_width(block), block.height, canvas_width)

    def options_top(self, main_box: LayoutBox, heading: TextBlock) -> float:
        """Y where the first option starts, below the heading and its underline."""
        cfg = self.config
        return (
            main_box.bottom + cfg.heading_padding + heading.height
            + cfg.underline_gap + cfg.underline_width + cfg.options_padding
        )

    def layout(self, request: BannerRequest, blocks: Dict) -> Dict[str, LayoutBox]:
        """
        Calculate the complete banner layout.

        Args:
            request: Resolved banner request
            blocks: Fitted blocks: "main_text" and "heading" TextBlocks and
                "options", a list of TextBlocks in the caller's order

        Returns:
            Mapping of block name to LayoutBox

        Raises:
            LayoutError: If a box has negative size or a text box leaves the canvas
        """
        if request.width <= 0 or request.height <= 0:
            raise LayoutError(f"Invalid canvas size: {request.width}x{request.height}")

        cfg = self.config
        canvas_width = request.width
        boxes: Dict[str, LayoutBox] = {}

        image = self.image_region(request.width, request.height)
        text = self.text_region(request.width, request.height)
        boxes["image"] = image
        boxes["text"] = text

        if request.overlay_image is not None:
            boxes["overlay"] = self.overlay_box(request.overlay_image, image, request)

        boxes["main_text"] = self.main_text_box(text, blocks["main_text"], canvas_width)

        heading = blocks["heading"]
        heading_box = self._centered(
            boxes["main_text"].bottom + cfg.heading_padding,
            self.block_width(heading), heading.height, canvas_width
        )
        boxes["heading"] = heading_box
        boxes["underline"] = self._centered(
            heading_box.bottom + cfg.underline_gap, heading_box.width, cfg.underline_width, canvas_width
        )

        y = self.options_top(boxes["main_text"], heading)
        options = blocks.get("options") or []
        for index in self.order_options(options):
            option = options[index]
            height = len(option.lines) * option.font_size * cfg.option_spacing
            boxes[f"option_{index}"] = self._centered(y, self.block_width(option), height, canvas_width)
            y += height

        self._validate(boxes, request.height)
        logger.debug(f"Layout for {request.width}x{request.height}: {len(boxes)} boxes")
        return boxes

    def _validate(self, boxes: Dict[str, LayoutBox], canvas_height: int):
        for name, box in boxes.items():
            if box.width < 0 or box.height < 0:
                raise LayoutError(f"Negative box for '{name}': {box.width}x{box.height}")
            # Overlay may be cropped by the canvas; text must not be
            if name in ("image", "text", "overlay"):
                continue
            if box.y < 0 or box.bottom > canvas_height + BOUNDS_TOLERANCE:
                raise LayoutError(
                    f"Box '{name}' spans y={box.y:.1f}..{box.bottom:.1f}, outside canvas height {canvas_height}"
                )
