"""
Core data models for banner composition.

BannerRequest is built once per call from the resolved query/CSV values and
consumed by BannerComposer. BannerConfig carries the tunable layout constants
and is passed to the composer at construction.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from PIL import Image

from .presets import (
    DEFAULT_BG_COLOR,
    DEFAULT_HEIGHT,
    DEFAULT_MAIN_TEXT,
    DEFAULT_OPTION_COLOR,
    DEFAULT_SCALE_FACTOR,
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    DEFAULT_TEXT_COLOR,
    DEFAULT_WIDTH,
)
from .text_fitter import LINE_HEIGHT_RATIO


@dataclass
class BannerRequest:
    """Fully-resolved input for a single banner."""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    background_color: str = DEFAULT_BG_COLOR
    text_color: str = DEFAULT_TEXT_COLOR
    option_color: str = DEFAULT_OPTION_COLOR
    stroke_color: str = DEFAULT_STROKE_COLOR
    stroke_width: int = DEFAULT_STROKE_WIDTH
    scale_factor: float = DEFAULT_SCALE_FACTOR  # Extra scale for the overlay image
    main_text: Optional[str] = DEFAULT_MAIN_TEXT
    options: Optional[List[str]] = field(default_factory=list)
    background_image: Optional[Image.Image] = None
    overlay_image: Optional[Image.Image] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {self.width}x{self.height}")
        if self.stroke_width < 0:
            raise ValueError(f"Stroke width must be >= 0, got {self.stroke_width}")
        if self.scale_factor <= 0:
            raise ValueError(f"Scale factor must be > 0, got {self.scale_factor}")


@dataclass(frozen=True)
class BannerConfig:
    """Layout and typography constants shared by every composition."""
    font_family: str = "default"
    heading_text: str = "Options"

    # Vertical partition
    image_height_ratio: float = 0.67         # Top band for background/overlay
    overlay_height_ratio: float = 0.7        # Overlay height vs canvas, before scale_factor
    background_offset_y: int = 0

    # Main text block
    main_text_font_size: int = 70
    main_text_width_ratio: float = 0.8
    main_text_height_ratio: float = 0.4      # Of the text region
    main_text_offset: float = 0.2            # Upward shift, fraction of text region

    # Heading label
    heading_font_size: int = 40
    heading_padding: int = 20
    underline_gap: int = 6
    underline_width: int = 3

    # Options list
    option_font_size: int = 45
    option_width_ratio: float = 0.8
    options_padding: int = 15
    option_spacing: float = 1.5              # Line advance as a multiple of font size
    chrome_height_ratio: float = 0.25        # Cap on heading, underline and paddings, of the text region

    # Main text shadow
    shadow_offset: tuple = (4, 4)
    shadow_blur: int = 6
    shadow_color: tuple = (0, 0, 0, 128)

    @property
    def chrome_height(self) -> float:
        """Space between the bottom of the main text and the first option."""
        heading = self.heading_font_size * LINE_HEIGHT_RATIO if self.heading_text else 0
        return self.heading_padding + heading + self.underline_gap + self.underline_width + self.options_padding

    def fitted_to(self, text_height: float) -> "BannerConfig":
        """
        Config for a text region `text_height` pixels tall.

        The heading, underline and their paddings are scaled down together
        when they would take more than chrome_height_ratio of the region,
        so short canvases keep room for the options.
        """
        limit = text_height * self.chrome_height_ratio
        if self.chrome_height <= limit:
            return self

        scale = limit / self.chrome_height
        return replace(
            self,
            heading_font_size=max(1, int(self.heading_font_size * scale)),
            heading_padding=int(self.heading_padding * scale),
            underline_gap=int(self.underline_gap * scale),
            underline_width=max(1, int(self.underline_width * scale)),
            options_padding=int(self.options_padding * scale),
        )
