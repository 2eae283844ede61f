"""
BannerComposer - Main orchestrator for banner generation.

Combines:
- TextFitter: font-size fit and wrapping per text block
- LayoutEngine: region partitioning and placement
- BannerRenderer: layered drawing with Pillow

All inputs (resolved text, decoded images) must be materialized before
compose() is called; composition itself is synchronous and does no I/O.
"""

import logging
from typing import Dict, Tuple

from PIL import Image

from .errors import LayoutError, MissingInputError
from .fonts import FontProvider, FontRegistry
from .layout import LayoutBox, LayoutEngine
from .models import BannerConfig, BannerRequest
from .renderer import BannerRenderer, export_image
from .text_fitter import LINE_HEIGHT_RATIO, TextBlock, TextFitter

logger = logging.getLogger(__name__)


class BannerComposer:
    """
    Main orchestrator for banner generation.

    Workflow:
    1. Validate the resolved request
    2. Scale the heading to the text region, fit main text, heading and each option (TextFitter)
    3. Calculate placement boxes (LayoutEngine)
    4. Draw all layers on a fresh canvas (BannerRenderer)
    5. Encode to PNG
    """

    def __init__(self, config: BannerConfig, fonts: FontRegistry):
        """
        Initialize composer.

        Args:
            config: Layout and typography constants
            fonts: Registry holding config.font_family
        """
        self.config = config
        self.fonts = fonts

    def _check_inputs(self, request: BannerRequest):
        if request.main_text is None:
            raise MissingInputError("Main text was not resolved")
        if request.options is None:
            raise MissingInputError("Options were not resolved")
        for name in ("background_image", "overlay_image"):
            value = getattr(request, name)
            if value is not None and not isinstance(value, Image.Image):
                raise MissingInputError(f"{name} is not a decoded image")

    def fit_blocks(self, request: BannerRequest, fitter: TextFitter, layout_engine: LayoutEngine) -> Dict:
        """
        Fit every text block of the banner.

        Options share the band left below the fitted main text and heading,
        measured with the same advance the layout uses to stack them.
        """
        cfg = layout_engine.config
        text_region = layout_engine.text_region(request.width, request.height)
        if text_region.height <= 0:
            raise LayoutError(f"Text region has no height ({text_region.height}px)")

        main_text = fitter.fit(
            request.main_text,
            max_width=request.width * cfg.main_text_width_ratio,
            max_height=text_region.height * cfg.main_text_height_ratio,
            initial_font_size=cfg.main_text_font_size
        )

        heading = TextBlock(lines=[cfg.heading_text] if cfg.heading_text else [], font_size=cfg.heading_font_size)

        main_box = layout_engine.main_text_box(text_region, main_text, request.width)
        band = text_region.bottom - layout_engine.options_top(main_box, heading)
        count = sum(1 for option in request.options if option and option.split())
        if count == 0:
            options = [TextBlock(lines=[], font_size=cfg.option_font_size) for _ in request.options]
            return {"main_text": main_text, "heading": heading, "options": options}
        if band <= 0:
            raise LayoutError(f"No room left for options ({band:.1f}px below the heading)")

        # Fitter heights use LINE_HEIGHT_RATIO; layout advances by option_spacing
        option_height = band / count * LINE_HEIGHT_RATIO / cfg.option_spacing
        options = [
            fitter.fit(
                option,
                max_width=request.width * cfg.option_width_ratio,
                max_height=option_height,
                initial_font_size=cfg.option_font_size
            )
            for option in request.options
        ]

        return {"main_text": main_text, "heading": heading, "options": options}

    def plan(self, request: BannerRequest, provider: FontProvider) -> Tuple[BannerConfig, Dict, Dict[str, LayoutBox]]:
        """
        Fit and place every block for `request`.

        Returns:
            Tuple of (config fitted to the text region, blocks, layout)
        """
        text_region = LayoutEngine(self.config, provider).text_region(request.width, request.height)
        if text_region.height <= 0:
            raise LayoutError(f"Text region has no height ({text_region.height}px)")

        config = self.config.fitted_to(text_region.height)
        if config is not self.config:
            logger.debug(f"Heading scaled to {config.heading_font_size}px for a {text_region.height}px text region")

        layout_engine = LayoutEngine(config, provider)
        blocks = self.fit_blocks(request, TextFitter(provider), layout_engine)
        return config, blocks, layout_engine.layout(request, blocks)

    def render(self, request: BannerRequest) -> Image.Image:
        """
        Compose the banner and return the RGBA canvas.

        Args:
            request: Fully-resolved banner request

        Returns:
            Canvas of exactly request.width x request.height
        """
        self._check_inputs(request)

        provider = self.fonts.provider(self.config.font_family)
        config, blocks, layout = self.plan(request, provider)
        logger.info(
            f"Main text: {len(blocks['main_text'].lines)} lines at {blocks['main_text'].font_size}px, "
            f"{len(blocks['options'])} options"
        )

        renderer = BannerRenderer(config, provider)
        canvas = renderer.create_canvas(request.width, request.height, request.background_color)
        renderer.render(canvas, request, blocks, layout)
        return canvas

    def compose(self, request: BannerRequest) -> bytes:
        """Compose the banner and encode it as PNG bytes."""
        logger.info(f"Composing {request.width}x{request.height} banner")
        canvas = self.render(request)
        png = export_image(canvas)
        logger.info(f"Banner composed: {len(png)} bytes")
        return png
