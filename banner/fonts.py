"""
Font registration and glyph metrics.

Families are registered once per process (at service start-up). Each
composition then asks the registry for a FontProvider, which loads Pillow
fonts by pixel size and measures strings.
"""

import logging
import os
from typing import Dict, Optional

from PIL import ImageFont

from .errors import FontNotRegisteredError

logger = logging.getLogger(__name__)

# Common system fonts, tried in order when no explicit path is registered
SYSTEM_FONT_PATHS = [
    "/System/Library/Fonts/Helvetica.ttc",  # macOS
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",  # Linux
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",  # Linux
    "C:\\Windows\\Fonts\\arial.ttf",  # Windows
]


class FontProvider:
    """
    Loads one font family at arbitrary pixel sizes.

    Loaded fonts are kept for the lifetime of the provider only, so a
    provider should be created per composition.
    """

    def __init__(self, family: str, font_path: Optional[str] = None):
        self.family = family
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.FreeTypeFont] = {}

    def get_font(self, size: int) -> ImageFont.FreeTypeFont:
        """Get the font at `size` pixels."""
        size = max(1, int(size))
        font = self._fonts.get(size)
        if font is None:
            if self.font_path:
                font = ImageFont.truetype(self.font_path, size)
            else:
                # Pillow's bundled font, scalable when FreeType is available
                font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return font

    def measure(self, text: str, font_size: int) -> float:
        """Rendered advance width of `text` at `font_size` pixels."""
        if not text:
            return 0.0
        return self.get_font(font_size).getlength(text)


class FontRegistry:
    """Process-wide mapping of family name to font file."""

    def __init__(self):
        self._families: Dict[str, Optional[str]] = {}

    def register(self, family: str, font_path: Optional[str] = None) -> Optional[str]:
        """
        Register a font family.

        Args:
            family: Name used to look the family up later
            font_path: TrueType/OpenType file. If missing or unreadable, the
                first available system font is used, then Pillow's bundled font.

        Returns:
            The font path actually registered (None for the bundled font)
        """
        resolved = None
        candidates = ([font_path] if font_path else []) + SYSTEM_FONT_PATHS

        for fp in candidates:
            if not os.path.exists(fp):
                if fp == font_path:
                    logger.warning(f"Font file not found for '{family}': {fp}")
                continue
            try:
                ImageFont.truetype(fp, 12)
            except OSError as e:
                logger.warning(f"Failed to load font {fp}: {e}")
                continue
            resolved = fp
            break

        self._families[family] = resolved
        logger.info(f"Registered font family '{family}' -> {resolved or 'bundled default'}")
        return resolved

    def is_registered(self, family: str) -> bool:
        return family in self._families

    def provider(self, family: str) -> FontProvider:
        """Create a fresh FontProvider for a registered family."""
        if family not in self._families:
            raise FontNotRegisteredError(f"Font family not registered: {family}")
        return FontProvider(family, self._families[family])
