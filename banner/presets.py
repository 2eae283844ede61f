"""
Canvas presets and request defaults for banner generation.

Supports common social media formats:
- Instagram Feed (Portrait, Square, Landscape)
- Instagram Story / WhatsApp Status
- Custom "WxH" dimensions
"""

import re
from enum import Enum
from typing import Tuple, Optional
from dataclasses import dataclass


# Request defaults, applied once when the request is resolved
DEFAULT_WIDTH = 1080
DEFAULT_HEIGHT = 1350
DEFAULT_BG_COLOR = "#ffffff"
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_OPTION_COLOR = "#000000"
DEFAULT_STROKE_COLOR = "black"
DEFAULT_STROKE_WIDTH = 3
DEFAULT_SCALE_FACTOR = 0.3
DEFAULT_MAIN_TEXT = "Default Text"
DEFAULT_OPTIONS = ("Option 1", "Option 2", "Option 3")

# Upper bounds on request values; a 4096x4096 RGBA canvas is 64 MiB
MAX_DIMENSION = 4096
MAX_SCALE_FACTOR = 1.0


class PlatformPresets(Enum):
    """Common platform dimension presets."""

    IG_FEED_PORTRAIT = "ig_portrait"    # 4:5, the default banner
    IG_FEED_SQUARE = "ig_square"        # 1:1
    IG_FEED_LANDSCAPE = "ig_landscape"  # 1.91:1
    IG_STORY = "ig_story"               # 9:16 vertical
    WA_STATUS = "wa_status"             # 9:16 (same as IG Story)


@dataclass
class DimensionSpec:
    """Specification for banner dimensions."""
    width: int
    height: int
    aspect_ratio: str
    description: str

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


PRESET_DIMENSIONS = {
    PlatformPresets.IG_FEED_PORTRAIT: DimensionSpec(
        width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT,
        aspect_ratio="4:5",
        description="Instagram Feed (Portrait)"
    ),
    PlatformPresets.IG_FEED_SQUARE: DimensionSpec(
        width=1080, height=1080,
        aspect_ratio="1:1",
        description="Instagram Feed (Square)"
    ),
    PlatformPresets.IG_FEED_LANDSCAPE: DimensionSpec(
        width=1080, height=566,
        aspect_ratio="1.91:1",
        description="Instagram Feed (Landscape)"
    ),
    PlatformPresets.IG_STORY: DimensionSpec(
        width=1080, height=1920,
        aspect_ratio="9:16",
        description="Instagram Story / Reels"
    ),
    PlatformPresets.WA_STATUS: DimensionSpec(
        width=1080, height=1920,
        aspect_ratio="9:16",
        description="WhatsApp Status"
    ),
}


def get_dimensions(
    preset: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None
) -> Tuple[int, int]:
    """
    Get banner dimensions from a preset, overridden by explicit values.

    Args:
        preset: Platform preset name (e.g., "ig_portrait") or "WxH"
        width: Explicit width, wins over the preset
        height: Explicit height, wins over the preset

    Returns:
        Tuple of (width, height)

    Examples:
        >>> get_dimensions()
        (1080, 1350)
        >>> get_dimensions(preset="ig_story")
        (1080, 1920)
        >>> get_dimensions(preset="ig_story", height=1000)
        (1080, 1000)
    """
    base_width, base_height = PRESET_DIMENSIONS[PlatformPresets.IG_FEED_PORTRAIT].size

    if preset:
        preset_lower = preset.lower().replace("-", "_").replace(" ", "_")

        for p, spec in PRESET_DIMENSIONS.items():
            if p.value == preset_lower:
                base_width, base_height = spec.size
                break
        else:
            parsed = parse_dimension_string(preset_lower)
            if parsed:
                base_width, base_height = parsed
            else:
                raise ValueError(f"Unknown preset: {preset}")

    width, height = width or base_width, height or base_height
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise ValueError(f"Dimensions {width}x{height} exceed the {MAX_DIMENSION}px limit")

    return (width, height)


def get_preset_options() -> list:
    """Get list of available preset options for user selection."""
    return [
        {
            "id": spec.value,
            "name": dim.description,
            "dimensions": f"{dim.width}x{dim.height}",
            "aspect_ratio": dim.aspect_ratio
        }
        for spec, dim in PRESET_DIMENSIONS.items()
    ]


def parse_dimension_string(dim_str: str) -> Optional[Tuple[int, int]]:
    """
    Parse dimension string like "1080x1350" or "1080 x 1350".

    Returns:
        Tuple of (width, height) or None if parsing fails
    """
    match = re.fullmatch(r'(\d+)\s*[x×]\s*(\d+)', dim_str.strip(), re.IGNORECASE)
    if match:
        return (int(match.group(1)), int(match.group(2)))

    return None
