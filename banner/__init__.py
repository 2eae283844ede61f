# Banner Generator Module
# Text fitting + fixed-ratio layout + layered Pillow rendering

from .generator import BannerComposer
from .models import BannerConfig, BannerRequest
from .presets import PlatformPresets, get_dimensions
from .text_fitter import TextFitter, TextBlock
from .layout import LayoutEngine, LayoutBox
from .renderer import BannerRenderer, TextStyle, ShadowStyle
from .fonts import FontRegistry, FontProvider
from .sources import CsvRowSource, HttpImageSource
from .errors import (
    BannerError,
    MissingInputError,
    FetchError,
    DecodeError,
    LayoutError,
    FontNotRegisteredError,
)

__all__ = [
    "BannerComposer",
    "BannerConfig",
    "BannerRequest",
    "PlatformPresets",
    "get_dimensions",
    "TextFitter",
    "TextBlock",
    "LayoutEngine",
    "LayoutBox",
    "BannerRenderer",
    "TextStyle",
    "ShadowStyle",
    "FontRegistry",
    "FontProvider",
    "CsvRowSource",
    "HttpImageSource",
    "BannerError",
    "MissingInputError",
    "FetchError",
    "DecodeError",
    "LayoutError",
    "FontNotRegisteredError",
]
