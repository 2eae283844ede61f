import pytest
from PIL import Image

from banner import BannerConfig, FontProvider


class FixedWidthMetrics:
    """Every character is half the font size wide."""

    def measure(self, text, font_size):
        return len(text) * font_size * 0.5


@pytest.fixture
def metrics():
    return FixedWidthMetrics()


@pytest.fixture
def config():
    return BannerConfig()


@pytest.fixture
def font_provider():
    # Pillow's bundled font, independent of installed system fonts
    return FontProvider("test")


@pytest.fixture
def solid_image():
    def make(color="#ff0000", size=(100, 100)):
        return Image.new("RGB", size, color)
    return make
