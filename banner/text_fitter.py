"""
TextFitter - Font-size search and line wrapping for a text block.

Handles:
1. Short text (up to 4 words) kept on a single line
2. Greedy word wrapping for longer text
3. Linear downward font-size search until the block fits its box
4. Size floor of 1px, where overflow is accepted
"""

import logging
from dataclasses import dataclass, field
from typing import List, Protocol

logger = logging.getLogger(__name__)

LINE_HEIGHT_RATIO = 1.2
SHORT_TEXT_MAX_WORDS = 4
MIN_FONT_SIZE = 1


class TextMetrics(Protocol):
    """Anything that can measure a string's pixel width at a font size."""

    def measure(self, text: str, font_size: int) -> float:
        ...


@dataclass
class TextBlock:
    """Wrapped lines of a text block and the font size they were fitted at."""
    lines: List[str] = field(default_factory=list)
    font_size: int = MIN_FONT_SIZE

    @property
    def line_height(self) -> float:
        return self.font_size * LINE_HEIGHT_RATIO

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height

    @property
    def is_empty(self) -> bool:
        return not self.lines


class TextFitter:
    """
    Fits text into a bounding box by shrinking the font one pixel at a time.

    Width is enforced per line while wrapping; height only after a complete
    wrap, so a height violation re-wraps from scratch at the next size down.
    """

    def __init__(self, metrics: TextMetrics):
        self.metrics = metrics

    def fit(
        self,
        text: str,
        max_width: float,
        max_height: float,
        initial_font_size: int
    ) -> TextBlock:
        """
        Wrap `text` and pick the largest font size that fits.

        Args:
            text: Text to fit (may be empty)
            max_width: Maximum line width in pixels
            max_height: Maximum block height in pixels
            initial_font_size: Size the search starts from

        Returns:
            TextBlock with wrapped lines and the chosen font size
        """
        if max_width <= 0 or max_height <= 0:
            raise ValueError(f"Fit box must be positive, got {max_width}x{max_height}")
        if initial_font_size < MIN_FONT_SIZE:
            raise ValueError(f"Initial font size must be >= {MIN_FONT_SIZE}, got {initial_font_size}")

        words = (text or "").split()
        if not words:
            return TextBlock(lines=[], font_size=initial_font_size)

        if len(words) <= SHORT_TEXT_MAX_WORDS:
            block = self._fit_single_line(" ".join(words), max_width, max_height, initial_font_size)
        else:
            block = self._fit_wrapped(words, max_width, max_height, initial_font_size)

        logger.debug(f"Fitted {len(words)} words into {len(block.lines)} lines at {block.font_size}px")
        return block

    def _fit_single_line(self, line: str, max_width: float, max_height: float, font_size: int) -> TextBlock:
        while font_size > MIN_FONT_SIZE and (
            self.metrics.measure(line, font_size) > max_width
            or font_size * LINE_HEIGHT_RATIO > max_height
        ):
            font_size -= 1

        return TextBlock(lines=[line], font_size=font_size)

    def _fit_wrapped(self, words: List[str], max_width: float, max_height: float, font_size: int) -> TextBlock:
        while True:
            lines = self.wrap(words, max_width, font_size)
            if font_size <= MIN_FONT_SIZE or self._fits(lines, max_width, max_height, font_size):
                return TextBlock(lines=lines, font_size=font_size)
            font_size -= 1

    def _fits(self, lines: List[str], max_width: float, max_height: float, font_size: int) -> bool:
        if len(lines) * font_size * LINE_HEIGHT_RATIO > max_height:
            return False
        # A lone word can still be wider than the box
        return all(self.metrics.measure(line, font_size) <= max_width for line in lines)

    def wrap(self, words: List[str], max_width: float, font_size: int) -> List[str]:
        """
        Greedily pack words into lines no wider than `max_width`.

        Words are never split: a word wider than the box gets its own line.
        """
        lines = []
        line = ""

        for word in words:
            candidate = f"{line} {word}" if line else word
            if not line or self.metrics.measure(candidate, font_size) <= max_width:
                line = candidate
            else:
                lines.append(line)
                line = word

        if line:
            lines.append(line)

        return lines
