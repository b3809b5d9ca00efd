"""Text measurement and greedy word wrapping.

All widths and heights are returned in millimetres; font sizes are points.
Measurement relies on ReportLab's AFM metrics for the standard PDF fonts,
so the numbers match what the canvas will actually draw.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from reportlab.pdfbase import pdfmetrics

PT_TO_MM = 25.4 / 72.0

# Leading applied on top of the font's ascent-to-descent extent
LEADING_RATIO = 1.2


@dataclass(frozen=True)
class MeasuredLine:
    text: str
    width: float


@dataclass(frozen=True)
class TextMeasure:
    """Wrapped lines of a string plus the vertical metrics they need."""

    lines: tuple[MeasuredLine, ...]
    line_height: float
    ascent: float

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height

    @property
    def baseline_offset(self) -> float:
        """Distance from the top of a line box to its baseline."""
        half_leading = self.line_height * (LEADING_RATIO - 1) / (2 * LEADING_RATIO)
        return half_leading + self.ascent

    @property
    def widest(self) -> float:
        return max((line.width for line in self.lines), default=0.0)


def text_width(text: str, font: str, size: float) -> float:
    """Width of *text* in mm when set in *font* at *size* points."""
    return pdfmetrics.stringWidth(text, font, size) * PT_TO_MM


def line_metrics(font: str, size: float) -> tuple[float, float]:
    """Return ``(line_height, ascent)`` in mm for *font* at *size*.

    Line height follows the font's own ascent and descent, so two fonts
    at the same point size generally get different line heights.
    """
    ascent, descent = pdfmetrics.getAscentDescent(font, size)
    extent = (ascent - descent) * PT_TO_MM
    return extent * LEADING_RATIO, ascent * PT_TO_MM


@lru_cache(maxsize=4096)
def measure(text: str, font: str, size: float, max_width: float) -> TextMeasure:
    """Wrap *text* into lines no wider than *max_width* mm.

    Words are accumulated greedily and the line breaks before the word
    that would overflow. A single word wider than *max_width* sits alone
    on its own line and is never hyphenated. Explicit newlines start a
    new line. Empty or whitespace-only text yields no lines.
    """
    line_height, ascent = line_metrics(font, size)
    if not text or not text.strip():
        return TextMeasure(lines=(), line_height=line_height, ascent=ascent)

    space = text_width(" ", font, size)
    lines: list[MeasuredLine] = []
    for paragraph in text.strip().splitlines():
        words = paragraph.split()
        if not words:
            continue
        current: list[str] = []
        current_width = 0.0
        for word in words:
            w = text_width(word, font, size)
            if not current:
                current, current_width = [word], w
                continue
            candidate = current_width + space + w
            if candidate <= max_width:
                current.append(word)
                current_width = candidate
            else:
                lines.append(MeasuredLine(" ".join(current), current_width))
                current, current_width = [word], w
        lines.append(MeasuredLine(" ".join(current), current_width))

    return TextMeasure(lines=tuple(lines), line_height=line_height, ascent=ascent)


def truncate(text: str, limit: int) -> str:
    """Cut *text* to at most *limit* characters, ending with an ellipsis."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."
