"""Content blocks handed to the flow layout engine.

A block is one semantic unit of a recipe (title, ingredient list, ...) or
of the front matter. Text blocks know how to wrap themselves to a width;
the engine decides where they go.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..core.models import RasterImage
from ..generators.templates import Decoration
from .commands import RGB, TextAlign
from .decorations import chef_table_height
from .text import measure

UNDERLINE_GAP = 2.0
PHOTO_HEIGHT = 60.0


class BlockKind(str, Enum):
    TITLE = "title"
    DESCRIPTION = "description"
    META = "meta"
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"
    NOTES = "notes"
    NUTRITION = "nutrition"
    TIPS = "tips"
    PHOTO = "photo"
    TOC_HEADING = "toc_heading"
    TOC_ENTRY = "toc_entry"
    SECTION_HEADING = "section_heading"


@dataclass(frozen=True)
class Paragraph:
    text: str
    font: str
    size: float
    color: RGB = (0, 0, 0)
    indent: float = 0.0
    space_before: float = 0.0


@dataclass(frozen=True)
class LaidLine:
    """One wrapped line, ready to be positioned."""

    text: str
    width: float
    font: str
    size: float
    color: RGB
    indent: float
    space_before: float
    line_height: float
    baseline_offset: float

    @property
    def advance(self) -> float:
        return self.space_before + self.line_height


@dataclass(frozen=True)
class TextBlock:
    """Paragraphs of text placed as one unit.

    Splittable blocks (long free text) may break between lines across a
    page boundary; the first ``keep_lines`` lines always stay together.
    ``padding``, ``ornament`` and ``underline`` only apply to blocks that
    are placed whole.
    """

    kind: BlockKind
    paragraphs: tuple[Paragraph, ...]
    splittable: bool = False
    keep_lines: int = 1
    padding: float = 0.0
    ornament: Optional[Decoration] = None
    seed: str = ""
    underline: Optional[RGB] = None
    align: TextAlign = TextAlign.LEFT
    trailer: str = ""
    reserve_right: float = 0.0
    recipe_id: Optional[str] = None

    def lines(self, width: float) -> list[LaidLine]:
        inner = width - 2 * self.padding - self.reserve_right
        out: list[LaidLine] = []
        for para in self.paragraphs:
            m = measure(para.text, para.font, para.size, inner - para.indent)
            for i, line in enumerate(m.lines):
                out.append(LaidLine(
                    text=line.text,
                    width=line.width,
                    font=para.font,
                    size=para.size,
                    color=para.color,
                    indent=para.indent,
                    space_before=para.space_before if i == 0 else 0.0,
                    line_height=m.line_height,
                    baseline_offset=m.baseline_offset,
                ))
        return out

    def height(self, width: float) -> float:
        lines = self.lines(width)
        if not lines:
            return 0.0
        h = 2 * self.padding + sum(line.advance for line in lines)
        if self.underline is not None:
            h += UNDERLINE_GAP
        return h


@dataclass(frozen=True)
class PhotoBlock:
    """A photo in a fixed-height slot, scaled to fit preserving aspect ratio."""

    image: RasterImage
    height_mm: float = PHOTO_HEIGHT
    recipe_id: Optional[str] = None
    kind: BlockKind = BlockKind.PHOTO

    def fit(self, width: float) -> tuple[float, float]:
        """Drawn ``(width, height)`` inside a slot *width* wide."""
        w = min(width, self.height_mm * self.image.aspect_ratio)
        return w, w / self.image.aspect_ratio

    def height(self, width: float) -> float:
        return self.height_mm


@dataclass(frozen=True)
class NutritionBlock:
    """Nutrition facts drawn as a bordered header+rows table."""

    heading: str
    rows: tuple[tuple[str, str], ...]
    recipe_id: Optional[str] = None
    kind: BlockKind = BlockKind.NUTRITION

    def height(self, width: float) -> float:
        return chef_table_height(self.rows)


@dataclass(frozen=True)
class ColumnRegion:
    """Text column beside a photo column for a bounded vertical span."""

    left: TextBlock
    photo: PhotoBlock
    text_ratio: float = 0.60
    gutter_ratio: float = 0.05

    @property
    def kind(self) -> BlockKind:
        return self.left.kind

    @property
    def recipe_id(self) -> Optional[str]:
        return self.left.recipe_id

    def columns(self, width: float) -> tuple[float, float, float]:
        """Return ``(text_width, photo_offset, photo_width)`` for *width*."""
        text_w = width * self.text_ratio
        photo_offset = width * (self.text_ratio + self.gutter_ratio)
        return text_w, photo_offset, width - photo_offset

    def height(self, width: float) -> float:
        text_w, _, photo_w = self.columns(width)
        return max(self.left.height(text_w), self.photo.height(photo_w))


Block = Union[TextBlock, PhotoBlock, NutritionBlock, ColumnRegion]
