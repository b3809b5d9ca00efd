"""Flow layout engine.

Blocks are placed top to bottom on a vertical cursor. A block that would
cross the bottom margin moves to a fresh page first; only splittable text
blocks may break between lines. A block taller than a whole page is put
on a page of its own and recorded as a content overflow instead of
failing the run.

Coordinates stay as unrounded millimetres throughout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.models import GenerationIssue, IssueKind
from ..generators.templates import Decoration, TemplateConfig
from .blocks import (
    UNDERLINE_GAP,
    Block,
    ColumnRegion,
    LaidLine,
    NutritionBlock,
    PhotoBlock,
    TextBlock,
)
from .commands import DrawCommand, ImageBlit, Rule, TextAlign, TextRun
from .decorations import Box, decorate, page_decorations
from .document import DocumentAssembler, Page, PageRole, PlacedBlock
from .geometry import BLOCK_SPACING, PageGeometry
from .text import text_width

logger = logging.getLogger(__name__)

_LEADER_GAP = 2.0


@dataclass
class LayoutCursor:
    """Where the next block goes. One cursor per recipe, moved downwards only."""

    page: Page
    x: float
    y: float
    column_right_edge: float


class FlowLayoutEngine:
    """Places content blocks onto the pages of a :class:`DocumentAssembler`.

    Parameters
    ----------
    assembler
        Receives new pages and the draw commands for them.
    template
        Fonts, colors and decoration flags.
    geometry
        Page size and margins.
    issues
        List that content-overflow issues are appended to.
    role
        Role given to every page this engine starts.
    """

    def __init__(
        self,
        assembler: DocumentAssembler,
        template: TemplateConfig,
        geometry: PageGeometry,
        issues: Optional[list[GenerationIssue]] = None,
        role: PageRole = PageRole.BODY,
    ) -> None:
        self.assembler = assembler
        self.template = template
        self.geometry = geometry
        self.issues = issues if issues is not None else []
        self.role = role

    # -- cursor --------------------------------------------------------------

    def start_page(self) -> Page:
        """Append a page carrying the template's page decorations."""
        page = self.assembler.new_page(self.role)
        page.add(*page_decorations(self.geometry, self.template))
        return page

    def begin_recipe(self, cursor: LayoutCursor, page: Page) -> None:
        """Point *cursor* at the top-left of the usable area of *page*."""
        cursor.page = page
        cursor.x = self.geometry.left
        cursor.y = self.geometry.top
        cursor.column_right_edge = self.geometry.right

    def open_cursor(self) -> LayoutCursor:
        """Start a fresh page and return a cursor at its top."""
        page = self.start_page()
        cursor = LayoutCursor(page=page, x=0.0, y=0.0, column_right_edge=0.0)
        self.begin_recipe(cursor, page)
        return cursor

    def _break_page(self, cursor: LayoutCursor) -> None:
        self.begin_recipe(cursor, self.start_page())

    def _at_top(self, cursor: LayoutCursor) -> bool:
        return cursor.y <= self.geometry.top

    # -- placement -----------------------------------------------------------

    def place_block(self, cursor: LayoutCursor, block: Block) -> Page:
        """Place *block* at the cursor and return the page it starts on."""
        if isinstance(block, TextBlock) and block.splittable:
            return self._place_flowing(cursor, block)

        width = cursor.column_right_edge - cursor.x
        height = block.height(width)
        bottom = self.geometry.bottom

        oversized = height > self.geometry.usable_height
        if oversized or cursor.y + height > bottom:
            if not self._at_top(cursor):
                self._break_page(cursor)

        self._render(cursor, block, width, height)
        cursor.page.blocks.append(PlacedBlock(
            kind=block.kind.value,
            top=cursor.y,
            height=height,
            x=cursor.x,
            width=width,
            recipe_id=block.recipe_id,
            oversized=oversized,
        ))
        start = cursor.page

        if oversized:
            msg = (
                f"{block.kind.value} block is {height:.1f} mm tall but a page "
                f"only holds {self.geometry.usable_height:.1f} mm"
            )
            logger.warning("Content overflow on page %d: %s", start.index, msg)
            self.issues.append(GenerationIssue(
                kind=IssueKind.CONTENT_OVERFLOW, message=msg, recipe_id=block.recipe_id,
            ))
            # nothing else may share this page
            cursor.y = bottom
        else:
            cursor.y += height + BLOCK_SPACING
        return start

    def _place_flowing(self, cursor: LayoutCursor, block: TextBlock) -> Page:
        width = cursor.column_right_edge - cursor.x
        lines = block.lines(width)
        bottom = self.geometry.bottom
        if not lines:
            return cursor.page

        head = sum(line.advance for line in lines[: max(1, block.keep_lines)])
        if cursor.y + head > bottom and not self._at_top(cursor):
            self._break_page(cursor)

        start = cursor.page
        seg_top = cursor.y
        for line in lines:
            first_on_page = cursor.y == seg_top
            advance = line.line_height if first_on_page and self._at_top(cursor) else line.advance
            if cursor.y + advance > bottom and not first_on_page:
                self._record_segment(cursor, block, seg_top, width)
                self._break_page(cursor)
                seg_top = cursor.y
                advance = line.line_height
            cursor.page.add(self._line_run(
                line, cursor.x, cursor.y + advance - line.line_height, width, block.align,
            ))
            cursor.y += advance

        self._record_segment(cursor, block, seg_top, width)
        cursor.y += BLOCK_SPACING
        return start

    def _record_segment(self, cursor: LayoutCursor, block: TextBlock, top: float, width: float) -> None:
        cursor.page.blocks.append(PlacedBlock(
            kind=block.kind.value,
            top=top,
            height=cursor.y - top,
            x=cursor.x,
            width=width,
            recipe_id=block.recipe_id,
        ))

    # -- rendering -----------------------------------------------------------

    def _render(self, cursor: LayoutCursor, block: Block, width: float, height: float) -> None:
        page, x, y = cursor.page, cursor.x, cursor.y
        if isinstance(block, TextBlock):
            page.add(*self._text_commands(block, x, y, width, height))
        elif isinstance(block, PhotoBlock):
            page.add(self._photo_command(block, x, y, width))
        elif isinstance(block, NutritionBlock):
            page.add(*decorate(
                Decoration.CHEF, Box(x, y, width, height), self.template,
                rows=block.rows, heading=block.heading,
            ))
        elif isinstance(block, ColumnRegion):
            text_w, photo_offset, photo_w = block.columns(width)
            cursor.column_right_edge = x + text_w
            left_h = block.left.height(text_w)
            page.add(*self._text_commands(block.left, x, y, text_w, left_h))
            page.add(self._photo_command(block.photo, x + photo_offset, y, photo_w))
            cursor.column_right_edge = self.geometry.right
        else:
            raise TypeError(f"unknown block: {block!r}")

    def _photo_command(self, block: PhotoBlock, x: float, y: float, width: float) -> DrawCommand:
        w, h = block.fit(width)
        return ImageBlit(x + (width - w) / 2, y, w, h, block.image)

    def _text_commands(
        self, block: TextBlock, x: float, y: float, width: float, height: float,
    ) -> list[DrawCommand]:
        cmds: list[DrawCommand] = []
        if block.ornament == Decoration.CARD:
            cmds.extend(decorate(Decoration.CARD, Box(x, y, width, height), self.template))

        top = y + block.padding
        last: Optional[LaidLine] = None
        last_top = top
        for line in block.lines(width):
            top += line.space_before
            cmds.append(self._line_run(
                line, x + block.padding, top, width - 2 * block.padding, block.align,
            ))
            last, last_top = line, top
            top += line.line_height

        if last is not None and block.trailer:
            cmds.extend(self._trailer(block, last, x, last_top, width))
        if last is not None and block.ornament == Decoration.FAMILY:
            gx = x + block.padding + last.indent + last.width + 1.5
            cmds.extend(decorate(
                Decoration.FAMILY, Box(gx, last_top, last.line_height, last.line_height),
                self.template, seed=block.seed,
            ))
        if block.underline is not None:
            uy = top + UNDERLINE_GAP / 2
            cmds.append(Rule(x, uy, x + width, uy, color=block.underline, thickness=0.5))
        return cmds

    @staticmethod
    def _line_run(
        line: LaidLine, x: float, top: float, width: float, align: TextAlign,
    ) -> TextRun:
        baseline = top + line.baseline_offset
        if align == TextAlign.CENTER:
            tx = x + width / 2
        elif align == TextAlign.RIGHT:
            tx = x + width
        else:
            tx = x + line.indent
        return TextRun(tx, baseline, line.text, line.font, line.size, line.color, align)

    def _trailer(
        self, block: TextBlock, last: LaidLine, x: float, top: float, width: float,
    ) -> list[DrawCommand]:
        """Right-aligned trailer (a page number) with dot leaders before it."""
        baseline = top + last.baseline_offset
        right = x + width - block.padding
        cmds: list[DrawCommand] = []
        lead_start = x + block.padding + last.indent + last.width + _LEADER_GAP
        lead_end = right - text_width(block.trailer, last.font, last.size) - _LEADER_GAP
        dot = text_width(".", last.font, last.size)
        count = int((lead_end - lead_start) / dot) if dot > 0 else 0
        if count > 0:
            cmds.append(TextRun(lead_start, baseline, "." * count, last.font, last.size,
                                self.template.muted_color))
        cmds.append(TextRun(right, baseline, block.trailer, last.font, last.size,
                            last.color, TextAlign.RIGHT))
        return cmds
