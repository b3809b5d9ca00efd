"""Page & document assembler.

The assembler owns the ordered page list while layout runs and turns it
into PDF bytes with ReportLab's canvas once layout is complete.
:meth:`DocumentAssembler.finalize` consumes the pages: after it runs the
assembler refuses any further mutation.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as rl_canvas

from ..core.errors import SerializationError
from .commands import (
    DrawCommand,
    FilledRect,
    ImageBlit,
    Outline,
    Rule,
    TextAlign,
    TextRun,
)
from .geometry import PageGeometry

logger = logging.getLogger(__name__)


class PageRole(str, Enum):
    COVER = "cover"
    TOC = "toc"
    BODY = "body"


@dataclass(frozen=True)
class PlacedBlock:
    """Vertical extent consumed by one block (or one page's share of it)."""

    kind: str
    top: float
    height: float
    x: float
    width: float
    recipe_id: Optional[str] = None
    oversized: bool = False

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class Page:
    index: int
    role: PageRole = PageRole.BODY
    commands: list[DrawCommand] = field(default_factory=list)
    blocks: list[PlacedBlock] = field(default_factory=list)

    def add(self, *commands: DrawCommand) -> None:
        self.commands.extend(commands)

    @property
    def consumed_height(self) -> float:
        return sum(b.height for b in self.blocks)

    def has_block(self, kind: str, recipe_id: str | None = None) -> bool:
        return any(
            b.kind == kind and (recipe_id is None or b.recipe_id == recipe_id)
            for b in self.blocks
        )


class DocumentAssembler:
    """Ordered page list plus PDF serialization.

    Parameters
    ----------
    geometry
        Page size and margins shared by every page of the document.
    title
        Written to the PDF metadata.
    """

    def __init__(self, geometry: PageGeometry, title: str = "") -> None:
        self.geometry = geometry
        self.title = title
        self._pages: list[Page] | None = []

    # -- page list -----------------------------------------------------------

    @property
    def pages(self) -> list[Page]:
        return self._live_pages()

    @property
    def current(self) -> Page:
        pages = self._live_pages()
        if not pages:
            raise RuntimeError("document has no pages yet")
        return pages[-1]

    def new_page(self, role: PageRole = PageRole.BODY) -> Page:
        pages = self._live_pages()
        page = Page(index=len(pages), role=role)
        pages.append(page)
        return page

    def emit(self, *commands: DrawCommand) -> None:
        """Append commands to the current page."""
        self.current.add(*commands)

    def adopt(self, pages: list[Page]) -> None:
        """Append pages laid out elsewhere and renumber the whole list."""
        live = self._live_pages()
        live.extend(pages)
        for i, page in enumerate(live):
            page.index = i

    def release(self) -> list[Page]:
        """Hand the pages over to another assembler; this one is spent."""
        pages = self._live_pages()
        self._pages = None
        return pages

    def _live_pages(self) -> list[Page]:
        if self._pages is None:
            raise RuntimeError("document has already been finalized")
        return self._pages

    # -- serialization -------------------------------------------------------

    def finalize(self) -> bytes:
        """Serialize every page in index order and return the PDF bytes.

        Raises ``SerializationError`` when the output cannot be produced.
        """
        pages = self.release()
        geo = self.geometry
        buf = io.BytesIO()
        try:
            c = rl_canvas.Canvas(
                buf,
                pagesize=(geo.width * mm, geo.height * mm),
                invariant=True,
            )
            c.setTitle(self.title)
            for page in pages:
                for cmd in page.commands:
                    self._draw(c, cmd)
                c.showPage()
            c.save()
        except Exception as exc:
            logger.error("PDF serialization failed: %s", exc)
            raise SerializationError(f"could not serialize document: {exc}") from exc

        data = buf.getvalue()
        logger.debug("Serialized %d page(s), %d bytes", len(pages), len(data))
        return data

    def _y(self, y: float) -> float:
        """Top-left millimetres to bottom-left points."""
        return (self.geometry.height - y) * mm

    def _draw(self, c: rl_canvas.Canvas, cmd: DrawCommand) -> None:
        if isinstance(cmd, TextRun):
            c.setFillColorRGB(*_rgb(cmd.color))
            c.setFont(cmd.font, cmd.size)
            x, y = cmd.x * mm, self._y(cmd.y)
            if cmd.align == TextAlign.CENTER:
                c.drawCentredString(x, y, cmd.text)
            elif cmd.align == TextAlign.RIGHT:
                c.drawRightString(x, y, cmd.text)
            else:
                c.drawString(x, y, cmd.text)
        elif isinstance(cmd, Rule):
            c.setStrokeColorRGB(*_rgb(cmd.color))
            c.setLineWidth(cmd.thickness * mm)
            c.line(cmd.x1 * mm, self._y(cmd.y1), cmd.x2 * mm, self._y(cmd.y2))
        elif isinstance(cmd, FilledRect):
            c.setFillColorRGB(*_rgb(cmd.color))
            self._rect(c, cmd.x, cmd.y, cmd.width, cmd.height, cmd.radius, fill=1, stroke=0)
        elif isinstance(cmd, Outline):
            c.setStrokeColorRGB(*_rgb(cmd.color))
            c.setLineWidth(cmd.thickness * mm)
            self._rect(c, cmd.x, cmd.y, cmd.width, cmd.height, cmd.radius, fill=0, stroke=1)
        elif isinstance(cmd, ImageBlit):
            reader = ImageReader(io.BytesIO(cmd.image.data))
            c.drawImage(
                reader,
                cmd.x * mm,
                self._y(cmd.y + cmd.height),
                width=cmd.width * mm,
                height=cmd.height * mm,
                mask="auto",
            )
        else:
            raise TypeError(f"unknown draw command: {cmd!r}")

    def _rect(self, c, x, y, w, h, radius, *, fill: int, stroke: int) -> None:
        bottom = self._y(y + h)
        if radius > 0:
            c.roundRect(x * mm, bottom, w * mm, h * mm, radius * mm, stroke=stroke, fill=fill)
        else:
            c.rect(x * mm, bottom, w * mm, h * mm, stroke=stroke, fill=fill)


def _rgb(color: tuple[int, int, int]) -> tuple[float, float, float]:
    return (color[0] / 255, color[1] / 255, color[2] / 255)
