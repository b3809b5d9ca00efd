"""Cover and table-of-contents pages.

This is the second layout pass. The TOC is laid out once into a scratch
assembler to learn how many pages it needs; that count fixes the offset
between body page indices and final page numbers, and the real TOC is
then laid out with those numbers. The TOC entry block never depends on
the width of its number, so both passes produce the same page count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..core.models import GenerationIssue, RecipeBook
from ..generators.templates import Decoration, TemplateConfig
from .blocks import BlockKind, Paragraph, TextBlock
from .commands import DrawCommand, Rule, TextAlign, TextRun
from .decorations import Box, decorate, page_decorations
from .document import DocumentAssembler, Page, PageRole
from .flow import FlowLayoutEngine
from .geometry import PageGeometry
from .text import measure, text_width, truncate

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 350
TOC_TITLE = "Table of Contents"
COVER_PAGES = 1

# Right-hand space kept free for the page number on every TOC entry
_TRAILER_SAMPLE = "0000"


@dataclass(frozen=True)
class TocEntry:
    recipe_id: str
    title: str
    number: int
    page_index: int
    section: Optional[str] = None

    @property
    def page_number(self) -> int:
        return self.page_index + 1

    @property
    def label(self) -> str:
        return f"{self.number}. {self.title}"


@dataclass
class FrontMatter:
    cover: Page
    toc_pages: list[Page]
    toc: list[TocEntry]

    @property
    def page_count(self) -> int:
        return 1 + len(self.toc_pages)


# ---------------------------------------------------------------------------
# Cover
# ---------------------------------------------------------------------------

def build_cover(
    assembler: DocumentAssembler,
    book: RecipeBook,
    template: TemplateConfig,
    generated_on: date,
) -> Page:
    """Append the cover page: title, description, recipe count, template, date."""
    geo = assembler.geometry
    page = assembler.new_page(PageRole.COVER)
    page.add(*page_decorations(geo, template))

    cx = geo.width / 2
    text_w = geo.content_width - 20
    cmds: list[DrawCommand] = []

    title_size = template.title_size * 1.6
    title = measure(book.name, template.title_font, title_size, text_w)
    y = geo.height * 0.3
    title_top = y

    title_cmds: list[DrawCommand] = []
    for line in title.lines:
        title_cmds.append(TextRun(cx, y + title.baseline_offset, line.text,
                                  template.title_font, title_size,
                                  template.primary_color, TextAlign.CENTER))
        y += title.line_height

    if template.has(Decoration.CARD):
        card = Box(geo.left, title_top - 8, geo.content_width, y - title_top + 16)
        cmds.extend(decorate(Decoration.CARD, card, template))
    cmds.extend(title_cmds)
    y += 8

    if template.has(Decoration.FAMILY):
        cmds.extend(decorate(Decoration.FAMILY, Box(cx - 5, y, 10, 10), template,
                             seed=book.id or book.name))
        y += 14

    cmds.append(Rule(cx - 30, y, cx + 30, y, color=template.accent_color, thickness=0.6))
    y += 10

    if book.description.strip():
        size = template.body_size + 2
        desc = measure(truncate(book.description, DESCRIPTION_LIMIT),
                       template.italic_font, size, text_w - 10)
        for line in desc.lines:
            cmds.append(TextRun(cx, y + desc.baseline_offset, line.text,
                                template.italic_font, size,
                                template.secondary_color, TextAlign.CENTER))
            y += desc.line_height

    count = len(book.recipes)
    info = [
        f"{count} recipe{'s' if count != 1 else ''}",
        f"Template: {template.display_name}",
        f"Generated on {generated_on.strftime('%B %d, %Y')}",
    ]
    size = template.body_size
    y = geo.bottom - 30
    for text in info:
        cmds.append(TextRun(cx, y, text, template.body_font, size,
                            template.muted_color, TextAlign.CENTER))
        y += 6

    page.add(*cmds)
    return page


# ---------------------------------------------------------------------------
# Table of contents
# ---------------------------------------------------------------------------

def toc_blocks(entries: list[TocEntry], template: TemplateConfig) -> list[TextBlock]:
    """Heading, section headings and one entry block per recipe."""
    reserve = text_width(_TRAILER_SAMPLE, template.body_font, template.body_size) + 6
    blocks = [TextBlock(
        kind=BlockKind.TOC_HEADING,
        paragraphs=(Paragraph(TOC_TITLE, template.title_font, template.title_size,
                              template.primary_color),),
        underline=template.accent_color,
    )]
    section: Optional[str] = None
    for entry in entries:
        if entry.section and entry.section != section:
            blocks.append(TextBlock(
                kind=BlockKind.SECTION_HEADING,
                paragraphs=(Paragraph(entry.section, template.heading_font,
                                      template.body_size + 1, template.secondary_color),),
            ))
        section = entry.section
        blocks.append(TextBlock(
            kind=BlockKind.TOC_ENTRY,
            paragraphs=(Paragraph(entry.label, template.body_font, template.body_size,
                                  template.text_color, indent=4.0 if entry.section else 0.0),),
            trailer=str(entry.page_number),
            reserve_right=reserve,
            recipe_id=entry.recipe_id,
        ))
    return blocks


def _layout_toc(
    assembler: DocumentAssembler,
    entries: list[TocEntry],
    template: TemplateConfig,
    issues: Optional[list[GenerationIssue]] = None,
) -> list[Page]:
    engine = FlowLayoutEngine(assembler, template, assembler.geometry, issues,
                              role=PageRole.TOC)
    first = len(assembler.pages)
    cursor = engine.open_cursor()
    for block in toc_blocks(entries, template):
        engine.place_block(cursor, block)
    return assembler.pages[first:]


def _entries(book: RecipeBook, starts: Mapping[str, int], offset: int) -> list[TocEntry]:
    return [
        TocEntry(
            recipe_id=recipe.id,
            title=recipe.title,
            number=n,
            page_index=starts[recipe.id] + offset,
            section=book.section_of(recipe.id),
        )
        for n, recipe in enumerate(book.recipes, start=1)
    ]


def count_toc_pages(
    book: RecipeBook, template: TemplateConfig, geometry: PageGeometry,
) -> int:
    """Pages the TOC needs, found by laying it out into a scratch document."""
    scratch = DocumentAssembler(geometry, book.name)
    placeholder = {r.id: 0 for r in book.recipes}
    return len(_layout_toc(scratch, _entries(book, placeholder, 0), template))


def build_front_matter(
    assembler: DocumentAssembler,
    book: RecipeBook,
    template: TemplateConfig,
    recipe_start_page: Mapping[str, int],
    generated_on: date,
    issues: Optional[list[GenerationIssue]] = None,
) -> FrontMatter:
    """Append the cover and TOC pages to *assembler*.

    *recipe_start_page* holds body-relative page indices; the entries
    returned carry final indices, valid once the body pages are appended
    after the front matter.
    """
    toc_page_count = count_toc_pages(book, template, assembler.geometry)
    offset = COVER_PAGES + toc_page_count
    entries = _entries(book, recipe_start_page, offset)

    cover = build_cover(assembler, book, template, generated_on)
    toc_pages = _layout_toc(assembler, entries, template, issues)
    if len(toc_pages) != toc_page_count:
        raise RuntimeError(
            f"TOC took {len(toc_pages)} page(s), expected {toc_page_count}"
        )
    logger.debug("Front matter: cover + %d TOC page(s), body offset %d",
                 toc_page_count, offset)
    return FrontMatter(cover=cover, toc_pages=toc_pages, toc=entries)
