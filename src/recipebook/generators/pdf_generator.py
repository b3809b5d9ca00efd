"""Generate a PDF recipe book.

Layout runs in two stages:

1. the body pass lays out every recipe and records the body page each
   one starts on;
2. the front-matter pass builds the cover and the table of contents,
   using those start pages shifted by the number of front-matter pages.

The body pages are then appended after the front matter, every page but
the cover gets a page number, and the assembler serializes the result
with ReportLab.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

from ..core.errors import SerializationError
from ..core.models import (
    GenerationIssue,
    GenerationOptions,
    GenerationResult,
    IssueKind,
    RasterImage,
    RecipeBook,
)
from ..layout.commands import TextAlign, TextRun
from ..layout.document import DocumentAssembler, Page, PageRole
from ..layout.frontmatter import TocEntry, build_front_matter
from ..layout.geometry import PageGeometry
from ..layout.recipes import layout_body
from .base import BaseGenerator
from .templates import TemplateConfig, resolve_template

log = logging.getLogger(__name__)

FOOTER_SIZE = 9.0


@dataclass
class RenderedBook:
    """Laid-out but not yet serialized book."""

    assembler: DocumentAssembler
    template: TemplateConfig
    geometry: PageGeometry
    recipe_pages: dict[str, int] = field(default_factory=dict)
    toc: list[TocEntry] = field(default_factory=list)
    issues: list[GenerationIssue] = field(default_factory=list)

    @property
    def pages(self) -> list[Page]:
        return self.assembler.pages

    @property
    def page_count(self) -> int:
        return len(self.pages)


class RecipeBookPdfGenerator(BaseGenerator):
    """Generates a ``.pdf`` recipe book.

    Usage::

        gen = RecipeBookPdfGenerator()
        result = gen.generate(book, GenerationOptions(page_size="Letter"))
        if result.success:
            Path("book.pdf").write_bytes(result.data)
    """

    extension = "pdf"

    def __init__(self, generated_on: Optional[date] = None) -> None:
        self.generated_on = generated_on

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        book: RecipeBook,
        options: Optional[GenerationOptions] = None,
        images: Optional[Mapping[str, RasterImage]] = None,
    ) -> RenderedBook:
        """Lay out the whole book without serializing it."""
        options = options or GenerationOptions()
        issues: list[GenerationIssue] = []

        template, known = resolve_template(book.template_id)
        if not known:
            issues.append(GenerationIssue(
                kind=IssueKind.UNKNOWN_TEMPLATE,
                message=(
                    f"Unknown template '{book.template_id}', "
                    f"used '{template.id}' instead"
                ),
            ))

        geometry = PageGeometry.for_page_size(options.page_size, template.margin)

        # Pass 1 -- body pages
        body = layout_body(book, template, geometry, options, images, issues)

        # Pass 2 -- cover and TOC, numbered against the body start pages
        assembler = DocumentAssembler(geometry, title=book.name)
        front = build_front_matter(
            assembler,
            book,
            template,
            body.recipe_start_page,
            self.generated_on or date.today(),
            issues,
        )
        offset = front.page_count
        assembler.adopt(body.pages)
        self._add_page_numbers(assembler, template)

        log.info(
            "Laid out '%s': %d recipe(s), %d page(s), template=%s",
            book.name, len(book.recipes), len(assembler.pages), template.id,
        )
        return RenderedBook(
            assembler=assembler,
            template=template,
            geometry=geometry,
            recipe_pages={rid: idx + offset for rid, idx in body.recipe_start_page.items()},
            toc=front.toc,
            issues=issues,
        )

    def generate(
        self,
        book: RecipeBook,
        options: Optional[GenerationOptions] = None,
        images: Optional[Mapping[str, RasterImage]] = None,
    ) -> GenerationResult:
        rendered = self.render(book, options, images)
        page_count = rendered.page_count
        try:
            data = rendered.assembler.finalize()
        except SerializationError as exc:
            log.error("Generation of '%s' failed: %s", book.name, exc)
            return GenerationResult(
                success=False,
                page_count=page_count,
                issues=rendered.issues,
                error=str(exc),
            )
        return GenerationResult(data=data, page_count=page_count, issues=rendered.issues)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _add_page_numbers(assembler: DocumentAssembler, template: TemplateConfig) -> None:
        geo = assembler.geometry
        y = geo.bottom + geo.margin * 0.4
        for page in assembler.pages:
            if page.role == PageRole.COVER:
                continue
            page.add(TextRun(
                geo.width / 2, y, f"— {page.index + 1} —",
                template.body_font, FOOTER_SIZE, template.muted_color, TextAlign.CENTER,
            ))


def generate_recipe_book(
    book: RecipeBook,
    options: Optional[GenerationOptions] = None,
    images: Optional[Mapping[str, RasterImage]] = None,
    generated_on: Optional[date] = None,
) -> bytes:
    """Render *book* to PDF bytes.

    Raises ``SerializationError`` if the document cannot be encoded;
    every other problem is degraded around.
    """
    rendered = RecipeBookPdfGenerator(generated_on).render(book, options, images)
    return rendered.assembler.finalize()
