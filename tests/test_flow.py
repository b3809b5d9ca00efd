"""Tests for the flow layout engine."""

from __future__ import annotations

import pytest

from recipebook.core.models import IssueKind, PageSize
from recipebook.generators.templates import FAMILY_TEMPLATE, MINIMALIST_TEMPLATE, Decoration
from recipebook.layout.blocks import (
    PHOTO_HEIGHT,
    BlockKind,
    ColumnRegion,
    Paragraph,
    PhotoBlock,
    TextBlock,
)
from recipebook.layout.commands import FilledRect, ImageBlit, TextRun
from recipebook.layout.document import DocumentAssembler
from recipebook.layout.flow import FlowLayoutEngine
from recipebook.layout.geometry import PageGeometry
from recipebook.layout.text import line_metrics

FONT = "Helvetica"


def _engine(template=MINIMALIST_TEMPLATE):
    geo = PageGeometry.for_page_size(PageSize.A4, template.margin)
    doc = DocumentAssembler(geo)
    return FlowLayoutEngine(doc, template, geo), doc, geo


def _block(kind=BlockKind.INGREDIENTS, lines: int = 5, **kwargs) -> TextBlock:
    paras = tuple(Paragraph(f"line {i}", FONT, 10) for i in range(lines))
    return TextBlock(kind=kind, paragraphs=paras, **kwargs)


def _long_text(words: int = 600) -> str:
    return " ".join(f"word{i % 17}" for i in range(words))


def _assert_pages_within_bounds(doc, geo):
    for page in doc.pages:
        if any(b.oversized for b in page.blocks):
            assert len(page.blocks) == 1
            continue
        assert page.consumed_height <= geo.usable_height + 1e-6
        for b in page.blocks:
            assert b.top >= geo.top - 1e-6
            assert b.bottom <= geo.bottom + 1e-6


class TestCursor:
    def test_open_cursor_at_top_left(self):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        assert (cursor.x, cursor.y) == (geo.left, geo.top)
        assert cursor.column_right_edge == geo.right
        assert cursor.page is doc.current

    def test_begin_recipe_resets(self):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        engine.place_block(cursor, _block())
        assert cursor.y > geo.top
        page = engine.start_page()
        engine.begin_recipe(cursor, page)
        assert cursor.y == geo.top
        assert cursor.page is page

    def test_place_advances_by_height_plus_spacing(self):
        engine, _, geo = _engine()
        cursor = engine.open_cursor()
        block = _block()
        height = block.height(geo.content_width)
        engine.place_block(cursor, block)
        assert cursor.y == pytest.approx(geo.top + height + 5.0)


class TestRigidBlocks:
    def test_block_moves_to_new_page_instead_of_splitting(self):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        for _ in range(30):
            engine.place_block(cursor, _block(lines=8))
        assert len(doc.pages) > 1
        _assert_pages_within_bounds(doc, geo)
        # every block kept whole
        height = _block(lines=8).height(geo.content_width)
        for page in doc.pages:
            for b in page.blocks:
                assert b.height == pytest.approx(height)

    def test_returns_start_page(self):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        cursor.y = geo.bottom - 1.0
        page = engine.place_block(cursor, _block())
        assert page is doc.pages[1]
        assert page.has_block(BlockKind.INGREDIENTS)

    def test_oversized_block_alone_on_its_page(self, photo):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        engine.place_block(cursor, _block(kind=BlockKind.TITLE, lines=1))
        big = PhotoBlock(image=photo, height_mm=geo.usable_height + 50)
        page = engine.place_block(cursor, big)
        engine.place_block(cursor, _block(lines=2))

        assert len(doc.pages) == 3
        assert page is doc.pages[1]
        assert len(page.blocks) == 1
        assert page.blocks[0].oversized
        assert doc.pages[2].blocks[0].kind == BlockKind.INGREDIENTS
        assert [i.kind for i in engine.issues] == [IssueKind.CONTENT_OVERFLOW]

    def test_oversized_on_fresh_page_does_not_add_blank_page(self, photo):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        engine.place_block(cursor, PhotoBlock(image=photo, height_mm=geo.usable_height * 2))
        assert len(doc.pages) == 1


class TestSplittableBlocks:
    def test_long_text_breaks_between_lines(self):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        block = TextBlock(
            kind=BlockKind.DESCRIPTION,
            paragraphs=(Paragraph(_long_text(1500), FONT, 10),),
            splittable=True,
        )
        start = engine.place_block(cursor, block)
        assert start is doc.pages[0]
        assert len(doc.pages) >= 2
        _assert_pages_within_bounds(doc, geo)
        for page in doc.pages:
            assert page.has_block(BlockKind.DESCRIPTION)

    def test_split_fills_the_first_page(self):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        block = TextBlock(
            kind=BlockKind.DESCRIPTION,
            paragraphs=(Paragraph(_long_text(1500), FONT, 10),),
            splittable=True,
        )
        engine.place_block(cursor, block)
        line_height, _ = line_metrics(FONT, 10)
        first = doc.pages[0].blocks[0]
        assert geo.usable_height - first.height < line_height

    def test_keep_lines_moves_heading_with_first_line(self):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        cursor.y = geo.bottom - 5.0
        block = TextBlock(
            kind=BlockKind.INSTRUCTIONS,
            paragraphs=(
                Paragraph("Instructions", "Helvetica-Bold", 12),
                Paragraph("1. Stir.", FONT, 10),
            ),
            splittable=True,
            keep_lines=2,
        )
        start = engine.place_block(cursor, block)
        assert start is doc.pages[1]
        assert not doc.pages[0].blocks

    def test_empty_text_places_nothing(self):
        engine, doc, _ = _engine()
        cursor = engine.open_cursor()
        block = TextBlock(kind=BlockKind.NOTES, paragraphs=(Paragraph("", FONT, 10),),
                          splittable=True)
        engine.place_block(cursor, block)
        assert doc.pages[0].blocks == []


class TestColumnRegion:
    def test_photo_column_beside_text(self, photo):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        region = ColumnRegion(left=_block(lines=4), photo=PhotoBlock(image=photo))
        engine.place_block(cursor, region)

        page = doc.pages[0]
        (placed,) = page.blocks
        assert placed.height == pytest.approx(PHOTO_HEIGHT)
        text_edge = geo.left + geo.content_width * 0.60
        for run in page.commands:
            if isinstance(run, TextRun):
                assert run.x < text_edge
        (blit,) = [c for c in page.commands if isinstance(c, ImageBlit)]
        assert blit.x >= geo.left + geo.content_width * 0.65 - 1e-6
        assert blit.x + blit.width <= geo.right + 1e-6
        assert cursor.column_right_edge == geo.right

    def test_region_as_tall_as_longer_column(self, photo):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        left = _block(lines=30)
        region = ColumnRegion(left=left, photo=PhotoBlock(image=photo))
        engine.place_block(cursor, region)
        expected = left.height(geo.content_width * 0.60)
        assert expected > PHOTO_HEIGHT
        assert doc.pages[0].blocks[0].height == pytest.approx(expected)

    def test_next_block_back_to_full_width(self, photo):
        engine, doc, geo = _engine()
        cursor = engine.open_cursor()
        engine.place_block(cursor, ColumnRegion(left=_block(), photo=PhotoBlock(image=photo)))
        engine.place_block(cursor, _block(kind=BlockKind.INSTRUCTIONS))
        assert doc.pages[0].blocks[-1].width == pytest.approx(geo.content_width)


class TestCardOrnament:
    def test_card_drawn_behind_block_with_padding(self):
        engine, doc, geo = _engine(FAMILY_TEMPLATE)
        cursor = engine.open_cursor()
        plain = _block()
        carded = _block(padding=4.0, ornament=plain.ornament)
        assert carded.height(geo.content_width) == pytest.approx(
            plain.height(geo.content_width) + 8.0
        )
        engine.place_block(cursor, _block(padding=4.0, ornament=Decoration.CARD))
        cmds = doc.pages[0].commands
        assert isinstance(cmds[0], FilledRect)
        assert cmds[0].height == pytest.approx(doc.pages[0].blocks[0].height)
