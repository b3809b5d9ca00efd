"""Tests for the decoration renderers."""

from __future__ import annotations

import pytest

from recipebook.core.models import PageSize
from recipebook.generators.templates import (
    ELEGANT_TEMPLATE,
    FAMILY_TEMPLATE,
    MINIMALIST_TEMPLATE,
    PROFESSIONAL_TEMPLATE,
    Decoration,
)
from recipebook.layout.commands import FilledRect, Outline, Rule, TextRun
from recipebook.layout.decorations import (
    CHEF_HEADER_HEIGHT,
    CHEF_ROW_HEIGHT,
    FAMILY_GLYPHS,
    Box,
    card_background,
    chef_table,
    chef_table_height,
    decorate,
    family_glyph,
    ornate_border,
    page_decorations,
    pick_glyph,
)
from recipebook.layout.geometry import PageGeometry

BOX = Box(20, 30, 100, 50)
ROWS = (("Calories", "420"), ("Protein", "12g"), ("Fat", "9g"))


class TestCard:
    def test_fill_then_border(self):
        cmds = card_background(BOX, FAMILY_TEMPLATE)
        assert isinstance(cmds[0], FilledRect)
        assert isinstance(cmds[1], Outline)
        assert cmds[0].color == FAMILY_TEMPLATE.background_color
        assert (cmds[0].x, cmds[0].y, cmds[0].width, cmds[0].height) == (20, 30, 100, 50)


class TestOrnate:
    def test_double_border_and_corner_ticks(self):
        cmds = ornate_border(BOX, ELEGANT_TEMPLATE)
        outlines = [c for c in cmds if isinstance(c, Outline)]
        rules = [c for c in cmds if isinstance(c, Rule)]
        assert len(outlines) == 2
        assert len(rules) == 8
        outer, inner = outlines
        assert inner.x > outer.x
        assert inner.width < outer.width

    def test_ticks_stay_inside_box(self):
        for r in ornate_border(BOX, ELEGANT_TEMPLATE):
            if isinstance(r, Rule):
                for x in (r.x1, r.x2):
                    assert BOX.x <= x <= BOX.right
                for y in (r.y1, r.y2):
                    assert BOX.y <= y <= BOX.bottom


class TestFamilyGlyph:
    def test_glyph_from_fixed_set(self):
        (run,) = family_glyph(BOX, FAMILY_TEMPLATE, seed="r1")
        assert isinstance(run, TextRun)
        assert run.text in FAMILY_GLYPHS
        assert run.font == "ZapfDingbats"

    def test_same_seed_same_glyph(self):
        assert pick_glyph("recipe-42") == pick_glyph("recipe-42")

    def test_seeds_spread_over_the_set(self):
        picked = {pick_glyph(f"recipe-{i}") for i in range(100)}
        assert len(picked) > 1


class TestChefTable:
    def test_height(self):
        assert chef_table_height(ROWS) == CHEF_HEADER_HEIGHT + 3 * CHEF_ROW_HEIGHT

    def test_header_and_rows(self):
        cmds = chef_table(BOX, PROFESSIONAL_TEMPLATE, ROWS, "Nutrition (per serving)")
        texts = [c.text for c in cmds if isinstance(c, TextRun)]
        assert texts[0] == "Nutrition (per serving)"
        for label, value in ROWS:
            assert label in texts
            assert value in texts
        header = cmds[0]
        assert isinstance(header, FilledRect)
        assert header.color == PROFESSIONAL_TEMPLATE.primary_color
        border = cmds[-1]
        assert isinstance(border, Outline)
        assert border.height == pytest.approx(chef_table_height(ROWS))


class TestDispatch:
    @pytest.mark.parametrize("decoration", list(Decoration))
    def test_every_decoration_renders(self, decoration):
        cmds = decorate(decoration, BOX, FAMILY_TEMPLATE, seed="s", rows=ROWS, heading="H")
        assert cmds

    def test_page_decorations_only_for_ornate(self):
        geo = PageGeometry.for_page_size(PageSize.A4, ELEGANT_TEMPLATE.margin)
        assert page_decorations(geo, MINIMALIST_TEMPLATE) == []
        assert page_decorations(geo, ELEGANT_TEMPLATE)

    def test_page_frame_sits_in_margin_band(self):
        geo = PageGeometry.for_page_size(PageSize.A4, ELEGANT_TEMPLATE.margin)
        for cmd in page_decorations(geo, ELEGANT_TEMPLATE):
            if isinstance(cmd, Outline):
                assert cmd.x < geo.left
                assert cmd.x + cmd.width > geo.right
                assert cmd.y < geo.top
                assert cmd.y + cmd.height > geo.bottom
