"""Template decorations as draw-command generators.

Each renderer is a pure function of a bounding box and the template (plus
a seed or table rows where needed). Which renderers run is decided by the
template's ``decoration_flags``.
"""

from __future__ import annotations

import random
import zlib
from dataclasses import dataclass
from typing import Sequence

from ..generators.templates import Decoration, TemplateConfig
from .commands import DrawCommand, FilledRect, Outline, Rule, TextAlign, TextRun
from .geometry import PageGeometry
from .text import line_metrics

GLYPH_FONT = "ZapfDingbats"
FAMILY_GLYPHS = ("★", "✿", "❀", "♥", "❦")

CARD_RADIUS = 2.0
ORNATE_INSET = 1.5
ORNATE_TICK = 6.0
CHEF_HEADER_HEIGHT = 8.0
CHEF_ROW_HEIGHT = 6.0
CHEF_CELL_PADDING = 3.0


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def inset(self, d: float) -> "Box":
        return Box(self.x + d, self.y + d, self.width - 2 * d, self.height - 2 * d)


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def card_background(box: Box, template: TemplateConfig) -> list[DrawCommand]:
    """Filled card with a thin border."""
    return [
        FilledRect(box.x, box.y, box.width, box.height,
                   color=template.background_color, radius=CARD_RADIUS),
        Outline(box.x, box.y, box.width, box.height,
                color=template.accent_color, thickness=0.4, radius=CARD_RADIUS),
    ]


def ornate_border(box: Box, template: TemplateConfig) -> list[DrawCommand]:
    """Double border with L-shaped tick marks inside each corner."""
    inner = box.inset(ORNATE_INSET)
    cmds: list[DrawCommand] = [
        Outline(box.x, box.y, box.width, box.height,
                color=template.primary_color, thickness=0.8),
        Outline(inner.x, inner.y, inner.width, inner.height,
                color=template.accent_color, thickness=0.3),
    ]
    tick = inner.inset(ORNATE_INSET)
    for cx, dx in ((tick.x, 1), (tick.right, -1)):
        for cy, dy in ((tick.y, 1), (tick.bottom, -1)):
            cmds.append(Rule(cx, cy, cx + dx * ORNATE_TICK, cy,
                             color=template.accent_color, thickness=0.5))
            cmds.append(Rule(cx, cy, cx, cy + dy * ORNATE_TICK,
                             color=template.accent_color, thickness=0.5))
    return cmds


def pick_glyph(seed: str) -> str:
    """Choose a glyph from ``FAMILY_GLYPHS``; the same seed always wins the same one."""
    rng = random.Random(zlib.crc32(seed.encode("utf-8")))
    return rng.choice(FAMILY_GLYPHS)


def family_glyph(box: Box, template: TemplateConfig, seed: str = "") -> list[DrawCommand]:
    """One dingbat centred in *box*, sized to its height."""
    size = box.height / 0.3528 * 0.8  # mm -> pt, leaving some air
    return [
        TextRun(
            x=box.x + box.width / 2,
            y=box.y + box.height * 0.8,
            text=pick_glyph(seed),
            font=GLYPH_FONT,
            size=size,
            color=template.accent_color,
            align=TextAlign.CENTER,
        )
    ]


def chef_table_height(rows: Sequence[tuple[str, str]]) -> float:
    return CHEF_HEADER_HEIGHT + len(rows) * CHEF_ROW_HEIGHT


def chef_table(
    box: Box,
    template: TemplateConfig,
    rows: Sequence[tuple[str, str]],
    heading: str = "",
) -> list[DrawCommand]:
    """Bordered table: a filled header band, then label/value rows."""
    cmds: list[DrawCommand] = []
    size = template.body_size
    _, ascent = line_metrics(template.body_font, size)

    def baseline(top: float, height: float) -> float:
        return top + (height + ascent) / 2 - 0.3

    cmds.append(FilledRect(box.x, box.y, box.width, CHEF_HEADER_HEIGHT,
                           color=template.primary_color))
    cmds.append(TextRun(
        box.x + CHEF_CELL_PADDING, baseline(box.y, CHEF_HEADER_HEIGHT),
        heading, template.heading_font, size, color=(255, 255, 255),
    ))

    top = box.y + CHEF_HEADER_HEIGHT
    for i, (label, value) in enumerate(rows):
        if i % 2:
            cmds.append(FilledRect(box.x, top, box.width, CHEF_ROW_HEIGHT,
                                   color=template.background_color))
        y = baseline(top, CHEF_ROW_HEIGHT)
        cmds.append(TextRun(box.x + CHEF_CELL_PADDING, y, label,
                            template.body_font, size, color=template.text_color))
        cmds.append(TextRun(box.right - CHEF_CELL_PADDING, y, value,
                            template.heading_font, size, color=template.text_color,
                            align=TextAlign.RIGHT))
        top += CHEF_ROW_HEIGHT
        if i < len(rows) - 1:
            cmds.append(Rule(box.x, top, box.right, top,
                             color=template.muted_color, thickness=0.1))

    height = chef_table_height(rows)
    cmds.append(Outline(box.x, box.y, box.width, height,
                        color=template.primary_color, thickness=0.4))
    return cmds


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def decorate(
    decoration: Decoration,
    box: Box,
    template: TemplateConfig,
    *,
    seed: str = "",
    rows: Sequence[tuple[str, str]] = (),
    heading: str = "",
) -> list[DrawCommand]:
    """Run the renderer for *decoration* over *box*."""
    if decoration == Decoration.CARD:
        return card_background(box, template)
    if decoration == Decoration.ORNATE:
        return ornate_border(box, template)
    if decoration == Decoration.FAMILY:
        return family_glyph(box, template, seed)
    if decoration == Decoration.CHEF:
        return chef_table(box, template, rows, heading)
    raise ValueError(f"Unknown decoration: {decoration!r}")


def page_decorations(geometry: PageGeometry, template: TemplateConfig) -> list[DrawCommand]:
    """Decorations drawn on every page, inside the margin band."""
    if not template.has(Decoration.ORNATE):
        return []
    half = geometry.margin / 2
    frame = Box(half, half, geometry.width - geometry.margin, geometry.height - geometry.margin)
    return decorate(Decoration.ORNATE, frame, template)
