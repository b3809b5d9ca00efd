"""Template registry for recipe books.

A template bundles the fonts, colors, margin and decoration flags a book
is rendered with. Templates are immutable and resolved once per document.

Usage::

    from recipebook.generators.templates import resolve_template

    template, known = resolve_template("elegant")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FontFamily:
    """The four faces of one of the PDF standard font families."""

    regular: str
    bold: str
    italic: str
    bold_italic: str

    @property
    def faces(self) -> tuple[str, str, str, str]:
        return (self.regular, self.bold, self.italic, self.bold_italic)


FONT_FAMILIES: dict[str, FontFamily] = {
    "Helvetica": FontFamily(
        "Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"
    ),
    "Times": FontFamily("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": FontFamily(
        "Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"
    ),
}


def font_variant(font: str, *, bold: bool = False, italic: bool = False) -> str:
    """Return the bold/italic sibling of *font* within its family.

    Fonts outside the known families are returned unchanged.
    """
    for family in FONT_FAMILIES.values():
        if font in family.faces:
            if bold and italic:
                return family.bold_italic
            if bold:
                return family.bold
            if italic:
                return family.italic
            return family.regular
    return font


# ---------------------------------------------------------------------------
# Template config
# ---------------------------------------------------------------------------

class Decoration(str, Enum):
    """Ornamental renderers a template can switch on."""
    CARD = "card"
    ORNATE = "ornate"
    FAMILY = "family"
    CHEF = "chef"


@dataclass(frozen=True)
class TemplateConfig:
    """Complete template definition. Colors are RGB tuples, margin is mm."""

    id: str = "default"
    display_name: str = "Standard"
    description: str = "Plain layout used when a book names an unknown template."
    is_premium: bool = False

    primary_color: RGB = (33, 33, 33)
    secondary_color: RGB = (90, 90, 90)
    accent_color: RGB = (0, 102, 204)
    text_color: RGB = (33, 33, 33)
    muted_color: RGB = (128, 128, 128)
    background_color: RGB = (245, 247, 250)

    title_font: str = "Helvetica-Bold"
    body_font: str = "Helvetica"
    title_size: float = 16.0
    body_size: float = 10.0
    margin: float = 20.0

    decoration_flags: frozenset[Decoration] = field(default_factory=frozenset)

    def has(self, decoration: Decoration) -> bool:
        return decoration in self.decoration_flags

    @property
    def heading_font(self) -> str:
        return font_variant(self.body_font, bold=True)

    @property
    def italic_font(self) -> str:
        return font_variant(self.body_font, italic=True)


# ---------------------------------------------------------------------------
# Built-in templates
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE = TemplateConfig()

MINIMALIST_TEMPLATE = TemplateConfig(
    id="minimalist",
    display_name="Minimalist",
    description="Clean, simple design perfect for everyday cooking.",
    primary_color=(20, 20, 20),
    secondary_color=(80, 80, 80),
    accent_color=(60, 60, 60),
    text_color=(30, 30, 30),
    muted_color=(140, 140, 140),
    background_color=(248, 248, 248),
    title_font="Helvetica-Bold",
    body_font="Helvetica",
    title_size=18.0,
    body_size=10.0,
    margin=20.0,
)

ELEGANT_TEMPLATE = TemplateConfig(
    id="elegant",
    display_name="Elegant",
    description="Beautiful typography and spacing for special occasions.",
    is_premium=True,
    primary_color=(110, 27, 45),
    secondary_color=(62, 39, 35),
    accent_color=(184, 148, 70),
    text_color=(40, 30, 30),
    muted_color=(141, 118, 110),
    background_color=(252, 248, 240),
    title_font="Times-Bold",
    body_font="Times-Roman",
    title_size=20.0,
    body_size=10.5,
    margin=22.0,
    decoration_flags=frozenset({Decoration.ORNATE}),
)

FAMILY_TEMPLATE = TemplateConfig(
    id="family",
    display_name="Family Style",
    description="Warm, family-friendly design with personal touches.",
    is_premium=True,
    primary_color=(175, 89, 62),
    secondary_color=(120, 55, 35),
    accent_color=(230, 126, 34),
    text_color=(55, 42, 35),
    muted_color=(145, 125, 110),
    background_color=(253, 243, 224),
    title_font="Times-BoldItalic",
    body_font="Helvetica",
    title_size=19.0,
    body_size=10.5,
    margin=20.0,
    decoration_flags=frozenset({Decoration.CARD, Decoration.FAMILY}),
)

PROFESSIONAL_TEMPLATE = TemplateConfig(
    id="professional",
    display_name="Professional",
    description="Restaurant-quality layout for serious cooks.",
    is_premium=True,
    primary_color=(38, 50, 56),
    secondary_color=(55, 71, 79),
    accent_color=(38, 166, 154),
    text_color=(33, 33, 33),
    muted_color=(120, 144, 156),
    background_color=(236, 239, 241),
    title_font="Helvetica-Bold",
    body_font="Helvetica",
    title_size=17.0,
    body_size=9.5,
    margin=18.0,
    decoration_flags=frozenset({Decoration.CHEF}),
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_TEMPLATE_REGISTRY: dict[str, TemplateConfig] = {
    t.id: t
    for t in [
        MINIMALIST_TEMPLATE,
        ELEGANT_TEMPLATE,
        FAMILY_TEMPLATE,
        PROFESSIONAL_TEMPLATE,
    ]
}


def get_template(template_id: str) -> TemplateConfig:
    """Get a template by id. Raises ``KeyError`` if not found."""
    key = template_id.lower().strip()
    if key not in _TEMPLATE_REGISTRY:
        available = ", ".join(sorted(_TEMPLATE_REGISTRY.keys()))
        raise KeyError(f"Unknown template '{template_id}'. Available: {available}")
    return _TEMPLATE_REGISTRY[key]


def resolve_template(template_id: str | None) -> tuple[TemplateConfig, bool]:
    """Look up *template_id*, falling back to ``DEFAULT_TEMPLATE``.

    Returns ``(template, known)``; ``known`` is False when the fallback
    was used.
    """
    try:
        return get_template(template_id or ""), True
    except KeyError:
        logger.warning(
            "Unknown template %r -- using the default template", template_id
        )
        return DEFAULT_TEMPLATE, False


def list_templates() -> list[TemplateConfig]:
    """Return all registered templates."""
    return list(_TEMPLATE_REGISTRY.values())


def register_template(template: TemplateConfig) -> None:
    """Register a custom template at runtime."""
    _TEMPLATE_REGISTRY[template.id.lower().strip()] = template
