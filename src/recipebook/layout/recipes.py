"""Recipe body pages: recipe -> content blocks -> laid-out pages.

This is the first of the two layout passes. It lays out every recipe on
its own run of pages and records the body page index each recipe starts
on, so the table of contents can be built afterwards with real numbers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..core.models import (
    GenerationIssue,
    GenerationOptions,
    InstructionStep,
    NutritionInfo,
    RasterImage,
    Recipe,
    RecipeBook,
    RecipeIngredient,
)
from ..generators.templates import Decoration, TemplateConfig
from .blocks import (
    Block,
    BlockKind,
    ColumnRegion,
    NutritionBlock,
    Paragraph,
    PhotoBlock,
    TextBlock,
)
from .document import DocumentAssembler, Page
from .flow import FlowLayoutEngine
from .geometry import PageGeometry

logger = logging.getLogger(__name__)

CARD_PADDING = 4.0
NUTRITION_HEADING = "Nutrition (per serving)"


# ---------------------------------------------------------------------------
# Text formatting
# ---------------------------------------------------------------------------

def _num(value: float) -> str:
    return f"{value:g}"


def format_ingredient(ing: RecipeIngredient) -> str:
    parts = [p for p in (_num(ing.amount) if ing.amount is not None else "", ing.unit, ing.name) if p]
    text = "• " + " ".join(parts)
    if ing.optional:
        text += " (optional)"
    if ing.substitutes:
        text += f" (or: {', '.join(ing.substitutes)})"
    return text


def format_step(step: InstructionStep) -> str:
    text = f"{step.step}. {step.instruction}"
    extras = []
    if step.duration:
        extras.append(f"{step.duration} min")
    if step.temperature:
        extras.append(f"{step.temperature}°")
    if extras:
        text += f" ({', '.join(extras)})"
    return text


def format_meta(recipe: Recipe) -> str:
    parts = [
        f"Servings: {recipe.servings}",
        f"Prep: {recipe.prep_time} min",
        f"Cook: {recipe.cook_time} min",
        f"Total: {recipe.minutes_total} min",
    ]
    if recipe.cuisine:
        parts.append(f"Cuisine: {recipe.cuisine}")
    if recipe.difficulty:
        parts.append(f"Difficulty: {recipe.difficulty}")
    return " | ".join(parts)


def nutrition_rows(info: NutritionInfo) -> tuple[tuple[str, str], ...]:
    """Label/value pairs; the optional facts only when set and non-zero."""
    rows = [
        ("Calories", _num(info.calories)),
        ("Protein", f"{_num(info.protein)}g"),
        ("Carbs", f"{_num(info.carbs)}g"),
        ("Fat", f"{_num(info.fat)}g"),
    ]
    for label, value, unit in (
        ("Fiber", info.fiber, "g"),
        ("Sugar", info.sugar, "g"),
        ("Sodium", info.sodium, "mg"),
        ("Cholesterol", info.cholesterol, "mg"),
    ):
        if value:
            rows.append((label, f"{_num(value)}{unit}"))
    return tuple(rows)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def _heading(text: str, template: TemplateConfig) -> Paragraph:
    return Paragraph(text, template.heading_font, template.body_size + 2,
                     template.primary_color)


def _body(text: str, template: TemplateConfig, *, indent: float = 0.0,
          space_before: float = 0.0, italic: bool = False) -> Paragraph:
    font = template.italic_font if italic else template.body_font
    return Paragraph(text, font, template.body_size, template.text_color,
                     indent=indent, space_before=space_before)


def build_recipe_blocks(
    recipe: Recipe,
    number: int,
    template: TemplateConfig,
    options: GenerationOptions,
    photo: Optional[RasterImage] = None,
) -> list[Block]:
    """Turn one recipe into its ordered content blocks.

    Blocks with no content are left out. With both a photo and an
    ingredient list the ingredients go into a two-column region next to
    the photo; without a photo they take the full width.
    """
    rid = recipe.id
    blocks: list[Block] = []
    family = template.has(Decoration.FAMILY)

    title_para = Paragraph(f"{number}. {recipe.title}", template.title_font,
                           template.title_size, template.primary_color)
    blocks.append(TextBlock(
        kind=BlockKind.TITLE,
        paragraphs=(title_para,),
        underline=template.accent_color,
        ornament=Decoration.FAMILY if family else None,
        seed=rid,
        reserve_right=10.0 if family else 0.0,
        recipe_id=rid,
    ))

    if recipe.description.strip():
        blocks.append(TextBlock(
            kind=BlockKind.DESCRIPTION,
            paragraphs=(Paragraph(recipe.description, template.italic_font,
                                  template.body_size, template.secondary_color),),
            splittable=True,
            recipe_id=rid,
        ))

    blocks.append(TextBlock(
        kind=BlockKind.META,
        paragraphs=(Paragraph(format_meta(recipe), template.body_font,
                              template.body_size - 1, template.muted_color),),
        recipe_id=rid,
    ))

    photo_block = PhotoBlock(image=photo, recipe_id=rid) if photo is not None else None
    if recipe.ingredients:
        card = template.has(Decoration.CARD)
        ingredients = TextBlock(
            kind=BlockKind.INGREDIENTS,
            paragraphs=(
                _heading("Ingredients", template),
                *(_body(format_ingredient(ing), template, indent=4.0, space_before=0.8)
                  for ing in recipe.ingredients),
            ),
            padding=CARD_PADDING if card else 0.0,
            ornament=Decoration.CARD if card else None,
            recipe_id=rid,
        )
        if photo_block is not None:
            blocks.append(ColumnRegion(left=ingredients, photo=photo_block))
        else:
            blocks.append(ingredients)
    elif photo_block is not None:
        blocks.append(photo_block)

    if recipe.instructions:
        blocks.append(TextBlock(
            kind=BlockKind.INSTRUCTIONS,
            paragraphs=(
                _heading("Instructions", template),
                *(_body(format_step(step), template, indent=4.0, space_before=1.5)
                  for step in recipe.instructions),
            ),
            splittable=True,
            keep_lines=2,
            recipe_id=rid,
        ))

    if options.include_notes and recipe.personal_notes and recipe.personal_notes.strip():
        blocks.append(TextBlock(
            kind=BlockKind.NOTES,
            paragraphs=(
                _heading("Personal Notes", template),
                _body(recipe.personal_notes, template, italic=True, space_before=0.8),
            ),
            splittable=True,
            keep_lines=2,
            recipe_id=rid,
        ))

    if options.include_nutrition and recipe.nutrition is not None:
        rows = nutrition_rows(recipe.nutrition)
        if template.has(Decoration.CHEF):
            blocks.append(NutritionBlock(heading=NUTRITION_HEADING, rows=rows, recipe_id=rid))
        else:
            summary = "  |  ".join(f"{label}: {value}" for label, value in rows)
            blocks.append(TextBlock(
                kind=BlockKind.NUTRITION,
                paragraphs=(
                    _heading(NUTRITION_HEADING, template),
                    _body(summary, template, space_before=0.8),
                ),
                recipe_id=rid,
            ))

    tips = [t for t in recipe.tips if t.strip()]
    if options.include_tips and tips:
        blocks.append(TextBlock(
            kind=BlockKind.TIPS,
            paragraphs=(
                _heading("Tips", template),
                *(_body(f"• {tip}", template, indent=4.0, space_before=0.8)
                  for tip in tips),
            ),
            splittable=True,
            keep_lines=2,
            recipe_id=rid,
        ))

    return blocks


# ---------------------------------------------------------------------------
# Body pass
# ---------------------------------------------------------------------------

@dataclass
class BodyLayout:
    """Body pages plus the body-relative page index each recipe starts on."""

    pages: list[Page]
    recipe_start_page: dict[str, int] = field(default_factory=dict)


def layout_body(
    book: RecipeBook,
    template: TemplateConfig,
    geometry: PageGeometry,
    options: GenerationOptions,
    images: Mapping[str, RasterImage] | None = None,
    issues: list[GenerationIssue] | None = None,
) -> BodyLayout:
    """Lay out every recipe, each starting on a new page, in input order."""
    images = images or {}
    assembler = DocumentAssembler(geometry, book.name)
    engine = FlowLayoutEngine(assembler, template, geometry, issues)
    starts: dict[str, int] = {}

    for number, recipe in enumerate(book.recipes, start=1):
        photo = images.get(recipe.id, recipe.photo) if options.include_photos else None
        blocks = build_recipe_blocks(recipe, number, template, options, photo)

        cursor = engine.open_cursor()
        for block in blocks:
            page = engine.place_block(cursor, block)
            if block.kind == BlockKind.TITLE:
                starts[recipe.id] = page.index
        logger.debug(
            "Recipe %s: %d block(s), pages %d-%d",
            recipe.id, len(blocks), starts[recipe.id], cursor.page.index,
        )

    return BodyLayout(pages=assembler.release(), recipe_start_page=starts)
