"""Shared fixtures for the recipebook test suite."""

from __future__ import annotations

import io
from datetime import date
from pathlib import Path

import pytest
from PIL import Image

from recipebook.core.models import (
    InstructionStep,
    NutritionInfo,
    RasterImage,
    Recipe,
    RecipeBook,
    RecipeIngredient,
)

EXAMPLES = Path(__file__).parent.parent / "examples"
FIXED_DATE = date(2024, 5, 1)


def _png_bytes(width: int = 40, height: int = 30, color=(200, 80, 40)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return _png_bytes


@pytest.fixture
def photo() -> RasterImage:
    return RasterImage(data=_png_bytes(), width=40, height=30, format="PNG")


@pytest.fixture
def sample_book_path() -> Path:
    return EXAMPLES / "sample_book.json"


@pytest.fixture
def sample_book(sample_book_path) -> RecipeBook:
    return RecipeBook.model_validate_json(sample_book_path.read_text(encoding="utf-8"))


@pytest.fixture
def fixed_date() -> date:
    return FIXED_DATE


@pytest.fixture
def make_recipe():
    """Factory for recipes with a chosen amount of content."""

    def _make(
        rid: str,
        title: str = "",
        *,
        steps: int = 3,
        ingredients: int = 4,
        **extra,
    ) -> Recipe:
        return Recipe(
            id=rid,
            title=title or f"Recipe {rid}",
            description="A simple dish for testing.",
            servings=2,
            prep_time=5,
            cook_time=10,
            ingredients=[
                RecipeIngredient(name=f"ingredient {i}", amount=i + 1, unit="g")
                for i in range(ingredients)
            ],
            instructions=[
                InstructionStep(
                    step=i + 1,
                    instruction=f"Do step number {i + 1} carefully and keep stirring "
                                "until everything is well combined and warm.",
                )
                for i in range(steps)
            ],
            nutrition=NutritionInfo(calories=300, protein=10, carbs=40, fat=8),
            personal_notes="Family favourite.",
            tips=["Serve warm."],
            **extra,
        )

    return _make


@pytest.fixture
def make_book(make_recipe):
    def _make(n: int = 2, template_id: str = "minimalist", **recipe_kwargs) -> RecipeBook:
        return RecipeBook(
            id="book-test",
            name="Test Book",
            description="Recipes for tests.",
            template_id=template_id,
            recipes=[make_recipe(f"r{i + 1}", **recipe_kwargs) for i in range(n)],
        )

    return _make
