"""Pydantic models for the recipe-book generator.

These models are the input contract handed over by the UI collaborator
(a fully-resolved ``RecipeBook`` plus ``GenerationOptions``) and the
result types returned by the generator and the pipeline.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    """Base for the frozen input models (camelCase JSON, snake_case attrs)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PageSize(str, Enum):
    """Supported paper sizes."""
    A4 = "A4"
    LETTER = "Letter"


class IssueKind(str, Enum):
    """Non-fatal conditions recorded while generating a book."""
    CONTENT_OVERFLOW = "content_overflow"
    IMAGE_ACQUISITION = "image_acquisition"
    UNKNOWN_TEMPLATE = "unknown_template"


# ---------------------------------------------------------------------------
# Recipe content
# ---------------------------------------------------------------------------

class RasterImage(_Model):
    """Decoded raster image bytes plus their pixel size."""
    data: bytes
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    format: str = "PNG"

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class RecipeIngredient(_Model):
    """One line of a recipe's ingredient list."""
    name: str
    amount: Optional[float] = None
    unit: str = ""
    optional: bool = False
    substitutes: list[str] = Field(default_factory=list)


class InstructionStep(_Model):
    """A numbered instruction (numbering is owned by the caller)."""
    step: int
    instruction: str
    duration: Optional[int] = None
    temperature: Optional[int] = None


class NutritionInfo(_Model):
    """Per-serving nutrition facts."""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None
    cholesterol: Optional[float] = None


class Recipe(_Model):
    """A recipe as curated into a book."""
    id: str
    title: str
    description: str = ""
    servings: int = 1
    prep_time: int = 0
    cook_time: int = 0
    total_time: Optional[int] = None
    cuisine: str = ""
    difficulty: str = ""
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    instructions: list[InstructionStep] = Field(default_factory=list)
    nutrition: Optional[NutritionInfo] = Field(
        default=None,
        validation_alias=AliasChoices("nutrition", "nutritionInfo", "nutrition_info"),
    )
    personal_notes: Optional[str] = None
    tips: list[str] = Field(default_factory=list)
    photo_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("photoUrl", "photo_url", "image"),
    )
    photo: Optional[RasterImage] = Field(default=None, exclude=True)

    @property
    def minutes_total(self) -> int:
        if self.total_time is not None:
            return self.total_time
        return self.prep_time + self.cook_time


class Section(_Model):
    """A named group of recipes in the book."""
    name: str
    recipe_ids: list[str] = Field(default_factory=list)


class RecipeBook(_Model):
    """The top-level input: a curated, deduplicated set of recipes."""
    id: str = ""
    name: str
    description: str = ""
    template_id: str = Field(
        default="minimalist",
        validation_alias=AliasChoices("templateId", "template_id", "template"),
    )
    sections: list[Section] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)

    @model_validator(mode="after")
    def _sections_reference_known_recipes(self) -> "RecipeBook":
        known = {r.id for r in self.recipes}
        for section in self.sections:
            missing = [rid for rid in section.recipe_ids if rid not in known]
            if missing:
                raise ValueError(
                    f"Section '{section.name}' references unknown recipes: "
                    + ", ".join(missing)
                )
        return self

    def section_of(self, recipe_id: str) -> Optional[str]:
        """Name of the first section listing *recipe_id*, if any."""
        for section in self.sections:
            if recipe_id in section.recipe_ids:
                return section.name
        return None


class GenerationOptions(_Model):
    """What optional content to include and the paper size.

    Unknown keys are ignored; omitted ones include everything on A4.
    """
    model_config = ConfigDict(extra="ignore")

    include_notes: bool = True
    include_nutrition: bool = True
    include_tips: bool = True
    include_photos: bool = True
    page_size: PageSize = PageSize.A4


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class GenerationIssue(BaseModel):
    """A recoverable condition recorded during generation."""
    kind: IssueKind
    message: str
    recipe_id: Optional[str] = None


class GenerationResult(BaseModel):
    """Result of a single generator run."""
    success: bool = True
    data: Optional[bytes] = None
    page_count: int = 0
    issues: list[GenerationIssue] = Field(default_factory=list)
    error: Optional[str] = None


class PipelineResult(BaseModel):
    """Aggregate result of a pipeline run (load → prefetch → generate → write)."""
    source: str = ""
    result: Optional[GenerationResult] = None
    output_path: Optional[Path] = None
    issues: list[GenerationIssue] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.result is not None and self.result.success
