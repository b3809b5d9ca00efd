"""recipebook: lay out curated recipes as a paginated, print-ready PDF.

Modules
-------
core/        — input models, errors, photo prefetch
generators/  — template registry and the PDF generator
layout/      — text measurement, flow layout, decorations, page assembly
pipeline     — load JSON -> prefetch -> generate -> write
cli          — ``recipebook`` command line
"""

__version__ = "0.1.0"

from .core.errors import ImageAcquisitionError, RecipeBookError, SerializationError  # noqa: E402
from .core.models import GenerationOptions, GenerationResult, Recipe, RecipeBook  # noqa: E402
from .generators.pdf_generator import RecipeBookPdfGenerator, generate_recipe_book  # noqa: E402

__all__ = [
    "__version__",
    "GenerationOptions",
    "GenerationResult",
    "ImageAcquisitionError",
    "Recipe",
    "RecipeBook",
    "RecipeBookError",
    "RecipeBookPdfGenerator",
    "SerializationError",
    "generate_recipe_book",
]
