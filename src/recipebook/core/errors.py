"""Exceptions raised by the recipe-book generator.

Only :class:`SerializationError` aborts a generation run. Everything else
(content overflow, unknown templates, photos that cannot be acquired) is
recorded as a :class:`~recipebook.core.models.GenerationIssue` and the
run carries on.
"""

from __future__ import annotations


class RecipeBookError(Exception):
    """Base class for generator errors."""


class SerializationError(RecipeBookError):
    """The laid-out pages could not be encoded into the output document."""


class ImageAcquisitionError(RecipeBookError):
    """A recipe photo could not be fetched or decoded."""

    def __init__(self, message: str, recipe_id: str | None = None) -> None:
        super().__init__(message)
        self.recipe_id = recipe_id
