"""Abstract base class for recipe-book generators."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional

from ..core.models import GenerationOptions, GenerationResult, RasterImage, RecipeBook

# Anything that is not an ASCII letter or digit becomes a dash
_UNSAFE_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


class BaseGenerator(ABC):
    """Every generator inherits from this class.

    A generator turns a ``RecipeBook`` (plus options and any photos that
    were acquired beforehand) into document bytes. It performs no file or
    network I/O of its own.
    """

    extension: str  # set by subclasses

    @abstractmethod
    def generate(
        self,
        book: RecipeBook,
        options: Optional[GenerationOptions] = None,
        images: Optional[Mapping[str, RasterImage]] = None,
    ) -> GenerationResult:
        """Produce the document and return a ``GenerationResult``."""
        ...

    # -- Helpers ---------------------------------------------------------

    def output_filename(self, book: RecipeBook) -> str:
        return self._safe_filename(book.name, self.extension)

    @staticmethod
    def _safe_filename(name: str, ext: str) -> str:
        """``"Sunday Roasts!"`` -> ``"sunday-roasts--recipe-book.pdf"``."""
        safe = _UNSAFE_RE.sub("-", name).lower() or "untitled"
        return f"{safe}-recipe-book.{ext}"

    @staticmethod
    def _ensure_dir(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        return path
