"""Draw commands: the primitives a page is made of.

Coordinates are absolute page millimetres with the origin at the top-left
corner and ``y`` growing downwards. Conversion to PDF points (and the
flip to a bottom-left origin) happens only when the document is
serialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..core.models import RasterImage

RGB = tuple[int, int, int]


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class TextRun:
    """A single line of text. ``y`` is the baseline.

    For ``CENTER`` and ``RIGHT`` alignment ``x`` is the centre or the right
    edge of the run respectively.
    """

    x: float
    y: float
    text: str
    font: str
    size: float
    color: RGB = (0, 0, 0)
    align: TextAlign = TextAlign.LEFT


@dataclass(frozen=True)
class Rule:
    x1: float
    y1: float
    x2: float
    y2: float
    color: RGB = (0, 0, 0)
    thickness: float = 0.3


@dataclass(frozen=True)
class FilledRect:
    x: float
    y: float
    width: float
    height: float
    color: RGB = (255, 255, 255)
    radius: float = 0.0


@dataclass(frozen=True)
class Outline:
    x: float
    y: float
    width: float
    height: float
    color: RGB = (0, 0, 0)
    thickness: float = 0.3
    radius: float = 0.0


@dataclass(frozen=True)
class ImageBlit:
    x: float
    y: float
    width: float
    height: float
    image: RasterImage


DrawCommand = Union[TextRun, Rule, FilledRect, Outline, ImageBlit]
