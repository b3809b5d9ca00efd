"""Page sizes and the usable area inside the margins (millimetres)."""

from __future__ import annotations

from dataclasses import dataclass

from ..core.models import PageSize

PAGE_SIZES_MM: dict[PageSize, tuple[float, float]] = {
    PageSize.A4: (210.0, 297.0),
    PageSize.LETTER: (215.9, 279.4),
}

# Vertical gap left after every placed block
BLOCK_SPACING = 5.0


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    margin: float

    @classmethod
    def for_page_size(cls, page_size: PageSize, margin: float) -> "PageGeometry":
        width, height = PAGE_SIZES_MM[PageSize(page_size)]
        return cls(width=width, height=height, margin=margin)

    @property
    def top(self) -> float:
        return self.margin

    @property
    def bottom(self) -> float:
        return self.height - self.margin

    @property
    def left(self) -> float:
        return self.margin

    @property
    def right(self) -> float:
        return self.width - self.margin

    @property
    def content_width(self) -> float:
        return self.right - self.left

    @property
    def usable_height(self) -> float:
        return self.bottom - self.top
