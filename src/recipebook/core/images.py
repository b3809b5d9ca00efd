"""Acquire and decode recipe photos before layout begins.

Every recipe photo is requested in parallel (bounded by a semaphore) and
the whole batch is awaited before the layout engine sees the book, so the
two-column decision never races an in-flight download. Each item fails
independently: a photo that cannot be fetched or decoded is recorded and
that recipe is laid out as text only.

Supported photo sources:

- ``http://`` / ``https://`` URLs (fetched with :mod:`httpx`)
- ``data:`` URIs with a base64 payload
- local file paths
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx
from PIL import Image

from .errors import ImageAcquisitionError
from .models import GenerationIssue, IssueKind, RasterImage, Recipe, RecipeBook

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DEFAULT_TIMEOUT = 20.0
_DEFAULT_CONCURRENCY = 4

# Formats ReportLab embeds as-is; anything else is re-encoded to PNG
_EMBEDDABLE_FORMATS = {"PNG", "JPEG"}


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def decode_image(data: bytes) -> RasterImage:
    """Validate raw image bytes with Pillow and return a ``RasterImage``.

    Raises ``ImageAcquisitionError`` if the bytes are not a readable image.
    """
    if not data:
        raise ImageAcquisitionError("empty image payload")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
        # verify() leaves the image unusable, so reopen for the real read
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            width, height = img.size
            fmt = (img.format or "").upper()
            if fmt not in _EMBEDDABLE_FORMATS:
                buf = io.BytesIO()
                img.convert("RGBA").save(buf, format="PNG")
                data, fmt = buf.getvalue(), "PNG"
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageAcquisitionError(f"could not decode image: {exc}") from exc
    return RasterImage(data=data, width=width, height=height, format=fmt)


def _decode_data_uri(uri: str) -> bytes:
    header, _, payload = uri.partition(",")
    if ";base64" not in header:
        raise ImageAcquisitionError("only base64 data URIs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except ValueError as exc:
        raise ImageAcquisitionError(f"invalid base64 payload: {exc}") from exc


# ---------------------------------------------------------------------------
# Prefetch
# ---------------------------------------------------------------------------

@dataclass
class PrefetchResult:
    """Outcome of a prefetch batch.

    ``images`` maps recipe id to its decoded photo; ``failures`` maps
    recipe id to the reason its photo is missing.
    """

    images: dict[str, RasterImage] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def issues(self) -> list[GenerationIssue]:
        return [
            GenerationIssue(
                kind=IssueKind.IMAGE_ACQUISITION,
                message=reason,
                recipe_id=recipe_id,
            )
            for recipe_id, reason in self.failures.items()
        ]


class ImagePrefetcher:
    """Fetches and decodes all recipe photos of a book concurrently.

    Parameters
    ----------
    max_concurrency
        Upper bound on simultaneous fetches.
    timeout
        Per-request timeout in seconds for HTTP sources.
    transport
        Optional ``httpx`` async transport (tests inject a mock here).
    """

    def __init__(
        self,
        max_concurrency: int = _DEFAULT_CONCURRENCY,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.max_concurrency = max(1, max_concurrency)
        self.timeout = timeout
        self._transport = transport

    # -- public API ----------------------------------------------------------

    def prefetch(self, book: RecipeBook) -> PrefetchResult:
        """Blocking wrapper around :meth:`prefetch_async`."""
        return asyncio.run(self.prefetch_async(book))

    async def prefetch_async(self, book: RecipeBook) -> PrefetchResult:
        """Acquire every recipe photo; returns once all items have settled."""
        result = PrefetchResult()
        targets = [r for r in book.recipes if r.photo is not None or r.photo_url]
        if not targets:
            return result

        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            outcomes = await asyncio.gather(
                *(self._acquire(client, semaphore, recipe) for recipe in targets)
            )

        for recipe, (image, reason) in zip(targets, outcomes):
            if image is not None:
                result.images[recipe.id] = image
            else:
                result.failures[recipe.id] = reason
                logger.warning("Photo unavailable for recipe %s: %s", recipe.id, reason)

        logger.info(
            "Prefetched %d photo(s), %d failure(s)",
            len(result.images),
            len(result.failures),
        )
        return result

    # -- private -------------------------------------------------------------

    async def _acquire(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        recipe: Recipe,
    ) -> tuple[RasterImage | None, str]:
        if recipe.photo is not None:
            return recipe.photo, ""
        async with semaphore:
            try:
                raw = await self._read_source(client, recipe.photo_url or "")
                return decode_image(raw), ""
            except Exception as exc:
                return None, str(exc) or exc.__class__.__name__

    async def _read_source(self, client: httpx.AsyncClient, source: str) -> bytes:
        if source.startswith(("http://", "https://")):
            resp = await client.get(source)
            resp.raise_for_status()
            return resp.content
        if source.startswith("data:"):
            return _decode_data_uri(source)
        path = Path(source).expanduser()
        if not path.is_file():
            raise ImageAcquisitionError(f"photo file not found: {path}")
        return await asyncio.to_thread(path.read_bytes)
