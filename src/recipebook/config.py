"""Runtime settings read from ``RECIPEBOOK_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .core.models import PageSize

logger = logging.getLogger(__name__)

ENV_PREFIX = "RECIPEBOOK_"


def _as_int(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer setting %r, using %d", value, default)
        return default


def _as_float(value: Optional[str], default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric setting %r, using %s", value, default)
        return default


def _as_page_size(value: Optional[str], default: PageSize) -> PageSize:
    if value is None or not value.strip():
        return default
    for size in PageSize:
        if size.value.lower() == value.strip().lower():
            return size
    logger.warning("Unknown page size %r, using %s", value, default.value)
    return default


@dataclass
class Settings:
    """Pipeline settings."""

    prefetch_concurrency: int = 4
    image_timeout: float = 20.0
    output_dir: Path = field(default_factory=lambda: Path("./output"))
    page_size: PageSize = PageSize.A4

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        output_dir = env.get(f"{ENV_PREFIX}OUTPUT_DIR")
        return cls(
            prefetch_concurrency=max(
                1, _as_int(env.get(f"{ENV_PREFIX}PREFETCH_CONCURRENCY"),
                           defaults.prefetch_concurrency),
            ),
            image_timeout=_as_float(env.get(f"{ENV_PREFIX}IMAGE_TIMEOUT"),
                                    defaults.image_timeout),
            output_dir=Path(output_dir) if output_dir else defaults.output_dir,
            page_size=_as_page_size(env.get(f"{ENV_PREFIX}PAGE_SIZE"), defaults.page_size),
        )
