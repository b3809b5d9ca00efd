"""Orchestration pipeline: load book -> prefetch photos -> generate -> write.

The generator itself never touches the filesystem or the network; this
module plays the part of the collaborator that does.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx
from pydantic import ValidationError
from rich.console import Console

from .config import Settings
from .core.images import ImagePrefetcher
from .core.models import GenerationOptions, PipelineResult, RecipeBook
from .generators.pdf_generator import RecipeBookPdfGenerator

logger = logging.getLogger(__name__)

console = Console()


def load_book(path: str | Path) -> RecipeBook:
    """Read and validate a recipe book JSON file."""
    return RecipeBook.model_validate_json(Path(path).read_text(encoding="utf-8"))


class Pipeline:
    """End-to-end recipe book JSON -> PDF pipeline.

    Usage::

        pipeline = Pipeline()
        result = pipeline.run("examples/sample_book.json")
        print(result.output_path)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        generator: Optional[RecipeBookPdfGenerator] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.prefetcher = ImagePrefetcher(
            max_concurrency=self.settings.prefetch_concurrency,
            timeout=self.settings.image_timeout,
            transport=transport,
        )
        self.generator = generator or RecipeBookPdfGenerator()

    def run(
        self,
        source: str | Path,
        *,
        output_dir: str | Path | None = None,
        options: Optional[GenerationOptions] = None,
        template_id: Optional[str] = None,
        output_name: Optional[str] = None,
    ) -> PipelineResult:
        """Run the full pipeline.

        Parameters
        ----------
        source
            Path to a recipe book JSON file.
        output_dir
            Directory the PDF is written to (defaults to the configured one).
        options
            Generation options. Defaults include everything at the
            configured page size.
        template_id
            Overrides the template named in the book.
        output_name
            File name to write instead of the one derived from the book name.
        """
        result = PipelineResult(source=str(source))
        options = options or GenerationOptions(page_size=self.settings.page_size)

        # -- Step 1: Load --------------------------------------------------
        console.print(f"\n[bold blue]📥 Loading recipe book from:[/] {source}")
        try:
            book = load_book(source)
        except (OSError, ValueError, ValidationError) as exc:
            console.print(f"[bold red]❌ Load failed:[/] {exc}")
            result.error = f"could not load book: {exc}"
            return result

        if template_id:
            book = book.model_copy(update={"template_id": template_id})
        console.print(
            f"[green]✓[/] Loaded '{book.name}': {len(book.recipes)} recipe(s), "
            f"{len(book.sections)} section(s)"
        )

        # -- Step 2: Prefetch photos ---------------------------------------
        images = {}
        if options.include_photos:
            console.print("[bold blue]🖼  Acquiring photos...[/]")
            prefetched = self.prefetcher.prefetch(book)
            images = prefetched.images
            result.issues.extend(prefetched.issues)
            console.print(
                f"[green]✓[/] {len(prefetched.images)} photo(s) ready"
                + (f", [yellow]{len(prefetched.failures)} unavailable[/]"
                   if prefetched.failures else "")
            )

        # -- Step 3: Generate ----------------------------------------------
        console.print("[bold blue]📄 Generating PDF...[/]")
        gen_result = self.generator.generate(book, options, images)
        result.result = gen_result
        result.issues.extend(gen_result.issues)
        if not gen_result.success or gen_result.data is None:
            console.print(f"[bold red]❌ Generation failed:[/] {gen_result.error}")
            result.error = gen_result.error
            return result

        # -- Step 4: Write -------------------------------------------------
        out_dir = Path(output_dir) if output_dir is not None else self.settings.output_dir
        out_dir = self.generator._ensure_dir(out_dir.resolve())
        out_path = out_dir / (output_name or self.generator.output_filename(book))
        out_path.write_bytes(gen_result.data)
        result.output_path = out_path

        for issue in result.issues:
            console.print(f"[yellow]⚠  {issue.kind.value}:[/] {issue.message}")
        console.print(
            f"[green]✓[/] PDF → {out_path} [dim]({gen_result.page_count} pages)[/]"
        )
        return result
