"""recipebook CLI: turn a recipe book JSON file into a printable PDF."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console

from . import __version__
from .config import Settings
from .core.models import GenerationOptions, PageSize
from .generators.templates import list_templates

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _hex(rgb: tuple[int, int, int]) -> str:
    return f"#{rgb[0]:02X}{rgb[1]:02X}{rgb[2]:02X}"


@click.group()
@click.version_option(version=__version__, prog_name="recipebook")
def main():
    """recipebook — Lay out curated recipes as a print-ready PDF book."""
    pass


@main.command()
@click.argument("book_json", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output",
    "output_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Output directory (default: $RECIPEBOOK_OUTPUT_DIR or ./output).",
)
@click.option(
    "--template",
    "template_id",
    default=None,
    help="Override the book's template (minimalist, elegant, family, professional).",
)
@click.option(
    "--page-size",
    type=click.Choice([s.value for s in PageSize], case_sensitive=False),
    default=None,
    help="Paper size (default: $RECIPEBOOK_PAGE_SIZE or A4).",
)
@click.option("--no-notes", is_flag=True, default=False, help="Leave out personal notes.")
@click.option("--no-nutrition", is_flag=True, default=False, help="Leave out nutrition facts.")
@click.option("--no-tips", is_flag=True, default=False, help="Leave out tips.")
@click.option("--no-photos", is_flag=True, default=False, help="Lay out recipes without photos.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def generate(
    book_json: str,
    output_dir: str | None,
    template_id: str | None,
    page_size: str | None,
    no_notes: bool,
    no_nutrition: bool,
    no_tips: bool,
    no_photos: bool,
    verbose: bool,
):
    """Generate a PDF recipe book from BOOK_JSON."""
    from .pipeline import Pipeline

    _setup_logging(verbose)
    settings = Settings.from_env()

    size = settings.page_size
    if page_size:
        size = next(s for s in PageSize if s.value.lower() == page_size.lower())

    options = GenerationOptions(
        include_notes=not no_notes,
        include_nutrition=not no_nutrition,
        include_tips=not no_tips,
        include_photos=not no_photos,
        page_size=size,
    )

    pipeline = Pipeline(settings=settings)
    result = pipeline.run(
        book_json,
        output_dir=output_dir,
        options=options,
        template_id=template_id,
    )

    if not result.success:
        raise SystemExit(1)


@main.command()
def templates():
    """List available recipe book templates."""
    from rich.table import Table as RichTable

    table = RichTable(title="Available Templates", show_lines=False)
    table.add_column("Id", style="bold cyan")
    table.add_column("Name")
    table.add_column("Primary Color", style="bold")
    table.add_column("Accent Color", style="bold")
    table.add_column("Title Font")
    table.add_column("Body Font")
    table.add_column("Decorations")
    table.add_column("Premium")

    for t in list_templates():
        p_hex, a_hex = _hex(t.primary_color), _hex(t.accent_color)
        table.add_row(
            t.id,
            t.display_name,
            f"[{p_hex}]██ {p_hex}[/]",
            f"[{a_hex}]██ {a_hex}[/]",
            t.title_font,
            t.body_font,
            ", ".join(sorted(d.value for d in t.decoration_flags)) or "-",
            "yes" if t.is_premium else "no",
        )

    console.print(table)


@main.command()
@click.argument("book_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--template", "template_id", default=None, help="Override the book's template.")
@click.option(
    "--page-size",
    type=click.Choice([s.value for s in PageSize], case_sensitive=False),
    default="A4",
)
def inspect(book_json: str, template_id: str | None, page_size: str):
    """Lay out BOOK_JSON and show the page structure without writing a PDF."""
    from rich.tree import Tree

    from .generators.pdf_generator import RecipeBookPdfGenerator
    from .pipeline import load_book

    book = load_book(book_json)
    if template_id:
        book = book.model_copy(update={"template_id": template_id})
    size = next(s for s in PageSize if s.value.lower() == page_size.lower())

    rendered = RecipeBookPdfGenerator().render(
        book, GenerationOptions(page_size=size, include_photos=False)
    )

    tree = Tree(f"[bold]{book.name}[/bold]")
    tree.add(f"[dim]Template: {rendered.template.display_name}[/dim]")
    tree.add(f"[dim]Pages: {rendered.page_count}[/dim]")

    toc_node = tree.add("[bold]Contents[/bold]")
    for entry in rendered.toc:
        toc_node.add(f"{entry.label} [dim]→ page {entry.page_number}[/dim]")

    pages_node = tree.add("[bold]Pages[/bold]")
    for page in rendered.pages:
        node = pages_node.add(
            f"[blue]{page.index + 1}[/blue] {page.role.value} "
            f"[dim]({len(page.commands)} commands, "
            f"{page.consumed_height:.1f} mm used)[/dim]"
        )
        for block in page.blocks:
            flag = " [red]oversized[/red]" if block.oversized else ""
            node.add(f"{block.kind} [dim]{block.height:.1f} mm[/dim]{flag}")

    for issue in rendered.issues:
        tree.add(f"[yellow]⚠ {issue.kind.value}: {issue.message}[/yellow]")

    console.print(tree)


if __name__ == "__main__":
    main()
