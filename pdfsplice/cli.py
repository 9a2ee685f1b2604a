"""
Command-line interface for pdfsplice.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.table import Table

from pdfsplice import __version__
from pdfsplice.config import SpliceOptions
from pdfsplice.exceptions import PdfSpliceError
from pdfsplice.merge import merge
from pdfsplice.normalize import normalize
from pdfsplice.store import page_count

console = Console()

EXIT_FAILURE = 1
EXIT_ABORTED = 2


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def cli(verbose):
    """
    pdfsplice - insert one PDF into another at several pages.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="count")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
def count_pages(input_pdf):
    """
    Print the number of pages of a PDF file.

    Example:

        pdfsplice count input.pdf
    """
    try:
        console.print(page_count(input_pdf))
    except PdfSpliceError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(EXIT_FAILURE)


@cli.command(name="make-even")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
def make_even(input_pdf):
    """
    Append a blank page if the PDF has an odd number of pages.

    The file is modified in place.

    Example:

        pdfsplice make-even handout.pdf
    """
    try:
        result = normalize(input_pdf)
    except PdfSpliceError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(EXIT_FAILURE)

    if result.modified:
        console.print(
            f"[bold green]✓ Added a blank page:[/bold green] "
            f"{result.original_pages} → {result.page_count} pages"
        )
    else:
        console.print(
            f"[dim]{os.path.basename(input_pdf)} already has "
            f"{result.page_count} pages, nothing to do[/dim]"
        )


@cli.command(name="insert")
@click.argument('destination', type=click.Path(exists=True, dir_okay=False))
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--after', '-a',
    'after_pages',
    multiple=True,
    required=True,
    type=int,
    help='0-based destination page after which SOURCE is inserted (repeatable)'
)
@click.option(
    '--normalize-points',
    is_flag=True,
    help='Sort and de-duplicate insertion points instead of rejecting them'
)
@click.option('--no-compress', is_flag=True, help='Do not flate-encode uncompressed streams')
@click.option('--no-metadata', is_flag=True, help='Do not keep the destination document info')
def insert(destination, source, after_pages, normalize_points, no_compress, no_metadata):
    """
    Insert SOURCE into DESTINATION after each given page.

    DESTINATION is overwritten with the merged document.

    Examples:

        pdfsplice insert book.pdf divider.pdf -a 0 -a 4 -a 8

        pdfsplice insert book.pdf divider.pdf -a 8 -a 0 --normalize-points
    """
    options = SpliceOptions(
        compress_streams=not no_compress,
        keep_metadata=not no_metadata,
        insertion_policy="normalize" if normalize_points else "strict",
    )
    try:
        result = merge(destination, list(after_pages), source, options=options)
    except PdfSpliceError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(EXIT_FAILURE)

    if not result.success:
        console.print(f"[bold yellow]! Merge aborted:[/bold yellow] {result.error}")
        console.print(f"[dim]{os.path.abspath(destination)} was not modified[/dim]")
        sys.exit(EXIT_ABORTED)

    table = Table(title="Merge Result", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Destination pages", str(result.destination_pages))
    table.add_row("Source pages", str(result.source_pages))
    table.add_row("Insertion points", ", ".join(str(p) for p in result.insertion_points))
    table.add_row("Merged pages", str(result.page_count))

    console.print(table)
    console.print(f"[bold green]✓ Wrote {os.path.abspath(destination)}[/bold green]")


if __name__ == "__main__":  # pragma: no cover
    cli()
