"""
Command-line interface for pdfsplice.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from pdfsplice import __version__
from pdfsplice.batch import BatchRunner
from pdfsplice.config import Settings
from pdfsplice.core.document import Document
from pdfsplice.core.utils import get_logger
from pdfsplice.exceptions import PdfSpliceError
from pdfsplice.extract.extractor import extract_exercise_numbers
from pdfsplice.fetch.http import HttpFetcher
from pdfsplice.fetch.listing import fetch_week_list
from pdfsplice.merge.merger import merge_documents

console = Console()


def _settings(ctx, **overrides):
    return ctx.obj["settings"].with_updates(**overrides)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """
    pdfsplice - Append the cited exercise sheets to weekly colle programs.
    """
    get_logger("pdfsplice", logging.DEBUG if verbose else logging.WARNING)
    ctx.ensure_object(dict)
    try:
        ctx.obj["settings"] = Settings.from_env()
    except ValueError as e:
        console.print(f"[bold red]✗ Invalid configuration:[/bold red] {e}")
        sys.exit(2)


@cli.command(name="run")
@click.option(
    '--output-dir', '-o',
    default=None,
    help='Directory receiving one <week>.pdf per week',
    type=click.Path()
)
@click.option('--index-url', default=None, help='Page listing the weekly programs', type=str)
@click.option('--template', default=None, help="Secondary URL template containing '{numbers}'", type=str)
@click.option('--delay', default=None, help='Seconds to wait between weeks', type=float)
@click.pass_context
def run(ctx, output_dir, index_url, template, delay):
    """
    Build the augmented PDF of every week listed on the index page.

    Weeks whose output file already exists are skipped.

    Examples:

        pdfsplice run -o programs

        pdfsplice run --delay 5
    """
    try:
        settings = _settings(
            ctx,
            output_dir=output_dir,
            index_url=index_url,
            secondary_url_template=template,
            request_delay=delay,
        )
    except ValueError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(2)

    try:
        with HttpFetcher(settings) as fetcher:
            console.print(f"\n[bold cyan]Fetching week list at[/bold cyan] {settings.index_url}")
            urls = fetch_week_list(fetcher.fetch_text, settings.index_url)

            if not urls:
                console.print("\n[bold yellow]⚠ No weeks found on the index page[/bold yellow]")
                sys.exit(0)

            console.print(f"[bold green]✓ Found {len(urls)} week(s)[/bold green]\n")
            runner = BatchRunner(fetcher.fetch, settings)

            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                task = progress.add_task("Processing weeks", total=len(urls))

                def update_progress(url, current, total):
                    progress.update(task, completed=current, description=f"Week {current}/{total}")

                results = runner.run(urls, settings.output_dir, progress_callback=update_progress)
    except PdfSpliceError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    summary_table = Table(title="Batch Summary", show_header=False)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="green")
    summary_table.add_row("Total Weeks", str(results.total))
    summary_table.add_row("✓ Generated", f"[green]{results.success}[/green]")
    summary_table.add_row("↷ Skipped", str(results.skipped))
    summary_table.add_row("✗ Failed", f"[red]{results.failure}[/red]")
    summary_table.add_row("Output Directory", os.path.abspath(settings.output_dir))
    console.print(summary_table)

    if results.failure > 0:
        console.print("\n[bold red]Failed Weeks:[/bold red]")
        for result in results.results:
            if result.status == 'failure':
                console.print(f"  ✗ Week {result.week}: {result.error}")

    console.print()
    sys.exit(0 if results.failure == 0 else 1)


@cli.command(name="build")
@click.argument('url', type=str)
@click.argument('output', type=click.Path())
@click.option('--template', default=None, help="Secondary URL template containing '{numbers}'", type=str)
@click.pass_context
def build(ctx, url, output, template):
    """
    Build the augmented PDF of a single weekly program.

    Example:

        pdfsplice build https://example.org/week1.pdf week1.pdf
    """
    try:
        settings = _settings(ctx, secondary_url_template=template)
        with HttpFetcher(settings) as fetcher:
            result = BatchRunner(fetcher.fetch, settings).build(url, output)
    except (PdfSpliceError, OSError, ValueError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    if result.numbers:
        console.print(f"[dim]Exercises: {', '.join(map(str, result.numbers))}[/dim]")
        console.print(f"[dim]Pages appended: {result.pages_appended}[/dim]")
    console.print(f"\n[bold green]✓ Successfully created:[/bold green] {output}\n")


@cli.command(name="merge")
@click.argument('primary', type=click.Path(exists=True))
@click.argument('secondary', type=click.Path(exists=True))
@click.argument('output', type=click.Path())
def merge(primary, secondary, output):
    """
    Append the pages of SECONDARY to PRIMARY and write OUTPUT.

    Example:

        pdfsplice merge program.pdf exercises.pdf combined.pdf
    """
    try:
        destination = Document.open(primary)
        source = Document.open(secondary)
        appended = merge_documents(destination, source)
        destination.save(output)
    except (PdfSpliceError, OSError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    console.print(f"\n[bold green]✓ Appended {appended} page(s):[/bold green] {output}\n")


@cli.command(name="extract")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.option('--marker', default=None, help='Marker preceding each exercise number', type=str)
@click.pass_context
def extract(ctx, input_pdf, marker):
    """
    Print the exercise numbers cited by a PDF.

    Example:

        pdfsplice extract program.pdf
    """
    try:
        settings = _settings(ctx, marker=marker)
        document = Document.open(input_pdf)
        numbers = extract_exercise_numbers(document, marker=settings.marker)
    except (PdfSpliceError, ValueError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    if not numbers:
        console.print("[bold yellow]⚠ No exercise numbers found[/bold yellow]")
        return
    click.echo(numbers.join(settings.separator))


if __name__ == '__main__':
    cli()
