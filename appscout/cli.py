"""
Terminal entry point.
Run with: appscout [--input terms.txt] [--term fitness --term yoga] [--yes]

Collects search terms (file + typed input), lets you drop the ones you don't
want, then scrapes both stores and writes the combined CSV.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from appscout.config import EXPORT_NAME, INPUT_FILE, OUTPUT_DIR, SEARCH_LIMIT
from appscout.models import STORE_TITLES
from appscout.pipeline import run_pipeline
from appscout.terms import collect_terms, read_terms_from_file, split_input_terms

app = typer.Typer(add_completion=False, help="Search Google Play and the App Store, export one combined CSV.")
console = Console()


def select_terms(terms: list[str]) -> list[str]:
    """Ask for every term whether it should be scraped. Enter keeps it."""
    console.print("[bold]Please select the search terms you want to scrape[/bold]")
    return [term for term in terms if typer.confirm(f"  {term}", default=True)]


def prompt_for_terms(input_file: Path, extra_terms: list[str], ask: bool = True) -> list[str]:
    """File terms first, then --term options, then typed input and the selection step."""
    imported = read_terms_from_file(str(input_file)) or []
    typed = []
    if ask:
        typed = split_input_terms(typer.prompt(
            "Please enter further search terms separated by commas and confirm with Enter",
            default="", show_default=False,
        ))
    terms = collect_terms(imported, extra_terms, typed)
    if not terms or not ask:
        return terms
    return select_terms(terms)


def _summary_table(report) -> Table:
    table = Table(title="Run summary")
    table.add_column("Store")
    table.add_column("Found", justify="right")
    table.add_column("Duplicates", justify="right")
    table.add_column("Remaining", justify="right")
    for store, found in report.found.items():
        table.add_row(STORE_TITLES[store], str(found), str(report.removed(store)),
                      str(report.remaining.get(store, 0)))
    return table


@app.command()
def run(
    input_file: Path = typer.Option(Path(INPUT_FILE), "--input", "-i", help="Text file with one search term per line."),
    term: Optional[list[str]] = typer.Option(None, "--term", "-t", help="Extra search term (repeatable)."),
    output: Path = typer.Option(Path(OUTPUT_DIR), "--output", "-o", help="Folder for the CSV."),
    name: str = typer.Option(EXPORT_NAME, "--name", "-n", help="CSV file name without extension."),
    limit: int = typer.Option(SEARCH_LIMIT, "--limit", min=1, help="Max apps per store per term."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't prompt, use the file and --term values as given."),
):
    """Scrape both app stores for the search terms and export the combined apps."""
    terms = prompt_for_terms(input_file, term or [], ask=not yes)
    if not terms:
        console.print("[yellow]No search terms given. Nothing to do.[/yellow]")
        raise typer.Exit(code=1)

    try:
        report = run_pipeline(terms, export_name=name, output_dir=str(output), count=limit)
    except OSError as e:
        console.print(f"[red]Export failed:[/red] {e}")
        raise typer.Exit(code=2)

    console.print(_summary_table(report))
    console.print(f"[green]{len(report.apps)} apps ({report.in_both_stores} in both stores)[/green]"
                  f" -> {report.csv_path}")
    if report.failures:
        console.print(f"[yellow]{len(report.failures)} search(es) failed, see above.[/yellow]")


if __name__ == "__main__":
    app()
