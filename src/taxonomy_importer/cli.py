"""Command-line interface for the taxonomy CSV importer."""

import csv
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .config import ImporterConfig, load_config
from .core.columns import ColumnMap, is_blank_row
from .core.importer import TaxonomyImporter, new_session_id, open_csv
from .models.terms import TaxonomyKind, TermRecord
from .observability import configure_logging
from .store.sqlite import SQLiteTermStore
from .utils.exceptions import ImporterError

app = typer.Typer(
    name="taxonomy-import",
    help="Import categories and tags from CSV files",
    add_completion=False,
)

console = Console()


def _load_config_or_exit(config_file: Path | None) -> ImporterConfig:
    try:
        return load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]ERROR: Could not load configuration:[/red] {e}")
        raise typer.Exit(code=1) from e


@app.command("import")
def import_csv(
    csv_file: Path = typer.Argument(..., help="CSV file to import", exists=True, dir_okay=False),
    taxonomy: str | None = typer.Option(
        None, "--taxonomy", "-t", help="Taxonomy to import into: category or tag"
    ),
    db: Path | None = typer.Option(None, "--db", help="Term store database path"),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Configuration file"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log verbosity: DEBUG, INFO, WARNING, ERROR",
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON"),
) -> None:
    """
    Import taxonomy terms from a CSV file.

    The CSV needs a header row with a "name" column. Optional columns:
    slug, description, parent. Parents (categories only) are matched by
    name or slug against existing terms and rows earlier in the file.

    Examples:
        taxonomy-import import categories.csv
        taxonomy-import import tags.csv --taxonomy tag
        taxonomy-import import categories.csv --db site.db --log-level DEBUG
    """
    config = _load_config_or_exit(config_file)

    configure_logging(
        level=log_level or config.logging.level,
        json_logs=json_logs or config.logging.json_logs,
        log_file=config.logging.file,
    )

    kind = taxonomy or config.importer.default_taxonomy.value
    db_path = db or Path(config.store.path)
    session_id = new_session_id()

    console.print(
        Panel.fit(
            f"[bold blue]Taxonomy CSV Import[/bold blue]\n\n"
            f"Session ID: [cyan]{session_id}[/cyan]\n"
            f"CSV File: {csv_file}\n"
            f"Taxonomy: [yellow]{kind}[/yellow]\n"
            f"Term Store: {db_path}",
            border_style="blue",
        )
    )

    with SQLiteTermStore(db_path) as store:
        importer = TaxonomyImporter(store)
        result = importer.import_file(
            csv_file, kind, encoding=config.importer.encoding, session_id=session_id
        )

    if not result.success:
        console.print(f"\n[bold red]Import failed:[/bold red] {result.message}")
        raise typer.Exit(code=1)

    console.print("\n[bold green]Import completed successfully![/bold green]")

    table = Table(title="Import Results")
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", justify="right", style="green")
    table.add_row("Created", str(result.created))
    table.add_row("Skipped", str(result.skipped))
    table.add_row("Errors", str(result.errors))
    console.print(table)
    console.print(result.summary())
    if result.message:
        console.print(f"[yellow]WARNING: {result.message}; later rows were not imported[/yellow]")


@app.command()
def validate(
    csv_file: Path = typer.Argument(..., help="CSV file to validate", exists=True, dir_okay=False),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Configuration file"),
) -> None:
    """
    Check a CSV file's header and rows without touching the term store.

    Examples:
        taxonomy-import validate categories.csv
    """
    config = _load_config_or_exit(config_file)
    console.print(f"\n[bold blue]Validating CSV:[/bold blue] {csv_file}\n")

    data_rows = 0
    blank_rows = 0
    blank_names = 0

    try:
        with open_csv(csv_file, config.importer.encoding) as f:
            reader = csv.reader(f)
            columns = ColumnMap.from_header(next(reader, None))
            for row in reader:
                if is_blank_row(row):
                    blank_rows += 1
                    continue
                data_rows += 1
                if not columns.cell(row, columns.name):
                    blank_names += 1
    except (ImporterError, OSError, csv.Error) as e:
        console.print(f"[red]ERROR: Validation failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print("[green]PASS: Header is valid[/green]")

    columns_table = Table(title="Columns")
    columns_table.add_column("Column", style="cyan")
    columns_table.add_column("Present", justify="center")
    columns_table.add_row("name", "yes")
    for column, present in columns.optional_columns.items():
        columns_table.add_row(column, "yes" if present else "[yellow]no[/yellow]")
    console.print(columns_table)

    console.print(f"  Data rows: {data_rows}")
    console.print(f"  Blank rows: {blank_rows}")
    if blank_names:
        console.print(f"[yellow]  Rows without a name (will be skipped): {blank_names}[/yellow]")


@app.command()
def terms(
    taxonomy: str | None = typer.Option(
        None, "--taxonomy", "-t", help="Only show this taxonomy (category or tag)"
    ),
    db: Path | None = typer.Option(None, "--db", help="Term store database path"),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Configuration file"),
) -> None:
    """
    Show the terms in the store as a tree.

    Examples:
        taxonomy-import terms
        taxonomy-import terms --taxonomy category --db site.db
    """
    config = _load_config_or_exit(config_file)

    try:
        kinds = [TaxonomyKind.parse(taxonomy)] if taxonomy else list(TaxonomyKind)
    except ImporterError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        raise typer.Exit(code=1) from e

    with SQLiteTermStore(db or Path(config.store.path)) as store:
        for kind in kinds:
            console.print(_build_tree(kind, store.list_terms(kind)))


def _build_tree(kind: TaxonomyKind, records: list[TermRecord]) -> Tree:
    """Nest terms under their parents; orphans hang off the root."""
    root = Tree(f"[bold]{kind.value}[/bold] ({len(records)})")
    if not records:
        root.add("[dim]no terms[/dim]")
        return root

    ids = {record.term_id for record in records}
    children: dict[int, list[TermRecord]] = {}
    for record in records:
        parent_id = record.parent_id if record.parent_id in ids else 0
        children.setdefault(parent_id, []).append(record)

    def attach(node: Tree, parent_id: int) -> None:
        for record in children.get(parent_id, []):
            attach(node.add(f"{record.name} [dim]({record.slug})[/dim]"), record.term_id)

    attach(root, 0)
    return root
