"""Practice Graph CLI Tool - Main entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from practice_graph import __version__
from practice_graph.adoption import (
    catalog_adoption_percentage,
    dependency_adoption_percentage,
    filter_valid_practice_ids,
)
from practice_graph.cli_utils import (
    EXIT_USER_ERROR,
    EXIT_VALIDATION_FAILED,
    CatalogLoadError,
    configure_logging,
    load_catalog,
    wire_config,
)
from practice_graph.config import PracticeGraphConfig
from practice_graph.graph import (
    CyclicDependencyError,
    build_dependency_graph,
    count_direct_dependencies,
    count_total_dependencies,
    flatten_tree,
    get_transitive_categories,
    group_by_level,
)
from practice_graph.models import AdjacencyMap, Metadata, Practice
from practice_graph.validators import (
    ValidationReport,
    parse_metadata,
    parse_practices,
    validate_full_schema,
)

app = typer.Typer(
    name="practice-graph",
    help="Practice Graph CLI Tool - Validate and explore the CD practice dependency catalog.",
    add_completion=False,
)

# Rich consoles for output
console = Console()
err_console = Console(stderr=True)


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _output_success(message: str, quiet: bool = False) -> None:
    """Print a success message."""
    if not quiet:
        console.print(f"[green]Success:[/green] {message}")


def _output_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error:[/red] {message}")


def _output_warning(message: str, quiet: bool = False) -> None:
    """Print a warning message."""
    if not quiet:
        err_console.print(f"[yellow]Warning:[/yellow] {message}")


def _exit_error(message: str, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print error and exit."""
    _output_error(message)
    raise typer.Exit(code=exit_code)


def catalog_argument() -> Any:
    return typer.Argument(..., help="Path to the catalog JSON document.")


def _validate_catalog(data: Any, config: PracticeGraphConfig) -> ValidationReport:
    return validate_full_schema(
        data,
        root_policy=config.root_policy,
        min_year=config.min_year,
        max_future_days=config.max_future_days,
    )


def _catalog_metadata(data: Any, config: PracticeGraphConfig) -> Metadata | None:
    if not isinstance(data, dict):
        return None
    return parse_metadata(
        data.get("metadata"),
        min_year=config.min_year,
        max_future_days=config.max_future_days,
    )


def _load_valid_catalog(
    catalog: Path, config: PracticeGraphConfig
) -> tuple[list[Practice], AdjacencyMap]:
    """Load a catalog and refuse to continue unless it validates."""
    try:
        data = load_catalog(catalog)
    except CatalogLoadError as e:
        _exit_error(str(e))

    report = _validate_catalog(data, config)
    if not report.is_valid:
        _exit_error(
            f"Catalog failed validation ({', '.join(report.error_categories)}); "
            "run 'practice-graph validate' for details",
            exit_code=EXIT_VALIDATION_FAILED,
        )
    return parse_practices(data["practices"]), build_dependency_graph(data["dependencies"])


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"practice-graph version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log validation and traversal details to stderr.",
    ),
) -> None:
    """Practice Graph CLI Tool - Validate and explore the CD practice dependency catalog."""
    configure_logging(verbose)


# -----------------------------------------------------------------------------
# Validate Command
# -----------------------------------------------------------------------------


@app.command()
def validate(
    catalog: Path = catalog_argument(),
    root_policy: str | None = typer.Option(
        None,
        "--root-policy",
        help="Treat a missing root practice as an 'error' or a 'warning'.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output for CI.",
    ),
) -> None:
    """Validate a catalog document.

    Checks structure, every practice and dependency, references, duplicates,
    circular dependencies, metadata and the root practice rule.

    Exits with code 2 if validation fails.
    """
    config = wire_config(root_policy=root_policy)

    try:
        data = load_catalog(catalog)
    except CatalogLoadError as e:
        if json_output:
            console.print_json(json.dumps({"isValid": False, "error": str(e)}))
        _exit_error(str(e))

    report = _validate_catalog(data, config)

    if json_output:
        console.print_json(json.dumps(report.to_dict()))
    else:
        if report.is_valid:
            _output_success("Catalog is valid", quiet)
        else:
            _output_error("Catalog failed validation")

        if not quiet:
            for category in report.error_categories:
                console.print(f"[bold]{category}[/bold]")
                for message in report.errors[category]:
                    console.print(f"  [red]-[/red] {message}")

            for message in report.warnings:
                _output_warning(message)

            if report.summary is not None:
                summary = report.summary
                console.print(
                    f"{summary.total_practices} practices, "
                    f"{summary.total_dependencies} dependencies"
                )

            metadata = _catalog_metadata(data, config)
            if metadata is not None:
                console.print(
                    f"Catalog version {metadata.version}, last updated {metadata.last_updated}"
                )

    if not report.is_valid:
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)


# -----------------------------------------------------------------------------
# Tree Command
# -----------------------------------------------------------------------------


@app.command()
def tree(
    catalog: Path = catalog_argument(),
    root: str | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Practice to start from. Defaults to the configured root_id.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
) -> None:
    """Show the full tree, each practice once at its deepest level."""
    config = wire_config(root_id=root)
    practices, graph = _load_valid_catalog(catalog, config)
    names = {practice.id: practice.name for practice in practices}

    if config.root_id not in names:
        _exit_error(f"Unknown root practice: {config.root_id}")

    try:
        entries = flatten_tree(graph, config.root_id)
    except CyclicDependencyError as e:
        _exit_error(str(e), exit_code=EXIT_VALIDATION_FAILED)

    rows = group_by_level(entries)

    if json_output:
        console.print_json(json.dumps({"root": config.root_id, "levels": rows}))
        return

    table = Table(title=f"Full tree from {config.root_id}")
    table.add_column("Level", justify="right")
    table.add_column("Practices")
    for level, practice_ids in enumerate(rows):
        table.add_row(str(level), ", ".join(names.get(pid, pid) for pid in practice_ids))
    console.print(table)


# -----------------------------------------------------------------------------
# Show Command
# -----------------------------------------------------------------------------


@app.command()
def show(
    catalog: Path = catalog_argument(),
    practice_id: str = typer.Argument(..., help="Practice to describe."),
) -> None:
    """Show dependency counts and categories for one practice."""
    config = wire_config()
    practices, graph = _load_valid_catalog(catalog, config)
    practices_by_id = {practice.id: practice for practice in practices}

    practice = practices_by_id.get(practice_id)
    if practice is None:
        _exit_error(f"Unknown practice: {practice_id}")

    table = Table(title=practice.name, show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("ID", practice.id)
    table.add_row("Category", practice.category.value)
    table.add_row("Direct dependencies", str(count_direct_dependencies(graph, practice_id)))
    table.add_row("Total dependencies", str(count_total_dependencies(graph, practice_id)))
    table.add_row(
        "Dependency categories",
        ", ".join(get_transitive_categories(graph, practices_by_id, practice_id)) or "-",
    )
    console.print(table)


# -----------------------------------------------------------------------------
# Adoption Command
# -----------------------------------------------------------------------------


@app.command()
def adoption(
    catalog: Path = catalog_argument(),
    adopted: list[str] = typer.Option(
        [],
        "--adopted",
        "-a",
        help="Adopted practice id. Repeat for each practice.",
    ),
) -> None:
    """Show adoption percentages for the catalog and each practice."""
    config = wire_config()
    practices, graph = _load_valid_catalog(catalog, config)
    valid_ids = {practice.id for practice in practices}

    adoption_set = filter_valid_practice_ids(set(adopted), valid_ids)
    for unknown in sorted(set(adopted) - adoption_set):
        _output_warning(f"Ignoring unknown practice id: {unknown}")

    console.print(
        f"Catalog adoption: {catalog_adoption_percentage(adoption_set, len(practices))}%"
    )

    table = Table()
    table.add_column("Practice")
    table.add_column("Adopted", justify="center")
    table.add_column("Dependencies adopted", justify="right")
    for practice in practices:
        if count_direct_dependencies(graph, practice.id) == 0:
            percentage = "-"
        else:
            value = dependency_adoption_percentage(practice.id, graph, adoption_set)
            percentage = f"{value}%"
        table.add_row(practice.name, "yes" if practice.id in adoption_set else "", percentage)
    console.print(table)
