"""
Dependency management command.

Provides commands to manage the dependencies of a schedule:
- Mutations: add, update, remove
- Queries: list, show, check
- Views: matrix, timeline
"""

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schedgraph.cli.commands import get_repository
from schedgraph.core.errors import SchedGraphError
from schedgraph.logger import get_logger
from schedgraph.views.projections import list_view, matrix_view, timeline_view

logger = get_logger(__name__)

app = typer.Typer(
    name="deps",
    help="Manage schedule dependencies",
    no_args_is_help=True,
)

console = Console()

SCHEDULE_OPTION = typer.Option(
    "default", "--schedule", "-s", envvar="SCHEDGRAPH_SCHEDULE_ID", help="Schedule id"
)
FORMAT_OPTION = typer.Option("table", "--format", "-f", help="Output format: table or json")


def _fail(error: SchedGraphError) -> None:
    typer.echo(f"❌ {error.kind}: {error.message}", err=True)
    raise typer.Exit(1)


@app.command("add")
def add_dependency(
    predecessor: str = typer.Argument(..., help="Predecessor item id"),
    successor: str = typer.Argument(..., help="Successor item id"),
    type: str = typer.Option("FS", "--type", "-t", help="FS, SS, FF, SF or full name"),
    lag: int = typer.Option(0, "--lag", "-l", help="Lag in days (>= 0)"),
    dependency_id: str = typer.Option(None, "--id", help="Explicit dependency id"),
    schedule: str = SCHEDULE_OPTION,
):
    """
    Add a dependency predecessor -> successor.

    Examples:
        schedgraph deps add item1-1 item1-2
        schedgraph deps add item2-1 item2-2 --type SS --lag 5
    """
    try:
        dependency = get_repository().create(
            schedule, predecessor, successor, type=type, lag=lag, dependency_id=dependency_id
        )
    except SchedGraphError as e:
        _fail(e)
    typer.echo(f"✅ Dependency {dependency.id} created")
    typer.echo(
        f"   {predecessor} -> {successor} ({dependency.type.label}, lag {dependency.lag})"
    )


@app.command("update")
def update_dependency(
    dependency_id: str = typer.Argument(..., help="Dependency id"),
    type: str = typer.Option(None, "--type", "-t", help="New type"),
    lag: int = typer.Option(None, "--lag", "-l", help="New lag in days"),
    schedule: str = SCHEDULE_OPTION,
):
    """
    Change the type and/or lag of a dependency.

    Endpoints cannot be changed; remove the dependency and add a new one.
    """
    if type is None and lag is None:
        typer.echo("⚠️  Nothing to update: pass --type and/or --lag", err=True)
        raise typer.Exit(1)
    try:
        dependency = get_repository().update(schedule, dependency_id, type=type, lag=lag)
    except SchedGraphError as e:
        _fail(e)
    typer.echo(f"✅ Dependency {dependency.id} updated")
    typer.echo(f"   type={dependency.type.value} lag={dependency.lag}")


@app.command("remove")
def remove_dependency(
    dependency_id: str = typer.Argument(..., help="Dependency id"),
    schedule: str = SCHEDULE_OPTION,
):
    """Remove a dependency."""
    try:
        get_repository().delete(schedule, dependency_id)
    except SchedGraphError as e:
        _fail(e)
    typer.echo(f"✅ Dependency {dependency_id} removed")


@app.command("list")
def list_dependencies(
    schedule: str = SCHEDULE_OPTION,
    format: str = FORMAT_OPTION,
):
    """
    List the dependencies of a schedule.

    Examples:
        schedgraph deps list -s example_schedule
        schedgraph deps list -f json
    """
    try:
        rows = list_view(get_repository().graph(schedule))
    except SchedGraphError as e:
        _fail(e)

    if format == "json":
        typer.echo(json.dumps([row.to_dict() for row in rows], indent=2))
        return
    if not rows:
        typer.echo(f"No dependencies in schedule '{schedule}'.")
        return

    table = Table(title=f"Dependencies ({schedule})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Predecessor", style="magenta")
    table.add_column("Successor", style="magenta")
    table.add_column("Type")
    table.add_column("Lag", justify="right")
    for row in rows:
        table.add_row(
            escape(row.dependency.id),
            escape(row.predecessor_name),
            escape(row.successor_name),
            row.dependency.type.label,
            str(row.dependency.lag),
        )
    console.print(table)


@app.command("show")
def show_item_dependencies(
    item_id: str = typer.Argument(..., help="Schedule item id"),
    schedule: str = SCHEDULE_OPTION,
):
    """Show predecessors and successors of one item."""
    try:
        result = get_repository().item_dependencies(schedule, item_id)
    except SchedGraphError as e:
        _fail(e)
    typer.echo(json.dumps(result.to_dict(), indent=2))


@app.command("check")
def check_dependency(
    predecessor: str = typer.Argument(..., help="Predecessor item id"),
    successor: str = typer.Argument(..., help="Successor item id"),
    schedule: str = SCHEDULE_OPTION,
):
    """
    Check whether predecessor -> successor would create a cycle.

    Exits with status 1 when it would.
    """
    try:
        cyclic = get_repository().would_create_cycle(schedule, predecessor, successor)
    except SchedGraphError as e:
        _fail(e)
    if cyclic:
        typer.echo(f"❌ {predecessor} -> {successor} would create a circular dependency")
        raise typer.Exit(1)
    typer.echo(f"✅ {predecessor} -> {successor} keeps the schedule acyclic")


@app.command("matrix")
def show_matrix(
    schedule: str = SCHEDULE_OPTION,
    format: str = FORMAT_OPTION,
):
    """Show the predecessor x successor matrix."""
    try:
        matrix = matrix_view(get_repository().graph(schedule))
    except SchedGraphError as e:
        _fail(e)

    if format == "json":
        typer.echo(json.dumps(matrix.to_dict(), indent=2))
        return

    table = Table(title=f"Dependency matrix ({schedule})")
    table.add_column("Predecessor \\ Successor", style="cyan", no_wrap=True)
    for item in matrix.items:
        table.add_column(escape(item.id), justify="center")
    for row in matrix.rows:
        cells = []
        for cell in row.cells:
            if cell.is_self:
                cells.append("·")
            elif cell.dependency is None:
                cells.append("")
            else:
                lag = f"+{cell.dependency.lag}" if cell.dependency.lag else ""
                cells.append(f"{cell.dependency.type.abbreviation}{lag}")
        table.add_row(escape(row.predecessor.name), *cells)
    console.print(table)


@app.command("timeline")
def show_timeline(
    schedule: str = SCHEDULE_OPTION,
    format: str = FORMAT_OPTION,
):
    """Show predecessor -> successor cards."""
    try:
        cards = timeline_view(get_repository().graph(schedule))
    except SchedGraphError as e:
        _fail(e)

    if format == "json":
        typer.echo(json.dumps([card.to_dict() for card in cards], indent=2))
        return
    for card in cards:
        lag = f" {card.lag_label}" if card.lag_label else ""
        console.print(
            f"[magenta]{escape(card.predecessor_name)}[/magenta] "
            f"{escape(f'--[{card.badge}{lag}]-->')} "
            f"[magenta]{escape(card.successor_name)}[/magenta]"
        )
