"""
Schedule item command.

Items are normally owned by the scheduling application; these commands
manage the SQL item table used by the CLI and the HTTP API.
"""

import json
from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schedgraph.cli.commands import get_repository
from schedgraph.core.errors import SchedGraphError
from schedgraph.core.types import ScheduleItem, ScheduleItemKind

app = typer.Typer(
    name="items",
    help="Manage schedule items",
    no_args_is_help=True,
)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"'{value}' is not an ISO date (YYYY-MM-DD)")


@app.command("add")
def add_item(
    item_id: str = typer.Argument(..., help="Item id"),
    name: str = typer.Argument(..., help="Display name"),
    kind: str = typer.Option("Task", "--kind", "-k", help="Phase, Task or Milestone"),
    start: Optional[str] = typer.Option(None, "--start", help="Start date (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="End date (YYYY-MM-DD)"),
    schedule: str = typer.Option(
        "default", "--schedule", "-s", envvar="SCHEDGRAPH_SCHEDULE_ID", help="Schedule id"
    ),
):
    """
    Add a schedule item.

    Examples:
        schedgraph items add item1-1 "Requirements Gathering" --start 2024-01-15 --end 2024-01-25
        schedgraph items add item1-3 "Planning Complete" --kind Milestone
    """
    try:
        item = ScheduleItem(
            id=item_id,
            name=name,
            kind=ScheduleItemKind.parse(kind),
            start=_parse_date(start),
            end=_parse_date(end),
        )
        get_repository().items_provider.add_item(schedule, item)
    except SchedGraphError as e:
        typer.echo(f"❌ {e.kind}: {e.message}", err=True)
        raise typer.Exit(1)
    typer.echo(f"✅ Item {item_id} added to schedule '{schedule}'")


@app.command("list")
def list_items(
    schedule: str = typer.Option(
        "default", "--schedule", "-s", envvar="SCHEDGRAPH_SCHEDULE_ID", help="Schedule id"
    ),
    format: str = typer.Option("table", "--format", "-f", help="Output format: table or json"),
):
    """List the items of a schedule."""
    try:
        items = get_repository().items_provider.list_items(schedule)
    except SchedGraphError as e:
        typer.echo(f"❌ {e.kind}: {e.message}", err=True)
        raise typer.Exit(1)

    if format == "json":
        typer.echo(json.dumps([item.to_dict() for item in items], indent=2))
        return
    if not items:
        typer.echo(f"No items in schedule '{schedule}'.")
        return

    table = Table(title=f"Schedule items ({schedule})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Kind")
    table.add_column("Start")
    table.add_column("End")
    for item in items:
        table.add_row(
            escape(item.id),
            escape(item.name),
            item.kind.value,
            item.start.isoformat() if item.start else "",
            item.end.isoformat() if item.end else "",
        )
    Console().print(table)
