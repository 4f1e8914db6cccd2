"""
Examples command for initializing the example schedule
"""

import typer

from schedgraph.cli.commands import get_repository
from schedgraph.core.errors import SchedGraphError
from schedgraph.examples.data import EXAMPLE_SCHEDULE_ID
from schedgraph.examples.init import check_if_examples_initialized, init_examples_data
from schedgraph.logger import get_logger

logger = get_logger(__name__)

app = typer.Typer(name="examples", help="Manage example schedule data", no_args_is_help=True)


@app.callback()
def examples() -> None:
    """Manage example schedule data"""


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Force re-initialization even if examples already exist"
    ),
    schedule: str = typer.Option(EXAMPLE_SCHEDULE_ID, "--schedule", "-s", help="Target schedule id"),
):
    """
    Initialize the example schedule

    Creates a two-phase construction schedule (9 items) chained by
    6 dependencies, from requirements gathering to the foundation inspection.
    """
    repository = get_repository()
    already_exists = check_if_examples_initialized(repository, schedule)
    if already_exists and not force:
        typer.echo("Examples data already exists. Use --force to re-initialize.")
        raise typer.Exit(0)

    typer.echo("Re-initializing examples data..." if already_exists else "Initializing examples data...")
    try:
        count = init_examples_data(
            repository, repository.items_provider.add_item, schedule_id=schedule, force=force
        )
    except SchedGraphError as e:
        typer.echo(f"Error initializing examples: {e.message}", err=True)
        logger.error(f"Error initializing examples: {e}")
        raise typer.Exit(1)

    typer.echo(f"Successfully initialized {count} example dependencies in schedule '{schedule}'!")
