"""
CLI main entry point for schedgraph
"""

import importlib
import sys
from pathlib import Path
from typing import Any, Optional

import click
import typer
import typer.main

from schedgraph.core.config_manager import get_config_manager
from schedgraph.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _load_env_file() -> None:
    """
    Load .env file from appropriate location using ConfigManager.
    """
    possible_paths = [Path.cwd() / ".env"]
    if sys.argv:
        main_script = Path(sys.argv[0]).resolve()
        if main_script.is_file():
            possible_paths.append(main_script.parent / ".env")

    get_config_manager().load_env_files(possible_paths, override=False)


class LazyGroup(click.Group):
    """A Click Group that lazy-loads command modules."""

    def __init__(
        self,
        name: Optional[str] = None,
        commands: Optional[dict] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(name=name, commands=commands or {}, **kwargs)
        self._lazy_commands = {
            "deps": ("schedgraph.cli.commands.deps", "app", "Manage schedule dependencies"),
            "items": ("schedgraph.cli.commands.items", "app", "Manage schedule items"),
            "examples": ("schedgraph.cli.commands.examples", "app", "Manage example schedule data"),
            "serve": ("schedgraph.cli.commands.serve", "app", "Start the HTTP API server"),
        }

    def list_commands(self, ctx: click.Context) -> list:
        """Return list of all commands (lazy + regular)."""
        return sorted(set(list(self.commands) + list(self._lazy_commands)))

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Format commands for help without loading them."""
        commands = []
        for cmd_name in self.list_commands(ctx):
            if cmd_name in self._lazy_commands:
                _, _, help_text = self._lazy_commands[cmd_name]
                commands.append((cmd_name, help_text))
            elif cmd_name in self.commands:
                cmd = self.commands[cmd_name]
                commands.append((cmd_name, cmd.get_short_help_str(formatter.width)))

        if commands:
            with formatter.section("Commands"):
                formatter.write_dl(commands)

    def get_command(self, ctx: click.Context, name: str) -> Optional[click.Command]:
        """Get command, lazily loading if needed."""
        if name in self.commands:
            return self.commands[name]
        if name not in self._lazy_commands:
            return None

        module_path, attr_name, _ = self._lazy_commands[name]
        try:
            module = importlib.import_module(module_path)
            typer_app = getattr(module, attr_name)
        except (ImportError, AttributeError) as e:
            logger.error(f"Failed to load command {name}: {e}")
            return None

        click_cmd = typer.main.get_command(typer_app)
        self.commands[name] = click_cmd
        return click_cmd


@click.group(
    cls=LazyGroup,
    name="schedgraph",
    help="Schedule dependency graph CLI",
    context_settings={"help_option_names": ["--help", "-h"]},
)
@click.option(
    "--database-url",
    envvar="SCHEDGRAPH_DATABASE_URL",
    default=None,
    help="Database URL (default: ~/.schedgraph/data/schedgraph.db)",
)
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ...)")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str], log_level: Optional[str]) -> None:
    """Main CLI entry point."""
    _load_env_file()
    if log_level:
        setup_logging(log_level, force=True)
    if database_url:
        get_config_manager().set_database_url(database_url)


@cli.command()
def version() -> None:
    """Show version information."""
    from schedgraph import __version__

    click.echo(f"schedgraph version {__version__}")


# Entry point for console script
def main() -> None:
    """Entry point for console script."""
    cli()


app = cli

if __name__ == "__main__":
    app()
