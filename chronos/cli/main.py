"""Main CLI entry point for Chronos.

Provides the click group, logging setup and lazy loading of the
subcommand modules.
"""

import importlib
import logging

import click
from rich.console import Console

console = Console()


class LazyGroup(click.Group):
    """A click Group that imports command modules on first use."""

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        return sorted(set(super().list_commands(ctx)) | set(self._lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, loading its module if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]
        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)
        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        # Commands are matched by their click name, which may differ from
        # the attribute name (``import`` is a keyword)
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                self.add_command(attr)
                return attr

        raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")


LAZY_SUBCOMMANDS = {
    "log": "chronos.cli.entry",
    "journal": "chronos.cli.journal",
    "show": "chronos.cli.journal",
    "remove": "chronos.cli.journal",
    "stats": "chronos.cli.stats",
    "export": "chronos.cli.transfer",
    "import": "chronos.cli.transfer",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(level: str) -> None:
    """Route log records through rich on stderr."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="chronos-journal")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Chronos - a process-focused trading journal.

    Log executions with their setup confluences and a post-trade
    psychological review, then browse the journal and review your
    statistics.

    \b
    Quick Start:
      chronos log --pair NQ --rr 2.5 --result Win   # Log a trade
      chronos journal                               # Newest trades first
      chronos stats                                 # Performance overview
    """
    from chronos.config import load_config

    config = load_config()
    setup_logging("DEBUG" if verbose else config["logging"]["level"])

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
