"""Main Typer application — imports and registers all CLI commands.

Entry point: ``marketledger`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from marketledger.cli.commands.demo import demo_cmd
from marketledger.cli.commands.listings import listings_cmd, show_cmd, stats_cmd
from marketledger.config import config

app = typer.Typer(
    name="marketledger",
    help="Marketledger: escrowed fixed-price marketplace for unique assets.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure_logging(
    log_level: str = typer.Option(
        config.log_level, "--log-level", help="Root log level (DEBUG, INFO, ...)."
    ),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="demo", help="Run an end-to-end listing and sale demo.")(demo_cmd)
app.command(name="listings", help="List listings in a stored ledger.")(listings_cmd)
app.command(name="show", help="Show one listing from a stored ledger.")(show_cmd)
app.command(name="stats", help="Show counters for a stored ledger.")(stats_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
