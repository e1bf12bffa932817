"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer

from kitectl.core.config_loader import DEFAULT_CONFIG_PATH, load_config
from kitectl.core.errors import KiteError
from kitectl.core.session import run_session
from kitectl.transports.websocket import WebSocketDialer

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="Interactive console for a kite automation hub")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )


@app.command()
def console(
    config: Path = typer.Argument(DEFAULT_CONFIG_PATH, help="Client configuration file"),
    addr: str | None = typer.Option(None, "--addr", help="Hub host:port, overrides the configured server"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Connect to the hub and read commands of the form action[@destination][:message].

    An empty line quits.
    """
    _configure_logging(verbose)
    try:
        client_config = load_config(config)
    except KiteError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    try:
        asyncio.run(run_session(client_config, WebSocketDialer(client_config, addr)))
    except KeyboardInterrupt:
        LOGGER.info("kite cli exiting")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
