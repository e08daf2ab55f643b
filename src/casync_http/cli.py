"""
casync-http CLI

Helper invoked by casync to pull indexes and chunks over HTTP. Not meant to
be run by hand. One verb:
- pull: serve an index and/or chunks from HTTP to casync over stdin/stdout

stdout carries the protocol; all diagnostics go to stderr.
"""
from __future__ import annotations

import logging
import signal
import sys
from typing import List, Optional

import typer

from .cli_context import CLIContext
from .endpoints import EndpointSet
from .mappers import run_and_exit
from .puller import pull as run_pull

app = typer.Typer(
    name="casync-http",
    help="casync HTTP helper. Do not execute manually.",
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr; INFO and up when verbose, warnings otherwise."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", envvar="CASYNC_VERBOSE", help="Log every request"),
) -> None:
    """casync HTTP helper. Do not execute manually."""
    _configure_logging(verbose)


@app.command()
def pull(
    base: str = typer.Argument(..., help="Base directory URL, '-' if none (unsupported)"),
    archive: str = typer.Argument(..., help="Archive URL, '-' if none (unsupported)"),
    index: str = typer.Argument(..., help="Index URL, '-' if none"),
    wstore: str = typer.Argument(..., help="Writable store URL, '-' if none"),
    stores: Optional[List[str]] = typer.Argument(None, help="Additional read-only store URLs"),
) -> None:
    """Pull an index and/or chunks from HTTP."""

    def _pull() -> None:
        endpoints = EndpointSet.from_argv(base, archive, index, wstore, stores or [])
        # Reject bad endpoints before an engine is created
        endpoints.check()

        context = CLIContext.from_env()
        run_pull(endpoints, context.engine, settings=context.settings)

    run_and_exit(_pull)


def main() -> None:
    """CLI entry point."""
    # A closed channel must surface as an I/O error, not kill the process
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_IGN)
    app()


if __name__ == "__main__":
    main()
