import logging
from pathlib import Path
from typing import List, Optional

import typer

from pymoq.app import Mocker
from pymoq.common import bus, messages
from pymoq.spec import MoqError
from .rendering import CliRenderer

app = typer.Typer(
    name="pymoq",
    help=messages.get("cli.app.description"),
    add_completion=False,
)


@app.command()
def main(
    destination: Path = typer.Argument(
        ..., help=messages.get("cli.argument.destination.help")
    ),
    interfaces: Optional[List[str]] = typer.Argument(
        None, help=messages.get("cli.argument.interfaces.help")
    ),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help=messages.get("cli.option.out.help")
    ),
    pkg: Optional[str] = typer.Option(
        None, "--pkg", help=messages.get("cli.option.pkg.help")
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=messages.get("cli.option.verbose.help")
    ),
):
    # The CLI is the composition root. It decides *which* renderer to use.
    bus.set_renderer(CliRenderer(verbose=verbose))
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        mocker = Mocker(destination, package_name=pkg)
        mocker.write(interfaces or [], out=out)
    except MoqError as e:
        bus.error("error.generic", error=e)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
