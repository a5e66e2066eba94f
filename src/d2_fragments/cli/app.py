import logging
from typing import Annotated

import typer

from d2_fragments.cli.commands import analyze, blocks, lint

app = typer.Typer(
    name="d2-fragments",
    help="D2 fragments CLI — split, analyze and lint D2 diagram source.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("blocks")(blocks)
app.command("analyze")(analyze)
app.command("lint")(lint)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log grammar loading and fallbacks.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    app()
