"""CLI application for deploying projects to an Integration Services catalog."""

import typer

from catalogdeploy.cli.commands.deploy import deploy
from catalogdeploy.cli.common.logs import configure_logging
from catalogdeploy.cli.common.options import VerboseOpt

app = typer.Typer(
    help="catalog-deploy - deploy project artifacts to an SSIS catalog",
    no_args_is_help=True,
)


@app.callback()
def _init(verbose: int = VerboseOpt):
    """Configure logging for the invocation."""
    configure_logging(verbose)


app.command("deploy")(deploy)


if __name__ == "__main__":
    app()
