"""Common CLI options for the CLI."""

import typer

from catalogdeploy.core.adapters.ssiscatalog import DEFAULT_COMMAND_TIMEOUT
from catalogdeploy.core.connection import DEFAULT_CATALOG

ArtifactsArg = typer.Argument(
    ...,
    help="Artifact files (.ispac) or directories containing them",
    show_default=False,
)

InstanceOpt = typer.Option(
    ...,
    "--instance",
    "-s",
    envvar="CATALOG_DEPLOY_INSTANCE",
    help="SQL Server instance hosting the catalog",
)

CatalogOpt = typer.Option(
    DEFAULT_CATALOG,
    "--catalog",
    envvar="CATALOG_DEPLOY_CATALOG",
    help="Catalog database name",
)

FolderOpt = typer.Option(
    ...,
    "--folder",
    "-f",
    envvar="CATALOG_DEPLOY_FOLDER",
    help="Catalog folder to deploy to",
)

CreateFolderOpt = typer.Option(
    True,
    "--create-folder/--no-create-folder",
    envvar="CATALOG_DEPLOY_CREATE_FOLDER",
    help="Create the folder if it does not exist",
)

EnvironmentOpt = typer.Option(
    ...,
    "--environment",
    "-e",
    envvar="CATALOG_DEPLOY_ENVIRONMENT",
    help="Environment the deployed projects reference",
)

TimeoutOpt = typer.Option(
    DEFAULT_COMMAND_TIMEOUT,
    "--timeout",
    "-t",
    min=0,
    envvar="CATALOG_DEPLOY_COMMAND_TIMEOUT",
    help="Timeout in seconds for each catalog command",
)

SelectOpt = typer.Option(
    False,
    "--select",
    help="Pick the artifacts to deploy interactively",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Only check which resources would be created; deploy nothing",
)

YesOpt = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt")

VerboseOpt = typer.Option(
    0,
    "--verbose",
    "-v",
    count=True,
    help="Increase log output (-v progress, -vv debug)",
)
