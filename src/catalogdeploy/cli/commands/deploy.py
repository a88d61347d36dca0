"""Command for deploying project artifacts to a catalog."""

from pathlib import Path

import typer
from rich.markup import escape

from catalogdeploy.cli.common.exits import die, exit_from_exc, ok_exit, warn_exit
from catalogdeploy.cli.common.options import (
    ArtifactsArg,
    CatalogOpt,
    CreateFolderOpt,
    DryRunOpt,
    EnvironmentOpt,
    FolderOpt,
    InstanceOpt,
    SelectOpt,
    TimeoutOpt,
    YesOpt,
)
from catalogdeploy.cli.common.output import out
from catalogdeploy.cli.common.progress import deploy_with_progress
from catalogdeploy.cli.tui import select_artifacts
from catalogdeploy.core.artifacts import expand_artifacts
from catalogdeploy.core.runs import DeploySettings


def deploy(
    artifacts: list[Path] = ArtifactsArg,
    instance: str = InstanceOpt,
    folder: str = FolderOpt,
    environment: str = EnvironmentOpt,
    catalog: str = CatalogOpt,
    create_folder: bool = CreateFolderOpt,
    timeout: int = TimeoutOpt,
    select: bool = SelectOpt,
    dry_run: bool = DryRunOpt,
    yes: bool = YesOpt,
):
    """
    Deploy project artifacts, ensuring folder, environment and references.
    """
    with out.status("Collecting artifacts..."):
        paths = expand_artifacts(artifacts)
    if not paths:
        warn_exit("No artifacts found", code=1)

    if select:
        paths = select_artifacts(paths)
        if not paths:
            warn_exit("No artifacts selected", code=0)

    settings = DeploySettings(
        artifacts=paths,
        instance=instance,
        folder=folder,
        environment=environment,
        catalog=catalog,
        create_folder=create_folder,
        command_timeout=timeout,
        dry_run=dry_run,
    )
    try:
        settings.validate()
    except ValueError as exc:
        exit_from_exc(exc, message=escape(str(exc)), code=2)

    out.header("Deployment plan")
    out.kv(
        {
            "Instance": escape(instance),
            "Catalog": escape(catalog),
            "Folder": escape(folder) + ("" if create_folder else " (must exist)"),
            "Environment": escape(environment),
            "Command timeout": f"{timeout}s",
        }
    )
    out.artifacts_table(paths, title="Artifacts")

    if dry_run:
        out.warn("DRY RUN: nothing will be created or deployed.")
    elif not yes and not out.confirm(
        f"Deploy {len(paths)} project(s) to folder '{folder}'?"
    ):
        ok_exit("Cancelled")

    result = deploy_with_progress(settings)

    if result.connection_error is not None:
        die(escape(result.connection_error), code=1)

    title = "Deployment check (dry-run)" if dry_run else "Deployment results"
    out.deploy_results_table(result.results, title=title)

    if not result.ok:
        out.error(f"{len(result.failed)} of {len(result.results)} artifact(s) failed.")
        raise typer.Exit(1)

    if dry_run:
        out.success(f"Dry-run complete: {len(result.results)} artifact(s) checked.")
    else:
        out.success(f"Deployed {len(result.results)} project(s).")
