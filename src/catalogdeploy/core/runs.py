"""Core deployment run orchestration.

A run opens one connection to the catalog and processes the supplied
artifacts strictly one after another on it. For each artifact the folder
(optionally) and the environment are ensured, the project is deployed and
finally the project's reference to the environment is ensured.

Artifacts are independent attempts: an error in one artifact's chain is
caught at the artifact boundary, recorded in its ArtifactResult and the
run continues with the next artifact. Only a failure to open the
connection stops the run before any artifact is attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Sequence

from catalogdeploy.core.adapters.ssiscatalog import (
    DEFAULT_COMMAND_TIMEOUT,
    SSISCatalogAdapter,
)
from catalogdeploy.core.connection import DEFAULT_CATALOG, open_connection
from catalogdeploy.core.deployment import deploy, project_name_from_path, read_artifact
from catalogdeploy.core.errors import CatalogConnectionError, FailureKind, classify
from catalogdeploy.core.provisioning import (
    ensure_environment,
    ensure_environment_reference,
    ensure_folder,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploySettings:
    """
    Parameters of one deployment run.

    Attributes:
        artifacts: Artifact file paths, processed in this order.
        instance: SQL Server instance hosting the catalog.
        folder: Catalog folder the projects are deployed to.
        environment: Environment the deployed projects reference.
        catalog: Catalog database name.
        create_folder: Create the folder when it is missing. When disabled a
            missing folder surfaces as a deployment error.
        command_timeout: Timeout in seconds applied to every catalog command.
        dry_run: Only run existence checks; nothing is created or deployed.
    """

    artifacts: Sequence[str | Path]
    instance: str
    folder: str
    environment: str
    catalog: str = DEFAULT_CATALOG
    create_folder: bool = True
    command_timeout: int = DEFAULT_COMMAND_TIMEOUT
    dry_run: bool = False

    def validate(self) -> None:
        """Check that required parameters are present."""
        if not self.artifacts:
            raise ValueError("At least one artifact is required.")
        for label, value in (
            ("instance", self.instance),
            ("catalog", self.catalog),
            ("folder", self.folder),
            ("environment", self.environment),
        ):
            if not value or not str(value).strip():
                raise ValueError(f"A target {label} is required.")
        if self.command_timeout < 0:
            raise ValueError("command_timeout must be >= 0")


class ArtifactPhase(str, Enum):
    """
    Last phase an artifact reached.

    Values:
        PROVISIONING: Ensuring folder and environment.
        DEPLOYING: Reading the payload and deploying the project.
        REFERENCING: Ensuring the project's environment reference.
        DONE: All steps completed.
    """

    PROVISIONING = "PROVISIONING"
    DEPLOYING = "DEPLOYING"
    REFERENCING = "REFERENCING"
    DONE = "DONE"


@dataclass(frozen=True)
class ArtifactResult:
    """Outcome of processing a single artifact."""

    artifact: str
    ok: bool
    phase: ArtifactPhase
    project: str | None = None
    folder_created: bool = False
    environment_created: bool = False
    reference_created: bool = False
    failure: FailureKind | None = None
    error: str | None = None


@dataclass(frozen=True)
class RunResult:
    """Outcome of a whole run: per-artifact results in input order."""

    results: tuple[ArtifactResult, ...] = field(default_factory=tuple)
    connection_error: str | None = None

    @property
    def ok(self) -> bool:
        """True only if the connection opened and every artifact succeeded."""
        if self.connection_error is not None:
            return False
        return all(r.ok for r in self.results)

    @property
    def succeeded(self) -> list[ArtifactResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[ArtifactResult]:
        return [r for r in self.results if not r.ok]


def deploy_artifact(
    adapter: Any,
    artifact: str | Path,
    settings: DeploySettings,
) -> ArtifactResult:
    """
    Run the provisioning, deployment and referencing chain for one artifact.

    Never raises: any error is logged with its traceback and returned as a
    failed ArtifactResult recording the phase it happened in.
    """
    phase = ArtifactPhase.PROVISIONING
    project: str | None = None
    folder_created = environment_created = reference_created = False
    dry_run = settings.dry_run

    logger.info("Processing artifact %s", artifact)
    try:
        if settings.create_folder:
            folder_created = ensure_folder(adapter, settings.folder, dry_run=dry_run)
        environment_created = ensure_environment(
            adapter, settings.folder, settings.environment, dry_run=dry_run
        )

        phase = ArtifactPhase.DEPLOYING
        project = project_name_from_path(artifact)
        payload = read_artifact(artifact)
        if dry_run:
            logger.info("Dry-run: project '%s' would be deployed", project)
        else:
            deploy(adapter, settings.folder, project, payload)

        phase = ArtifactPhase.REFERENCING
        reference_created = ensure_environment_reference(
            adapter, project, settings.folder, settings.environment, dry_run=dry_run
        )
    except Exception as exc:  # noqa: BLE001 - isolate failures per artifact
        logger.exception("Artifact %s failed during %s", artifact, phase.value.lower())
        return ArtifactResult(
            artifact=str(artifact),
            ok=False,
            phase=phase,
            project=project,
            folder_created=folder_created,
            environment_created=environment_created,
            reference_created=reference_created,
            failure=classify(exc),
            error=str(exc),
        )

    return ArtifactResult(
        artifact=str(artifact),
        ok=True,
        phase=ArtifactPhase.DONE,
        project=project,
        folder_created=folder_created,
        environment_created=environment_created,
        reference_created=reference_created,
    )


def run_deployment(
    settings: DeploySettings,
    *,
    connect: Callable[..., Any] | None = None,
    adapter_factory: Callable[[Any, int], Any] = SSISCatalogAdapter,
    on_start: Callable[[str | Path], None] | None = None,
    on_result: Callable[[ArtifactResult], None] | None = None,
) -> RunResult:
    """
    Deploy all artifacts of a run over a single catalog connection.

    Args:
        settings: Run parameters (validated before connecting).
        connect: DB-API style connect callable; defaults to pyodbc.connect.
        adapter_factory: Builds the catalog adapter from (connection, timeout).
        on_start: Called with each artifact before it is processed.
        on_result: Called with each ArtifactResult after it is recorded.

    Returns:
        A RunResult. When the connection cannot be opened it carries the
        connection error and no artifact results.
    """
    settings.validate()
    results: list[ArtifactResult] = []

    try:
        with open_connection(
            settings.instance, settings.catalog, connect=connect
        ) as conn:
            adapter = adapter_factory(conn, settings.command_timeout)
            for artifact in settings.artifacts:
                if on_start:
                    on_start(artifact)
                result = deploy_artifact(adapter, artifact, settings)
                results.append(result)
                if on_result:
                    on_result(result)
    except CatalogConnectionError as exc:
        logger.error("%s", exc)
        return RunResult(results=(), connection_error=str(exc))

    run = RunResult(results=tuple(results))
    logger.info(
        "Run finished: %d succeeded, %d failed",
        len(run.succeeded),
        len(run.failed),
    )
    return run
