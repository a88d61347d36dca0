"""Deployment of a single project artifact into a catalog folder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

from catalogdeploy.core.errors import DeploymentError

logger = logging.getLogger(__name__)


class ProjectDeployAdapter(Protocol):
    """Interface for the catalog's deploy operation."""

    def deploy_project(self, folder: str, project: str, payload: bytes) -> Any:
        """Create or overwrite `project` in `folder` from the raw payload."""
        ...


def project_name_from_path(path: str | Path) -> str:
    """Return the project name for an artifact: its file name without extension."""
    name = Path(path).stem
    if not name:
        raise ValueError(f"Cannot derive a project name from '{path}'.")
    return name


def read_artifact(path: str | Path) -> bytes:
    """Read the full byte payload of an artifact file."""
    return Path(path).read_bytes()


def deploy(
    adapter: ProjectDeployAdapter,
    folder: str,
    project_name: str,
    payload: bytes,
) -> None:
    """
    Deploy a project payload into an existing folder.

    Deploying a project name that already exists in the folder overwrites
    it. A failure is logged and raised as DeploymentError.
    """
    logger.info(
        "Deploying project '%s' to folder '%s' (%d bytes)",
        project_name,
        folder,
        len(payload),
    )
    try:
        operation_id = adapter.deploy_project(folder, project_name, payload)
    except Exception as exc:
        logger.error("Deployment of project '%s' failed", project_name)
        raise DeploymentError(
            f"Deployment of project '{project_name}' to folder '{folder}' failed: {exc}",
            folder=folder,
            project=project_name,
        ) from exc

    if operation_id is not None:
        logger.debug("Deploy operation id for '%s': %s", project_name, operation_id)
