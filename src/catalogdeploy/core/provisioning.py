"""Check-then-create provisioning of catalog resources.

The catalog offers no "create if missing" primitive: creating a folder,
environment or environment reference that already exists is an error. Each
resource is therefore ensured with two separate calls, an existence query
followed by a conditional create.

Limitation: two deployers targeting the same folder can both observe a
resource as absent and both try to create it; one of them then fails with a
ProvisioningError. Only one deploying agent per catalog and folder is
supported at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from catalogdeploy.core.errors import ProvisioningError

logger = logging.getLogger(__name__)

# Reference kind passed to create_environment_reference ("R": relative,
# the environment lives in the project's own folder).
ENVIRONMENT_REFERENCE_KIND = "R"


class ResourceKind(str, Enum):
    """
    Kinds of catalog resources that can be ensured.

    Values:
        FOLDER: A top-level catalog folder, addressed by name.
        ENVIRONMENT: An environment, addressed by name within a folder.
        ENVIRONMENT_REFERENCE: A project-to-environment link, addressed by
            project name within a folder and environment.
    """

    FOLDER = "folder"
    ENVIRONMENT = "environment"
    ENVIRONMENT_REFERENCE = "environment reference"


@dataclass(frozen=True)
class ResourceScope:
    """Parent resources a name is resolved within."""

    folder: str | None = None
    environment: str | None = None


class CatalogProvisioningAdapter(Protocol):
    """Interface for the existence queries and create calls used here."""

    def folder_id(self, folder: str) -> Any: ...

    def environment_id(self, folder: str, environment: str) -> Any: ...

    def environment_reference_id(
        self, project: str, folder: str, environment: str
    ) -> Any: ...

    def create_folder(self, folder: str) -> Any: ...

    def create_environment(self, folder: str, environment: str) -> Any: ...

    def create_environment_reference(
        self, folder: str, environment: str, project: str, reference_type: str
    ) -> Any: ...


def _is_present(identifier: Any) -> bool:
    """Return True if an existence query produced a usable identifier."""
    if identifier is None:
        return False
    if isinstance(identifier, (str, bytes)) and not identifier.strip():
        return False
    return True


def _require_scope(kind: ResourceKind, scope: ResourceScope) -> None:
    """Validate that scope carries the parents `kind` is resolved within."""
    if kind in (ResourceKind.ENVIRONMENT, ResourceKind.ENVIRONMENT_REFERENCE):
        if not scope.folder:
            raise ValueError(f"An {kind.value} needs a folder in its scope.")
    if kind == ResourceKind.ENVIRONMENT_REFERENCE and not scope.environment:
        raise ValueError("An environment reference needs an environment in its scope.")


def _exists(
    adapter: CatalogProvisioningAdapter,
    kind: ResourceKind,
    scope: ResourceScope,
    name: str,
) -> bool:
    if kind == ResourceKind.FOLDER:
        return _is_present(adapter.folder_id(name))
    if kind == ResourceKind.ENVIRONMENT:
        return _is_present(adapter.environment_id(scope.folder, name))
    return _is_present(
        adapter.environment_reference_id(name, scope.folder, scope.environment)
    )


def _create(
    adapter: CatalogProvisioningAdapter,
    kind: ResourceKind,
    scope: ResourceScope,
    name: str,
) -> None:
    if kind == ResourceKind.FOLDER:
        logger.info("Creating folder '%s'", name)
        adapter.create_folder(name)
    elif kind == ResourceKind.ENVIRONMENT:
        logger.info("Creating environment '%s' in folder '%s'", name, scope.folder)
        adapter.create_environment(scope.folder, name)
    else:
        logger.info(
            "Creating reference from project '%s' to environment '%s'",
            name,
            scope.environment,
        )
        adapter.create_environment_reference(
            scope.folder, scope.environment, name, ENVIRONMENT_REFERENCE_KIND
        )


def ensure(
    adapter: CatalogProvisioningAdapter,
    kind: ResourceKind,
    scope: ResourceScope,
    name: str,
    *,
    dry_run: bool = False,
) -> bool:
    """
    Make sure a catalog resource exists, creating it when it is absent.

    Args:
        adapter: Catalog adapter used for the existence query and the create.
        kind: Which kind of resource `name` refers to.
        scope: Folder (and environment, for references) the name lives in.
        name: Folder, environment or project name.
        dry_run: Only run the existence query; never create.

    Returns:
        True if the resource was created (or would be, with dry_run),
        False if it already existed.

    Raises:
        ProvisioningError: If the existence query or the create call fails.
    """
    _require_scope(kind, scope)

    try:
        if _exists(adapter, kind, scope, name):
            logger.debug("%s '%s' already exists", kind.value.capitalize(), name)
            return False
        if dry_run:
            logger.info("Dry-run: %s '%s' would be created", kind.value, name)
            return True
        _create(adapter, kind, scope, name)
    except ProvisioningError:
        raise
    except Exception as exc:
        raise ProvisioningError(
            f"Could not ensure {kind.value} '{name}': {exc}",
            kind=kind.value,
            name=name,
        ) from exc

    return True


def ensure_folder(
    adapter: CatalogProvisioningAdapter, folder: str, *, dry_run: bool = False
) -> bool:
    """Ensure a catalog folder exists."""
    return ensure(adapter, ResourceKind.FOLDER, ResourceScope(), folder, dry_run=dry_run)


def ensure_environment(
    adapter: CatalogProvisioningAdapter,
    folder: str,
    environment: str,
    *,
    dry_run: bool = False,
) -> bool:
    """Ensure an environment exists within a folder."""
    return ensure(
        adapter,
        ResourceKind.ENVIRONMENT,
        ResourceScope(folder=folder),
        environment,
        dry_run=dry_run,
    )


def ensure_environment_reference(
    adapter: CatalogProvisioningAdapter,
    project: str,
    folder: str,
    environment: str,
    *,
    dry_run: bool = False,
) -> bool:
    """Ensure a deployed project references an environment in its folder."""
    return ensure(
        adapter,
        ResourceKind.ENVIRONMENT_REFERENCE,
        ResourceScope(folder=folder, environment=environment),
        project,
        dry_run=dry_run,
    )
