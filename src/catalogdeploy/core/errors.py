"""Error taxonomy for catalog deployments.

Connection errors are fatal for the whole run. Provisioning and deployment
errors are fatal only for the artifact being processed.
"""

from __future__ import annotations

from enum import Enum


class CatalogDeployError(RuntimeError):
    """Base class for errors raised by catalog-deploy."""


class CatalogConnectionError(CatalogDeployError):
    """Raised when the connection to the catalog cannot be opened."""


class ProvisioningError(CatalogDeployError):
    """Raised when ensuring a folder, environment or reference fails."""

    def __init__(self, message: str, *, kind: str, name: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.name = name


class DeploymentError(CatalogDeployError):
    """Raised when the deploy call for a project fails."""

    def __init__(self, message: str, *, folder: str, project: str) -> None:
        super().__init__(message)
        self.folder = folder
        self.project = project


class FailureKind(str, Enum):
    """
    Classification of a failure as reported in run results.

    Values:
        CONNECTION: The catalog connection could not be opened.
        PROVISIONING: A folder, environment or reference could not be ensured.
        DEPLOYMENT: The deploy call itself failed.
        UNCLASSIFIED: Any other error raised while processing an artifact.
    """

    CONNECTION = "CONNECTION"
    PROVISIONING = "PROVISIONING"
    DEPLOYMENT = "DEPLOYMENT"
    UNCLASSIFIED = "UNCLASSIFIED"


def classify(exc: BaseException) -> FailureKind:
    """Map an exception to the failure kind reported for it."""
    if isinstance(exc, CatalogConnectionError):
        return FailureKind.CONNECTION
    if isinstance(exc, ProvisioningError):
        return FailureKind.PROVISIONING
    if isinstance(exc, DeploymentError):
        return FailureKind.DEPLOYMENT
    return FailureKind.UNCLASSIFIED
