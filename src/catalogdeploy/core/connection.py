"""Connection helpers for the Integration Services catalog.

This module centralizes opening the one connection a deployment run uses
and applies small normalization rules (such as sanitizing the instance
name) before the ODBC connection string is built. Authentication always uses
the ambient identity of the calling process; no credentials are embedded.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from catalogdeploy.core.errors import CatalogConnectionError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = "SSISDB"
DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"

# Login timeout only; commands use the (shorter) per-command timeout.
CONNECT_TIMEOUT_SECONDS = 600

_DRIVER_ENV = "CATALOG_DEPLOY_ODBC_DRIVER"
_TRUST_CERT_ENV = "CATALOG_DEPLOY_TRUST_SERVER_CERT"


def _sanitize_instance(instance: str) -> str:
    """
    Normalize a SQL Server instance name.

    - Strips surrounding whitespace
    - Removes a leading 'tcp:' prefix copied from connection strings
    - Removes trailing backslashes left over from shell completion
    """
    value = instance.strip()
    if value.lower().startswith("tcp:"):
        value = value[4:]
    return value.rstrip("\\")


def _driver_from_env() -> str:
    """Return the ODBC driver name, honoring env override."""
    return os.getenv(_DRIVER_ENV, "").strip() or DEFAULT_ODBC_DRIVER


def _trust_cert_from_env() -> bool:
    """Return True if the server certificate should be trusted without validation."""
    raw = os.getenv(_TRUST_CERT_ENV, "").strip().lower()
    return raw in {"1", "true", "yes"}


def build_connection_string(
    instance: str,
    catalog: str = DEFAULT_CATALOG,
    *,
    driver: str | None = None,
    trust_server_certificate: bool | None = None,
) -> str:
    """Build an ODBC connection string using integrated authentication."""
    if not instance or not instance.strip():
        raise ValueError("A target instance is required.")
    if not catalog or not catalog.strip():
        raise ValueError("A target catalog database is required.")

    driver = driver or _driver_from_env()
    if trust_server_certificate is None:
        trust_server_certificate = _trust_cert_from_env()

    parts = [
        f"DRIVER={{{driver}}}",
        f"SERVER={_sanitize_instance(instance)}",
        f"DATABASE={catalog.strip()}",
        "Trusted_Connection=yes",
    ]
    if trust_server_certificate:
        parts.append("TrustServerCertificate=yes")
    return ";".join(parts) + ";"


def _default_connect() -> Callable[..., Any]:
    import pyodbc  # loaded lazily; needs the native ODBC driver manager

    return pyodbc.connect


@contextmanager
def open_connection(
    instance: str,
    catalog: str = DEFAULT_CATALOG,
    *,
    connect: Callable[..., Any] | None = None,
    driver: str | None = None,
    trust_server_certificate: bool | None = None,
) -> Iterator[Any]:
    """
    Open one autocommit connection to the catalog for the duration of a run.

    Any failure while opening is raised as CatalogConnectionError. The
    connection is closed exactly once when the block exits, whether it
    completes normally or raises.
    """
    conn_str = build_connection_string(
        instance,
        catalog,
        driver=driver,
        trust_server_certificate=trust_server_certificate,
    )
    logger.info("Connecting to %s (catalog %s)", instance, catalog)
    try:
        connect = connect or _default_connect()
        conn = connect(conn_str, autocommit=True, timeout=CONNECT_TIMEOUT_SECONDS)
    except Exception as exc:
        raise CatalogConnectionError(
            f"Could not connect to catalog '{catalog}' on '{instance}': {exc}"
        ) from exc

    try:
        yield conn
    finally:
        conn.close()
        logger.debug("Connection to %s closed", instance)
