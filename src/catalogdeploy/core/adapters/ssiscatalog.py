from __future__ import annotations

from typing import Any

DEFAULT_COMMAND_TIMEOUT = 300

_FOLDER_ID_SQL = "SELECT folder_id FROM [catalog].[folders] WHERE name = ?"

_ENVIRONMENT_ID_SQL = (
    "SELECT e.environment_id FROM [catalog].[environments] e "
    "INNER JOIN [catalog].[folders] f ON f.folder_id = e.folder_id "
    "WHERE e.name = ? AND f.name = ?"
)

_ENVIRONMENT_REFERENCE_ID_SQL = (
    "SELECT r.reference_id FROM [catalog].[environment_references] r "
    "INNER JOIN [catalog].[projects] p ON p.project_id = r.project_id "
    "INNER JOIN [catalog].[folders] f ON f.folder_id = p.folder_id "
    "WHERE r.environment_name = ? AND p.name = ? AND f.name = ?"
)

_CREATE_FOLDER_SQL = (
    "SET NOCOUNT ON; "
    "DECLARE @folder_id bigint; "
    "EXEC [catalog].[create_folder] @folder_name = ?, @folder_id = @folder_id OUTPUT; "
    "SELECT @folder_id;"
)

_CREATE_ENVIRONMENT_SQL = (
    "SET NOCOUNT ON; "
    "EXEC [catalog].[create_environment] @folder_name = ?, @environment_name = ?"
)

_CREATE_ENVIRONMENT_REFERENCE_SQL = (
    "SET NOCOUNT ON; "
    "DECLARE @reference_id bigint; "
    "EXEC [catalog].[create_environment_reference] "
    "@folder_name = ?, @project_name = ?, @environment_name = ?, "
    "@reference_type = ?, @reference_id = @reference_id OUTPUT; "
    "SELECT @reference_id;"
)

_DEPLOY_PROJECT_SQL = (
    "SET NOCOUNT ON; "
    "DECLARE @operation_id bigint; "
    "EXEC [catalog].[deploy_project] "
    "@folder_name = ?, @project_name = ?, @project_stream = ?, "
    "@operation_id = @operation_id OUTPUT; "
    "SELECT @operation_id;"
)


class SSISCatalogAdapter:
    """Adapter around the SSIS catalog views and stored procedures."""

    def __init__(
        self, connection: Any, command_timeout: int = DEFAULT_COMMAND_TIMEOUT
    ) -> None:
        if command_timeout < 0:
            raise ValueError("command_timeout must be >= 0")
        self.connection = connection
        self.command_timeout = command_timeout
        # pyodbc applies Connection.timeout to every statement on the connection
        self.connection.timeout = command_timeout

    def _query_scalar(self, sql: str, *params: Any) -> Any:
        """Run a query and return the first column of its first row (or None)."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, *params)
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            cursor.close()

    def _execute_scalar(self, sql: str, *params: Any) -> Any:
        """Run a batch and return the scalar of the first result set it yields."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, *params)
            # skip row counts / messages emitted before the final SELECT
            while cursor.description is None:
                if not cursor.nextset():
                    return None
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            cursor.close()

    def _execute(self, sql: str, *params: Any) -> None:
        """Run a statement that produces no result set."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, *params)
            # errors raised after an earlier result only surface while draining
            while cursor.nextset():
                pass
        finally:
            cursor.close()

    def folder_id(self, folder: str) -> Any:
        """Return the id of a catalog folder, or None if it does not exist."""
        return self._query_scalar(_FOLDER_ID_SQL, folder)

    def environment_id(self, folder: str, environment: str) -> Any:
        """Return the id of an environment within a folder, or None."""
        return self._query_scalar(_ENVIRONMENT_ID_SQL, environment, folder)

    def environment_reference_id(
        self, project: str, folder: str, environment: str
    ) -> Any:
        """Return the id of a project's reference to an environment, or None."""
        return self._query_scalar(
            _ENVIRONMENT_REFERENCE_ID_SQL, environment, project, folder
        )

    def create_folder(self, folder: str) -> Any:
        """Create a catalog folder and return its id."""
        return self._execute_scalar(_CREATE_FOLDER_SQL, folder)

    def create_environment(self, folder: str, environment: str) -> None:
        """Create an environment in an existing folder."""
        self._execute(_CREATE_ENVIRONMENT_SQL, folder, environment)

    def create_environment_reference(
        self, folder: str, environment: str, project: str, reference_type: str
    ) -> Any:
        """Create a project reference to an environment and return its id."""
        return self._execute_scalar(
            _CREATE_ENVIRONMENT_REFERENCE_SQL,
            folder,
            project,
            environment,
            reference_type,
        )

    def deploy_project(self, folder: str, project: str, payload: bytes) -> Any:
        """Deploy (create or overwrite) a project and return the operation id."""
        return self._execute_scalar(_DEPLOY_PROJECT_SQL, folder, project, payload)
