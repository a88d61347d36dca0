from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


class FakeCatalog:
    """In-memory stand-in for the catalog adapter.

    Mirrors the catalog's rules: creating something that exists, or something
    whose parent folder/project is missing, raises. Deploying overwrites.
    """

    def __init__(self, *, folders=(), environments=()):
        self.folders: set[str] = set(folders)
        self.environments: set[tuple[str, str]] = set(environments)
        self.projects: dict[tuple[str, str], bytes] = {}
        self.references: set[tuple[str, str, str]] = set()
        self.calls: list[tuple] = []
        self.fail_on: dict[str, Exception] = {}
        self.fail_deploy_for: set[str] = set()

    def _maybe_fail(self, method: str) -> None:
        if method in self.fail_on:
            raise self.fail_on[method]

    def folder_id(self, folder):
        self.calls.append(("folder_id", folder))
        self._maybe_fail("folder_id")
        return 1 if folder in self.folders else None

    def environment_id(self, folder, environment):
        self.calls.append(("environment_id", folder, environment))
        self._maybe_fail("environment_id")
        return 2 if (folder, environment) in self.environments else None

    def environment_reference_id(self, project, folder, environment):
        self.calls.append(("environment_reference_id", project, folder, environment))
        self._maybe_fail("environment_reference_id")
        return 3 if (folder, project, environment) in self.references else None

    def create_folder(self, folder):
        self.calls.append(("create_folder", folder))
        self._maybe_fail("create_folder")
        if folder in self.folders:
            raise RuntimeError(f"folder '{folder}' already exists")
        self.folders.add(folder)
        return 1

    def create_environment(self, folder, environment):
        self.calls.append(("create_environment", folder, environment))
        self._maybe_fail("create_environment")
        if folder not in self.folders:
            raise RuntimeError(f"folder '{folder}' does not exist")
        if (folder, environment) in self.environments:
            raise RuntimeError(f"environment '{environment}' already exists")
        self.environments.add((folder, environment))

    def create_environment_reference(self, folder, environment, project, reference_type):
        self.calls.append(
            ("create_environment_reference", folder, environment, project, reference_type)
        )
        self._maybe_fail("create_environment_reference")
        if (folder, project) not in self.projects:
            raise RuntimeError(f"project '{project}' does not exist")
        key = (folder, project, environment)
        if key in self.references:
            raise RuntimeError("reference already exists")
        self.references.add(key)
        return 3

    def deploy_project(self, folder, project, payload):
        self.calls.append(("deploy_project", folder, project))
        self._maybe_fail("deploy_project")
        if project in self.fail_deploy_for:
            raise RuntimeError(f"invalid project stream for '{project}'")
        if folder not in self.folders:
            raise RuntimeError(f"folder '{folder}' does not exist")
        self.projects[(folder, project)] = payload
        return 42

    def calls_named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


class FakeConnection:
    """Connection stub that only tracks whether it was closed."""

    def __init__(self):
        self.closed = 0
        self.timeout = 0

    def close(self):
        self.closed += 1


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def make_artifact(tmp_path):
    def _make(name: str, payload: bytes = b"PK\x03\x04project") -> Path:
        path = tmp_path / name
        path.write_bytes(payload)
        return path

    return _make


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()
