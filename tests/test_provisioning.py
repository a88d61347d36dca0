import pytest

from catalogdeploy.core.errors import ProvisioningError
from catalogdeploy.core.provisioning import (
    ENVIRONMENT_REFERENCE_KIND,
    ResourceKind,
    ResourceScope,
    ensure,
    ensure_environment,
    ensure_environment_reference,
    ensure_folder,
)


def test_ensure_folder_creates_once_then_is_idempotent(catalog):
    assert ensure_folder(catalog, "Prod") is True
    assert ensure_folder(catalog, "Prod") is False

    assert catalog.calls_named("create_folder") == [("create_folder", "Prod")]
    assert catalog.folders == {"Prod"}


def test_ensure_environment_before_folder_fails(catalog):
    with pytest.raises(ProvisioningError, match="PRODENV") as exc_info:
        ensure_environment(catalog, "Prod", "PRODENV")

    assert exc_info.value.kind == "environment"
    assert exc_info.value.name == "PRODENV"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_ensure_environment_after_folder_succeeds(catalog):
    ensure_folder(catalog, "Prod")

    assert ensure_environment(catalog, "Prod", "PRODENV") is True
    assert ensure_environment(catalog, "Prod", "PRODENV") is False
    assert catalog.environments == {("Prod", "PRODENV")}


def test_environment_names_are_scoped_to_folder(catalog):
    ensure_folder(catalog, "Prod")
    ensure_folder(catalog, "Test")
    ensure_environment(catalog, "Prod", "ENV")

    assert ensure_environment(catalog, "Test", "ENV") is True


def test_ensure_reference_uses_fixed_reference_kind(catalog):
    catalog.folders.add("Prod")
    catalog.environments.add(("Prod", "PRODENV"))
    catalog.projects[("Prod", "OrderLoad")] = b"x"

    assert ensure_environment_reference(catalog, "OrderLoad", "Prod", "PRODENV") is True
    assert catalog.calls_named("create_environment_reference") == [
        (
            "create_environment_reference",
            "Prod",
            "PRODENV",
            "OrderLoad",
            ENVIRONMENT_REFERENCE_KIND,
        )
    ]
    assert ENVIRONMENT_REFERENCE_KIND == "R"


def test_ensure_reference_for_undeployed_project_fails(catalog):
    catalog.folders.add("Prod")
    catalog.environments.add(("Prod", "PRODENV"))

    with pytest.raises(ProvisioningError, match="OrderLoad"):
        ensure_environment_reference(catalog, "OrderLoad", "Prod", "PRODENV")


@pytest.mark.parametrize("identifier", [None, "", "   ", b""])
def test_null_or_empty_identifier_counts_as_absent(identifier):
    class _Adapter:
        def __init__(self):
            self.created: list[str] = []

        def folder_id(self, folder):
            return identifier

        def create_folder(self, folder):
            self.created.append(folder)

    adapter = _Adapter()
    assert ensure(adapter, ResourceKind.FOLDER, ResourceScope(), "Prod") is True
    assert adapter.created == ["Prod"]


@pytest.mark.parametrize("identifier", [0, 7, "7"])
def test_any_other_identifier_counts_as_present(identifier):
    class _Adapter:
        def folder_id(self, folder):
            return identifier

        def create_folder(self, folder):
            raise AssertionError("must not create an existing folder")

    assert ensure(_Adapter(), ResourceKind.FOLDER, ResourceScope(), "Prod") is False


def test_existence_query_failure_is_a_provisioning_error(catalog):
    catalog.fail_on["folder_id"] = PermissionError("SELECT permission denied")

    with pytest.raises(ProvisioningError, match="permission denied"):
        ensure_folder(catalog, "Prod")
    assert catalog.calls_named("create_folder") == []


def test_dry_run_never_creates(catalog):
    assert ensure_folder(catalog, "Prod", dry_run=True) is True
    assert ensure_environment(catalog, "Prod", "PRODENV", dry_run=True) is True

    assert catalog.calls_named("create_folder") == []
    assert catalog.calls_named("create_environment") == []
    assert catalog.folders == set()


def test_scope_must_name_parents(catalog):
    with pytest.raises(ValueError, match="folder"):
        ensure(catalog, ResourceKind.ENVIRONMENT, ResourceScope(), "PRODENV")
    with pytest.raises(ValueError, match="environment"):
        ensure(
            catalog,
            ResourceKind.ENVIRONMENT_REFERENCE,
            ResourceScope(folder="Prod"),
            "OrderLoad",
        )
    assert catalog.calls == []
