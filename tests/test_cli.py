import pytest
from typer.testing import CliRunner

from catalogdeploy.cli import cli
from catalogdeploy.cli.commands import deploy as deploy_cmd
from catalogdeploy.cli.common.output import Out
from catalogdeploy.core.runs import ArtifactPhase, ArtifactResult, RunResult

runner = CliRunner()


@pytest.fixture
def fake_run(monkeypatch):
    calls: list = []
    outcome: dict = {"result": None}

    def _fake(settings, **kwargs):
        calls.append(settings)
        if outcome["result"] is not None:
            return outcome["result"]
        return RunResult(
            results=tuple(
                ArtifactResult(
                    artifact=str(a), ok=True, phase=ArtifactPhase.DONE, project=a.stem
                )
                for a in settings.artifacts
            )
        )

    monkeypatch.setattr(deploy_cmd, "deploy_with_progress", _fake)
    return calls, outcome


def _args(*artifacts, extra=()):
    return [
        "deploy",
        *[str(a) for a in artifacts],
        "--instance",
        "sql01",
        "--folder",
        "Prod",
        "--environment",
        "PRODENV",
        *extra,
    ]


def test_deploy_success_exits_zero(fake_run, make_artifact):
    calls, _ = fake_run
    a = make_artifact("OrderLoad.ispac")
    b = make_artifact("CustomerSync.ispac")

    result = runner.invoke(cli.app, _args(a, b, extra=["--yes"]))

    assert result.exit_code == 0, result.output
    (settings,) = calls
    assert [p.name for p in settings.artifacts] == [
        "OrderLoad.ispac",
        "CustomerSync.ispac",
    ]
    assert settings.catalog == "SSISDB"
    assert settings.create_folder is True
    assert settings.command_timeout == 300
    assert "Deployed 2 project(s)" in result.output


def test_any_failed_artifact_exits_one(fake_run, make_artifact):
    _, outcome = fake_run
    outcome["result"] = RunResult(
        results=(
            ArtifactResult(artifact="A.ispac", ok=True, phase=ArtifactPhase.DONE),
            ArtifactResult(
                artifact="B.ispac",
                ok=False,
                phase=ArtifactPhase.DEPLOYING,
                error="[ODBC] bad stream",
            ),
        )
    )

    result = runner.invoke(cli.app, _args(make_artifact("A.ispac"), extra=["--yes"]))

    assert result.exit_code == 1
    assert "1 of 2 artifact(s) failed" in result.output


def test_connection_error_exits_one(fake_run, make_artifact):
    _, outcome = fake_run
    outcome["result"] = RunResult(connection_error="Could not connect")

    result = runner.invoke(cli.app, _args(make_artifact("A.ispac"), extra=["--yes"]))

    assert result.exit_code == 1
    assert "Could not connect" in result.output


def test_declined_confirmation_deploys_nothing(fake_run, make_artifact, monkeypatch):
    calls, _ = fake_run
    monkeypatch.setattr(Out, "confirm", lambda self, message, default=False: False)

    result = runner.invoke(cli.app, _args(make_artifact("A.ispac")))

    assert result.exit_code == 0
    assert calls == []
    assert "Cancelled" in result.output


def test_dry_run_skips_confirmation(fake_run, make_artifact, monkeypatch):
    calls, _ = fake_run

    def _no_prompt(self, message, default=False):
        raise AssertionError("dry-run must not prompt")

    monkeypatch.setattr(Out, "confirm", _no_prompt)

    result = runner.invoke(cli.app, _args(make_artifact("A.ispac"), extra=["--dry-run"]))

    assert result.exit_code == 0, result.output
    assert calls[0].dry_run is True


def test_options_can_come_from_environment(fake_run, make_artifact):
    calls, _ = fake_run

    result = runner.invoke(
        cli.app,
        ["deploy", str(make_artifact("A.ispac")), "--yes"],
        env={
            "CATALOG_DEPLOY_INSTANCE": "sql02",
            "CATALOG_DEPLOY_FOLDER": "Test",
            "CATALOG_DEPLOY_ENVIRONMENT": "TESTENV",
            "CATALOG_DEPLOY_COMMAND_TIMEOUT": "60",
        },
    )

    assert result.exit_code == 0, result.output
    (settings,) = calls
    assert (settings.instance, settings.folder, settings.environment) == (
        "sql02",
        "Test",
        "TESTENV",
    )
    assert settings.command_timeout == 60


def test_empty_directory_exits_one(fake_run, tmp_path):
    calls, _ = fake_run
    empty = tmp_path / "empty"
    empty.mkdir()

    result = runner.invoke(cli.app, _args(empty, extra=["--yes"]))

    assert result.exit_code == 1
    assert calls == []


def test_blank_required_option_exits_two(fake_run, make_artifact):
    calls, _ = fake_run

    result = runner.invoke(
        cli.app,
        [
            "deploy",
            str(make_artifact("A.ispac")),
            "--instance",
            "sql01",
            "--folder",
            " ",
            "--environment",
            "PRODENV",
            "--yes",
        ],
    )

    assert result.exit_code == 2
    assert calls == []
    assert "folder is required" in result.output
