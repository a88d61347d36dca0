"""Progress display for deployment runs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from catalogdeploy.cli.common.output import console
from catalogdeploy.core.runs import ArtifactResult, DeploySettings, RunResult, run_deployment

_MAX_PROJECT_WIDTH = 48


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _current_label(artifact: str | Path) -> str:
    """Label shown next to the spinner while an artifact is processed."""
    return escape(_truncate(Path(artifact).stem, _MAX_PROJECT_WIDTH))


def deploy_with_progress(
    settings: DeploySettings,
    *,
    runner: Callable[..., RunResult] = run_deployment,
    **runner_kwargs: Any,
) -> RunResult:
    """
    Run a deployment while showing:
      - an overall progress bar (x/y artifacts + failures)
      - the project currently being processed
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[current]}[/]"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("failures=[bold red]{task.fields[failures]}[/]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    task_id = progress.add_task(
        "deploy",
        total=max(len(settings.artifacts), 1),
        current="connecting",
        failures=0,
    )
    failures = 0

    def _on_start(artifact: str | Path) -> None:
        progress.update(task_id, current=_current_label(artifact))

    def _on_result(result: ArtifactResult) -> None:
        nonlocal failures
        if not result.ok:
            failures += 1
        progress.update(task_id, failures=failures)
        progress.advance(task_id, 1)

    with progress:
        return runner(
            settings,
            on_start=_on_start,
            on_result=_on_result,
            **runner_kwargs,
        )
