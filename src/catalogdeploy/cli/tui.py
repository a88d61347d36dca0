"""Terminal UI utilities for picking artifacts to deploy."""

from __future__ import annotations

from pathlib import Path

import questionary

from catalogdeploy.cli.common.output import out

_MAX_PROJECT_WIDTH = 64


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _artifact_choice_title(artifact: Path, *, name_width: int) -> str:
    """Format one artifact choice as `<project>  (<path>)` with aligned path column."""
    short_name = _truncate(artifact.stem, _MAX_PROJECT_WIDTH)
    return f"{short_name.ljust(name_width)}  ({artifact})"


def select_artifacts(artifacts: list[Path]) -> list[Path]:
    """Display a checkbox prompt to select artifacts from a list.

    Args:
        artifacts: Artifact paths to choose from (all start checked).

    Returns:
        The selected paths in their original order, or an empty list.
    """
    shown_names = [_truncate(a.stem, _MAX_PROJECT_WIDTH) for a in artifacts]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(
            title=_artifact_choice_title(a, name_width=name_width),
            value=a,
            checked=True,
        )
        for a in artifacts
    ]

    picked = out.select_many("Select artifacts to deploy:", choices)
    return [a for a in artifacts if a in picked]
