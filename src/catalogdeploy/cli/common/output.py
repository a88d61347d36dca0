"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from catalogdeploy.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_SELECT,
)

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "checked_icon", "unchecked_icon", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be CATALOG-DEPLOY consistent."""
        return f"[CATALOG-DEPLOY] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def select_many(self, message: str, choices: list[Any]) -> list[Any]:
        """
        Prompt the user to select multiple items from a list.

        Choices may be plain strings or questionary.Choice objects; the
        selected values are returned. All choices start checked.
        """
        if not choices:
            return []

        prompt = self._q_try(
            questionary.checkbox,
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓, space, a (all), i (invert), enter",
            pointer="❯",
            checked_icon="▣",
            unchecked_icon="▢",
        )
        picked = prompt.ask()
        return list(picked or [])

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise (including Ctrl-C).
        """
        # Questionary renders `instruction=...` inline next to the echoed answer.
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def artifacts_table(
        self, artifacts: Iterable[Path | str], title: str = "Artifacts"
    ) -> None:
        """Render artifact paths with the project name each one deploys as."""
        t = Table(title=title, show_lines=False)
        t.add_column("Project", style="ok", no_wrap=True)
        t.add_column("Artifact", style="meta")

        for a in artifacts:
            path = Path(a)
            t.add_row(escape(path.stem), escape(str(path)))

        console.print(t)

    def deploy_results_table(
        self, results: Iterable[Any], title: str = "Deployment results"
    ) -> None:
        """
        Render per-artifact deployment outcomes.

        Expects objects like catalogdeploy.core.runs.ArtifactResult
        (.artifact .project .ok .phase .failure .error and created flags).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Project", style="ok", no_wrap=True)
        t.add_column("Folder created")
        t.add_column("Env created")
        t.add_column("Ref created")
        t.add_column("Result")

        for r in results:
            project = r.project or Path(r.artifact).stem
            if r.ok:
                result = "[ok]OK[/]"
            else:
                kind = r.failure.value if r.failure else "FAILED"
                error = escape(r.error or "")
                result = f"[err]{kind}[/] at {r.phase.value.lower()}: {error}"
            t.add_row(
                escape(project),
                _yes_no(r.folder_created),
                _yes_no(r.environment_created),
                _yes_no(r.reference_created),
                result,
            )

        console.print(t)


out = Out()
