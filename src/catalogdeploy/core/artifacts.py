from __future__ import annotations

from pathlib import Path
from typing import Iterable

ARTIFACT_SUFFIX = ".ispac"


def expand_artifacts(paths: Iterable[str | Path]) -> list[Path]:
    """
    Expand artifact arguments into an ordered list of artifact files.

    Directories contribute their `*.ispac` files (sorted by name, not
    recursive). Anything else is kept as given, so missing files surface as
    per-artifact failures when they are read. Duplicates are dropped while
    preserving first-seen order.
    """
    out: list[Path] = []
    seen: set[Path] = set()

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = sorted(
                p
                for p in path.iterdir()
                if p.is_file() and p.suffix.lower() == ARTIFACT_SUFFIX
            )
        else:
            candidates = [path]

        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            out.append(candidate)

    return out
