"""Markdown file discovery and reading helpers."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import ClozeError

__all__ = [
    "NoMatchingFilesError",
    "discover_files",
    "iter_pattern_matches",
    "read_text_file",
]


class NoMatchingFilesError(ClozeError):
    """Raised when the configured glob patterns match no files."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f'no results for "{pattern}"')
        self.pattern = pattern


def discover_files(patterns: Sequence[str], *, root: Path) -> List[Path]:
    """Expand ``patterns`` under ``root`` into absolute file paths.

    Matches for each pattern are sorted for determinism; patterns are
    processed in the given order and duplicates keep their first position.
    """

    seen: set[Path] = set()
    files: List[Path] = []
    for pattern in patterns:
        for path in sorted(iter_pattern_matches(pattern, root)):
            if path in seen:
                continue
            seen.add(path)
            files.append(path)
    if not files:
        raise NoMatchingFilesError(", ".join(patterns))
    return files


def iter_pattern_matches(pattern: str, root: Path) -> Iterator[Path]:
    """Yield resolved files matching a single glob ``pattern``.

    Entries under hidden (dot) directories, and hidden files, are skipped
    unless the pattern names them with a leading dot, e.g. ``.github/*.md``.
    """

    candidate = Path(pattern).expanduser()
    if candidate.is_absolute():
        anchor = Path(candidate.anchor)
        relative = str(candidate.relative_to(anchor))
    else:
        anchor = root
        relative = str(candidate)
    if not relative or relative == ".":
        return
    dotted = [part for part in Path(relative).parts if part.startswith(".")]
    for match in anchor.glob(relative):
        if not match.is_file():
            continue
        if _is_hidden(match.relative_to(anchor), dotted):
            continue
        yield match.resolve()


def _is_hidden(relative: Path, dotted: Sequence[str]) -> bool:
    for part in relative.parts:
        if not part.startswith(".") or part in (".", ".."):
            continue
        if not any(fnmatch(part, allowed) for allowed in dotted):
            return True
    return False


def read_text_file(path: Path) -> str:
    """Read a text file as strict UTF-8; decode and IO errors propagate."""
    with Path(path).open("r", encoding="utf-8") as fh:
        return fh.read()
