"""Data home used for cloze logs."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, MutableMapping

from .config import ClozeError

WORKSPACE_ENV = "CLOZE_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".code-cloze-data"

_SUBDIRS = {
    "logs": "logs",
}


class WorkspaceError(ClozeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace paths."""

    home: Path
    directories: Mapping[str, Path]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise KeyError(f"Unknown workspace directory '{key}'.") from exc


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Ensure the workspace exists and return its layout.

    ``path`` wins over ``CLOZE_DATA_HOME`` which wins over the default
    home directory. Only the default location falls back to the temp
    directory when it cannot be created.
    """

    env_map = os.environ if env is None else env
    base, has_override = _resolve_base(env_map, override=path)

    candidates = [base]
    if create and not has_override:
        candidates.append(_fallback_base())

    last_error: Exception | None = None
    for candidate in candidates:
        try:
            return _materialize_layout(candidate, create=create)
        except PermissionError as exc:
            last_error = exc
    raise WorkspaceError(
        f"Unable to prepare workspace at {base}"
    ) from last_error


def _resolve_base(
    env: Mapping[str, str], *, override: Path | None
) -> tuple[Path, bool]:
    if override is not None:
        return override.expanduser().absolute(), True
    custom = (env.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().absolute(), True
    return DEFAULT_WORKSPACE, False


def _fallback_base() -> Path:
    return Path(tempfile.gettempdir()) / "code-cloze-data"


def _materialize_layout(base: Path, *, create: bool) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )

    directories: MutableMapping[str, Path] = {}
    for key, relative in _SUBDIRS.items():
        candidate = base / relative
        if create:
            candidate.mkdir(parents=True, exist_ok=True)
            _chmod_safe(base, 0o700)
        if candidate.exists() and not candidate.is_dir():
            raise WorkspaceError(
                "Expected workspace directory for '{0}' but found a file: "
                "{1}".format(key, candidate)
            )
        directories[key] = candidate

    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType(dict(directories)),
    )


def _chmod_safe(path: Path, mode: int) -> None:
    try:
        path.chmod(mode)
    except (PermissionError, NotImplementedError):
        return
