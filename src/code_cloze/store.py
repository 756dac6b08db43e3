"""Persistence for ``cloze.json``.

The file currently round-trips unchanged; the ``code`` table is reserved
for per-block review history.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .core.config import ClozeError

__all__ = [
    "STATE_FILENAME",
    "StateError",
    "default_state",
    "load_state",
    "save_state",
]

STATE_FILENAME = "cloze.json"


class StateError(ClozeError):
    """Raised when ``cloze.json`` exists but is not a usable JSON object."""


def default_state() -> Dict[str, Any]:
    return {"code": {}}


def load_state(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return default_state()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise StateError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise StateError(
            f"{path.name} must contain a JSON object, "
            f"found {type(data).__name__}."
        )
    data.setdefault("code", {})
    return data


def save_state(path: Path, state: Dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state, indent=2), encoding="utf-8")
    return path
