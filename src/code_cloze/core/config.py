"""Loader for the ``.clozerc`` JSON configuration file."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_PATTERN",
    "ClozeError",
    "ClozeConfigError",
    "ConfigMissingError",
    "ClozeConfig",
    "load_config",
    "merge_defaults",
]

CONFIG_FILENAME = ".clozerc"
DEFAULT_PATTERN = "**/*.md"
_DEFAULT_LOG_LEVEL = "INFO"


class ClozeError(RuntimeError):
    """Base class for errors that end a cloze run with exit code 1."""


class ClozeConfigError(ClozeError):
    """Raised when ``.clozerc`` cannot be read or validated."""


class ConfigMissingError(ClozeConfigError):
    """Raised when no ``.clozerc`` exists where one is expected."""


@dataclass(frozen=True)
class ClozeConfig:
    """Resolved configuration for a quiz run."""

    patterns: tuple[str, ...]
    log_level: str
    path: Path
    ignored_keys: tuple[str, ...] = ()

    @property
    def pattern(self) -> str:
        return ", ".join(self.patterns)


def load_config(
    path: Path | None = None,
    *,
    cwd: Path | None = None,
) -> ClozeConfig:
    """Load ``.clozerc`` from ``path`` (or the working directory).

    An empty file is accepted and yields the defaults. Unknown top-level
    keys are left alone and reported on ``ignored_keys``; known keys are
    still type-checked.
    """

    base = cwd if cwd is not None else Path.cwd()
    target = path if path is not None else base / CONFIG_FILENAME
    if not target.is_absolute():
        target = base / target

    if not target.exists():
        raise ConfigMissingError(
            f"{CONFIG_FILENAME} doesn't exist in {target.parent}"
        )

    try:
        raw_text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise ClozeConfigError(f"Failed to read {target}: {exc}") from exc

    parsed = _parse_json(raw_text, target)
    table = _default_table()
    known = {key: value for key, value in parsed.items() if key in table}
    merge_defaults(table, known)

    return ClozeConfig(
        patterns=_coerce_patterns(table["files"]),
        log_level=_coerce_log_level(table["log_level"]),
        path=target.resolve(),
        ignored_keys=tuple(sorted(set(parsed) - set(table))),
    )


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Recursively merge ``override`` into ``base`` enforcing known keys."""

    for key, value in override.items():
        if key not in base:
            dotted = f"{path}{key}" if path else key
            raise ClozeConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                dotted = f"{path}{key}" if path else key
                raise ClozeConfigError(
                    "Expected object for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            merge_defaults(base_value, value, path=f"{path}{key}.")
            continue
        base[key] = value


def _default_table() -> dict[str, Any]:
    return {
        "files": None,
        "log_level": _DEFAULT_LOG_LEVEL,
    }


def _parse_json(text: str, path: Path) -> Mapping[str, Any]:
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ClozeConfigError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ClozeConfigError(
            f"{CONFIG_FILENAME} must contain a JSON object, "
            f"found {type(data).__name__}."
        )
    return data


def _coerce_patterns(value: Any) -> tuple[str, ...]:
    if value is None:
        return (DEFAULT_PATTERN,)
    if isinstance(value, str):
        candidates = [value]
    elif isinstance(value, list):
        candidates = value
    else:
        raise ClozeConfigError(
            "'files' must be a glob string or a list of glob strings."
        )

    patterns: list[str] = []
    for item in candidates:
        if not isinstance(item, str):
            raise ClozeConfigError(
                "'files' entries must be strings, found "
                f"{type(item).__name__}."
            )
        item = item.strip()
        if item:
            patterns.append(item)
    return tuple(patterns) or (DEFAULT_PATTERN,)


def _coerce_log_level(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ClozeConfigError("'log_level' must be a non-empty string.")
    return value.strip().upper()
