"""Core shared helpers for the cloze command."""

from __future__ import annotations

from .config import (
    CONFIG_FILENAME,
    DEFAULT_PATTERN,
    ClozeConfig,
    ClozeConfigError,
    ClozeError,
    ConfigMissingError,
    load_config,
    merge_defaults,
)
from .files import (
    NoMatchingFilesError,
    discover_files,
    iter_pattern_matches,
    read_text_file,
)
from .logging import JsonLogFormatter, configure_logger, release_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_PATTERN",
    "ClozeConfig",
    "ClozeConfigError",
    "ClozeError",
    "ConfigMissingError",
    "load_config",
    "merge_defaults",
    "NoMatchingFilesError",
    "discover_files",
    "iter_pattern_matches",
    "read_text_file",
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
    "WORKSPACE_ENV",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]
