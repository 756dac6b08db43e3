"""Shared testing fixtures for the code_cloze test suite."""

from .console import FixedRandom, make_console, make_provider  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "FixedRandom",
    "WorkspaceBuilder",
    "build_tree",
    "make_console",
    "make_provider",
]
