from __future__ import annotations

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fixtures import WorkspaceBuilder  # noqa: E402

# Ensure src/ is importable when the package is not installed
ROOT = TESTS_DIR.parent
for extra in (ROOT / "src",):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from code_cloze.core import workspace as workspace_mod  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_data_home(tmp_path_factory, monkeypatch) -> Path:
    """Keep log files out of the real home directory."""

    home = tmp_path_factory.mktemp("cloze-data")
    monkeypatch.setenv(workspace_mod.WORKSPACE_ENV, str(home))
    return home


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)
