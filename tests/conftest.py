"""Shared pytest fixtures for the temploy test suite.

Provides reusable fixtures for:
- A template directory with nested files and a ``.git`` directory
- An output directory to generate projects into
- Mock subprocess helpers for the git / docker / deploy glue
"""

from __future__ import annotations

import shutil
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from temploy.utils import console

TEST_DATA = Path(__file__).parent / "test-data"


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep Rich from wrapping long tmp paths in captured output."""
    monkeypatch.setattr(console, "width", 1000)


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A template tree named ``test-data``.

    Copies the checked-in ``tests/test-data`` fixture (``a.txt`` and
    ``sub/b.txt``) and adds the VCS metadata that can't be committed:
    ``.git/config``, a nested ``sub/.git/HEAD`` and a ``.github`` directory
    that must survive the copy.
    """
    root = tmp_path / "templates" / "test-data"
    shutil.copytree(TEST_DATA, root)

    (root / ".git").mkdir()
    (root / ".git" / "config").write_text("[core]\n\tbare = false\n", encoding="utf-8")
    (root / "sub" / ".git").mkdir()
    (root / "sub" / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    (root / ".github" / "workflows").mkdir(parents=True)
    (root / ".github" / "workflows" / "ci.yml").write_text("name: CI\n", encoding="utf-8")
    (root / ".gitignore").write_text("*.pyc\n", encoding="utf-8")
    yield root


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Empty parent directory for generated projects."""
    out = tmp_path / "out"
    out.mkdir()
    yield out


def tree_snapshot(root: Path) -> dict[str, bytes | None]:
    """Map every path under *root* to its bytes (``None`` for directories)."""
    snapshot: dict[str, bytes | None] = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        snapshot[rel] = None if path.is_dir() else path.read_bytes()
    return snapshot


@pytest.fixture
def snapshot():
    """Expose :func:`tree_snapshot` to tests."""
    return tree_snapshot


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
