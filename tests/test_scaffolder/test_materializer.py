"""Tests for entry materialization (temploy.scaffolder.materializer)."""

from __future__ import annotations

import os
import stat
from pathlib import Path, PurePath
from unittest.mock import patch

import pytest

from temploy.errors import PrefixStripError, TemplateIOError
from temploy.scaffolder.materializer import materialize, target_path
from temploy.scaffolder.walker import EntryKind, TreeEntry

pytestmark = pytest.mark.unit


@pytest.fixture
def dest(tmp_path: Path) -> Path:
    d = tmp_path / "dest"
    d.mkdir()
    return d


def _file(source: Path, rel: str) -> TreeEntry:
    return TreeEntry(PurePath(rel), EntryKind.FILE, source)


def _dir(source: Path, rel: str) -> TreeEntry:
    return TreeEntry(PurePath(rel), EntryKind.DIRECTORY, source)


class TestTargetPath:
    def test_joins_under_root(self, dest: Path):
        assert target_path(dest, PurePath("sub/b.txt")) == dest / "sub" / "b.txt"

    @pytest.mark.parametrize("rel", ["../escape.txt", "sub/../../escape.txt", ".."])
    def test_parent_components_rejected(self, dest: Path, rel: str):
        with pytest.raises(PrefixStripError):
            target_path(dest, PurePath(rel))

    def test_absolute_rejected(self, dest: Path):
        with pytest.raises(PrefixStripError):
            target_path(dest, PurePath(dest.anchor) / "etc" / "passwd")

    def test_empty_rejected(self, dest: Path):
        with pytest.raises(PrefixStripError):
            target_path(dest, PurePath())


class TestMaterialize:
    def test_directory_created(self, tmp_path: Path, dest: Path):
        written = materialize(_dir(tmp_path, "sub"), dest)
        assert written == 0
        assert (dest / "sub").is_dir()

    def test_directory_collision_is_error(self, tmp_path: Path, dest: Path):
        (dest / "sub").mkdir()
        with pytest.raises(TemplateIOError) as exc_info:
            materialize(_dir(tmp_path, "sub"), dest)
        assert exc_info.value.operation == "create"
        assert exc_info.value.path == dest / "sub"
        assert isinstance(exc_info.value.cause, FileExistsError)

    def test_file_bytes_identical(self, tmp_path: Path, dest: Path):
        payload = bytes(range(256)) * 4096 + b"\x00\xff{{ name }}\r\n"
        source = tmp_path / "blob.bin"
        source.write_bytes(payload)

        written = materialize(_file(source, "blob.bin"), dest)

        assert written == len(payload)
        assert (dest / "blob.bin").read_bytes() == payload

    def test_empty_file(self, tmp_path: Path, dest: Path):
        source = tmp_path / "empty"
        source.write_bytes(b"")
        assert materialize(_file(source, "empty"), dest) == 0
        assert (dest / "empty").read_bytes() == b""

    def test_placeholders_not_interpreted(self, tmp_path: Path, dest: Path):
        source = tmp_path / "README.md"
        source.write_text("# {{ project_name }}\n$NAME\n", encoding="utf-8")
        materialize(_file(source, "README.md"), dest)
        assert (dest / "README.md").read_text(encoding="utf-8") == "# {{ project_name }}\n$NAME\n"

    def test_root_entry_refused(self, tmp_path: Path, dest: Path):
        with pytest.raises(ValueError):
            materialize(_dir(tmp_path, ""), dest)

    def test_existing_file_not_overwritten(self, tmp_path: Path, dest: Path):
        source = tmp_path / "a.txt"
        source.write_text("new", encoding="utf-8")
        (dest / "a.txt").write_text("old", encoding="utf-8")

        with pytest.raises(TemplateIOError) as exc_info:
            materialize(_file(source, "a.txt"), dest)

        assert exc_info.value.operation == "write"
        assert (dest / "a.txt").read_text(encoding="utf-8") == "old"

    def test_missing_source_is_read_error(self, tmp_path: Path, dest: Path):
        with pytest.raises(TemplateIOError) as exc_info:
            materialize(_file(tmp_path / "gone.txt", "gone.txt"), dest)
        assert exc_info.value.operation == "read"
        assert exc_info.value.path == tmp_path / "gone.txt"
        assert not (dest / "gone.txt").exists()

    def test_missing_parent_is_write_error(self, tmp_path: Path, dest: Path):
        source = tmp_path / "b.txt"
        source.write_text("b", encoding="utf-8")
        with pytest.raises(TemplateIOError) as exc_info:
            materialize(_file(source, "sub/b.txt"), dest)
        assert exc_info.value.operation == "write"
        assert exc_info.value.path == dest / "sub" / "b.txt"

    def test_escape_rejected(self, tmp_path: Path, dest: Path):
        source = tmp_path / "x.txt"
        source.write_text("x", encoding="utf-8")
        with pytest.raises(PrefixStripError):
            materialize(_file(source, "../x.txt"), dest)
        assert source.read_text(encoding="utf-8") == "x"

    def test_handles_closed_on_write_failure(self, tmp_path: Path, dest: Path):
        source = tmp_path / "a.txt"
        source.write_text("alpha", encoding="utf-8")
        opened = []
        real_open = open

        def _tracking_open(path, mode="r", *args, **kwargs):
            handle = real_open(path, mode, *args, **kwargs)
            opened.append(handle)
            return handle

        (dest / "a.txt").write_text("taken", encoding="utf-8")
        with patch("builtins.open", side_effect=_tracking_open):
            with pytest.raises(TemplateIOError):
                materialize(_file(source, "a.txt"), dest)

        assert opened
        assert all(handle.closed for handle in opened)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_permissions_preserved(self, tmp_path: Path, dest: Path):
        source = tmp_path / "run.sh"
        source.write_text("#!/bin/sh\necho hi\n", encoding="utf-8")
        source.chmod(0o755)

        materialize(_file(source, "run.sh"), dest)

        mode = stat.S_IMODE((dest / "run.sh").stat().st_mode)
        assert mode & stat.S_IXUSR

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_permissions_not_preserved_when_disabled(self, tmp_path: Path, dest: Path):
        source = tmp_path / "run.sh"
        source.write_text("#!/bin/sh\n", encoding="utf-8")
        source.chmod(0o755)

        with patch("temploy.scaffolder.materializer.shutil.copymode") as mock_copymode:
            materialize(_file(source, "run.sh"), dest, preserve_permissions=False)
        mock_copymode.assert_not_called()

    def test_chmod_failure(self, tmp_path: Path, dest: Path):
        source = tmp_path / "a.txt"
        source.write_text("a", encoding="utf-8")
        with patch(
            "temploy.scaffolder.materializer.shutil.copymode",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(TemplateIOError) as exc_info:
                materialize(_file(source, "a.txt"), dest)
        assert exc_info.value.operation == "chmod"
