from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from iosbuild import utils
from iosbuild.errors import ArchiveError, CommandError, FileSystemError
from iosbuild.utils import archive_zip, copy_path, make_dirs, remove_path, run_process, safe_glob


def test_run_process_captures_output() -> None:
    result = run_process(sys.executable, "-c", "print('hello')")

    assert utils.decode_clean(result.stdout) == "hello"


def test_run_process_failure_raises_command_error() -> None:
    with pytest.raises(CommandError) as excinfo:
        run_process(sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)")

    assert excinfo.value.returncode == 3
    assert excinfo.value.data["stderr"] == "boom"


def test_run_process_timeout_raises_command_error() -> None:
    with pytest.raises(CommandError):
        run_process(sys.executable, "-c", "import time; time.sleep(5)", timeout=0.2)


def test_archive_zip_flags(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[tuple[str, ...], dict[str, object]]] = []

    def fake_run_process(*cmd: str, **kwargs: object) -> SimpleNamespace:
        calls.append((cmd, kwargs))
        return SimpleNamespace(returncode=0, stdout=b"", stderr=b"")

    monkeypatch.setattr(utils, "run_process", fake_run_process)

    archive_zip(tmp_path, tmp_path / "out.ipa", timeout=60)

    cmd, kwargs = calls[0]
    assert cmd == ("zip", "--symlinks", "--recurse-paths", str((tmp_path / "out.ipa").resolve()), ".")
    assert kwargs == {"cwd": str(tmp_path), "timeout": 60}


def test_archive_zip_named_entries_without_symlinks(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, ...]] = []
    monkeypatch.setattr(utils, "run_process", lambda *cmd, **kwargs: calls.append(cmd))

    archive_zip(tmp_path, tmp_path / "App.xcarchive.zip", "App.xcarchive", symlinks=False)

    assert calls[0] == ("zip", "--recurse-paths", str((tmp_path / "App.xcarchive.zip").resolve()), "App.xcarchive")


def test_archive_zip_failure_raises_archive_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(*cmd: str, **kwargs: object) -> None:
        raise CommandError({"cmd": "zip", "returncode": 15, "stdout": "", "stderr": "zip I/O error"})

    monkeypatch.setattr(utils, "run_process", failing)

    with pytest.raises(ArchiveError) as excinfo:
        archive_zip(tmp_path, tmp_path / "out.ipa")

    assert excinfo.value.returncode == 15


def test_make_dirs_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"

    make_dirs(target)
    make_dirs(target)

    assert target.is_dir()


def test_make_dirs_under_a_file_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(FileSystemError) as excinfo:
        make_dirs(blocker / "child")

    assert excinfo.value.path == blocker / "child"


def test_remove_path_handles_files_dirs_and_absent(tmp_path: Path) -> None:
    directory = tmp_path / "dir"
    (directory / "nested").mkdir(parents=True)
    file = tmp_path / "file"
    file.write_text("x", encoding="utf-8")

    remove_path(directory)
    remove_path(file)
    remove_path(tmp_path / "absent")

    assert not directory.exists()
    assert not file.exists()


def test_copy_path_missing_source_raises(tmp_path: Path) -> None:
    with pytest.raises(FileSystemError):
        copy_path(tmp_path / "missing.dylib", tmp_path)


def test_safe_glob_skips_system_files(tmp_path: Path) -> None:
    for name in ["b.dylib", "._b.dylib", ".DS_Store", "a.dylib"]:
        (tmp_path / name).write_text("", encoding="utf-8")

    assert [p.name for p in safe_glob(tmp_path, "*")] == ["a.dylib", "b.dylib"]
