#!/usr/bin/env python3
"""
Utility functions for process execution, file operations and archiving.

These are the collaborators the build tasks sequence: a subprocess runner,
file-system helpers that report failures as FileSystemError, and the zip based
archiver used when packages are rebuilt.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Union

from .errors import ArchiveError, CommandError, FileSystemError

StrPath = Union[str, Path]


def output_log(log_str: str):
    print(f"[BUILD LOG] {log_str}")


def output_shell_command(command_str: str):
    print(f"[BUILD SHELL COMMAND] {command_str}")


def safe_glob(input: Path, pattern: str):
    """Safely iterate through files matching a pattern, excluding system files."""
    for f in sorted(input.glob(pattern)):
        if not f.name.startswith("._") and f.name not in [".DS_Store", ".AppleDouble", "__MACOSX"]:
            yield f


def decode_clean(b: bytes):
    """Decode bytes to clean UTF-8 string."""
    return "" if not b else b.decode("utf-8").strip()


def run_process(
    *cmd: str,
    capture: bool = True,
    check: bool = True,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[StrPath] = None,
    timeout: Optional[float] = None,
):
    """Run a subprocess, raising CommandError on failure.

    With capture disabled the command output goes straight to the console,
    which is what the long running Xcode tools want.
    """
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture,
            check=check,
            env=env,
            cwd=None if cwd is None else str(cwd),
            timeout=timeout,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
        raise CommandError(
            {
                "cmd": " ".join(cmd),
                "returncode": getattr(e, "returncode", None),
                "stdout": decode_clean(e.stdout),
                "stderr": decode_clean(e.stderr),
            }
        ) from e
    return result


def make_dirs(path: Path):
    """Create a directory and its parents; existing directories are fine."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(path, e) from e


def remove_path(path: Path):
    """Recursively delete a file or directory if it exists."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            os.remove(path)
    except OSError as e:
        raise FileSystemError(path, e) from e


def copy_path(src: Path, dest_dir: Path):
    """Copy a file or directory tree into dest_dir, keeping symlinks as links."""
    dest = dest_dir.joinpath(src.name)
    try:
        if src.is_dir() and not src.is_symlink():
            shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)
        else:
            shutil.copy2(src, dest, follow_symlinks=False)
    except OSError as e:
        raise FileSystemError(src, e) from e
    return dest


def extract_zip(archive: Path, dest_dir: Path):
    """Extract a ZIP archive to destination directory."""
    output_shell_command(f"unzip -o {archive} -d {dest_dir}")
    return run_process("unzip", "-o", str(archive), "-d", str(dest_dir))


def archive_zip(
    content_dir: Path,
    dest_file: Path,
    *entries: str,
    recurse: bool = True,
    symlinks: bool = True,
    timeout: Optional[float] = None,
):
    """Create or update a ZIP archive from entries of content_dir (default: all of it)."""
    cmd = ["zip"]
    if symlinks:
        cmd.append("--symlinks")
    if recurse:
        cmd.append("--recurse-paths")
    cmd.append(str(Path(dest_file).resolve()))
    cmd.extend(entries or ["."])

    output_shell_command(" ".join(cmd))
    try:
        return run_process(*cmd, cwd=str(content_dir), timeout=timeout)
    except CommandError as e:
        raise ArchiveError(e.data) from e
