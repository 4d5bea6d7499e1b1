#!/usr/bin/env python3
"""
Support artifact repackaging.

An exported IPA whose app bundle embeds frameworks must also carry their
toolchain counterparts in a top level support directory (SwiftSupport for
Swift apps). When an export comes out without it, the directory is rebuilt
from the toolchain and the IPA is zipped again.

There is no rollback: if a copy fails halfway the extracted package is left
with a partially populated support directory.
"""

from enum import Enum
from pathlib import Path
from typing import Callable, List, NamedTuple, Optional, Tuple

from .errors import SourceArtifactMissing
from .utils import archive_zip, copy_path, make_dirs, output_log, remove_path, safe_glob


class RepackageStatus(Enum):
    ALREADY_SATISFIED = "already_satisfied"
    REPACKAGED = "repackaged"


class PackageDescriptor(NamedTuple):
    """An extracted package and the directories the check looks at."""
    package_path: Path
    frameworks_dir_name: str
    support_dir_name: str

    @property
    def frameworks_dir(self) -> Path:
        return self.package_path.joinpath(self.frameworks_dir_name)

    @property
    def support_dir(self) -> Path:
        return self.package_path.joinpath(self.support_dir_name)


class RepackageResult(NamedTuple):
    status: RepackageStatus
    copied: Tuple[str, ...] = ()
    archive: Optional[Path] = None


def framework_entries(frameworks_dir: Path) -> List[Path]:
    """Entries of the frameworks directory, empty if it does not exist."""
    if not frameworks_dir.is_dir():
        return []
    return list(safe_glob(frameworks_dir, "*"))


def needs_support_artifacts(package: PackageDescriptor) -> bool:
    """True when the support directory is absent but frameworks are embedded."""
    if package.support_dir.exists():
        return False
    return len(framework_entries(package.frameworks_dir)) > 0


def ensure_support_artifacts(
    package_path: Path,
    frameworks_dir_name: str,
    support_dir_name: str,
    toolchain_root: Path,
    output_path: Path,
    archiver: Callable = archive_zip,
    timeout: Optional[float] = None,
) -> RepackageResult:
    """Add missing support artifacts to an extracted package and re-archive it.

    Every entry of the frameworks directory is copied from
    toolchain_root/<entry name>. A missing source stops the operation with
    SourceArtifactMissing before anything else is copied.
    """
    package = PackageDescriptor(Path(package_path), frameworks_dir_name, support_dir_name)
    output_log(f"Checking {package.package_path} for {support_dir_name}")

    if not needs_support_artifacts(package):
        output_log(f"Package has {support_dir_name} or embeds no frameworks, nothing to do")
        return RepackageResult(RepackageStatus.ALREADY_SATISFIED)

    output_log(f"Package has NO {support_dir_name}!")

    output_log(f"Creating {support_dir_name} directory")
    make_dirs(package.support_dir)

    output_log(f"Adding {support_dir_name} files")
    copied: List[str] = []
    for entry in framework_entries(package.frameworks_dir):
        source = Path(toolchain_root).joinpath(entry.name)
        if not source.exists() and not source.is_symlink():
            raise SourceArtifactMissing(entry.name, source)
        copy_path(source, package.support_dir)
        copied.append(entry.name)

    output_log(f"Recreating {output_path}")
    output_path = Path(output_path)
    remove_path(output_path)
    archiver(package.package_path, output_path, recurse=True, symlinks=True, timeout=timeout)

    return RepackageResult(RepackageStatus.REPACKAGED, tuple(copied), output_path)
