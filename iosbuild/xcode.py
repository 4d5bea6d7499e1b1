#!/usr/bin/env python3
"""
Xcode command line tool wrappers.

Each wrapper logs the command it runs and streams the tool's output to the
console. A non-zero exit raises CommandError, which stops the pipeline even
when the calling CI agent would not notice the failed status itself.
"""

from pathlib import Path
from typing import Optional

from .utils import output_log, output_shell_command, remove_path, run_process


def _run(*cmd: str, cwd: Optional[Path] = None):
    output_shell_command(" ".join(cmd))
    return run_process(*cmd, capture=False, cwd=cwd)


def close_simulator():
    return _run("osascript", "-e", 'tell app "iOS Simulator" to quit')


def open_simulator():
    return _run("osascript", "-e", 'tell app "iOS Simulator" to activate')


def clean_build(project_dir: Path, derived_data_dir: Path):
    """Clean all targets and throw away the DerivedData cache."""
    _run("xcodebuild", "-alltargets", "clean", cwd=project_dir)

    if derived_data_dir.exists():
        output_shell_command(f"rm -rf {derived_data_dir}")
        remove_path(derived_data_dir)


def new_marketing_version(project_dir: Path, version: str):
    return _run("agvtool", "new-marketing-version", version, cwd=project_dir)


def new_build_version(project_dir: Path, version: str):
    return _run("agvtool", "new-version", "-all", version, cwd=project_dir)


def xcodebuild_build(workspace: str, scheme: str, configuration: str, xcconfig: str, sdk: str = "iphoneos"):
    return _run(
        "xcodebuild", "build",
        "-sdk", sdk,
        "-workspace", workspace,
        "-configuration", configuration,
        "-scheme", scheme,
        "-xcconfig", xcconfig,
    )


def xcodebuild_archive(
    workspace: str, scheme: str, configuration: str, xcconfig: str, archive_path: Path, sdk: str = "iphoneos"
):
    return _run(
        "xcodebuild", "archive",
        "-sdk", sdk,
        "-workspace", workspace,
        "-configuration", configuration,
        "-scheme", scheme,
        "-xcconfig", xcconfig,
        "-archivePath", str(archive_path),
    )


def xcodebuild_test(workspace: str, scheme: str, destination: str, sdk: str = "iphonesimulator"):
    return _run(
        "xcodebuild", "test",
        "-sdk", sdk,
        "-destination", destination,
        "-workspace", workspace,
        "-configuration", "Debug",
        "-scheme", scheme,
    )


def xcodebuild_export_ipa(archive_path: Path, export_path: Path, provisioning_profile: str):
    """Export an .xcarchive as <export_path>.ipa signed with the named profile."""
    output_log(f"Exporting {archive_path.name}")
    return _run(
        "xcodebuild", "-exportArchive",
        "-exportFormat", "IPA",
        "-archivePath", str(archive_path),
        "-exportPath", str(export_path),
        "-exportProvisioningProfile", provisioning_profile,
    )
