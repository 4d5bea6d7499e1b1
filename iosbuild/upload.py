#!/usr/bin/env python3
"""
TestFlight upload.

Builds the release notes from git history and posts the IPA, dSYM archive and
notes to the upload endpoint with curl.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from .utils import output_log, run_process
from .vcs import current_revision, recent_changes


def release_notes(marketing_version: Optional[str], full_version: Optional[str]) -> str:
    """Notes shown to testers: version, revision and the last ten changes."""
    revision = current_revision()
    changes = "\n".join(recent_changes(10))
    return f"Version:{marketing_version} / {full_version} - {revision}\nLast 10 changes:\n\n{changes}"


def write_notes(build_dir: Path, notes: str) -> Path:
    notes_file = build_dir.joinpath("notes.txt")
    with open(notes_file, "w") as f:
        f.write(notes + "\n")
    return notes_file


def curl_form(url: str, form_data: List[Tuple[str, str]], check: bool = True):
    """POST multipart form data, failing on HTTP errors."""
    args = []
    for key, value in form_data:
        args.extend(["-F", f"{key}={value}"])

    return run_process("curl", "-S", "-f", *args, url, check=check)


def upload_to_test_flight(
    url: str,
    ipa_file: Path,
    api_token: str,
    team_token: str,
    notes_file: Path,
    dsym_file: Optional[Path] = None,
    distribution_lists: str = "ios-internal",
    notify: bool = True,
):
    """Upload an IPA build with its notes to TestFlight."""
    form_data = [
        ("file", f"@{ipa_file}"),
        ("api_token", api_token),
        ("team_token", team_token),
    ]
    if dsym_file is not None:
        form_data.append(("dsym", f"@{dsym_file}"))
    form_data.extend([
        ("notes", f"@{notes_file}"),
        ("notify", "True" if notify else "False"),
        ("distribution_lists", distribution_lists),
    ])

    output_log("Uploading to Testflight")
    result = curl_form(url, form_data)
    output_log("Upload finished")
    return result
