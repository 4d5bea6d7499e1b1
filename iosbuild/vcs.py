#!/usr/bin/env python3
"""
Git queries used for release notes and upload credentials.
"""

from typing import List

from .utils import run_process, decode_clean


def commit_author_email() -> str:
    """Email of the author of the last commit, as git reports it."""
    return decode_clean(run_process("git", "log", "-1", "--format=%ae").stdout)


def current_revision() -> str:
    return decode_clean(run_process("git", "log", "--oneline", "--format=%h", "-1").stdout)


def recent_changes(count: int = 10) -> List[str]:
    """Last commits in one-line form, leaving out merge commits of branches."""
    output = decode_clean(run_process("git", "log", f"-{count}", "--pretty=oneline", "--abbrev-commit").stdout)
    return [line for line in output.splitlines() if "Merge branch" not in line]
