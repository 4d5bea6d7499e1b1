#!/usr/bin/env python3
"""
Exception types raised by the build tools.

Every error derives from BuildError so the command-line entry point can stop
the pipeline on the first failure.
"""

from pathlib import Path
from typing import Any, Dict, Union


class BuildError(Exception):
    """Base class for all build tool failures."""


class ConfigError(BuildError):
    """Build configuration or credential file could not be used."""


class CommandError(BuildError):
    """An external command exited with a non-zero status or timed out."""

    def __init__(self, data: Dict[str, Any]):
        super().__init__(data)
        self.data = data

    @property
    def returncode(self):
        return self.data.get("returncode")


class ArchiveError(CommandError):
    """The archiving tool failed to produce the package archive."""


class CredentialNotFound(BuildError):
    def __init__(self, identity: str):
        super().__init__(f"No upload credential for '{identity}' and no default entry")
        self.identity = identity


class SourceArtifactMissing(BuildError):
    def __init__(self, entry_name: str, source: Path):
        super().__init__(f"Toolchain artifact for '{entry_name}' not found at {source}")
        self.entry_name = entry_name
        self.source = source


class FileSystemError(BuildError):
    def __init__(self, path: Union[str, Path], error: OSError):
        super().__init__(f"{path}: {error}")
        self.path = path
        self.error = error
