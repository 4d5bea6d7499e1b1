#!/usr/bin/env python3
"""
iOS Build Tools Library

This library wraps the platform build tools behind a small set of tasks:
clean, version bump, build, test, archive, export and upload.

The library is organized into separate modules:
- errors: Exception types raised by every task
- utils: Process execution, file operations and the zip archiver
- config: The BuildConfig record and YAML build file loading
- credentials: Upload credential lookup by commit author
- aes: Decryption of encrypted credential tokens
- repackage: SwiftSupport detection and IPA repackaging
- vcs: Git queries for notes and credentials
- xcode: xcodebuild, agvtool and simulator wrappers
- upload: TestFlight upload
- builder: Task orchestration

Example usage:
    from iosbuild import Builder, load_config

    builder = Builder(load_config(Path("build.yaml")))
    builder.archive()
    builder.export_for_app_store("App Store Profile")
"""

from .builder import Builder
from .config import BuildConfig, REQUIRED_FIELDS, config_from_mapping, load_config
from .credentials import (
    DEFAULT_IDENTITY,
    build_credential_table, normalize_identity, resolve_credential,
    load_raw_credentials, commit_author_credential,
)
from .errors import (
    BuildError, ConfigError, CommandError, ArchiveError,
    CredentialNotFound, SourceArtifactMissing, FileSystemError,
)
from .repackage import (
    PackageDescriptor, RepackageResult, RepackageStatus,
    ensure_support_artifacts, needs_support_artifacts,
)

__version__ = "1.0.0"

__all__ = [
    # Main classes
    'Builder', 'BuildConfig', 'REQUIRED_FIELDS', 'config_from_mapping', 'load_config',

    # Credentials
    'DEFAULT_IDENTITY', 'build_credential_table', 'normalize_identity', 'resolve_credential',
    'load_raw_credentials', 'commit_author_credential',

    # Repackaging
    'PackageDescriptor', 'RepackageResult', 'RepackageStatus',
    'ensure_support_artifacts', 'needs_support_artifacts',

    # Errors
    'BuildError', 'ConfigError', 'CommandError', 'ArchiveError',
    'CredentialNotFound', 'SourceArtifactMissing', 'FileSystemError',
]
