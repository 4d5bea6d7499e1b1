#!/usr/bin/env python3
"""
Build configuration.

A BuildConfig is loaded once from a YAML build file and handed to the
Builder. Each task declares the fields it needs in REQUIRED_FIELDS and checks
them before running any command.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

import yaml

from .errors import ConfigError
from .utils import output_log

DEFAULT_SWIFT_TOOLCHAIN_DIR = Path(
    "/Applications/Xcode.app/Contents/Developer/Toolchains/XcodeDefault.xctoolchain/usr/lib/swift/iphoneos"
)

# Secrets come from the environment, never from the build file
team_token = os.environ.get("TESTFLIGHT_TEAM_TOKEN", "")
secret_key = os.environ.get("CREDENTIALS_SECRET_KEY", "")


class BuildConfig(NamedTuple):
    """Configuration for the build tasks."""
    app_name: Optional[str] = None
    file_name: Optional[str] = None
    marketing_version: Optional[str] = None
    full_version: Optional[str] = None
    scheme: Optional[str] = None
    workspace: Optional[str] = None
    xcconfig: Optional[str] = None
    build_dir: Optional[Path] = None
    project_dir: Path = Path(".")
    sdk: str = "iphoneos"
    simulator_sdk: str = "iphonesimulator"
    swift_toolchain_dir: Path = DEFAULT_SWIFT_TOOLCHAIN_DIR
    credentials_file: Path = Path("test_flight_api_token_by_author.yaml")
    upload_url: str = "http://testflightapp.com/api/builds.json"
    distribution_lists: str = "ios-internal"
    derived_data_dir: Path = Path("~/Library/Developer/Xcode/DerivedData").expanduser()
    archive_timeout: Optional[float] = None

    def missing(self, *fields: str) -> List[str]:
        """Return the given fields that are not set."""
        return [f for f in fields if getattr(self, f) in (None, "")]

    def supports(self, operation: str) -> bool:
        """Check the fields an operation needs, logging what is missing."""
        missing = self.missing(*REQUIRED_FIELDS[operation])
        if missing:
            output_log(f"Skipping {operation}: missing configuration {', '.join(missing)}")
            return False
        return True


REQUIRED_FIELDS: Dict[str, List[str]] = {
    "update_version": ["marketing_version", "full_version"],
    "build": ["workspace", "scheme", "xcconfig"],
    "test": ["workspace", "scheme"],
    "archive": ["build_dir", "workspace", "scheme", "xcconfig", "file_name"],
    "export_for_test_flight": ["build_dir", "file_name", "app_name"],
    "export_for_app_store": ["build_dir", "file_name", "app_name"],
}

_PATH_FIELDS = ["build_dir", "project_dir", "swift_toolchain_dir", "credentials_file", "derived_data_dir"]
_STR_FIELDS = [
    "app_name", "file_name", "marketing_version", "full_version", "scheme",
    "workspace", "xcconfig", "sdk", "simulator_sdk", "upload_url", "distribution_lists",
]


def config_from_mapping(data: Mapping[str, Any]) -> BuildConfig:
    """Build a BuildConfig from a plain mapping, rejecting unknown keys."""
    unknown = sorted(set(data) - set(BuildConfig._fields))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(map(str, unknown))}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if key in _PATH_FIELDS:
            values[key] = Path(str(value)).expanduser()
        elif key in _STR_FIELDS:
            # YAML reads versions such as 2.6 as floats
            values[key] = str(value)
        elif key == "archive_timeout":
            try:
                values[key] = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"archive_timeout must be a number, got {value!r}") from e

    if "file_name" not in values and "app_name" in values and "full_version" in values:
        values["file_name"] = f"{values['app_name']}_{values['full_version']}"

    return BuildConfig(**values)


def load_config(path: Path) -> BuildConfig:
    """Load a BuildConfig from a YAML build file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read build configuration {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Build configuration {path} must be a mapping")
    return config_from_mapping(data)
