#!/usr/bin/env python3
"""
Build task orchestration and the Builder class.

The Builder sequences the Xcode tools, the archiver, the repackager and the
upload for one app configuration. Every task first checks that the
configuration holds the fields it needs and is skipped otherwise.
"""

from pathlib import Path
from typing import Optional

from . import upload, xcode
from .config import BuildConfig, secret_key as env_secret_key, team_token as env_team_token
from .credentials import commit_author_credential
from .repackage import RepackageResult, ensure_support_artifacts
from .utils import archive_zip, extract_zip, make_dirs, output_log, remove_path


class Builder:
    """Runs the build tasks for one app configuration."""

    def __init__(self, config: BuildConfig, team_token: Optional[str] = None, secret_key: Optional[str] = None):
        self.config = config
        self.team_token = env_team_token if team_token is None else team_token
        self.secret_key = env_secret_key if secret_key is None else secret_key

    @property
    def build_dir(self) -> Path:
        return Path(self.config.build_dir)

    @property
    def archive_path(self) -> Path:
        return self.build_dir.joinpath(f"{self.config.file_name}.xcarchive")

    def clean(self):
        xcode.clean_build(self.config.project_dir, self.config.derived_data_dir)

    def update_version(self):
        if not self.config.supports("update_version"):
            return

        project_dir = self.config.project_dir
        output_log("Updating major version")
        xcode.new_marketing_version(project_dir, self.config.marketing_version)
        output_log("Updating minor version")
        xcode.new_build_version(project_dir, self.config.full_version)
        output_log("Version updating complete")

    def build(self, build_type: str = "Release"):
        if not self.config.supports("build"):
            return

        xcode.xcodebuild_build(
            self.config.workspace, self.config.scheme, build_type, self.config.xcconfig, self.config.sdk
        )

    def test(self, destination: str):
        if not self.config.supports("test"):
            return

        xcode.xcodebuild_test(self.config.workspace, self.config.scheme, destination, self.config.simulator_sdk)

    def archive(self, build_type: str = "Release"):
        """Archive into a fresh build directory and zip the .xcarchive."""
        if not self.config.supports("archive"):
            return

        remove_path(self.build_dir)
        make_dirs(self.build_dir)

        # xcodebuild appends the .xcarchive extension itself
        xcode.xcodebuild_archive(
            self.config.workspace,
            self.config.scheme,
            build_type,
            self.config.xcconfig,
            self.build_dir.joinpath(self.config.file_name),
            self.config.sdk,
        )

        self.zip_archive()

    def zip_archive(self):
        output_log("Zipping archive for upload")
        archive_zip(
            self.build_dir,
            self.build_dir.joinpath(f"{self.config.file_name}.xcarchive.zip"),
            f"{self.config.file_name}.xcarchive",
            symlinks=False,
            timeout=self.config.archive_timeout,
        )

    def zip_dsym(self):
        output_log("Zipping dSYM")
        archive_zip(
            self.archive_path.joinpath("dSYMs"),
            self.build_dir.joinpath(f"{self.config.file_name}.app.dSYM.zip"),
            f"{self.config.app_name}.app.dSYM",
            symlinks=False,
            timeout=self.config.archive_timeout,
        )

    def export_archive_and_upload_to_test_flight(self, provisioning_profile: str):
        if not self.config.supports("export_for_test_flight"):
            return

        self.zip_dsym()

        ipa_file_name = f"{self.config.file_name}_test_flight"
        xcode.xcodebuild_export_ipa(
            self.archive_path, self.build_dir.joinpath(ipa_file_name), provisioning_profile
        )

        self.upload_to_test_flight(ipa_file_name)

    def upload_to_test_flight(self, ipa_file_name: str):
        notes_file = upload.write_notes(self.build_dir, self.notes())
        api_token = self.commit_author_test_flight_api_token()

        return upload.upload_to_test_flight(
            self.config.upload_url,
            self.build_dir.joinpath(f"{ipa_file_name}.ipa"),
            api_token,
            self.team_token,
            notes_file,
            dsym_file=self.build_dir.joinpath(f"{self.config.file_name}.app.dSYM.zip"),
            distribution_lists=self.config.distribution_lists,
        )

    def notes(self) -> str:
        return upload.release_notes(self.config.marketing_version, self.config.full_version)

    def commit_author_test_flight_api_token(self) -> str:
        return commit_author_credential(self.config.credentials_file, self.secret_key)

    def export_for_app_store(self, provisioning_profile: str) -> Optional[RepackageResult]:
        """Export an App Store IPA and add SwiftSupport to it when it is missing."""
        if not self.config.supports("export_for_app_store"):
            return None

        ipa_file_name = f"{self.config.file_name}_app_store"
        ipa_file = self.build_dir.joinpath(f"{ipa_file_name}.ipa")
        xcode.xcodebuild_export_ipa(
            self.archive_path, self.build_dir.joinpath(ipa_file_name), provisioning_profile
        )

        output_log("Checking for Swift support")
        unzipped_ipa_dir = self.build_dir.joinpath(f"{ipa_file_name}_unzipped_ipa")
        remove_path(unzipped_ipa_dir)
        extract_zip(ipa_file, unzipped_ipa_dir)

        result = ensure_support_artifacts(
            unzipped_ipa_dir,
            f"Payload/{self.config.app_name}.app/Frameworks",
            "SwiftSupport",
            self.config.swift_toolchain_dir,
            ipa_file,
            archiver=archive_zip,
            timeout=self.config.archive_timeout,
        )
        output_log(f"IPA {ipa_file.name}: {result.status.value}")
        return result
