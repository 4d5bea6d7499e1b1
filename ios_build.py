#!/usr/bin/env python3
"""
iOS Build Tools - Main Entry Point

Runs one build task against a YAML build configuration:

    ios_build.py --config build.yaml archive
    ios_build.py --config build.yaml export-app-store --profile "App Store"

Available tasks: clean, bump-version, build, test, archive, export-test-flight,
export-app-store, resolve-credential, open-simulator, close-simulator.

Any failing step stops the run with exit status 1, so CI agents that ignore
the status of the wrapped tools still see the failure.
"""

import argparse
import sys
import traceback
from pathlib import Path

from iosbuild import Builder, BuildConfig, load_config, load_raw_credentials, resolve_credential
from iosbuild.credentials import (
    DEFAULT_IDENTITY, build_credential_table, commit_author_credential, normalize_identity,
)
from iosbuild.xcode import close_simulator, open_simulator


MASKED_TOKEN = "********"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build, archive, export and upload an iOS app.")
    parser.add_argument("--config", type=Path, default=None, help="YAML build configuration file")
    subparsers = parser.add_subparsers(dest="task", required=True)

    subparsers.add_parser("clean", help="Clean all targets and DerivedData")
    subparsers.add_parser("bump-version", help="Set marketing and build versions with agvtool")

    build = subparsers.add_parser("build", help="Build the scheme")
    build.add_argument("--build-type", default="Release")

    test = subparsers.add_parser("test", help="Run tests on a simulator")
    test.add_argument("--destination", required=True, help="e.g. 'platform=iOS Simulator,name=iPhone 15'")

    archive = subparsers.add_parser("archive", help="Archive and zip the .xcarchive")
    archive.add_argument("--build-type", default="Release")

    for name, help_text in [
        ("export-test-flight", "Export an IPA and upload it to TestFlight"),
        ("export-app-store", "Export an App Store IPA, adding SwiftSupport if missing"),
    ]:
        export = subparsers.add_parser(name, help=help_text)
        export.add_argument("--profile", required=True, help="Provisioning profile name")

    resolve = subparsers.add_parser("resolve-credential", help="Show which upload credential would be used")
    resolve.add_argument("--identity", default=None, help="Author email (default: last commit author)")

    subparsers.add_parser("open-simulator")
    subparsers.add_parser("close-simulator")
    return parser


def run(args: argparse.Namespace):
    """Dispatch a parsed command line to the Builder."""
    config = load_config(args.config) if args.config else BuildConfig()
    builder = Builder(config)

    if args.task == "clean":
        builder.clean()
    elif args.task == "bump-version":
        builder.update_version()
    elif args.task == "build":
        builder.build(args.build_type)
    elif args.task == "test":
        builder.test(args.destination)
    elif args.task == "archive":
        builder.archive(args.build_type)
    elif args.task == "export-test-flight":
        builder.export_archive_and_upload_to_test_flight(args.profile)
    elif args.task == "export-app-store":
        result = builder.export_for_app_store(args.profile)
        if result is not None:
            print(f"Export finished: {result.status.value}")
    elif args.task == "resolve-credential":
        if args.identity:
            raw = load_raw_credentials(config.credentials_file)
            resolve_credential(raw, args.identity)
            entry = args.identity if normalize_identity(args.identity) in build_credential_table(raw) else DEFAULT_IDENTITY
            print(f"Resolved credential from entry '{entry}': {MASKED_TOKEN}")
        else:
            commit_author_credential(config.credentials_file, builder.secret_key)
            print(f"Resolved credential: {MASKED_TOKEN}")
    elif args.task == "open-simulator":
        open_simulator()
    elif args.task == "close-simulator":
        close_simulator()


def main(argv=None):
    """Main entry point for the build tools."""
    args = build_parser().parse_args(argv)
    print(f"Running task: {args.task}")

    try:
        run(args)
    except Exception as e:
        print(f"ERROR: {e}")
        traceback.print_exc()
        sys.exit(1)

    print(f"Task {args.task} completed")


if __name__ == "__main__":
    main()
