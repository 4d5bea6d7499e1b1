from __future__ import annotations

from pathlib import Path

import pytest

import ios_build
from iosbuild import Builder


def test_resolve_credential_task_masks_token(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tokens = tmp_path / "tokens.yaml"
    tokens.write_text("Alice@X.com: tok1-secret\ndefault: tok0\n", encoding="utf-8")
    config = tmp_path / "build.yaml"
    config.write_text(f"credentials_file: {tokens}\n", encoding="utf-8")

    ios_build.main(["--config", str(config), "resolve-credential", "--identity", "ALICE@x.com"])

    out = capsys.readouterr().out
    assert "Resolved credential from entry 'ALICE@x.com': ********" in out
    assert "tok1" not in out


def test_resolve_credential_task_names_default_entry(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tokens = tmp_path / "tokens.yaml"
    tokens.write_text("Alice@X.com: tok1\ndefault: tok0-secret\n", encoding="utf-8")
    config = tmp_path / "build.yaml"
    config.write_text(f"credentials_file: {tokens}\n", encoding="utf-8")

    ios_build.main(["--config", str(config), "resolve-credential", "--identity", "bob@x.com"])

    out = capsys.readouterr().out
    assert "Resolved credential from entry 'default': ********" in out
    assert "tok0" not in out


def test_missing_credential_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tokens = tmp_path / "tokens.yaml"
    tokens.write_text("Alice@X.com: tok1\n", encoding="utf-8")
    config = tmp_path / "build.yaml"
    config.write_text(f"credentials_file: {tokens}\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        ios_build.main(["--config", str(config), "resolve-credential", "--identity", "bob@x.com"])

    assert excinfo.value.code == 1
    assert "ERROR: No upload credential for 'bob@x.com'" in capsys.readouterr().out


def test_archive_task_dispatches_build_type(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(Builder, "archive", lambda self, build_type: calls.append(build_type))

    ios_build.main(["archive", "--build-type", "Debug"])

    assert calls == ["Debug"]


def test_export_requires_profile() -> None:
    with pytest.raises(SystemExit):
        ios_build.main(["export-app-store"])

