# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI smoke tests.

CLI tests verify:
  - commands execute
  - exit codes are correct
  - help text exists

We use subprocess to test the actual CLI entrypoint the way a user would.
This catches issues that unit tests miss, like broken imports or entrypoint
registration.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    """Run `crossrel` with the given arguments and capture output."""
    return subprocess.run(
        [sys.executable, "-m", "crossrel.cli.main", *args],
        capture_output=True,
        text=True,
        timeout=60,
    )


def _log_records(stdout: str) -> list[dict]:
    return [json.loads(line) for line in stdout.splitlines() if line.startswith("{")]


class TestHelpTexts:
    """Every subcommand must have working --help output."""

    @pytest.mark.parametrize("subcommand", ["release", "verify", "info"])
    def test_subcommand_help_exits_zero(self, subcommand: str) -> None:
        result = _run_cli(subcommand, "--help")
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_release_help_lists_phase_switches(self) -> None:
        result = _run_cli("release", "--help")
        for flag in ("--go", "--nobuild", "--noarchive", "--keep-going"):
            assert flag in result.stdout

    def test_root_help_exits_with_user_error(self) -> None:
        """Running crossrel with no args should show help and exit with USER_ERROR (1)."""
        result = _run_cli()
        assert result.returncode == 1


class TestSubcommandExecution:
    def test_info_runs_without_config(self) -> None:
        result = _run_cli("info")
        assert result.returncode == 0
        assert "Release catalog" in result.stdout

    def test_dry_run_writes_nothing(self, tmp_path: Path) -> None:
        result = _run_cli("release", "--dry-run", "--root", str(tmp_path))
        assert result.returncode == 0
        assert list(tmp_path.iterdir()) == []
        planned = [r for r in _log_records(result.stdout) if r["msg"].startswith("Dry run")]
        assert len(planned) == 8
        assert planned[0]["platform"] == "darwin-amd64"

    def test_release_then_verify(
        self, fake_toolchain: Path, release_root: Path, tmp_config_file: Path
    ) -> None:
        released = _run_cli(
            "release",
            "--config", str(tmp_config_file),
            "--root", str(release_root),
            "--go", str(fake_toolchain),
        )
        assert released.returncode == 0, released.stdout + released.stderr
        assert (release_root / "archive" / "example-linux-amd64-v0.3.0.tar.gz").is_file()
        assert (release_root / "archive" / "manifest-v0.3.0.txt").is_file()

        verified = _run_cli("verify", "--config", str(tmp_config_file), "--root", str(release_root))
        assert verified.returncode == 0

    def test_build_failure_is_a_runtime_error(
        self,
        fake_toolchain: Path,
        release_root: Path,
        tmp_config_file: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("FAKE_GO_FAIL", "example/foo")
        result = _run_cli(
            "release",
            "--config", str(tmp_config_file),
            "--root", str(release_root),
            "--go", str(fake_toolchain),
        )
        assert result.returncode == 3  # RUNTIME_ERROR
        failure = [r for r in _log_records(result.stdout) if r["msg"] == "Release failed"]
        assert failure and failure[0]["operation"] == "build"
        assert not (release_root / "archive" / "manifest-v0.3.0.txt").exists()

    def test_missing_toolchain_is_a_runtime_error(
        self, release_root: Path, tmp_config_file: Path
    ) -> None:
        result = _run_cli(
            "release",
            "--config", str(tmp_config_file),
            "--root", str(release_root),
            "--go", str(release_root / "no-such-go"),
        )
        assert result.returncode == 3

    def test_verify_without_manifest_fails_validation(self, tmp_path: Path) -> None:
        result = _run_cli("verify", "--root", str(tmp_path))
        assert result.returncode == 4  # VALIDATION_ERROR


class TestConfigLoading:
    """Subcommands should handle config loading failures gracefully."""

    def test_nonexistent_config_returns_config_error(self) -> None:
        result = _run_cli("release", "--config", "/nonexistent/path.yaml")
        assert result.returncode == 2  # CONFIG_ERROR

    def test_invalid_config_returns_config_error(self, invalid_config_file: Path) -> None:
        result = _run_cli("info", "--config", str(invalid_config_file))
        assert result.returncode == 2

    def test_valid_config_is_accepted(self, tmp_config_file: Path) -> None:
        result = _run_cli("info", "--config", str(tmp_config_file))
        assert result.returncode == 0
