"""
Tests for CLI commands — resolve, doctor, explain, config check.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from keyhash.adapters.mock import MockCommandRunner
from keyhash.core.services import key_hash_resolver
from keyhash.core.services.environment_probe import KEYTOOL_PROBE
from keyhash.core.services.key_hash_resolver import KeyHashResolver
from keyhash.main import cli


@pytest.fixture
def mock_runner(monkeypatch, home_dir: Path) -> MockCommandRunner:
    """Route every resolver the CLI builds through a scripted runner."""
    runner = MockCommandRunner()

    def fake_create_resolver(settings, runner_=None, *, environ=None):
        return KeyHashResolver(settings, runner, environ={"HOME": str(home_dir)})

    monkeypatch.setattr(key_hash_resolver, "create_resolver", fake_create_resolver)
    return runner


@pytest.fixture
def config_file(tmp_path: Path, sdk_dir: Path) -> Path:
    path = tmp_path / "keyhash.yml"
    path.write_text(textwrap.dedent(f"""\
        preferences:
          android_sdk_root: {sdk_dir}
        platform: linux
    """))
    return path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Android key hash" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestResolveCommand:
    def test_prints_hash(self, mock_runner, config_file):
        mock_runner.set_exit("-exportcert", 0, "XyZ9==\n")
        result = CliRunner().invoke(cli, ["--config", str(config_file), "resolve"])
        assert result.exit_code == 0
        assert "XyZ9==" in result.output
        assert "androiddebugkey" in result.output

    def test_quiet_prints_only_hash(self, mock_runner, config_file):
        mock_runner.set_exit("-exportcert", 0, "XyZ9==\n")
        result = CliRunner().invoke(cli, ["-q", "--config", str(config_file), "resolve"])
        assert result.exit_code == 0
        assert result.output.strip() == "XyZ9=="

    def test_failure_exit_code(self, mock_runner, config_file):
        mock_runner.set_missing(KEYTOOL_PROBE)
        result = CliRunner().invoke(cli, ["--config", str(config_file), "resolve"])
        assert result.exit_code == 1
        assert "Keytool not found" in result.output
        assert "no_java_keytool" in result.output

    def test_json(self, mock_runner, config_file):
        mock_runner.set_exit("-exportcert", 0, "XyZ9==\n")
        result = CliRunner().invoke(cli, ["--config", str(config_file), "resolve", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["key_hash"] == "XyZ9=="

    def test_json_failure(self, mock_runner, tmp_path):
        empty = tmp_path / "keyhash.yml"
        empty.write_text("platform: linux\n")
        result = CliRunner().invoke(cli, ["--config", str(empty), "resolve", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["cause"] == "no_android_sdk"
        assert "Android SDK" in data["message"]

    def test_bad_config(self, mock_runner, tmp_path):
        bad = tmp_path / "keyhash.yml"
        bad.write_text(":: invalid: yaml: [")
        result = CliRunner().invoke(cli, ["--config", str(bad), "resolve"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


class TestDoctorCommand:
    def test_ready(self, mock_runner, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "doctor"])
        assert result.exit_code == 0
        assert "android_sdk" in result.output
        assert "keytool" in result.output

    def test_json_lists_failures(self, mock_runner, config_file):
        mock_runner.set_missing(KEYTOOL_PROBE)
        result = CliRunner().invoke(cli, ["--config", str(config_file), "doctor", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ready"] is False
        assert data["first_failure"] == "no_java_keytool"


class TestExplainCommand:
    def test_known_cause(self, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "explain", "no_openssl"])
        assert result.exit_code == 0
        assert "OpenSSL not found" in result.output

    def test_platform_from_config(self, tmp_path):
        path = tmp_path / "keyhash.yml"
        path.write_text("platform: macos\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "explain", "no_android_sdk"])
        assert "Unity->Preferences..." in result.output

    def test_unknown_cause(self, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "explain", "gremlins"])
        assert "Check the documentation" in result.output

    def test_none(self, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "explain", "none"])
        assert "No failure." in result.output

    def test_json(self, config_file):
        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "explain", "java_keytool_error", "--json"],
        )
        data = json.loads(result.output)
        assert data["category"] == "tool"


class TestConfigCheckCommand:
    def test_valid(self, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Keystore: debug" in result.output

    def test_invalid(self, tmp_path):
        path = tmp_path / "keyhash.yml"
        path.write_text("platform: amiga\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check"])
        assert result.exit_code == 1
        assert "amiga" in result.output

    def test_json(self, config_file):
        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "config", "check", "--json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["valid"] is True
