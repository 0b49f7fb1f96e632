"""
Tests for configuration loading — keyhash.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from keyhash.core.config.loader import (
    SETTINGS_FILE,
    ConfigError,
    find_settings_file,
    load_settings,
)
from keyhash.core.use_cases.config_check import check_config


@pytest.fixture
def full_settings_yml(tmp_path: Path) -> Path:
    """A keyhash.yml using every section."""
    content = textwrap.dedent("""\
        version: 1
        keystore_path: ~/keys/debug.keystore
        release:
          keystore_name: keys/release.jks
          keystore_pass: $STORE_PASS
          alias_name: upload
          alias_pass: $ALIAS_PASS
        preferences:
          android_sdk_root: /opt/android-sdk
          sdk_use_embedded: true
        build_tools:
          target: android
          playback_engine_dirs:
            android: /opt/editor/PlaybackEngines/AndroidPlayer
        platform: linux
        command_timeout: 30
    """)
    path = tmp_path / SETTINGS_FILE
    path.write_text(content)
    return path


@pytest.fixture
def wrapped_settings_yml(tmp_path: Path) -> Path:
    """Settings nested under a 'keyhash:' key."""
    content = textwrap.dedent("""\
        keyhash:
          keystore_path: /keys/debug.keystore
          command_timeout: 5
    """)
    path = tmp_path / SETTINGS_FILE
    path.write_text(content)
    return path


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_load_full_config(self, full_settings_yml: Path):
        settings = load_settings(full_settings_yml)
        assert settings.keystore_path == "~/keys/debug.keystore"
        assert settings.release.configured
        assert settings.release.alias_name == "upload"
        assert settings.preferences.sdk_use_embedded is True
        assert settings.build_tools.playback_engine_dirs["android"].endswith("AndroidPlayer")
        assert settings.platform == "linux"
        assert settings.timeout_seconds == 30

    def test_env_references_kept_raw(self, full_settings_yml: Path):
        settings = load_settings(full_settings_yml)
        assert settings.release.keystore_pass == "$STORE_PASS"

    def test_load_wrapped_format(self, wrapped_settings_yml: Path):
        settings = load_settings(wrapped_settings_yml)
        assert settings.keystore_path == "/keys/debug.keystore"
        assert settings.timeout_seconds == 5

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("")
        settings = load_settings(path)
        assert settings.keystore_path == ""
        assert not settings.release.configured

    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(None, search=False)
        assert settings.timeout_seconds == 120

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nonexistent.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_invalid_schema_raises(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("command_timeout: soon\n")
        with pytest.raises(ConfigError, match="Invalid keyhash configuration"):
            load_settings(path)


class TestFindSettingsFile:
    def test_finds_in_current_dir(self, full_settings_yml: Path):
        assert find_settings_file(full_settings_yml.parent) == full_settings_yml.resolve()

    def test_walks_up(self, full_settings_yml: Path):
        nested = full_settings_yml.parent / "app" / "src" / "main"
        nested.mkdir(parents=True)
        assert find_settings_file(nested) == full_settings_yml.resolve()

    def test_search_from_cwd(self, full_settings_yml: Path, monkeypatch):
        monkeypatch.chdir(full_settings_yml.parent)
        settings = load_settings()
        assert settings.release.configured


class TestConfigCheck:
    def test_valid_with_warnings(self, full_settings_yml: Path):
        result = check_config(full_settings_yml)
        assert result.valid
        assert any("does not exist" in w for w in result.warnings)

    def test_release_keystore_relative_to_config(self, full_settings_yml: Path):
        keys = full_settings_yml.parent / "keys"
        keys.mkdir()
        (keys / "release.jks").write_bytes(b"jks")
        result = check_config(full_settings_yml)
        assert not any("does not exist" in w for w in result.warnings)

    def test_half_configured_release(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("release:\n  keystore_name: r.jks\n")
        result = check_config(path)
        assert result.valid
        assert any("alias_name" in w for w in result.warnings)

    def test_disabled_timeout_warns(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("command_timeout: 0\n")
        result = check_config(path)
        assert any("command_timeout" in w for w in result.warnings)

    def test_unknown_platform_is_error(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("platform: amiga\n")
        result = check_config(path)
        assert not result.valid
        assert "amiga" in result.errors[0]

    def test_platform_alias_accepted(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("platform: darwin\n")
        assert check_config(path).valid

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text(":: invalid: yaml: [")
        result = check_config(path)
        assert not result.valid
        assert result.errors

    def test_to_dict(self, full_settings_yml: Path):
        data = check_config(full_settings_yml).to_dict()
        assert data["valid"] is True
        assert data["release_keystore"] is True
        assert data["command_timeout"] == 30


class TestRelativeKeystorePaths:
    """Relative keystore paths resolve against the keyhash.yml directory."""

    @pytest.fixture
    def project(self, tmp_path: Path) -> Path:
        root = tmp_path / "proj"
        (root / "keys").mkdir(parents=True)
        (root / "keys" / "r.jks").write_bytes(b"jks")
        (root / "sub").mkdir()
        (root / SETTINGS_FILE).write_text(textwrap.dedent("""\
            keystore_path: keys/debug.keystore
            release:
              keystore_name: keys/r.jks
              keystore_pass: s
              alias_name: upload
              alias_pass: a
        """))
        return root

    def test_loader_anchors_to_config_dir(self, project: Path, monkeypatch):
        monkeypatch.chdir(project / "sub")
        settings = load_settings()
        expected = (project / "keys" / "r.jks").resolve()
        assert Path(settings.release.keystore_name).resolve() == expected
        assert Path(settings.keystore_path).resolve() == (project / "keys" / "debug.keystore").resolve()

    def test_check_and_resolver_agree_from_subdirectory(self, project: Path, monkeypatch):
        from keyhash.adapters.mock import MockCommandRunner
        from keyhash.core.services.key_hash_resolver import KeyHashResolver

        monkeypatch.chdir(project / "sub")
        result = check_config()
        assert not any("does not exist" in w for w in result.warnings)

        resolver = KeyHashResolver(load_settings(), MockCommandRunner(), environ={})
        keystore = Path(resolver.select_credentials().keystore_path)
        assert keystore.is_absolute()
        assert keystore.is_file()

    def test_absolute_and_home_paths_untouched(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("keystore_path: ~/debug.keystore\nrelease:\n  keystore_name: /abs/r.jks\n")
        settings = load_settings(path)
        assert settings.keystore_path == "~/debug.keystore"
        assert settings.release.keystore_name == "/abs/r.jks"
