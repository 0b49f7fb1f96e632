"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from keyhash.adapters.mock import MockCommandRunner
from keyhash.core.models.settings import KeyHashSettings, SdkPreferences
from keyhash.core.services.key_hash_resolver import KeyHashResolver


@pytest.fixture
def sdk_dir(tmp_path: Path) -> Path:
    """An existing (empty) Android SDK directory."""
    path = tmp_path / "android-sdk"
    path.mkdir()
    return path


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """A home directory holding ~/.android/debug.keystore."""
    home = tmp_path / "home"
    (home / ".android").mkdir(parents=True)
    (home / ".android" / "debug.keystore").write_bytes(b"keystore")
    return home


@pytest.fixture
def environ(home_dir: Path) -> dict[str, str]:
    """Process environment without any ANDROID_* variables."""
    return {"HOME": str(home_dir)}


@pytest.fixture
def ready_settings(sdk_dir: Path) -> KeyHashSettings:
    """Settings whose SDK preference points at an existing directory."""
    return KeyHashSettings(preferences=SdkPreferences(android_sdk_root=str(sdk_dir)))


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def resolver(
    ready_settings: KeyHashSettings,
    runner: MockCommandRunner,
    environ: dict[str, str],
) -> KeyHashResolver:
    """Resolver with every precondition met and a scripted runner."""
    return KeyHashResolver(ready_settings, runner, environ=environ)
