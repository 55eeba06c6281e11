"""
Pytest configuration and fixtures for Immigration Tracker tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from immigration_tracker.core.config import Settings, get_settings
from immigration_tracker.core.profiles import ConfigurationResolver, ProfileRegistry, get_resolver
from immigration_tracker.db import database


class StaticEnvironment:
    """Environment stub reporting a fixed list of active profiles."""

    def __init__(self, profiles):
        self.profiles = profiles

    def get_active_profiles(self):
        return self.profiles


@pytest.fixture
def registry():
    return ProfileRegistry.default()


@pytest.fixture
def make_resolver(registry):
    """Build a resolver whose environment reports the given profiles."""
    def _make(profiles, default_profile="dev"):
        return ConfigurationResolver(StaticEnvironment(profiles), registry, default_profile=default_profile)
    return _make


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        profiles_active="",
        sqlite_path=str(tmp_path / "tracker.db"),
    )


@pytest.fixture
def active_profile(monkeypatch):
    """
    Switch the process-wide profile via PROFILES_ACTIVE.

    Usage:
        def test_x(active_profile):
            active_profile("test")
    """
    def _activate(profiles):
        monkeypatch.setenv("PROFILES_ACTIVE", profiles)
        monkeypatch.setenv("DEBUG", "false")
        get_settings.cache_clear()
        get_resolver.cache_clear()
        database.reset_engine()

    yield _activate

    get_settings.cache_clear()
    get_resolver.cache_clear()
    database.reset_engine()
