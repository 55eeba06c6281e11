"""
Tests for deployment profile resolution.
"""

import pytest
from pydantic import ValidationError

from immigration_tracker.core.config import Settings, get_settings
from immigration_tracker.core.exceptions import UnknownProfileError
from immigration_tracker.core.profiles import (
    ConfigurationResolver,
    DatabaseProfileBinding,
    ProfileRegistry,
    StorageEngine,
    build_resolver,
    NO_ACTIVE_PROFILE_REPORT,
)


class TestResolveActiveProfiles:
    """Tests for the profile report string."""

    def test_no_active_profile(self, make_resolver):
        resolver = make_resolver([])
        assert resolver.resolve_active_profiles() == "No active profile set - using default configuration"

    def test_single_profile(self, make_resolver):
        assert make_resolver(["dev"]).resolve_active_profiles() == "Active profiles: dev "

    def test_multiple_profiles_keep_order(self, make_resolver):
        assert make_resolver(["dev", "test"]).resolve_active_profiles() == "Active profiles: dev test "
        assert make_resolver(["test", "dev"]).resolve_active_profiles() == "Active profiles: test dev "

    def test_unregistered_profiles_are_reported(self, make_resolver):
        assert make_resolver(["staging"]).resolve_active_profiles() == "Active profiles: staging "

    def test_duplicates_are_not_removed(self, make_resolver):
        assert make_resolver(["dev", "dev"]).resolve_active_profiles() == "Active profiles: dev dev "

    def test_none_degrades_to_sentinel(self, make_resolver):
        assert make_resolver(None).resolve_active_profiles() == NO_ACTIVE_PROFILE_REPORT

    def test_blank_entries_degrade_to_sentinel(self, make_resolver):
        assert make_resolver(["", "  ", None]).resolve_active_profiles() == NO_ACTIVE_PROFILE_REPORT

    def test_blank_entries_are_skipped(self, make_resolver):
        assert make_resolver(["", "prod"]).resolve_active_profiles() == "Active profiles: prod "


class TestBindings:
    """Tests for profile -> database lookups."""

    def test_default_bindings(self, make_resolver):
        resolver = make_resolver([])
        dev = resolver.binding_for("dev")
        prod = resolver.binding_for("prod")
        test = resolver.binding_for("test")

        assert dev.engine == StorageEngine.sqlite
        assert prod.engine == StorageEngine.postgresql
        assert test.engine == StorageEngine.memory
        assert len({dev, prod, test}) == 3

    def test_descriptions(self, registry):
        assert registry.get("dev").description == "Using SQLite database for development environment"
        assert registry.get("prod").description == "Using PostgreSQL database for production environment"

    def test_unregistered_profile_is_absent(self, make_resolver):
        assert make_resolver([]).binding_for("staging") is None

    def test_lookup_is_stable(self, make_resolver):
        resolver = make_resolver(["dev"])
        assert resolver.binding_for("prod") == resolver.binding_for("prod")
        assert resolver.binding_for("staging") == resolver.binding_for("staging")

    def test_require_binding_raises_for_unknown(self, make_resolver):
        with pytest.raises(UnknownProfileError) as exc:
            make_resolver([]).require_binding("staging")
        assert exc.value.profile == "staging"

    def test_bindings_are_immutable(self, registry):
        with pytest.raises(Exception):
            registry.get("dev").engine = StorageEngine.postgresql


class TestSelectBinding:
    """Tests for picking the binding of the running process."""

    def test_no_profile_uses_default(self, make_resolver):
        assert make_resolver([]).select_binding().profile == "dev"

    def test_no_profile_without_default(self, make_resolver):
        assert make_resolver([], default_profile=None).select_binding() is None

    def test_first_registered_profile_wins(self, make_resolver):
        assert make_resolver(["prod", "dev"]).select_binding().profile == "prod"
        assert make_resolver(["dev", "prod"]).select_binding().profile == "dev"

    def test_unregistered_profiles_are_skipped(self, make_resolver):
        assert make_resolver(["staging", "test"]).select_binding().profile == "test"

    def test_only_unregistered_profiles(self, make_resolver):
        resolver = make_resolver(["staging"])
        assert resolver.select_binding() is None
        with pytest.raises(UnknownProfileError):
            resolver.active_binding()

    def test_describe(self, make_resolver):
        info = make_resolver(["test"]).describe()
        assert info["report"] == "Active profiles: test "
        assert info["active_profiles"] == ["test"]
        assert info["registered_profiles"] == ["dev", "prod", "test"]
        assert info["engine"] == "memory"


class TestProfileRegistry:

    def test_duplicate_registration_rejected(self):
        binding = DatabaseProfileBinding(profile="dev", engine=StorageEngine.sqlite, description="a")
        with pytest.raises(ValueError):
            ProfileRegistry([binding, binding])

    def test_custom_registry(self):
        staging = DatabaseProfileBinding(
            profile="staging", engine=StorageEngine.postgresql, description="Staging PostgreSQL"
        )
        registry = ProfileRegistry([staging])
        assert "staging" in registry
        assert "dev" not in registry
        assert len(registry) == 1

    def test_empty_registry_is_kept(self, settings):
        resolver = build_resolver(settings, ProfileRegistry([]))
        assert resolver.binding_for("dev") is None


class TestSettingsEnvironment:
    """Settings acts as the environment collaborator."""

    def test_comma_separated_profiles(self, settings):
        settings.profiles_active = " dev , ,test"
        assert settings.get_active_profiles() == ["dev", "test"]

    def test_resolver_from_settings(self, settings):
        settings.profiles_active = "prod"
        resolver = build_resolver(settings)
        assert isinstance(resolver, ConfigurationResolver)
        assert resolver.resolve_active_profiles() == "Active profiles: prod "

    def test_reminder_days(self, settings):
        assert settings.get_reminder_days() == [30, 14, 7, 3, 1]


class BrokenEnvironment:
    def get_active_profiles(self):
        raise RuntimeError("environment unavailable")


class TestMalformedEnvironment:
    """The report never fails, whatever the environment hands back."""

    def test_plain_string_is_one_profile(self, make_resolver):
        assert make_resolver("dev").resolve_active_profiles() == "Active profiles: dev "

    def test_plain_string_with_commas(self, make_resolver):
        assert make_resolver("dev, test").active_profiles() == ["dev", "test"]

    def test_empty_string(self, make_resolver):
        assert make_resolver("").resolve_active_profiles() == NO_ACTIVE_PROFILE_REPORT

    def test_not_iterable(self, make_resolver):
        assert make_resolver(42).resolve_active_profiles() == NO_ACTIVE_PROFILE_REPORT

    def test_environment_error_falls_back(self, registry):
        resolver = ConfigurationResolver(BrokenEnvironment(), registry, default_profile="dev")
        assert resolver.resolve_active_profiles() == NO_ACTIVE_PROFILE_REPORT
        assert resolver.select_binding().profile == "dev"

    def test_tuple_of_profiles(self, make_resolver):
        assert make_resolver(("prod",)).resolve_active_profiles() == "Active profiles: prod "


class TestReminderDaysSetting:

    def test_invalid_reminder_days_rejected_on_load(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, reminder_days="30,two weeks")

    def test_negative_reminder_days_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, reminder_days="7,-1")

    def test_blank_items_allowed(self):
        settings = Settings(_env_file=None, reminder_days="14, ,1")
        assert settings.get_reminder_days() == [14, 1]

    def test_invalid_env_fails_at_startup(self, monkeypatch):
        monkeypatch.setenv("REMINDER_DAYS", "30,two weeks")
        get_settings.cache_clear()
        try:
            with pytest.raises(ValidationError):
                get_settings()
        finally:
            get_settings.cache_clear()
