"""
Deployment Profiles - picks the database backend for the running environment.

Profiles:
- dev:  SQLite file database for local development
- prod: PostgreSQL for production deployment
- test: SQLite in-memory database for isolated tests

The registry is built once at startup and never changes afterwards.
The resolver only REPORTS the selection; opening connections is the
job of immigration_tracker.db.database.
"""

import logging
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from immigration_tracker.core.config import Settings, get_settings, split_csv
from immigration_tracker.core.exceptions import UnknownProfileError

logger = logging.getLogger(__name__)

NO_ACTIVE_PROFILE_REPORT = "No active profile set - using default configuration"
ACTIVE_PROFILES_LABEL = "Active profiles: "


class StorageEngine(str, Enum):
    sqlite = "sqlite"
    postgresql = "postgresql"
    memory = "memory"


class DatabaseProfileBinding(BaseModel):
    """Which storage engine a deployment profile runs on."""

    model_config = ConfigDict(frozen=True)

    profile: str
    engine: StorageEngine
    description: str


DEFAULT_BINDINGS = (
    DatabaseProfileBinding(
        profile="dev",
        engine=StorageEngine.sqlite,
        description="Using SQLite database for development environment",
    ),
    DatabaseProfileBinding(
        profile="prod",
        engine=StorageEngine.postgresql,
        description="Using PostgreSQL database for production environment",
    ),
    DatabaseProfileBinding(
        profile="test",
        engine=StorageEngine.memory,
        description="Using SQLite in-memory database for test environment",
    ),
)


class ProfileRegistry:
    """
    Read-only mapping of profile name -> DatabaseProfileBinding.

    Usage:
        registry = ProfileRegistry.default()
        registry.get("dev").engine  # StorageEngine.sqlite
    """

    def __init__(self, bindings: Iterable[DatabaseProfileBinding]):
        table = {}
        for binding in bindings:
            if binding.profile in table:
                raise ValueError(f"Profile '{binding.profile}' registered twice")
            table[binding.profile] = binding
        self._bindings = MappingProxyType(table)

    @classmethod
    def default(cls) -> "ProfileRegistry":
        return cls(DEFAULT_BINDINGS)

    def get(self, profile: str) -> Optional[DatabaseProfileBinding]:
        return self._bindings.get(profile)

    def profiles(self) -> List[str]:
        return list(self._bindings)

    def __contains__(self, profile: object) -> bool:
        return profile in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


class ConfigurationResolver:
    """
    Resolves active deployment profiles against the registry.

    `environment` is anything with a get_active_profiles() method
    (Settings in production, a stub in tests).
    """

    def __init__(self, environment, registry: ProfileRegistry, default_profile: Optional[str] = None):
        self.environment = environment
        self.registry = registry
        self.default_profile = default_profile

    def active_profiles(self) -> List[str]:
        """
        Active profile names; blank or non-string entries are dropped.

        A plain string is read as a comma-separated list. An environment
        that fails to answer counts as having no active profile.
        """
        try:
            profiles = self.environment.get_active_profiles()
        except Exception as e:
            logger.warning("Could not read active profiles: %s", e)
            return []
        if isinstance(profiles, str):
            return split_csv(profiles)
        if profiles is None:
            return []
        try:
            items = list(profiles)
        except TypeError:
            logger.warning("Ignoring malformed active profile list: %r", profiles)
            return []
        return [p for p in items if isinstance(p, str) and p.strip()]

    def resolve_active_profiles(self) -> str:
        """
        Describe the active profiles.

        Returns:
            "No active profile set - using default configuration" when none are
            active, otherwise "Active profiles: " + each name followed by a space.
        """
        profiles = self.active_profiles()
        if not profiles:
            return NO_ACTIVE_PROFILE_REPORT

        report = ACTIVE_PROFILES_LABEL
        for profile in profiles:
            report += profile + " "
        return report

    def binding_for(self, profile: str) -> Optional[DatabaseProfileBinding]:
        """Registered binding for a profile, or None."""
        return self.registry.get(profile)

    def require_binding(self, profile: str) -> DatabaseProfileBinding:
        binding = self.registry.get(profile)
        if binding is None:
            raise UnknownProfileError(profile)
        return binding

    def select_binding(self) -> Optional[DatabaseProfileBinding]:
        """
        Pick the binding for the running process.

        First registered profile in environment order wins. With no
        active profile the default profile's binding is used.
        """
        profiles = self.active_profiles()
        if not profiles:
            if self.default_profile is None:
                return None
            return self.registry.get(self.default_profile)

        for profile in profiles:
            binding = self.registry.get(profile)
            if binding is not None:
                return binding
        return None

    def active_binding(self) -> DatabaseProfileBinding:
        """Like select_binding() but unregistered profiles are an error."""
        binding = self.select_binding()
        if binding is None:
            profiles = self.active_profiles()
            raise UnknownProfileError(profiles[0] if profiles else str(self.default_profile))
        return binding

    def describe(self) -> dict:
        binding = self.select_binding()
        return {
            "report": self.resolve_active_profiles(),
            "active_profiles": self.active_profiles(),
            "registered_profiles": self.registry.profiles(),
            "database": binding.description if binding else None,
            "engine": binding.engine.value if binding else None,
        }


def build_resolver(settings: Settings, registry: Optional[ProfileRegistry] = None) -> ConfigurationResolver:
    return ConfigurationResolver(
        environment=settings,
        registry=registry if registry is not None else ProfileRegistry.default(),
        default_profile=settings.default_profile,
    )


@lru_cache()
def get_resolver() -> ConfigurationResolver:
    """Process-wide resolver, created on first use."""
    return build_resolver(get_settings())
