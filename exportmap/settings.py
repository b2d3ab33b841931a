"""Settings management for exportmap.

Scope-aware YAML settings. Resolver options live under the ``resolver`` key:

    resolver:
      default_conditions: [node, import]
      condition_order: declared
      dependency_dir: node_modules
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import ValidationError

from .config import ResolverConfig

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

RESOLVER_KEY = "resolver"
CONDITIONS_ENV = "EXPORTMAP_CONDITIONS"


class SettingsError(Exception):
    """Merged settings do not form a valid resolver configuration."""


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard .exportmap layout."""
        return cls(
            global_settings=Path.home() / ".exportmap" / "settings.yaml",
            project_settings=Path.cwd() / ".exportmap" / "settings.yaml",
            local_settings=Path.cwd() / ".exportmap" / "settings.local.yaml",
        )


class AppSettings:
    """Settings manager with scope-aware merging.

    Scope priority (most specific wins):
    1. local (.exportmap/settings.local.yaml) - machine-specific
    2. project (.exportmap/settings.yaml) - shared with the repository
    3. global (~/.exportmap/settings.yaml) - user defaults

    Usage:
        settings = AppSettings()
        config = settings.get_resolver_config()
        settings.set_resolver_option("condition_order", "priority", scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]:
            if path.exists():
                try:
                    with open(path) as f:
                        content = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    logger.warning(f"Skipping malformed settings file {path}: {e}")
                    continue
                if not isinstance(content, dict):
                    logger.warning(f"Skipping settings file {path}: top level is not a mapping")
                    continue
                result = self._deep_merge(result, content)
        return result

    # ----- Resolver settings -----

    def get_resolver_options(self) -> dict[str, Any]:
        """Merged ``resolver`` options, with environment overrides applied."""
        options = dict(self.get_merged_settings().get(RESOLVER_KEY) or {})
        if env_conditions := os.getenv(CONDITIONS_ENV):
            options["default_conditions"] = [c.strip() for c in env_conditions.split(",") if c.strip()]
        return options

    def get_resolver_config(self) -> ResolverConfig:
        """Build the effective ``ResolverConfig``.

        Raises:
            SettingsError: Unknown option or invalid value
        """
        options = self.get_resolver_options()
        unknown = sorted(set(options) - set(ResolverConfig.model_fields))
        if unknown:
            raise SettingsError(f"Unknown resolver option(s): {', '.join(unknown)}")
        try:
            return ResolverConfig.model_validate(options)
        except ValidationError as e:
            raise SettingsError(f"Invalid resolver settings: {e}") from e

    def set_resolver_option(self, key: str, value: Any, scope: Scope = "global") -> None:
        """Set one resolver option at the specified scope."""
        if key not in ResolverConfig.model_fields:
            raise SettingsError(f"Unknown resolver option: {key}")
        settings = self._read_scope(scope)
        resolver = dict(settings.get(RESOLVER_KEY) or {})
        resolver[key] = value
        try:
            ResolverConfig.model_validate(resolver)
        except ValidationError as e:
            raise SettingsError(f"Invalid value for {key}: {e}") from e
        settings[RESOLVER_KEY] = resolver
        self._write_scope(scope, settings)

    def clear_resolver_option(self, key: str, scope: Scope = "global") -> bool:
        """Remove a resolver option from the specified scope. Returns True if it was set."""
        settings = self._read_scope(scope)
        resolver = settings.get(RESOLVER_KEY) or {}
        if key not in resolver:
            return False
        del resolver[key]
        if resolver:
            settings[RESOLVER_KEY] = resolver
        else:
            settings.pop(RESOLVER_KEY, None)
        self._write_scope(scope, settings)
        return True

    # ----- Internal helpers -----

    def _get_scope_path(self, scope: Scope) -> Path:
        """Get settings file path for scope."""
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope."""
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        """Write settings to a specific scope."""
        path = self._get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
