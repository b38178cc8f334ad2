"""Settings for the profile calculator.

Settings are read from two YAML scopes and then environment overrides:
- User global (~/.profile-calculator/settings.yaml)
- Project (.profile-calculator/settings.yaml) - overrides user
- PROFILE_CALC_* environment variables - override both

Example settings.yaml::

    catalog:
      url: https://ktane.timwi.de/json/raw
      timeout: 30
    output:
      default_target: calculated.json
    logging:
      level: DEBUG
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .catalog import DEFAULT_CATALOG_URL

logger = logging.getLogger(__name__)

SETTINGS_DIRNAME = ".profile-calculator"
DEFAULT_TARGET = "calculated.json"


@dataclass(frozen=True)
class CalculatorSettings:
    """Resolved settings used by one invocation."""

    catalog_url: str = DEFAULT_CATALOG_URL
    catalog_timeout: float | None = None
    default_target: str = DEFAULT_TARGET
    log_path: Path = Path.home() / SETTINGS_DIRNAME / "calculator.log.jsonl"
    log_level: str = "INFO"


class SettingsManager:
    """Reads and merges settings across user/project scopes."""

    def __init__(self, project_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            project_dir: Directory holding project settings (for testing).
                         If None, uses .profile-calculator in the current directory.
            user_dir: Directory holding user settings (for testing).
                      If None, uses ~/.profile-calculator.
        """
        if project_dir is None:
            project_dir = Path(SETTINGS_DIRNAME)
        if user_dir is None:
            user_dir = Path.home() / SETTINGS_DIRNAME

        self.user_dir = user_dir
        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = project_dir / "settings.yaml"

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}

        user = self._read_settings(self.user_settings_file)
        if user:
            merged = self._deep_merge(merged, user)

        project = self._read_settings(self.project_settings_file)
        if project:
            merged = self._deep_merge(merged, project)

        return merged

    def load(self, environ: dict[str, str] | None = None) -> CalculatorSettings:
        """Resolve settings from YAML scopes and environment overrides.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Frozen settings for this invocation
        """
        env = os.environ if environ is None else environ
        merged = self.get_merged_settings()

        catalog = merged.get("catalog") or {}
        output = merged.get("output") or {}
        logging_config = merged.get("logging") or {}

        catalog_url = env.get("PROFILE_CALC_CATALOG_URL") or catalog.get("url") or DEFAULT_CATALOG_URL
        timeout = env.get("PROFILE_CALC_CATALOG_TIMEOUT") or catalog.get("timeout")
        default_target = env.get("PROFILE_CALC_DEFAULT_TARGET") or output.get("default_target") or DEFAULT_TARGET
        log_path = env.get("PROFILE_CALC_LOG_PATH") or logging_config.get("path") or self.user_dir / "calculator.log.jsonl"
        log_level = env.get("PROFILE_CALC_LOG_LEVEL") or logging_config.get("level") or "INFO"

        return CalculatorSettings(
            catalog_url=str(catalog_url),
            catalog_timeout=self._parse_timeout(timeout),
            default_target=str(default_target),
            log_path=Path(log_path),
            log_level=str(log_level).upper(),
        )

    def _parse_timeout(self, value: Any) -> float | None:
        if value in (None, ""):
            return None
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid catalog timeout: {value!r}")
            return None
        return timeout if timeout > 0 else None

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist or is unreadable
        """
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {path}: top level must be a mapping")
            return None
        return data

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries (overlay takes precedence)."""
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
