"""Settings manager for settings.yaml files.

Manages three-scope settings system:
- User global (~/.context-cost/settings.yaml)
- Project (.context-cost/settings.yaml)
- Local (.context-cost/settings.local.yaml)

Cost settings live under the ``cost`` key; later scopes win.
"""

import logging
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import ValidationError

from .config import CostConfig
from .lib.merge_utils import deep_merge

logger = logging.getLogger(__name__)

Scope = Literal["user", "project", "local"]


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, config_dir: Path | None = None, user_settings_file: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            config_dir: Base directory for project/local settings (for testing).
                        If None, uses .context-cost in current directory.
            user_settings_file: User settings file (for testing).
                        If None, uses ~/.context-cost/settings.yaml.
        """
        if config_dir is None:
            config_dir = Path(".context-cost")

        self.user_settings_file = user_settings_file or Path.home() / ".context-cost" / "settings.yaml"
        self.project_settings_file = config_dir / "settings.yaml"
        self.local_settings_file = config_dir / "settings.local.yaml"

    def _scope_file(self, scope: Scope) -> Path:
        return {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }[scope]

    def get_merged_settings(self) -> dict[str, Any]:
        """Merge settings from all scopes, local winning over project over user."""
        merged: dict[str, Any] = {}
        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = deep_merge(merged, settings)
        return merged

    def load_cost_config(self) -> CostConfig:
        """Build the cost configuration from merged settings.

        Invalid settings are logged and replaced by defaults.
        """
        cost_settings = self.get_merged_settings().get("cost") or {}
        try:
            return CostConfig.model_validate(cost_settings)
        except ValidationError as e:
            logger.warning(f"Invalid cost settings, using defaults: {e}")
            return CostConfig()

    def set_value(self, scope: Scope, key: str, value: Any) -> None:
        """Set a single ``cost.<key>`` value in a scope's settings file.

        Args:
            scope: Which settings file to write
            key: Key under ``cost``
            value: Value to store
        """
        path = self._scope_file(scope)
        settings = self._read_settings(path) or {}
        settings = deep_merge(settings, {"cost": {key: value}})
        self._write_settings(path, settings)
        logger.info(f"Set cost.{key} in {scope} settings")

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist or cannot be read
        """
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        """Write settings to YAML file.

        Args:
            path: Path to settings file
            settings: Settings dictionary
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(settings, f, default_flow_style=False, sort_keys=False)
