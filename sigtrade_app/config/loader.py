"""Configuration loader: YAML file values layered over built-in defaults."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from ..risk.models import RiskSettings
from .defaults import DefaultConfig, get_default_config
from .validation import ConfigValidator

CONFIG_FILENAME = "settings.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML settings file, empty when absent."""
        if not self.config_file.exists():
            return {}

        with open(self.config_file) as f:
            try:
                file_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Malformed YAML in {self.config_file}: {e}") from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{self.config_file} must contain a mapping at the top level")
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration.

        Priority order:
        1. Explicit overrides (highest priority)
        2. YAML settings file
        3. Built-in defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge and validate configuration.

        Raises:
            ConfigurationError: If any value fails validation
        """
        config = self.merge_config(overrides)
        errors = ConfigValidator.validate_config(config)
        if errors:
            raise ConfigurationError(
                "Invalid configuration: " + "; ".join(
                    f"{err.field}: {err.message} (got: {err.value})" for err in errors
                ),
                errors=errors
            )
        return config

    def load_risk_settings(self, overrides: Optional[dict[str, Any]] = None) -> RiskSettings:
        """Build a complete, validated RiskSettings replacement."""
        config = self.load_config({"risk": overrides} if overrides else None)
        return RiskSettings.from_dict(config["risk"])

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
