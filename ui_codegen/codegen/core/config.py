"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing per-framework defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Code style settings
    indent_size: int = 2
    add_comments: bool = True
    default_component_name: str = "GeneratedComponent"

    # Styles
    class_prefix: Optional[str] = None
    css_unit: str = "px"

    # Optimizer settings
    eager_threshold: float = 0.8
    dedupe_min_lines: int = 3
    preserve_imports: List[str] = field(default_factory=lambda: ["React"])

    # Custom settings (framework-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported frameworks."""
        self._configs["react"] = {
            "indent_size": 2,
            "preserve_imports": ["React"],
        }
        self._configs["vue"] = {
            "indent_size": 2,
            "preserve_imports": [],
        }
        self._configs["angular"] = {
            "indent_size": 2,
            "preserve_imports": [],
            "custom": {"selector_prefix": "app"},
        }
        self._configs["html"] = {
            "indent_size": 2,
            "preserve_imports": [],
            "custom": {"lang": "en"},
        }

    def get_config(
        self,
        framework: Optional[str] = None,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a framework.

        Args:
            framework: Target framework key
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the framework
        """
        base_config = json.loads(json.dumps(self._configs.get(framework or "", {})))

        if config_file:
            file_config = self._load_config_file(config_file)
            self._merge(base_config, file_config)

        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                base.setdefault("custom", {}).update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration from %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys end up in the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        config_dict = asdict(config)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}")

    def validate_config(self, config: GeneratorConfig, framework: str) -> list[str]:
        """
        Validate configuration for a framework.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.indent_size < 0 or config.indent_size > 8:
            warnings.append(f"Unusual indent_size: {config.indent_size}")

        if not 0.0 <= config.eager_threshold <= 1.0:
            warnings.append(f"eager_threshold must be within [0, 1]: {config.eager_threshold}")

        if config.dedupe_min_lines < 2:
            warnings.append(f"dedupe_min_lines below 2 factors trivial fragments: {config.dedupe_min_lines}")

        if config.class_prefix and not config.class_prefix.replace("-", "").isalnum():
            warnings.append(f"Invalid class_prefix: {config.class_prefix}")

        if framework == "angular":
            prefix = config.custom.get("selector_prefix", "app")
            if not str(prefix).isalpha() or str(prefix).lower() != str(prefix):
                warnings.append(f"Invalid Angular selector prefix: {prefix}")

        return warnings


_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the shared configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    framework: Optional[str] = None,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        framework: Target framework key
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the framework
    """
    manager = get_config_manager()
    return manager.get_config(framework, custom_config, config_file)
