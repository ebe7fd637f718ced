"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files, providing
defaults and validation for the effective generation flags.
"""

import json
import re
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, fields, asdict

from ...logging_config import get_logger
from .naming import FileNaming

logger = get_logger(__name__)

DEFAULT_MODULE_NAME = "myproject"
SUPPORTED_DATABASES = {"postgres", "mysql", "sqlite"}


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Effective flags handed to the generation engine."""

    # Project settings
    module_name: str = DEFAULT_MODULE_NAME
    database: str = "postgres"

    # Entity features
    validation: bool = False
    business_rules: bool = False
    timestamps: bool = False
    soft_delete: bool = False
    transactions: bool = False

    # Output settings
    file_naming: str = FileNaming.LOWERCASE.value  # lowercase, snake, kebab
    template_dir: Optional[str] = None
    materialize_templates: bool = True

    # Custom settings
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = asdict(GeneratorConfig())

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = dict(self._defaults)
        base_config["custom"] = {}

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        if custom_config:
            base_config.update(
                {k: v for k, v in custom_config.items() if v is not None}
            )

        return self._dict_to_config(base_config)

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

        if custom_args:
            existing_custom = dict(config_args.get("custom") or {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}")

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        valid_naming = {n.value for n in FileNaming}
        if config.file_naming not in valid_naming:
            warnings.append(f"Invalid file_naming: {config.file_naming}")

        if config.database not in SUPPORTED_DATABASES:
            warnings.append(f"Unsupported database: {config.database}")

        if not config.module_name or re.search(r"\s", config.module_name):
            warnings.append(f"Invalid Go module name: {config.module_name!r}")

        if config.template_dir and not Path(config.template_dir).is_dir():
            if not config.materialize_templates:
                warnings.append(
                    f"Template directory not found: {config.template_dir} "
                    "(built-in templates are used)"
                )

        return warnings


def detect_module_name(project_root: Union[str, Path] = ".") -> str:
    """
    Read the module path from ``go.mod``.

    Args:
        project_root: Directory expected to contain go.mod

    Returns:
        Module path, or the default name when go.mod is missing or has no
        module directive
    """
    go_mod = Path(project_root) / "go.mod"
    if not go_mod.is_file():
        return DEFAULT_MODULE_NAME

    for line in go_mod.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("module "):
            return line[len("module "):].strip().strip('"')

    return DEFAULT_MODULE_NAME


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file)


EXAMPLE_CONFIG = {
    "module_name": "github.com/acme/shop",
    "validation": True,
    "timestamps": True,
    "soft_delete": False,
    "file_naming": "snake",
    "template_dir": "templates",
}
