"""
Configuration loading and validation for MySQL Stream Dumper.
"""

import os
import re
from typing import Any

import yaml

from .errors import ConfigurationError
from .models import DumpConfig


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_instance(self, instance_name: str) -> dict[str, Any]:
        """Get the connection settings of a named server instance."""
        settings = (self.config.get('instances') or {}).get(instance_name)
        if not isinstance(settings, dict):
            raise ConfigurationError(f"Instance '{instance_name}' not found in configuration")
        return settings

    def get_dump_options(self) -> dict[str, Any]:
        """Get the raw dump options."""
        return self.config.get('dump', {}) or {}

    def get_dump_config(self) -> DumpConfig:
        """Get validated dump options."""
        return DumpConfig.from_dict(self.get_dump_options())

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {}) or {}
