#!/usr/bin/env python3
"""
Configuration manager for the RNA match pipeline
Handles loading and accessing configuration from various sources.
"""
import os
import copy
import json
import logging
from typing import Dict, Any, Optional, List

import yaml

from rnamatch.exceptions import ConfigurationError
from .schema import ConfigSchema
from .defaults import DEFAULT_CONFIG


class ConfigManager:
    """Configuration manager for the RNA match pipeline"""

    ENV_PREFIX = "RNAMATCH_"

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager

        Args:
            config_path: Path to configuration file (optional)

        Raises:
            ConfigurationError: If the file cannot be read or the result is invalid
        """
        self.logger = logging.getLogger("rnamatch.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        self._load_defaults()

        if config_path:
            if not os.path.exists(config_path):
                raise ConfigurationError(f"Configuration file not found: {config_path}")
            self._load_from_file(config_path)

            local_config_path = self._get_local_config_path(config_path)
            if os.path.exists(local_config_path):
                self._load_from_file(local_config_path)
                self.logger.info(f"Merged local configuration from {local_config_path}")

        self._load_from_env()
        self._coerce_numeric_strings()
        self._validate_config()

    def _get_local_config_path(self, config_path: str) -> str:
        """Get path to local configuration file based on main config path"""
        config_dir = os.path.dirname(config_path)
        name, ext = os.path.splitext(os.path.basename(config_path))

        # Format: <filename>.local.<extension>
        local_path = os.path.join(config_dir, f"{name}.local{ext}")
        self.logger.debug(f"Looking for local config at: {local_path}")
        return local_path

    def _load_defaults(self) -> None:
        """Load default configuration values"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.logger.debug("Loaded default configuration")

    def _load_from_file(self, config_path: str) -> None:
        """Load configuration from YAML or JSON file

        Args:
            config_path: Path to configuration file
        """
        try:
            with open(config_path, 'r') as f:
                if config_path.endswith('.json'):
                    file_config = json.load(f)
                else:  # Assume YAML otherwise
                    file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            error_msg = f"Error loading config file {config_path}: {str(e)}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {config_path} does not contain a mapping")

        self._deep_update(self.config, file_config)
        self.logger.info(f"Loaded configuration from {config_path}")

    def _load_from_env(self) -> None:
        """Override config with environment variables

        Environment variables should be prefixed with RNAMATCH_
        and use double underscore __ for nesting.
        Example: RNAMATCH_MATCH__MAX_GAP for match.max_gap
        """
        for key, value in os.environ.items():
            if key.startswith(self.ENV_PREFIX):
                config_key = key[len(self.ENV_PREFIX):].lower()

                if "__" in config_key:
                    self._set_nested_value(self.config, config_key.split("__"), value)
                else:
                    self.config[config_key] = self._convert_value(value)

        self.logger.debug("Applied environment variable overrides")

    def _set_nested_value(self, config: Dict[str, Any],
                          key_parts: List[str], value: str) -> None:
        """Set a nested value in the configuration dictionary"""
        current = config
        for part in key_parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[key_parts[-1]] = self._convert_value(value)

    def _convert_value(self, value: str) -> Any:
        """Convert string environment variable to appropriate type

        Numbers are tried first so that thresholds like "1" stay numeric.
        """
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass
        if value.lower() in ('true', 'yes'):
            return True
        if value.lower() in ('false', 'no'):
            return False
        return value

    def _coerce_numeric_strings(self) -> None:
        """Convert numeric fields that YAML read as strings, such as ``1e-10``"""
        for section, fields in ConfigSchema.SCHEMA.items():
            section_config = self.config.get(section)
            if not isinstance(section_config, dict):
                continue
            for field, props in fields.items():
                value = section_config.get(field)
                if not isinstance(value, str) or props['type'] is str:
                    continue
                converted = self._convert_value(value.strip())
                if isinstance(converted, (int, float)) and not isinstance(converted, bool):
                    section_config[field] = converted

    def _deep_update(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """Recursively update target dictionary with values from source"""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._deep_update(target[key], value)
            else:
                target[key] = value

    def _validate_config(self) -> None:
        """Validate the configuration against the schema"""
        errors = ConfigSchema.validate(self.config)

        if errors:
            for error in errors:
                self.logger.error(f"Configuration error: {error}")
            raise ConfigurationError("Invalid configuration", {'errors': errors})

        self.logger.debug("Configuration validated successfully")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation

        Args:
            key: Configuration key (can use dot notation for nested values)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self.config
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def get_path(self, path_name: str, default: str = "") -> str:
        """Get a path from configuration"""
        return self.config.get('paths', {}).get(path_name, default)

    def get_tool_path(self, tool_name: str, default: str = "") -> str:
        """Get a tool path from configuration

        Args:
            tool_name: Name of the tool in configuration
            default: Default value if tool path not found

        Returns:
            Tool path string
        """
        return self.config.get('tools', {}).get(f"{tool_name}_path", default or tool_name)
