"""YAML configuration loading and saving.

Configuration lives in .notion-sync/config.yaml relative to the working
directory. A missing file is not an error: defaults are used.
"""

import os
from typing import Any, Dict

import yaml

from .errors import ConfigError
from .models import AppConfig


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        vault_path: "~/Vault"
        default_output_folder: "Notion"
    """

    DEFAULT_CONFIG_DIR = '.notion-sync'
    DEFAULT_CONFIG_FILE = 'config.yaml'
    DEFAULT_CONFIG_PATH = os.path.join(DEFAULT_CONFIG_DIR, DEFAULT_CONFIG_FILE)

    STRING_FIELDS = ('vault_path', 'default_output_folder')

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            AppConfig with defaults for anything not set

        Raises:
            ConfigError: If the file cannot be read or is malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            return AppConfig()
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        if not content.strip():
            return AppConfig()

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return AppConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Config must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def save(cls, config_path: str, config: AppConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            ConfigError: If the file cannot be written
        """
        config_dict = {
            'vault_path': config.vault_path,
            'default_output_folder': config.default_output_folder,
        }

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        try:
            config_dir = os.path.dirname(config_path)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_path}: {e}")

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> AppConfig:
        """Validate field types and build an AppConfig.

        Raises:
            ConfigError: If a field has the wrong type or is empty
        """
        values: Dict[str, str] = {}
        for field_name in cls.STRING_FIELDS:
            if field_name not in config_dict or config_dict[field_name] is None:
                continue
            value = config_dict[field_name]
            if not isinstance(value, str):
                raise ConfigError(
                    f"must be a string, got {type(value).__name__}",
                    field_name
                )
            if not value.strip():
                raise ConfigError("cannot be empty", field_name)
            values[field_name] = value.strip()

        return AppConfig(**values)
