"""Client configuration loading and validation.

This module handles loading and saving the CLI's connection settings from a
YAML file. Credentials never live in this file; they come from BITBUCKET_*
environment variables (see src.bitbucket_client.auth).
"""

import os
from typing import Any, Dict
import yaml

from .errors import ConfigError, ConfigFilesystemError, ConfigNotFoundError
from .models import ClientConfig


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Config file structure:
        base_url: "https://bitbucket.example.com"
        project_key: "PROJ"
        repo_slug: "repo"
        timeout: 30
        retry_rate_limited: true

    Every field is optional; command-line options override file values.
    """

    DEFAULT_CONFIG_DIR = '.bitbucket-client'
    DEFAULT_CONFIG_FILE = 'config.yaml'
    DEFAULT_CONFIG_PATH = os.path.join(DEFAULT_CONFIG_DIR, DEFAULT_CONFIG_FILE)

    STRING_FIELDS = ('base_url', 'project_key', 'repo_slug')

    @classmethod
    def load(cls, config_path: str) -> ClientConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            ClientConfig object with parsed configuration

        Raises:
            ConfigNotFoundError: If the file does not exist
            ConfigFilesystemError: If the file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigNotFoundError(config_path)
        except PermissionError:
            raise ConfigFilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise ConfigFilesystemError(
                config_path,
                'read',
                str(e)
            )

        if not content.strip():
            return ClientConfig()

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            return ClientConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def load_or_default(cls, config_path: str) -> ClientConfig:
        """Load configuration, treating a missing file as empty configuration."""
        try:
            return cls.load(config_path)
        except ConfigNotFoundError:
            return ClientConfig()

    @classmethod
    def save(cls, config_path: str, config: ClientConfig) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path to the YAML configuration file
            config: ClientConfig object to save

        Raises:
            ConfigFilesystemError: If file cannot be written
        """
        config_dict: Dict[str, Any] = {}
        for name in cls.STRING_FIELDS:
            value = getattr(config, name)
            if value is not None:
                config_dict[name] = value
        config_dict['timeout'] = config.timeout
        config_dict['retry_rate_limited'] = config.retry_rate_limited

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise ConfigFilesystemError(
                    config_path,
                    'create the directory of',
                    str(e)
                )

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise ConfigFilesystemError(
                config_path,
                'write',
                'Permission denied'
            )
        except OSError as e:
            raise ConfigFilesystemError(
                config_path,
                'write',
                str(e)
            )

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> ClientConfig:
        """Parse and validate configuration dictionary.

        Raises:
            ConfigError: If a field has the wrong type
        """
        values: Dict[str, Any] = {}

        for name in cls.STRING_FIELDS:
            value = config_dict.get(name)
            if value is None:
                continue
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(
                    f"Field '{name}' must be a non-empty string",
                    name
                )
            values[name] = value.strip()

        timeout = config_dict.get('timeout')
        if timeout is not None:
            # bool is an int subclass; reject it explicitly
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError(
                    f"Field 'timeout' must be a positive number, got {timeout!r}",
                    'timeout'
                )
            values['timeout'] = timeout

        retry = config_dict.get('retry_rate_limited')
        if retry is not None:
            if not isinstance(retry, bool):
                raise ConfigError(
                    f"Field 'retry_rate_limited' must be a boolean, got {type(retry).__name__}",
                    'retry_rate_limited'
                )
            values['retry_rate_limited'] = retry

        return ClientConfig(**values)
