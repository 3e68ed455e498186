"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict

import yaml

DEFAULT_SCOPES = [
    'https://www.googleapis.com/auth/documents.readonly',
    'https://www.googleapis.com/auth/drive.readonly',
    'https://www.googleapis.com/auth/drive.metadata.readonly',
]

DEFAULT_CONFIG: Dict[str, Any] = {
    'google': {
        'client_id': '${GOOGLE_CLIENT_ID}',
        'client_secret': '${GOOGLE_CLIENT_SECRET}',
        'redirect_uri': '${GOOGLE_REDIRECT_URI}',
        'redirect_port': 8080,
        'token_file': '~/.credentials/token.json',
        'scopes': DEFAULT_SCOPES,
    },
    'export': {
        'output_directory': '.',
        'document_filename': 'document.md',
        'include_comments': True,
        'include_revisions': True,
        'download_images': True,
        'continue_on_error': False,
    },
    'advanced': {
        'request_timeout': 30,
        'max_retries': 3,
        'retry_backoff_factor': 2.0,
        'rate_limit': 0.0,
    },
    'logging': {},
}


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Values missing from the file are filled from the built-in defaults.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        merged = _deep_merge(DEFAULT_CONFIG, config_data)
        return cls._substitute_env_vars_recursive(merged)

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        """Built-in configuration with credentials taken from GOOGLE_* environment variables."""
        return cls._substitute_env_vars_recursive(copy.deepcopy(DEFAULT_CONFIG))

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        cls._validate_required_field(config, 'google.client_id')
        cls._validate_required_field(config, 'google.client_secret')

        redirect_port = get_nested(config, 'google.redirect_port', 8080)
        if not isinstance(redirect_port, int) or not 0 < redirect_port < 65536:
            raise ValueError("google.redirect_port must be an integer between 1 and 65535")

        scopes = get_nested(config, 'google.scopes', DEFAULT_SCOPES)
        if not isinstance(scopes, list) or not scopes:
            raise ValueError("google.scopes must be a non-empty list")

        cls._validate_required_field(config, 'export.output_directory')
        output_dir = get_nested(config, 'export.output_directory')
        if os.path.exists(output_dir) and not os.path.isdir(output_dir):
            raise ValueError(f"export.output_directory '{output_dir}' is not a directory")

        for flag in ('include_comments', 'include_revisions', 'download_images', 'continue_on_error'):
            value = get_nested(config, f'export.{flag}', True)
            if not isinstance(value, bool):
                raise ValueError(f"export.{flag} must be a boolean")

        document_filename = get_nested(config, 'export.document_filename', 'document.md')
        if not document_filename or os.sep in document_filename or '/' in document_filename:
            raise ValueError("export.document_filename must be a plain file name")

        timeout = get_nested(config, 'advanced.request_timeout', 30)
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("advanced.request_timeout must be a positive number")

        max_retries = get_nested(config, 'advanced.max_retries', 3)
        if not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError("advanced.max_retries must be a non-negative integer")

        rate_limit = get_nested(config, 'advanced.rate_limit', 0.0)
        if not isinstance(rate_limit, (int, float)) or rate_limit < 0:
            raise ValueError("advanced.rate_limit must be a non-negative number")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('google', 'export', 'logging'):
            if section not in merged:
                merged[section] = {}

        if getattr(args, 'output_dir', None):
            merged['export']['output_directory'] = args.output_dir

        # BooleanOptionalAction flags default to None when not given
        if getattr(args, 'comments', None) is not None:
            merged['export']['include_comments'] = args.comments

        if getattr(args, 'revisions', None) is not None:
            merged['export']['include_revisions'] = args.revisions

        if getattr(args, 'images', None) is not None:
            merged['export']['download_images'] = args.images

        if getattr(args, 'continue_on_error', None) is not None:
            merged['export']['continue_on_error'] = args.continue_on_error

        if getattr(args, 'token_file', None):
            merged['google']['token_file'] = args.token_file

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        verbose = getattr(args, 'verbose', 0)
        if verbose:
            merged['logging']['level'] = 'DEBUG' if verbose >= 2 else 'INFO'

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config_section: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config_section, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        # Unsubstituted ${VAR} means the environment variable is not set
        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "export.output_directory")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config

    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


__all__ = ['ConfigLoader', 'get_nested', 'DEFAULT_CONFIG', 'DEFAULT_SCOPES']
