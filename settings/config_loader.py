# settings/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the provisioner.

Handles loading settings from Pydantic model defaults, a YAML file,
environment variables, and command-line arguments, applying a specific
order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (via Pydantic's BaseSettings initialization)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates a dictionary `source` with values from another dictionary
    `overrides`. Nested dictionaries are merged key by key; any other value in
    `overrides` replaces the one in `source`. ``None`` values never overwrite an
    existing key.

    Parameters:
        source: Dict[str, Any]
            The dictionary to be updated. This dictionary gets modified in place.
        overrides: Dict[str, Any]
            The dictionary containing values to update or add to the `source`.

    Returns:
        Dict[str, Any]:
            The updated dictionary after applying all `overrides` to the input `source`.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def _read_yaml_overrides(
    yaml_config_path: Path, logger_to_use: logging.Logger
) -> Dict[str, Any]:
    if not (yaml_config_path.exists() and yaml_config_path.is_file()):
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data and isinstance(yaml_data, dict):
        logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
        return yaml_data
    if yaml_data is not None:
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
    return {}


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[Union[str, Path]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads provisioner settings.

    Pydantic BaseSettings first resolves model defaults and environment
    variables. The YAML file (when given) is merged over that, and finally the
    CLI arguments that map to settings fields.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to an optional YAML configuration file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.
    """
    logger_to_use = current_logger if current_logger else module_logger

    current_values_dict = AppSettings().model_dump(exclude_defaults=False)

    if config_file_path:
        current_values_dict = _deep_update(
            current_values_dict,
            _read_yaml_overrides(Path(config_file_path), logger_to_use),
        )

    if cli_args:
        mapped_cli_values: Dict[str, Any] = {}
        if getattr(cli_args, "verbose", False):
            mapped_cli_values["log_level"] = "DEBUG"
        if getattr(cli_args, "log_file", None):
            mapped_cli_values["log_file"] = cli_args.log_file
        current_values_dict = _deep_update(
            current_values_dict, mapped_cli_values
        )

    return AppSettings(**current_values_dict)
