# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the provisioner.

This module includes functions for checking privileges and reading the
distribution codename and package architecture used in apt source lines.
"""

import logging
import os
import subprocess
from typing import Dict, Optional

from common.command_utils import _symbols, log_step, run_command
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def is_running_as_root() -> bool:
    """True when the effective UID is 0."""
    return os.geteuid() == 0


def _read_single_value(
    command: list,
    description: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger],
    env: Optional[Dict[str, str]],
) -> Optional[str]:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = _symbols(app_settings)
    try:
        result: subprocess.CompletedProcess = run_command(
            command,
            app_settings,
            capture_output=True,
            check=True,
            current_logger=logger_to_use,
            env=env,
        )
    except FileNotFoundError:
        log_step(
            f"{symbols.get('warning', '!')} {command[0]} command not found. Cannot determine {description}.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None
    except subprocess.CalledProcessError:
        # run_command has already logged the failure.
        return None

    value = (result.stdout or "").strip()
    return value or None


def get_distribution_codename(
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    env: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Get the distribution codename (e.g., 'noble', 'jammy') from ``lsb_release -cs``.
    """
    return _read_single_value(
        ["lsb_release", "-cs"],
        "distribution codename",
        app_settings,
        current_logger,
        env,
    )


def get_dpkg_architecture(
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    env: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Get the dpkg architecture (e.g., 'amd64') from ``dpkg --print-architecture``.
    """
    return _read_single_value(
        ["dpkg", "--print-architecture"],
        "package architecture",
        app_settings,
        current_logger,
        env,
    )
