# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.
"""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional

from settings.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def _symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    if app_settings is not None and getattr(app_settings, "symbols", None):
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def log_step(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a provisioning message at the named level.

    Args:
        message (str): The log message to be recorded.
        level (str): "debug", "info", "success", "warning", "error" or
            "critical". "success" and unknown levels are logged at INFO.
        current_logger (Optional[logging.Logger]): A logger instance to use for logging. If not provided,
            a module-level logger will be used.
        app_settings (Optional[AppSettings]): Optional application settings that can influence logging behavior.
        exc_info (bool): Indicator to include exception details in the log. By default, this is set to False.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def run_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    env: Optional[Dict[str, str]] = None,
    failure_level: str = "error",
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results, including both
    standard output and error, if specified.

    Args:
        command (List[str]): The system command to execute.
        app_settings (Optional[AppSettings]): Settings providing the logging symbols.
        check (bool): Whether to raise a CalledProcessError when a non-zero exit code is returned.
            Defaults to True.
        capture_output (bool): Whether to capture standard output and standard error. Defaults to False.
        text (bool): Indicates if the output streams should be interpreted as text. Defaults to True.
        cmd_input (Optional[str]): Input to be passed to the command's standard input. Defaults to None.
        current_logger (Optional[logging.Logger]): A logger to use for logging details.
        env (Optional[Dict[str, str]]): Full environment for the command. Defaults to the
            inherited environment of the current process.
        failure_level (str): Level for the failed-command lines. Callers that
            treat a failure as non-fatal pass "warning" or "debug".

    Returns:
        subprocess.CompletedProcess: The completed process instance.

    Raises:
        subprocess.CalledProcessError: Raised if the process returns a non-zero exit code and the check
            parameter is set to True.
        FileNotFoundError: Raised if the specified command is not found on the system.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = _symbols(app_settings)
    failure_symbol = symbols.get(failure_level, symbols.get("error", "❌"))

    log_step(
        f"{symbols.get('gear', '⚙️')} Executing: {subprocess.list2cmdline(command)}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            env=env,
        )
        if capture_output and text:
            if result.stdout and result.stdout.strip():
                log_step(
                    f"   stdout: {result.stdout.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
            if (
                result.stderr
                and result.stderr.strip()
                and (not check or result.returncode == 0)
            ):
                log_step(
                    f"   stderr: {result.stderr.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        cmd_executed_str = (
            subprocess.list2cmdline(e.cmd)
            if isinstance(e.cmd, list)
            else str(e.cmd)
        )
        log_step(
            f"{failure_symbol} Command `{cmd_executed_str}` failed (rc {e.returncode}).",
            failure_level,
            effective_logger,
            app_settings,
        )
        for stream_name, stream in (("stdout", e.stdout), ("stderr", e.stderr)):
            if stream and hasattr(stream, "strip") and stream.strip():
                log_step(
                    f"   {stream_name}: {stream.strip()}",
                    failure_level,
                    effective_logger,
                    app_settings,
                )
        raise
    except FileNotFoundError as e:
        log_step(
            f"{failure_symbol} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            failure_level,
            effective_logger,
            app_settings,
        )
        raise


def command_exists(command_name: str, path: Optional[str] = None) -> bool:
    """
    Check if a command exists on ``path`` (the process PATH when omitted).
    """
    return shutil.which(command_name, path=path) is not None


def check_package_installed(
    package_name: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Checks whether a package is installed using `dpkg-query`.

    Args:
        package_name (str): The name of the package to check for installation status.
        app_settings (Optional[AppSettings]): Settings providing the logging symbols.
        current_logger (Optional[logging.Logger]): Logger to use for logging messages.

    Returns:
        bool: True if dpkg reports "install ok installed" for the package, otherwise False.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = _symbols(app_settings)
    try:
        result = run_command(
            ["dpkg-query", "-W", "-f=${Status}", package_name],
            app_settings,
            check=False,
            capture_output=True,
            text=True,
            current_logger=logger_to_use,
        )
        return (
            result.returncode == 0 and "install ok installed" in result.stdout
        )
    except FileNotFoundError:
        log_step(
            f"{symbols.get('error', '❌')} dpkg-query command not found. Cannot check package '{package_name}'.",
            "error",
            logger_to_use,
            app_settings,
        )
        return False
