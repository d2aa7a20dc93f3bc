#!/usr/bin/env python3
"""
Install or update essential packages and toolchains on Ubuntu.

Runs every provisioning unit in order: base packages, Python, Go,
Node.js/npm/yarn, Docker, and finally a Docker smoke test. Must be run as
root: sudo install-packages
"""

import argparse
import sys
from typing import List, Optional

from common.command_utils import log_step
from common.logging_config import setup_logging
from common.system_utils import is_running_as_root
from settings.config_loader import load_app_settings
from units.orchestrator import ProvisionOrchestrator

SERVICE_NAME = "install_packages"


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments. If None, sys.argv[1:] is used.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Install or update essential packages on Ubuntu"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="YAML file overriding the built-in settings",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Append-only log file (default: /var/log/install_packages.log)",
    )
    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for any fatal failure).
    """
    parsed_args = parse_args(args)
    app_settings = load_app_settings(parsed_args, parsed_args.config)

    logger = setup_logging(
        SERVICE_NAME,
        log_level=app_settings.log_level,
        enable_file=True,
        log_file_path=app_settings.log_file,
        json_format=app_settings.log_json,
    )

    if not is_running_as_root():
        log_step(
            f"{app_settings.symbols['error']} This script must be run as root. Use sudo.",
            "error",
            logger,
            app_settings,
        )
        return 1

    try:
        orchestrator = ProvisionOrchestrator(app_settings, logger=logger)
        return 0 if orchestrator.run() else 1
    except Exception as e:
        logger.exception(f"Error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
