# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

from common.command_utils import (
    check_package_installed,
    command_exists,
    run_command,
)
from settings.config_models import AppSettings


class AptManager:
    """
    A centralized manager for Ubuntu apt packages and third-party apt
    sources, driven through the apt-get, dpkg-query, curl and gpg
    command-line tools.

    Every method returns True on success and False on failure, after logging
    the reason. Callers decide whether a failure is fatal.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        env: Optional[Dict[str, str]] = None,
    ):
        """
        Initializes the AptManager.
        Args:
            logger: An optional logging object.
            env: Environment for every command run by this manager.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.env = env
        if not command_exists("apt-get", path=(env or {}).get("PATH")):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    def _apt(
        self,
        args: List[str],
        app_settings: AppSettings,
        failure_level: str = "warning",
    ) -> None:
        # Callers decide whether a failure is fatal.
        run_command(
            ["apt-get"] + args,
            app_settings,
            capture_output=True,
            current_logger=self.logger,
            env=self.env,
            failure_level=failure_level,
        )

    def update(
        self, app_settings: AppSettings, raise_error: bool = False
    ) -> bool:
        """
        Updates the list of available packages using 'apt-get update'.

        Args:
            app_settings: The application settings.
            raise_error: Whether to raise an exception on failure.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.debug("Updating apt package lists via 'apt-get update'...")
        try:
            self._apt(["update"], app_settings)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.warning(f"Failed to update apt cache: {e}")
            if raise_error:
                raise
            return False

    def upgrade(
        self, app_settings: AppSettings, raise_error: bool = False
    ) -> bool:
        """
        Upgrades every installed package using 'apt-get upgrade -y'.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.debug("Upgrading installed packages via 'apt-get upgrade'...")
        try:
            self._apt(["upgrade", "-y"], app_settings)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.warning(f"Failed to upgrade packages: {e}")
            if raise_error:
                raise
            return False

    def is_installed(self, package: str, app_settings: AppSettings) -> bool:
        return check_package_installed(package, app_settings, self.logger)

    def install(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
        update_first: bool = False,
    ) -> bool:
        """
        Installs one or more packages using 'apt-get install -y'.

        Args:
            packages: A single package name or a list of package names.
            app_settings: The application settings.
            update_first: Whether to update the package lists before installing.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            if not self.update(app_settings):
                return False

        self.logger.debug(f"Committing installation for: {', '.join(packages)}")
        try:
            self._apt(["install", "-y"] + packages, app_settings)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.warning(f"Failed to install packages: {e}")
            return False

    def only_upgrade(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
    ) -> bool:
        """
        Upgrades already-installed packages with
        'apt-get install --only-upgrade -y'. Packages that are not installed
        are left alone by apt.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        self.logger.debug(f"Upgrading in place: {', '.join(packages)}")
        try:
            self._apt(["install", "--only-upgrade", "-y"] + packages, app_settings)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.debug(f"Only-upgrade failed for {', '.join(packages)}: {e}")
            return False

    def remove(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
        purge: bool = False,
    ) -> bool:
        """
        Removes (or purges) packages using 'apt-get remove -y'.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        action = "purge" if purge else "remove"
        self.logger.debug(f"Committing {action} for: {', '.join(packages)}")
        try:
            self._apt([action, "-y"] + packages, app_settings, failure_level="debug")
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.debug(f"Failed to {action} {', '.join(packages)}: {e}")
            return False

    def autoremove(self, app_settings: AppSettings) -> bool:
        """
        Removes automatically installed packages that are no longer needed.

        Returns:
            True if successful, False otherwise.
        """
        try:
            self._apt(["autoremove", "-y"], app_settings, failure_level="debug")
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.debug(f"Failed to autoremove packages: {e}")
            return False

    def ensure_keyring_dir(
        self, keyring_dir: Union[str, Path], app_settings: AppSettings
    ) -> bool:
        """Creates the keyring directory with mode 0755."""
        try:
            run_command(
                ["install", "-m", "0755", "-d", str(keyring_dir)],
                app_settings,
                current_logger=self.logger,
                env=self.env,
                failure_level="warning",
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.warning(f"Failed to create keyring directory: {e}")
            return False

    def add_gpg_key_from_url(
        self,
        key_url: str,
        keyring_path: Union[str, Path],
        app_settings: AppSettings,
    ) -> bool:
        """
        Downloads an ASCII-armored GPG key and dearmors it into a keyring file
        readable by apt.

        Args:
            key_url: The URL of the GPG key.
            keyring_path: The path to save the keyring file.
            app_settings: The application settings.

        Returns:
            True if successful, False otherwise.
        """
        keyring_path = str(keyring_path)
        self.logger.debug(f"Adding GPG key from {key_url} to {keyring_path}")

        try:
            key_result = run_command(
                ["curl", "-fsSL", key_url],
                app_settings,
                capture_output=True,
                check=True,
                current_logger=self.logger,
                env=self.env,
                failure_level="warning",
            )
            run_command(
                ["gpg", "--batch", "--yes", "--dearmor", "-o", keyring_path],
                app_settings,
                cmd_input=key_result.stdout,
                check=True,
                current_logger=self.logger,
                env=self.env,
                failure_level="warning",
            )
            os.chmod(keyring_path, 0o644)
            self.logger.debug("GPG key added and permissions set.")
            return True
        except (subprocess.CalledProcessError, OSError) as e:
            self.logger.warning(f"Failed to add GPG key: {e}")
            return False

    def add_source_list(
        self,
        source_list_path: Union[str, Path],
        source_line: str,
    ) -> bool:
        """
        Writes a one-line apt source list file (overwriting any previous one).

        Returns:
            True if successful, False otherwise.
        """
        source_list_path = Path(source_list_path)
        self.logger.debug(f"Writing apt source {source_list_path}: {source_line}")
        try:
            source_list_path.parent.mkdir(parents=True, exist_ok=True)
            source_list_path.write_text(source_line + "\n", encoding="utf-8")
            os.chmod(source_list_path, 0o644)
            return True
        except OSError as e:
            self.logger.warning(
                f"Failed to create source list '{source_list_path}': {e}"
            )
            return False
