# units/components/yarn.py
# -*- coding: utf-8 -*-
"""
Yarn from the yarnpkg apt repository. An existing yarn is refreshed through
npm, and a failed refresh is only a warning.
"""

import subprocess

from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="yarn",
    metadata={
        "dependencies": ["npm"],
        "description": "Yarn package manager",
    },
)
class YarnUnit(BaseUnit):
    def probe(self) -> UnitState:
        if self.host_env.which("yarn") is None:
            return UnitState(installed=False)
        return UnitState(installed=True, version=self.command_output(["yarn", "--version"]))

    def apply(self, action: Action, state: UnitState) -> None:
        yarn_settings = self.app_settings.yarn
        self.info("Checking yarn installation...", "step")

        if action is Action.UPGRADE:
            self.info("yarn is already installed, checking for updates...")
            try:
                self.run_command(
                    ["npm", "install", "-g", "yarn"],
                    capture_output=True,
                    failure_level="warning",
                )
            except (subprocess.CalledProcessError, FileNotFoundError):
                self.warn("Failed to update yarn.")
            return

        self.info("Installing yarn...", "package")
        if not self.apt.ensure_keyring_dir(self.app_settings.keyrings_dir, self.app_settings):
            self.fail("Failed to add yarn GPG key.")
        if not self.apt.add_gpg_key_from_url(
            yarn_settings.key_url, yarn_settings.keyring_path, self.app_settings
        ):
            self.fail("Failed to add yarn GPG key.")
        if not self.apt.add_source_list(
            yarn_settings.source_list_path, yarn_settings.source_line
        ):
            self.fail("Failed to add yarn repository.")
        if not self.apt.update(self.app_settings):
            self.warn("Failed to refresh package lists after adding the yarn repository.")
        if not self.apt.install(["yarn"], self.app_settings):
            self.fail("Failed to install yarn.")
