# units/components/nodejs.py
# -*- coding: utf-8 -*-
"""
Handles the installation of Node.js LTS from the NodeSource repository.
"""

import subprocess

from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="nodejs",
    metadata={
        "dependencies": ["go"],
        "description": "Node.js LTS from NodeSource",
    },
)
class NodejsUnit(BaseUnit):
    def probe(self) -> UnitState:
        if self.host_env.which("node") is None:
            return UnitState(installed=False)
        return UnitState(installed=True, version=self.command_output(["node", "--version"]))

    def apply(self, action: Action, state: UnitState) -> None:
        self.info("Checking Node.js installation...", "step")

        if action is Action.UPGRADE:
            self.info("Node.js is already installed, checking for updates...")
            if not self.apt.update(self.app_settings):
                self.warn("Failed to refresh package lists before updating Node.js.")
            if not self.apt.only_upgrade(["nodejs"], self.app_settings):
                self.warn("Failed to update Node.js.")
        else:
            self.info("Installing latest Node.js...", "package")
            self._remove_leftovers()
            self._setup_repository()
            if not self.apt.update(self.app_settings):
                self.warn("Failed to refresh package lists after adding NodeSource.")
            if not self.apt.install(["nodejs"], self.app_settings):
                self.fail("Failed to install Node.js.")

        node_version = self.command_output(["node", "--version"])
        self.info(f"Node.js version: {node_version or 'N/A'}")

    def _remove_leftovers(self) -> None:
        # Partial installs from other sources; failures here are expected.
        self.apt.remove(["nodejs"], self.app_settings)
        self.apt.remove(["nodejs"], self.app_settings, purge=True)
        self.apt.autoremove(self.app_settings)
        for stale_file in self.app_settings.node.stale_files:
            try:
                stale_file.unlink(missing_ok=True)
            except OSError as e:
                self.logger.debug(f"Could not remove {stale_file}: {e}")

    def _setup_repository(self) -> None:
        node_settings = self.app_settings.node
        if not self.apt.install(self.app_settings.repo_prereq_packages, self.app_settings):
            self.warn("Failed to install repository prerequisites.")
        if not self.apt.ensure_keyring_dir(self.app_settings.keyrings_dir, self.app_settings):
            self.warn(f"Could not create {self.app_settings.keyrings_dir}.")

        try:
            script = self.run_command(
                ["curl", "-fsSL", node_settings.setup_script_url],
                capture_output=True,
                check=True,
            )
            self.run_command(["bash", "-"], cmd_input=script.stdout, check=True)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.fail("Failed to set up Node.js repository.", e)
