# units/components/npm.py
# -*- coding: utf-8 -*-
from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="npm",
    metadata={
        "dependencies": ["nodejs"],
        "description": "npm package manager",
    },
)
class NpmUnit(BaseUnit):
    def probe(self) -> UnitState:
        if self.host_env.which("npm") is None:
            return UnitState(installed=False)
        return UnitState(installed=True, version=self.command_output(["npm", "--version"]))

    def apply(self, action: Action, state: UnitState) -> None:
        self.info("Checking npm installation...", "step")

        if action is Action.UPGRADE:
            self.info("npm is already installed, checking for updates...")
            if not self.apt.only_upgrade(["npm"], self.app_settings):
                self.warn("Failed to update npm.")
        else:
            self.info("Installing npm...", "package")
            if not self.apt.install(["npm"], self.app_settings):
                self.fail("Failed to install npm.")

        npm_version = self.command_output(["npm", "--version"])
        self.info(f"npm version: {npm_version or 'N/A'}")
