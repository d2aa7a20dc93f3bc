# units/components/base_packages.py
# -*- coding: utf-8 -*-
"""
Installs or upgrades the base package list, one package at a time.

Each package is probed right before it is handled, so a package pulled in
as a dependency of an earlier one takes the upgrade branch.
"""

from typing import Dict

from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="base_packages",
    metadata={
        "dependencies": ["system_update"],
        "description": "Build tools, CLI utilities and libraries from the Ubuntu archive",
    },
)
class BasePackagesUnit(BaseUnit):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.package_actions: Dict[str, Action] = {}

    def probe_package(self, package: str) -> UnitState:
        return UnitState(
            installed=self.apt.is_installed(package, self.app_settings),
            target=package,
        )

    def probe(self) -> UnitState:
        """
        Placeholder for the unit as a whole. ``run`` probes each package
        right before handling it and never consults this state.
        """
        return UnitState(installed=True)

    def apply(self, action: Action, state: UnitState) -> None:
        package = state.target
        if package is None:
            raise ValueError("BasePackagesUnit.apply needs a per-package state")

        if action is Action.UPGRADE:
            self.info(f"{package} is already installed, checking for updates...")
            if not self.apt.only_upgrade([package], self.app_settings):
                self.warn(f"Failed to update {package}.")
        else:
            self.info(f"Installing {package}...", "package")
            if not self.apt.install([package], self.app_settings):
                self.fail(f"Failed to install {package}.")

    def run(self) -> Action:
        self.info("Installing or updating main packages...", "step")
        for package in self.app_settings.base_packages:
            state = self.probe_package(package)
            action = self.decide(state)
            self.apply(action, state)
            self.package_actions[package] = action

        if Action.INSTALL in self.package_actions.values():
            return Action.INSTALL
        return Action.UPGRADE
