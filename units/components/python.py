# units/components/python.py
# -*- coding: utf-8 -*-
"""
System Python 3 with pip and the headers needed to build extensions.
"""

from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="python",
    metadata={
        "dependencies": ["base_packages"],
        "description": "Python 3, pip and development headers",
    },
)
class PythonUnit(BaseUnit):
    def probe(self) -> UnitState:
        python_settings = self.app_settings.python
        return UnitState(
            installed=self.apt.is_installed(
                python_settings.probe_package, self.app_settings
            ),
            version=self.command_output(["python3", "--version"]),
        )

    def apply(self, action: Action, state: UnitState) -> None:
        python_settings = self.app_settings.python
        self.info("Checking Python3 and pip...", "step")

        if action is Action.UPGRADE:
            self.info("Python3 is already installed, checking for updates...")
            if not self.apt.only_upgrade(
                python_settings.upgrade_packages, self.app_settings
            ):
                self.warn("Failed to update Python3 packages.")
        else:
            self.info("Installing Python3 and pip...", "package")
            if not self.apt.install(
                python_settings.install_packages, self.app_settings
            ):
                self.fail("Failed to install Python3 and pip.")

        # The system interpreter is externally managed; pip stays at the
        # version apt ships.
        self.info("Skipping pip upgrade due to PEP 668")
