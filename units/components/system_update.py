# units/components/system_update.py
# -*- coding: utf-8 -*-
"""
Refreshes the apt package lists and upgrades every installed package.
"""

from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="system_update",
    metadata={
        "dependencies": [],
        "description": "apt-get update and apt-get upgrade of the whole system",
    },
)
class SystemUpdateUnit(BaseUnit):
    def probe(self) -> UnitState:
        return UnitState(installed=True)

    def decide(self, state: UnitState) -> Action:
        return Action.UPGRADE

    def apply(self, action: Action, state: UnitState) -> None:
        self.info("Updating and upgrading system packages...", "step")
        if not (
            self.apt.update(self.app_settings)
            and self.apt.upgrade(self.app_settings)
        ):
            self.fail("Failed to update/upgrade packages.")
