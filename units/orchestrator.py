"""
Orchestrator for provisioning units.

This module provides the ProvisionOrchestrator class, which resolves the
ordered list of units and runs them one at a time, stopping at the first
fatal failure.
"""

import importlib
import logging
import pkgutil
from typing import Dict, List, Optional

from common.command_utils import log_step
from common.debian.apt_manager import AptManager
from settings.config_models import AppSettings
from settings.environment import HostEnvironment
from units.base_unit import Action, BaseUnit, ProvisioningError
from units.registry import UnitRegistry


def import_unit_modules() -> None:
    """Import every module in ``units.components`` so its unit registers itself."""
    import units.components

    for _, module_name, _ in pkgutil.iter_modules(units.components.__path__):
        importlib.import_module(f"units.components.{module_name}")


class ProvisionOrchestrator:
    """
    Runs provisioning units in dependency order.

    Fatal failures (``ProvisioningError``) are logged at ERROR and end the
    run; no later unit is started.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        host_env: Optional[HostEnvironment] = None,
        logger: Optional[logging.Logger] = None,
        apt_manager: Optional[AptManager] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            app_settings: The application settings.
            host_env: Environment shared by all units. Snapshotted from the
                current process if omitted.
            logger: Optional logger instance. If not provided, a new logger will be created.
            apt_manager: Optional shared apt manager, mainly for tests.
        """
        self.app_settings = app_settings
        self.host_env = host_env or HostEnvironment.from_os()
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.apt_manager = apt_manager
        self.results: Dict[str, Action] = {}

        import_unit_modules()

    def plan(self) -> List[str]:
        """Unit names in the order they will run."""
        return UnitRegistry.resolve_dependencies(self.app_settings.units)

    def create_unit(self, name: str) -> BaseUnit:
        unit_class = UnitRegistry.get_unit(name)
        return unit_class(
            self.app_settings,
            self.host_env,
            apt_manager=self.apt_manager,
            logger=logging.getLogger(f"units.{name}"),
        )

    def run(self) -> bool:
        """
        Run every planned unit.

        Returns:
            True if every unit finished, False if a fatal step failed.
        """
        symbols = self.app_settings.symbols
        if self.apt_manager is None:
            try:
                self.apt_manager = AptManager(
                    logger=self.logger, env=self.host_env.as_env()
                )
            except FileNotFoundError as e:
                log_step(f"{symbols['error']} {e}", "error", self.logger, self.app_settings)
                return False

        for name in self.plan():
            unit = self.create_unit(name)
            self.logger.debug(f"Running unit '{name}': {unit.get_description()}")
            try:
                self.results[name] = unit.run()
            except ProvisioningError as e:
                log_step(
                    f"{symbols['error']} {e}",
                    "error",
                    self.logger,
                    self.app_settings,
                )
                return False

        log_step(
            f"{symbols['success']} Installation and updates completed successfully!",
            "info",
            self.logger,
            self.app_settings,
        )
        return True
