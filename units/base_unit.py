"""
Base class for all provisioning units.

A unit is one named piece of software on the host. Each run goes through
three phases: ``probe`` reads the current state, ``decide`` picks an
``Action`` and ``apply`` executes it. Fatal failures raise
``ProvisioningError``; warning-class failures are logged by the unit and the
run continues.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, NoReturn, Optional, Set

from common.command_utils import log_step, run_command
from common.debian.apt_manager import AptManager
from settings.config_models import AppSettings
from settings.environment import HostEnvironment


class Action(str, Enum):
    SKIP = "skip"
    INSTALL = "install"
    UPGRADE = "upgrade"


@dataclass
class UnitState:
    """Result of probing a unit (or a single package of a unit)."""

    installed: bool
    version: Optional[str] = None
    target: Optional[str] = None


class ProvisioningError(Exception):
    """A fatal step failed. The run must stop."""

    def __init__(self, message: str, unit: Optional[str] = None):
        super().__init__(message)
        self.unit = unit


class BaseUnit(ABC):
    """
    Base class for all provisioning units.

    Subclasses implement ``probe`` and ``apply``. The default ``decide`` treats
    the desired version as "latest available": a missing unit is installed and
    a present one is upgraded in place.
    """

    # Overridden by the registry decorator.
    name: str = ""
    metadata: Dict[str, Any] = {
        "dependencies": [],  # Units that must run before this one
        "description": "",
    }

    def __init__(
        self,
        app_settings: AppSettings,
        host_env: HostEnvironment,
        apt_manager: Optional[AptManager] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the unit.

        Args:
            app_settings: The application settings.
            host_env: Environment used for every command and PATH lookup.
            apt_manager: Shared apt manager. Created on demand if omitted.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.host_env = host_env
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._apt_manager = apt_manager

    @property
    def apt(self) -> AptManager:
        if self._apt_manager is None:
            self._apt_manager = AptManager(
                logger=self.logger, env=self.host_env.as_env()
            )
        return self._apt_manager

    @property
    def symbols(self) -> Dict[str, str]:
        return self.app_settings.symbols

    @abstractmethod
    def probe(self) -> UnitState:
        """Detect whether the unit is present and, where relevant, its version."""

    def decide(self, state: UnitState) -> Action:
        return Action.UPGRADE if state.installed else Action.INSTALL

    @abstractmethod
    def apply(self, action: Action, state: UnitState) -> None:
        """
        Execute ``action``.

        Raises:
            ProvisioningError: If a fatal step fails.
        """

    def run(self) -> Action:
        """Probe, decide and apply. Returns the action taken."""
        state = self.probe()
        action = self.decide(state)
        self.logger.debug(
            f"Unit '{self.name}': installed={state.installed} "
            f"version={state.version} -> {action.value}"
        )
        self.apply(action, state)
        return action

    def info(self, message: str, symbol: str = "info") -> None:
        log_step(
            f"{self.symbols.get(symbol, '')} {message}".strip(),
            "info",
            self.logger,
            self.app_settings,
        )

    def warn(self, message: str) -> None:
        log_step(
            f"{self.symbols.get('warning', '!')} {message}",
            "warning",
            self.logger,
            self.app_settings,
        )

    def fail(self, message: str, cause: Optional[BaseException] = None) -> NoReturn:
        raise ProvisioningError(message, unit=self.name) from cause

    def run_command(
        self, command: List[str], **kwargs: Any
    ) -> subprocess.CompletedProcess:
        """Run ``command`` with this unit's logger and host environment."""
        kwargs.setdefault("current_logger", self.logger)
        kwargs.setdefault("env", self.host_env.as_env())
        return run_command(command, self.app_settings, **kwargs)

    def command_output(self, command: List[str]) -> Optional[str]:
        """Stripped stdout of ``command``, or None if it fails or is missing."""
        try:
            result = self.run_command(
                command, capture_output=True, check=False, failure_level="debug"
            )
        except FileNotFoundError:
            return None
        if result.returncode != 0:
            return None
        return (result.stdout or "").strip() or None

    def get_dependencies(self) -> Set[str]:
        return set(self.metadata.get("dependencies", []))

    def get_description(self) -> str:
        return str(self.metadata.get("description", ""))
