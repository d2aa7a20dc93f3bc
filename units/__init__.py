"""
Provisioning unit framework.

This package provides the base class, registry and orchestrator used to
bring an Ubuntu host to a known set of packages and toolchains.
"""

from units.base_unit import Action, BaseUnit, ProvisioningError, UnitState
from units.orchestrator import ProvisionOrchestrator
from units.registry import UnitRegistry

__all__ = [
    "Action",
    "BaseUnit",
    "ProvisioningError",
    "ProvisionOrchestrator",
    "UnitRegistry",
    "UnitState",
]
