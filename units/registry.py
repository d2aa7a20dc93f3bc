"""
Registry for provisioning units.

This module provides a registry for unit classes to register themselves
and a decorator for registering them.
"""

from typing import Any, Dict, List, Optional, Set, Type

from units.base_unit import BaseUnit


class UnitRegistry:
    """
    Registry for provisioning units.

    This class provides a registry for unit classes to register themselves
    and methods for accessing registered units.
    """

    _registry: Dict[str, Type[BaseUnit]] = {}

    @classmethod
    def register(cls, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Decorator for registering unit classes.

        Args:
            name: The name of the unit.
            metadata: Optional metadata for the unit: ``dependencies`` (units
                that must run first) and ``description``.

        Returns:
            A decorator function that registers the unit class.
        """

        def decorator(unit_class: Type[BaseUnit]) -> Type[BaseUnit]:
            if name in cls._registry:
                raise ValueError(f"Unit with name '{name}' already registered")

            unit_class.name = name
            if metadata:
                unit_class.metadata = metadata

            cls._registry[name] = unit_class
            return unit_class

        return decorator

    @classmethod
    def get_unit(cls, name: str) -> Type[BaseUnit]:
        """
        Get a unit class by name.

        Raises:
            KeyError: If no unit with the given name is registered.
        """
        if name not in cls._registry:
            raise KeyError(f"No unit registered with name '{name}'")

        return cls._registry[name]

    @classmethod
    def get_unit_dependencies(cls, name: str) -> Set[str]:
        unit_class = cls.get_unit(name)
        metadata = getattr(unit_class, "metadata", {})
        return set(metadata.get("dependencies", []))

    @classmethod
    def resolve_dependencies(cls, units: List[str]) -> List[str]:
        """
        Resolve dependencies for a list of units.

        Args:
            units: A list of unit names.

        Returns:
            A list of unit names in the order they should run. Every
            dependency comes before the units that need it; otherwise the
            requested order is kept.

        Raises:
            KeyError: If any of the units or their dependencies are not registered.
            ValueError: If there is a circular dependency.
        """
        result: List[str] = []
        visited: Set[str] = set()
        temp_visited: Set[str] = set()

        def visit(unit: str):
            if unit in temp_visited:
                raise ValueError(
                    f"Circular dependency detected involving '{unit}'"
                )

            if unit in visited:
                return

            temp_visited.add(unit)

            for dependency in sorted(cls.get_unit_dependencies(unit)):
                visit(dependency)

            temp_visited.remove(unit)
            visited.add(unit)
            result.append(unit)

        for unit in units:
            if unit not in visited:
                visit(unit)

        return result
