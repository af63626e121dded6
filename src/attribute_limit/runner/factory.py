# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Filter factory for creating filter instances from configuration.

Uses the Registry pattern to map type strings to filter classes,
allowing extensibility without modifying factory code.
"""

from __future__ import annotations

from typing import ClassVar

from attribute_limit.exceptions import ConfigError
from attribute_limit.filters import AttributeLimit, ProcessingFilter

from .schema import FilterConfigSchema


class FilterFactoryError(Exception):
    """Raised when filter creation fails."""

    pass


class FilterFactory:
    """Creates filter instances from configuration.

    Filter types are registered at class level and can be extended via the
    `register` class method.  Every registered class is built as
    ``cls(options, name=...)``.

    Example:
        factory = FilterFactory()
        configs = [
            FilterConfigSchema(name="limit", attributes=["mail", "cn"]),
        ]
        filters = factory.create_all(configs)
    """

    # Class-level registry mapping type strings to filter classes
    _registry: ClassVar[dict[str, type[ProcessingFilter]]] = {
        "attribute_limit": AttributeLimit,
    }

    @classmethod
    def register(cls, type_name: str, filter_class: type[ProcessingFilter]) -> None:
        """Register a custom filter type.

        Args:
            type_name: Type string to use in configuration
            filter_class: Filter class to instantiate

        Raises:
            ValueError: If filter_class._filter_type doesn't match type_name
        """
        declared_type = getattr(filter_class, "_filter_type", "base")
        if declared_type not in ("base", type_name):
            raise ValueError(
                f"Filter {filter_class.__name__} has _filter_type='{declared_type}' "
                f"but is being registered as '{type_name}'"
            )
        cls._registry[type_name] = filter_class

    @classmethod
    def registered_types(cls) -> list[str]:
        """Return list of registered filter type names."""
        return list(cls._registry.keys())

    def create_all(self, configs: list[FilterConfigSchema]) -> list[ProcessingFilter]:
        """Create all filters from configuration list, in order.

        Raises:
            ConfigError: If a filter rejects its options
            FilterFactoryError: If the type is unknown or creation fails otherwise
        """
        filters: list[ProcessingFilter] = []

        for config in configs:
            try:
                filters.append(self._create_one(config))
            except (ConfigError, FilterFactoryError):
                raise
            except Exception as e:
                raise FilterFactoryError(
                    f"Failed to create filter '{config.name}' of type '{config.type}': {e}"
                ) from e

        return filters

    def _create_one(self, config: FilterConfigSchema) -> ProcessingFilter:
        filter_class = self._registry.get(config.type)
        if not filter_class:
            available = ", ".join(sorted(self.registered_types()))
            raise FilterFactoryError(
                f"Unknown filter type: '{config.type}'. Available types: {available}"
            )

        # Concrete filters take the option mapping, base ProcessingFilter declares no __init__
        return filter_class(config.to_options(), name=config.name)  # type: ignore[call-arg]
