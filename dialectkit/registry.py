"""Driver registry keyed by engine id."""

import dataclasses
import logging
from collections.abc import Iterator
from typing import Any, Optional

from sqlglot.dialects.dialect import Dialect

from dialectkit.config import RegistryConfig
from dialectkit.drivers import BUILTIN_DRIVERS, Driver
from dialectkit.exceptions import ImproperConfigurationError, UnknownEngineError
from dialectkit.utils.logging import get_logger, log_with_context

__all__ = ("DriverRegistry",)

logger = get_logger("dialectkit.registry")


class DriverRegistry:
    """Read-only collection of drivers built once from a :class:`RegistryConfig`."""

    __slots__ = ("_config", "_drivers", "_lookup")

    def __init__(self, config: "Optional[RegistryConfig]" = None) -> None:
        self._config = config or RegistryConfig()
        drivers: dict[str, Driver] = {}

        for engine_id in self._config.enabled_engines():
            factory = BUILTIN_DRIVERS.get(engine_id)
            if factory is None:
                self._reject_unknown(engine_id, "is not a built-in engine")
                continue
            drivers[engine_id] = factory()

        for driver in self._config.extra_drivers:
            if driver.engine_id in drivers:
                logger.debug("Host driver replaces built-in engine %s", driver.engine_id)
            drivers[driver.engine_id] = driver

        for engine_id, flags in self._config.capability_overrides.items():
            target = drivers.get(engine_id)
            if target is None:
                self._reject_unknown(engine_id, "has capability overrides but is not enabled")
                continue
            drivers[engine_id] = dataclasses.replace(target, dialect=target.dialect.with_capabilities(**flags))
            logger.debug("Applied capability overrides to %s: %s", engine_id, flags)

        lookup: dict[str, Driver] = {}
        for driver in drivers.values():
            _validate_sqlglot_dialect(driver)
            for name in (driver.engine_id, *driver.aliases):
                existing = lookup.get(name)
                if existing is not None and existing is not driver:
                    msg = f"Engine name {name!r} is claimed by both {existing.engine_id!r} and {driver.engine_id!r}"
                    raise ImproperConfigurationError(msg)
                lookup[name] = driver

        self._drivers = drivers
        self._lookup = lookup
        logger.debug("Driver registry built with engines: %s", ", ".join(drivers))

    def _reject_unknown(self, engine_id: str, reason: str) -> None:
        if self._config.strict:
            msg = f"Engine {engine_id!r} {reason}"
            raise ImproperConfigurationError(msg)
        log_with_context(
            logger, logging.WARNING, "Skipping engine %s: %s", engine_id, reason, engine=engine_id, reason=reason
        )

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def engine_ids(self) -> "tuple[str, ...]":
        return tuple(self._drivers)

    def get(self, engine_id: str) -> "Optional[Driver]":
        """Return the driver for *engine_id* or one of its aliases, or None."""
        return self._lookup.get(engine_id.lower())

    def require(self, engine_id: str) -> Driver:
        """Return the driver for *engine_id*.

        Raises:
            UnknownEngineError: If no driver answers to *engine_id*.
        """
        driver = self.get(engine_id)
        if driver is None:
            raise UnknownEngineError(engine_id, sorted(self._drivers))
        return driver

    def describe(self) -> "list[dict[str, Any]]":
        return [driver.describe() for driver in self._drivers.values()]

    def __contains__(self, engine_id: object) -> bool:
        return isinstance(engine_id, str) and engine_id.lower() in self._lookup

    def __iter__(self) -> "Iterator[Driver]":
        return iter(self._drivers.values())

    def __len__(self) -> int:
        return len(self._drivers)

    def __repr__(self) -> str:
        return f"DriverRegistry(engines={list(self._drivers)!r})"


def _validate_sqlglot_dialect(driver: Driver) -> None:
    name = driver.dialect.sqlglot_dialect
    if name is None:
        return
    try:
        Dialect.get_or_raise(name)
    except ValueError as exc:
        msg = f"Driver {driver.engine_id!r} names unknown sqlglot dialect {name!r}"
        raise ImproperConfigurationError(msg) from exc
