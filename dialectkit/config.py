"""Explicit registry configuration."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from dialectkit.core.dialect import Capability
from dialectkit.drivers import BUILTIN_DRIVERS, Driver
from dialectkit.exceptions import ImproperConfigurationError

__all__ = ("RegistryConfig",)

_CONFIG_KEYS = frozenset({"engines", "capability_overrides", "extra_drivers", "strict"})


@dataclass(frozen=True)
class RegistryConfig:
    """Everything the driver registry is built from.

    Nothing is read from the environment; hosts construct this value and pass
    it to :class:`~dialectkit.registry.DriverRegistry`.
    """

    engines: "Optional[tuple[str, ...]]" = None
    """Built-in engine ids to enable; ``None`` enables all of them."""
    capability_overrides: "Mapping[str, Mapping[str, bool]]" = field(default_factory=dict)
    """Per engine id, capability flags to force on or off."""
    extra_drivers: "tuple[Driver, ...]" = ()
    """Host-supplied drivers registered next to the built-ins."""
    strict: bool = False
    """Raise on unknown engine ids instead of skipping them."""

    def enabled_engines(self) -> "tuple[str, ...]":
        if self.engines is None:
            return tuple(BUILTIN_DRIVERS)
        return tuple(engine.lower() for engine in self.engines)

    @classmethod
    def from_mapping(cls, data: "Mapping[str, Any]") -> "RegistryConfig":
        """Build a configuration from plain settings data.

        Args:
            data: Mapping with any of the keys ``engines``, ``capability_overrides``,
                ``extra_drivers`` and ``strict``.

        Raises:
            ImproperConfigurationError: On unknown keys, unknown capabilities or wrong value types.
        """
        if not isinstance(data, Mapping):
            msg = f"Registry configuration must be a mapping, got {type(data).__name__}"
            raise ImproperConfigurationError(msg)
        unknown = sorted(set(data) - _CONFIG_KEYS)
        if unknown:
            msg = f"Unknown registry configuration keys: {', '.join(unknown)}"
            raise ImproperConfigurationError(msg)

        return cls(
            engines=_parse_engines(data.get("engines")),
            capability_overrides=_parse_overrides(data.get("capability_overrides", {})),
            extra_drivers=_parse_extra_drivers(data.get("extra_drivers", ())),
            strict=_parse_bool("strict", data.get("strict", False)),
        )


def _parse_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        msg = f"{key!r} must be a boolean, got {type(value).__name__}"
        raise ImproperConfigurationError(msg)
    return value


def _parse_engines(value: Any) -> "Optional[tuple[str, ...]]":
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, Sequence):
        msg = "'engines' must be a list of engine ids"
        raise ImproperConfigurationError(msg)
    for engine in value:
        if not isinstance(engine, str):
            msg = f"Engine ids must be strings, got {engine!r}"
            raise ImproperConfigurationError(msg)
    return tuple(value)


def _parse_overrides(value: Any) -> "dict[str, dict[str, bool]]":
    if not isinstance(value, Mapping):
        msg = "'capability_overrides' must map engine ids to capability flags"
        raise ImproperConfigurationError(msg)
    overrides: dict[str, dict[str, bool]] = {}
    for engine, flags in value.items():
        if not isinstance(flags, Mapping):
            msg = f"Capability overrides for {engine!r} must be a mapping"
            raise ImproperConfigurationError(msg)
        parsed: dict[str, bool] = {}
        for name, enabled in flags.items():
            try:
                capability = Capability.parse(name)
            except ValueError:
                msg = f"Unknown capability {name!r} in overrides for {engine!r}"
                raise ImproperConfigurationError(msg) from None
            parsed[capability.value] = _parse_bool(f"{engine}.{name}", enabled)
        overrides[str(engine).lower()] = parsed
    return overrides


def _parse_extra_drivers(value: Any) -> "tuple[Driver, ...]":
    if isinstance(value, Driver):
        return (value,)
    if not isinstance(value, Sequence):
        msg = "'extra_drivers' must be a list of Driver records"
        raise ImproperConfigurationError(msg)
    for driver in value:
        if not isinstance(driver, Driver):
            msg = f"Extra drivers must be Driver records, got {type(driver).__name__}"
            raise ImproperConfigurationError(msg)
    return tuple(value)
