from collections.abc import Mapping
from typing import Any, Callable

from typing_extensions import TypeAlias

__all__ = ("ConnectionFieldPredicate", "ConnectionSaveHook", "ConnectionSettings")

ConnectionSettings: TypeAlias = Mapping[str, Any]
"""Connection settings as stored by the host, keyed by field name."""
ConnectionFieldPredicate: TypeAlias = Callable[[str, ConnectionSettings], bool]
"""``(field, current values) -> shown`` for connection form fields."""
ConnectionSaveHook: TypeAlias = Callable[[ConnectionSettings], "dict[str, Any]"]
"""Returns the settings to persist for a connection about to be saved."""
