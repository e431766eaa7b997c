import datetime
import enum
import json
from typing import Any

__all__ = ("encode_json",)


def _type_to_string(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def encode_json(data: Any) -> str:
    """Encode *data* as a compact JSON string."""
    return json.dumps(data, default=_type_to_string, separators=(",", ":"))
