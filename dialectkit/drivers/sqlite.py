"""SQLite driver."""

import re
from typing import Any, Optional

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.options import SQLITE_SPLITTER_OPTIONS
from dialectkit.drivers.base import Driver
from dialectkit.typing import ConnectionSettings

__all__ = ("DIALECT", "ENGINE_ID", "create_driver", "database_file_label")

ENGINE_ID = "sqlite"

_LAST_PATH_SEGMENT = re.compile(r"[/\\]([^/\\]+)$")

DIALECT = DialectDescriptor(
    name="sqlite",
    identifier_quotes=("[", "]"),
    string_escape_char="'",
    capabilities=frozenset(
        {
            Capability.LIMIT_SELECT,
            Capability.RANGE_SELECT,
            Capability.EXPLICIT_DROP_CONSTRAINT,
            Capability.CREATE_COLUMN,
            Capability.DROP_COLUMN,
            Capability.CREATE_INDEX,
            Capability.DROP_INDEX,
            Capability.RENAME_COLUMN,
            Capability.RENAME_TABLE,
            Capability.DROP_TABLE,
        }
    ),
    drop_column_dependencies=(DependencyKind.INDEXES, DependencyKind.PRIMARY_KEY),
    fallback_data_type="nvarchar(max)",
    sqlglot_dialect="sqlite",
)


def database_file_label(database_file: Optional[str]) -> Optional[str]:
    """Return the file name part of a database path, or the path itself."""
    if not database_file:
        return database_file
    match = _LAST_PATH_SEGMENT.search(database_file)
    if match:
        return match.group(1)
    return database_file


def _show_connection_field(field_name: str, values: ConnectionSettings) -> bool:
    return field_name == "databaseFile"


def _before_connection_save(connection: ConnectionSettings) -> "dict[str, Any]":
    return {
        **connection,
        "singleDatabase": True,
        "defaultDatabase": database_file_label(connection.get("databaseFile")),
    }


def create_driver() -> Driver:
    return Driver(
        engine_id=ENGINE_ID,
        title="SQLite",
        dialect=DIALECT,
        splitter_options=SQLITE_SPLITTER_OPTIONS,
        connection_fields=("databaseFile",),
        is_file_database=True,
        single_database=True,
        aliases=("sqlite3",),
        connection_field_predicate=_show_connection_field,
        connection_save_hook=_before_connection_save,
    )
