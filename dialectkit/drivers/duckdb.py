"""DuckDB driver."""

from typing import Any

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.options import DUCKDB_SPLITTER_OPTIONS
from dialectkit.drivers.base import Driver
from dialectkit.drivers.sqlite import database_file_label
from dialectkit.typing import ConnectionSettings

__all__ = ("DIALECT", "ENGINE_ID", "create_driver")

ENGINE_ID = "duckdb"

DIALECT = DialectDescriptor(
    name="duckdb",
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
    drop_column_dependencies=(DependencyKind.INDEXES,),
    fallback_data_type="varchar",
    sqlglot_dialect="duckdb",
)


def _before_connection_save(connection: ConnectionSettings) -> "dict[str, Any]":
    return {
        **connection,
        "singleDatabase": True,
        "defaultDatabase": database_file_label(connection.get("databaseFile")),
    }


def create_driver() -> Driver:
    return Driver(
        engine_id=ENGINE_ID,
        title="DuckDB",
        dialect=DIALECT,
        splitter_options=DUCKDB_SPLITTER_OPTIONS,
        connection_fields=("databaseFile",),
        is_file_database=True,
        single_database=True,
        connection_save_hook=_before_connection_save,
    )
