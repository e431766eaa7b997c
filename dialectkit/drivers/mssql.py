"""Microsoft SQL Server driver."""

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.options import MSSQL_SPLITTER_OPTIONS
from dialectkit.drivers.base import Driver

__all__ = ("DIALECT", "ENGINE_ID", "create_driver")

ENGINE_ID = "mssql"

DIALECT = DialectDescriptor(
    name="mssql",
    identifier_quotes=("[", "]"),
    capabilities=frozenset(Capability),
    drop_column_dependencies=(
        DependencyKind.INDEXES,
        DependencyKind.PRIMARY_KEY,
        DependencyKind.FOREIGN_KEYS,
        DependencyKind.UNIQUES,
    ),
    fallback_data_type="nvarchar(max)",
    sqlglot_dialect="tsql",
    drop_index_requires_table=True,
    rename_column_template="EXEC sp_rename {column_literal}, {new_literal}, 'COLUMN'",
    rename_table_template="EXEC sp_rename {table_literal}, {new_literal}",
)


def create_driver() -> Driver:
    return Driver(
        engine_id=ENGINE_ID,
        title="Microsoft SQL Server",
        dialect=DIALECT,
        splitter_options=MSSQL_SPLITTER_OPTIONS,
        connection_fields=("server", "port", "authType", "user", "password", "defaultDatabase", "singleDatabase"),
        connection_tabs=("general", "ssl", "sshTunnel"),
        aliases=("sqlserver", "tsql"),
    )
