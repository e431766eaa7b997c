"""MySQL and MariaDB driver."""

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.options import MYSQL_SPLITTER_OPTIONS
from dialectkit.drivers.base import Driver

__all__ = ("DIALECT", "ENGINE_ID", "create_driver")

ENGINE_ID = "mysql"

DIALECT = DialectDescriptor(
    name="mysql",
    identifier_quotes=("`", "`"),
    string_escape_char="\\",
    capabilities=frozenset(Capability) - {Capability.OFFSET_FETCH_RANGE_SYNTAX, Capability.EXPLICIT_DROP_CONSTRAINT},
    drop_column_dependencies=(DependencyKind.FOREIGN_KEYS,),
    fallback_data_type="longtext",
    sqlglot_dialect="mysql",
    drop_index_requires_table=True,
    foreign_key_drop_keyword="FOREIGN KEY",
    primary_key_drop_by_name=False,
    rename_table_template="RENAME TABLE {table} TO {new_qualified}",
)


def create_driver() -> Driver:
    return Driver(
        engine_id=ENGINE_ID,
        title="MySQL",
        dialect=DIALECT,
        splitter_options=MYSQL_SPLITTER_OPTIONS,
        connection_fields=("server", "port", "user", "password", "defaultDatabase", "singleDatabase"),
        connection_tabs=("general", "ssl", "sshTunnel"),
        aliases=("mariadb",),
    )
