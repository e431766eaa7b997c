"""PostgreSQL driver."""

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.options import POSTGRES_SPLITTER_OPTIONS
from dialectkit.drivers.base import Driver

__all__ = ("DIALECT", "ENGINE_ID", "create_driver")

ENGINE_ID = "postgres"

DIALECT = DialectDescriptor(
    name="postgres",
    capabilities=frozenset(Capability) - {Capability.OFFSET_FETCH_RANGE_SYNTAX},
    drop_column_dependencies=(DependencyKind.FOREIGN_KEYS,),
    fallback_data_type="text",
    sqlglot_dialect="postgres",
)


def create_driver() -> Driver:
    return Driver(
        engine_id=ENGINE_ID,
        title="PostgreSQL",
        dialect=DIALECT,
        splitter_options=POSTGRES_SPLITTER_OPTIONS,
        connection_fields=("server", "port", "user", "password", "defaultDatabase", "singleDatabase"),
        connection_tabs=("general", "ssl", "sshTunnel"),
        aliases=("postgresql", "pg"),
    )
