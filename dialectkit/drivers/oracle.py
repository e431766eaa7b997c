"""Oracle driver."""

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.options import ORACLE_SPLITTER_OPTIONS
from dialectkit.drivers.base import Driver

__all__ = ("DIALECT", "ENGINE_ID", "create_driver")

ENGINE_ID = "oracle"

DIALECT = DialectDescriptor(
    name="oracle",
    capabilities=frozenset(Capability),
    drop_column_dependencies=(DependencyKind.FOREIGN_KEYS,),
    fallback_data_type="varchar2(4000)",
    sqlglot_dialect="oracle",
)


def create_driver() -> Driver:
    return Driver(
        engine_id=ENGINE_ID,
        title="Oracle",
        dialect=DIALECT,
        splitter_options=ORACLE_SPLITTER_OPTIONS,
        connection_fields=("server", "port", "user", "password", "serviceName"),
        connection_tabs=("general", "sshTunnel"),
    )
