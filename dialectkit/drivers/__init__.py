"""Built-in engine drivers."""

from typing import Callable

from dialectkit.drivers import duckdb, mssql, mysql, oracle, postgres, sqlite
from dialectkit.drivers.base import Driver
from dialectkit.typing import ConnectionFieldPredicate, ConnectionSaveHook

__all__ = ("BUILTIN_DRIVERS", "ConnectionFieldPredicate", "ConnectionSaveHook", "Driver")

BUILTIN_DRIVERS: "dict[str, Callable[[], Driver]]" = {
    sqlite.ENGINE_ID: sqlite.create_driver,
    postgres.ENGINE_ID: postgres.create_driver,
    mysql.ENGINE_ID: mysql.create_driver,
    mssql.ENGINE_ID: mssql.create_driver,
    oracle.ENGINE_ID: oracle.create_driver,
    duckdb.ENGINE_ID: duckdb.create_driver,
}
"""Factory for every built-in driver, keyed by engine id."""
