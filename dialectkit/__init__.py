"""dialectkit: per-engine SQL dialect descriptors, statement splitting and DDL rendering."""

from dialectkit import core, drivers, exceptions, typing, utils
from dialectkit.__metadata__ import __version__
from dialectkit.config import RegistryConfig
from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.dumper import DumpResult, SqlDumper
from dialectkit.core.options import SplitterOptions, UsageContext, get_splitter_options
from dialectkit.core.splitter import (
    StatementSplitter,
    StatementToken,
    StreamingSplitter,
    ensure_complete,
    split_full,
    split_sql_script,
)
from dialectkit.drivers import BUILTIN_DRIVERS, Driver
from dialectkit.exceptions import (
    DialectKitError,
    ImproperConfigurationError,
    InvalidDependencyStateError,
    InvalidIntentError,
    MalformedScriptError,
    SplitterClosedError,
    UnknownEngineError,
    UnsupportedOperationError,
)
from dialectkit.registry import DriverRegistry

__all__ = (
    "BUILTIN_DRIVERS",
    "Capability",
    "DependencyKind",
    "DialectDescriptor",
    "DialectKitError",
    "Driver",
    "DriverRegistry",
    "DumpResult",
    "ImproperConfigurationError",
    "InvalidDependencyStateError",
    "InvalidIntentError",
    "MalformedScriptError",
    "RegistryConfig",
    "SplitterClosedError",
    "SplitterOptions",
    "SqlDumper",
    "StatementSplitter",
    "StatementToken",
    "StreamingSplitter",
    "UnknownEngineError",
    "UnsupportedOperationError",
    "UsageContext",
    "__version__",
    "core",
    "drivers",
    "ensure_complete",
    "exceptions",
    "get_splitter_options",
    "split_full",
    "split_sql_script",
    "typing",
    "utils",
)
