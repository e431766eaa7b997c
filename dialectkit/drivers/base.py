"""Driver record composing a dialect, its dumper and its splitter options."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from dialectkit.core.dialect import Capability, DialectDescriptor
from dialectkit.core.dumper import DumpResult, SqlDumper
from dialectkit.core.intents import SchemaChangeIntent
from dialectkit.core.options import (
    DEFAULT_SPLITTER_OPTIONS,
    SplitterOptions,
    SplitterOptionsResolver,
    UsageContext,
    make_splitter_options_resolver,
)
from dialectkit.core.splitter import StatementToken, StreamingSplitter, split_full
from dialectkit.exceptions import DialectKitError
from dialectkit.typing import ConnectionFieldPredicate, ConnectionSaveHook, ConnectionSettings
from dialectkit.utils.logging import correlation_scope, get_logger, log_with_context

__all__ = ("Driver",)

logger = get_logger("dialectkit.drivers")


@dataclass(frozen=True)
class Driver:
    """One supported engine as seen by the host.

    The dumper and the splitter-option resolver are derived from ``dialect`` and
    ``splitter_options`` when the record is built, so a copy made with
    :func:`dataclasses.replace` always carries a matching dumper.
    """

    engine_id: str
    title: str
    dialect: DialectDescriptor
    splitter_options: SplitterOptions = DEFAULT_SPLITTER_OPTIONS
    connection_fields: "tuple[str, ...]" = ()
    """Connection form fields relevant for this engine."""
    connection_tabs: "tuple[str, ...]" = ()
    """Connection dialog tabs shown for this engine."""
    is_file_database: bool = False
    single_database: bool = False
    aliases: "tuple[str, ...]" = ()
    connection_field_predicate: Optional[ConnectionFieldPredicate] = field(default=None, compare=False, repr=False)
    connection_save_hook: Optional[ConnectionSaveHook] = field(default=None, compare=False, repr=False)
    dumper: SqlDumper = field(init=False, compare=False, repr=False)
    _resolver: SplitterOptionsResolver = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "engine_id", self.engine_id.lower())
        object.__setattr__(self, "aliases", tuple(alias.lower() for alias in self.aliases))
        object.__setattr__(self, "dumper", SqlDumper(self.dialect))
        object.__setattr__(self, "_resolver", make_splitter_options_resolver(self.splitter_options))

    @property
    def capabilities(self) -> "frozenset[Capability]":
        return self.dialect.capabilities

    def get_splitter_options(self, usage: "Union[UsageContext, str]" = UsageContext.EDIT) -> SplitterOptions:
        """Resolve the splitter options for a usage context.

        Raises:
            ImproperConfigurationError: If *usage* names no known context.
        """
        return self._resolver(usage)

    def split(self, text: str, usage: "Union[UsageContext, str]" = UsageContext.EDIT) -> "list[StatementToken]":
        options = self.get_splitter_options(usage)
        with correlation_scope():
            return split_full(text, options)

    def create_splitter(self, usage: "Union[UsageContext, str]" = UsageContext.EDIT) -> StreamingSplitter:
        return StreamingSplitter(self.get_splitter_options(usage))

    def dump(self, intent: SchemaChangeIntent) -> DumpResult:
        """Render *intent* for this engine.

        Returns:
            A result holding either every statement in execution order, or the
            error explaining why nothing was produced.
        """
        operation = str(getattr(intent, "operation", type(intent).__name__))
        with correlation_scope():
            try:
                statements = self.dumper.dump(intent)
            except DialectKitError as exc:
                log_with_context(
                    logger,
                    logging.DEBUG,
                    "Schema change %s rejected for %s: %s",
                    operation,
                    self.engine_id,
                    exc,
                    engine=self.engine_id,
                    operation=operation,
                    error=type(exc).__name__,
                )
                return DumpResult(error=exc)
        return DumpResult(statements=tuple(statements))

    def show_connection_field(self, field_name: str, values: "Optional[ConnectionSettings]" = None) -> bool:
        if self.connection_field_predicate is not None:
            return self.connection_field_predicate(field_name, values or {})
        return field_name in self.connection_fields

    def show_connection_tab(self, tab: str) -> bool:
        return tab in self.connection_tabs

    def before_connection_save(self, connection: ConnectionSettings) -> "dict[str, Any]":
        """Return the connection settings to persist; the input is not modified."""
        if self.connection_save_hook is not None:
            return self.connection_save_hook(connection)
        return dict(connection)

    def matches(self, engine_id: str) -> bool:
        name = engine_id.lower()
        return name == self.engine_id or name in self.aliases

    def describe(self) -> "dict[str, Any]":
        """Host-facing summary of the driver."""
        return {
            "engine_id": self.engine_id,
            "title": self.title,
            "dialect": self.dialect.name,
            "capabilities": sorted(capability.value for capability in self.capabilities),
            "is_file_database": self.is_file_database,
            "single_database": self.single_database,
            "aliases": list(self.aliases),
        }
