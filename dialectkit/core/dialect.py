"""Per-engine dialect descriptors.

A :class:`DialectDescriptor` is plain data: the identifier quoting, string
escaping, capability flags and drop-column dependency order of one engine.
The dumper and the drivers read it; nothing ever mutates it.
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Union

from mypy_extensions import mypyc_attr

__all__ = ("Capability", "DependencyKind", "DialectDescriptor")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class Capability(str, Enum):
    """Named capability flags of a dialect."""

    LIMIT_SELECT = "limit_select"
    RANGE_SELECT = "range_select"
    OFFSET_FETCH_RANGE_SYNTAX = "offset_fetch_range_syntax"
    EXPLICIT_DROP_CONSTRAINT = "explicit_drop_constraint"
    CREATE_COLUMN = "create_column"
    DROP_COLUMN = "drop_column"
    CREATE_INDEX = "create_index"
    DROP_INDEX = "drop_index"
    CREATE_FOREIGN_KEY = "create_foreign_key"
    DROP_FOREIGN_KEY = "drop_foreign_key"
    CREATE_PRIMARY_KEY = "create_primary_key"
    DROP_PRIMARY_KEY = "drop_primary_key"
    RENAME_COLUMN = "rename_column"
    RENAME_TABLE = "rename_table"
    DROP_TABLE = "drop_table"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "Union[Capability, str]") -> "Capability":
        """Resolve a capability from its enum member, value or member name.

        Raises:
            ValueError: When *value* names no capability.
        """
        if isinstance(value, Capability):
            return value
        try:
            return cls(value)
        except ValueError:
            normalized = _CAMEL_BOUNDARY.sub("_", value).upper()
            if normalized in cls.__members__:
                return cls.__members__[normalized]
            raise


class DependencyKind(str, Enum):
    """Kinds of objects that may have to be dropped before a column."""

    INDEXES = "indexes"
    PRIMARY_KEY = "primaryKey"
    FOREIGN_KEYS = "foreignKeys"
    UNIQUES = "uniques"

    def __str__(self) -> str:
        return self.value


@mypyc_attr(allow_interpreted_subclasses=True)
@dataclass(frozen=True)
class DialectDescriptor:
    """Immutable capability and lexical-convention table for one engine."""

    name: str
    """Dialect identifier, e.g. ``sqlite``."""
    identifier_quotes: "tuple[str, str]" = ('"', '"')
    """Opening and closing identifier quote."""
    string_escape_char: str = "'"
    """Character escaping a quote inside a string literal (``'`` doubles it, ``\\`` prefixes it)."""
    capabilities: "frozenset[Capability]" = field(default_factory=frozenset)
    drop_column_dependencies: "tuple[DependencyKind, ...]" = ()
    """Dependent objects to drop before a column, in execution order."""
    fallback_data_type: str = "text"
    sqlglot_dialect: Optional[str] = None
    """Matching sqlglot dialect, used to render non-string literal values."""
    add_column_keyword: str = "ADD"
    drop_index_requires_table: bool = False
    """``DROP INDEX name ON table`` instead of ``DROP INDEX name``."""
    foreign_key_drop_keyword: str = "CONSTRAINT"
    """``ALTER TABLE t DROP <keyword> name`` for foreign keys (MySQL: ``FOREIGN KEY``)."""
    primary_key_drop_by_name: bool = True
    """Primary keys are dropped as named constraints rather than with ``DROP PRIMARY KEY``."""
    rename_column_template: str = "ALTER TABLE {table} RENAME COLUMN {old} TO {new}"
    rename_table_template: str = "ALTER TABLE {table} RENAME TO {new}"

    def __post_init__(self) -> None:
        object.__setattr__(self, "capabilities", frozenset(Capability.parse(c) for c in self.capabilities))
        object.__setattr__(
            self, "drop_column_dependencies", tuple(DependencyKind(d) for d in self.drop_column_dependencies)
        )

    def supports(self, capability: "Union[Capability, str]") -> bool:
        """Return whether the dialect supports *capability*.

        Unknown capability names are reported as unsupported.
        """
        try:
            return Capability.parse(capability) in self.capabilities
        except ValueError:
            return False

    def quote_identifier(self, name: str) -> str:
        """Quote *name* with the dialect's identifier quotes, doubling embedded closers."""
        opening, closing = self.identifier_quotes
        return f"{opening}{name.replace(closing, closing * 2)}{closing}"

    def quote_table(self, name: str, schema: Optional[str] = None) -> str:
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(name)}"
        return self.quote_identifier(name)

    def escape_string_literal(self, value: str) -> str:
        """Escape *value* for use between single quotes."""
        if self.string_escape_char == "'":
            return value.replace("'", "''")
        escape = self.string_escape_char
        return value.replace(escape, escape * 2).replace("'", f"{escape}'")

    def quote_string_literal(self, value: str) -> str:
        return f"'{self.escape_string_literal(value)}'"

    def fallback_type(self) -> str:
        """Type name used when a column definition carries no data type."""
        return self.fallback_data_type

    def with_capabilities(self, **flags: bool) -> "DialectDescriptor":
        """Return a copy with capability flags switched on or off.

        Args:
            **flags: Capability values (``create_foreign_key=True``) mapped to their new state.

        Returns:
            A new descriptor; this one is left untouched.
        """
        capabilities = set(self.capabilities)
        for name, enabled in flags.items():
            capability = Capability.parse(name)
            if enabled:
                capabilities.add(capability)
            else:
                capabilities.discard(capability)
        return replace(self, capabilities=frozenset(capabilities))
