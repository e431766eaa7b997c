"""Dialect-correct DDL rendering for schema-change intents.

Every public method checks the dialect's capability flag first and raises
:class:`~dialectkit.exceptions.UnsupportedOperationError` before producing any
text. Methods return lists of statements without trailing delimiters; a
failing operation never returns a partial list.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional

from mypy_extensions import mypyc_attr
from sqlglot import exp

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.intents import (
    AddColumn,
    ColumnInfo,
    CreateForeignKey,
    CreateIndex,
    CreatePrimaryKey,
    DropColumn,
    DropConstraint,
    DropForeignKey,
    DropIndex,
    DropPrimaryKey,
    DropTable,
    RenameColumn,
    RenameTable,
    SchemaChangeIntent,
    TableRef,
)
from dialectkit.exceptions import (
    DialectKitError,
    InvalidDependencyStateError,
    InvalidIntentError,
    UnsupportedOperationError,
)
from dialectkit.utils.logging import get_logger

__all__ = ("DumpResult", "SqlDumper")

logger = get_logger("dialectkit.core.dumper")


@dataclass(frozen=True)
class DumpResult:
    """Outcome of rendering one intent at the driver boundary."""

    statements: "tuple[str, ...]" = ()
    error: Optional[DialectKitError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def script(self, delimiter: str = ";") -> str:
        return "".join(f"{statement}{delimiter}\n" for statement in self.statements)

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


@mypyc_attr(allow_interpreted_subclasses=True)
class SqlDumper:
    """Render schema-change intents as literal SQL for one dialect."""

    __slots__ = ("_dialect", "_handlers")

    def __init__(self, dialect: DialectDescriptor) -> None:
        self._dialect = dialect
        self._handlers: dict[type, Callable[[Any], list[str]]] = {
            AddColumn: self.add_column,
            DropColumn: self.drop_column,
            CreateIndex: self.create_index,
            DropIndex: self.drop_index,
            CreateForeignKey: self.create_foreign_key,
            DropForeignKey: self.drop_foreign_key,
            CreatePrimaryKey: self.create_primary_key,
            DropPrimaryKey: self.drop_primary_key,
            DropConstraint: self.drop_constraint,
            RenameColumn: self.rename_column,
            RenameTable: self.rename_table,
            DropTable: self.drop_table,
        }

    @property
    def dialect(self) -> DialectDescriptor:
        return self._dialect

    def dump(self, intent: SchemaChangeIntent) -> "list[str]":
        """Render any intent by dispatching on its type."""
        handler = self._handlers.get(type(intent))
        if handler is None:
            msg = f"Unknown schema change intent: {type(intent).__name__}"
            raise InvalidIntentError(msg)
        statements = handler(intent)
        logger.debug("Rendered %d statements for %s on %s", len(statements), intent.operation, self._dialect.name)
        return statements

    def render_script(self, statements: "Iterable[str]", delimiter: str = ";") -> str:
        return "".join(f"{statement}{delimiter}\n" for statement in statements)

    def _require(self, capability: Capability) -> None:
        if not self._dialect.supports(capability):
            logger.debug("Dialect %s does not support %s", self._dialect.name, capability)
            raise UnsupportedOperationError(self._dialect.name, capability.value)

    def _table(self, table: TableRef) -> str:
        return self._dialect.quote_table(table.name, table.schema)

    def _identifier(self, name: str) -> str:
        return self._dialect.quote_identifier(name)

    def _column_list(self, columns: "Sequence[str]", what: str) -> str:
        if not columns:
            msg = f"{what} requires at least one column"
            raise InvalidIntentError(msg)
        return ", ".join(self._identifier(column) for column in columns)

    @staticmethod
    def _required_name(name: Optional[str], what: str) -> str:
        if not name:
            msg = f"{what} requires a name"
            raise InvalidIntentError(msg)
        return name

    def render_literal(self, value: Any) -> str:
        """Render a Python value as a SQL literal for this dialect.

        Strings use the dialect's own escaping; other values are rendered by sqlglot.
        """
        if isinstance(value, str):
            return self._dialect.quote_string_literal(value)
        try:
            literal = exp.convert(value)
        except ValueError as exc:
            msg = f"Cannot render {type(value).__name__} value as a SQL literal"
            raise InvalidIntentError(msg) from exc
        return literal.sql(dialect=self._dialect.sqlglot_dialect)

    def column_definition(self, column: ColumnInfo) -> str:
        parts = [self._identifier(column.name), column.data_type or self._dialect.fallback_type()]
        if column.not_null:
            parts.append("NOT NULL")
        if column.default_expression is not None:
            parts.append(f"DEFAULT {column.default_expression}")
        elif column.default is not None:
            parts.append(f"DEFAULT {self.render_literal(column.default)}")
        return " ".join(parts)

    def add_column(self, intent: AddColumn) -> "list[str]":
        self._require(Capability.CREATE_COLUMN)
        keyword = self._dialect.add_column_keyword
        return [f"ALTER TABLE {self._table(intent.table)} {keyword} {self.column_definition(intent.column)}"]

    def drop_column(self, intent: DropColumn) -> "list[str]":
        """Drop a column after the objects that depend on it.

        Dependent objects are dropped in the order of the dialect's
        ``drop_column_dependencies``; the column drop always comes last.

        Raises:
            UnsupportedOperationError: If the column drop or any dependent drop is unsupported.
            InvalidDependencyStateError: If the dependent objects cannot be determined.
        """
        self._require(Capability.DROP_COLUMN)
        statements = self._dependent_drops(intent)
        statements.append(f"ALTER TABLE {self._table(intent.table)} DROP COLUMN {self._identifier(intent.column)}")
        logger.debug("Rendered %d statements for %s on %s", len(statements), intent.operation, self._dialect.name)
        return statements

    def _dependent_drops(self, intent: DropColumn) -> "list[str]":
        kinds = self._dialect.drop_column_dependencies
        if not kinds:
            return []
        dependencies = intent.dependencies
        if dependencies is None:
            raise InvalidDependencyStateError(str(intent.table), intent.column, "dependent objects are unknown")

        column = intent.column
        table = intent.table
        statements: list[str] = []
        for kind in kinds:
            if kind is DependencyKind.INDEXES:
                for index in dependencies.indexes:
                    if column in index.columns:
                        self._require(Capability.DROP_INDEX)
                        self._check_dependency_name(intent, index.name, "index")
                        statements.extend(self.drop_index(DropIndex(table, index)))
            elif kind is DependencyKind.PRIMARY_KEY:
                primary_key = dependencies.primary_key
                if primary_key is not None and column in primary_key.columns:
                    self._require(Capability.DROP_PRIMARY_KEY)
                    if self._dialect.primary_key_drop_by_name:
                        self._check_dependency_name(intent, primary_key.name, "primary key")
                    statements.extend(self.drop_primary_key(DropPrimaryKey(table, primary_key)))
            elif kind is DependencyKind.FOREIGN_KEYS:
                for foreign_key in dependencies.foreign_keys:
                    if column in foreign_key.columns:
                        self._require(Capability.DROP_FOREIGN_KEY)
                        self._check_dependency_name(intent, foreign_key.name, "foreign key")
                        statements.extend(self.drop_foreign_key(DropForeignKey(table, foreign_key)))
            elif kind is DependencyKind.UNIQUES:
                for unique in dependencies.uniques:
                    if column in unique.columns:
                        self._require(Capability.EXPLICIT_DROP_CONSTRAINT)
                        self._check_dependency_name(intent, unique.name, "unique constraint")
                        statements.extend(self.drop_constraint(DropConstraint(table, unique)))
        return statements

    @staticmethod
    def _check_dependency_name(intent: DropColumn, name: Optional[str], what: str) -> None:
        if not name:
            raise InvalidDependencyStateError(str(intent.table), intent.column, f"dependent {what} has no name")

    def create_index(self, intent: CreateIndex) -> "list[str]":
        self._require(Capability.CREATE_INDEX)
        index = intent.index
        name = self._required_name(index.name, "Index")
        columns = self._column_list(index.columns, "Index")
        unique = "UNIQUE " if index.unique else ""
        return [f"CREATE {unique}INDEX {self._identifier(name)} ON {self._table(intent.table)} ({columns})"]

    def drop_index(self, intent: DropIndex) -> "list[str]":
        self._require(Capability.DROP_INDEX)
        name = self._required_name(intent.index.name, "Index")
        if self._dialect.drop_index_requires_table:
            return [f"DROP INDEX {self._identifier(name)} ON {self._table(intent.table)}"]
        return [f"DROP INDEX {self._dialect.quote_table(name, intent.table.schema)}"]

    def create_foreign_key(self, intent: CreateForeignKey) -> "list[str]":
        self._require(Capability.CREATE_FOREIGN_KEY)
        foreign_key = intent.foreign_key
        if foreign_key.ref_table is None:
            msg = "Foreign key requires a referenced table"
            raise InvalidIntentError(msg)
        constraint = f"CONSTRAINT {self._identifier(foreign_key.name)} " if foreign_key.name else ""
        sql = (
            f"ALTER TABLE {self._table(intent.table)} ADD {constraint}"
            f"FOREIGN KEY ({self._column_list(foreign_key.columns, 'Foreign key')}) "
            f"REFERENCES {self._table(foreign_key.ref_table)} "
            f"({self._column_list(foreign_key.ref_columns, 'Foreign key reference')})"
        )
        if foreign_key.on_delete:
            sql += f" ON DELETE {foreign_key.on_delete}"
        if foreign_key.on_update:
            sql += f" ON UPDATE {foreign_key.on_update}"
        return [sql]

    def drop_foreign_key(self, intent: DropForeignKey) -> "list[str]":
        self._require(Capability.DROP_FOREIGN_KEY)
        name = self._required_name(intent.foreign_key.name, "Foreign key")
        keyword = self._dialect.foreign_key_drop_keyword
        return [f"ALTER TABLE {self._table(intent.table)} DROP {keyword} {self._identifier(name)}"]

    def create_primary_key(self, intent: CreatePrimaryKey) -> "list[str]":
        self._require(Capability.CREATE_PRIMARY_KEY)
        primary_key = intent.primary_key
        constraint = f"CONSTRAINT {self._identifier(primary_key.name)} " if primary_key.name else ""
        columns = self._column_list(primary_key.columns, "Primary key")
        return [f"ALTER TABLE {self._table(intent.table)} ADD {constraint}PRIMARY KEY ({columns})"]

    def drop_primary_key(self, intent: DropPrimaryKey) -> "list[str]":
        self._require(Capability.DROP_PRIMARY_KEY)
        table = self._table(intent.table)
        if not self._dialect.primary_key_drop_by_name:
            return [f"ALTER TABLE {table} DROP PRIMARY KEY"]
        name = self._required_name(intent.primary_key.name, "Primary key")
        return [f"ALTER TABLE {table} DROP CONSTRAINT {self._identifier(name)}"]

    def drop_constraint(self, intent: DropConstraint) -> "list[str]":
        self._require(Capability.EXPLICIT_DROP_CONSTRAINT)
        name = self._required_name(intent.constraint.name, "Constraint")
        return [f"ALTER TABLE {self._table(intent.table)} DROP CONSTRAINT {self._identifier(name)}"]

    def rename_column(self, intent: RenameColumn) -> "list[str]":
        self._require(Capability.RENAME_COLUMN)
        sql = self._dialect.rename_column_template.format(
            table=self._table(intent.table),
            old=self._identifier(intent.column),
            new=self._identifier(intent.new_name),
            column_literal=self._dialect.quote_string_literal(f"{intent.table}.{intent.column}"),
            new_literal=self._dialect.quote_string_literal(intent.new_name),
        )
        return [sql]

    def rename_table(self, intent: RenameTable) -> "list[str]":
        self._require(Capability.RENAME_TABLE)
        sql = self._dialect.rename_table_template.format(
            table=self._table(intent.table),
            new=self._identifier(intent.new_name),
            new_qualified=self._dialect.quote_table(intent.new_name, intent.table.schema),
            table_literal=self._dialect.quote_string_literal(str(intent.table)),
            new_literal=self._dialect.quote_string_literal(intent.new_name),
        )
        return [sql]

    def drop_table(self, intent: DropTable) -> "list[str]":
        self._require(Capability.DROP_TABLE)
        if_exists = "IF EXISTS " if intent.if_exists else ""
        return [f"DROP TABLE {if_exists}{self._table(intent.table)}"]

    def limit_clause(self, limit: int, offset: Optional[int] = None) -> str:
        """Render a row-limiting clause.

        Args:
            limit: Maximum number of rows.
            offset: Rows to skip; requires range select support.

        Returns:
            ``LIMIT``/``OFFSET`` text, or ``OFFSET ... FETCH`` text for dialects using that syntax.
        """
        self._require(Capability.RANGE_SELECT if offset else Capability.LIMIT_SELECT)
        if limit < 0 or (offset is not None and offset < 0):
            msg = "Limit and offset must not be negative"
            raise InvalidIntentError(msg)
        if self._dialect.supports(Capability.OFFSET_FETCH_RANGE_SYNTAX):
            return f"OFFSET {offset or 0} ROWS FETCH NEXT {limit} ROWS ONLY"
        if offset:
            return f"LIMIT {limit} OFFSET {offset}"
        return f"LIMIT {limit}"
