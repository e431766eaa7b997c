"""Abstract schema-change intents consumed by the DDL dumper."""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from typing_extensions import TypeAlias

from dialectkit.core.dialect import Capability

__all__ = (
    "AddColumn",
    "ColumnDependencies",
    "ColumnInfo",
    "ConstraintInfo",
    "CreateForeignKey",
    "CreateIndex",
    "CreatePrimaryKey",
    "DropColumn",
    "DropConstraint",
    "DropForeignKey",
    "DropIndex",
    "DropPrimaryKey",
    "DropTable",
    "ForeignKeyInfo",
    "IndexInfo",
    "PrimaryKeyInfo",
    "RenameColumn",
    "RenameTable",
    "SchemaChangeIntent",
    "TableRef",
)


@dataclass(frozen=True)
class TableRef:
    """Table name with optional schema."""

    name: str
    schema: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass(frozen=True)
class ColumnInfo:
    """Column definition used when adding a column."""

    name: str
    data_type: Optional[str] = None
    """Literal type text; the dialect's fallback type is used when missing."""
    not_null: bool = False
    default: Any = None
    """Python default value, rendered as a literal."""
    default_expression: Optional[str] = None
    """Raw SQL default expression, emitted verbatim; wins over ``default``."""


@dataclass(frozen=True)
class IndexInfo:
    name: Optional[str]
    columns: "tuple[str, ...]" = ()
    unique: bool = False


@dataclass(frozen=True)
class PrimaryKeyInfo:
    name: Optional[str]
    columns: "tuple[str, ...]" = ()


@dataclass(frozen=True)
class ForeignKeyInfo:
    name: Optional[str]
    columns: "tuple[str, ...]" = ()
    ref_table: Optional[TableRef] = None
    ref_columns: "tuple[str, ...]" = ()
    on_delete: Optional[str] = None
    on_update: Optional[str] = None


@dataclass(frozen=True)
class ConstraintInfo:
    """Named table constraint of any kind (unique, check, ...)."""

    name: Optional[str]
    columns: "tuple[str, ...]" = ()
    kind: str = "unique"


@dataclass(frozen=True)
class ColumnDependencies:
    """What the host knows about the objects defined on a column's table.

    Objects unrelated to the column may be included; the dumper keeps only
    those that actually reference it.
    """

    indexes: "tuple[IndexInfo, ...]" = ()
    primary_key: Optional[PrimaryKeyInfo] = None
    foreign_keys: "tuple[ForeignKeyInfo, ...]" = ()
    uniques: "tuple[ConstraintInfo, ...]" = ()


@dataclass(frozen=True)
class AddColumn:
    operation: ClassVar[Capability] = Capability.CREATE_COLUMN

    table: TableRef
    column: ColumnInfo


@dataclass(frozen=True)
class DropColumn:
    operation: ClassVar[Capability] = Capability.DROP_COLUMN

    table: TableRef
    column: str
    dependencies: Optional[ColumnDependencies] = None
    """None when the host could not determine the column's dependent objects."""


@dataclass(frozen=True)
class CreateIndex:
    operation: ClassVar[Capability] = Capability.CREATE_INDEX

    table: TableRef
    index: IndexInfo


@dataclass(frozen=True)
class DropIndex:
    operation: ClassVar[Capability] = Capability.DROP_INDEX

    table: TableRef
    index: IndexInfo


@dataclass(frozen=True)
class CreateForeignKey:
    operation: ClassVar[Capability] = Capability.CREATE_FOREIGN_KEY

    table: TableRef
    foreign_key: ForeignKeyInfo


@dataclass(frozen=True)
class DropForeignKey:
    operation: ClassVar[Capability] = Capability.DROP_FOREIGN_KEY

    table: TableRef
    foreign_key: ForeignKeyInfo


@dataclass(frozen=True)
class CreatePrimaryKey:
    operation: ClassVar[Capability] = Capability.CREATE_PRIMARY_KEY

    table: TableRef
    primary_key: PrimaryKeyInfo


@dataclass(frozen=True)
class DropPrimaryKey:
    operation: ClassVar[Capability] = Capability.DROP_PRIMARY_KEY

    table: TableRef
    primary_key: PrimaryKeyInfo


@dataclass(frozen=True)
class DropConstraint:
    operation: ClassVar[Capability] = Capability.EXPLICIT_DROP_CONSTRAINT

    table: TableRef
    constraint: ConstraintInfo


@dataclass(frozen=True)
class RenameColumn:
    operation: ClassVar[Capability] = Capability.RENAME_COLUMN

    table: TableRef
    column: str
    new_name: str


@dataclass(frozen=True)
class RenameTable:
    operation: ClassVar[Capability] = Capability.RENAME_TABLE

    table: TableRef
    new_name: str


@dataclass(frozen=True)
class DropTable:
    operation: ClassVar[Capability] = Capability.DROP_TABLE

    table: TableRef
    if_exists: bool = False


SchemaChangeIntent: TypeAlias = Union[
    AddColumn,
    DropColumn,
    CreateIndex,
    DropIndex,
    CreateForeignKey,
    DropForeignKey,
    CreatePrimaryKey,
    DropPrimaryKey,
    DropConstraint,
    RenameColumn,
    RenameTable,
    DropTable,
]
