"""dialectkit core: dialect descriptors, statement splitting and DDL rendering.

Architecture Overview:
- dialect.py: Capability flags and the immutable DialectDescriptor
- options.py: SplitterOptions records and usage-context resolution
- splitter.py: Resumable statement splitter (full-text and streaming)
- intents.py: Abstract schema-change intents
- dumper.py: Capability-gated DDL rendering
"""

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.core.dumper import DumpResult, SqlDumper
from dialectkit.core.intents import (
    AddColumn,
    ColumnDependencies,
    ColumnInfo,
    ConstraintInfo,
    CreateForeignKey,
    CreateIndex,
    CreatePrimaryKey,
    DropColumn,
    DropConstraint,
    DropForeignKey,
    DropIndex,
    DropPrimaryKey,
    DropTable,
    ForeignKeyInfo,
    IndexInfo,
    PrimaryKeyInfo,
    RenameColumn,
    RenameTable,
    SchemaChangeIntent,
    TableRef,
)
from dialectkit.core.options import (
    DEFAULT_SPLITTER_OPTIONS,
    NO_SPLIT_SPLITTER_OPTIONS,
    SplitterOptions,
    SplitterOptionsResolver,
    UsageContext,
    get_splitter_options,
    make_splitter_options_resolver,
)
from dialectkit.core.splitter import (
    LexicalContext,
    SplitterState,
    StatementSplitter,
    StatementToken,
    StreamingSplitter,
    ensure_complete,
    split_full,
    split_sql_script,
)

__all__ = (
    "DEFAULT_SPLITTER_OPTIONS",
    "NO_SPLIT_SPLITTER_OPTIONS",
    "AddColumn",
    "Capability",
    "ColumnDependencies",
    "ColumnInfo",
    "ConstraintInfo",
    "CreateForeignKey",
    "CreateIndex",
    "CreatePrimaryKey",
    "DependencyKind",
    "DialectDescriptor",
    "DropColumn",
    "DropConstraint",
    "DropForeignKey",
    "DropIndex",
    "DropPrimaryKey",
    "DropTable",
    "DumpResult",
    "ForeignKeyInfo",
    "IndexInfo",
    "LexicalContext",
    "PrimaryKeyInfo",
    "RenameColumn",
    "RenameTable",
    "SchemaChangeIntent",
    "SplitterOptions",
    "SplitterOptionsResolver",
    "SplitterState",
    "SqlDumper",
    "StatementSplitter",
    "StatementToken",
    "StreamingSplitter",
    "TableRef",
    "UsageContext",
    "ensure_complete",
    "get_splitter_options",
    "make_splitter_options_resolver",
    "split_full",
    "split_sql_script",
)
