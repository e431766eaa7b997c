"""Tests for DDL rendering."""

import pytest

from dialectkit.core.dialect import Capability, DialectDescriptor
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
    TableRef,
)
from dialectkit.drivers import mssql, mysql, postgres, sqlite
from dialectkit.exceptions import (
    InvalidDependencyStateError,
    InvalidIntentError,
    UnsupportedOperationError,
)

USERS = TableRef("users")
ORDERS = TableRef("orders")
FK_ORDERS_USER = ForeignKeyInfo(
    "fk_orders_user", ("user_id",), ref_table=USERS, ref_columns=("id",), on_delete="CASCADE"
)


class TestDropColumn:
    """Dependent-object ordering when dropping a column."""

    def test_drops_index_then_primary_key_then_column(self, ansi_dialect: DialectDescriptor) -> None:
        intent = DropColumn(
            USERS,
            "id",
            ColumnDependencies(
                indexes=(IndexInfo("ix_users_id", ("id",)), IndexInfo("ix_users_name", ("name",))),
                primary_key=PrimaryKeyInfo("pk_users", ("id",)),
            ),
        )
        assert SqlDumper(ansi_dialect).drop_column(intent) == [
            'DROP INDEX "ix_users_id"',
            'ALTER TABLE "users" DROP CONSTRAINT "pk_users"',
            'ALTER TABLE "users" DROP COLUMN "id"',
        ]

    def test_declared_order_is_authoritative(self, ansi_dialect: DialectDescriptor) -> None:
        reversed_order = DialectDescriptor(
            name="reversed",
            capabilities=ansi_dialect.capabilities,
            drop_column_dependencies=("primaryKey", "indexes"),  # type: ignore[arg-type]
        )
        intent = DropColumn(
            USERS,
            "id",
            ColumnDependencies(indexes=(IndexInfo("ix_id", ("id",)),), primary_key=PrimaryKeyInfo("pk", ("id",))),
        )
        statements = SqlDumper(reversed_order).drop_column(intent)
        assert statements[0] == 'ALTER TABLE "users" DROP CONSTRAINT "pk"'
        assert statements[1] == 'DROP INDEX "ix_id"'
        assert statements[-1] == 'ALTER TABLE "users" DROP COLUMN "id"'

    def test_unrelated_objects_are_kept(self, ansi_dialect: DialectDescriptor) -> None:
        intent = DropColumn(
            USERS,
            "nickname",
            ColumnDependencies(indexes=(IndexInfo("ix_id", ("id",)),), primary_key=PrimaryKeyInfo("pk", ("id",))),
        )
        assert SqlDumper(ansi_dialect).drop_column(intent) == ['ALTER TABLE "users" DROP COLUMN "nickname"']

    def test_sqlite_drops_index_first(self) -> None:
        intent = DropColumn(USERS, "email", ColumnDependencies(indexes=(IndexInfo("ix_email", ("email",)),)))
        assert SqlDumper(sqlite.DIALECT).drop_column(intent) == [
            "DROP INDEX [ix_email]",
            "ALTER TABLE [users] DROP COLUMN [email]",
        ]

    def test_sqlite_primary_key_column_is_unsupported(self) -> None:
        intent = DropColumn(USERS, "id", ColumnDependencies(primary_key=PrimaryKeyInfo("pk_users", ("id",))))
        with pytest.raises(UnsupportedOperationError) as exc_info:
            SqlDumper(sqlite.DIALECT).drop_column(intent)
        assert exc_info.value.operation == "drop_primary_key"
        assert exc_info.value.dialect == "sqlite"

    def test_sqlite_unnamed_primary_key_column_is_unsupported(self) -> None:
        intent = DropColumn(USERS, "id", ColumnDependencies(primary_key=PrimaryKeyInfo(None, ("id",))))
        with pytest.raises(UnsupportedOperationError) as exc_info:
            SqlDumper(sqlite.DIALECT).drop_column(intent)
        assert exc_info.value.operation == "drop_primary_key"

    def test_unnamed_index_on_dialect_without_index_drop_is_unsupported(self, ansi_dialect: DialectDescriptor) -> None:
        dialect = ansi_dialect.with_capabilities(drop_index=False)
        intent = DropColumn(USERS, "email", ColumnDependencies(indexes=(IndexInfo(None, ("email",)),)))
        with pytest.raises(UnsupportedOperationError) as exc_info:
            SqlDumper(dialect).drop_column(intent)
        assert exc_info.value.operation == "drop_index"

    def test_unknown_dependencies_rejected(self) -> None:
        with pytest.raises(InvalidDependencyStateError, match="dependent objects are unknown"):
            SqlDumper(sqlite.DIALECT).drop_column(DropColumn(USERS, "email"))

    def test_unknown_dependencies_allowed_without_declared_kinds(self) -> None:
        dialect = DialectDescriptor(name="bare", capabilities=frozenset({Capability.DROP_COLUMN}))
        assert SqlDumper(dialect).drop_column(DropColumn(USERS, "email")) == ['ALTER TABLE "users" DROP COLUMN "email"']

    def test_unnamed_dependent_index_rejected(self, ansi_dialect: DialectDescriptor) -> None:
        intent = DropColumn(USERS, "email", ColumnDependencies(indexes=(IndexInfo(None, ("email",)),)))
        with pytest.raises(InvalidDependencyStateError, match="dependent index has no name"):
            SqlDumper(ansi_dialect).drop_column(intent)

    def test_mssql_drops_every_dependent_kind(self) -> None:
        intent = DropColumn(
            TableRef("orders", "dbo"),
            "user_id",
            ColumnDependencies(
                indexes=(IndexInfo("ix_user", ("user_id",)),),
                foreign_keys=(FK_ORDERS_USER,),
                uniques=(ConstraintInfo("uq_user", ("user_id", "sku")),),
            ),
        )
        assert SqlDumper(mssql.DIALECT).drop_column(intent) == [
            "DROP INDEX [ix_user] ON [dbo].[orders]",
            "ALTER TABLE [dbo].[orders] DROP CONSTRAINT [fk_orders_user]",
            "ALTER TABLE [dbo].[orders] DROP CONSTRAINT [uq_user]",
            "ALTER TABLE [dbo].[orders] DROP COLUMN [user_id]",
        ]


class TestCapabilityGate:
    """Unsupported operations fail before any text is produced."""

    def test_create_foreign_key_unsupported_on_sqlite(self) -> None:
        with pytest.raises(UnsupportedOperationError) as exc_info:
            SqlDumper(sqlite.DIALECT).create_foreign_key(CreateForeignKey(ORDERS, FK_ORDERS_USER))
        assert exc_info.value.operation == "create_foreign_key"

    @pytest.mark.parametrize(
        "intent",
        [
            DropForeignKey(ORDERS, FK_ORDERS_USER),
            CreatePrimaryKey(USERS, PrimaryKeyInfo("pk", ("id",))),
            DropPrimaryKey(USERS, PrimaryKeyInfo("pk", ("id",))),
        ],
    )
    def test_sqlite_constraint_operations_unsupported(self, intent: object) -> None:
        with pytest.raises(UnsupportedOperationError):
            SqlDumper(sqlite.DIALECT).dump(intent)  # type: ignore[arg-type]

    def test_empty_dialect_rejects_everything(self) -> None:
        dumper = SqlDumper(DialectDescriptor(name="nothing"))
        with pytest.raises(UnsupportedOperationError):
            dumper.add_column(AddColumn(USERS, ColumnInfo("x")))
        with pytest.raises(UnsupportedOperationError):
            dumper.drop_table(DropTable(USERS))

    def test_mysql_has_no_explicit_drop_constraint(self) -> None:
        with pytest.raises(UnsupportedOperationError):
            SqlDumper(mysql.DIALECT).drop_constraint(DropConstraint(USERS, ConstraintInfo("uq_email", ("email",))))


class TestAddColumn:
    """Column definitions."""

    def test_fallback_type(self) -> None:
        statements = SqlDumper(sqlite.DIALECT).add_column(AddColumn(USERS, ColumnInfo("nick")))
        assert statements == ["ALTER TABLE [users] ADD [nick] nvarchar(max)"]

    def test_not_null_with_string_default(self) -> None:
        column = ColumnInfo("nick", "varchar(20)", not_null=True, default="it's")
        assert SqlDumper(sqlite.DIALECT).add_column(AddColumn(USERS, column)) == [
            "ALTER TABLE [users] ADD [nick] varchar(20) NOT NULL DEFAULT 'it''s'"
        ]

    def test_mysql_escapes_with_backslash(self) -> None:
        column = ColumnInfo("nick", "varchar(20)", default="it's")
        assert SqlDumper(mysql.DIALECT).add_column(AddColumn(USERS, column)) == [
            "ALTER TABLE `users` ADD `nick` varchar(20) DEFAULT 'it\\'s'"
        ]

    def test_numeric_default_rendered_by_sqlglot(self) -> None:
        column = ColumnInfo("score", "integer", default=5)
        assert SqlDumper(postgres.DIALECT).add_column(AddColumn(USERS, column)) == [
            'ALTER TABLE "users" ADD "score" integer DEFAULT 5'
        ]

    def test_unrenderable_default_rejected(self) -> None:
        column = ColumnInfo("payload", "integer", default=object())
        with pytest.raises(InvalidIntentError, match="Cannot render object value"):
            SqlDumper(postgres.DIALECT).add_column(AddColumn(USERS, column))

    def test_default_expression_wins(self) -> None:
        column = ColumnInfo("created", "timestamp", default="ignored", default_expression="CURRENT_TIMESTAMP")
        assert SqlDumper(postgres.DIALECT).add_column(AddColumn(USERS, column)) == [
            'ALTER TABLE "users" ADD "created" timestamp DEFAULT CURRENT_TIMESTAMP'
        ]

    def test_identifier_quotes_are_escaped(self) -> None:
        statements = SqlDumper(sqlite.DIALECT).add_column(AddColumn(USERS, ColumnInfo("we]ird", "int")))
        assert statements == ["ALTER TABLE [users] ADD [we]]ird] int"]


class TestIndexesAndConstraints:
    """Index, key and constraint statements per dialect."""

    def test_create_unique_index(self) -> None:
        intent = CreateIndex(USERS, IndexInfo("ux_email", ("email", "tenant"), unique=True))
        assert SqlDumper(postgres.DIALECT).create_index(intent) == [
            'CREATE UNIQUE INDEX "ux_email" ON "users" ("email", "tenant")'
        ]

    def test_create_index_requires_name_and_columns(self) -> None:
        dumper = SqlDumper(postgres.DIALECT)
        with pytest.raises(InvalidIntentError, match="requires a name"):
            dumper.create_index(CreateIndex(USERS, IndexInfo(None, ("email",))))
        with pytest.raises(InvalidIntentError, match="at least one column"):
            dumper.create_index(CreateIndex(USERS, IndexInfo("ix_empty")))

    @pytest.mark.parametrize(
        ("dialect", "table", "expected"),
        [
            (postgres.DIALECT, TableRef("users", "public"), 'DROP INDEX "public"."ix_email"'),
            (mysql.DIALECT, USERS, "DROP INDEX `ix_email` ON `users`"),
            (mssql.DIALECT, TableRef("users", "dbo"), "DROP INDEX [ix_email] ON [dbo].[users]"),
            (sqlite.DIALECT, USERS, "DROP INDEX [ix_email]"),
        ],
    )
    def test_drop_index(self, dialect: DialectDescriptor, table: TableRef, expected: str) -> None:
        assert SqlDumper(dialect).drop_index(DropIndex(table, IndexInfo("ix_email", ("email",)))) == [expected]

    def test_create_foreign_key(self) -> None:
        assert SqlDumper(postgres.DIALECT).create_foreign_key(CreateForeignKey(ORDERS, FK_ORDERS_USER)) == [
            'ALTER TABLE "orders" ADD CONSTRAINT "fk_orders_user" FOREIGN KEY ("user_id") '
            'REFERENCES "users" ("id") ON DELETE CASCADE'
        ]

    def test_create_foreign_key_requires_reference(self) -> None:
        with pytest.raises(InvalidIntentError, match="referenced table"):
            SqlDumper(postgres.DIALECT).create_foreign_key(
                CreateForeignKey(ORDERS, ForeignKeyInfo("fk", ("user_id",)))
            )

    @pytest.mark.parametrize(
        ("dialect", "expected"),
        [
            (postgres.DIALECT, 'ALTER TABLE "orders" DROP CONSTRAINT "fk_orders_user"'),
            (mysql.DIALECT, "ALTER TABLE `orders` DROP FOREIGN KEY `fk_orders_user`"),
        ],
    )
    def test_drop_foreign_key(self, dialect: DialectDescriptor, expected: str) -> None:
        assert SqlDumper(dialect).drop_foreign_key(DropForeignKey(ORDERS, FK_ORDERS_USER)) == [expected]

    def test_create_primary_key(self) -> None:
        intent = CreatePrimaryKey(USERS, PrimaryKeyInfo("pk_users", ("id",)))
        assert SqlDumper(postgres.DIALECT).create_primary_key(intent) == [
            'ALTER TABLE "users" ADD CONSTRAINT "pk_users" PRIMARY KEY ("id")'
        ]

    @pytest.mark.parametrize(
        ("dialect", "expected"),
        [
            (postgres.DIALECT, 'ALTER TABLE "users" DROP CONSTRAINT "pk_users"'),
            (mysql.DIALECT, "ALTER TABLE `users` DROP PRIMARY KEY"),
        ],
    )
    def test_drop_primary_key(self, dialect: DialectDescriptor, expected: str) -> None:
        assert SqlDumper(dialect).drop_primary_key(DropPrimaryKey(USERS, PrimaryKeyInfo("pk_users", ("id",)))) == [
            expected
        ]

    def test_mysql_drops_unnamed_primary_key(self) -> None:
        assert SqlDumper(mysql.DIALECT).drop_primary_key(DropPrimaryKey(USERS, PrimaryKeyInfo(None, ("id",)))) == [
            "ALTER TABLE `users` DROP PRIMARY KEY"
        ]

    def test_drop_constraint(self) -> None:
        intent = DropConstraint(USERS, ConstraintInfo("uq_email", ("email",)))
        assert SqlDumper(sqlite.DIALECT).drop_constraint(intent) == ["ALTER TABLE [users] DROP CONSTRAINT [uq_email]"]


class TestRenameAndDrop:
    """Table-level statements."""

    def test_rename_column(self) -> None:
        assert SqlDumper(postgres.DIALECT).rename_column(RenameColumn(USERS, "name", "full_name")) == [
            'ALTER TABLE "users" RENAME COLUMN "name" TO "full_name"'
        ]

    def test_mssql_rename_column_uses_sp_rename(self) -> None:
        intent = RenameColumn(TableRef("users", "dbo"), "name", "full_name")
        assert SqlDumper(mssql.DIALECT).rename_column(intent) == [
            "EXEC sp_rename 'dbo.users.name', 'full_name', 'COLUMN'"
        ]

    @pytest.mark.parametrize(
        ("dialect", "expected"),
        [
            (postgres.DIALECT, 'ALTER TABLE "users" RENAME TO "people"'),
            (mysql.DIALECT, "RENAME TABLE `users` TO `people`"),
            (mssql.DIALECT, "EXEC sp_rename 'users', 'people'"),
        ],
    )
    def test_rename_table(self, dialect: DialectDescriptor, expected: str) -> None:
        assert SqlDumper(dialect).rename_table(RenameTable(USERS, "people")) == [expected]

    def test_drop_table(self) -> None:
        dumper = SqlDumper(postgres.DIALECT)
        assert dumper.drop_table(DropTable(USERS)) == ['DROP TABLE "users"']
        assert dumper.drop_table(DropTable(TableRef("users", "app"), if_exists=True)) == [
            'DROP TABLE IF EXISTS "app"."users"'
        ]


class TestDispatchAndHelpers:
    """Generic entry points."""

    def test_dump_dispatches_on_intent_type(self) -> None:
        dumper = SqlDumper(postgres.DIALECT)
        assert dumper.dump(DropTable(USERS)) == dumper.drop_table(DropTable(USERS))

    def test_dump_rejects_unknown_intent(self) -> None:
        with pytest.raises(InvalidIntentError, match="Unknown schema change intent"):
            SqlDumper(postgres.DIALECT).dump(object())  # type: ignore[arg-type]

    def test_render_script(self) -> None:
        dumper = SqlDumper(postgres.DIALECT)
        assert dumper.render_script(["SELECT 1", "SELECT 2"]) == "SELECT 1;\nSELECT 2;\n"
        assert dumper.render_script(["SELECT 1"], delimiter="\nGO") == "SELECT 1\nGO\n"

    @pytest.mark.parametrize(
        ("dialect", "limit", "offset", "expected"),
        [
            (sqlite.DIALECT, 10, None, "LIMIT 10"),
            (sqlite.DIALECT, 10, 20, "LIMIT 10 OFFSET 20"),
            (mssql.DIALECT, 10, 20, "OFFSET 20 ROWS FETCH NEXT 10 ROWS ONLY"),
            (mssql.DIALECT, 5, None, "OFFSET 0 ROWS FETCH NEXT 5 ROWS ONLY"),
        ],
    )
    def test_limit_clause(self, dialect: DialectDescriptor, limit: int, offset: "int | None", expected: str) -> None:
        assert SqlDumper(dialect).limit_clause(limit, offset) == expected

    def test_limit_clause_gated_and_validated(self) -> None:
        with pytest.raises(UnsupportedOperationError):
            SqlDumper(DialectDescriptor(name="nolimit")).limit_clause(10)
        with pytest.raises(InvalidIntentError):
            SqlDumper(sqlite.DIALECT).limit_clause(-1)


class TestDumpResult:
    """Typed result used at the driver boundary."""

    def test_ok_result(self) -> None:
        result = DumpResult(statements=("DROP TABLE a", "DROP TABLE b"))
        assert result.ok
        assert result.script() == "DROP TABLE a;\nDROP TABLE b;\n"
        result.raise_for_error()

    def test_error_result(self) -> None:
        error = UnsupportedOperationError("sqlite", "create_foreign_key")
        result = DumpResult(error=error)
        assert not result.ok
        assert result.statements == ()
        with pytest.raises(UnsupportedOperationError):
            result.raise_for_error()
