import pytest

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


def test_exception_hierarchy() -> None:
    """All package exceptions share the base class."""
    for exc_type in (
        ImproperConfigurationError,
        InvalidDependencyStateError,
        InvalidIntentError,
        MalformedScriptError,
        SplitterClosedError,
        UnknownEngineError,
        UnsupportedOperationError,
    ):
        assert issubclass(exc_type, DialectKitError)
    assert issubclass(UnknownEngineError, KeyError)


def test_base_exception_detail() -> None:
    exc = DialectKitError("Something failed")
    assert exc.detail == "Something failed"
    assert str(exc) == "Something failed"
    assert repr(exc) == "DialectKitError - Something failed"


def test_base_exception_without_detail() -> None:
    exc = DialectKitError()
    assert str(exc) == ""
    assert repr(exc) == "DialectKitError"


def test_unsupported_operation_names_dialect_and_operation() -> None:
    exc = UnsupportedOperationError("sqlite", "create_foreign_key")
    assert exc.dialect == "sqlite"
    assert exc.operation == "create_foreign_key"
    assert str(exc) == "Operation 'create_foreign_key' is not supported by dialect 'sqlite'"


def test_unknown_engine_lists_available() -> None:
    exc = UnknownEngineError("db2", ["mysql", "sqlite"])
    assert exc.engine_id == "db2"
    assert str(exc) == "Unknown engine: 'db2'. Available: mysql, sqlite"


def test_unknown_engine_caught_as_key_error() -> None:
    with pytest.raises(KeyError):
        raise UnknownEngineError("db2")


def test_invalid_dependency_state_fields() -> None:
    exc = InvalidDependencyStateError("users", "email", "dependent objects are unknown")
    assert exc.table == "users"
    assert exc.column == "email"
    assert "dependent objects are unknown" in str(exc)


def test_malformed_script_includes_sql() -> None:
    exc = MalformedScriptError("block_comment", 9, "/* open")
    assert exc.context == "block_comment"
    assert exc.position == 9
    assert "offset 9" in str(exc)
    assert "SQL: /* open" in str(exc)


def test_splitter_closed_default_message() -> None:
    assert str(SplitterClosedError()) == "Splitter session is closed."


def test_exception_chaining() -> None:
    try:
        try:
            raise ValueError("Original error")
        except ValueError as e:
            raise ImproperConfigurationError("Mapped error") from e
    except ImproperConfigurationError as exc:
        assert isinstance(exc.__cause__, ValueError)
