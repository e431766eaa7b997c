from typing import Any, Optional

__all__ = (
    "DialectKitError",
    "ImproperConfigurationError",
    "InvalidDependencyStateError",
    "InvalidIntentError",
    "MalformedScriptError",
    "SplitterClosedError",
    "UnknownEngineError",
    "UnsupportedOperationError",
)


class DialectKitError(Exception):
    """Base exception class from which all dialectkit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``DialectKitError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(DialectKitError):
    """Improper Configuration error.

    Raised when registry settings or splitter usage contexts cannot be resolved.
    """


class UnknownEngineError(DialectKitError, KeyError):
    """No driver is registered under the requested engine id."""

    engine_id: str

    def __init__(self, engine_id: str, available: "Optional[list[str]]" = None) -> None:
        message = f"Unknown engine: {engine_id!r}"
        if available:
            message = f"{message}. Available: {', '.join(available)}"
        super().__init__(detail=message)
        self.engine_id = engine_id

    def __str__(self) -> str:
        return self.detail


class UnsupportedOperationError(DialectKitError):
    """A schema change was requested that the dialect cannot express."""

    dialect: str
    operation: str

    def __init__(self, dialect: str, operation: str) -> None:
        super().__init__(detail=f"Operation {operation!r} is not supported by dialect {dialect!r}")
        self.dialect = dialect
        self.operation = operation


class InvalidDependencyStateError(DialectKitError):
    """The objects depending on a column could not be determined."""

    table: str
    column: str
    reason: str

    def __init__(self, table: str, column: str, reason: str) -> None:
        super().__init__(detail=f"Cannot drop column {column!r} of {table!r}: {reason}")
        self.table = table
        self.column = column
        self.reason = reason


class MalformedScriptError(DialectKitError):
    """A script ended inside an unterminated string, comment, identifier or block."""

    context: str
    position: int

    def __init__(self, context: str, position: int, sql: Optional[str] = None) -> None:
        detail_message = f"Script ends inside an unterminated {context} starting at offset {position}"
        if sql:
            detail_message = f"{detail_message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.context = context
        self.position = position


class SplitterClosedError(DialectKitError):
    """A streaming splitter session was used after it was finished or abandoned."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Splitter session is closed."
        super().__init__(message)


class InvalidIntentError(DialectKitError):
    """A schema-change intent lacks information needed to render it."""
