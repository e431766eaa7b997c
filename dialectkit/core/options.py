"""Splitter configuration records and usage-context resolution."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Union

from typing_extensions import TypeAlias

from dialectkit.exceptions import ImproperConfigurationError

__all__ = (
    "DEFAULT_SPLITTER_OPTIONS",
    "DUCKDB_SPLITTER_OPTIONS",
    "MSSQL_SPLITTER_OPTIONS",
    "MYSQL_SPLITTER_OPTIONS",
    "NO_SPLIT_SPLITTER_OPTIONS",
    "ORACLE_SPLITTER_OPTIONS",
    "POSTGRES_SPLITTER_OPTIONS",
    "QUOTE_PAIRS",
    "SQLITE_SPLITTER_OPTIONS",
    "SplitterOptions",
    "SplitterOptionsResolver",
    "UsageContext",
    "get_splitter_options",
    "make_splitter_options_resolver",
)

QUOTE_PAIRS: "dict[str, str]" = {"'": "'", '"': '"', "`": "`", "[": "]"}
"""Closing character for every supported quote opener."""


class UsageContext(str, Enum):
    """How the caller is going to execute the text it hands to the splitter."""

    EDIT = "edit"
    SCRIPT = "script"
    IMPORT = "import"
    STREAM = "stream"
    """Text goes to one channel that handles multi-statement scripts itself."""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SplitterOptions:
    """Configuration handed to the statement splitter."""

    name: str = "default"
    delimiter: str = ";"
    split_on_delimiter: bool = True
    """When false only batch separators end a statement (T-SQL)."""
    batch_separator: Optional[str] = None
    """Keyword recognised only alone on its own line, e.g. ``GO``."""
    allow_custom_delimiter: bool = False
    """Honour MySQL client ``DELIMITER <token>`` lines."""
    line_comment_prefixes: "tuple[str, ...]" = ("--",)
    block_comments: bool = True
    quote_chars: "tuple[str, ...]" = ("'", '"')
    string_escape_char: Optional[str] = None
    """Escape character inside ``'`` and ``"`` strings, e.g. backslash."""
    dollar_quoted_strings: bool = False
    block_keywords: "frozenset[str]" = frozenset()
    """Procedural block openers (``BEGIN``, ``CASE``, ``DECLARE``) closed by ``END``."""
    no_split: bool = False
    max_nesting_depth: int = 256

    def __post_init__(self) -> None:
        if not self.delimiter and not self.no_split:
            msg = "Splitter delimiter must not be empty"
            raise ImproperConfigurationError(msg)
        unknown = [quote for quote in self.quote_chars if quote not in QUOTE_PAIRS]
        if unknown:
            msg = f"Unsupported quote characters: {', '.join(unknown)}"
            raise ImproperConfigurationError(msg)
        object.__setattr__(self, "block_keywords", frozenset(k.upper() for k in self.block_keywords))

    def replace(self, **changes: object) -> "SplitterOptions":
        return replace(self, **changes)  # type: ignore[arg-type]


DEFAULT_SPLITTER_OPTIONS = SplitterOptions()

SQLITE_SPLITTER_OPTIONS = SplitterOptions(
    name="sqlite", quote_chars=("'", '"', "`", "["), block_keywords=frozenset({"BEGIN", "CASE"})
)

POSTGRES_SPLITTER_OPTIONS = SplitterOptions(name="postgres", dollar_quoted_strings=True)

MYSQL_SPLITTER_OPTIONS = SplitterOptions(
    name="mysql",
    quote_chars=("'", '"', "`"),
    string_escape_char="\\",
    line_comment_prefixes=("--", "#"),
    allow_custom_delimiter=True,
)

MSSQL_SPLITTER_OPTIONS = SplitterOptions(
    name="mssql", quote_chars=("'", '"', "["), split_on_delimiter=False, batch_separator="GO"
)

ORACLE_SPLITTER_OPTIONS = SplitterOptions(
    name="oracle", batch_separator="/", block_keywords=frozenset({"BEGIN", "DECLARE", "CASE"})
)

DUCKDB_SPLITTER_OPTIONS = SplitterOptions(name="duckdb", dollar_quoted_strings=True)

NO_SPLIT_SPLITTER_OPTIONS = SplitterOptions(name="no_split", no_split=True)

_OPTIONS_BY_DIALECT: "dict[str, SplitterOptions]" = {
    "generic": DEFAULT_SPLITTER_OPTIONS,
    "default": DEFAULT_SPLITTER_OPTIONS,
    "sqlite": SQLITE_SPLITTER_OPTIONS,
    "postgres": POSTGRES_SPLITTER_OPTIONS,
    "postgresql": POSTGRES_SPLITTER_OPTIONS,
    "mysql": MYSQL_SPLITTER_OPTIONS,
    "mariadb": MYSQL_SPLITTER_OPTIONS,
    "mssql": MSSQL_SPLITTER_OPTIONS,
    "tsql": MSSQL_SPLITTER_OPTIONS,
    "sqlserver": MSSQL_SPLITTER_OPTIONS,
    "oracle": ORACLE_SPLITTER_OPTIONS,
    "duckdb": DUCKDB_SPLITTER_OPTIONS,
}

SplitterOptionsResolver: TypeAlias = Callable[[Union[UsageContext, str]], SplitterOptions]


def get_splitter_options(dialect: str) -> "Optional[SplitterOptions]":
    """Return the predefined options for a dialect name, or None when unknown."""
    return _OPTIONS_BY_DIALECT.get(dialect.lower())


def _parse_usage(usage: "Union[UsageContext, str]") -> UsageContext:
    if isinstance(usage, UsageContext):
        return usage
    try:
        return UsageContext(usage.lower())
    except ValueError:
        valid = ", ".join(context.value for context in UsageContext)
        msg = f"Unknown usage context {usage!r}. Expected one of: {valid}"
        raise ImproperConfigurationError(msg) from None


def make_splitter_options_resolver(options: SplitterOptions) -> SplitterOptionsResolver:
    """Build the ``usage -> SplitterOptions`` function a driver exposes.

    Streamed execution always resolves to :data:`NO_SPLIT_SPLITTER_OPTIONS` so the
    channel receives the text as exactly one unit; every other usage gets *options*.
    """

    def resolve(usage: "Union[UsageContext, str]") -> SplitterOptions:
        if _parse_usage(usage) is UsageContext.STREAM:
            return NO_SPLIT_SPLITTER_OPTIONS
        return options

    return resolve
