# ruff: noqa: PLR0911
"""SQL script statement splitter with dialect-aware lexical context tracking.

This module splits SQL scripts into the statements an execution channel runs
one at a time. It follows string literals, quoted and bracketed identifiers,
line and block comments, dollar-quoted bodies, parentheses and procedural
``BEGIN ... END`` blocks so that a delimiter inside any of them never ends a
statement. Batch separators such as T-SQL ``GO`` and MySQL ``DELIMITER`` lines
are honoured when :class:`~dialectkit.core.options.SplitterOptions` asks for them.

Architecture:

- :class:`StreamingSplitter`: a session fed chunk by chunk. It owns a
  :class:`SplitterState` and pauses whenever a decision needs characters that
  have not arrived yet, so any chunking of a script produces the same tokens.
- :func:`split_full`: one feed plus finish of a fresh session.
- :class:`StatementSplitter`: reusable, stateless wrapper bound to one options record.

Every character of the input ends up in exactly one token, either in its
``text`` or in its ``delimiter``::

    "".join(token.text + token.delimiter for token in split_full(script)) == script
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from mypy_extensions import mypyc_attr

from dialectkit.core.options import (
    DEFAULT_SPLITTER_OPTIONS,
    QUOTE_PAIRS,
    SplitterOptions,
    get_splitter_options,
)
from dialectkit.exceptions import MalformedScriptError, SplitterClosedError
from dialectkit.utils.logging import get_logger, log_with_context

__all__ = (
    "LexicalContext",
    "SplitterState",
    "StatementSplitter",
    "StatementToken",
    "StreamingSplitter",
    "ensure_complete",
    "split_full",
    "split_sql_script",
)

logger = get_logger("dialectkit.core.splitter")

_NEED_MORE = -1
_HORIZONTAL_WHITESPACE = " \t\r\f\v"
_DELIMITER_COMMAND = "DELIMITER"
_TRANSACTION_WORDS = frozenset(
    {"TRANSACTION", "TRAN", "WORK", "DEFERRED", "IMMEDIATE", "EXCLUSIVE", "DISTRIBUTED", "ISOLATION", "READ"}
)
_NON_BLOCK_END_WORDS = frozenset({"IF", "LOOP", "WHILE", "REPEAT", "FOR"})


class LexicalContext(str, Enum):
    """Lexical context the scanner is in."""

    DEFAULT = "default"
    SINGLE_QUOTED = "single_quoted"
    DOUBLE_QUOTED = "double_quoted"
    BACKTICK_QUOTED = "backtick_quoted"
    BRACKETED = "bracketed"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    DOLLAR_QUOTED = "dollar_quoted"
    PARENTHESIS = "parenthesis"
    BLOCK = "block"

    def __str__(self) -> str:
        return self.value


_QUOTE_CONTEXTS: "dict[str, LexicalContext]" = {
    "'": LexicalContext.SINGLE_QUOTED,
    '"': LexicalContext.DOUBLE_QUOTED,
    "`": LexicalContext.BACKTICK_QUOTED,
    "[": LexicalContext.BRACKETED,
}
_ESCAPABLE_CONTEXTS = frozenset({LexicalContext.SINGLE_QUOTED, LexicalContext.DOUBLE_QUOTED})


@dataclass(frozen=True)
class StatementToken:
    """One statement unit produced by the splitter."""

    text: str
    """Raw statement text, delimiter excluded."""
    delimiter: str = ""
    """Raw text that ended the statement: a delimiter or a whole separator line."""
    start: int = 0
    end: int = 0
    line: int = 1
    complete: bool = True
    """False when the script ended inside an unterminated construct."""
    context: Optional[LexicalContext] = None
    """The unterminated construct of an incomplete token."""
    is_empty: bool = False
    """True when the text holds nothing but whitespace and comments."""

    @property
    def sql(self) -> str:
        return self.text.strip()


@dataclass
class SplitterState:
    """Mutable lexical state carried between chunks by one streaming session."""

    delimiter: str = ";"
    context: LexicalContext = LexicalContext.DEFAULT
    closer: str = ""
    """Closing quote or dollar tag of the current quoted context."""
    context_start: int = 0
    paren_depth: int = 0
    block_stack: "list[str]" = field(default_factory=list)
    line_start: int = 0
    line_has_content: bool = False
    has_content: bool = False
    """Whether the pending statement holds anything but whitespace and comments."""


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char in "_$"


def _is_word_start(char: str) -> bool:
    return char.isalpha() or char == "_"


def _starts_with(buffer: str, pos: int, text: str, final: bool) -> Optional[bool]:
    """Tri-state prefix test: None when the buffer ends inside a possible match."""
    head = buffer[pos : pos + len(text)]
    if head == text:
        return True
    if not final and len(head) < len(text) and text.startswith(head):
        return None
    return False


@mypyc_attr(allow_interpreted_subclasses=False)
class StreamingSplitter:
    """Incremental splitter session.

    A session belongs to a single caller and a single script. ``feed`` returns
    the statements completed by each chunk, ``finish`` flushes the trailing
    statement and ``abandon`` drops everything without emitting.
    """

    __slots__ = ("_buffer", "_closed", "_emitted", "_line", "_offset", "_options", "_origin", "_pos", "_state")

    def __init__(self, options: SplitterOptions = DEFAULT_SPLITTER_OPTIONS) -> None:
        self._options = options
        self._state = SplitterState(delimiter=options.delimiter)
        self._buffer = ""
        self._offset = 0
        self._origin = 0
        self._pos = 0
        self._line = 1
        self._emitted = 0
        self._closed = False

    @property
    def options(self) -> SplitterOptions:
        return self._options

    @property
    def state(self) -> SplitterState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, chunk: str) -> "list[StatementToken]":
        """Add *chunk* to the session and return the statements it completed."""
        self._check_open()
        if not chunk:
            return []
        if self._origin:
            self._buffer = self._buffer[self._origin :]
            self._offset += self._origin
            self._pos -= self._origin
            self._origin = 0
        self._buffer += chunk
        if self._options.no_split:
            return []
        return self._scan(final=False)

    def finish(self) -> "list[StatementToken]":
        """Flush the remaining input and close the session."""
        self._check_open()
        self._closed = True
        if self._options.no_split:
            text = self._buffer
            self._buffer = ""
            return [StatementToken(text=text, start=self._offset, end=self._offset + len(text), is_empty=not text.strip())]

        tokens = self._scan(final=True)
        size = len(self._buffer)
        if size > self._origin or not self._emitted:
            context = self._unterminated_context()
            if context is not None:
                offset = self._offset + self._origin
                log_with_context(
                    logger,
                    logging.WARNING,
                    "Script ends inside an unterminated %s at offset %d",
                    context,
                    offset,
                    context=context.value,
                    offset=offset,
                    options=self._options.name,
                )
            self._emit(tokens, size, size, context=context)
        self._buffer = ""
        return tokens

    def abandon(self) -> None:
        """Discard buffered input without emitting a final statement."""
        if self._closed:
            return
        logger.debug("Abandoning splitter session with %d buffered characters", len(self._buffer) - self._origin)
        self._buffer = ""
        self._origin = 0
        self._pos = 0
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise SplitterClosedError

    def _unterminated_context(self) -> "Optional[LexicalContext]":
        state = self._state
        if state.context not in {LexicalContext.DEFAULT, LexicalContext.LINE_COMMENT}:
            return state.context
        if state.paren_depth:
            return LexicalContext.PARENTHESIS
        if state.block_stack:
            return LexicalContext.BLOCK
        return None

    def _emit(
        self,
        tokens: "list[StatementToken]",
        text_end: int,
        delimiter_end: int,
        context: "Optional[LexicalContext]" = None,
    ) -> None:
        buffer = self._buffer
        text = buffer[self._origin : text_end]
        delimiter = buffer[text_end:delimiter_end]
        start = self._offset + self._origin
        tokens.append(
            StatementToken(
                text=text,
                delimiter=delimiter,
                start=start,
                end=start + len(text),
                line=self._line,
                complete=context is None,
                context=context,
                is_empty=not self._state.has_content,
            )
        )
        self._line += text.count("\n") + delimiter.count("\n")
        self._origin = delimiter_end
        self._emitted += 1
        self._state.has_content = False

    def _note_newlines(self, buffer: str, start: int, end: int) -> None:
        last = buffer.rfind("\n", start, end)
        if last != -1:
            self._state.line_start = self._offset + last + 1
            self._state.line_has_content = True

    def _follows_identifier(self, buffer: str, pos: int) -> bool:
        return pos > self._origin and _is_identifier_char(buffer[pos - 1])

    def _scan(self, final: bool) -> "list[StatementToken]":
        tokens: list[StatementToken] = []
        buffer = self._buffer
        size = len(buffer)
        pos = self._pos
        while pos < size:
            context = self._state.context
            if context is LexicalContext.DEFAULT:
                next_pos = self._scan_default(buffer, pos, final, tokens)
            elif context is LexicalContext.LINE_COMMENT:
                next_pos = self._scan_line_comment(buffer, pos)
            elif context is LexicalContext.BLOCK_COMMENT:
                next_pos = self._scan_block_comment(buffer, pos, final)
            elif context is LexicalContext.DOLLAR_QUOTED:
                next_pos = self._scan_dollar_quoted(buffer, pos, final)
            else:
                next_pos = self._scan_quoted(buffer, pos, final)
            if next_pos == _NEED_MORE:
                break
            pos = next_pos
        self._pos = pos
        return tokens

    def _scan_default(self, buffer: str, pos: int, final: bool, tokens: "list[StatementToken]") -> int:
        state = self._state
        options = self._options
        char = buffer[pos]

        if char == "\n":
            state.line_has_content = False
            state.line_start = self._offset + pos + 1
            return pos + 1
        if char.isspace():
            return pos + 1

        at_top_level = state.paren_depth == 0 and not state.block_stack
        if at_top_level and not state.line_has_content:
            command_end = self._scan_line_command(buffer, pos, final, tokens)
            if command_end is not None:
                return command_end

        for prefix in options.line_comment_prefixes:
            found = _starts_with(buffer, pos, prefix, final)
            if found is None:
                return _NEED_MORE
            if found:
                state.line_has_content = True
                state.context = LexicalContext.LINE_COMMENT
                state.context_start = self._offset + pos
                return pos + len(prefix)

        if options.block_comments:
            found = _starts_with(buffer, pos, "/*", final)
            if found is None:
                return _NEED_MORE
            if found:
                state.line_has_content = True
                state.context = LexicalContext.BLOCK_COMMENT
                state.context_start = self._offset + pos
                return pos + 2

        if char in options.quote_chars:
            state.line_has_content = True
            state.has_content = True
            state.context = _QUOTE_CONTEXTS[char]
            state.closer = QUOTE_PAIRS[char]
            state.context_start = self._offset + pos
            return pos + 1

        if char == "$" and options.dollar_quoted_strings and not self._follows_identifier(buffer, pos):
            tag_end = self._match_dollar_tag(buffer, pos, final)
            if tag_end == _NEED_MORE:
                return _NEED_MORE
            if tag_end is not None:
                state.line_has_content = True
                state.has_content = True
                state.context = LexicalContext.DOLLAR_QUOTED
                state.closer = buffer[pos:tag_end]
                state.context_start = self._offset + pos
                return tag_end

        if at_top_level and options.split_on_delimiter:
            found = _starts_with(buffer, pos, state.delimiter, final)
            if found is None:
                return _NEED_MORE
            if found:
                end = pos + len(state.delimiter)
                state.line_has_content = True
                self._emit(tokens, pos, end)
                return end

        if options.block_keywords and _is_word_start(char) and not self._follows_identifier(buffer, pos):
            return self._scan_word(buffer, pos, final)

        state.line_has_content = True
        state.has_content = True
        if char == "(":
            state.paren_depth += 1
        elif char == ")" and state.paren_depth:
            state.paren_depth -= 1
        return pos + 1

    def _scan_line_command(
        self, buffer: str, pos: int, final: bool, tokens: "list[StatementToken]"
    ) -> "Optional[int]":
        """Recognise batch separator and ``DELIMITER`` lines starting at *pos*."""
        options = self._options
        state = self._state
        line_index = max(state.line_start - self._offset, self._origin)

        if options.batch_separator:
            end = self._match_keyword_line(buffer, pos, options.batch_separator, final)
            if end == _NEED_MORE:
                return _NEED_MORE
            if end is not None:
                self._emit(tokens, line_index, end)
                state.line_start = self._offset + end
                return end

        if options.allow_custom_delimiter and not state.has_content:
            match = self._match_delimiter_command(buffer, pos, final)
            if match == _NEED_MORE:
                return _NEED_MORE
            if match is not None:
                end, delimiter = match  # type: ignore[misc]
                self._emit(tokens, line_index, end)
                state.line_start = self._offset + end
                state.delimiter = delimiter
                logger.debug("Statement delimiter changed to %r", delimiter)
                return end
        return None

    @staticmethod
    def _match_line_end(buffer: str, pos: int, final: bool) -> "Optional[int]":
        size = len(buffer)
        while pos < size and buffer[pos] in _HORIZONTAL_WHITESPACE:
            pos += 1
        if pos == size:
            return size if final else _NEED_MORE
        if buffer[pos] == "\n":
            return pos + 1
        return None

    def _match_keyword_line(self, buffer: str, pos: int, keyword: str, final: bool) -> "Optional[int]":
        head = buffer[pos : pos + len(keyword)]
        if head.upper() != keyword.upper()[: len(head)]:
            return None
        if len(head) < len(keyword):
            return None if final else _NEED_MORE
        return self._match_line_end(buffer, pos + len(keyword), final)

    def _match_delimiter_command(self, buffer: str, pos: int, final: bool) -> "Union[tuple[int, str], int, None]":
        size = len(buffer)
        keyword_end = pos + len(_DELIMITER_COMMAND)
        head = buffer[pos:keyword_end]
        if head.upper() != _DELIMITER_COMMAND[: len(head)]:
            return None
        if len(head) < len(_DELIMITER_COMMAND):
            return None if final else _NEED_MORE
        token_start = keyword_end
        while token_start < size and buffer[token_start] in " \t":
            token_start += 1
        if token_start == size:
            return None if final else _NEED_MORE
        if token_start == keyword_end or buffer[token_start].isspace():
            return None
        token_end = token_start
        while token_end < size and not buffer[token_end].isspace():
            token_end += 1
        if token_end == size and not final:
            return _NEED_MORE
        end = self._match_line_end(buffer, token_end, final)
        if end is None or end == _NEED_MORE:
            return end
        return end, buffer[token_start:token_end]

    @staticmethod
    def _match_dollar_tag(buffer: str, pos: int, final: bool) -> "Optional[int]":
        size = len(buffer)
        end = pos + 1
        while end < size and (buffer[end].isalnum() or buffer[end] == "_"):
            end += 1
        if end == size:
            return None if final else _NEED_MORE
        if buffer[end] != "$":
            return None
        if end > pos + 1 and buffer[pos + 1].isdigit():
            return None
        return end + 1

    @staticmethod
    def _word_end(buffer: str, pos: int) -> int:
        size = len(buffer)
        while pos < size and _is_identifier_char(buffer[pos]):
            pos += 1
        return pos

    def _skip_trivia(self, buffer: str, pos: int, final: bool) -> "Optional[int]":
        """Skip whitespace and comments; None when the buffer ends before it can tell."""
        options = self._options
        size = len(buffer)
        while pos < size:
            if buffer[pos].isspace():
                pos += 1
                continue
            for prefix in options.line_comment_prefixes:
                found = _starts_with(buffer, pos, prefix, final)
                if found is None:
                    return None
                if found:
                    newline = buffer.find("\n", pos + len(prefix))
                    if newline == -1:
                        return size if final else None
                    pos = newline + 1
                    break
            else:
                if not options.block_comments:
                    return pos
                found = _starts_with(buffer, pos, "/*", final)
                if found is None:
                    return None
                if not found:
                    return pos
                close = buffer.find("*/", pos + 2)
                if close == -1:
                    return size if final else None
                pos = close + 2
        return pos

    def _peek_word(self, buffer: str, pos: int, final: bool) -> "Optional[tuple[str, int, int]]":
        """Return the next word after whitespace and comments as ``(WORD, start, end)``.

        ``WORD`` is empty when the next token is not a word.
        """
        size = len(buffer)
        skipped = self._skip_trivia(buffer, pos, final)
        if skipped is None:
            return None
        pos = skipped
        if pos == size:
            return ("", size, size) if final else None
        if not _is_word_start(buffer[pos]):
            return "", pos, pos
        end = self._word_end(buffer, pos)
        if end == size and not final:
            return None
        return buffer[pos:end].upper(), pos, end

    def _scan_word(self, buffer: str, pos: int, final: bool) -> int:
        state = self._state
        end = self._word_end(buffer, pos)
        if end == len(buffer) and not final:
            return _NEED_MORE
        word = buffer[pos:end].upper()
        consumed = end

        if word == "END" and state.block_stack:
            peeked = self._peek_word(buffer, end, final)
            if peeked is None:
                return _NEED_MORE
            follower, follower_start, follower_end = peeked
            if follower not in _NON_BLOCK_END_WORDS:
                state.block_stack.pop()
                if follower == "CASE":
                    self._note_newlines(buffer, end, follower_start)
                    consumed = follower_end
        elif word == "BEGIN" and word in self._options.block_keywords:
            peeked = self._peek_word(buffer, end, final)
            if peeked is None:
                return _NEED_MORE
            follower, follower_start, _ = peeked
            if follower:
                opens_block = follower not in _TRANSACTION_WORDS
            elif follower_start == len(buffer):
                opens_block = False
            else:
                found = _starts_with(buffer, follower_start, state.delimiter, final)
                if found is None:
                    return _NEED_MORE
                opens_block = not found
            if opens_block:
                if state.block_stack and state.block_stack[-1] == "DECLARE":
                    state.block_stack[-1] = "BEGIN"
                else:
                    self._push_block(word)
        elif word in self._options.block_keywords and word != "BEGIN":
            self._push_block(word)

        state.line_has_content = True
        state.has_content = True
        return consumed

    def _push_block(self, keyword: str) -> None:
        stack = self._state.block_stack
        if len(stack) >= self._options.max_nesting_depth:
            log_with_context(
                logger,
                logging.WARNING,
                "Maximum block nesting depth (%d) exceeded",
                self._options.max_nesting_depth,
                block=keyword,
                options=self._options.name,
            )
            return
        stack.append(keyword)

    def _scan_line_comment(self, buffer: str, pos: int) -> int:
        newline = buffer.find("\n", pos)
        if newline == -1:
            return len(buffer)
        self._state.context = LexicalContext.DEFAULT
        return newline

    def _scan_block_comment(self, buffer: str, pos: int, final: bool) -> int:
        close = buffer.find("*/", pos)
        if close == -1:
            target = len(buffer) - 1 if not final and buffer.endswith("*") else len(buffer)
            if target <= pos:
                return _NEED_MORE
            self._note_newlines(buffer, pos, target)
            return target
        self._note_newlines(buffer, pos, close + 2)
        self._state.context = LexicalContext.DEFAULT
        return close + 2

    def _scan_dollar_quoted(self, buffer: str, pos: int, final: bool) -> int:
        tag = self._state.closer
        close = buffer.find(tag, pos)
        if close == -1:
            target = len(buffer) if final else max(pos, len(buffer) - len(tag) + 1)
            if target <= pos:
                return _NEED_MORE
            self._note_newlines(buffer, pos, target)
            return target
        self._note_newlines(buffer, pos, close + len(tag))
        self._state.context = LexicalContext.DEFAULT
        return close + len(tag)

    def _scan_quoted(self, buffer: str, pos: int, final: bool) -> int:
        state = self._state
        closer = state.closer
        escape = self._options.string_escape_char if state.context in _ESCAPABLE_CONTEXTS else None
        size = len(buffer)
        start = pos
        while pos < size:
            char = buffer[pos]
            if escape is not None and char == escape:
                if pos + 1 >= size and not final:
                    break
                pos += 2
                continue
            pos += 1
            if char == closer:
                state.context = LexicalContext.DEFAULT
                break
        pos = min(pos, size)
        if pos == start:
            return _NEED_MORE
        self._note_newlines(buffer, start, pos)
        return pos


def split_full(text: str, options: SplitterOptions = DEFAULT_SPLITTER_OPTIONS) -> "list[StatementToken]":
    """Split *text* into statement tokens.

    Args:
        text: The SQL script to split
        options: Splitter configuration, usually resolved from a driver

    Returns:
        Tokens covering the whole input in order. The last token is flagged
        incomplete when the script ends inside an unterminated construct.
    """
    session = StreamingSplitter(options)
    tokens = session.feed(text)
    tokens.extend(session.finish())
    logger.debug("Split script into %d statements using %s options", len(tokens), options.name)
    return tokens


def ensure_complete(tokens: "list[StatementToken]") -> "list[StatementToken]":
    """Return *tokens* unchanged, or raise when one of them is incomplete.

    Raises:
        MalformedScriptError: If a token was cut off inside an unterminated construct.
    """
    for token in tokens:
        if not token.complete:
            raise MalformedScriptError(str(token.context), token.start, token.sql)
    return tokens


@mypyc_attr(allow_interpreted_subclasses=False)
class StatementSplitter:
    """Reusable splitter bound to one options record."""

    __slots__ = ("_options",)

    def __init__(self, options: SplitterOptions = DEFAULT_SPLITTER_OPTIONS) -> None:
        self._options = options

    @property
    def options(self) -> SplitterOptions:
        return self._options

    def split(self, sql: str) -> "list[StatementToken]":
        return split_full(sql, self._options)

    def split_statements(self, sql: str) -> "list[str]":
        """Return the stripped SQL of every statement with executable content."""
        return [token.sql for token in self.split(sql) if not token.is_empty]

    def stream(self) -> StreamingSplitter:
        """Start a new streaming session with this splitter's options."""
        return StreamingSplitter(self._options)


def split_sql_script(script: str, dialect: Optional[str] = None) -> "list[str]":
    """Split a SQL script into statements using the appropriate dialect.

    Args:
        script: The SQL script to split
        dialect: The SQL dialect name ('sqlite', 'mssql', 'postgres', etc.)

    Returns:
        List of individual SQL statements without their delimiters
    """
    if dialect is None:
        dialect = "generic"
    options = get_splitter_options(dialect)
    if options is None:
        logger.warning("Unknown dialect '%s', using generic SQL splitter", dialect)
        options = DEFAULT_SPLITTER_OPTIONS
    return StatementSplitter(options).split_statements(script)
