"""Line-oriented SQL script statement splitter.

Scripts are split one line at a time: comment lines are dropped, a line holding
only the delimiter closes the buffered statement and lines containing the
delimiter are cut into statements. PostgreSQL scripts additionally count lines
that consist of a single dollar-quote tag (``$$``, ``$body$``) so a delimiter
inside a dollar-quoted function body does not end the statement.

This is not a SQL parser. String literals, block comments spanning lines and
nested dollar quotes are not understood.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from sqlscript.dialects import DatabaseType
from sqlscript.exceptions import ImproperConfigurationError
from sqlscript.utils.logging import get_logger

__all__ = (
    "DOLLAR_QUOTED_BLOCK",
    "STANDARD_DELIMITER",
    "DelimiterSpec",
    "StatementSplitter",
    "get_delimiter",
    "split_statements",
)

logger = get_logger("splitter")

REGEX_OR = "|"
STANDARD_DELIMITER = ";"
DOLLAR_QUOTED_BLOCK = re.compile(r"\$.*\$")
SKIPPED_LINE = "SET CURRENT SCHEMA BPMS@"
COMMENT_PREFIXES = ("--", "#", "/*")
# Control characters and space, nothing else
TRIMMED_CHARS = "".join(map(chr, range(33)))


@dataclass(frozen=True)
class DelimiterSpec:
    """Statement delimiter of a script.

    ``pattern`` is matched against whole lines only. Everything before its first
    ``|`` is the literal delimiter searched for inside lines, so ``";|GO"`` ends
    statements on ``;`` anywhere and on ``GO`` standing alone on a line.
    """

    pattern: str = STANDARD_DELIMITER
    _line_regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            line_regex = re.compile(self.pattern)
        except re.error as e:
            msg = f"Invalid delimiter pattern '{self.pattern}': {e}"
            raise ImproperConfigurationError(msg) from e
        object.__setattr__(self, "_line_regex", line_regex)

    @property
    def literal(self) -> str:
        """The delimiter as it appears inside a line."""
        index = self.pattern.find(REGEX_OR)
        return self.pattern[:index] if index != -1 else self.pattern

    def is_delimiter_line(self, trimmed_line: str) -> bool:
        """Whether the whole upper-cased line matches the delimiter pattern."""
        return self._line_regex.fullmatch(trimmed_line.upper()) is not None

    def split_line(self, line: str) -> "list[str]":
        """Split ``line`` on the literal delimiter.

        Empty fragments at the end are dropped, so a line made only of delimiters
        produces no fragments. Empty leading and middle fragments are kept.
        """
        parts = re.split(re.escape(self.literal), line)
        while parts and not parts[-1]:
            parts.pop()
        return parts


def get_delimiter(
    script: "Optional[Union[str, Path]]" = None, database_type: "Optional[DatabaseType]" = None
) -> DelimiterSpec:
    """Look up the delimiter used by a script.

    Every script currently uses the standard ``;`` delimiter whatever its file or
    database type.
    """
    return DelimiterSpec(STANDARD_DELIMITER)


def _should_skip(trimmed_line: str) -> bool:
    return not trimmed_line or trimmed_line.startswith(COMMENT_PREFIXES) or trimmed_line == SKIPPED_LINE


class StatementSplitter:
    """Splits the lines of a SQL script into statements.

    The splitter only holds configuration. Buffers and counters live inside a
    single :meth:`split` call, so one instance can be shared between threads.
    """

    __slots__ = ("database_type", "delimiter")

    def __init__(
        self, database_type: DatabaseType = DatabaseType.GENERIC, delimiter: "Optional[DelimiterSpec]" = None
    ) -> None:
        """Initialize the splitter.

        Args:
            database_type: Database system the script is written for.
            delimiter: Statement delimiter. Defaults to the result of :func:`get_delimiter`.
        """
        self.database_type = database_type
        self.delimiter = delimiter if delimiter is not None else get_delimiter(database_type=database_type)

    def split(self, lines: "Iterable[str]") -> "list[str]":
        """Split script lines into statements.

        Args:
            lines: Lines of the script in file order, with or without line endings.

        Returns:
            Extracted statements in source order. Empty when the script holds no
            statements.
        """
        delimiter = self.delimiter
        dollar_quoting = self.database_type.uses_dollar_quoting
        statements: list[str] = []
        buffer = ""
        dollar_blocks = 0

        for line in lines:
            trimmed = line.strip(TRIMMED_CHARS)
            if _should_skip(trimmed):
                continue

            if dollar_quoting and DOLLAR_QUOTED_BLOCK.fullmatch(trimmed):
                dollar_blocks += 1

            if delimiter.is_delimiter_line(trimmed) and buffer:
                statements.append(buffer)
                buffer = ""
                continue

            if delimiter.literal in trimmed and (not dollar_quoting or dollar_blocks % 2 == 0):
                buffer = self._split_line(trimmed, buffer, statements)
            else:
                buffer += trimmed + " "

        if buffer:
            statements.append(buffer)

        if dollar_quoting and dollar_blocks % 2:
            logger.warning(
                "Script ended inside a dollar-quoted block after %d dollar-quote lines",
                dollar_blocks,
                extra={"extra_fields": {"dollar_quote_lines": dollar_blocks}},
            )
        logger.debug(
            "Extracted %d statements (%s)",
            len(statements),
            self.database_type,
            extra={"extra_fields": {"statement_count": len(statements), "database_type": self.database_type.value}},
        )
        return statements

    def split_script(self, script: str) -> "list[str]":
        """Split the full text of a script into statements."""
        return self.split(script.splitlines())

    def _split_line(self, line: str, buffer: str, statements: "list[str]") -> str:
        """Cut a line containing the delimiter into statements.

        The first fragment completes the buffered statement, middle fragments are
        statements of their own and the last fragment starts the next buffered
        statement unless the line ends with the delimiter.

        Returns:
            The new buffer content.
        """
        parts = self.delimiter.split_line(line)
        ends_with_delimiter = line.endswith(self.delimiter.literal)
        new_buffer = ""
        for index, part in enumerate(parts):
            if index == 0:
                statements.append(f"{buffer} {part}")
            elif index == len(parts) - 1 and not ends_with_delimiter:
                new_buffer = part
            else:
                statements.append(part)
        if not parts:
            # Only delimiters on the line, keep whatever is buffered
            return buffer
        return new_buffer


def split_statements(lines: "Iterable[str]", database_type: DatabaseType = DatabaseType.GENERIC) -> "list[str]":
    """Split script lines into statements using the delimiter of ``database_type``.

    Args:
        lines: Lines of the script in file order.
        database_type: Database system the script is written for.

    Returns:
        Extracted statements in source order.
    """
    return StatementSplitter(database_type).split(lines)
