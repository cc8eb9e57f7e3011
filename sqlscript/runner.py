"""Replaying SQL scripts against a DB-API 2.0 connection.

Used by integration tests to run migration scripts statement by statement
against a live database.
"""

import contextlib
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Optional, Union

from sqlscript.config import ScriptConfig
from sqlscript.exceptions import ScriptExecutionError
from sqlscript.loader import load_script, load_scripts
from sqlscript.utils.logging import correlation_id_var, get_logger

__all__ = ("ScriptRunner",)

logger = get_logger("runner")


class ScriptRunner:
    """Executes the statements of SQL scripts on a database connection.

    Example:
        ```python
        runner = ScriptRunner(connection, ScriptConfig(DatabaseType.POSTGRESQL))
        runner.execute_script("migrations/V1__init.sql")
        ```
    """

    __slots__ = ("autocommit", "config", "connection")

    def __init__(self, connection: Any, config: Optional[ScriptConfig] = None, *, autocommit: bool = False) -> None:
        """Initialize the runner.

        Args:
            connection: Open DB-API 2.0 connection.
            config: Options used to read and split scripts.
            autocommit: Skip the commit after each script when the connection commits on its own.
        """
        self.connection = connection
        self.config = config or ScriptConfig()
        self.autocommit = autocommit

    def execute_statements(self, statements: "Iterable[str]", *, path: Optional[str] = None) -> int:
        """Execute statements in order with a single cursor.

        Blank statements are skipped.

        Args:
            statements: Statements to execute.
            path: Script the statements come from, used in error messages.

        Raises:
            ScriptExecutionError: If a statement fails. The transaction is rolled back first.

        Returns:
            Number of statements executed.
        """
        executed = 0
        cursor = self.connection.cursor()
        try:
            for index, statement in enumerate(statements):
                if not statement.strip():
                    continue
                try:
                    cursor.execute(statement)
                except Exception as e:
                    logger.error(
                        "Statement #%d failed: %s",
                        index + 1,
                        e,
                        extra={"extra_fields": {"script": path, "statement_index": index}},
                    )
                    self._rollback()
                    raise ScriptExecutionError(statement, index, path) from e
                executed += 1
        finally:
            cursor.close()

        if not self.autocommit:
            self.connection.commit()
        return executed

    def execute_script(self, path: Union[str, Path]) -> int:
        """Read, split and execute one script file.

        Raises:
            SQLFileNotFoundError: If the script does not exist.
            SQLFileReadError: If the script cannot be read.
            ScriptExecutionError: If a statement fails.

        Returns:
            Number of statements executed.
        """
        script = load_script(path, self.config)
        token = correlation_id_var.set(script.name)
        try:
            executed = self.execute_statements(script.statements, path=script.path)
        finally:
            correlation_id_var.reset(token)
        logger.info(
            "Executed %d statements from %s",
            executed,
            script.path,
            extra={"extra_fields": {"script": script.path, "statement_count": executed}},
        )
        return executed

    def execute_directory(self, directory: Union[str, Path], pattern: str = "*.sql") -> int:
        """Execute every script of a directory in file name order.

        Returns:
            Total number of statements executed.
        """
        total = 0
        for script in load_scripts(directory, self.config, pattern):
            token = correlation_id_var.set(script.name)
            try:
                total += self.execute_statements(script.statements, path=script.path)
            finally:
                correlation_id_var.reset(token)
        return total

    def _rollback(self) -> None:
        if self.autocommit:
            return
        with contextlib.suppress(Exception):
            self.connection.rollback()
