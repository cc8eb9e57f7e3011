"""Tests for replaying scripts against a DB-API connection."""

import io
import json
import logging
import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from sqlscript.config import ScriptConfig
from sqlscript.exceptions import ScriptExecutionError, SQLFileNotFoundError
from sqlscript.runner import ScriptRunner
from sqlscript.utils.logging import configure_logging, correlation_id_var


@pytest.fixture
def connection() -> Generator[sqlite3.Connection, None, None]:
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


def _count(connection: sqlite3.Connection, table: str) -> int:
    return connection.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def test_execute_statements(connection: sqlite3.Connection) -> None:
    runner = ScriptRunner(connection)
    executed = runner.execute_statements([
        " CREATE TABLE t (id INTEGER)",
        " INSERT INTO t VALUES (1)",
        "",
        "   ",
        " INSERT INTO t VALUES (2)",
    ])
    assert executed == 3
    assert _count(connection, "t") == 2


def test_execute_script(connection: sqlite3.Connection, tmp_path: Path) -> None:
    path = tmp_path / "V1__init.sql"
    path.write_text(
        "-- schema\nCREATE TABLE items (\n  id INTEGER,\n  name TEXT\n);\n"
        "INSERT INTO items VALUES (1, 'a'); INSERT INTO items VALUES (2, 'b');\n",
        encoding="utf-8",
    )
    assert ScriptRunner(connection).execute_script(path) == 3
    assert _count(connection, "items") == 2


def test_execute_script_missing(connection: sqlite3.Connection, tmp_path: Path) -> None:
    with pytest.raises(SQLFileNotFoundError):
        ScriptRunner(connection).execute_script(tmp_path / "missing.sql")


def test_failure_rolls_back(connection: sqlite3.Connection) -> None:
    runner = ScriptRunner(connection)
    runner.execute_statements(["CREATE TABLE t (id INTEGER)"])

    with pytest.raises(ScriptExecutionError) as exc_info:
        runner.execute_statements(["INSERT INTO t VALUES (1)", "INSERT INTO missing VALUES (1)"], path="V2.sql")

    error = exc_info.value
    assert error.index == 1
    assert error.statement == "INSERT INTO missing VALUES (1)"
    assert "Statement #2 in V2.sql failed" in str(error)
    assert isinstance(error.__cause__, sqlite3.OperationalError)
    assert _count(connection, "t") == 0


def test_execute_directory(connection: sqlite3.Connection, tmp_path: Path) -> None:
    (tmp_path / "V2__data.sql").write_text("INSERT INTO t VALUES (1);\nINSERT INTO t VALUES (2);\n", encoding="utf-8")
    (tmp_path / "V1__schema.sql").write_text("CREATE TABLE t (id INTEGER);\n", encoding="utf-8")

    runner = ScriptRunner(connection, ScriptConfig.from_dialect("generic"))
    assert runner.execute_directory(tmp_path) == 3
    assert _count(connection, "t") == 2


def test_correlation_id_is_restored(connection: sqlite3.Connection, tmp_path: Path) -> None:
    path = tmp_path / "V1.sql"
    path.write_text("CREATE TABLE t (id INTEGER);\n", encoding="utf-8")
    ScriptRunner(connection).execute_script(path)
    assert correlation_id_var.get() is None


def test_autocommit_skips_commit(tmp_path: Path) -> None:
    class RecordingConnection:
        def __init__(self) -> None:
            self.inner = sqlite3.connect(":memory:")
            self.commits = 0

        def cursor(self) -> sqlite3.Cursor:
            return self.inner.cursor()

        def commit(self) -> None:
            self.commits += 1
            self.inner.commit()

        def rollback(self) -> None:
            self.inner.rollback()

    recording = RecordingConnection()
    ScriptRunner(recording, autocommit=True).execute_statements(["CREATE TABLE t (id INTEGER)"])
    assert recording.commits == 0
    ScriptRunner(recording).execute_statements(["INSERT INTO t VALUES (1)"])
    assert recording.commits == 1
    recording.inner.close()


def test_failure_is_logged_with_script_context(connection: sqlite3.Connection, tmp_path: Path) -> None:
    path = tmp_path / "V3__broken.sql"
    path.write_text("CREATE TABLE t (id INTEGER);\nINSERT INTO missing VALUES (1);\n", encoding="utf-8")
    configure_logging(level="INFO")
    handler = logging.getLogger("sqlscript").handlers[0]
    stream = io.StringIO()
    handler.setStream(stream)  # type: ignore[attr-defined]

    with pytest.raises(ScriptExecutionError):
        ScriptRunner(connection).execute_script(path)

    entries = [json.loads(line) for line in stream.getvalue().splitlines()]
    error = next(entry for entry in entries if entry["level"] == "ERROR")
    assert error["logger"] == "sqlscript.runner"
    assert error["script"] == str(path)
    assert error["statement_index"] == 1
    assert error["correlation_id"] == "V3__broken.sql"


def test_success_is_logged_with_statement_count(connection: sqlite3.Connection, tmp_path: Path) -> None:
    path = tmp_path / "V1.sql"
    path.write_text("CREATE TABLE t (id INTEGER);\nINSERT INTO t VALUES (1);\n", encoding="utf-8")
    configure_logging(level="INFO")
    stream = io.StringIO()
    logging.getLogger("sqlscript").handlers[0].setStream(stream)  # type: ignore[attr-defined]

    ScriptRunner(connection).execute_script(path)

    entry = json.loads(stream.getvalue().splitlines()[-1])
    assert entry["message"].startswith("Executed 2 statements")
    assert entry["statement_count"] == 2
    assert entry["script"] == str(path)
