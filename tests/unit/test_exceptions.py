from sqlscript.exceptions import (
    ImproperConfigurationError,
    ScriptExecutionError,
    SQLFileNotFoundError,
    SQLFileReadError,
    SQLScriptError,
)


def test_exception_hierarchy() -> None:
    assert issubclass(ImproperConfigurationError, SQLScriptError)
    assert issubclass(SQLFileNotFoundError, SQLScriptError)
    assert issubclass(SQLFileReadError, SQLScriptError)
    assert issubclass(ScriptExecutionError, SQLScriptError)


def test_file_errors_are_io_errors() -> None:
    assert issubclass(SQLFileNotFoundError, FileNotFoundError)
    assert issubclass(SQLFileReadError, OSError)
    assert not issubclass(ScriptExecutionError, OSError)

    exc = SQLFileNotFoundError("V1.sql")
    assert isinstance(exc, OSError)
    assert str(exc) == "SQL script file not found: V1.sql"
    assert repr(exc) == "SQLFileNotFoundError - SQL script file not found: V1.sql"


def test_base_error_detail() -> None:
    exc = SQLScriptError("first", "second")
    assert exc.detail == "first"
    assert str(exc) == "second first"
    assert repr(exc) == "SQLScriptError - first"
    assert repr(SQLScriptError()) == "SQLScriptError"


def test_file_errors() -> None:
    not_found = SQLFileNotFoundError("V1.sql")
    assert str(not_found) == "SQL script file not found: V1.sql"
    assert not_found.path == "V1.sql"

    cause = PermissionError("denied")
    read_error = SQLFileReadError("V1.sql", cause)
    assert "V1.sql" in str(read_error)
    assert "denied" in str(read_error)
    assert read_error.original_error is cause


def test_execution_error_without_path() -> None:
    exc = ScriptExecutionError(" SELECT 1 ", 0)
    assert str(exc) == "Statement #1 failed to execute\nSQL: SELECT 1"
