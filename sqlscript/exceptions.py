from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "SQLFileNotFoundError",
    "SQLFileReadError",
    "SQLScriptError",
    "ScriptExecutionError",
)


class SQLScriptError(Exception):
    """Base exception class from which all sqlscript exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLScriptError``.

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


class ImproperConfigurationError(SQLScriptError):
    """Improper Configuration error.

    Raised when a database type or delimiter cannot be resolved from the given options.
    """


class SQLFileNotFoundError(SQLScriptError, FileNotFoundError):
    """SQL script file does not exist.

    Still a :class:`FileNotFoundError`, so callers handling plain I/O errors catch it.
    """

    path: Optional[str]

    def __init__(self, path: str) -> None:
        super().__init__(f"SQL script file not found: {path}")
        self.path = path


class SQLFileReadError(SQLScriptError, OSError):
    """SQL script file exists but could not be read or decoded.

    The underlying :class:`OSError` or :class:`UnicodeDecodeError` is chained as the cause.
    """

    path: Optional[str]

    def __init__(self, path: str, original_error: Optional[Exception] = None) -> None:
        message = f"Failed to read SQL script file: {path}"
        if original_error is not None:
            message = f"{message} ({original_error})"
        super().__init__(message)
        self.path = path
        self.original_error = original_error


class ScriptExecutionError(SQLScriptError):
    """A statement extracted from a script failed to execute."""

    statement: str
    index: int

    def __init__(self, statement: str, index: int, path: Optional[str] = None) -> None:
        """Initialize with the failing statement context."""
        location = f" in {path}" if path else ""
        detail_message = f"Statement #{index + 1}{location} failed to execute\nSQL: {statement.strip()}"
        super().__init__(detail=detail_message)
        self.statement = statement
        self.index = index
        self.path = path
