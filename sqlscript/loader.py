"""Reading SQL script files and extracting their statements."""

import hashlib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from sqlscript.config import ScriptConfig
from sqlscript.dialects import DatabaseType
from sqlscript.exceptions import SQLFileNotFoundError, SQLFileReadError
from sqlscript.splitter import get_delimiter
from sqlscript.utils.logging import get_logger

__all__ = (
    "SQLScript",
    "get_commands_from_script",
    "load_script",
    "load_scripts",
    "read_script_lines",
    "read_script_text",
)

logger = get_logger("loader")

LINE_BREAK = re.compile(r"\r\n|\r|\n")


def read_script_text(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """Read the full text of a script file, line endings untouched.

    Args:
        path: Script file path.
        encoding: Text encoding of the file.

    Raises:
        SQLFileNotFoundError: If the file does not exist.
        SQLFileReadError: If the file cannot be read or decoded.

    Returns:
        The decoded file content.
    """
    path_str = str(path)
    try:
        return Path(path).read_bytes().decode(encoding)
    except FileNotFoundError as e:
        raise SQLFileNotFoundError(path_str) from e
    except (OSError, UnicodeDecodeError) as e:
        raise SQLFileReadError(path_str, e) from e


def read_script_lines(path: Union[str, Path], encoding: str = "utf-8") -> "list[str]":
    """Read a script file and return its lines in file order, without line endings."""
    return _split_lines(read_script_text(path, encoding))


def _split_lines(content: str) -> "list[str]":
    # Only CR, LF and CRLF break lines; a final line break adds no empty line
    lines = LINE_BREAK.split(content)
    if lines and not lines[-1]:
        lines.pop()
    return lines


def get_commands_from_script(
    script: Union[str, Path],
    database_type: DatabaseType = DatabaseType.GENERIC,
    *,
    encoding: str = "utf-8",
) -> "list[str]":
    """Extract the SQL statements of a script file.

    Args:
        script: Script file path.
        database_type: Database system the script is written for.
        encoding: Text encoding of the file.

    Raises:
        SQLFileNotFoundError: If the file does not exist.
        SQLFileReadError: If the file cannot be read or decoded.

    Returns:
        Statements in the order they appear in the file. Never ``None``.
    """
    return load_script(script, ScriptConfig(database_type=database_type, encoding=encoding)).statements


@dataclass
class SQLScript:
    """A script file together with the statements extracted from it."""

    path: str
    """Path the script was loaded from."""

    database_type: DatabaseType
    """Database system the script was split for."""

    statements: "list[str]" = field(default_factory=list)
    """Extracted statements in source order."""

    checksum: str = ""
    """MD5 checksum of the file content."""

    def __len__(self) -> int:
        return len(self.statements)

    @property
    def name(self) -> str:
        return Path(self.path).name


def load_script(path: Union[str, Path], config: Optional[ScriptConfig] = None) -> SQLScript:
    """Read and split a single script file.

    Args:
        path: Script file path.
        config: Run options. Defaults to the generic database type and UTF-8.

    Returns:
        The loaded script.
    """
    config = config or ScriptConfig()
    content = read_script_text(path, config.encoding)
    splitter = config.create_splitter(get_delimiter(path, config.database_type))
    statements = splitter.split(_split_lines(content))
    checksum = hashlib.md5(content.encode(), usedforsecurity=False).hexdigest()
    logger.debug("Loaded %d statements from %s", len(statements), path)
    return SQLScript(path=str(path), database_type=config.database_type, statements=statements, checksum=checksum)


def load_scripts(
    directory: Union[str, Path], config: Optional[ScriptConfig] = None, pattern: str = "*.sql"
) -> "list[SQLScript]":
    """Load every script of a directory in file name order.

    Migration scripts are conventionally prefixed with a version so name order
    is replay order.

    Args:
        directory: Directory holding the scripts.
        config: Run options shared by every script.
        pattern: Glob pattern selecting script files.

    Raises:
        SQLFileNotFoundError: If the directory does not exist.

    Returns:
        Loaded scripts sorted by file name.
    """
    base_path = Path(directory)
    if not base_path.is_dir():
        raise SQLFileNotFoundError(str(base_path))
    paths = sorted((p for p in base_path.glob(pattern) if p.is_file()), key=lambda p: p.name)
    return [load_script(p, config) for p in paths]
