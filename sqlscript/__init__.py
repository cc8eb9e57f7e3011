"""sqlscript: split SQL scripts into statements and replay them against a database."""

from sqlscript import exceptions
from sqlscript.config import ScriptConfig
from sqlscript.dialects import DatabaseType
from sqlscript.loader import (
    SQLScript,
    get_commands_from_script,
    load_script,
    load_scripts,
    read_script_lines,
    read_script_text,
)
from sqlscript.runner import ScriptRunner
from sqlscript.splitter import DelimiterSpec, StatementSplitter, get_delimiter, split_statements

__all__ = (
    "DatabaseType",
    "DelimiterSpec",
    "SQLScript",
    "ScriptConfig",
    "ScriptRunner",
    "StatementSplitter",
    "exceptions",
    "get_commands_from_script",
    "get_delimiter",
    "load_script",
    "load_scripts",
    "read_script_lines",
    "read_script_text",
    "split_statements",
)
