"""Database types understood by the statement splitter."""

from difflib import get_close_matches
from enum import Enum
from typing import Optional

from sqlglot.dialects.dialect import Dialects

from sqlscript.exceptions import ImproperConfigurationError

__all__ = ("DIALECT_ALIASES", "DatabaseType")

# Maps common spellings onto DatabaseType values
DIALECT_ALIASES = {
    "postgres": "postgresql",
    "pg": "postgresql",
    "pgsql": "postgresql",
    "mssql": "sqlserver",
    "tsql": "sqlserver",
    "sql_server": "sqlserver",
    "oracledb": "oracle",
    "plsql": "oracle",
    "maria": "mariadb",
    "ase": "sybase",
    "default": "generic",
}


class DatabaseType(str, Enum):
    """Target database system of a SQL script.

    Only PostgreSQL changes how scripts are split; every other system shares the
    generic behaviour.
    """

    GENERIC = "generic"
    POSTGRESQL = "postgresql"
    SQLSERVER = "sqlserver"
    MYSQL = "mysql"
    MARIADB = "mariadb"
    ORACLE = "oracle"
    DB2 = "db2"
    H2 = "h2"
    SYBASE = "sybase"

    def __str__(self) -> str:
        return self.value

    @property
    def uses_dollar_quoting(self) -> bool:
        """Whether ``$tag$`` blocks can hide statement delimiters."""
        return self is DatabaseType.POSTGRESQL

    @property
    def sqlglot_dialect(self) -> Optional[str]:
        """Name of the matching sqlglot dialect, if sqlglot ships one."""
        dialect = _SQLGLOT_DIALECTS.get(self)
        return dialect.value if dialect is not None else None

    @classmethod
    def from_name(cls, name: "str | DatabaseType") -> "DatabaseType":
        """Resolve a database type from its name, value, alias or sqlglot dialect name.

        Args:
            name: Case-insensitive name such as ``"postgresql"``, ``"PG"`` or ``"tsql"``.

        Raises:
            ImproperConfigurationError: If the name matches no known database type.

        Returns:
            The matching database type.
        """
        if isinstance(name, DatabaseType):
            return name
        normalized = name.lower().strip()
        normalized = DIALECT_ALIASES.get(normalized, normalized)
        for member in cls:
            if normalized == member.value:
                return member

        candidates = [member.value for member in cls] + list(DIALECT_ALIASES)
        suggestions = get_close_matches(normalized, candidates, n=3, cutoff=0.6)
        msg = f"Unknown database type '{name}'"
        if suggestions:
            msg += f". Did you mean: {', '.join(suggestions)}?"
        raise ImproperConfigurationError(msg)


_SQLGLOT_DIALECTS = {
    DatabaseType.POSTGRESQL: Dialects.POSTGRES,
    DatabaseType.SQLSERVER: Dialects.TSQL,
    DatabaseType.MYSQL: Dialects.MYSQL,
    DatabaseType.MARIADB: Dialects.MYSQL,
    DatabaseType.ORACLE: Dialects.ORACLE,
}
