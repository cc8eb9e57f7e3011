"""Per-run options shared by the loader, the script runner and the CLI."""

from dataclasses import dataclass, field
from typing import Optional

from sqlscript.dialects import DatabaseType
from sqlscript.splitter import DelimiterSpec, StatementSplitter

__all__ = ("ScriptConfig",)


@dataclass
class ScriptConfig:
    """Options used when reading and splitting SQL scripts."""

    database_type: DatabaseType = DatabaseType.GENERIC
    """Database system the scripts are written for."""

    encoding: str = "utf-8"
    """Text encoding of the script files."""

    delimiter: Optional[DelimiterSpec] = field(default=None)
    """Delimiter override. When unset the delimiter lookup decides per script."""

    @classmethod
    def from_dialect(cls, dialect: str, *, encoding: str = "utf-8", delimiter: Optional[str] = None) -> "ScriptConfig":
        """Build a config from a database type name such as ``"postgresql"`` or ``"mssql"``.

        Raises:
            ImproperConfigurationError: If the dialect name is unknown.
        """
        return cls(
            database_type=DatabaseType.from_name(dialect),
            encoding=encoding,
            delimiter=DelimiterSpec(delimiter) if delimiter else None,
        )

    def create_splitter(self, delimiter: Optional[DelimiterSpec] = None) -> StatementSplitter:
        """Create a splitter for this config, preferring the configured delimiter."""
        return StatementSplitter(self.database_type, self.delimiter or delimiter)
