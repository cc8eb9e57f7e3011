from pathlib import Path
from typing import Optional

import click
from rich import get_console
from rich.syntax import Syntax

from sqlscript._serialization import encode_json
from sqlscript.config import ScriptConfig
from sqlscript.exceptions import SQLScriptError
from sqlscript.loader import load_script
from sqlscript.utils.logging import configure_logging

__all__ = ("get_sqlscript_group",)


def get_sqlscript_group() -> "click.Group":
    """Get the sqlscript CLI group.

    Returns:
        The sqlscript CLI group.
    """

    @click.group(name="sqlscript")
    @click.option("--verbose", help="Enable verbose output.", type=bool, default=False, is_flag=True)
    @click.option(
        "--log-format",
        help="Format of the verbose log written to stderr.",
        type=click.Choice(["simple", "structured"]),
        default="simple",
        show_default=True,
    )
    def sqlscript_group(verbose: bool, log_format: str) -> None:
        """Split SQL scripts into statements."""
        if verbose:
            configure_logging(level="DEBUG", format_style=log_format)

    @sqlscript_group.command(name="split", help="Print the statements extracted from a SQL script.")
    @click.argument("path", type=click.Path(path_type=Path))
    @click.option("--dialect", help="Database type the script is written for.", type=str, default="generic")
    @click.option("--delimiter", help="Override the statement delimiter pattern.", type=str, default=None)
    @click.option("--encoding", help="Text encoding of the script.", type=str, default="utf-8", show_default=True)
    @click.option(
        "--format",
        "output_format",
        help="Output format.",
        type=click.Choice(["text", "json"]),
        default="text",
        show_default=True,
    )
    @click.pass_context
    def split_script(
        ctx: "click.Context",
        path: Path,
        dialect: str,
        delimiter: Optional[str],
        encoding: str,
        output_format: str,
    ) -> None:
        """Print the statements of a script."""
        console = get_console()
        try:
            config = ScriptConfig.from_dialect(dialect, encoding=encoding, delimiter=delimiter)
            script = load_script(path, config)
        except SQLScriptError as e:
            console.print(f"[red]Error: {e}[/]")
            ctx.exit(1)

        if output_format == "json":
            click.echo(encode_json(script.statements))
            return

        console.rule(f"[yellow]{script.name}[/] ({config.database_type}, {len(script)} statements)")
        for index, statement in enumerate(script.statements, start=1):
            console.print(f"[bold]#{index}[/]")
            console.print(Syntax(statement.strip(), "sql", word_wrap=True))

    return sqlscript_group


def main() -> None:
    get_sqlscript_group()()
