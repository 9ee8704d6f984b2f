from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from click import Group

__all__ = ("get_odbcbridge_group", "main", "parse_argument_option")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_argument_option(raw: str) -> "dict[str, str]":
    """Parse ``[INPUT:|OUTPUT:]value`` into a procedure argument entry.

    Args:
        raw: Argument as typed on the command line.

    Returns:
        The ``{value, paramType}`` entry.
    """
    prefix, sep, rest = raw.partition(":")
    if sep and prefix.upper() in {"INPUT", "OUTPUT"}:
        return {"value": rest, "paramType": prefix.upper()}
    return {"value": raw, "paramType": "INPUT"}


def _load_json_file(path: "Optional[Path]", expected: "type[Any]", param_hint: str) -> Any:
    from click import BadParameter
    from msgspec import DecodeError

    from odbcbridge.utils.serializers import from_json

    if path is None:
        return None
    try:
        data = from_json(path.read_bytes())
    except DecodeError as e:
        msg = f"{path} is not valid JSON: {e}"
        raise BadParameter(msg, param_hint=param_hint) from e
    if not isinstance(data, expected) or (expected is list and not all(isinstance(row, dict) for row in data)):
        kind = "an object" if expected is dict else "a list of objects"
        msg = f"{path} must hold {kind}"
        raise BadParameter(msg, param_hint=param_hint)
    return data


def get_odbcbridge_group() -> "Group":
    """Get the odbcbridge CLI group.

    Raises:
        MissingDependencyError: If the `rich-click` package is not installed.

    Returns:
        The odbcbridge CLI group.
    """
    from odbcbridge.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError as e:
        raise MissingDependencyError(package="rich-click", install_package="cli") from e

    from odbcbridge.utils.logging import configure_logging

    @click.group(name="odbcbridge")
    @click.option(
        "--credentials",
        help="JSON file holding the credential bundle (connectionType plus its fields)",
        required=True,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )
    @click.option("--continue-on-fail", is_flag=True, default=False, help="Record failing items and keep going")
    @click.option("--lowercase-columns", is_flag=True, default=False, help="Lowercase result column names")
    @click.option("--strip-char-padding", is_flag=True, default=False, help="Strip trailing blanks from CHAR values")
    @click.option(
        "--log-level",
        default="WARNING",
        show_default=True,
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        help="Logging level",
    )
    @click.pass_context
    def odbcbridge_group(
        ctx: "click.Context",
        credentials: Path,
        continue_on_fail: bool,
        lowercase_columns: bool,
        strip_char_padding: bool,
        log_level: str,
    ) -> None:
        """Run SQL, CL commands and stored procedures over ODBC."""
        configure_logging(level=log_level, format_style="simple")
        ctx.ensure_object(dict)
        ctx.obj["credentials"] = _load_json_file(credentials, dict, "'--credentials'")
        ctx.obj["continue_on_fail"] = continue_on_fail
        ctx.obj["driver_features"] = {
            "lowercase_columns": lowercase_columns,
            "strip_char_padding": strip_char_padding,
        }

    items_option = click.option(
        "--items",
        help="JSON file holding a list of input item objects",
        required=False,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )

    def _run(ctx: "click.Context", operation: str, items: "Optional[Path]", parameters: "dict[str, Any]") -> None:
        from rich import get_console

        from odbcbridge.executor import OperationExecutor, execute_operation
        from odbcbridge.host import StaticHost, items_from_json
        from odbcbridge.utils.serializers import to_json

        console = get_console()
        host = StaticHost(
            items=items_from_json(_load_json_file(items, list, "'--items'")),
            credentials=ctx.obj["credentials"],
            parameters={name: value for name, value in parameters.items() if value is not None},
            continue_on_fail=ctx.obj["continue_on_fail"],
        )
        executor = OperationExecutor(driver_features=ctx.obj["driver_features"])
        try:
            records = execute_operation(host, operation, executor=executor)
        except Exception as e:  # noqa: BLE001
            console.print(f"[red]Failed to execute {operation}: {e}[/]")
            ctx.exit(1)
        click.echo(to_json(records))

    @odbcbridge_group.command(name="query")
    @click.option("--sql", help="SQL to run for every item; defaults to each item's 'query' field")
    @items_option
    @click.pass_context
    def query(ctx: "click.Context", sql: "Optional[str]", items: "Optional[Path]") -> None:
        """Execute an SQL statement per item."""
        _run(ctx, "executeQuery", items, {"query": sql})

    @odbcbridge_group.command(name="command")
    @click.option("--cl", "command", help="CL command to run for every item; defaults to each item's 'command' field")
    @items_option
    @click.pass_context
    def command(ctx: "click.Context", command: "Optional[str]", items: "Optional[Path]") -> None:
        """Execute a CL command per item through QSYS2.QCMDEXC."""
        _run(ctx, "executeCommand", items, {"command": command})

    @odbcbridge_group.command(name="procedure")
    @click.option("--schema", default=None, help="Procedure schema; blank uses the library list")
    @click.option("--name", "procedure", help="Procedure name; defaults to each item's 'procedure' field")
    @click.option(
        "--argument",
        "arguments",
        multiple=True,
        help="Positional argument, optionally prefixed with INPUT: or OUTPUT:",
    )
    @items_option
    @click.pass_context
    def procedure(
        ctx: "click.Context",
        schema: "Optional[str]",
        procedure: "Optional[str]",
        arguments: "tuple[str, ...]",
        items: "Optional[Path]",
    ) -> None:
        """Call a stored procedure per item."""
        parameters: dict[str, Any] = {"schema": schema, "procedure": procedure}
        if arguments:
            parameters["arguments"] = [parse_argument_option(argument) for argument in arguments]
        _run(ctx, "callProcedure", items, parameters)

    return odbcbridge_group


def main() -> None:
    get_odbcbridge_group()()
