"""
tempdbaudit CLI entry point.

Exit codes:
    0 - every target checked, tempdb follows best practice
    1 - at least one rule deviates from its recommended value
    2 - a target could not be checked, or the configuration is invalid
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from tempdbaudit import __version__
from tempdbaudit.application.audit_service import TargetOutcome, TempdbAuditService
from tempdbaudit.domain.config import AuthType, SqlTarget
from tempdbaudit.domain.errors import ConfigurationError
from tempdbaudit.infrastructure.config_loader import ConfigLoader, apply_password_env
from tempdbaudit.infrastructure.logging_config import setup_logging
from tempdbaudit.interface.formatters import ReportFormatter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

err_console = Console(stderr=True)

app = typer.Typer(
    name="tempdbaudit",
    help="🗄️ SQL Server tempdb best-practice checker",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _create_service() -> TempdbAuditService:
    return TempdbAuditService()


def _target_from_args(
    server: str,
    instance: Optional[str],
    port: Optional[int],
    auth: str,
    username: Optional[str],
    password: Optional[str],
    connect_timeout: int,
) -> SqlTarget:
    try:
        target = SqlTarget(
            id=server,
            server=server,
            instance=instance,
            port=port,
            auth=auth,
            username=username,
            password=password,
            connect_timeout=connect_timeout,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid target {server!r}:\n{e}") from e

    target = apply_password_env(target)
    if target.auth_type is AuthType.SQL and not target.password:
        target = target.model_copy(
            update={"password": typer.prompt(f"Password for {target.username}", hide_input=True)}
        )
    return target


def _exit_code(outcomes: List[TargetOutcome]) -> int:
    if any(not o.succeeded for o in outcomes):
        return EXIT_ERROR
    if any(o.has_violations for o in outcomes):
        return EXIT_VIOLATIONS
    return EXIT_OK


@app.command()
def check(
    server: Optional[str] = typer.Argument(
        None, help="SQL Server host name or IP (omit when using --targets)"
    ),
    instance: Optional[str] = typer.Option(None, "--instance", "-i", help="Named instance"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="TCP port"),
    auth: str = typer.Option("windows", "--auth", "-a", help="Authentication: windows or sql"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="SQL login (auth=sql)"),
    password: Optional[str] = typer.Option(
        None, "--password", help="SQL password (prompted when omitted with auth=sql)"
    ),
    targets: Optional[Path] = typer.Option(
        None, "--targets", "-t", help="JSON file with a list of targets"
    ),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
    connect_timeout: int = typer.Option(30, "--connect-timeout", help="Login timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to file"),
):
    """
    Check tempdb configuration against best-practice rules.

    Reports trace flag 1118, data file count, percentage growth,
    files on the system drive and capped file sizes.
    """
    setup_logging(logging.DEBUG if verbose else logging.INFO, log_file)

    output_format = output_format.lower()
    if output_format not in ("table", "json"):
        err_console.print(f"[red]❌ Unknown format: {escape(output_format)}[/red]")
        raise typer.Exit(EXIT_ERROR)

    try:
        if targets is not None:
            target_list = ConfigLoader().load_sql_targets(targets)
        elif server:
            target_list = [
                _target_from_args(server, instance, port, auth, username, password, connect_timeout)
            ]
        else:
            raise ConfigurationError("Provide a SERVER argument or --targets FILE")
    except ConfigurationError as e:
        logger.error("%s", e)
        err_console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_ERROR)

    outcomes = _create_service().check_targets(target_list)

    formatter = ReportFormatter()
    if output_format == "json":
        typer.echo(formatter.to_json(outcomes))
        formatter.display_warnings(outcomes)
    else:
        formatter.display_tables(outcomes)

    raise typer.Exit(_exit_code(outcomes))


@app.command()
def version():
    """Show the tempdbaudit version."""
    typer.echo(f"tempdbaudit {__version__}")


def main() -> None:
    """Console script entry point."""
    app()
