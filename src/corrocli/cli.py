from __future__ import annotations

import json
import sys
from typing import Any, Callable

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from corrocli import runner
from corrocli.config import get_config, validate
from corrocli.defaults import ENV_PREFIX, RECENT_WINDOW_SECONDS
from corrocli.exceptions import CorroError, InvalidTimestampError
from corrocli.logging import LOG_LEVELS, configure_logging
from corrocli.parser import (
    decode_json_stream,
    parse_cluster_info,
    parse_cluster_members,
    parse_cluster_status,
    summarize_member,
)
from corrocli.settings import Settings
from corrocli.timestamps import FRACTION_MASK, decode_timestamp, format_timestamp, is_recent

console = Console()

PARSERS: dict[str, Callable[[str], list[dict[str, Any]]]] = {
    "raw": decode_json_stream,
    "members": parse_cluster_members,
    "info": parse_cluster_info,
    "status": parse_cluster_status,
}


_COMMAND_OPTIONS = (
    click.option("--binary", "binary_path", type=click.Path(dir_okay=False), default=None, help="Corrosion binary."),
    click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None, help="Corrosion config."),
    click.option("--timeout", "timeout_ms", type=click.IntRange(min=1), default=None, help="Timeout in ms."),
)


def command_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the --binary/--config/--timeout overrides."""
    for option in reversed(_COMMAND_OPTIONS):
        func = option(func)
    return func


def _echo_json(records: Any) -> None:
    click.echo(json.dumps(records, indent=2))


def _run(args: tuple[str, ...], binary_path: str | None, config_path: str | None, timeout_ms: int | None) -> str:
    ctx = click.get_current_context()
    try:
        return runner.run_command(
            args,
            binary_path=binary_path,
            config_path=config_path,
            timeout_ms=timeout_ms,
            settings=ctx.obj,
        )
    except CorroError as e:
        raise click.ClickException(str(e)) from e


def _parse(kind: str, output: str) -> list[dict[str, Any]]:
    try:
        return PARSERS[kind](output)
    except CorroError as e:
        raise click.ClickException(str(e)) from e


def _settings_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        env_var = ENV_PREFIX + "_".join(str(part) for part in item["loc"]).upper()
        problems.append(f"{env_var}: {item['msg']}")
    return "Invalid environment settings: " + "; ".join(problems)


def render_members(members: list[dict[str, Any]]) -> Table:
    table = Table(title=f"Cluster members ({len(members)})")
    table.add_column("ID", style="cyan")
    table.add_column("Address")
    table.add_column("Status")
    table.add_column("Cluster")
    table.add_column("Ring")
    table.add_column("Last sync")
    table.add_column("RTT avg", justify="right")

    colors = {"active": "green", "connected": "blue", "reachable": "yellow"}
    for member in members:
        summary = summarize_member(member)
        color = colors.get(summary.status, "white")
        table.add_row(
            str(summary.id),
            str(summary.address),
            f"[{color}]{summary.status}[/{color}]",
            str(summary.cluster_id),
            str(summary.ring),
            summary.last_sync,
            f"{summary.avg_rtt} ({summary.rtt_samples})",
        )
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override CORROSION_LOG_LEVEL.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """corrosion command line wrapper."""
    try:
        settings = Settings()
    except ValidationError as e:
        raise click.ClickException(_settings_error(e)) from e
    try:
        configure_logging(settings, level=log_level)
    except CorroError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj = settings


@cli.command("members")
@command_options
@click.option("--json", "as_json", is_flag=True, help="Print enriched records as JSON.")
def members(binary_path: str | None, config_path: str | None, timeout_ms: int | None, as_json: bool) -> None:
    """Show cluster members."""
    records = _parse("members", _run(runner.CLUSTER_MEMBERS, binary_path, config_path, timeout_ms))
    if as_json:
        _echo_json(records)
    elif not records:
        console.print("[yellow]No cluster members (single-node setup?)[/yellow]")
    else:
        console.print(render_members(records))


@cli.command("info")
@command_options
def info(binary_path: str | None, config_path: str | None, timeout_ms: int | None) -> None:
    """Show cluster info as JSON."""
    _echo_json(_parse("info", _run(runner.CLUSTER_INFO, binary_path, config_path, timeout_ms)))


@cli.command("status")
@command_options
def status(binary_path: str | None, config_path: str | None, timeout_ms: int | None) -> None:
    """Show cluster status as JSON."""
    _echo_json(_parse("status", _run(runner.CLUSTER_STATUS, binary_path, config_path, timeout_ms)))


@cli.command("run", context_settings={"ignore_unknown_options": True})
@command_options
@click.argument("args", nargs=-1, required=True, type=click.UNPROCESSED)
def run(binary_path: str | None, config_path: str | None, timeout_ms: int | None, args: tuple[str, ...]) -> None:
    """Run an arbitrary corrosion command and print its raw output."""
    click.echo(_run(args, binary_path, config_path, timeout_ms), nl=False)


@cli.command("parse")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--kind", type=click.Choice(sorted(PARSERS)), default="raw", show_default=True)
def parse(source: Any, kind: str) -> None:
    """Decode saved corrosion output (file or stdin) into a JSON array."""
    _echo_json(_parse(kind, source.read()))


@cli.command("timestamp")
@click.argument("value")
@click.option("--window", type=click.IntRange(min=1), default=RECENT_WINDOW_SECONDS, show_default=True)
def timestamp(value: str, window: int) -> None:
    """Decode a packed 64-bit corrosion timestamp."""
    try:
        packed = int(value, 0)
        instant = decode_timestamp(packed)
    except (ValueError, InvalidTimestampError) as e:
        raise click.ClickException(f"Invalid timestamp: {value}") from e

    click.echo(f"formatted: {format_timestamp(packed)}")
    click.echo(f"iso:       {instant.isoformat()}")
    click.echo(f"seconds:   {packed >> 32}")
    click.echo(f"fraction:  {packed & FRACTION_MASK}")
    click.echo(f"recent:    {is_recent(packed, window)} (window {window}s)")


@cli.command("config")
@click.pass_obj
def show_config(settings: Settings) -> None:
    """Show resolved configuration and validate it."""
    resolved = get_config(settings)
    click.echo(f"binary_path: {resolved.binary_path or '-'}")
    click.echo(f"config_path: {resolved.config_path or '-'}")
    click.echo(f"timeout:     {resolved.timeout}ms")

    errors = validate(settings)
    if errors:
        for error in errors:
            console.print(f"[red]✗[/red] {error}")
        sys.exit(1)
    console.print("[green]✓[/green] Configuration OK")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
