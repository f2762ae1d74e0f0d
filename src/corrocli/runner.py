# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Execution of corrosion CLI commands.

Every command runs as ``<binary> <args...> --config <config_path>`` with stderr
merged into stdout. The full output is captured before returning.
"""

from __future__ import annotations

import asyncio
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from corrocli.config import get_binary_path, get_config_path, get_timeout, validate_binary, validate_config_file
from corrocli.exceptions import BinaryNotFoundError, CommandFailedError, CommandTimeoutError
from corrocli.logging import get_logger
from corrocli.settings import Settings

log = get_logger(__name__)

CLUSTER_MEMBERS = ("cluster", "members")
CLUSTER_INFO = ("cluster", "info")
CLUSTER_STATUS = ("cluster", "status")


@dataclass(frozen=True)
class CommandSpec:
    """Fully resolved invocation."""

    binary: Path
    argv: tuple[str, ...]
    timeout_ms: int

    @property
    def command(self) -> list[str]:
        return [str(self.binary), *self.argv]


def prepare_command(
    args: Sequence[str],
    *,
    binary_path: str | Path | None = None,
    config_path: str | Path | None = None,
    timeout_ms: int | None = None,
    settings: Settings | None = None,
) -> CommandSpec:
    """Resolve paths and check prerequisites.

    Raises:
        ConfigurationError: If the binary or config path is not configured
        BinaryNotFoundError: If the binary does not exist
        BinaryNotExecutableError: If the binary is not executable
        ConfigFileError: If the config file is unusable
    """
    settings = settings or Settings()
    binary = get_binary_path(binary_path, settings)
    config = get_config_path(config_path, settings)
    timeout = get_timeout(timeout_ms, settings)

    binary = validate_binary(binary)
    config = validate_config_file(config)

    spec = CommandSpec(binary=binary, argv=(*args, "--config", str(config)), timeout_ms=timeout)
    log.debug("command_prepared", command=" ".join(spec.command), timeout_ms=timeout)
    return spec


def _check_exit(spec: CommandSpec, exit_code: int, output: str) -> str:
    if exit_code != 0:
        log.warning("command_failed", command=" ".join(spec.argv), exit_code=exit_code, output=output)
        raise CommandFailedError(exit_code, output)
    return output


def run_command(
    args: Sequence[str],
    *,
    binary_path: str | Path | None = None,
    config_path: str | Path | None = None,
    timeout_ms: int | None = None,
    settings: Settings | None = None,
) -> str:
    """Run a corrosion command and return its output.

    Output bytes that are not valid UTF-8 are replaced with U+FFFD.

    Args:
        args: Command arguments, e.g. ``["cluster", "members"]``
        binary_path: Override the binary path
        config_path: Override the config path
        timeout_ms: Override the timeout in milliseconds
        settings: Settings to resolve unset options from

    Returns:
        Combined stdout/stderr text

    Raises:
        CommandFailedError: On a non-zero exit status
        CommandTimeoutError: If the command outlives the timeout
        CorroError: On the prerequisite failures listed in prepare_command
    """
    spec = prepare_command(
        args, binary_path=binary_path, config_path=config_path, timeout_ms=timeout_ms, settings=settings
    )
    try:
        completed = subprocess.run(
            spec.command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            timeout=spec.timeout_ms / 1000,
            check=False,
        )
    except FileNotFoundError as e:
        log.error("binary_not_found", path=str(spec.binary))
        raise BinaryNotFoundError(f"Corrosion binary not found: {spec.binary}") from e
    except subprocess.TimeoutExpired as e:
        log.error("command_timeout", command=" ".join(spec.argv), timeout_ms=spec.timeout_ms)
        raise CommandTimeoutError(spec.timeout_ms) from e

    return _check_exit(spec, completed.returncode, completed.stdout or "")


async def run_command_async(
    args: Sequence[str],
    *,
    binary_path: str | Path | None = None,
    config_path: str | Path | None = None,
    timeout_ms: int | None = None,
    settings: Settings | None = None,
) -> str:
    """Async variant of run_command.

    Several commands can be awaited together with ``asyncio.gather``.
    """
    spec = prepare_command(
        args, binary_path=binary_path, config_path=config_path, timeout_ms=timeout_ms, settings=settings
    )
    try:
        process = await asyncio.create_subprocess_exec(
            *spec.command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError as e:
        log.error("binary_not_found", path=str(spec.binary))
        raise BinaryNotFoundError(f"Corrosion binary not found: {spec.binary}") from e

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout=spec.timeout_ms / 1000)
    except asyncio.TimeoutError as e:
        process.kill()
        await process.wait()
        log.error("command_timeout", command=" ".join(spec.argv), timeout_ms=spec.timeout_ms)
        raise CommandTimeoutError(spec.timeout_ms) from e

    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    return _check_exit(spec, process.returncode or 0, output)


def cluster_members(**options) -> str:
    """Run ``corrosion cluster members``. Options as for run_command."""
    return run_command(CLUSTER_MEMBERS, **options)


def cluster_info(**options) -> str:
    """Run ``corrosion cluster info``."""
    return run_command(CLUSTER_INFO, **options)


def cluster_status(**options) -> str:
    """Run ``corrosion cluster status``."""
    return run_command(CLUSTER_STATUS, **options)


async def cluster_members_async(**options) -> str:
    return await run_command_async(CLUSTER_MEMBERS, **options)


async def cluster_info_async(**options) -> str:
    return await run_command_async(CLUSTER_INFO, **options)


async def cluster_status_async(**options) -> str:
    return await run_command_async(CLUSTER_STATUS, **options)
