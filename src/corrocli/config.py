# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Binary and config path resolution for corrosion commands.

Resolution order (first found wins):
1. Explicit arguments
2. ``Settings`` (``CORROSION_*`` environment variables)
3. Common installation locations (binary only)
"""

from __future__ import annotations

import os
import stat
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel

from corrocli.defaults import BINARY_SEARCH_PATHS
from corrocli.exceptions import (
    BinaryNotExecutableError,
    BinaryNotFoundError,
    ConfigFileError,
    ConfigurationError,
    CorroError,
)
from corrocli.logging import get_logger
from corrocli.settings import Settings

log = get_logger(__name__)

__all__ = [
    "ResolvedConfig",
    "discover_binary",
    "get_binary_path",
    "get_config",
    "get_config_path",
    "get_timeout",
    "is_executable",
    "validate",
    "validate_binary",
    "validate_config_file",
]


class ResolvedConfig(BaseModel):
    """Snapshot of the effective configuration.

    A path is None when it could not be resolved; the matching ``*_error``
    field then says why.
    """

    binary_path: Path | None = None
    binary_error: str | None = None
    config_path: Path | None = None
    config_error: str | None = None
    timeout: int


def is_executable(path: Path) -> bool:
    """Check the owner execute bit."""
    try:
        mode = path.stat().st_mode
    except OSError:
        return False
    return bool(mode & stat.S_IXUSR)


def discover_binary(candidates: Iterable[str | Path] = BINARY_SEARCH_PATHS) -> Path | None:
    """Find an executable corrosion binary in common locations."""
    for candidate in candidates:
        path = Path(candidate)
        if path.is_file() and is_executable(path):
            log.debug("corrosion_binary_discovered", path=str(path))
            return path
    return None


def get_binary_path(binary_path: str | Path | None = None, settings: Settings | None = None) -> Path:
    """Resolve the corrosion binary path.

    Raises:
        ConfigurationError: If no source provides a path
    """
    if binary_path:
        return Path(binary_path)
    settings = settings or Settings()
    if settings.binary_path:
        return settings.binary_path
    discovered = discover_binary()
    if discovered is not None:
        return discovered
    raise ConfigurationError(
        "Corrosion binary path not configured. "
        "Pass binary_path or set the CORROSION_BINARY_PATH environment variable."
    )


def get_config_path(config_path: str | Path | None = None, settings: Settings | None = None) -> Path:
    """Resolve the corrosion config file path.

    Raises:
        ConfigurationError: If no source provides a path
    """
    if config_path:
        return Path(config_path)
    settings = settings or Settings()
    if settings.config_path:
        return settings.config_path
    raise ConfigurationError(
        "Corrosion config path not configured. "
        "Pass config_path or set the CORROSION_CONFIG_PATH environment variable."
    )


def get_timeout(timeout_ms: int | None = None, settings: Settings | None = None) -> int:
    """Resolve the command timeout in milliseconds."""
    if timeout_ms is not None:
        if timeout_ms <= 0:
            raise ValueError(f"timeout must be positive, got {timeout_ms}")
        return timeout_ms
    return (settings or Settings()).timeout


def validate_binary(binary_path: str | Path) -> Path:
    """Check that the binary exists and is executable.

    Returns:
        Absolute binary path

    Raises:
        BinaryNotFoundError: If nothing exists at the path
        BinaryNotExecutableError: If the execute bit is missing
    """
    path = Path(binary_path).absolute()
    if not path.exists():
        raise BinaryNotFoundError(f"Corrosion binary not found: {path}")
    if not is_executable(path):
        raise BinaryNotExecutableError(f"Corrosion binary not executable: {path}")
    return path


def validate_config_file(config_path: str | Path) -> Path:
    """Check that the config file exists, is a regular file, and is readable.

    Returns:
        Absolute config path

    Raises:
        ConfigFileError: On any of the three failures
    """
    path = Path(config_path).absolute()
    if not path.exists():
        raise ConfigFileError(f"Corrosion config file not found: {path}")
    if not path.is_file():
        raise ConfigFileError(f"Corrosion config path is not a file: {path}")
    if not os.access(path, os.R_OK):
        raise ConfigFileError(f"Corrosion config file not readable: {path}")
    return path


def get_config(settings: Settings | None = None) -> ResolvedConfig:
    """Resolve every setting without raising."""
    settings = settings or Settings()
    resolved = ResolvedConfig(timeout=settings.timeout)
    try:
        resolved.binary_path = get_binary_path(settings=settings)
    except ConfigurationError as e:
        resolved.binary_error = str(e)
    try:
        resolved.config_path = get_config_path(settings=settings)
    except ConfigurationError as e:
        resolved.config_error = str(e)
    return resolved


def validate(settings: Settings | None = None) -> list[str]:
    """Collect every configuration problem.

    Returns:
        Error messages, binary first; empty when the configuration is usable
    """
    resolved = get_config(settings)
    errors: list[str] = []

    if resolved.binary_path is None:
        errors.append(resolved.binary_error or "Corrosion binary path not configured.")
    else:
        try:
            validate_binary(resolved.binary_path)
        except CorroError as e:
            errors.append(str(e))

    if resolved.config_path is None:
        errors.append(resolved.config_error or "Corrosion config path not configured.")
    else:
        try:
            validate_config_file(resolved.config_path)
        except CorroError as e:
            errors.append(str(e))

    return errors
