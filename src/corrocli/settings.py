# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from corrocli.defaults import COMMAND_TIMEOUT_MS, ENV_PREFIX


class Settings(BaseSettings):
    """Settings read from ``CORROSION_*`` environment variables.

    ``CORROSION_BINARY_PATH``, ``CORROSION_CONFIG_PATH``, ``CORROSION_TIMEOUT``
    (milliseconds) and ``CORROSION_LOG_LEVEL``.
    """

    binary_path: Path | None = None
    config_path: Path | None = None
    timeout: int = Field(default=COMMAND_TIMEOUT_MS, gt=0)
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
    )
