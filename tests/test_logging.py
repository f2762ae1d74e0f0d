# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for logging setup."""

from __future__ import annotations

import pytest
import structlog

from corrocli.exceptions import ConfigurationError
from corrocli.logging import configure_logging, get_logger
from corrocli.settings import Settings


def test_level_from_settings(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(Settings(log_level="info"))
    get_logger(__name__).info("command_prepared", timeout_ms=5000)
    get_logger(__name__).debug("hidden_event")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "command_prepared" in captured.err
    assert "hidden_event" not in captured.err


def test_explicit_level_overrides_settings(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(Settings(log_level="ERROR"), level="debug")
    get_logger(__name__).debug("json_concatenated_fallback")

    assert "json_concatenated_fallback" in capsys.readouterr().err


def test_unknown_level_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Unknown log level: verbose"):
        configure_logging(level="verbose")

    assert not structlog.is_configured()
