# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import stat
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

MEMBERS_OUTPUT = (
    '{"id": "94bfbec2a1b5c3d4", "state": {"addr": "127.0.0.1:8787", "cluster_id": 0, "ring": 1, '
    '"last_sync_ts": 7517054269677675168}, "rtts": [10, 15]}\n'
    '{"id": "node2", "state": {"addr": "127.0.0.1:8788"}, "rtts": null}\n'
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CORROSION_* variables and installed binaries out of tests."""
    for name in ("CORROSION_BINARY_PATH", "CORROSION_CONFIG_PATH", "CORROSION_TIMEOUT", "CORROSION_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("corrocli.config.discover_binary", lambda *args, **kwargs: None)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo configure_logging calls made by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def members_output() -> str:
    """Two concatenated `cluster members` records."""
    return MEMBERS_OUTPUT


@pytest.fixture
def make_binary(tmp_path: Path) -> Callable[[str], Path]:
    """Write an executable shell script standing in for corrosion."""

    def _make(body: str, name: str = "corrosion") -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Minimal corrosion config file."""
    path = tmp_path / "config.toml"
    path.write_text('[api]\naddr = "127.0.0.1:8081"\n')
    return path


@pytest.fixture
def members_binary(make_binary: Callable[[str], Path], tmp_path: Path) -> Path:
    """Fake corrosion that prints two concatenated member records."""
    output = tmp_path / "members.out"
    output.write_text(MEMBERS_OUTPUT)
    return make_binary(f'cat "{output}"')
