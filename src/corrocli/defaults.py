# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Centralized default values for corrocli."""

from __future__ import annotations

ENV_PREFIX = "CORROSION_"

COMMAND_TIMEOUT_MS = 5_000
RECENT_WINDOW_SECONDS = 300

# Common installation locations first, then development checkouts.
BINARY_SEARCH_PATHS = (
    "/usr/local/bin/corrosion",
    "/usr/bin/corrosion",
    "./corrosion",
    "./corrosion/corrosion",
    "./corrosion/corrosion-mac",
    "./corrosion-mac",
)
