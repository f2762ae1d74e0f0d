# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Python interface to the corrosion database CLI.

Runs ``corrosion`` commands, decodes their concatenated JSON output, and
converts the uhlc NTP64 timestamps found in it.

Public API:
    - run_command / run_command_async and the cluster_* shortcuts
    - decode_json_stream and the parse_cluster_* parsers
    - Timestamp codec: decode_timestamp, encode_timestamp, format_timestamp, is_recent
    - Settings and the exception hierarchy
"""

from corrocli.exceptions import (
    BinaryNotExecutableError,
    BinaryNotFoundError,
    CommandFailedError,
    CommandTimeoutError,
    ConfigFileError,
    ConfigurationError,
    CorroError,
    DecodeError,
    InvalidTimestampError,
    MalformedChunkError,
    OutputEncodingError,
)
from corrocli.parser import (
    MemberSummary,
    decode_json_stream,
    extract_cluster_regions,
    extract_region_from_node_id,
    is_active_member,
    parse_cluster_info,
    parse_cluster_members,
    parse_cluster_status,
    summarize_member,
)
from corrocli.runner import (
    cluster_info,
    cluster_info_async,
    cluster_members,
    cluster_members_async,
    cluster_status,
    cluster_status_async,
    run_command,
    run_command_async,
)
from corrocli.settings import Settings
from corrocli.timestamps import (
    decode_timestamp,
    encode_timestamp,
    format_timestamp,
    is_recent,
    is_recent_at,
    now_timestamp,
)

__version__ = "0.1.0"

__all__ = [
    # Commands
    "run_command",
    "run_command_async",
    "cluster_members",
    "cluster_members_async",
    "cluster_info",
    "cluster_info_async",
    "cluster_status",
    "cluster_status_async",
    # Parsing
    "decode_json_stream",
    "parse_cluster_members",
    "parse_cluster_info",
    "parse_cluster_status",
    "MemberSummary",
    "summarize_member",
    "is_active_member",
    "extract_region_from_node_id",
    "extract_cluster_regions",
    # Timestamps
    "decode_timestamp",
    "encode_timestamp",
    "format_timestamp",
    "is_recent",
    "is_recent_at",
    "now_timestamp",
    # Config
    "Settings",
    # Exceptions
    "CorroError",
    "ConfigurationError",
    "BinaryNotFoundError",
    "BinaryNotExecutableError",
    "ConfigFileError",
    "CommandFailedError",
    "CommandTimeoutError",
    "DecodeError",
    "MalformedChunkError",
    "OutputEncodingError",
    "InvalidTimestampError",
]
