# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Parsing of corrosion command output.

Public API:
    - decode_json_stream: raw output -> list of records
    - parse_cluster_members / parse_cluster_info / parse_cluster_status
    - enrichment and summary helpers
"""

from corrocli.parser.enrich import (
    MemberSummary,
    enrich_cluster_info,
    enrich_member,
    enrich_status,
    extract_cluster_regions,
    extract_region_from_node_id,
    is_active_member,
    parse_cluster_info,
    parse_cluster_members,
    parse_cluster_status,
    summarize_member,
)
from corrocli.parser.stream import JsonRecord, JsonValue, decode_json_stream, split_concatenated

__all__ = [
    # Decoder
    "JsonRecord",
    "JsonValue",
    "decode_json_stream",
    "split_concatenated",
    # Command parsers
    "parse_cluster_members",
    "parse_cluster_info",
    "parse_cluster_status",
    # Enrichment
    "MemberSummary",
    "enrich_member",
    "enrich_cluster_info",
    "enrich_status",
    "summarize_member",
    "is_active_member",
    "extract_region_from_node_id",
    "extract_cluster_regions",
]
