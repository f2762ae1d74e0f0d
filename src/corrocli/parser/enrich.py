# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Display-oriented enrichment of decoded corrosion records.

Each ``enrich_*`` function is a decoder transform: it takes one record and
returns a copy with extra keys. The input record is never mutated.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from corrocli.defaults import RECENT_WINDOW_SECONDS
from corrocli.logging import get_logger
from corrocli.parser.stream import JsonRecord, Transform, decode_json_stream
from corrocli.timestamps import format_timestamp, is_recent, is_recent_at

log = get_logger(__name__)

STATUS_BADGE_CLASSES = {
    "active": "badge badge-sm badge-success",
    "connected": "badge badge-sm badge-info",
    "reachable": "badge badge-sm badge-warning",
}
DEFAULT_BADGE_CLASS = "badge badge-sm badge-neutral"

TIMESTAMP_FIELDS = ("ts", "created_at", "updated_at")

SHORT_ID_LENGTH = 8

_DEV_NODE = re.compile(r"node\d+")


class MemberSummary(BaseModel):
    """Key facts about one cluster member."""

    id: Any = "unknown"
    address: Any = "unknown"
    status: str = "unknown"
    cluster_id: Any = None
    ring: Any = None
    last_sync: str = "never"
    avg_rtt: float | None = None
    rtt_samples: int = 0


def _state(member: JsonRecord) -> dict[str, Any]:
    state = member.get("state")
    return state if isinstance(state, dict) else {}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _short_id(member_id: Any) -> Any:
    if isinstance(member_id, str) and len(member_id) > SHORT_ID_LENGTH:
        return member_id[:SHORT_ID_LENGTH] + "..."
    return member_id or "unknown"


def _member_status(state: dict[str, Any], addr: Any) -> str:
    if state.get("last_sync_ts") is not None:
        return "active"
    if state.get("ts") is not None:
        return "connected"
    if addr != "unknown":
        return "reachable"
    return "unknown"


def enrich_member(member: JsonRecord) -> JsonRecord:
    """Add ``display_*`` fields to a ``cluster members`` record."""
    state = _state(member)
    rtts = member.get("rtts") or []

    addr = state.get("addr", "unknown")
    status = _member_status(state, addr)

    numeric_rtts = [r for r in rtts if _is_number(r)] if isinstance(rtts, list) else []
    rtt_avg = round(sum(numeric_rtts) / len(numeric_rtts), 1) if numeric_rtts else 0.0

    last_sync_ts = state.get("last_sync_ts")
    if isinstance(last_sync_ts, int) and not isinstance(last_sync_ts, bool):
        last_sync = format_timestamp(last_sync_ts)
    else:
        last_sync = "never"

    return {
        **member,
        "display_id": _short_id(member.get("id")),
        "display_addr": addr,
        "display_status": status,
        "display_cluster_id": state.get("cluster_id", "?"),
        "display_ring": state.get("ring", "?"),
        "display_rtt_avg": rtt_avg,
        "display_rtt_count": len(numeric_rtts),
        "display_last_sync": last_sync,
        "display_status_class": STATUS_BADGE_CLASSES.get(status, DEFAULT_BADGE_CLASS),
    }


def add_formatted_timestamps(record: JsonRecord) -> JsonRecord:
    """Add ``formatted_<field>`` for each integer timestamp field present."""
    enriched = dict(record)
    for field in TIMESTAMP_FIELDS:
        value = record.get(field)
        if isinstance(value, int) and not isinstance(value, bool):
            enriched[f"formatted_{field}"] = format_timestamp(value)
    return enriched


def compute_health(status: JsonRecord) -> str:
    if status.get("error"):
        return "unhealthy"
    if status.get("warning"):
        return "degraded"
    return "healthy"


def enrich_cluster_info(info: JsonRecord) -> JsonRecord:
    """Transform for ``cluster info`` records."""
    return add_formatted_timestamps(info)


def enrich_status(status: JsonRecord) -> JsonRecord:
    """Transform for ``cluster status`` records."""
    enriched = add_formatted_timestamps(status)
    enriched["overall_health"] = compute_health(status)
    return enriched


def _decode_records(output: str | bytes | None, enrich: Transform, kind: str) -> list[JsonRecord]:
    if output is None:
        log.debug("cluster_output_missing", kind=kind)
        return []
    records = decode_json_stream(output)
    objects = [r for r in records if isinstance(r, dict)]
    if len(objects) != len(records):
        log.warning("non_object_records_skipped", kind=kind, skipped=len(records) - len(objects))
    return [enrich(r) for r in objects]


def parse_cluster_members(output: str | bytes | None) -> list[JsonRecord]:
    """Decode ``corrosion cluster members`` output with display fields.

    Empty output (a single-node cluster) yields an empty list. Array elements
    that are not objects are skipped.
    """
    return _decode_records(output, enrich_member, "members")


def parse_cluster_info(output: str | bytes | None) -> list[JsonRecord]:
    """Decode ``corrosion cluster info`` output."""
    return _decode_records(output, enrich_cluster_info, "info")


def parse_cluster_status(output: str | bytes | None) -> list[JsonRecord]:
    """Decode ``corrosion cluster status`` output."""
    return _decode_records(output, enrich_status, "status")


def summarize_member(member: JsonRecord) -> MemberSummary:
    """Collect the display fields of an enriched member."""
    return MemberSummary(
        id=member.get("display_id", "unknown"),
        address=member.get("display_addr", "unknown"),
        status=member.get("display_status", "unknown"),
        cluster_id=member.get("display_cluster_id"),
        ring=member.get("display_ring"),
        last_sync=member.get("display_last_sync", "never"),
        avg_rtt=member.get("display_rtt_avg"),
        rtt_samples=member.get("display_rtt_count", 0),
    )


def is_active_member(member: JsonRecord, now: datetime | None = None) -> bool:
    """Check that a member synced within five minutes and has an address.

    Args:
        member: Decoded member record
        now: Reference time; the wall clock when None
    """
    state = _state(member)
    last_sync_ts = state.get("last_sync_ts")
    if now is None:
        recent = is_recent(last_sync_ts, RECENT_WINDOW_SECONDS)
    else:
        recent = is_recent_at(last_sync_ts, now, RECENT_WINDOW_SECONDS)

    addr = state.get("addr")
    return recent and isinstance(addr, str) and len(addr) > 0


def extract_region_from_node_id(node_id: Any) -> str:
    """Guess a region from a node id.

    ``"ams-machine123"`` -> ``"ams"``, ``"node1"`` -> ``"dev"``, anything else
    -> ``"unknown"``.
    """
    if not isinstance(node_id, str):
        return "unknown"
    parts = node_id.split("-", 1)
    if len(parts) == 2 and 2 <= len(parts[0]) <= 4:
        return parts[0]
    if _DEV_NODE.fullmatch(node_id):
        return "dev"
    return "unknown"


def extract_cluster_regions(members: Iterable[JsonRecord]) -> dict[str, str]:
    """Map member id -> region, skipping members without an id."""
    regions: dict[str, str] = {}
    for member in members:
        member_id = member.get("id", "unknown")
        if member_id == "unknown":
            continue
        regions[member_id] = extract_region_from_node_id(member_id)
    return regions
