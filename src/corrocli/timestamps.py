# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fixed-point 64-bit timestamps as emitted by corrosion.

Corrosion stamps records with uhlc NTP64 values:
- Upper 32 bits: whole seconds since the Unix epoch (not the NTP epoch)
- Lower 32 bits: fractional seconds, 1 unit = 1/2**32 s

Decoding truncates the fraction to microseconds, the resolution of ``datetime``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from corrocli.defaults import RECENT_WINDOW_SECONDS
from corrocli.exceptions import InvalidTimestampError

__all__ = [
    "FRACTION_MASK",
    "FRACTION_SCALE",
    "decode_timestamp",
    "encode_timestamp",
    "format_timestamp",
    "is_recent",
    "is_recent_at",
    "now_timestamp",
]

FRACTION_SCALE = 1 << 32
FRACTION_MASK = 0xFFFFFFFF
MAX_PACKED = (1 << 64) - 1
MICROS_PER_SECOND = 1_000_000

NEVER = "Never"
INVALID = "Invalid timestamp"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def decode_timestamp(packed: int) -> datetime:
    """Convert a packed timestamp to an aware UTC datetime.

    Args:
        packed: Unsigned 64-bit packed value

    Returns:
        Datetime with microsecond precision

    Raises:
        InvalidTimestampError: If packed is not an unsigned 64-bit integer or
            its seconds half is out of datetime range
    """
    if not _is_int(packed):
        raise InvalidTimestampError(f"timestamp must be an integer, got {type(packed).__name__}")
    if packed < 0 or packed > MAX_PACKED:
        raise InvalidTimestampError(f"timestamp out of unsigned 64-bit range: {packed}")

    seconds = packed >> 32
    fraction = packed & FRACTION_MASK
    microseconds = fraction * MICROS_PER_SECOND // FRACTION_SCALE

    try:
        instant = _EPOCH + timedelta(seconds=seconds)
    except OverflowError as e:
        raise InvalidTimestampError(f"timestamp seconds out of range: {seconds}") from e
    return instant.replace(microsecond=microseconds)


def encode_timestamp(instant: datetime) -> int:
    """Pack a datetime into a fixed-point 64-bit timestamp.

    Naive datetimes are taken as UTC. The fraction is rounded up so that
    ``decode_timestamp(encode_timestamp(x)) == x`` at microsecond precision.

    Raises:
        InvalidTimestampError: If the instant predates the epoch or needs more
            than 32 bits of seconds
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)

    whole = instant.replace(microsecond=0)
    unix_seconds = (whole - _EPOCH) // timedelta(seconds=1)
    if unix_seconds < 0 or unix_seconds > FRACTION_MASK:
        raise InvalidTimestampError(f"instant not representable as a packed timestamp: {instant.isoformat()}")

    # Ceiling division: floor would lose a microsecond on decode.
    fraction = -(-instant.microsecond * FRACTION_SCALE // MICROS_PER_SECOND)
    return (unix_seconds << 32) | fraction


def now_timestamp() -> int:
    """Current time as a packed timestamp."""
    return encode_timestamp(datetime.now(timezone.utc))


def format_timestamp(value: Any) -> str:
    """Format a packed timestamp for display. Never raises.

    Returns:
        ``"Never"`` for None, ``"Invalid timestamp"`` for anything that does not
        decode, else ``"YYYY-MM-DD HH:MM:SS UTC"``
    """
    if value is None:
        return NEVER
    try:
        instant = decode_timestamp(value)
    except InvalidTimestampError:
        return INVALID
    return instant.strftime(DISPLAY_FORMAT)


def is_recent_at(packed: Any, now: datetime, window_seconds: int = RECENT_WINDOW_SECONDS) -> bool:
    """Check whether ``packed`` lies within ``window_seconds`` before ``now``.

    The difference is taken in whole seconds. Timestamps in the future count as
    recent. Undecodable values are never recent.
    """
    if not _is_int(window_seconds) or window_seconds <= 0:
        raise ValueError(f"window_seconds must be a positive integer, got {window_seconds!r}")
    try:
        instant = decode_timestamp(packed)
    except InvalidTimestampError:
        return False

    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = (now - instant) // timedelta(seconds=1)
    return elapsed <= window_seconds


def is_recent(packed: Any, window_seconds: int = RECENT_WINDOW_SECONDS) -> bool:
    """Check recency of ``packed`` against the current wall clock."""
    return is_recent_at(packed, datetime.now(timezone.utc), window_seconds)
