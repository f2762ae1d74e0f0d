# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Decoder for corrosion's JSON output.

Corrosion prints structured results in one of three shapes:

1. A single JSON object: ``{"id": "abc123", "state": {...}}``
2. A JSON array: ``[{"id": "abc123"}, {"id": "def456"}]``
3. Concatenated objects: ``{"id": "abc123"}\\n{"id": "def456"}``

Shape 3 is split lexically at every ``}`` followed by optional whitespace and a
``{``. The scan does not track string quoting, so a string value containing a
literal ``}{`` is split in the wrong place. Corrosion does not emit such values.
Nesting deeper than the interpreter recursion limit is reported as a malformed
chunk.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Union

from corrocli.exceptions import MalformedChunkError, OutputEncodingError
from corrocli.logging import get_logger

log = get_logger(__name__)

__all__ = ["JsonRecord", "JsonValue", "Transform", "decode_json_stream", "split_concatenated"]

JsonValue = Union[str, int, float, bool, None, dict[str, "JsonValue"], list["JsonValue"]]
JsonRecord = dict[str, Any]
Transform = Callable[[JsonRecord], JsonRecord]

# Same set as the regex class \s
_WHITESPACE = frozenset(" \t\n\r\f\v")


def _identity(record: JsonRecord) -> JsonRecord:
    return record


def split_concatenated(text: str) -> list[str]:
    """Split concatenated JSON object literals.

    Braces stay with their chunks; whitespace between ``}`` and ``{`` belongs
    to neither chunk.
    """
    chunks: list[str] = []
    start = 0
    i = text.find("}")
    while i != -1:
        j = i + 1
        while j < len(text) and text[j] in _WHITESPACE:
            j += 1
        if j < len(text) and text[j] == "{":
            chunks.append(text[start : i + 1])
            start = j
            i = text.find("}", j)
        else:
            i = text.find("}", i + 1)
    chunks.append(text[start:])
    return chunks


def _parse_chunks(text: str) -> list[JsonRecord]:
    objects: list[JsonRecord] = []
    for index, chunk in enumerate(split_concatenated(text)):
        try:
            parsed = json.loads(chunk.strip())
        except (json.JSONDecodeError, RecursionError) as e:
            raise MalformedChunkError(chunk, e, index) from e
        if not isinstance(parsed, dict):
            raise MalformedChunkError(chunk, TypeError(f"expected object, got {type(parsed).__name__}"), index)
        objects.append(parsed)
    return objects


def decode_json_stream(raw: str | bytes | None, transform: Transform | None = None) -> list[JsonRecord]:
    """Decode corrosion output into a list of records.

    Args:
        raw: Command output; None or blank yields an empty list (single-node
            clusters legitimately print nothing)
        transform: Applied to every record, in input order

    Returns:
        Records in the order they appear in ``raw``

    Raises:
        OutputEncodingError: If ``raw`` is bytes that are not valid UTF-8
        MalformedChunkError: If any concatenated chunk is not a JSON object.
            Nothing is returned for the chunks that did parse.
    """
    if raw is None:
        return []
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise OutputEncodingError(e) from e

    text = raw.strip()
    if not text:
        return []

    fn = transform or _identity

    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        pass
    except RecursionError as e:
        raise MalformedChunkError(text, e, 0) from e
    else:
        if isinstance(value, dict):
            return [fn(value)]
        if isinstance(value, list):
            return [fn(item) for item in value]

    # Not a lone object or array: concatenated objects, or a bare scalar which
    # the chunk parser rejects.
    log.debug("json_concatenated_fallback", length=len(text))
    objects = _parse_chunks(text)
    return [fn(obj) for obj in objects]
