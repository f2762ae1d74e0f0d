# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for the concatenated JSON decoder."""

from __future__ import annotations

import json

import pytest

from corrocli.exceptions import DecodeError, MalformedChunkError, OutputEncodingError
from corrocli.parser.stream import decode_json_stream, split_concatenated


@pytest.mark.parametrize("raw", [None, "", "   ", "\n\t \n", b"", b"  \n"])
def test_empty_input_yields_empty_list(raw: str | bytes | None) -> None:
    assert decode_json_stream(raw) == []


def test_single_object() -> None:
    raw = '{"id": "abc123", "state": {"addr": "127.0.0.1:8787"}}'
    records = decode_json_stream(raw)

    assert len(records) == 1
    assert records[0]["id"] == "abc123"
    assert records[0]["state"]["addr"] == "127.0.0.1:8787"


def test_single_object_with_surrounding_whitespace() -> None:
    assert decode_json_stream('\n\n  {"a": 1}  \n') == [{"a": 1}]


def test_bytes_input() -> None:
    assert decode_json_stream('{"name": "zürich"}'.encode()) == [{"name": "zürich"}]


def test_invalid_utf8_bytes() -> None:
    with pytest.raises(OutputEncodingError) as exc_info:
        decode_json_stream(b'{"a": "\xff"}')

    assert isinstance(exc_info.value, DecodeError)
    assert isinstance(exc_info.value.cause, UnicodeDecodeError)


def test_nesting_beyond_recursion_limit() -> None:
    with pytest.raises(MalformedChunkError) as exc_info:
        decode_json_stream("[" * 100000 + "]" * 100000)

    assert isinstance(exc_info.value.cause, RecursionError)


def test_nesting_beyond_recursion_limit_in_concatenated_chunk() -> None:
    raw = '{"a": 1}\n{"b": ' + "[" * 100000 + "]" * 100000 + "}"
    with pytest.raises(MalformedChunkError) as exc_info:
        decode_json_stream(raw)

    assert exc_info.value.index == 1
    assert isinstance(exc_info.value.cause, RecursionError)


def test_array_in_order() -> None:
    records = decode_json_stream('[{"id": "abc123"}, {"id": "def456"}]')
    assert [r["id"] for r in records] == ["abc123", "def456"]


def test_array_is_never_brace_split() -> None:
    # Elements are adjacent objects; the array path must keep them intact.
    records = decode_json_stream('[{"a": {"b": 1}},{"c": 2}]')
    assert records == [{"a": {"b": 1}}, {"c": 2}]


def test_empty_array() -> None:
    assert decode_json_stream("[]") == []


def test_concatenated_objects_newline() -> None:
    raw = (
        '{"id": "abc123", "state": {"addr": "127.0.0.1:8787"}}\n'
        '{"id": "def456", "state": {"addr": "127.0.0.1:8788"}}'
    )
    records = decode_json_stream(raw)

    assert [r["id"] for r in records] == ["abc123", "def456"]
    assert records[1]["state"]["addr"] == "127.0.0.1:8788"


def test_concatenated_objects_arbitrary_whitespace() -> None:
    assert decode_json_stream('{"a":1}\n\n   {"b":2}') == [{"a": 1}, {"b": 2}]
    assert decode_json_stream('{"a":1}   \n\n   {"b":2}') == [{"a": 1}, {"b": 2}]


def test_concatenated_objects_no_whitespace() -> None:
    assert decode_json_stream('{"a":1}{"b":2}{"c":3}') == [{"a": 1}, {"b": 2}, {"c": 3}]


def test_concatenated_nested_objects() -> None:
    raw = '{"a": {"x": {"y": 1}}}\r\n{"b": [{"z": 2}]}'
    assert decode_json_stream(raw) == [{"a": {"x": {"y": 1}}}, {"b": [{"z": 2}]}]


def test_concatenated_preserves_order_of_many() -> None:
    raw = "\n".join(json.dumps({"n": n}) for n in range(50))
    assert [r["n"] for r in decode_json_stream(raw)] == list(range(50))


def test_invalid_json_reports_chunk() -> None:
    with pytest.raises(MalformedChunkError) as exc_info:
        decode_json_stream('{"a": invalid}')

    err = exc_info.value
    assert err.chunk == '{"a": invalid}'
    assert err.index == 0
    assert isinstance(err.cause, json.JSONDecodeError)
    assert isinstance(err, DecodeError)


def test_invalid_chunk_is_all_or_nothing() -> None:
    raw = '{"a": 1}\n{"b": oops}\n{"c": 3}'
    with pytest.raises(MalformedChunkError) as exc_info:
        decode_json_stream(raw)

    assert exc_info.value.chunk == '{"b": oops}'
    assert exc_info.value.index == 1


def test_non_object_chunk_rejected() -> None:
    with pytest.raises(MalformedChunkError, match="expected object"):
        decode_json_stream("42")


def test_transform_applied_to_object() -> None:
    records = decode_json_stream('{"id": "abc123"}', lambda obj: {**obj, "enhanced": True})
    assert records == [{"id": "abc123", "enhanced": True}]


def test_transform_applied_in_order_for_each_shape() -> None:
    seen: list[int] = []

    def record(obj: dict) -> dict:
        seen.append(obj["n"])
        return {"m": obj["n"] * 10}

    assert decode_json_stream('[{"n": 1}, {"n": 2}]', record) == [{"m": 10}, {"m": 20}]
    assert decode_json_stream('{"n": 3}\n{"n": 4}', record) == [{"m": 30}, {"m": 40}]
    assert seen == [1, 2, 3, 4]


def test_transform_not_called_when_a_chunk_fails() -> None:
    calls: list[dict] = []

    def record(obj: dict) -> dict:
        calls.append(obj)
        return obj

    with pytest.raises(MalformedChunkError):
        decode_json_stream('{"a": 1}{"b": }', record)
    assert calls == []


def test_split_keeps_braces_and_drops_separator_whitespace() -> None:
    assert split_concatenated('{"a":1} \n\t {"b":2}') == ['{"a":1}', '{"b":2}']


def test_split_without_boundary_returns_whole_text() -> None:
    assert split_concatenated('{"a": {"b": 1}}') == ['{"a": {"b": 1}}']


def test_split_ignores_brace_not_followed_by_open_brace() -> None:
    assert split_concatenated('{"a": {"b": 1} }{"c": 2}') == ['{"a": {"b": 1} }', '{"c": 2}']


def test_split_is_not_quote_aware() -> None:
    # Known limitation: a literal "}{" inside a string is treated as a boundary.
    raw = '{"note": "a}{b"}'
    assert split_concatenated(raw) == ['{"note": "a}', '{b"}']
    # A lone object still parses on the first attempt.
    assert decode_json_stream(raw) == [{"note": "a}{b"}]


def test_quoted_boundary_in_concatenated_output_fails() -> None:
    with pytest.raises(MalformedChunkError):
        decode_json_stream('{"note": "a}{b"}\n{"c": 1}')
