# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for corrosion CLI operations."""

from __future__ import annotations


class CorroError(Exception):
    """Base exception for corrocli."""

    pass


class ConfigurationError(CorroError):
    """Binary or config path is not configured."""

    pass


class BinaryNotFoundError(CorroError):
    """Corrosion binary does not exist."""

    pass


class BinaryNotExecutableError(CorroError):
    """Corrosion binary exists but lacks the execute bit."""

    pass


class ConfigFileError(CorroError):
    """Corrosion config file is missing, not a file, or unreadable."""

    pass


class CommandFailedError(CorroError):
    """Corrosion command exited with a non-zero status."""

    def __init__(self, exit_code: int, output: str) -> None:
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"corrosion exited with code {exit_code}: {output.strip()}")


class CommandTimeoutError(CorroError):
    """Corrosion command did not finish in time."""

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"corrosion command timed out after {timeout_ms}ms")


class DecodeError(CorroError):
    """Command output could not be decoded."""

    pass


class OutputEncodingError(DecodeError):
    """Byte output is not valid UTF-8."""

    def __init__(self, cause: UnicodeDecodeError) -> None:
        self.cause = cause
        super().__init__(f"output is not valid UTF-8: {cause}")


class MalformedChunkError(DecodeError):
    """One chunk of concatenated JSON output is not a JSON object.

    Attributes:
        chunk: The offending chunk, verbatim as split from the output
        cause: Underlying parse failure
        index: Zero-based position of the chunk
    """

    def __init__(self, chunk: str, cause: Exception, index: int = 0) -> None:
        self.chunk = chunk
        self.cause = cause
        self.index = index
        preview = chunk if len(chunk) <= 200 else chunk[:200] + "..."
        super().__init__(f"chunk {index} is not a JSON object ({cause}): {preview!r}")


class InvalidTimestampError(CorroError, ValueError):
    """Value is not a representable packed timestamp."""

    pass
