# eph_tiles/exceptions.py
"""Custom exception types for the eph_tiles library."""

from typing import Optional

class EphError(Exception):
    """Base exception for all errors raised by this library."""
    pass

class FormatError(EphError):
    """
    The container framing is invalid: bad magic, unsupported version,
    truncated or overrunning chunk, or a structure running past its buffer.

    Fatal to the whole decode.
    """
    pass

class DecompressionError(EphError):
    """
    A compressed block could not be inflated to its declared size.

    Local to one block. The framing advance is known even when the data is
    not, so the caller may resume reading at `next_offset`.

    Attributes:
        next_offset (int): Offset just past the bad block.
        expected_size (int): The declared uncompressed size.
        actual_size (int | None): Bytes produced by inflate, if it completed.
    """
    def __init__(
        self,
        message: str,
        *,
        next_offset: int,
        expected_size: int,
        actual_size: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.next_offset = next_offset
        self.expected_size = expected_size
        self.actual_size = actual_size

    def __str__(self) -> str:
        return f"{self.message} (expected_size={self.expected_size}, next_offset={self.next_offset})"

class SchemaError(EphError):
    """
    An expected column is missing from a table, or present with a different
    type.

    Attributes:
        column (str): Name of the offending column.
    """
    def __init__(self, message: str, *, column: str):
        super().__init__(message)
        self.message = message
        self.column = column

    def __str__(self) -> str:
        return f"{self.message} (column='{self.column}')"
