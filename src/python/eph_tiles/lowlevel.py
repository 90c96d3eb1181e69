# eph_tiles/lowlevel.py
"""
Low-level access to the raw bytes of a tile file.

This module isolates the two primitives the decoder is built on, fixed-width
little-endian field reads and the deflate inflater, and translates their
failures into the library's own exceptions.
"""

import struct
import zlib
from typing import Any, Tuple, Union

from .exceptions import DecompressionError, FormatError

Buffer = Union[bytes, bytearray, memoryview]

U32 = struct.Struct('<I')
I32 = struct.Struct('<i')
F32 = struct.Struct('<f')
U64 = struct.Struct('<Q')
CHUNK_HEADER = struct.Struct('<4sI')
TILE_HEADER = struct.Struct('<IQ')
BLOCK_HEADER = struct.Struct('<II')
TABLE_HEADER = struct.Struct('<IIII')
COLUMN_ENTRY = struct.Struct('<4s4sIII')

def unpack_from(fmt: struct.Struct, data: Buffer, offset: int) -> Tuple[Any, ...]:
    """
    Unpacks `fmt` at `offset`, raising FormatError if the buffer is too short.

    Negative offsets are rejected rather than counted from the end.
    """
    if offset < 0 or offset + fmt.size > len(data):
        raise FormatError(
            f"Truncated data: need {fmt.size} bytes at offset {offset}, "
            f"buffer holds {len(data)}"
        )
    try:
        return fmt.unpack_from(data, offset)
    except struct.error as e:
        raise FormatError(f"Cannot unpack {fmt.format!r} at offset {offset}: {e}") from e

def take(data: Buffer, offset: int, size: int) -> memoryview:
    """Returns a view of `size` bytes at `offset`, raising FormatError on overrun."""
    if offset < 0 or size < 0 or offset + size > len(data):
        raise FormatError(
            f"Truncated data: need {size} bytes at offset {offset}, "
            f"buffer holds {len(data)}"
        )
    return memoryview(data)[offset:offset + size]

def inflate(src: Buffer, expected_size: int, *, next_offset: int) -> bytes:
    """
    Inflates a zlib stream that must decode to exactly `expected_size` bytes.

    Output is capped one byte past the declared size so an oversized stream
    is detected without being fully expanded.

    Raises:
        DecompressionError: On a corrupt or truncated stream, or a size mismatch.
    """
    decompressor = zlib.decompressobj()
    try:
        raw = decompressor.decompress(bytes(src), expected_size + 1)
    except zlib.error as e:
        raise DecompressionError(
            f"Cannot uncompress data: {e}",
            next_offset=next_offset, expected_size=expected_size
        ) from e

    if not decompressor.eof:
        raise DecompressionError(
            "Cannot uncompress data: stream is truncated or larger than declared",
            next_offset=next_offset, expected_size=expected_size, actual_size=len(raw)
        )
    if len(raw) != expected_size:
        raise DecompressionError(
            f"Cannot uncompress data: got {len(raw)} bytes",
            next_offset=next_offset, expected_size=expected_size, actual_size=len(raw)
        )
    return raw
