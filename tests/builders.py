# tests/builders.py
"""
Helpers assembling tile file bytes for the test suite.
"""
import struct
import zlib
from typing import Iterable, Optional, Sequence, Tuple

from eph_tiles import FILE_VERSION, MAGIC, shuffle

# (name, type, unit, start, size)
ColumnEntry = Tuple[str, str, int, int, int]

def make_chunk(chunk_type: str, payload: bytes, checksum: Optional[int] = None) -> bytes:
    """A chunk with the CRC32 of its payload as trailing checksum."""
    if checksum is None:
        checksum = zlib.crc32(payload) & 0xFFFFFFFF
    return (
        struct.pack('<4sI', chunk_type.encode('ascii'), len(payload))
        + payload
        + struct.pack('<I', checksum)
    )

def make_container(chunks: Iterable[bytes], version: int = FILE_VERSION, magic: bytes = MAGIC) -> bytes:
    return magic + struct.pack('<I', version) + b''.join(chunks)

def make_block(raw: bytes, declared_size: Optional[int] = None) -> bytes:
    """A compressed block; `declared_size` overrides the stored raw size."""
    compressed = zlib.compress(raw)
    size = len(raw) if declared_size is None else declared_size
    return struct.pack('<II', size, len(compressed)) + compressed

def make_tile_header(version: int, nuniq: int) -> bytes:
    return struct.pack('<IQ', version, nuniq)

def make_rows(fmt: str, rows: Sequence[tuple]) -> bytes:
    """Packs `rows` back to back with the struct format `fmt`."""
    return b''.join(struct.pack(fmt, *row) for row in rows)

def make_table(
    columns: Sequence[ColumnEntry],
    rows: bytes,
    row_size: int,
    *,
    shuffled: bool = False
) -> bytes:
    """An explicit (version 3) table: header, column table, row data."""
    n_row = len(rows) // row_size
    if shuffled:
        rows = shuffle(rows, n_row, row_size)
    header = struct.pack('<IIII', 1 if shuffled else 0, row_size, len(columns), n_row)
    entries = b''.join(
        struct.pack('<4s4sIII', name.encode('ascii'), type_tag.encode('ascii'), unit, start, size)
        for name, type_tag, unit, start, size in columns
    )
    return header + entries + rows

def make_tile(version: int, nuniq: int, table: bytes) -> bytes:
    """A tile chunk payload: header followed by the compressed table."""
    return make_tile_header(version, nuniq) + make_block(table)
