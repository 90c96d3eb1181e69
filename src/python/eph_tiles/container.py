# eph_tiles/container.py
"""
Walking the EPHE container and reading the structures chunks are made of.

Layout (all integers little-endian):

    container := "EPHE" u32:version chunk*
    chunk     := char[4]:type u32:len byte[len]:payload u32:checksum

Chunk payloads are opaque here. Callers recognise the chunk type and then
use `read_tile_header`, `read_compressed_block` and `eph_tiles.table` to
interpret them.
"""
import logging
import zlib
from typing import Any, Callable, Iterator, Optional, Tuple

from . import lowlevel
from .dataclasses import Chunk, TileHeader
from .exceptions import DecompressionError, FormatError
from .lowlevel import Buffer
from .types import (
    BLOCK_HEADER_SIZE,
    CHUNK_HEADER_SIZE,
    CHUNK_OVERHEAD,
    FILE_VERSION,
    MAGIC,
    TILE_HEADER_SIZE,
)

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str, memoryview, int, Any], Any]


def read_file_header(data: Buffer) -> int:
    """
    Validates the magic tag and version of a container.

    Returns:
        The container version.

    Raises:
        FormatError: If the buffer is too short, the tag is not "EPHE", or the
                     version is not supported.
    """
    if len(data) < len(MAGIC) + lowlevel.U32.size:
        raise FormatError(f"Container too short: {len(data)} bytes")
    if bytes(data[:len(MAGIC)]) != MAGIC:
        raise FormatError(f"Bad magic tag {bytes(data[:len(MAGIC)])!r}, expected {MAGIC!r}")
    (version,) = lowlevel.unpack_from(lowlevel.U32, data, len(MAGIC))
    if version != FILE_VERSION:
        raise FormatError(f"Unsupported container version {version}, expected {FILE_VERSION}")
    return version


def iter_chunks(data: Buffer, *, check_checksums: bool = False) -> Iterator[Chunk]:
    """
    Yields the chunks of a container, in file order.

    The chunks must partition the bytes after the header exactly. Errors in
    the framing are raised when the walk reaches them, so chunks before a
    bad one have already been yielded.

    Args:
        data: The whole container.
        check_checksums: If True, verifies each chunk's trailing CRC32 of its
                         payload. The checksum is not verified by default.

    Raises:
        FormatError: On a bad header, a truncated or overrunning chunk, or a
                     checksum mismatch in strict mode.
    """
    view = memoryview(data)
    read_file_header(view)
    offset = len(MAGIC) + lowlevel.U32.size
    end = len(view)

    while offset != end:
        remaining = end - offset
        if remaining < CHUNK_HEADER_SIZE:
            raise FormatError(
                f"Truncated chunk header at offset {offset}: {remaining} bytes left"
            )
        raw_type, size = lowlevel.unpack_from(lowlevel.CHUNK_HEADER, view, offset)
        if CHUNK_OVERHEAD + size > remaining:
            raise FormatError(
                f"Chunk at offset {offset} declares {size} bytes, "
                f"only {remaining - CHUNK_OVERHEAD} available"
            )

        payload_offset = offset + CHUNK_HEADER_SIZE
        payload = view[payload_offset:payload_offset + size]
        (checksum,) = lowlevel.unpack_from(lowlevel.U32, view, payload_offset + size)
        chunk_type = raw_type.decode('ascii', errors='replace')

        if check_checksums:
            actual = zlib.crc32(payload) & 0xFFFFFFFF
            if actual != checksum:
                raise FormatError(
                    f"Checksum mismatch in chunk '{chunk_type}' at offset {offset}: "
                    f"stored {checksum:#010x}, computed {actual:#010x}"
                )

        logger.debug("Chunk '%s' at offset %d, %d bytes", chunk_type, offset, size)
        yield Chunk(
            type=chunk_type,
            data=payload,
            size=size,
            offset=payload_offset,
            checksum=checksum,
        )
        offset += CHUNK_OVERHEAD + size


def load(
    data: Buffer,
    callback: ChunkCallback,
    user: Optional[Any] = None,
    *,
    check_checksums: bool = False
) -> None:
    """
    Walks a container, calling `callback(type, payload, size, user)` per chunk.

    The callback's return value is ignored; a callback that needs to stop the
    walk early must raise.

    Raises:
        FormatError: See `iter_chunks`.
    """
    for chunk in iter_chunks(data, check_checksums=check_checksums):
        callback(chunk.type, chunk.data, chunk.size, user)


def read_tile_header(data: Buffer, offset: int = 0) -> Tuple[TileHeader, int]:
    """
    Reads a tile header (u32 version, u64 nuniq) at `offset`.

    Returns:
        The decoded header and the offset just past it.

    Raises:
        FormatError: If fewer than 12 bytes remain or nuniq is not a valid
                     NUNIQ index.
    """
    version, nuniq = lowlevel.unpack_from(lowlevel.TILE_HEADER, data, offset)
    if nuniq < 4:
        raise FormatError(f"Invalid nuniq {nuniq} in tile header at offset {offset}")
    # order = floor(log2(nuniq / 4) / 2), in exact integer arithmetic.
    order = ((nuniq // 4).bit_length() - 1) // 2
    pix = nuniq - 4 * (1 << (2 * order))
    header = TileHeader(version=version, nuniq=nuniq, order=order, pix=pix)
    return header, offset + TILE_HEADER_SIZE


def read_compressed_block(data: Buffer, offset: int = 0) -> Tuple[bytes, int]:
    """
    Reads and inflates a compressed block (u32 raw size, u32 compressed size,
    zlib stream) at `offset`.

    Returns:
        The inflated bytes, exactly the declared size, and the offset just
        past the block.

    Raises:
        FormatError: If the block header or compressed payload overruns `data`.
        DecompressionError: If the stream cannot be inflated to the declared
                            size. Its `next_offset` is the offset just past
                            the block, so reading can continue.
    """
    raw_size, comp_size = lowlevel.unpack_from(lowlevel.BLOCK_HEADER, data, offset)
    start = offset + BLOCK_HEADER_SIZE
    next_offset = start + comp_size
    compressed = lowlevel.take(data, start, comp_size)
    try:
        raw = lowlevel.inflate(compressed, raw_size, next_offset=next_offset)
    except DecompressionError:
        logger.error("Cannot uncompress data at offset %d", offset)
        raise
    return raw, next_offset
