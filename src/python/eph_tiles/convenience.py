# eph_tiles/convenience.py
"""
High-level convenience functions for the common tile chunk layout:

    tile header | compressed block holding one table
"""
import logging
import os
from typing import Iterator, Sequence, Tuple, Union

from . import open as eph_open
from .container import read_compressed_block, read_tile_header
from .dataclasses import ColumnSpec, TileHeader
from .exceptions import DecompressionError
from .lowlevel import Buffer
from .table import Table, resolve_table

logger = logging.getLogger(__name__)

def read_tile(
    payload: Buffer,
    *,
    columns: Sequence[ColumnSpec],
    row_size: int = 0
) -> Tuple[TileHeader, Table]:
    """
    Decodes a tile chunk payload into its header and table.

    The tile header's version selects the table schema.

    Args:
        payload: The chunk payload.
        columns: The expected columns, in the order rows are returned.
        row_size: Row size in bytes, needed for legacy (version < 3) tiles.

    Returns:
        The tile header and the resolved table.

    Raises:
        FormatError, DecompressionError, SchemaError: See the underlying readers.
    """
    header, offset = read_tile_header(payload, 0)
    raw, _ = read_compressed_block(payload, offset)
    table, _ = resolve_table(header.version, raw, 0, row_size, columns)
    return header, table


def load_tiles(
    filepath: Union[str, os.PathLike],
    chunk_type: str,
    *,
    columns: Sequence[ColumnSpec],
    row_size: int = 0,
    skip_corrupt: bool = False,
    check_checksums: bool = False
) -> Iterator[Tuple[TileHeader, Table]]:
    """
    Decodes every tile chunk of type `chunk_type` in a file.

    Chunks of other types are skipped.

    Args:
        filepath: The path to the tile file.
        chunk_type: The 4-character chunk type of the tiles (e.g. 'STAR').
        columns: The expected columns, in the order rows are returned.
        row_size: Row size in bytes, needed for legacy (version < 3) tiles.
        skip_corrupt: If True, tiles whose block cannot be inflated are
                      logged and skipped instead of raising.
        check_checksums: If True, verifies each chunk's CRC32.

    Yields:
        (TileHeader, Table) pairs in file order.
    """
    with eph_open(filepath, check_checksums=check_checksums) as f:
        for chunk in f.chunks_of_type(chunk_type):
            try:
                yield read_tile(chunk.data, columns=columns, row_size=row_size)
            except DecompressionError as e:
                if not skip_corrupt:
                    raise
                logger.warning("Skipping corrupt tile at offset %d: %s", chunk.offset, e)
