# eph_tiles/types.py

"""
Core enumerations and format constants for the eph_tiles library.
"""
from enum import Enum, IntFlag

MAGIC = b"EPHE"
FILE_VERSION = 2

# Fixed sizes of the on-disk structures, in bytes.
CHUNK_HEADER_SIZE = 8       # type tag + payload length
CHUNK_OVERHEAD = 12         # header + trailing checksum
TILE_HEADER_SIZE = 12       # version + nuniq
BLOCK_HEADER_SIZE = 8       # raw size + compressed size
TABLE_HEADER_SIZE = 16      # flags, row size, column count, row count
COLUMN_ENTRY_SIZE = 20      # name, type, unit, start, size

# First table version carrying an explicit column table.
EXPLICIT_TABLE_VERSION = 3

# Legacy DSO rows were never shuffled by the writer.
LEGACY_UNSHUFFLED_ROW_SIZE = 104


class ColumnType(str, Enum):
    """
    Type tag of a table column, stored as the first byte of the on-disk
    4-byte type field.
    """
    INT32 = 'i'
    FLOAT32 = 'f'
    UINT64 = 'Q'
    STRING = 's'


class Unit(IntFlag):
    """
    Unit bitmask of a float column.

    Each bit is an independent scale family; a cleared bit means the base
    unit (radians, per day).
    """
    DEG = 1 << 0
    ARCMIN = 1 << 1
    ARCSEC = 1 << 2
    PER_YEAR = 1 << 3


class TableFlags(IntFlag):
    """Flags of the explicit table header."""
    SHUFFLED = 1 << 0
