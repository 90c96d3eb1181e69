# eph_tiles/__init__.py
"""
Reader for EPHE tile files: chunked, compressed, byte-shuffled astronomical
catalog tables indexed by HiPS tile.
"""
from .file import Reader, open
from .types import ColumnType, Unit, TableFlags, MAGIC, FILE_VERSION
from .dataclasses import Chunk, ColumnSpec, FileHeaderInfo, ResolvedColumn, TableLayout, TileHeader
from .exceptions import EphError, FormatError, DecompressionError, SchemaError
from .container import iter_chunks, load, read_compressed_block, read_tile_header
from .table import Table, read_row, resolve_table
from .units import convert_unit
from ._internal.shuffle import shuffle, unshuffle
from .convenience import load_tiles, read_tile

__version__ = "0.0.1"

# Define what gets imported with 'from eph_tiles import *'
__all__ = [
    'open',
    'Reader',
    'ColumnType',
    'Unit',
    'TableFlags',
    'MAGIC',
    'FILE_VERSION',
    'Chunk',
    'ColumnSpec',
    'FileHeaderInfo',
    'ResolvedColumn',
    'TableLayout',
    'TileHeader',
    'EphError',
    'FormatError',
    'DecompressionError',
    'SchemaError',
    'iter_chunks',
    'load',
    'read_tile_header',
    'read_compressed_block',
    'Table',
    'resolve_table',
    'read_row',
    'convert_unit',
    'shuffle',
    'unshuffle',
    'read_tile',
    'load_tiles',
    '__version__',
]
