# tests/test_convenience.py
"""
Tests for the high-level functions in eph_tiles.convenience.
"""
import logging
import pytest
from pathlib import Path

from eph_tiles import DecompressionError, SchemaError, ColumnSpec, load_tiles, read_tile, shuffle

from builders import make_block, make_chunk, make_container, make_rows, make_tile, make_tile_header
from conftest import STAR_ROWS, STAR_TILES

def test_read_tile_explicit(star_table: bytes, star_columns):
    header, table = read_tile(make_tile(3, 164, star_table), columns=star_columns)
    assert (header.version, header.order, header.pix) == (3, 2, 100)
    assert list(table) == STAR_ROWS

def test_read_tile_legacy_uses_header_version():
    rows = [(1, 0.5), (2, 1.5), (3, 2.5)]
    table_bytes = shuffle(make_rows('<if', rows), len(rows), 8)
    payload = make_tile(2, 4 * 4 ** 3 + 17, table_bytes)

    header, table = read_tile(payload, columns=[ColumnSpec('id', 'i'), ColumnSpec('v', 'f')], row_size=8)
    assert header.version == 2
    assert (header.order, header.pix) == (3, 17)
    assert list(table) == rows

def test_load_tiles(star_file: Path, star_columns):
    tiles = list(load_tiles(star_file, 'STAR', columns=star_columns))

    assert [(h.nuniq, h.order, h.pix) for h, _ in tiles] == STAR_TILES
    all_rows = [row for _, table in tiles for row in table]
    assert all_rows == STAR_ROWS

def test_load_tiles_propagates_schema_errors(star_file: Path):
    with pytest.raises(SchemaError):
        list(load_tiles(star_file, 'STAR', columns=[ColumnSpec('bmag', 'f')]))

@pytest.fixture
def file_with_corrupt_tile(tmp_path: Path, star_table: bytes) -> Path:
    """Three tiles, the middle one holding a block that does not inflate."""
    bad_block = bytearray(make_block(star_table))
    bad_block[-4:] = b'\0\0\0\0'  # Break the stream's adler32 checksum.
    filepath = tmp_path / "corrupt_tile.eph"
    filepath.write_bytes(make_container([
        make_chunk('STAR', make_tile(3, 21, star_table)),
        make_chunk('STAR', make_tile_header(3, 22) + bytes(bad_block)),
        make_chunk('STAR', make_tile(3, 23, star_table)),
    ]))
    return filepath

def test_load_tiles_raises_on_corrupt_tile(file_with_corrupt_tile: Path, star_columns):
    tiles = load_tiles(file_with_corrupt_tile, 'STAR', columns=star_columns)
    header, _ = next(tiles)
    assert header.nuniq == 21
    with pytest.raises(DecompressionError):
        next(tiles)

def test_load_tiles_can_skip_corrupt_tiles(file_with_corrupt_tile: Path, star_columns, caplog):
    with caplog.at_level(logging.WARNING, logger="eph_tiles"):
        tiles = list(load_tiles(file_with_corrupt_tile, 'STAR', columns=star_columns, skip_corrupt=True))

    assert [h.nuniq for h, _ in tiles] == [21, 23]
    assert "Skipping corrupt tile" in caplog.text
