# tests/conftest.py
"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
from pathlib import Path

from eph_tiles import ColumnSpec, Unit

from builders import make_chunk, make_container, make_rows, make_table, make_tile

STAR_ROW_FMT = '<ifffQ8s'
STAR_ROW_SIZE = 32

# (name, type, unit, start, size) as stored on disk
STAR_DISK_COLUMNS = [
    ('hip', 'i', 0, 0, 4),
    ('ra', 'f', Unit.DEG, 4, 4),
    ('de', 'f', Unit.DEG, 8, 4),
    ('vmag', 'f', 0, 12, 4),
    ('gaia', 'Q', 0, 16, 8),
    ('name', 's', 0, 24, 8),
]

STAR_ROWS = [
    (1, 10.5, -20.25, 3.5, 123456789012345, b'Alpha\0\0\0'),
    (2, 200.0, 45.0, 6.25, 2**63 + 5, b'Beta\0\0\0\0'),
    (-3, 359.75, -89.5, 11.0, 0, b'Gamma123'),
]

# nuniq of the two tiles in `star_file`
STAR_TILES = [(21, 1, 5), (164, 2, 100)]  # (nuniq, order, pix)


@pytest.fixture
def star_columns() -> list[ColumnSpec]:
    """The expected star columns, keeping positions in degrees."""
    return [
        ColumnSpec('hip', 'i'),
        ColumnSpec('ra', 'f', unit=Unit.DEG),
        ColumnSpec('de', 'f', unit=Unit.DEG),
        ColumnSpec('vmag', 'f'),
        ColumnSpec('gaia', 'Q'),
        ColumnSpec('name', 's'),
    ]

@pytest.fixture
def star_table() -> bytes:
    """A shuffled version 3 star table holding `STAR_ROWS`."""
    rows = make_rows(STAR_ROW_FMT, STAR_ROWS)
    return make_table(STAR_DISK_COLUMNS, rows, STAR_ROW_SIZE, shuffled=True)

@pytest.fixture(scope="session")
def star_file(tmp_path_factory) -> Path:
    """
    A tile file with a metadata chunk and two star tiles.
    The first tile holds the first row of `STAR_ROWS`, the second the rest.
    """
    filepath = tmp_path_factory.getbasetemp() / "stars.eph"
    first = make_table(STAR_DISK_COLUMNS, make_rows(STAR_ROW_FMT, STAR_ROWS[:1]), STAR_ROW_SIZE)
    rest = make_table(STAR_DISK_COLUMNS, make_rows(STAR_ROW_FMT, STAR_ROWS[1:]), STAR_ROW_SIZE,
                      shuffled=True)
    data = make_container([
        make_chunk('JSON', b'{"type": "stars"}'),
        make_chunk('STAR', make_tile(3, STAR_TILES[0][0], first)),
        make_chunk('STAR', make_tile(3, STAR_TILES[1][0], rest)),
    ])
    filepath.write_bytes(data)
    return filepath
