# eph_tiles/table.py
"""
Self-describing row tables: layout resolution and row extraction.

A table is resolved once against the columns the caller expects, then rows
are read by offset from the resolved (un-shuffled) row bytes:

    table, ofs = resolve_table(version, raw, columns=[
        ColumnSpec('ra', 'f', unit=Unit.DEG),
        ColumnSpec('de', 'f', unit=Unit.DEG),
        ColumnSpec('vmag', 'f'),
    ])
    for ra, de, vmag in table:
        ...
"""
import logging
from typing import Any, Iterator, Sequence, Tuple

import numpy as np

from . import lowlevel
from .dataclasses import ColumnSpec, ResolvedColumn, TableLayout
from .lowlevel import Buffer
from .types import ColumnType
from .units import convert_unit
from ._internal import numpy_utils
from ._internal.resolvers import select_resolver

logger = logging.getLogger(__name__)

Row = Tuple[Any, ...]

_FIXED_FORMATS = {
    ColumnType.INT32: lowlevel.I32,
    ColumnType.FLOAT32: lowlevel.F32,
    ColumnType.UINT64: lowlevel.U64,
}


def read_row(data: Buffer, offset: int, columns: Sequence[ResolvedColumn]) -> Tuple[Row, int]:
    """
    Extracts one row starting at `offset`.

    Values come back in column order: `int` for int32 and uint64 columns,
    `float` for float32 columns (converted from the stored unit to the
    requested one), and the raw `bytes` of the declared size for strings.

    All columns must belong to the same table.

    Returns:
        The row values and the offset of the next row.

    Raises:
        ValueError: If `columns` is empty.
        FormatError: If the row runs past the end of `data`.
    """
    if not columns:
        raise ValueError("At least one column is required to read a row.")
    row_size = columns[0].row_size
    row = lowlevel.take(data, offset, row_size)

    values = []
    for column in columns:
        if column.type is ColumnType.STRING:
            values.append(bytes(lowlevel.take(row, column.start, column.size)))
            continue
        (value,) = lowlevel.unpack_from(_FIXED_FORMATS[column.type], row, column.start)
        if column.type is ColumnType.FLOAT32:
            value = convert_unit(column.src_unit, column.unit, float(value))
        values.append(value)
    return tuple(values), offset + row_size


class Table:
    """
    A resolved table: its layout plus the row-major bytes of its rows.

    Supports `len()`, integer indexing and iteration, yielding row tuples in
    the order of the expected columns.
    """
    def __init__(self, layout: TableLayout, data: bytes):
        if len(data) < layout.row_size * layout.row_count:
            raise ValueError(
                f"Row data holds {len(data)} bytes, layout needs "
                f"{layout.row_size * layout.row_count}"
            )
        self._layout = layout
        self._data = data

    @property
    def layout(self) -> TableLayout:
        return self._layout

    @property
    def columns(self) -> Tuple[ResolvedColumn, ...]:
        return self._layout.columns

    @property
    def row_count(self) -> int:
        return self._layout.row_count

    @property
    def row_size(self) -> int:
        return self._layout.row_size

    @property
    def data(self) -> bytes:
        """The un-shuffled row bytes."""
        return self._data

    def __len__(self) -> int:
        return self.row_count

    def read_row(self, index: int) -> Row:
        """Reads row `index`; negative indices count from the end."""
        resolved_index = index if index >= 0 else index + self.row_count
        if not (0 <= resolved_index < self.row_count):
            raise IndexError("Row index out of range")
        row, _ = read_row(self._data, resolved_index * self.row_size, self.columns)
        return row

    def __getitem__(self, index: int) -> Row:
        if not isinstance(index, int):
            raise TypeError(f"Index must be an integer, not {type(index).__name__}")
        return self.read_row(index)

    def __iter__(self) -> Iterator[Row]:
        offset = 0
        for _ in range(self.row_count):
            row, offset = read_row(self._data, offset, self.columns)
            yield row

    def to_numpy(self) -> np.ndarray:
        """
        Decodes every row at once into a structured array.

        Float columns become float64 fields converted to their requested
        unit; other columns keep their stored dtype.
        """
        out_dtype = np.dtype([
            (c.name, np.float64 if c.type is ColumnType.FLOAT32 else numpy_utils.column_dtype(c))
            for c in self.columns
        ])
        out = np.empty(self.row_count, dtype=out_dtype)
        if self.row_count == 0:
            return out

        rows = np.frombuffer(self._data, dtype=numpy_utils.row_dtype(self._layout), count=self.row_count)
        for c in self.columns:
            if c.type is ColumnType.FLOAT32:
                out[c.name] = convert_unit(c.src_unit, c.unit, rows[c.name].astype(np.float64))
            else:
                out[c.name] = rows[c.name]
        return out

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self.columns)
        return f"Table(rows={self.row_count}, row_size={self.row_size}, columns=[{names}])"


def resolve_table(
    version: int,
    data: Buffer,
    offset: int = 0,
    row_size: int = 0,
    columns: Sequence[ColumnSpec] = (),
) -> Tuple[Table, int]:
    """
    Resolves the table at `offset` against the columns the caller expects.

    Tables of version 3 and later describe their own columns, which are
    matched by name; older tables are laid out from `columns` and
    `row_size`. Shuffled row data is un-shuffled here, once. The caller's
    `columns` are never modified.

    Args:
        version: The table schema version (carried by the tile header, not
                 the container version).
        data: The table bytes, usually an inflated compressed block.
        offset: Where the table starts in `data`.
        row_size: Row size in bytes; required for legacy tables only.
        columns: The expected columns, in the order rows are returned.

    Returns:
        The resolved Table and the offset just past the table description.

    Raises:
        SchemaError: If an expected column is missing or has another type.
        FormatError: If the table description or row data is truncated.
        ValueError: If `columns` is empty or repeats a name, or a legacy
                    table lacks `row_size` or a string column size.
    """
    numpy_utils.validate_column_specs(columns)
    resolver = select_resolver(version)
    layout, rows, next_offset = resolver.resolve(data, offset, row_size, columns)
    logger.debug(
        "Resolved v%d table: %d rows of %d bytes, shuffled=%s",
        version, layout.row_count, layout.row_size, layout.shuffled,
    )
    return Table(layout, rows), next_offset
