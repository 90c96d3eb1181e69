# eph_tiles/_internal/resolvers.py

"""
Internal strategies resolving a table's row layout, one per schema version.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .. import lowlevel
from ..abc import TableResolver
from ..dataclasses import ColumnSpec, ResolvedColumn, TableLayout
from ..exceptions import SchemaError
from ..lowlevel import Buffer
from ..types import (
    COLUMN_ENTRY_SIZE,
    EXPLICIT_TABLE_VERSION,
    LEGACY_UNSHUFFLED_ROW_SIZE,
    TABLE_HEADER_SIZE,
    ColumnType,
    TableFlags,
    Unit,
)
from . import numpy_utils
from .shuffle import unshuffle

logger = logging.getLogger(__name__)


def _check_fits(column: ResolvedColumn) -> None:
    """Raises SchemaError if `column` does not lie inside its row."""
    if column.type is ColumnType.STRING:
        extent = column.size
    else:
        extent = numpy_utils.default_column_size(column.type)
    if column.start + extent > column.row_size:
        raise SchemaError(
            f"Column spans bytes {column.start}..{column.start + extent} "
            f"of a {column.row_size}-byte row",
            column=column.name,
        )


class LegacyTableResolver(TableResolver):
    """
    Tables written before the explicit column table existed.

    Rows fill the whole buffer from `offset`, with the caller's columns packed
    back to back in declaration order. Rows are always shuffled, except rows of
    exactly 104 bytes which were written unshuffled.
    """

    def resolve(
        self,
        data: Buffer,
        offset: int,
        row_size: int,
        columns: Sequence[ColumnSpec],
    ) -> Tuple[TableLayout, bytes, int]:
        if row_size <= 0:
            raise ValueError(f"Legacy tables need a positive row_size, got {row_size}")

        view = memoryview(data)[offset:]
        # Trailing bytes that do not form a full row are ignored.
        row_count = len(view) // row_size
        rows_view = view[:row_count * row_size]
        shuffled = row_size != LEGACY_UNSHUFFLED_ROW_SIZE
        rows = unshuffle(rows_view, row_count, row_size) if shuffled else bytes(rows_view)

        resolved: List[ResolvedColumn] = []
        start = 0
        for spec in columns:
            if spec.size:
                size = spec.size
            elif spec.type is ColumnType.STRING:
                raise ValueError(f"String column '{spec.name}' needs an explicit size")
            else:
                size = numpy_utils.default_column_size(spec.type)
            column = ResolvedColumn(
                name=spec.name,
                type=spec.type,
                unit=spec.unit,
                src_unit=spec.unit,
                start=start,
                size=size,
                row_size=row_size,
            )
            _check_fits(column)
            resolved.append(column)
            start += size

        layout = TableLayout(
            row_size=row_size,
            row_count=row_count,
            columns=tuple(resolved),
            shuffled=shuffled,
        )
        return layout, rows, offset


class ExplicitTableResolver(TableResolver):
    """
    Tables carrying their own header and column table.

    On-disk columns are matched to the expected ones by name. The header's row
    size is authoritative; the caller's `row_size` is ignored.
    """

    def resolve(
        self,
        data: Buffer,
        offset: int,
        row_size: int,
        columns: Sequence[ColumnSpec],
    ) -> Tuple[TableLayout, bytes, int]:
        flags, row_size, n_col, n_row = lowlevel.unpack_from(lowlevel.TABLE_HEADER, data, offset)
        entries_offset = offset + TABLE_HEADER_SIZE
        rows_offset = entries_offset + n_col * COLUMN_ENTRY_SIZE
        # Fail before scanning a column count the buffer cannot hold.
        lowlevel.take(data, entries_offset, n_col * COLUMN_ENTRY_SIZE)

        wanted = [spec.name.encode('ascii') for spec in columns]
        found: List[Optional[ResolvedColumn]] = [None] * len(columns)

        for i in range(n_col):
            raw_name, raw_type, src_unit, start, size = lowlevel.unpack_from(
                lowlevel.COLUMN_ENTRY, data, entries_offset + i * COLUMN_ENTRY_SIZE
            )
            name = raw_name.split(b'\0', 1)[0]
            try:
                j = wanted.index(name)
            except ValueError:
                continue
            spec = columns[j]
            type_tag = raw_type[:1].decode('ascii', errors='replace')
            if type_tag != spec.type.value:
                logger.error("Wrong type for column '%s'", spec.name)
                raise SchemaError(
                    f"Wrong type: expected '{spec.type.value}', found '{type_tag}'",
                    column=spec.name,
                )
            # A later entry with the same name replaces an earlier one.
            found[j] = ResolvedColumn(
                name=spec.name,
                type=spec.type,
                unit=spec.unit,
                src_unit=Unit(src_unit),
                start=start,
                size=size,
                row_size=row_size,
            )

        for spec, column in zip(columns, found):
            if column is None:
                logger.error("Cannot find column '%s'", spec.name)
                raise SchemaError("Cannot find column", column=spec.name)
            _check_fits(column)

        shuffled = bool(flags & TableFlags.SHUFFLED)
        rows_view = lowlevel.take(data, rows_offset, row_size * n_row)
        rows = unshuffle(rows_view, n_row, row_size) if shuffled else bytes(rows_view)

        layout = TableLayout(
            row_size=row_size,
            row_count=n_row,
            columns=tuple(found),
            shuffled=shuffled,
        )
        return layout, rows, rows_offset


def select_resolver(version: int) -> TableResolver:
    """
    Picks the layout strategy for a table schema version.

    Versions below 3 predate the explicit column table.
    """
    match version:
        case v if v < EXPLICIT_TABLE_VERSION:
            return LegacyTableResolver()
        case _:
            return ExplicitTableResolver()
