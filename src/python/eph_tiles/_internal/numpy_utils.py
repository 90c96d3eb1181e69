# eph_tiles/_internal/numpy_utils.py

"""
Internal utilities for interacting with NumPy arrays.

This module maps column type tags to NumPy dtypes and builds the structured
dtype that views a whole table at once.
"""

from typing import Sequence, TypeAlias
import numpy as np

from ..dataclasses import ColumnSpec, ResolvedColumn, TableLayout
from ..types import ColumnType

# TypeAlias for clarity in function signatures.
ColumnSpecs: TypeAlias = Sequence[ColumnSpec]

# --- Mappings ---

# Maps fixed-size column types to their little-endian on-disk dtype.
_COLUMN_TYPE_TO_NP_DTYPE: dict[ColumnType, np.dtype] = {
    ColumnType.INT32: np.dtype('<i4'),
    ColumnType.FLOAT32: np.dtype('<f4'),
    ColumnType.UINT64: np.dtype('<u8'),
}

# --- Functions ---

def default_column_size(column_type: ColumnType) -> int:
    """
    Returns the byte size of a fixed-size column type.

    Raises:
        ValueError: For string columns, whose size must be declared.
    """
    try:
        return _COLUMN_TYPE_TO_NP_DTYPE[column_type].itemsize
    except KeyError:
        raise ValueError(f"Column type '{column_type.value}' has no default size") from None

def validate_column_specs(columns: ColumnSpecs) -> None:
    """
    Ensures a sequence of expected columns can be resolved.

    Raises:
        ValueError: If the sequence is empty or names a column twice.
        TypeError: If an element is not a ColumnSpec.
    """
    if not columns:
        raise ValueError("At least one expected column is required.")
    seen: set[str] = set()
    for column in columns:
        if not isinstance(column, ColumnSpec):
            raise TypeError(f"Expected ColumnSpec objects, got {type(column).__name__}")
        if column.name in seen:
            raise ValueError(f"Column '{column.name}' is expected more than once.")
        seen.add(column.name)

def column_dtype(column: ResolvedColumn) -> np.dtype:
    """The stored dtype of one resolved column."""
    if column.type is ColumnType.STRING:
        return np.dtype(f'S{column.size}')
    return _COLUMN_TYPE_TO_NP_DTYPE[column.type]

def row_dtype(layout: TableLayout) -> np.dtype:
    """
    Builds a structured dtype matching one row of `layout`.

    Bytes of the row that belong to no expected column are left as padding.
    """
    return np.dtype({
        'names': [c.name for c in layout.columns],
        'formats': [column_dtype(c) for c in layout.columns],
        'offsets': [c.start for c in layout.columns],
        'itemsize': layout.row_size,
    })
