# eph_tiles/dataclasses.py
"""
Dataclasses for structured data within the eph_tiles library.
"""
from dataclasses import dataclass
from typing import Tuple, Union
from .types import ColumnType, Unit

@dataclass(frozen=True, slots=True)
class Chunk:
    """A single chunk of a container, viewed in place."""
    type: str
    data: memoryview
    size: int
    offset: int # Offset of the payload within the container
    checksum: int

@dataclass(frozen=True, slots=True)
class TileHeader:
    """A decoded tile header: format version and HiPS position."""
    version: int
    nuniq: int
    order: int
    pix: int

@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """
    A column the caller expects to find in a table.

    `unit` is the unit the caller wants float values converted to (0 keeps
    the stored unit). `size` is only needed for string columns of legacy
    tables; it is ignored when the table describes its own layout.
    """
    name: str
    type: Union[ColumnType, str]
    unit: int = 0
    size: int = 0

    def __post_init__(self) -> None:
        if not self.name or len(self.name.encode('ascii')) > 4:
            raise ValueError(f"Column name must be 1 to 4 ASCII characters, got {self.name!r}")
        try:
            object.__setattr__(self, 'type', ColumnType(self.type))
        except ValueError:
            supported = ", ".join(repr(t.value) for t in ColumnType)
            raise ValueError(
                f"Unsupported column type {self.type!r}. Supported types are: {supported}"
            ) from None
        object.__setattr__(self, 'unit', Unit(self.unit))
        if self.size < 0:
            raise ValueError(f"Column size must be non-negative, got {self.size}")

@dataclass(frozen=True, slots=True)
class ResolvedColumn:
    """A column with its location inside a table row."""
    name: str
    type: ColumnType
    unit: Unit      # Requested output unit
    src_unit: Unit  # Unit the value is stored in
    start: int
    size: int
    row_size: int

@dataclass(frozen=True, slots=True)
class TableLayout:
    """The resolved row layout of a table."""
    row_size: int
    row_count: int
    columns: Tuple[ResolvedColumn, ...]
    shuffled: bool

@dataclass(frozen=True, slots=True)
class FileHeaderInfo:
    """Information extracted from the container header."""
    version: int
    file_size: int
