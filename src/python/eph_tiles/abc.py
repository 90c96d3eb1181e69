# eph_tiles/abc.py
"""Abstract Base Classes for the eph_tiles library."""

import abc
from typing import Sequence, Tuple

from .dataclasses import ColumnSpec, TableLayout
from .lowlevel import Buffer

class EphFileBase(abc.ABC):
    """Abstract base class for tile file handlers."""

    @abc.abstractmethod
    def close(self) -> None:
        """
        Closes the file handle and releases its buffer.
        Subsequent operations on the object will raise an error.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def closed(self) -> bool:
        """Returns True if the file handle is closed."""
        raise NotImplementedError

    def __enter__(self) -> "EphFileBase":
        if self.closed:
            raise ValueError("Cannot enter context with a closed file handle.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

class TableResolver(abc.ABC):
    """
    Abstract strategy resolving the row layout of a table.

    Each table schema version is handled by one concrete resolver; callers go
    through `eph_tiles.table.resolve_table`, which selects it.
    """

    @abc.abstractmethod
    def resolve(
        self,
        data: Buffer,
        offset: int,
        row_size: int,
        columns: Sequence[ColumnSpec],
    ) -> Tuple[TableLayout, bytes, int]:
        """
        Resolves the table starting at `offset` in `data`.

        Args:
            data: The (inflated) table bytes.
            offset: Where the table starts.
            row_size: The row size the caller expects; only used by schemas
                      that do not describe their own rows.
            columns: The columns the caller expects, in output order.

        Returns:
            The layout, the row-major (un-shuffled) row bytes, and the offset
            just past the table description.
        """
        raise NotImplementedError
