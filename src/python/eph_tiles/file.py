# eph_tiles/file.py
"""High-level Reader and the `open` factory function."""

import os
from functools import cached_property
from pathlib import Path
from typing import Iterator, List, Optional, Union, overload

from .abc import EphFileBase
from .container import iter_chunks, read_file_header
from .dataclasses import Chunk, FileHeaderInfo
from .lowlevel import Buffer


def open(
    path: Union[str, os.PathLike],
    mode: str = 'r',
    *,
    check_checksums: bool = False
) -> "Reader":
    """
    Opens a tile file for reading.
    This function is the primary entry point for the library.

    Args:
        path: Path to the tile file.
        mode (str): Only 'r' is supported; the library is read-only.
        check_checksums (bool): If True, verifies each chunk's CRC32 while
            walking the file. Off by default, as the checksum field is not
            guaranteed to be filled by every writer.

    Returns:
        A Reader object, typically used within a `with` statement.

    Raises:
        ValueError: If mode is not 'r'.
        OSError: If the file cannot be read.
    """
    if mode != 'r':
        raise ValueError(f"Unsupported mode: '{mode}'. Tile files are read-only, use 'r'.")
    data = Path(path).read_bytes()
    return Reader(data, check_checksums=check_checksums)


class Reader(EphFileBase):
    """
    A handle over the bytes of one tile file.
    Created via `eph_tiles.open(path)`, or directly from an in-memory buffer.
    """
    def __init__(self, data: Buffer, *, check_checksums: bool = False):
        self._data: Optional[Buffer] = data
        self._check_checksums = check_checksums

    def _buffer(self) -> Buffer:
        if self._data is None:
            raise ValueError("Operation attempted on a closed Reader.")
        return self._data

    @cached_property
    def file_header(self) -> FileHeaderInfo:
        """Returns the container's header information."""
        data = self._buffer()
        return FileHeaderInfo(version=read_file_header(data), file_size=len(data))

    @cached_property
    def chunks(self) -> List[Chunk]:
        """
        The chunks of the file, in file order.

        The whole file is walked on first access, so a framing error anywhere
        in the file is raised here.
        """
        return list(iter_chunks(self._buffer(), check_checksums=self._check_checksums))

    @property
    def nchunks(self) -> int:
        """The total number of chunks in the file."""
        return len(self.chunks)

    def __len__(self) -> int:
        return self.nchunks

    @overload
    def __getitem__(self, key: int) -> Chunk: ...

    @overload
    def __getitem__(self, key: slice) -> List[Chunk]: ...

    def __getitem__(self, key: Union[int, slice]) -> Union[Chunk, List[Chunk]]:
        """
        Returns chunks by index or slice.

        - `reader[5]` returns the 6th chunk.
        - `reader[2:5]` returns chunks 2, 3 and 4 as a list.
        """
        self._buffer()
        if isinstance(key, int):
            resolved_index = key if key >= 0 else key + self.nchunks
            if not (0 <= resolved_index < self.nchunks):
                raise IndexError("Chunk index out of range")
            return self.chunks[resolved_index]
        elif isinstance(key, slice):
            return self.chunks[key]
        else:
            raise TypeError(f"Index must be an integer or slice, not {type(key).__name__}")

    def __iter__(self) -> Iterator[Chunk]:
        self._buffer()
        return iter(self.chunks)

    def chunks_of_type(self, chunk_type: str) -> List[Chunk]:
        """Returns the chunks whose 4-character type tag is `chunk_type`."""
        self._buffer()
        return [c for c in self.chunks if c.type == chunk_type]

    def close(self) -> None:
        # Drop cached views so the buffer can be released.
        self.__dict__.pop('chunks', None)
        self._data = None

    @property
    def closed(self) -> bool:
        return self._data is None
