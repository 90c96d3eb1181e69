# eph_tiles/_internal/shuffle.py

"""
Byte-plane transpose of fixed-size records.

Writers store typed rows with all bytes of the same intra-record position
grouped together, which makes the high bytes of similar values contiguous and
compresses better. Readers undo it with `unshuffle`.
"""

import numpy as np

from ..lowlevel import Buffer

def _planes(buffer: Buffer, record_count: int, record_size: int) -> np.ndarray:
    if record_count < 0 or record_size < 0:
        raise ValueError(
            f"record_count and record_size must be non-negative, "
            f"got {record_count} and {record_size}"
        )
    nbytes = record_count * record_size
    if nbytes > len(buffer):
        raise ValueError(
            f"Buffer of {len(buffer)} bytes is too small for "
            f"{record_count} records of {record_size} bytes"
        )
    if nbytes == 0:
        return np.empty(0, dtype=np.uint8)
    return np.frombuffer(buffer, dtype=np.uint8, count=nbytes)

def unshuffle(buffer: Buffer, record_count: int, record_size: int) -> bytes:
    """
    Restores row-major order from byte planes.

    Byte `p` of record `i` is taken from linear offset `p * record_count + i`.
    Bytes past the last full record are returned unchanged.

    Args:
        buffer: The shuffled bytes.
        record_count: Number of records.
        record_size: Size of a record in bytes.

    Returns:
        A new bytes object; the input is never modified.
    """
    flat = _planes(buffer, record_count, record_size)
    # The transposed copy is this call's own scratch buffer.
    rows = np.ascontiguousarray(flat.reshape(record_size, record_count).T)
    return rows.tobytes() + bytes(buffer[flat.size:])

def shuffle(buffer: Buffer, record_count: int, record_size: int) -> bytes:
    """The inverse of `unshuffle`: groups bytes by intra-record position."""
    flat = _planes(buffer, record_count, record_size)
    planes = np.ascontiguousarray(flat.reshape(record_count, record_size).T)
    return planes.tobytes() + bytes(buffer[flat.size:])
