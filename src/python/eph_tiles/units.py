# eph_tiles/units.py
"""
Scalar unit conversion for float columns.
"""
import math
from typing import TypeVar

import numpy as np

from .types import Unit

Value = TypeVar('Value', float, np.ndarray)

DD2R = math.pi / 180.0
DR2D = 180.0 / math.pi

# (bit, factor when only the source has the bit, factor when only the target has it)
_SCALES = (
    (Unit.DEG, DD2R, DR2D),
    (Unit.ARCMIN, 1.0 / 60.0, 60.0),
    (Unit.ARCSEC, 1.0 / 60.0, 60.0),
    (Unit.PER_YEAR, 365.25, 1.0 / 365.25),
)

def convert_unit(src_unit: int, unit: int, value: Value) -> Value:
    """
    Converts `value` stored in `src_unit` to `unit`.

    Each bit of the unit mask is an independent scale family and is tested
    on its own, so the result does not depend on the order of the tests.
    A target of 0 means "keep the stored unit".

    Args:
        src_unit: Unit mask of the stored value.
        unit: Requested unit mask.
        value: A float or a NumPy array of floats.

    Returns:
        The converted value, of the same kind as the input.
    """
    if not unit or src_unit == unit:
        return value

    for bit, drop_factor, add_factor in _SCALES:
        in_src = bool(src_unit & bit)
        in_dst = bool(unit & bit)
        if in_src and not in_dst:
            value = value * drop_factor
        elif in_dst and not in_src:
            value = value * add_factor
    return value
