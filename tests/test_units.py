# tests/test_units.py
"""
Tests for unit conversion of float columns.
"""
import math
import itertools
import pytest
import numpy as np

from eph_tiles import convert_unit, Unit

ALL_UNITS = range(16)
NONZERO_UNITS = range(1, 16)

@pytest.mark.parametrize("unit", ALL_UNITS)
def test_same_unit_is_identity(unit):
    assert convert_unit(unit, unit, 1.2345) == 1.2345

@pytest.mark.parametrize("src_unit", ALL_UNITS)
def test_zero_target_keeps_stored_value(src_unit):
    assert convert_unit(src_unit, 0, 42.0) == 42.0

def test_single_family_conversions():
    # Arcminutes to degrees and back.
    assert convert_unit(Unit.DEG | Unit.ARCMIN, Unit.DEG, 30.0) == pytest.approx(0.5)
    assert convert_unit(Unit.DEG, Unit.DEG | Unit.ARCMIN, 0.5) == pytest.approx(30.0)
    # Arcseconds to arcminutes.
    assert convert_unit(Unit.ARCSEC | Unit.ARCMIN, Unit.ARCMIN, 120.0) == pytest.approx(2.0)
    # The year bit scales by 365.25.
    assert convert_unit(Unit.PER_YEAR | Unit.DEG, Unit.DEG, 2.0) == pytest.approx(730.5)
    assert convert_unit(Unit.DEG, Unit.DEG | Unit.PER_YEAR, 730.5) == pytest.approx(2.0)

def test_degrees_to_radians_with_other_families():
    # Dropping the degree bit converts to radians, adding arcsec multiplies by 60.
    assert convert_unit(Unit.DEG, Unit.ARCSEC, 180.0) == pytest.approx(60 * math.pi)
    assert convert_unit(Unit.ARCSEC, Unit.DEG, 60 * math.pi) == pytest.approx(180.0)

@pytest.mark.parametrize("a, b", list(itertools.product(NONZERO_UNITS, NONZERO_UNITS)))
def test_conversion_round_trip(a, b):
    """Converting to another unit and back recovers the value."""
    x = 12.375
    assert convert_unit(b, a, convert_unit(a, b, x)) == pytest.approx(x, rel=1e-12)

def test_round_trip_through_zero_target_is_one_way():
    """A zero target means 'no conversion', so it cannot express radians."""
    x = 90.0
    assert convert_unit(Unit.DEG, 0, x) == x
    assert convert_unit(0, Unit.DEG, x) == pytest.approx(x * 180.0 / math.pi)

def test_numpy_arrays_are_converted_elementwise():
    values = np.array([0.0, 90.0, 180.0])
    result = convert_unit(Unit.DEG, Unit.ARCMIN, values)
    np.testing.assert_allclose(result, np.deg2rad(values) * 60.0)
