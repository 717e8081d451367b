import pytest

from bitlayout import (
    UNIT_BITS,
    bit_in_unit,
    last_unit_mask,
    last_unit_one,
    ms_bit,
    unit_max,
    unit_of_bit,
    units_for_bits,
    used_bits,
)


def test_units_for_bits_rounds_up():
    assert UNIT_BITS == 8
    assert units_for_bits(0) == 0
    assert units_for_bits(1) == 1
    assert units_for_bits(8) == 1
    assert units_for_bits(9) == 2
    assert units_for_bits(20) == 3
    assert units_for_bits(20, 16) == 2


def test_units_for_bits_rejects_bad_arguments():
    with pytest.raises(ValueError):
        _ = units_for_bits(-1)
    with pytest.raises(ValueError):
        _ = units_for_bits(8, 0)


def test_bit_positions_are_msb_first():
    assert unit_of_bit(0) == 0
    assert unit_of_bit(7) == 0
    assert unit_of_bit(8) == 1
    assert unit_of_bit(19) == 2
    assert bit_in_unit(0) == 0x80
    assert bit_in_unit(3) == 0x10
    assert bit_in_unit(7) == 0x01
    assert bit_in_unit(8) == 0x80
    assert bit_in_unit(0, 16) == 0x8000


def test_unit_constants():
    assert unit_max() == 0xFF
    assert ms_bit() == 0x80
    assert unit_max(16) == 0xFFFF
    assert ms_bit(4) == 0x8


def test_final_unit_masks():
    assert used_bits(20) == 4
    assert used_bits(16) == 8
    assert used_bits(1) == 1
    assert last_unit_mask(20) == 0xF0
    assert last_unit_mask(16) == 0xFF
    assert last_unit_mask(13) == 0xF8
    assert last_unit_mask(1) == 0x80
    assert last_unit_one(20) == 0x10
    assert last_unit_one(16) == 0x01
    assert last_unit_one(13) == 0x08


def test_default_width_is_one_byte():
    assert units_for_bits(20) == units_for_bits(20, UNIT_BITS) == 3
    assert unit_max() == (1 << UNIT_BITS) - 1
