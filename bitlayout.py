UNIT_BITS = 8  #: Width of one storage unit in bits; fixed, storage is bytes


def _check_unit_bits(unit_bits: int) -> None:
    if unit_bits < 1:
        raise ValueError(f"Storage unit width must be positive: {unit_bits}")


def units_for_bits(bits: int, unit_bits: int = UNIT_BITS) -> int:
    """Return the number of storage units needed to hold ``bits`` bits.

    :param bits: Number of logical bits.
    :type bits: int
    :param unit_bits: Width of a storage unit.
    :type unit_bits: int
    :returns: ``ceil(bits / unit_bits)``; ``0`` when ``bits`` is ``0``.
    :rtype: int
    :raises ValueError: If ``bits`` is negative.
    """
    _check_unit_bits(unit_bits)
    if bits < 0:
        raise ValueError(f"Bit count must not be negative: {bits}")
    return (bits + unit_bits - 1) // unit_bits


# The helpers below take a width already accepted by units_for_bits().


def unit_of_bit(bit: int, unit_bits: int = UNIT_BITS) -> int:
    """Return the index of the storage unit containing ``bit``."""
    return bit // unit_bits


def bit_in_unit(bit: int, unit_bits: int = UNIT_BITS) -> int:
    """Return the single-bit mask selecting ``bit`` within its unit.

    Bits are numbered MSB-first, so bit 0 of every unit is its most
    significant bit.

    :param bit: Bit index within the whole vector.
    :type bit: int
    :param unit_bits: Width of a storage unit.
    :type unit_bits: int
    :returns: Mask with exactly one bit set.
    :rtype: int
    """
    return 1 << (unit_bits - 1 - (bit % unit_bits))


def unit_max(unit_bits: int = UNIT_BITS) -> int:
    """Return the all-ones value of a storage unit."""
    return (1 << unit_bits) - 1


def ms_bit(unit_bits: int = UNIT_BITS) -> int:
    """Return the most significant bit of a storage unit."""
    return 1 << (unit_bits - 1)


def used_bits(length: int, unit_bits: int = UNIT_BITS) -> int:
    """Return how many bits of the final storage unit hold data.

    :param length: Logical bit length of the vector.
    :type length: int
    :param unit_bits: Width of a storage unit.
    :type unit_bits: int
    :returns: ``length % unit_bits``, or ``unit_bits`` when that is zero.
    :rtype: int
    """
    return length % unit_bits or unit_bits


def last_unit_mask(length: int, unit_bits: int = UNIT_BITS) -> int:
    """Return the mask of used (non-spare) bits in the final unit.

    Spare bits sit at the least significant end of the final unit, so the
    mask keeps the top :func:`used_bits` bits.

    :param length: Logical bit length of the vector.
    :type length: int
    :param unit_bits: Width of a storage unit.
    :type unit_bits: int
    :returns: Mask to AND with the final unit.
    :rtype: int
    """
    spare = unit_bits - used_bits(length, unit_bits)
    return (unit_max(unit_bits) << spare) & unit_max(unit_bits)


def last_unit_one(length: int, unit_bits: int = UNIT_BITS) -> int:
    """Return the value of the least significant used bit of the final unit.

    This is the step added or subtracted from the final unit when the
    vector is incremented or decremented.
    """
    return 1 << (unit_bits - used_bits(length, unit_bits))
