from typing import Iterable, Iterator, Optional, TextIO, Union

from bitlayout import (
    UNIT_BITS,
    bit_in_unit,
    last_unit_mask,
    last_unit_one,
    unit_max,
    unit_of_bit,
    units_for_bits,
)

BufferLike = Union[bytes, bytearray, memoryview, Iterable[int]]


class BitVectorError(Exception):
    """Base class for errors raised by :class:`BitVector`."""


class BitIndexError(BitVectorError, IndexError):
    """A bit index is not in ``range(len(vector))``."""


class LengthMismatchError(BitVectorError, ValueError):
    """Two operands of a whole-vector operation have different lengths."""


class UninitializedOperandError(BitVectorError, ValueError):
    """A vector declares a non-zero length but owns no storage units."""


class BufferSizeError(BitVectorError, ValueError):
    """A buffer does not hold exactly the units needed for a bit length."""


class BitRef:
    """Assignable handle to a single bit of a :class:`BitVector`.

    Holds only the owning vector and the bit index; every read and write
    goes through the owner, so the index is validated against the owner's
    length at the moment of access.

    :ivar vector: Vector the bit belongs to.
    :type vector: BitVector
    :ivar index: Index of the bit inside ``vector``.
    :type index: int
    """

    def __init__(self, vector: "BitVector", index: int) -> None:
        self.vector = vector
        self.index = index

    def assign(self, value: bool) -> None:
        """Set the referenced bit to ``value``.

        :param value: New bit value (any truthy value sets the bit).
        :type value: bool
        :returns: None
        :rtype: None
        :raises BitIndexError: If the index is out of range for the owner.
        """
        self.vector.set_bit_value(self.index, value)

    def get(self) -> bool:
        """Return the current value of the referenced bit."""
        return self.vector.get(self.index)

    def __bool__(self) -> bool:
        return self.get()

    def __repr__(self) -> str:
        return f"BitRef(index={self.index})"


class BitVector:
    """Fixed-length vector of bits packed into bytes.

    Bit 0 is the most significant bit of byte 0 and bits continue MSB-first
    through the following bytes. Storage units are always 8-bit bytes
    (:data:`bitlayout.UNIT_BITS`). A vector of 20 bits therefore uses three
    bytes, the last four bits of the third byte being spare. Spare bits are
    zero after every operation, which keeps :meth:`increment`,
    :meth:`decrement` and the shifts consistent.

    Every operation is available as a named method; the Python operators
    (``&``, ``|=``, ``<<``, ``==``, ``<`` ...) are shorthands for them.
    """

    __hash__ = None  # mutable

    def __init__(self, length: int) -> None:
        """Create a zero-filled vector of ``length`` bits.

        :param length: Number of bits; fixed for the life of the vector.
        :type length: int
        :returns: None
        :rtype: None
        :raises TypeError: If ``length`` is not an integer.
        :raises ValueError: If ``length`` is negative.
        """
        if isinstance(length, bool) or not isinstance(length, int):
            raise TypeError(f"Bit length must be an integer: {length!r}")
        if length < 0:
            raise ValueError(f"Bit length must not be negative: {length}")
        self._length = length
        self._storage = bytearray(units_for_bits(length, UNIT_BITS))

    @classmethod
    def from_buffer(cls, buffer: BufferLike, length: int) -> "BitVector":
        """Create a vector of ``length`` bits from a copy of ``buffer``.

        Spare bits of the final byte are cleared.

        :param buffer: Packed bytes, MSB-first, exactly
            ``ceil(length / UNIT_BITS)`` of them.
        :type buffer: bytes | bytearray | Iterable[int]
        :param length: Number of bits the buffer represents.
        :type length: int
        :returns: New vector owning its own copy of the data.
        :rtype: BitVector
        :raises BufferSizeError: If ``buffer`` has the wrong number of bytes.
        :raises TypeError: If ``buffer`` is an integer or a string.
        """
        if isinstance(buffer, (int, str)):
            raise TypeError(
                f"Buffer must be bytes-like, got {type(buffer).__name__}"
            )
        vector = cls(length)
        data = bytearray(buffer)
        if len(data) != len(vector._storage):
            raise BufferSizeError(
                f"{length} bits need {len(vector._storage)} bytes, "
                f"buffer has {len(data)}"
            )
        vector._storage = data
        vector._mask_spare_bits()
        return vector

    @classmethod
    def from_hex(cls, text: str, length: int) -> "BitVector":
        """Create a vector from hexadecimal text such as ``"A5 0F"``.

        Accepts the output of :meth:`dump`.

        :param text: Hex digits, optionally separated by whitespace.
        :type text: str
        :param length: Number of bits the bytes represent.
        :type length: int
        :returns: New vector.
        :rtype: BitVector
        :raises ValueError: If ``text`` is not valid hexadecimal.
        :raises BufferSizeError: If the byte count does not match ``length``.
        """
        return cls.from_buffer(bytes.fromhex(text), length)

    @property
    def length(self) -> int:
        return self._length

    @property
    def storage(self) -> bytes:
        """Snapshot of the packed storage bytes."""
        return bytes(self._storage)

    def size(self) -> int:
        return self._length

    def to_bytes(self) -> bytes:
        return bytes(self._storage)

    def __len__(self) -> int:
        return self._length

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Bit index must be an integer: {index!r}")
        if not 0 <= index < self._length:
            raise BitIndexError(
                f"Bit index {index} out of range for {self._length} bits"
            )

    @staticmethod
    def _check_type(other: "BitVector") -> None:
        if not isinstance(other, BitVector):
            raise TypeError(
                f"Operand must be a BitVector, got {type(other).__name__}"
            )

    def _check_operand(self, other: "BitVector") -> None:
        self._check_type(other)
        if self._length != other._length:
            raise LengthMismatchError(
                f"Length mismatch: {self._length} bits vs "
                f"{other._length} bits"
            )

    def _mask_spare_bits(self) -> None:
        if self._storage:
            self._storage[-1] &= last_unit_mask(self._length, UNIT_BITS)

    # bit access

    def get(self, index: int) -> bool:
        """Return ``True`` if the bit at ``index`` is set.

        :param index: Bit index, ``0 <= index < len(self)``.
        :type index: int
        :returns: Bit value.
        :rtype: bool
        :raises BitIndexError: If ``index`` is out of range.
        """
        self._check_index(index)
        unit = self._storage[unit_of_bit(index, UNIT_BITS)]
        return bool(unit & bit_in_unit(index, UNIT_BITS))

    def set_bit(self, index: int) -> None:
        """Set the bit at ``index`` to 1.

        :raises BitIndexError: If ``index`` is out of range.
        """
        self._check_index(index)
        self._storage[unit_of_bit(index, UNIT_BITS)] |= bit_in_unit(
            index, UNIT_BITS
        )

    def clear_bit(self, index: int) -> None:
        """Set the bit at ``index`` to 0.

        :raises BitIndexError: If ``index`` is out of range.
        """
        self._check_index(index)
        self._storage[unit_of_bit(index, UNIT_BITS)] &= ~bit_in_unit(
            index, UNIT_BITS
        ) & unit_max(UNIT_BITS)

    def set_bit_value(self, index: int, value: bool) -> None:
        """Set the bit at ``index`` when ``value`` is truthy, else clear it."""
        if value:
            self.set_bit(index)
        else:
            self.clear_bit(index)

    def ref(self, index: int) -> BitRef:
        """Return a :class:`BitRef` for the bit at ``index``.

        The index is checked when the reference is used, not here.
        """
        return BitRef(self, index)

    __call__ = ref

    def __getitem__(self, index: int) -> bool:
        return self.get(index)

    def __setitem__(self, index: int, value: bool) -> None:
        self.set_bit_value(index, value)

    def __iter__(self) -> Iterator[bool]:
        for index in range(self._length):
            yield self.get(index)

    def set_all(self) -> None:
        """Set every bit to 1, leaving spare bits at 0."""
        self._storage[:] = bytes([unit_max(UNIT_BITS)]) * len(
            self._storage
        )
        self._mask_spare_bits()

    def clear_all(self) -> None:
        """Set every bit to 0."""
        self._storage[:] = bytes(len(self._storage))

    # bitwise operations

    def and_(self, other: "BitVector") -> None:
        """Bitwise AND ``other`` into this vector.

        :param other: Vector of the same length.
        :type other: BitVector
        :returns: None
        :rtype: None
        :raises LengthMismatchError: If the lengths differ.
        """
        self._check_operand(other)
        for i, unit in enumerate(other._storage):
            self._storage[i] &= unit

    def or_(self, other: "BitVector") -> None:
        """Bitwise OR ``other`` into this vector.

        :raises LengthMismatchError: If the lengths differ.
        """
        self._check_operand(other)
        for i, unit in enumerate(other._storage):
            self._storage[i] |= unit

    def xor(self, other: "BitVector") -> None:
        """Bitwise XOR ``other`` into this vector.

        :raises LengthMismatchError: If the lengths differ.
        """
        self._check_operand(other)
        for i, unit in enumerate(other._storage):
            self._storage[i] ^= unit

    def not_(self) -> None:
        """Complement every bit in place, leaving spare bits at 0."""
        top = unit_max(UNIT_BITS)
        for i, unit in enumerate(self._storage):
            self._storage[i] = ~unit & top
        self._mask_spare_bits()

    def bit_and(self, other: "BitVector") -> "BitVector":
        result = self.copy()
        result.and_(other)
        return result

    def bit_or(self, other: "BitVector") -> "BitVector":
        result = self.copy()
        result.or_(other)
        return result

    def bit_xor(self, other: "BitVector") -> "BitVector":
        result = self.copy()
        result.xor(other)
        return result

    def inverted(self) -> "BitVector":
        """Return a complemented copy, leaving this vector untouched."""
        result = self.copy()
        result.not_()
        return result

    def __and__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.bit_and(other)

    def __or__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.bit_or(other)

    def __xor__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.bit_xor(other)

    def __invert__(self):
        return self.inverted()

    def __iand__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        self.and_(other)
        return self

    def __ior__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        self.or_(other)
        return self

    def __ixor__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        self.xor(other)
        return self

    # increment / decrement

    def increment(self) -> None:
        """Add one to the vector read as an unsigned big-endian integer.

        Bit 0 is the most significant bit. Incrementing the all-ones value
        rolls over to all zeros. Empty vectors are left unchanged.

        :returns: None
        :rtype: None
        """
        if not self._storage:
            return
        top = last_unit_mask(self._length, UNIT_BITS)
        one = last_unit_one(self._length, UNIT_BITS)
        for i in range(len(self._storage) - 1, -1, -1):
            if self._storage[i] != top:
                self._storage[i] += one
                return
            # carry into the next more significant byte
            self._storage[i] = 0
            top = unit_max(UNIT_BITS)
            one = 1

    def decrement(self) -> None:
        """Subtract one from the vector read as an unsigned integer.

        Decrementing zero rolls over to the all-ones value. Empty vectors
        are left unchanged.

        :returns: None
        :rtype: None
        """
        if not self._storage:
            return
        top = last_unit_mask(self._length, UNIT_BITS)
        one = last_unit_one(self._length, UNIT_BITS)
        for i in range(len(self._storage) - 1, -1, -1):
            if self._storage[i] >= one:
                self._storage[i] -= one
                return
            # borrow from the next more significant byte
            self._storage[i] = top
            top = unit_max(UNIT_BITS)
            one = 1

    # shifts

    @staticmethod
    def _check_shift(shifts: int) -> None:
        if isinstance(shifts, bool) or not isinstance(shifts, int):
            raise TypeError(f"Shift count must be an integer: {shifts!r}")
        if shifts < 0:
            raise ValueError(f"Negative shift count: {shifts}")

    def shift_left(self, shifts: int) -> None:
        """Shift bits towards bit 0, filling with zeros at the end.

        Bits shifted past bit 0 are lost. Shifting by ``len(self)`` or more
        clears the vector.

        :param shifts: Number of bit positions to shift.
        :type shifts: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``shifts`` is negative.
        """
        self._check_shift(shifts)
        if shifts >= self._length:
            self.clear_all()
            return

        units, bits = divmod(shifts, UNIT_BITS)
        if units:
            self._storage[:] = self._storage[units:] + bytes(units)

        if bits:
            top = unit_max(UNIT_BITS)
            carry = UNIT_BITS - bits
            last = len(self._storage) - 1
            for i in range(last):
                self._storage[i] = (
                    (self._storage[i] << bits)
                    | (self._storage[i + 1] >> carry)
                ) & top
            self._storage[last] = (self._storage[last] << bits) & top

        self._mask_spare_bits()

    def shift_right(self, shifts: int) -> None:
        """Shift bits away from bit 0, filling with zeros at the front.

        Bits shifted past the last bit are lost. Shifting by ``len(self)``
        or more clears the vector.

        :param shifts: Number of bit positions to shift.
        :type shifts: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``shifts`` is negative.
        """
        self._check_shift(shifts)
        if shifts >= self._length:
            self.clear_all()
            return

        units, bits = divmod(shifts, UNIT_BITS)
        if units:
            self._storage[:] = bytes(units) + self._storage[:-units]

        if bits:
            top = unit_max(UNIT_BITS)
            carry = UNIT_BITS - bits
            for i in range(len(self._storage) - 1, 0, -1):
                self._storage[i] = (
                    (self._storage[i] >> bits)
                    | (self._storage[i - 1] << carry)
                ) & top
            self._storage[0] >>= bits

        self._mask_spare_bits()

    def shifted_left(self, shifts: int) -> "BitVector":
        result = self.copy()
        result.shift_left(shifts)
        return result

    def shifted_right(self, shifts: int) -> "BitVector":
        result = self.copy()
        result.shift_right(shifts)
        return result

    def __lshift__(self, shifts):
        if not isinstance(shifts, int):
            return NotImplemented
        return self.shifted_left(shifts)

    def __rshift__(self, shifts):
        if not isinstance(shifts, int):
            return NotImplemented
        return self.shifted_right(shifts)

    def __ilshift__(self, shifts):
        if not isinstance(shifts, int):
            return NotImplemented
        self.shift_left(shifts)
        return self

    def __irshift__(self, shifts):
        if not isinstance(shifts, int):
            return NotImplemented
        self.shift_right(shifts)
        return self

    # comparison

    def equals(self, other: "BitVector") -> bool:
        """Return ``True`` if both vectors have the same length and bits.

        Vectors of different lengths are never equal.
        """
        if not isinstance(other, BitVector):
            return False
        return (
            self._length == other._length and self._storage == other._storage
        )

    def not_equals(self, other: "BitVector") -> bool:
        return not self.equals(other)

    # Relational comparisons of vectors with different lengths are all
    # False; use compare() to have them rejected instead.

    def less(self, other: "BitVector") -> bool:
        self._check_type(other)
        if self._length != other._length:
            return False
        return self._storage < other._storage

    def less_equal(self, other: "BitVector") -> bool:
        self._check_type(other)
        if self._length != other._length:
            return False
        return self._storage <= other._storage

    def greater(self, other: "BitVector") -> bool:
        self._check_type(other)
        if self._length != other._length:
            return False
        return self._storage > other._storage

    def greater_equal(self, other: "BitVector") -> bool:
        self._check_type(other)
        if self._length != other._length:
            return False
        return self._storage >= other._storage

    def compare(self, other: "BitVector") -> int:
        """Three-way comparison of two vectors of equal length.

        :param other: Vector to compare with.
        :type other: BitVector
        :returns: ``-1``, ``0`` or ``1`` as this vector is less than, equal
            to or greater than ``other``.
        :rtype: int
        :raises LengthMismatchError: If the lengths differ.
        """
        self._check_operand(other)
        return (self._storage > other._storage) - (
            self._storage < other._storage
        )

    def __eq__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.equals(other)

    def __ne__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.not_equals(other)

    def __lt__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.less(other)

    def __le__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.less_equal(other)

    def __gt__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.greater(other)

    def __ge__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.greater_equal(other)

    # assignment and copies

    def assign(self, src: "BitVector") -> None:
        """Copy the bits of ``src`` into this vector.

        :param src: Vector of the same length.
        :type src: BitVector
        :returns: None
        :rtype: None
        :raises LengthMismatchError: If the lengths differ.
        :raises UninitializedOperandError: If either vector has a non-zero
            length but no storage.
        """
        self._check_operand(src)
        for vector in (self, src):
            if vector._length and not vector._storage:
                raise UninitializedOperandError(
                    f"Vector of {vector._length} bits has no storage"
                )
        self._storage[:] = src._storage

    def copy(self) -> "BitVector":
        return type(self).from_buffer(self._storage, self._length)

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    # display

    def dump(self, out: Optional[TextIO] = None) -> str:
        """Render the storage bytes as uppercase hex, e.g. ``"90 0F"``.

        :param out: Optional text stream the dump is also written to.
        :type out: TextIO | None
        :returns: Space-separated two-digit hex bytes; empty for a
            zero-length vector.
        :rtype: str
        """
        text = " ".join(f"{unit:02X}" for unit in self._storage)
        if out is not None:
            out.write(text)
        return text

    def __str__(self) -> str:
        return self.dump()

    def __repr__(self) -> str:
        return f"BitVector(length={self._length}, storage='{self.dump()}')"
