import pytest

from bitvector import BitIndexError, BitRef, BitVector


def test_call_returns_reference_that_sets_and_clears():
    v = BitVector(12)
    v(3).assign(True)
    assert v.get(3)
    assert v.dump() == "10 00"
    v.ref(3).assign(False)
    assert not v.get(3)


def test_reference_reads_through_owner():
    v = BitVector(8)
    r = v.ref(0)
    assert isinstance(r, BitRef)
    assert not r
    v.set_bit(0)
    assert r.get() is True
    assert bool(r)
    assert repr(r) == "BitRef(index=0)"


def test_reference_out_of_range_is_checked_on_use():
    v = BitVector(8)
    r = v(8)
    with pytest.raises(BitIndexError):
        r.assign(True)
    with pytest.raises(BitIndexError):
        _ = r.get()
    assert v.dump() == "00"


def test_reference_holds_no_bits_of_its_own():
    v = BitVector(8)
    r = v(7)
    r.assign(1)
    v.clear_all()
    assert not r
    assert r.vector is v and r.index == 7
