import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def vec():
    """Provide a factory building vectors from hex text.

    ``vec("F0", 8)`` is a vector of 8 bits; ``vec(None, 12)`` is all zero.
    """
    from bitvector import BitVector

    def make(hex_text, length):
        if hex_text is None:
            return BitVector(length)
        return BitVector.from_hex(hex_text, length)

    return make


def all_ones(length):
    """Return a vector with every bit of ``length`` set."""
    from bitvector import BitVector

    v = BitVector(length)
    v.set_all()
    return v


@pytest.fixture()
def all_ones_fn():
    """Fixture that provides the all_ones helper without importing conftest."""
    return all_ones
