import argparse
import sys

from typing import Callable, Dict, List, Optional, Tuple
from bitvector import BitVector, BitVectorError

#: Operations taking no argument, by name
UNARY_OPS: Dict[str, Callable[[BitVector], None]] = {
    "setall": BitVector.set_all,
    "clearall": BitVector.clear_all,
    "not": BitVector.not_,
    "inc": BitVector.increment,
    "dec": BitVector.decrement,
}

#: Operations taking an integer argument (bit index or shift count)
INT_OPS: Dict[str, Callable[[BitVector, int], None]] = {
    "set": BitVector.set_bit,
    "clear": BitVector.clear_bit,
    "shl": BitVector.shift_left,
    "shr": BitVector.shift_right,
}

#: Operations taking a hex operand of the same length
VECTOR_OPS: Dict[str, Callable[[BitVector, BitVector], None]] = {
    "and": BitVector.and_,
    "or": BitVector.or_,
    "xor": BitVector.xor,
}


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Inspect fixed-length bit vectors"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    apply = subparsers.add_parser(
        "apply", aliases=["a"], help="Apply operations to a bit vector"
    )
    apply.add_argument(
        "-n", "--length", type=int, required=True, help="Length in bits"
    )
    apply.add_argument(
        "-x",
        "--hex",
        default=None,
        help="Initial bytes as hex, e.g. 'A5 0F' (default: all zero)",
    )
    apply.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print the vector after every operation",
    )
    apply.add_argument(
        "ops",
        nargs="*",
        metavar="OP",
        help=(
            "setall, clearall, not, inc, dec, set:I, clear:I, shl:N, "
            "shr:N, and:HEX, or:HEX, xor:HEX"
        ),
    )

    compare = subparsers.add_parser(
        "compare", aliases=["c"], help="Compare two bit vectors"
    )
    compare.add_argument(
        "-n", "--length", type=int, required=True, help="Length of A in bits"
    )
    compare.add_argument(
        "-m",
        "--other-length",
        type=int,
        default=None,
        help="Length of B in bits (default: same as A)",
    )
    compare.add_argument("a", help="First vector as hex")
    compare.add_argument("b", help="Second vector as hex")

    return parser


def _make_vector(length: int, hex_text: Optional[str]) -> BitVector:
    """Build a vector from optional hex text.

    :param length: Length in bits.
    :type length: int
    :param hex_text: Hex bytes, or ``None`` for an all-zero vector.
    :type hex_text: Optional[str]
    :returns: New vector.
    :rtype: BitVector
    :raises ValueError: If the hex text is invalid or has the wrong size.
    """
    if hex_text is None:
        return BitVector(length)
    return BitVector.from_hex(hex_text, length)


def _parse_op(token: str) -> Tuple[str, Optional[str]]:
    """Split an ``name[:arg]`` operation token.

    :param token: Operation as given on the command line.
    :type token: str
    :returns: Lower-cased name and the argument text, if any.
    :rtype: Tuple[str, Optional[str]]
    """
    name, sep, arg = token.partition(":")
    return name.lower(), (arg if sep else None)


def apply_op(vector: BitVector, token: str) -> None:
    """Apply a single operation token to ``vector`` in place.

    :param vector: Vector to modify.
    :type vector: BitVector
    :param token: Operation token such as ``inc`` or ``shl:3``.
    :type token: str
    :returns: None
    :rtype: None
    :raises ValueError: If the operation is unknown or its argument is
        missing or malformed.
    """
    name, arg = _parse_op(token)
    if name in UNARY_OPS:
        if arg is not None:
            raise ValueError(f"Operation '{name}' takes no argument")
        UNARY_OPS[name](vector)
    elif name in INT_OPS:
        if arg is None:
            raise ValueError(f"Operation '{name}' needs an integer argument")
        INT_OPS[name](vector, int(arg))
    elif name in VECTOR_OPS:
        if arg is None:
            raise ValueError(f"Operation '{name}' needs a hex operand")
        VECTOR_OPS[name](vector, BitVector.from_hex(arg, len(vector)))
    else:
        raise ValueError(f"Unknown operation: {token}")


def run_apply(
    length: int, hex_text: Optional[str], ops: List[str], verbose: bool
) -> BitVector:
    """Build a vector and apply ``ops`` to it in order, printing the dump.

    :param length: Length in bits.
    :type length: int
    :param hex_text: Initial bytes as hex, or ``None`` for all zeros.
    :type hex_text: Optional[str]
    :param ops: Operation tokens.
    :type ops: List[str]
    :param verbose: Print the dump after every operation.
    :type verbose: bool
    :returns: The resulting vector.
    :rtype: BitVector
    """
    vector = _make_vector(length, hex_text)
    if verbose:
        print(f"start: {vector.dump()}")
    for token in ops:
        apply_op(vector, token)
        if verbose:
            print(f"{token}: {vector.dump()}")
    if not verbose:
        print(vector.dump())
    return vector


def run_compare(a: BitVector, b: BitVector) -> str:
    """Describe how ``a`` relates to ``b``.

    For vectors of different lengths every ordering operator is false, so
    the individual results are listed instead of a single verdict.

    :param a: First vector.
    :type a: BitVector
    :param b: Second vector.
    :type b: BitVector
    :returns: ``equal``, ``less``, ``greater`` or the per-operator results.
    :rtype: str
    """
    if len(a) != len(b):
        return (
            f"lengths differ ({len(a)} vs {len(b)}): "
            f"== {a == b}, < {a < b}, <= {a <= b}, > {a > b}, >= {a >= b}"
        )
    return ("equal", "greater", "less")[a.compare(b)]


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv[1:]``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    try:
        if args.cmd in ["apply", "a"]:
            run_apply(args.length, args.hex, args.ops, args.verbose)
        elif args.cmd in ["compare", "c"]:
            other_length = args.other_length
            if other_length is None:
                other_length = args.length
            a = _make_vector(args.length, args.a)
            b = _make_vector(other_length, args.b)
            print(run_compare(a, b))
    except (BitVectorError, ValueError) as e:
        print(f"[!] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
