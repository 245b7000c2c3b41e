# Author      : Tyson Limato
# Date        : 2025-7-6
# File Name   : config.py
import argparse
import re
import sys
from dataclasses import dataclass

from errors import ConfigurationError
from exact_arith import ReductionMode
from protocol import DEFAULT_MAX_MESSAGE_SIZE

# largest value accepted for n, chunksize and message sizes
UINT_MAX = 2**64 - 1

_DIGITS = re.compile(r"[0-9]+")

_SUFFIXES = {
    "k": 1_000,
    "m": 1_000_000,
    "g": 1_000_000_000,
}


def read_int_k(text: str) -> int:
    """
    Read a non-negative integer with an optional size suffix.

    `80k` -> 80000, `1M` -> 1000000, `2g` -> 2000000000. The suffix is case
    insensitive. Raises ConfigurationError for anything that is not a plain
    number (plus suffix) or that exceeds the unsigned 64-bit range.
    """
    text = text.strip()
    multiply_by = 1
    if text and text[-1].lower() in _SUFFIXES:
        multiply_by = _SUFFIXES[text[-1].lower()]
        text = text[:-1]
    if _DIGITS.fullmatch(text) is None:
        raise ConfigurationError(f"not a size: {text!r}")
    val = int(text)
    if val > UINT_MAX // multiply_by:
        raise ConfigurationError(f"input too large; maximum value: {UINT_MAX}")
    return val * multiply_by


@dataclass(frozen=True)
class RunConfig:
    n: int
    chunk_size: int
    mode: ReductionMode = ReductionMode.SUM
    check: bool = True
    print_result: bool = False
    debug: bool = False
    max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting, so every rank fails the same way."""

    def error(self, message):
        self.print_usage(sys.stderr)
        raise ConfigurationError(message, exit_code=1)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="main.py",
        description="Parallel exact sum (or factorial) over 1 .. n",
    )
    parser.add_argument("n", type=read_int_k, help="upper end of the range, e.g. 1M")
    parser.add_argument("chunksize", type=read_int_k,
                        help="chunk size, e.g. 100k; 0 derives it from the worker count")
    parser.add_argument("--fact", action="store_true",
                        help="compute the factorial (product) instead of the sum")
    parser.add_argument("--check", action=argparse.BooleanOptionalAction, default=True,
                        help="verify the result against a sequential computation")
    parser.add_argument("--print", dest="print_result", action="store_true",
                        help="print the resulting value")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--max-message-size", type=read_int_k,
                        default=DEFAULT_MAX_MESSAGE_SIZE,
                        help="largest encoded result in bytes (default: %(default)s)")
    return parser


def parse_args(argv=None) -> RunConfig:
    args = build_parser().parse_args(argv)
    if args.n == 0:
        raise ConfigurationError("n must be positive")
    if args.max_message_size == 0:
        raise ConfigurationError("--max-message-size must be positive")
    return RunConfig(
        n=args.n,
        chunk_size=args.chunksize,
        mode=ReductionMode.PRODUCT if args.fact else ReductionMode.SUM,
        check=args.check,
        print_result=args.print_result,
        debug=args.debug,
        max_message_size=args.max_message_size,
    )
