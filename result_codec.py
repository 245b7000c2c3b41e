# Author      : Tyson Limato
# Date        : 2025-7-2
# File Name   : result_codec.py
import re

import gmpy2
from gmpy2 import mpq

from errors import MalformedResultError, TransportAllocationError

# sign + '/' separator + terminator
SIZE_OVERHEAD = 3

_RATIONAL = re.compile(rb"-?[0-9]+(?:/[0-9]+)?")


def encoded_size(value) -> int:
    """
    Upper bound on the length of the canonical text of `value`.

    Parameters:
    -----------
    value : mpq
        The rational to be encoded.

    Returns:
    --------
    int
        Numerator digits + denominator digits + SIZE_OVERHEAD. The digit
        counts come from gmpy2.num_digits, which may overshoot by one but
        never undershoots, so the bound is safe to size a buffer with.
    """
    value = mpq(value)
    return (gmpy2.num_digits(value.numerator, 10)
            + gmpy2.num_digits(value.denominator, 10)
            + SIZE_OVERHEAD)


def encode(value, max_size: int) -> bytes:
    """
    Render `value` as "num" or "num/den" ASCII text.

    The buffer is sized per value. Anything that does not fit in `max_size`
    bytes raises TransportAllocationError instead of being truncated.
    """
    value = mpq(value)
    bound = encoded_size(value)
    if bound > max_size:
        raise TransportAllocationError(
            f"encoded result needs up to {bound} bytes, "
            f"maximum message size is {max_size}")
    data = str(value).encode("ascii")
    if len(data) > max_size:
        raise TransportAllocationError(
            f"encoded result is {len(data)} bytes, "
            f"maximum message size is {max_size}")
    return data


def decode(data, max_size: int) -> mpq:
    """
    Parse the canonical text produced by encode().

    Raises MalformedResultError for empty or oversized input, for anything
    that is not a complete rational literal, and for a zero denominator.
    """
    data = bytes(data)
    if not data:
        raise MalformedResultError("empty result payload")
    if len(data) > max_size:
        raise MalformedResultError(
            f"result payload of {len(data)} bytes exceeds maximum {max_size}")
    if _RATIONAL.fullmatch(data) is None:
        preview = data[:40].decode("ascii", errors="replace")
        raise MalformedResultError(f"not a rational literal: {preview!r}")
    try:
        return mpq(data.decode("ascii"))
    except (ValueError, ZeroDivisionError) as exc:
        raise MalformedResultError(f"cannot parse result: {exc}") from exc
