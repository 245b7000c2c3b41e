# tests/test_result_codec.py
import random

import pytest
from gmpy2 import mpq

from errors import MalformedResultError, TransportAllocationError
from exact_arith import factorial, power
from result_codec import decode, encode, encoded_size

MAX = 1_000_000


def _random_rationals(count, seed=1234):
    rng = random.Random(seed)
    for _ in range(count):
        digits = rng.randint(1, 300)
        num = rng.randint(-10 ** digits, 10 ** digits)
        den = rng.randint(1, 10 ** rng.randint(1, 300))
        yield mpq(num, den)


def test_round_trip_random_rationals():
    for value in _random_rationals(1000):
        assert decode(encode(value, MAX), MAX) == value


def test_canonical_text():
    assert encode(mpq(3628800), MAX) == b"3628800"
    assert encode(mpq(-1, 2), MAX) == b"-1/2"
    assert encode(mpq(6, 4), MAX) == b"3/2"
    assert encode(mpq(0), MAX) == b"0"


def test_encoded_size_bounds_rendered_length():
    for value in [mpq(0), mpq(9), mpq(10), mpq(-99, 100), factorial(200), mpq(1, 3 ** 50)]:
        assert len(encode(value, MAX)) <= encoded_size(value)


def test_encoding_is_sized_per_value():
    big = factorial(3000)
    data = encode(big, MAX)
    assert len(data) == len(str(big))
    assert decode(data, MAX) == big


def test_oversized_encode_is_an_error_not_a_truncation():
    with pytest.raises(TransportAllocationError):
        encode(power(10, 100), max_size=50)


@pytest.mark.parametrize("payload", [
    b"", b"abc", b"1.5", b"12/", b"/12", b" 12", b"12 ", b"1/0", b"--3", b"+3",
    b"1/2/3", b"\xff\xfe",
])
def test_malformed_payloads(payload):
    with pytest.raises(MalformedResultError):
        decode(payload, MAX)


def test_decode_rejects_oversized_payload():
    with pytest.raises(MalformedResultError):
        decode(b"1" * 20, max_size=10)


def test_decode_accepts_bytearray_and_non_canonical_literals():
    assert decode(bytearray(b"42"), MAX) == 42
    assert decode(b"6/4", MAX) == mpq(3, 2)
