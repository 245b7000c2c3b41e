# Author      : Tyson Limato
# Date        : 2025-7-2
# File Name   : protocol.py
from dataclasses import dataclass
from typing import NamedTuple


class Range(NamedTuple):
    """
    Closed interval [first, last] of integers handed out as one unit of work.

    Work ranges always start at 1 or above; Range(0, 0) is reserved for the
    termination signal (see SENTINEL).
    """
    first: int
    last: int

    @property
    def size(self) -> int:
        return self.last - self.first + 1

    @property
    def is_sentinel(self) -> bool:
        return self.first == 0 and self.last == 0


# Largest encoded result (in bytes) accepted on either side of the wire
DEFAULT_MAX_MESSAGE_SIZE = 64_000_000

# "no more work" for a worker
SENTINEL = Range(0, 0)


@dataclass(frozen=True)
class ResultMessage:
    """Worker -> coordinator reply: encoded value plus compute time."""
    payload: bytes
    elapsed: float

    @property
    def length(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class PartialResult:
    """A decoded chunk result ready to be absorbed by the coordinator."""
    value: object
    elapsed: float
    rank: int
