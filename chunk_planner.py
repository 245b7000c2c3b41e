# Author      : Tyson Limato
# Date        : 2025-7-3
# File Name   : chunk_planner.py
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from errors import ConfigurationError
from protocol import Range

# rank of the coordinator; it also takes the last slot of every wave
COORDINATOR_RANK = 0


@dataclass
class Wave:
    """
    One synchronous round of work.

    Attributes:
    -----------
    index : int
        Position of the wave in the plan, starting at 0.
    assignments : list of (rank, Range)
        Ranges sent to workers, in rank order 1..w.
    local : Range or None
        The range the coordinator computes itself after dispatching.
    """
    index: int
    assignments: List[Tuple[int, Range]] = field(default_factory=list)
    local: Optional[Range] = None

    def ranges(self) -> List[Range]:
        out = [rng for _, rng in self.assignments]
        if self.local is not None:
            out.append(self.local)
        return out

    @property
    def worker_ranks(self) -> List[int]:
        return [rank for rank, _ in self.assignments]


class ChunkPlan:
    """
    Split [1..n] into chunks and group them into dispatch waves.

    Parameters:
    -----------
    n : int
        Upper end of the range to reduce (> 0).
    worker_count : int
        Number of worker ranks (1..w). May be 0, in which case the
        coordinator computes everything itself.
    chunk_size : int
        Requested chunk size. 0 derives it from the worker count:
        n // w per worker, with the first n % w workers taking one extra.

    Every wave has one slot per worker in rank order followed by one local
    slot for the coordinator. Chunks fill the slots in sequence, so reading
    the chunks of all waves in order walks [1..n] from left to right.
    """

    def __init__(self, n: int, worker_count: int, chunk_size: int = 0):
        if n < 1:
            raise ConfigurationError(f"n must be positive, got {n}")
        if worker_count < 0:
            raise ConfigurationError(f"worker count must be >= 0, got {worker_count}")
        if chunk_size < 0:
            raise ConfigurationError(f"chunk size must be >= 0, got {chunk_size}")
        self.n = n
        self.worker_count = worker_count
        self.chunk_size = chunk_size

    @property
    def auto(self) -> bool:
        return self.chunk_size == 0

    def chunk_sizes(self) -> Iterator[int]:
        """Sizes of the logical chunks, in the order they are handed out."""
        if self.auto:
            if self.worker_count == 0:
                yield self.n
                return
            base, rem = divmod(self.n, self.worker_count)
            for i in range(self.worker_count):
                size = base + 1 if i < rem else base
                # n < w: trailing workers get nothing
                if size == 0:
                    return
                yield size
            return

        full, tail = divmod(self.n, self.chunk_size)
        for _ in range(full):
            yield self.chunk_size
        if tail:
            yield tail

    def ranges(self) -> Iterator[Range]:
        """The chunks as closed ranges, contiguous and in order."""
        cursor = 1
        for size in self.chunk_sizes():
            yield Range(cursor, cursor + size - 1)
            cursor += size

    def slots(self) -> List[int]:
        """Rank of every slot in a wave: workers 1..w, then the coordinator."""
        return list(range(1, self.worker_count + 1)) + [COORDINATOR_RANK]

    def waves(self) -> Iterator[Wave]:
        slots = self.slots()
        wave = Wave(index=0)
        pos = 0
        for rng in self.ranges():
            rank = slots[pos]
            if rank == COORDINATOR_RANK:
                wave.local = rng
            else:
                wave.assignments.append((rank, rng))
            pos += 1
            if pos == len(slots):
                yield wave
                wave = Wave(index=wave.index + 1)
                pos = 0
        if pos:
            yield wave

    def __iter__(self):
        return self.waves()

    def __repr__(self):
        return (f"ChunkPlan(n={self.n}, worker_count={self.worker_count}, "
                f"chunk_size={self.chunk_size})")
