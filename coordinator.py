# Author      : Tyson Limato
# Date        : 2025-7-5
# File Name   : coordinator.py
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from chunk_planner import COORDINATOR_RANK, ChunkPlan, Wave
from exact_arith import ReductionMode
from protocol import SENTINEL, PartialResult
from result_codec import decode
from verifier import VerificationOutcome, verify

logger = logging.getLogger(__name__)


@dataclass
class CoordinatorContext:
    """
    State owned by the coordinator for one run.

    Attributes:
    -----------
    mode : ReductionMode
        Decides the identity and the combining operator.
    result : mpq
        The accumulated reduction; starts at the mode's identity.
    timings : dict
        Rank -> cumulative compute seconds. Entries appear on first report.
    absorbed : int
        Number of partial results combined so far.
    """
    mode: ReductionMode
    result: object = None
    timings: Dict[int, float] = field(default_factory=dict)
    absorbed: int = 0

    def __post_init__(self):
        if self.result is None:
            self.result = self.mode.identity()

    def absorb(self, partial: PartialResult):
        self.result = self.mode.combine(self.result, partial.value)
        self.timings[partial.rank] = self.timings.get(partial.rank, 0.0) + partial.elapsed
        self.absorbed += 1


@dataclass
class RunReport:
    result: object
    elapsed: float
    timings: Dict[int, float]
    chunks: int
    group_size: int
    verification: Optional[VerificationOutcome] = None

    def rank_times(self):
        """Compute time of every rank in the group, 0.0 for ranks that got no work."""
        return [(rank, self.timings.get(rank, 0.0)) for rank in range(self.group_size)]


class Coordinator:
    """
    Rank 0: plan the chunks, drive the dispatch waves, and accumulate.

    Each wave is a synchronous round: one range is sent to every worker
    that has work, the coordinator reduces its own trailing range locally,
    then one result is collected from each of those workers. The next wave
    is not dispatched before all receives of the current one complete.

    Parameters:
    -----------
    transport : MPIManager
        Transport of rank 0.
    n : int
        Reduce over [1..n].
    chunk_size : int
        Requested chunk size, 0 for automatic sizing.
    mode : ReductionMode
        Sum or product.
    check : bool
        Run the verifier after the last wave.
    """

    def __init__(self, transport, n: int, chunk_size: int = 0,
                 mode: ReductionMode = ReductionMode.SUM, check: bool = True):
        self.transport = transport
        self.n = n
        self.mode = mode
        self.check = check
        self.plan = ChunkPlan(n, transport.size - 1, chunk_size)
        self.context = CoordinatorContext(mode)
        self.chunks = 0
        self._terminated = False

    def run_wave(self, wave: Wave):
        # 1) dispatch, in rank order
        for rank, rng in wave.assignments:
            self.transport.send_range(rng, rank)

        # 2) coordinator computes the last range of the wave itself
        if wave.local is not None:
            rng = wave.local
            logger.debug("MASTER: from=%d, to=%d", rng.first, rng.last)
            elapsed = -self.transport.wtime()
            value = self.mode.reduce(rng.first, rng.last)
            elapsed += self.transport.wtime()
            self.context.absorb(PartialResult(value, elapsed, COORDINATOR_RANK))
            self.chunks += 1

        # 3) collect one result from every worker that was sent work
        for rank in wave.worker_ranks:
            msg = self.transport.recv_result(rank)
            value = decode(msg.payload, self.transport.max_message_size)
            self.context.absorb(PartialResult(value, msg.elapsed, rank))
            self.chunks += 1

    def terminate_workers(self):
        """Send the sentinel to every worker, once."""
        if self._terminated:
            return
        for rank in range(1, self.transport.size):
            self.transport.send_range(SENTINEL, rank)
        self._terminated = True

    def run(self) -> RunReport:
        logger.info("Computing %s over [1..%d] with chunksize %d ...",
                    "factorial" if self.mode is ReductionMode.PRODUCT else "sum",
                    self.n, self.plan.chunk_size)
        logger.info("Using 1 master (also acting as worker) and %d workers ...",
                    self.plan.worker_count)

        # start the timer
        self.transport.barrier()
        logger.debug("master has passed barrier")
        elapsed = -self.transport.wtime()

        for wave in self.plan.waves():
            logger.debug("wave %d: %d remote, %s local", wave.index,
                         len(wave.assignments), wave.local)
            self.run_wave(wave)
        self.terminate_workers()

        # stop the timer
        elapsed += self.transport.wtime()
        logger.info("Finished computation: %d chunks in %f secs", self.chunks, elapsed)

        report = RunReport(result=self.context.result, elapsed=elapsed,
                           timings=dict(self.context.timings), chunks=self.chunks,
                           group_size=self.transport.size)
        if self.check:
            report.verification = verify(self.mode, self.n, report.result)
        return report
