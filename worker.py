# Author      : Tyson Limato
# Date        : 2025-7-4
# File Name   : worker.py
import logging
from enum import Enum

from chunk_planner import COORDINATOR_RANK
from exact_arith import ReductionMode
from protocol import ResultMessage
from result_codec import encode

logger = logging.getLogger(__name__)


class WorkerState(Enum):
    AWAITING_RANGE = "awaiting_range"
    TERMINATED = "terminated"


class WorkerLoop:
    """
    Receive ranges from the coordinator, reduce them exactly, send back the
    encoded value and the compute time, until the sentinel range arrives.

    Parameters:
    -----------
    transport : MPIManager
        Point-to-point transport of this process (rank >= 1).
    mode : ReductionMode
        Sum or product.
    max_message_size : int
        Largest encoded result this worker may send. Defaults to the
        transport's own limit.
    """

    def __init__(self, transport, mode: ReductionMode, max_message_size: int = None):
        self.transport = transport
        self.mode = mode
        self.max_message_size = (max_message_size if max_message_size is not None
                                 else transport.max_message_size)
        self.state = WorkerState.AWAITING_RANGE
        self.chunks_done = 0
        self.compute_time = 0.0

    @property
    def rank(self) -> int:
        return self.transport.rank

    def step(self):
        """
        Handle one message from the coordinator.

        Returns the Range that was processed, or None once terminated.
        TransportAllocationError propagates when the encoded value does not
        fit in a message.
        """
        if self.state is WorkerState.TERMINATED:
            return None

        rng = self.transport.recv_range(COORDINATOR_RANK)
        if rng.is_sentinel:
            logger.debug("received sentinel after %d chunks", self.chunks_done)
            self.state = WorkerState.TERMINATED
            return None

        # start the timer
        elapsed = -self.transport.wtime()
        value = self.mode.reduce(rng.first, rng.last)
        payload = encode(value, self.max_message_size)
        # stop the timer
        elapsed += self.transport.wtime()

        logger.debug("from=%d, to=%d: sending result of size %d",
                     rng.first, rng.last, len(payload))
        self.transport.send_result(ResultMessage(payload, elapsed), COORDINATOR_RANK)
        self.chunks_done += 1
        self.compute_time += elapsed
        return rng

    def run(self) -> int:
        """Pass the start barrier, then loop until the sentinel. Returns the chunk count."""
        self.transport.barrier()
        logger.debug("worker %d has passed barrier", self.rank)
        while self.state is WorkerState.AWAITING_RANGE:
            self.step()
        return self.chunks_done
