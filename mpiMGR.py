# Author      : Tyson Limato
# Date        : 2025-6-18
# File Name   : mpiMGR.py
import numpy as np
from mpi4py import MPI

from errors import TransportAllocationError
from protocol import DEFAULT_MAX_MESSAGE_SIZE, Range, ResultMessage

RANGE_TAG  = 1
RESULT_TAG = 2

# exit codes used with Abort
EXIT_OVERFLOW   = 6
EXIT_ALLOCATION = 7


class MPIManager:
    """
    A utility class wrapping the `mpi4py` point-to-point calls used by the
    coordinator and the workers.

    Every message is a typed NumPy buffer sent with the blocking
    `Send`/`Recv` pair:

        range   : uint64[2]   (first, last)
        result  : int64[1]    length of the encoded value
                  uint8[len]  encoded value
                  float64[1]  compute time in seconds

    Methods:
    --------
    send_range(rng, dest) / recv_range(source)
        Coordinator -> worker work units (and the sentinel).

    send_result(msg, dest) / recv_result(source)
        Worker -> coordinator encoded partial results.

    barrier(), wtime(), abort(code)
        Group synchronisation, the MPI clock, and tearing the group down.
    """

    def __init__(self, comm=None, max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE):
        # Initialize the MPI communicator
        self.comm = comm if comm is not None else MPI.COMM_WORLD
        # Get the rank (ID) of the current process
        self.rank = self.comm.Get_rank()
        # Get the total number of processes
        self.size = self.comm.Get_size()
        self.max_message_size = max_message_size

    @property
    def worker_count(self) -> int:
        return self.size - 1

    # ------------------ Work Units ------------------
    def send_range(self, rng: Range, dest: int):
        buf = np.array([rng.first, rng.last], dtype=np.uint64)
        self.comm.Send([buf, MPI.UINT64_T], dest=dest, tag=RANGE_TAG)

    def recv_range(self, source: int = 0) -> Range:
        buf = np.empty(2, dtype=np.uint64)
        self.comm.Recv([buf, MPI.UINT64_T], source=source, tag=RANGE_TAG)
        return Range(int(buf[0]), int(buf[1]))

    # ------------------ Results ------------------
    def send_result(self, msg: ResultMessage, dest: int = 0):
        """
        Send an encoded partial result: its length, the bytes, then the time.

        Raises TransportAllocationError when the payload is larger than the
        maximum message size; nothing is sent in that case.
        """
        if msg.length > self.max_message_size:
            raise TransportAllocationError(
                f"[{self.rank}] result of {msg.length} bytes exceeds maximum "
                f"message size {self.max_message_size}", exit_code=EXIT_OVERFLOW)

        length = np.array([msg.length], dtype=np.int64)
        payload = np.frombuffer(msg.payload, dtype=np.uint8)
        elapsed = np.array([msg.elapsed], dtype=np.float64)

        self.comm.Send([length, MPI.INT64_T], dest=dest, tag=RESULT_TAG)
        self.comm.Send([payload, MPI.BYTE], dest=dest, tag=RESULT_TAG)
        self.comm.Send([elapsed, MPI.DOUBLE], dest=dest, tag=RESULT_TAG)

    def recv_result(self, source: int) -> ResultMessage:
        """
        Receive one encoded partial result from `source`.

        The receive buffer is sized from the announced length and only lives
        until the caller has decoded it.
        """
        length = np.empty(1, dtype=np.int64)
        self.comm.Recv([length, MPI.INT64_T], source=source, tag=RESULT_TAG)
        n = int(length[0])
        if n <= 0 or n > self.max_message_size:
            raise TransportAllocationError(
                f"[{self.rank}] PE {source} announced a result of {n} bytes "
                f"(maximum {self.max_message_size})", exit_code=EXIT_OVERFLOW)

        try:
            payload = np.empty(n, dtype=np.uint8)
        except MemoryError as exc:
            raise TransportAllocationError(
                f"[{self.rank}] failed to allocate {n} bytes for the result of PE {source}",
                exit_code=EXIT_ALLOCATION) from exc
        self.comm.Recv([payload, MPI.BYTE], source=source, tag=RESULT_TAG)

        elapsed = np.empty(1, dtype=np.float64)
        self.comm.Recv([elapsed, MPI.DOUBLE], source=source, tag=RESULT_TAG)
        return ResultMessage(payload.tobytes(), float(elapsed[0]))

    # ------------------ Group Control ------------------
    def barrier(self):
        self.comm.Barrier()

    def wtime(self) -> float:
        return MPI.Wtime()

    def abort(self, code: int):
        """Terminate every process in the group with `code`."""
        self.comm.Abort(code)
