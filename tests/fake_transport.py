# tests/fake_transport.py
"""In-process stand-in for MPIManager: one thread per rank, queues for channels."""
import queue
import threading
import time
from collections import defaultdict

from coordinator import Coordinator
from protocol import DEFAULT_MAX_MESSAGE_SIZE
from worker import WorkerLoop

TIMEOUT = 30.0


class FakeGroup:
    def __init__(self, size: int, max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE):
        self.size = size
        self.max_message_size = max_message_size
        self._channels = defaultdict(queue.Queue)
        self._lock = threading.Lock()
        self._barrier = threading.Barrier(size, timeout=TIMEOUT)
        self.sent = []  # (src, dst, kind, item)

    def transport(self, rank: int) -> "FakeTransport":
        return FakeTransport(self, rank)

    def _put(self, src, dst, kind, item):
        with self._lock:
            self.sent.append((src, dst, kind, item))
            chan = self._channels[(src, dst, kind)]
        chan.put(item)

    def _get(self, src, dst, kind):
        with self._lock:
            chan = self._channels[(src, dst, kind)]
        try:
            return chan.get(timeout=TIMEOUT)
        except queue.Empty:
            raise RuntimeError(f"rank {dst} timed out waiting for {kind} from {src}")

    def messages(self, kind, dst=None):
        return [item for (_, d, k, item) in self.sent
                if k == kind and (dst is None or d == dst)]


class FakeTransport:
    def __init__(self, group: FakeGroup, rank: int):
        self.group = group
        self.rank = rank
        self.size = group.size
        self.max_message_size = group.max_message_size

    def send_range(self, rng, dest):
        self.group._put(self.rank, dest, "range", rng)

    def recv_range(self, source=0):
        return self.group._get(source, self.rank, "range")

    def send_result(self, msg, dest=0):
        self.group._put(self.rank, dest, "result", msg)

    def recv_result(self, source):
        return self.group._get(source, self.rank, "result")

    def barrier(self):
        self.group._barrier.wait()

    def wtime(self):
        return time.perf_counter()

    def abort(self, code):
        raise SystemExit(code)


def run_group(n, chunk_size, mode, size, check=True, max_message_size=DEFAULT_MAX_MESSAGE_SIZE):
    """
    Run a coordinator on the calling thread and size - 1 workers on threads.

    Returns (report, group, worker_errors).
    """
    group = FakeGroup(size, max_message_size)
    errors = []

    def work(rank):
        try:
            WorkerLoop(group.transport(rank), mode).run()
        except Exception as exc:  # surfaced to the test
            errors.append(exc)

    threads = [threading.Thread(target=work, args=(r,), daemon=True) for r in range(1, size)]
    for t in threads:
        t.start()
    report = Coordinator(group.transport(0), n, chunk_size, mode=mode, check=check).run()
    for t in threads:
        t.join(TIMEOUT)
    return report, group, errors
