# tests/test_worker.py
import pytest

from errors import TransportAllocationError
from exact_arith import ReductionMode
from fake_transport import FakeGroup
from protocol import SENTINEL, Range
from worker import WorkerLoop, WorkerState


def test_sentinel_first_terminates_without_sending():
    group = FakeGroup(2)
    group.transport(0).send_range(SENTINEL, 1)
    loop = WorkerLoop(group.transport(1), ReductionMode.SUM)

    assert loop.step() is None
    assert loop.state is WorkerState.TERMINATED
    assert group.messages("result") == []
    assert loop.chunks_done == 0


def test_terminated_is_absorbing():
    group = FakeGroup(2)
    coord = group.transport(0)
    coord.send_range(SENTINEL, 1)
    loop = WorkerLoop(group.transport(1), ReductionMode.SUM)
    loop.step()

    # a range queued after termination is never consumed
    coord.send_range(Range(1, 5), 1)
    assert loop.step() is None
    assert group.transport(1).recv_range(0) == Range(1, 5)
    assert group.messages("result") == []


@pytest.mark.parametrize("mode,expected", [
    (ReductionMode.SUM, b"12"),
    (ReductionMode.PRODUCT, b"60"),
])
def test_worker_reports_encoded_value_and_time(mode, expected):
    group = FakeGroup(2)
    coord = group.transport(0)
    coord.send_range(Range(3, 5), 1)
    coord.send_range(SENTINEL, 1)

    loop = WorkerLoop(group.transport(1), mode)
    assert loop.step() == Range(3, 5)
    assert loop.step() is None

    msg = coord.recv_result(1)
    assert msg.payload == expected
    assert msg.length == len(expected)
    assert msg.elapsed >= 0.0
    assert loop.chunks_done == 1


def test_oversized_result_is_fatal():
    group = FakeGroup(2, max_message_size=8)
    group.transport(0).send_range(Range(1, 20), 1)
    loop = WorkerLoop(group.transport(1), ReductionMode.PRODUCT)

    with pytest.raises(TransportAllocationError):
        loop.step()
    assert group.messages("result") == []


def test_run_processes_until_sentinel():
    group = FakeGroup(1)  # barrier of one: the worker passes it alone
    transport = group.transport(0)
    for rng in [Range(1, 3), Range(4, 6), SENTINEL]:
        transport.send_range(rng, 0)
    loop = WorkerLoop(transport, ReductionMode.SUM)

    assert loop.run() == 2
    assert [m.payload for m in group.messages("result")] == [b"6", b"15"]
