import pytest

from aucluster.fifo_tracker import FifoTracker
from aucluster.params import (
    FIFO_PROTOTYPE,
    Event,
    FifoParams,
    pack_event,
    status_flags,
    status_word,
)

SMALL = FifoParams(n_au=2, fifo_depth=4, pi=2, dadd=1)


def _ready(params):
    tracker = FifoTracker(params)
    tracker.init_status(0, -1)
    return tracker


def test_bench_scenario():
    e1 = Event(50, 50, 300, 1)
    e2 = Event(14, 16, 300, 1)
    seed = pack_event(Event(14, 16, 1, 1))
    status_in = status_word([False] + [True] * 11)
    tracker = FifoTracker(FIFO_PROTOTYPE)
    result = tracker.run([e1] * 4 + [e2] * 4, [seed] * 128, 0, 0, 0, status_in)
    assert result.fifo[:4] == (pack_event(e1),) * 4
    assert result.fifo[4:8] == (pack_event(e2),) * 4
    assert result.fifo[8:] == (seed,) * 120
    assert status_flags(result.status, 12) == [False] + [True] * 11


def test_run_out_of_range_return_gives_no_fifo():
    tracker = FifoTracker(SMALL)
    result = tracker.run([Event(100, 100)], None, -1, -1, 0, 0)
    assert result.fifo is None
    assert status_flags(result.status, 2) == [False, True]


def test_init_status_first_call_frees_all_then_loads():
    tracker = FifoTracker(FifoParams(n_au=3, fifo_depth=4, pi=2, dadd=1))
    tracker.init_status(0, 0)
    assert status_flags(tracker.status_word(), 3) == [True, True, True]
    tracker.init_status(status_word([True, False, True]), 1)
    assert status_flags(tracker.status_word(), 3) == [True, False, True]
    tracker.init_status(0, 5)
    assert status_flags(tracker.status_word(), 3) == [True, False, True]


def test_far_events_claim_new_units_until_exhausted():
    tracker = _ready(SMALL)
    routed = tracker.process([Event(100, 100), Event(200, 200), Event(300, 300)])
    assert routed == [(0,), (1,), ()]
    assert tracker.status_word() == 0


def test_neighbour_joins_existing_unit():
    tracker = _ready(SMALL)
    routed = tracker.process([Event(100, 100), Event(101, 100), Event(100, 102)])
    assert routed == [(0,), (0,), (1,)]
    assert tracker.fifo(0)[:2] == (pack_event(Event(100, 100)), pack_event(Event(101, 100)))


def test_fifo_is_a_ring():
    tracker = _ready(FifoParams(n_au=1, fifo_depth=4, pi=2, dadd=1))
    events = [Event(100, 100, t) for t in range(1, 6)]
    tracker.process(events)
    words = [pack_event(e) for e in events]
    assert tracker.fifo(0) == (words[4], words[1], words[2], words[3])


def test_empty_slots_attract_events_near_origin():
    tracker = _ready(SMALL)
    assert tracker.interested(Event(0, 0)) == [True, True]
    assert tracker.process([Event(1, 0)]) == [(0, 1)]
    assert status_flags(tracker.status_word(), 2) == [True, True]


def test_load_fifo_sets_pointer():
    tracker = _ready(SMALL)
    seed = [Event(100, 100, 1), Event(100, 100, 2)]
    tracker.load_fifo(1, seed, 2)
    tracker.process([Event(100, 100, 3)])
    assert tracker.fifo(1)[:3] == tuple(pack_event(Event(100, 100, t)) for t in (1, 2, 3))


def test_load_fifo_errors():
    tracker = _ready(SMALL)
    with pytest.raises(ValueError):
        tracker.load_fifo(0, [], 5)
    with pytest.raises(ValueError):
        tracker.load_fifo(0, [Event(1, 1)] * 5, 0)


def test_bad_unit_and_bad_word():
    tracker = _ready(SMALL)
    with pytest.raises(IndexError):
        tracker.fifo(2)
    with pytest.raises(ValueError):
        tracker.process([-1])