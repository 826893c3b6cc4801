import pytest

from aucluster.params import (
    AmapParams,
    Event,
    FifoParams,
    ceil_div,
    pack_event,
    status_flags,
    status_word,
    unpack_event,
)


@pytest.mark.parametrize(
    "event",
    [Event(0, 0), Event(50, 50, 300, 1), Event(1023, 1023, 2**32 - 1, 1), Event(14, 16, 1, 0)],
)
def test_pack_unpack_round_trip(event):
    assert unpack_event(pack_event(event)) == event


def test_field_positions():
    assert pack_event(Event(1, 0)) == 1
    assert pack_event(Event(0, 1)) == 1024
    assert pack_event(Event(0, 0, 0, 1)) == 1 << 52


def test_packed_word_fits_64_bits():
    assert pack_event(Event(1023, 1023, 2**32 - 1, 1)) < 2**64


@pytest.mark.parametrize("fields", [(1024, 0), (0, 1024), (0, 0, 2**32), (0, 0, 0, 2), (-1, 0)])
def test_event_rejects_out_of_range(fields):
    with pytest.raises(ValueError):
        Event(*fields)


def test_unpack_rejects_bad_word():
    with pytest.raises(ValueError):
        unpack_event(-1)
    with pytest.raises(ValueError):
        unpack_event(2**64)


@pytest.mark.parametrize("a,b", [(7, 2), (8, 2), (1, 5), (128, 4), (0, 3)])
def test_ceil_div_is_smallest_cover(a, b):
    q = ceil_div(a, b)
    assert q * b >= a
    assert (q - 1) * b < a


def test_ceil_div_zero_divisor():
    with pytest.raises(ZeroDivisionError):
        ceil_div(1, 0)


def test_status_round_trip():
    flags = [False] + [True] * 11
    assert status_flags(status_word(flags), 12) == flags


def test_status_word_bit_order():
    assert status_word([False, True]) == 2
    assert status_flags(1, 3) == [True, False, False]


def test_status_word_too_many_flags():
    with pytest.raises(ValueError):
        status_word([True] * 33)


def test_param_validation():
    with pytest.raises(ValueError):
        FifoParams(n_au=33)
    with pytest.raises(ValueError):
        FifoParams(pi=0)
    with pytest.raises(ValueError):
        AmapParams(width=2000)
    with pytest.raises(ValueError):
        AmapParams(fifo_depth=4096, pointer_bits=11)