"""Command-line demonstrations of the tracking cores on a fixed event sequence."""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from .amap_tracker import AmapRunResult, AmapTracker
from .fifo_tracker import FifoRunResult, FifoTracker
from .params import (
    AMAP_FINAL,
    AMAP_PROTOTYPE,
    FIFO_FINAL,
    FIFO_PROTOTYPE,
    AmapParams,
    Event,
    FifoParams,
    status_flags,
    unpack_event,
)

_REPEATS = 4
_FIFO_PAIR = (Event(x=50, y=50, t=300, p=1), Event(x=14, y=16, t=300, p=1))
_AMAP_PAIR = (Event(x=20, y=20, t=300, p=1), Event(x=50, y=50, t=300, p=1))

_FIFO_SEED = Event(x=14, y=16, t=1, p=1)
_AMAP_SEED = Event(x=1, y=1, t=1, p=1)

_DESIGNS = {
    "fifo": ("fifo", FIFO_PROTOTYPE),
    "fifo-final": ("fifo", FIFO_FINAL),
    "amap": ("amap", AMAP_PROTOTYPE),
    "amap-final": ("amap", AMAP_FINAL),
}


def _repeat_pair(pair: tuple[Event, Event]) -> list[Event]:
    first, second = pair
    return [first] * _REPEATS + [second] * _REPEATS


def demo_events() -> list[Event]:
    """The event sequence fed to the FIFO tracker demo: four of one event, four of another."""
    return _repeat_pair(_FIFO_PAIR)


def _print_status(word: int, count: int, out: TextIO) -> None:
    for i, flag in enumerate(status_flags(word, count)):
        print(f"{i} empty_out:{int(flag)}", file=out)


def _print_fifo(words, out: TextIO) -> None:
    for i, word in enumerate(words):
        event = unpack_event(word)
        print(f"{i}\t x:{event.x} y:{event.y} t:{event.t} p:{event.p}", file=out)


def _signed16(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    return value - (1 << bits) if value >= 1 << (bits - 1) else value


def run_fifo_demo(params: FifoParams, out: TextIO) -> FifoRunResult:
    """Run the FIFO tracker once on the demo events and print its report to ``out``."""
    init_fifo = [_FIFO_SEED] * params.fifo_depth
    # Every unit except unit 0 is offered as free; the first call ignores it anyway.
    status_in = ((1 << params.n_au) - 1) & ~1
    tracker = FifoTracker(params)
    result = tracker.run(
        demo_events(),
        init_fifo,
        return_n=0,
        init_n=0,
        in_fifo_depth=0,
        status_in=status_in,
    )

    _print_status(result.status, params.n_au, out)
    print("result:", file=out)
    print("outfifo_depth: 0", file=out)
    total = params.fifo_depth * params.n_au
    returned = list(result.fifo or ())
    _print_fifo(returned + [0] * (total - len(returned)), out)
    return result


def run_amap_demo(params: AmapParams, out: TextIO) -> AmapRunResult:
    """Run the activity-map tracker once on its demo events and print its report to ``out``."""
    init_fifo = [_AMAP_SEED] * params.fifo_depth
    tracker = AmapTracker(params)
    # init_n lies outside the unit range, so nothing is loaded.
    result = tracker.run(
        _repeat_pair(_AMAP_PAIR),
        None,
        init_fifo,
        return_n=0,
        init_n=16,
        in_fifo_depth=100,
        status_in=0xFFFFFFFF,
    )

    _print_status(result.status, params.n_au, out)
    print("result:", file=out)
    amap = result.amap or (0,) * (params.height * params.width)
    for row in range(params.height):
        cells = amap[row * params.width:(row + 1) * params.width]
        print("".join(f"{_signed16(v, params.value_bits)} " for v in cells), file=out)
    print("outfifo_depth: 0", file=out)
    _print_fifo(result.fifo or (0,) * params.fifo_depth, out)
    return result


def main(argv=None) -> int:
    """Run one demo design and print its report on standard output."""
    parser = argparse.ArgumentParser(
        prog="aucluster",
        description="Run a tracking core on a fixed event sequence and print the result.",
    )
    parser.add_argument("design", choices=sorted(_DESIGNS), help="core and build to run")
    args = parser.parse_args(argv)

    kind, params = _DESIGNS[args.design]
    if kind == "fifo":
        run_fifo_demo(params, sys.stdout)
    else:
        run_amap_demo(params, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())