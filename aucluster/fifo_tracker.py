"""Event clustering into activity units that each keep a ring of recent events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .params import (
    EVENT_BITS,
    FIFO_PROTOTYPE,
    X_BITS,
    Y_BITS,
    Event,
    FifoParams,
    pack_event,
    status_word,
)


def _signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _coerce(event: Event | int) -> int:
    if isinstance(event, Event):
        return pack_event(event)
    if not 0 <= event < (1 << EVENT_BITS):
        raise ValueError(f"{event} is not a {EVENT_BITS}-bit event word")
    return event


@dataclass(frozen=True)
class FifoRunResult:
    """Outcome of one invocation: the returned FIFO (if any) and the status word."""

    fifo: tuple[int, ...] | None
    status: int


class FifoTracker:
    """Assigns events to activity units by proximity to their stored events."""

    def __init__(self, params: FifoParams = FIFO_PROTOTYPE) -> None:
        self.params = params
        self._fifos = [[0] * params.fifo_depth for _ in range(params.n_au)]
        self._pointers = [0] * params.n_au
        self._status = [False] * params.n_au
        self._status_inited = False

    def _in_range(self, n: int) -> bool:
        return 0 <= n < self.params.n_au

    def init_status(self, status_in: int, init_n: int) -> None:
        """Mark every unit free on the first call; later, load flags when init_n is valid."""
        if not self._status_inited:
            self._status = [True] * self.params.n_au
            self._status_inited = True
        elif self._in_range(init_n):
            self._status = [bool((status_in >> i) & 1) for i in range(self.params.n_au)]

    def load_fifo(self, init_n: int, events: Iterable[Event | int], depth: int) -> None:
        """Replace unit ``init_n``'s FIFO and set its write pointer to ``depth``."""
        if not self._in_range(init_n):
            return
        size = self.params.fifo_depth
        words = [_coerce(e) for e in events]
        if len(words) > size:
            raise ValueError(f"at most {size} events fit in a FIFO")
        if not 0 <= depth <= size:
            raise ValueError(f"depth must be between 0 and {size}")
        self._fifos[init_n] = words + [0] * (size - len(words))
        self._pointers[init_n] = depth % size

    def interested(self, packed: Event | int) -> list[bool]:
        """Which units hold an event within ``dadd`` of this one."""
        packed = _coerce(packed)
        p = self.params
        # The x field is read one bit wider than it is, as the hardware does.
        in_x = _signed(packed, X_BITS + 1)
        in_y = (packed >> X_BITS) & ((1 << Y_BITS) - 1)
        limit = (p.fifo_depth // p.pi) * p.pi

        def near(stored: int) -> bool:
            c_x = _signed(stored, X_BITS + 1)
            c_y = (stored >> X_BITS) & ((1 << Y_BITS) - 1)
            dx = _signed(in_x - c_x, X_BITS + 1)
            dy = _signed(in_y - c_y, Y_BITS + 1)
            return abs(dx) <= p.dadd and abs(dy) <= p.dadd

        return [any(near(s) for s in fifo[:limit]) for fifo in self._fifos]

    def process(self, events: Iterable[Event | int]) -> list[tuple[int, ...]]:
        """Route each event; return, per event, the units that stored it."""
        assigned = []
        for event in events:
            packed = _coerce(event)
            wanted = self.interested(packed)
            if not any(wanted):
                free = next((i for i, s in enumerate(self._status) if s), None)
                if free is not None:
                    self._status[free] = False
                    wanted[free] = True
            units = tuple(i for i, w in enumerate(wanted) if w)
            for i in units:
                pointer = self._pointers[i]
                self._fifos[i][pointer] = packed
                self._pointers[i] = (pointer + 1) % self.params.fifo_depth
            assigned.append(units)
        return assigned

    def fifo(self, n: int) -> tuple[int, ...]:
        """Contents of unit ``n``'s FIFO in storage order."""
        if not self._in_range(n):
            raise IndexError(f"no activity unit {n}")
        return tuple(self._fifos[n])

    def status_word(self) -> int:
        """Free flags of all units packed into a word."""
        return status_word(self._status)

    def run(
        self,
        events: Iterable[Event | int],
        init_fifo: Sequence[Event | int] | None,
        return_n: int,
        init_n: int,
        in_fifo_depth: int,
        status_in: int,
    ) -> FifoRunResult:
        """One full invocation: status setup, FIFO load, processing and read-back."""
        self.init_status(status_in, init_n)
        self.load_fifo(init_n, init_fifo or (), in_fifo_depth)
        self.process(events)
        fifo = self.fifo(return_n) if self._in_range(return_n) else None
        return FifoRunResult(fifo=fifo, status=self.status_word())