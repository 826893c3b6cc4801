"""Event clustering into activity units backed by per-unit activity maps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .params import (
    AMAP_PROTOTYPE,
    EVENT_BITS,
    AmapParams,
    Event,
    pack_event,
    status_word,
    unpack_event,
)

# Coordinate written for an empty FIFO slot; it lies outside any map.
_EMPTY_COORD = 1023


def _coerce(event: Event | int) -> int:
    if isinstance(event, Event):
        return pack_event(event)
    if not 0 <= event < (1 << EVENT_BITS):
        raise ValueError(f"{event} is not a {EVENT_BITS}-bit event word")
    return event


@dataclass(frozen=True)
class AmapRunResult:
    """Outcome of one invocation: returned map and FIFO (if any) and the status word."""

    amap: tuple[int, ...] | None
    fifo: tuple[int, ...] | None
    status: int


class AmapTracker:
    """Assigns events to units whose activity map covers the event's position.

    Each unit keeps a ring of its recent events and a map counting, per pixel,
    how many of those events lie within ``d`` pixels (a square neighbourhood).
    """

    def __init__(self, params: AmapParams = AMAP_PROTOTYPE) -> None:
        self.params = params
        size = params.height * params.width
        self._maps = [[0] * size for _ in range(params.n_au)]
        self._fifos = [[0] * params.fifo_depth for _ in range(params.n_au)]
        self._pointers = [0] * params.n_au
        self._status = [False] * params.n_au
        self._status_inited = False

    @property
    def _value_mask(self) -> int:
        return (1 << self.params.value_bits) - 1

    def _in_range(self, n: int) -> bool:
        return 0 <= n < self.params.n_au

    def _check_unit(self, n: int) -> None:
        if not self._in_range(n):
            raise IndexError(f"no activity unit {n}")

    def init_status(self, status_in: int, init_n: int) -> None:
        """Mark every unit free on the first call; later, load flags when init_n is valid."""
        if not self._status_inited:
            self._status = [True] * self.params.n_au
            self._status_inited = True
        elif self._in_range(init_n):
            self._status = [bool((status_in >> i) & 1) for i in range(self.params.n_au)]

    def load_amap(self, init_n: int, values: Iterable[int]) -> None:
        """Replace unit ``init_n``'s map with ``values`` in row-major order, zero-padded."""
        if not self._in_range(init_n):
            return
        size = self.params.height * self.params.width
        cells = list(values)
        if len(cells) > size:
            raise ValueError(f"at most {size} map values fit")
        for value in cells:
            if not 0 <= value <= self._value_mask:
                raise ValueError(f"map value {value} does not fit in {self.params.value_bits} bits")
        self._maps[init_n] = cells + [0] * (size - len(cells))

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

    def query(self, x: int, y: int) -> list[bool]:
        """Which units have a positive map value at ``(x, y)``."""
        p = self.params
        if not (0 <= x < p.width and 0 <= y < p.height):
            return [False] * p.n_au
        index = y * p.width + x
        return [amap[index] > 0 for amap in self._maps]

    def update_square(
        self,
        xs: Sequence[int],
        ys: Sequence[int],
        value: int,
        interested: Sequence[bool],
    ) -> None:
        """Add ``value`` to the square of radius ``d`` around each interested unit's point."""
        p = self.params
        if not len(xs) == len(ys) == len(interested) == p.n_au:
            raise ValueError(f"expected {p.n_au} coordinates and flags")
        mask = self._value_mask
        step = value & mask
        span = range(-p.d, p.d + 1)
        for amap, x, y, wanted in zip(self._maps, xs, ys, interested):
            if not wanted:
                continue
            columns = [x + i for i in span if 0 <= x + i < p.width]
            rows = [y + j for j in span if 0 <= y + j < p.height]
            for row in rows:
                base = row * p.width
                for column in columns:
                    index = base + column
                    amap[index] = (amap[index] + step) & mask

    def process(self, events: Iterable[Event | int]) -> list[tuple[int, ...]]:
        """Route each event; return, per event, the units that stored it."""
        p = self.params
        assigned = []
        for event in events:
            packed = _coerce(event)
            decoded = unpack_event(packed)
            wanted = self.query(decoded.x, decoded.y)
            if not any(wanted):
                free = next((i for i, s in enumerate(self._status) if s), None)
                if free is not None:
                    self._status[free] = False
                    wanted[free] = True

            self.update_square([decoded.x] * p.n_au, [decoded.y] * p.n_au, 1, wanted)

            old_xs = [decoded.x] * p.n_au
            old_ys = [decoded.y] * p.n_au
            units = tuple(i for i, w in enumerate(wanted) if w)
            for i in units:
                pointer = self._pointers[i]
                old = self._fifos[i][pointer]
                if old == 0:
                    old_xs[i] = old_ys[i] = _EMPTY_COORD
                else:
                    old_event = unpack_event(old)
                    old_xs[i], old_ys[i] = old_event.x, old_event.y
                self._fifos[i][pointer] = packed
                self._pointers[i] = (pointer + 1) % p.fifo_depth

            self.update_square(old_xs, old_ys, -1, wanted)
            assigned.append(units)
        return assigned

    def amap(self, n: int) -> tuple[int, ...]:
        """Unit ``n``'s activity map in row-major order."""
        self._check_unit(n)
        return tuple(self._maps[n])

    def fifo(self, n: int) -> tuple[int, ...]:
        """Contents of unit ``n``'s FIFO in storage order."""
        self._check_unit(n)
        return tuple(self._fifos[n])

    def depth(self, n: int) -> int:
        """Write pointer of unit ``n``'s FIFO."""
        self._check_unit(n)
        return self._pointers[n]

    def status_word(self) -> int:
        """Free flags of all units packed into a word."""
        return status_word(self._status)

    def run(
        self,
        events: Iterable[Event | int],
        init_amap: Sequence[int] | None,
        init_fifo: Sequence[Event | int] | None,
        return_n: int,
        init_n: int,
        in_fifo_depth: int,
        status_in: int,
    ) -> AmapRunResult:
        """One full invocation: setup, loading, processing and read-back."""
        self.init_status(status_in, init_n)
        self.load_amap(init_n, init_amap or ())
        self.load_fifo(init_n, init_fifo or (), in_fifo_depth)
        self.process(events)
        status = self.status_word()
        if self._in_range(return_n):
            return AmapRunResult(amap=self.amap(return_n), fifo=self.fifo(return_n), status=status)
        return AmapRunResult(amap=None, fifo=None, status=status)