"""Event word layout and build parameters of the tracking cores."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

X_BITS = 10
Y_BITS = 10
T_BITS = 32
P_BITS = 1
EVENT_BITS = 64
STATUS_BITS = 32

_Y_SHIFT = X_BITS
_T_SHIFT = X_BITS + Y_BITS
_P_SHIFT = X_BITS + Y_BITS + T_BITS


def _mask(bits: int) -> int:
    return (1 << bits) - 1


@dataclass(frozen=True)
class Event:
    """A single sensor event: position, timestamp and polarity."""

    x: int
    y: int
    t: int = 0
    p: int = 0

    def __post_init__(self) -> None:
        for name, bits in (("x", X_BITS), ("y", Y_BITS), ("t", T_BITS), ("p", P_BITS)):
            value = getattr(self, name)
            if not 0 <= value <= _mask(bits):
                raise ValueError(f"{name}={value} does not fit in {bits} bits")


def pack_event(event: Event) -> int:
    """Pack an event into its 64-bit word."""
    return (
        event.x
        | (event.y << _Y_SHIFT)
        | (event.t << _T_SHIFT)
        | (event.p << _P_SHIFT)
    )


def unpack_event(value: int) -> Event:
    """Unpack a 64-bit event word."""
    if not 0 <= value <= _mask(EVENT_BITS):
        raise ValueError(f"{value} is not a {EVENT_BITS}-bit event word")
    return Event(
        x=value & _mask(X_BITS),
        y=(value >> _Y_SHIFT) & _mask(Y_BITS),
        t=(value >> _T_SHIFT) & _mask(T_BITS),
        p=(value >> _P_SHIFT) & _mask(P_BITS),
    )


def ceil_div(a: int, b: int) -> int:
    """Integer division rounded up."""
    d = a // b
    return d + 1 if a > d * b else d


def status_word(flags: Iterable[bool]) -> int:
    """Pack per-unit free flags into a status word, unit i at bit i."""
    flags = list(flags)
    if len(flags) > STATUS_BITS:
        raise ValueError(f"at most {STATUS_BITS} flags fit in a status word")
    return sum(1 << i for i, flag in enumerate(flags) if flag)


def status_flags(word: int, count: int) -> list[bool]:
    """Unpack the first ``count`` flags of a status word."""
    if not 0 <= count <= STATUS_BITS:
        raise ValueError(f"count must be between 0 and {STATUS_BITS}")
    return [bool((word >> i) & 1) for i in range(count)]


@dataclass(frozen=True)
class FifoParams:
    """Build parameters of the event-FIFO tracker."""

    n_au: int = 12
    fifo_depth: int = 128
    pi: int = 4
    dadd: int = 2
    height: int = 180
    width: int = 240
    pointer_bits: int = 16

    def __post_init__(self) -> None:
        if not 1 <= self.n_au <= STATUS_BITS:
            raise ValueError(f"n_au must be between 1 and {STATUS_BITS}")
        if self.fifo_depth < 1 or self.fifo_depth > (1 << self.pointer_bits):
            raise ValueError("fifo_depth must be positive and addressable")
        if self.pi < 1:
            raise ValueError("pi must be positive")
        if self.dadd < 0:
            raise ValueError("dadd must not be negative")


@dataclass(frozen=True)
class AmapParams:
    """Build parameters of the activity-map tracker."""

    n_au: int = 4
    fifo_depth: int = 128
    d: int = 3
    height: int = 260
    width: int = 346
    pointer_bits: int = 11
    value_bits: int = 16

    def __post_init__(self) -> None:
        if not 1 <= self.n_au <= STATUS_BITS:
            raise ValueError(f"n_au must be between 1 and {STATUS_BITS}")
        if self.fifo_depth < 1 or self.fifo_depth > (1 << self.pointer_bits):
            raise ValueError("fifo_depth must be positive and addressable")
        if self.d < 0:
            raise ValueError("d must not be negative")
        if not (0 < self.width <= (1 << X_BITS) and 0 < self.height <= (1 << Y_BITS)):
            raise ValueError("map size does not fit the event coordinates")


FIFO_PROTOTYPE = FifoParams()
FIFO_FINAL = FifoParams(n_au=13, fifo_depth=1024, pi=16, dadd=5)
AMAP_PROTOTYPE = AmapParams()
AMAP_FINAL = AmapParams(fifo_depth=1024, d=5, pointer_bits=16)