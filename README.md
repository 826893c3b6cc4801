# aucluster

`aucluster` groups the events of an event camera into *attention units* (AUs).
Each incoming event goes to every unit that is already tracking something near
it. If no unit wants the event, it goes to the first free unit, which then
stops being free. The package has two trackers.

- **FIFO tracker** (`aucluster.fifo_tracker.FifoTracker`): each unit keeps a
  ring buffer of recent packed events. A unit takes an event when the event's x
  and y both lie within `dadd` of some event in that unit's buffer.
- **Activity-map tracker** (`aucluster.amap_tracker.AmapTracker`): each unit
  also keeps an activity map of `height × width` 16-bit counters. A stored event
  adds 1 to the square of radius `d` around it. The event it pushes out of the
  ring buffer subtracts 1 from the square around its own position again. A unit
  takes an event when its map is positive at that pixel.

`aucluster.params` holds the shared pieces:

- `Event` together with `pack_event` and `unpack_event`, which convert an event
  to and from its 64-bit word: 10 bits x, 10 bits y, 32 bits timestamp and
  1 bit polarity.
- `ceil_div`.
- `status_word` and `status_flags`, which convert between per-unit free flags
  and a 32-bit status word, with unit *i* at bit *i*.
- The parameter sets `FifoParams` and `AmapParams`, with the ready-made builds
  `FIFO_PROTOTYPE`, `FIFO_FINAL`, `AMAP_PROTOTYPE` and `AMAP_FINAL`.

## Installation

```
pip install .
```

The package uses only the standard library. To install and run the tests:

```
pip install .[test]
pytest
```

## Usage

```python
from aucluster.params import Event, FIFO_PROTOTYPE, pack_event
from aucluster.fifo_tracker import FifoTracker

tracker = FifoTracker(FIFO_PROTOTYPE)
events = [pack_event(Event(x=14, y=16, t=300, p=1))] * 4
print(tracker.process(events))  # per event, the units that stored it
print(tracker.status_word())    # free units as a bit mask
print(tracker.fifo(0)[:4])      # packed events now held by unit 0
```

The trackers take either `Event` objects or packed integers.

`run(...)` on either tracker works like one whole invocation of the core:

1. It sets up the status flags. On the first call every unit is marked free.
   On later calls the flags are loaded from `status_in` when `init_n` names a
   valid unit.
2. It loads unit `init_n`'s buffer, and for `AmapTracker` also its map.
3. It processes the events.
4. It returns a `FifoRunResult` or `AmapRunResult`. The result holds the
   contents of unit `return_n`, or `None` when `return_n` names no unit, and
   the status word.

`AmapTracker` also provides `query`, `update_square`, `amap` and `depth` for
looking at a unit's state directly.

## Command line

```
aucluster fifo
aucluster fifo-final
aucluster amap
aucluster amap-final
```

Each command runs one tracker build on a fixed stream of eight events: four of
one event, then four of another. It prints the report to standard output:

- every unit's free flag, as lines of the form `i empty_out:flag`;
- `result:`;
- for the activity-map builds, the returned map, one row per line;
- `outfifo_depth: 0`;
- the returned buffer, decoded into x, y, t and p.

For the FIFO builds the buffer listing has `fifo_depth × n_au` lines. After the
returned unit's entries, the rest of the lines are zero.

## What it does not do

This package simulates the trackers in software only. It cannot drive a
hardware accelerator that runs them: it does not give access to control
registers, device discovery or memory mapping.