"""Shift tracker: which availability interval of a machine is active."""

from __future__ import annotations

from typing import NamedTuple

from oven_scheduling.types import Machine


class ShiftState(NamedTuple):
    """Cached shift position of one machine."""

    shift: int
    on_shift: bool


def current_shift(machine: Machine, time: int) -> int:
    """Largest shift index whose start is <= time, or -1 if none."""
    shift = -1
    for i, start in enumerate(machine.availability_start):
        if start <= time:
            shift = i
        else:
            break
    return shift


def is_on_shift(machine: Machine, shift: int, time: int) -> bool:
    """True if `shift` exists and has not ended before `time`."""
    return shift != -1 and machine.availability_end[shift] >= time


def shift_end(machine: Machine, shift: int) -> int:
    return machine.availability_end[shift]


def initial_shift_state(machine: Machine, time: int) -> ShiftState:
    shift = current_shift(machine, time)
    return ShiftState(shift, is_on_shift(machine, shift, time))


def advance_shift(machine: Machine, state: ShiftState, time: int) -> ShiftState:
    """Move a cached state forward to `time`.

    Only looks past the cached index, so the shift index never decreases and
    repeated calls over a run cost amortised O(1) per machine.
    """
    shift = state.shift
    while (
        shift + 1 < machine.shift_count
        and machine.availability_start[shift + 1] <= time
    ):
        shift += 1
    return ShiftState(shift, is_on_shift(machine, shift, time))
