"""Boundary between plant-local datetimes and the engine's integer clock.

The engine counts whole seconds from the scheduling horizon start. Instance
and solution files carry ISO-8601 datetimes; they are converted here and
nowhere else.
"""

from __future__ import annotations

from datetime import datetime, timedelta

SECONDS_PER_MINUTE = 60


def _reject_aware(dt: datetime, name: str) -> None:
    """Reject timezone-aware datetimes."""
    if dt.tzinfo is not None:
        raise TypeError(
            f"{name} must be a naive datetime (no tzinfo), "
            f"got tzinfo={dt.tzinfo!r}. "
            f"All datetimes are assumed to be in plant local time."
        )


def to_seconds(dt: datetime, epoch: datetime) -> int:
    """Whole seconds from epoch to dt (negative before the epoch).

    Raises TypeError if dt or epoch is timezone-aware.
    Raises ValueError if the difference has a fractional second.
    """
    _reject_aware(dt, "dt")
    _reject_aware(epoch, "epoch")

    delta = dt - epoch
    if delta.microseconds:
        raise ValueError(
            f"datetime {dt.isoformat()} does not align to whole seconds "
            f"relative to {epoch.isoformat()}; no implicit rounding."
        )
    return delta.days * 86400 + delta.seconds


def from_seconds(t: int, epoch: datetime) -> datetime:
    _reject_aware(epoch, "epoch")
    return epoch + timedelta(seconds=t)


def parse_time(value: str, epoch: datetime) -> int:
    """ISO-8601 string to seconds from epoch."""
    return to_seconds(datetime.fromisoformat(value), epoch)


def format_time(t: int, epoch: datetime) -> str:
    return from_seconds(t, epoch).isoformat()
