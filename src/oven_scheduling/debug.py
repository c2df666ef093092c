"""ASCII visualisation of a schedule for development-time inspection."""

from __future__ import annotations

from oven_scheduling.instance import Instance
from oven_scheduling.output import Output
from oven_scheduling.resolution import from_seconds


def _overlaps(begin: int, end: int, lo: int, hi: int) -> bool:
    return begin < hi and lo < end


def show_schedule(
    instance: Instance,
    output: Output,
    minutes_per_char: int = 30,
) -> str:
    """Print ASCII view of every machine over the scheduling horizon.

    Legend: '.' = off shift, '-' = on shift and idle, 'A'-'Z' = batch
    (letters cycle by batch id). Each char covers `minutes_per_char`
    minutes. Returns the string and also prints to stdout.
    """
    lines: list[str] = []
    label_chars = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    seconds_per_char = minutes_per_char * 60
    horizon = instance.horizon_length
    chars = max(1, -(-horizon // seconds_per_char))

    batch_labels = {
        batch.id: label_chars[(batch.id - 1) % len(label_chars)]
        for batch in output.get_batches()
    }

    start_dt = instance.horizon_start
    end_dt = from_seconds(horizon, start_dt)
    lines.append(
        f"{instance.name}: {start_dt.strftime('%a %d %b %H:%M')} - "
        f"{end_dt.strftime('%a %d %b %H:%M')}, {minutes_per_char} min/char"
    )

    for machine_id in sorted(instance.machines):
        machine = instance.machines[machine_id]
        batches = [b for b in output.get_batches() if b.machine.id == machine_id]
        shifts = list(zip(machine.availability_start, machine.availability_end))

        row = []
        for i in range(chars):
            lo = i * seconds_per_char
            hi = lo + seconds_per_char
            cell = "."
            for batch in batches:
                if _overlaps(batch.start_time, batch.end_time, lo, hi):
                    cell = batch_labels[batch.id]
                    break
            else:
                if any(_overlaps(s, e, lo, hi) for s, e in shifts):
                    cell = "-"
            row.append(cell)

        lines.append(f"{machine.name:>16s}  {''.join(row)}")

    if batch_labels:
        legend_parts = [
            f"{label}={bid}" for bid, label in batch_labels.items()
        ]
        lines.append(
            f"\nLegend: . = off shift, - = idle, batches {', '.join(legend_parts)}"
        )

    result = "\n".join(lines)
    print(result)
    return result
