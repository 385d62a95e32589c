"""Reminder timestamp expansion for recurrence frequencies."""

from datetime import datetime, time, timedelta

from medicine_reminder.domain.medicines import Frequency

FREQUENCY_OFFSETS: dict[Frequency, tuple[int, ...]] = {
    Frequency.ONCE_DAILY: (0,),
    Frequency.TWICE_DAILY: (0, 12),
    Frequency.EVERY_6_HOURS: (0, 6, 12, 18),
    Frequency.EVERY_8_HOURS: (0, 8, 16),
}
FALLBACK_OFFSETS: tuple[int, ...] = (0,)


def offsets_for(frequency: Frequency | str) -> tuple[int, ...]:
    """Return hour offsets for a frequency, ``(0,)`` when unrecognized."""
    for member, offsets in FREQUENCY_OFFSETS.items():
        if frequency == member:
            return offsets
    return FALLBACK_OFFSETS


def expand(
    base_time: time, frequency: Frequency | str, now: datetime
) -> list[datetime]:
    """Return upcoming reminder times for a dose schedule.

    Each offset is added to today's ``base_time``; a candidate already in
    the past moves forward by exactly one day. Order follows the offsets.
    """
    anchor = datetime.combine(
        now.date(), base_time.replace(second=0, microsecond=0), tzinfo=now.tzinfo
    )
    times: list[datetime] = []
    for offset in offsets_for(frequency):
        candidate = anchor + timedelta(hours=offset)
        if candidate.timestamp() < now.timestamp():
            candidate += timedelta(days=1)
        times.append(candidate)
    return times
