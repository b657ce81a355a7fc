"""
MTG Window Query - Time-window selection over appointments

Pure functions. Nothing here reads the clock, touches storage or
mutates a record; callers pass the reference time in.

Every function returns matches in the input's relative order.
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from mtg.memory.appointment_models import AppointmentRecord


# Half-width of the "nowish" window
NOWISH_RADIUS = timedelta(minutes=10)


def start_of_day(now: datetime) -> datetime:
    """Midnight (local wall-clock) of the day containing now"""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def all_records(records: Iterable[AppointmentRecord]) -> List[AppointmentRecord]:
    return list(records)


def today(records: Iterable[AppointmentRecord], now: datetime) -> List[AppointmentRecord]:
    """
    Appointments from the start of today onwards.

    Lower bound only: appointments on later days (including far in the
    future) are included as well.
    """
    cutoff = start_of_day(now)
    return [r for r in records if r.when >= cutoff]


def is_before_today(record: AppointmentRecord, now: datetime) -> bool:
    """Strictly before the start of the day containing now"""
    return record.when < start_of_day(now)


def before_today(records: Iterable[AppointmentRecord], now: datetime) -> List[AppointmentRecord]:
    """Appointments strictly before the start of today (prune candidates)"""
    return [r for r in records if is_before_today(r, now)]


def is_nowish(record: AppointmentRecord, now: datetime, radius: timedelta = NOWISH_RADIUS) -> bool:
    """Unacknowledged and within [now - radius, now + radius], bounds inclusive"""
    return (
        not record.acknowledged
        and now - radius <= record.when <= now + radius
    )


def nowish(
    records: Iterable[AppointmentRecord],
    now: datetime,
    radius: timedelta = NOWISH_RADIUS
) -> List[AppointmentRecord]:
    """
    Unacknowledged appointments happening around now.

    Args:
        records: Appointments to filter
        now: Reference time
        radius: Half-width of the window (default: NOWISH_RADIUS)

    Returns:
        Matching appointments, never including acknowledged ones
    """
    return [r for r in records if is_nowish(r, now, radius)]
