"""
MTG Appointment Agent - Store mutations

Responsibilities:
- Add appointments from free text (date parsing delegated)
- Acknowledge "nowish" appointments
- Prune appointments from previous days
- Persist the store after every mutation

This is a data service: no prompting, no printing, no notifications.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from mtg.core.window_query import NOWISH_RADIUS, is_before_today, nowish, start_of_day
from mtg.memory.appointment_models import (
    AppointmentRecord,
    MtgError,
    ValidationError,
    create_appointment,
)
from mtg.memory.appointment_store import AppointmentStore
from mtg.tools.date_parser import parse_when

logger = logging.getLogger(__name__)


class UnparseableDateError(MtgError):
    """Raised when no date can be found in appointment text"""
    pass


DateParser = Callable[[str, Optional[datetime]], Optional[datetime]]


class AppointmentAgent:
    """
    Applies add / acknowledge / prune to an AppointmentStore.

    Design principles:
    - The store is injected, never copied
    - Records are mutated in place inside store.records
    - A failed operation leaves the store untouched
    - `now` is injectable for testability
    """

    def __init__(self, store: AppointmentStore, parse_date: DateParser = parse_when):
        """
        Initialize appointment agent.

        Args:
            store: AppointmentStore instance (already loaded)
            parse_date: text -> datetime | None resolver
        """
        self.store = store
        self.parse_date = parse_date
        logger.info("AppointmentAgent initialized")

    def add(self, text: str, now: Optional[datetime] = None) -> AppointmentRecord:
        """
        Create an appointment from free text and persist it.

        Args:
            text: Appointment description containing a date
            now: Reference time for relative dates (default: datetime.now())

        Returns:
            The stored AppointmentRecord

        Raises:
            ValidationError: If text is blank
            UnparseableDateError: If no date is found in text
            PersistenceError: If storage fails
        """
        if now is None:
            now = datetime.now()

        if not text or not text.strip():
            raise ValidationError("Please provide appointment details.")

        when = self.parse_date(text, now)
        if when is None:
            raise UnparseableDateError(f"Could not parse meeting time: {text}")

        record = create_appointment(text, when)
        self.store.append(record)
        self.store.save()

        logger.info(f"Added appointment: {record.text} (at {record.when})")
        return record

    def acknowledge_nowish(
        self,
        now: Optional[datetime] = None,
        radius: timedelta = NOWISH_RADIUS
    ) -> List[AppointmentRecord]:
        """
        Acknowledge every unacknowledged appointment in the nowish window.

        Calling this again with the same `now` returns an empty list.

        Returns:
            Records that were acknowledged by this call
        """
        if now is None:
            now = datetime.now()

        matched = nowish(self.store.records, now, radius)
        if not matched:
            logger.debug("No nowish appointments to acknowledge")
            return []

        for record in matched:
            record.acknowledge()

        self.store.save()

        logger.info(f"Acknowledged {len(matched)} appointments")
        return matched

    def prune(self, now: Optional[datetime] = None) -> List[AppointmentRecord]:
        """
        Permanently remove appointments from before today.

        Returns:
            The removed records, in their original order
        """
        if now is None:
            now = datetime.now()

        _, removed = self.store.remove_where(lambda r: is_before_today(r, now))
        self.store.save()

        logger.info(f"Pruned {len(removed)} appointments before {start_of_day(now)}")
        return removed
