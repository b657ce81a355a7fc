"""
MTG Memory - Appointment storage

Records, their JSON persistence, and the in-memory store.
"""

from .appointment_models import (
    AppointmentRecord,
    MtgError,
    ValidationError,
    create_appointment,
)
from .appointment_store import AppointmentStore, JsonFilePersistence, PersistenceError

__all__ = [
    'AppointmentRecord',
    'MtgError',
    'ValidationError',
    'create_appointment',
    'AppointmentStore',
    'JsonFilePersistence',
    'PersistenceError',
]
