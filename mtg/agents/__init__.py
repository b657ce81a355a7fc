"""
MTG Agents - Operations on the appointment store
"""

from .appointment_agent import AppointmentAgent, UnparseableDateError

__all__ = [
    'AppointmentAgent',
    'UnparseableDateError',
]
