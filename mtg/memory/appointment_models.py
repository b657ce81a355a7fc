"""
MTG Appointment Models

Data structures for the appointment store.

Philosophy:
- One record per user-entered appointment
- Date is resolved once, at creation, and never re-parsed
- Acknowledgment is a one-way flag
- Pure data representation
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


class MtgError(Exception):
    """Base exception for all MTG errors"""
    pass


class ValidationError(MtgError, ValueError):
    """Raised when an appointment cannot be created from the given input"""
    pass


@dataclass
class AppointmentRecord:
    """
    A single appointment entered by the user.

    Attributes:
        text: Free-text description, exactly as the user typed it
        when: Naive datetime in system local time
        acknowledged: True once the appointment has been surfaced as "nowish"
    """
    text: str
    when: datetime
    acknowledged: bool = field(default=False)

    def __post_init__(self):
        """Validate appointment data"""
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValidationError("Appointment text cannot be empty")
        if not isinstance(self.when, datetime):
            raise TypeError("when must be datetime")

    def __setattr__(self, name, value):
        # `when` is fixed once the record exists
        if name == 'when' and 'when' in self.__dict__:
            raise AttributeError("Appointment time cannot be changed after creation")
        # acknowledgment never goes back to false
        if name == 'acknowledged' and self.__dict__.get('acknowledged') and not value:
            raise AttributeError("Acknowledged appointment cannot be unacknowledged")
        super().__setattr__(name, value)

    def acknowledge(self) -> bool:
        """
        Mark the appointment as acknowledged.

        Returns:
            True if the flag changed, False if it was already set
        """
        if self.acknowledged:
            return False
        self.acknowledged = True
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict"""
        return {
            'text': self.text,
            'date': self.when.isoformat(),
            'acked': self.acknowledged,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppointmentRecord':
        """Create AppointmentRecord from dict"""
        acked = data.get('acked', False)
        if not isinstance(acked, bool):
            raise ValueError(f"acked must be true or false, got {acked!r}")

        return cls(
            text=data['text'],
            when=_parse_iso(data['date']),
            acknowledged=acked,
        )


def _parse_iso(value: str) -> datetime:
    """
    Parse a stored ISO-8601 timestamp into naive local time.

    Accepts the trailing 'Z' written by JavaScript's toISOString(), so
    files created by older versions of the tool still load.
    """
    if not isinstance(value, str):
        raise ValueError(f"date must be an ISO-8601 string, got {type(value).__name__}")

    if value.endswith('Z'):
        value = value[:-1] + '+00:00'

    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def create_appointment(text: str, when: datetime) -> AppointmentRecord:
    """
    Factory function to create a new appointment.

    Args:
        text: User-supplied description (must not be blank)
        when: When the appointment happens (naive datetime, local time)

    Returns:
        New unacknowledged AppointmentRecord

    Raises:
        ValidationError: If text is empty or all whitespace
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Appointment text cannot be empty")

    if isinstance(when, datetime) and when.tzinfo is not None:
        when = when.astimezone().replace(tzinfo=None)

    return AppointmentRecord(text=text, when=when, acknowledged=False)
