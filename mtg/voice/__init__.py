"""
MTG Voice - Notifications
"""

from .notifier import DEFAULT_COMMAND, DEFAULT_TITLE, Notifier

__all__ = [
    'Notifier',
    'DEFAULT_COMMAND',
    'DEFAULT_TITLE',
]
