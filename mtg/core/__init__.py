"""
MTG Core - Time-window queries

The command dispatcher lives in mtg.core.dispatcher and is imported
from there directly (it depends on mtg.agents, which depends on this
package).
"""

from .window_query import (
    NOWISH_RADIUS,
    all_records,
    before_today,
    is_before_today,
    is_nowish,
    nowish,
    start_of_day,
    today,
)

__all__ = [
    'NOWISH_RADIUS',
    'all_records',
    'before_today',
    'is_before_today',
    'is_nowish',
    'nowish',
    'start_of_day',
    'today',
]
