"""
MTG Tools - External helpers

Natural-language date parsing.
"""

from .date_parser import parse_when

__all__ = [
    'parse_when',
]
