"""
MTG Date Parser - Natural-language date resolution

Finds the appointment time inside free text such as
"dentist tomorrow at 3pm" or "standup 9:30".

Rules:
- First plausible date found in the text wins
- Bare numbers ("PR 42", "1:1") are not dates
- Ambiguous dates prefer the future
- Result is a naive datetime in local time
- No match returns None (callers decide what that means)
"""

import logging
import re
from datetime import datetime
from typing import Optional

import dateparser
from dateparser.search import search_dates

logger = logging.getLogger(__name__)


LANGUAGES = ['en']

# Fragments made of nothing but digits and separators
_NUMERIC_ONLY = re.compile(r'^[\d\s:./-]+$')
# ...of which only these shapes are accepted: "9:30", "10:05:00", "2024-03-05", "3/5"
_CLOCK_TIME = re.compile(r'^\d{1,2}:\d{2}(:\d{2})?$')
_NUMERIC_DATE = re.compile(r'^\d{1,4}[/.-]\d{1,2}([/.-]\d{1,4})?$')
# A number glued in front of the time: "42 at 4pm"
_LEADING_NUMBER = re.compile(r'^\d+\s+(?:at|@)\s+', re.IGNORECASE)


def _settings(now: datetime) -> dict:
    return {
        'PREFER_DATES_FROM': 'future',
        'RETURN_AS_TIMEZONE_AWARE': False,
        'RELATIVE_BASE': now,
    }


def is_plausible_fragment(fragment: str) -> bool:
    """
    Check whether a matched fragment can be an appointment time.

    Numeric-only fragments count only as a clock time or a numeric date.
    """
    fragment = fragment.strip()
    if not fragment:
        return False
    if not _NUMERIC_ONLY.match(fragment):
        return True
    return bool(_CLOCK_TIME.match(fragment) or _NUMERIC_DATE.match(fragment))


def _resolve_match(fragment: str, parsed: datetime, settings: dict) -> Optional[datetime]:
    """Re-parse a fragment that starts with a stray number, else keep the match"""
    stray = _LEADING_NUMBER.match(fragment.strip())
    if stray is None:
        return parsed

    remainder = fragment.strip()[stray.end():]
    logger.debug(f"Dropping stray number from '{fragment}', parsing '{remainder}'")
    return dateparser.parse(remainder, languages=LANGUAGES, settings=settings)


def parse_when(text: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Resolve the appointment time mentioned in text.

    Args:
        text: Free-text appointment description
        now: Reference time for relative expressions (default: datetime.now())

    Returns:
        Parsed datetime, or None if the text has no recognisable date
    """
    if not text or not text.strip():
        return None

    if now is None:
        now = datetime.now()

    settings = _settings(now)

    matches = search_dates(text, languages=LANGUAGES, settings=settings)
    if matches:
        for fragment, parsed in matches:
            if not is_plausible_fragment(fragment):
                logger.debug(f"Ignoring '{fragment}' in '{text}'")
                continue

            resolved = _resolve_match(fragment, parsed, settings)
            if resolved is not None:
                logger.debug(f"Found date '{fragment}' in '{text}' -> {resolved}")
                return resolved

        logger.info(f"Only stray numbers found in: {text}")
        return None

    if not is_plausible_fragment(text):
        logger.info(f"No date found in: {text}")
        return None

    # Whole-text parse as a last resort
    parsed = dateparser.parse(text, languages=LANGUAGES, settings=settings)
    if parsed is None:
        logger.info(f"No date found in: {text}")
    return parsed
