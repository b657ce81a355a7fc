"""
MTG Configuration

Settings come from the environment, optionally seeded from a .env file
in the project root. Every setting has a default, so the tool runs with
no configuration at all.

Variables:
- MTG_STORE_PATH        appointment file (default: ~/.mtgrc.json)
- MTG_STRICT_LOAD       fail instead of starting empty on a corrupt file
- MTG_NOTIFIER_COMMAND  external notifier; empty string disables it
- MTG_NOTIFY_TITLE      notification title
- MTG_NOTIFY_DESKTOP    plyer desktop notification fallback
- MTG_NOTIFY_SPEAK      also speak notifications
- MTG_SPEECH_RATE       speech rate (words per minute)
- MTG_LOG_LEVEL         logging level for start.py
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from mtg.voice.notifier import DEFAULT_COMMAND, DEFAULT_TITLE

logger = logging.getLogger(__name__)


ENV_FILE = Path(__file__).parent.parent / ".env"
DEFAULT_STORE_PATH = Path.home() / ".mtgrc.json"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _load_env_file():
    """Load environment variables from .env file if it exists."""
    if ENV_FILE.exists():
        load_dotenv(ENV_FILE)
        logger.debug(f"Loaded environment from {ENV_FILE}")


def _flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class MtgConfig:
    """Resolved settings for one run"""
    store_path: Path = DEFAULT_STORE_PATH
    strict_load: bool = False
    notifier_command: Optional[str] = DEFAULT_COMMAND
    notify_title: str = DEFAULT_TITLE
    notify_desktop: bool = True
    notify_speak: bool = False
    speech_rate: int = 175
    log_level: str = "WARNING"


def load_config(env: Optional[Mapping[str, str]] = None) -> MtgConfig:
    """
    Build configuration from environment variables.

    Args:
        env: Mapping to read from (default: os.environ after loading .env)

    Returns:
        MtgConfig with defaults for anything unset
    """
    if env is None:
        _load_env_file()
        env = os.environ

    store_path = env.get("MTG_STORE_PATH")

    try:
        speech_rate = int(env.get("MTG_SPEECH_RATE", "175"))
    except ValueError:
        logger.warning(f"Invalid MTG_SPEECH_RATE: {env.get('MTG_SPEECH_RATE')!r}, using 175")
        speech_rate = 175

    return MtgConfig(
        store_path=Path(store_path).expanduser() if store_path else DEFAULT_STORE_PATH,
        strict_load=_flag(env, "MTG_STRICT_LOAD", False),
        notifier_command=env.get("MTG_NOTIFIER_COMMAND", DEFAULT_COMMAND),
        notify_title=env.get("MTG_NOTIFY_TITLE", DEFAULT_TITLE),
        notify_desktop=_flag(env, "MTG_NOTIFY_DESKTOP", True),
        notify_speak=_flag(env, "MTG_NOTIFY_SPEAK", False),
        speech_rate=speech_rate,
        log_level=env.get("MTG_LOG_LEVEL", "WARNING").upper(),
    )
