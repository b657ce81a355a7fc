"""
MTG Start - Command-line entry point

Usage:
    python start.py <command> [args...]

Wires the pieces together once per run:
- Configuration (environment / .env)
- AppointmentStore on the configured file
- AppointmentAgent, Notifier
- CommandDispatcher

Always exits 0 so scheduled invocations (cron, launchd) never report
failures for an empty or unreadable store.
"""

import logging
import sys
from typing import List, Optional

from mtg.agents.appointment_agent import AppointmentAgent
from mtg.config import MtgConfig, load_config
from mtg.core.dispatcher import CommandDispatcher
from mtg.memory import AppointmentStore, JsonFilePersistence
from mtg.tools.date_parser import parse_when
from mtg.voice.notifier import Notifier

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    numeric_level = getattr(logging, level, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_dispatcher(config: MtgConfig) -> CommandDispatcher:
    """
    Build the object graph for one run.

    One store instance is shared by the agent and the dispatcher.
    """
    store = AppointmentStore(JsonFilePersistence(config.store_path))
    agent = AppointmentAgent(store, parse_date=parse_when)
    notifier = Notifier(
        command=config.notifier_command,
        title=config.notify_title,
        desktop=config.notify_desktop,
        speak=config.notify_speak,
        rate=config.speech_rate
    )

    return CommandDispatcher(
        store=store,
        agent=agent,
        notifier=notifier,
        strict_load=config.strict_load
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    config = load_config()
    configure_logging(config.log_level)

    try:
        dispatcher = build_dispatcher(config)
        return dispatcher.dispatch(argv)
    except KeyboardInterrupt:
        print("\nInterrupted.")
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"Error: {e}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
