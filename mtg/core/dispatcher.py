"""
MTG Command Dispatcher - Command name -> operation

Thin layer between the command line and the store:
- Loads the store (except for `init`)
- Runs one query or agent operation
- Prints the result

Every command returns exit code 0, including unknown commands and
reported failures, so the tool can run unattended from cron.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from mtg.agents.appointment_agent import AppointmentAgent, UnparseableDateError
from mtg.core import window_query
from mtg.memory.appointment_models import AppointmentRecord, MtgError, ValidationError
from mtg.memory.appointment_store import AppointmentStore, PersistenceError
from mtg.voice.notifier import Notifier

logger = logging.getLogger(__name__)


USAGE = (
    "commands:\n"
    "\tinit\n"
    "\tall | today\n"
    "\tnowish | nowish-notify | nowish-debug | ACK\n"
    "\tadd <text...> | prune | daily-setup"
)

DAILY_SETUP_PROMPT = "Enter an event for today (or press Enter to finish): "


def format_when(when: datetime) -> str:
    return when.strftime("%a %b %d %Y %H:%M:%S")


def format_record(index: int, record: AppointmentRecord) -> str:
    return f"{index}. {record.text} - {format_when(record.when)}"


class CommandDispatcher:
    """
    Maps command names to operations on one AppointmentStore.

    Collaborators are injected so tests can drive every command without
    a terminal, a clock or a notification daemon.
    """

    def __init__(
        self,
        store: AppointmentStore,
        agent: AppointmentAgent,
        notifier: Optional[Notifier] = None,
        output: Callable[[str], None] = print,
        read_line: Callable[[str], str] = input,
        clock: Callable[[], datetime] = datetime.now,
        strict_load: bool = False
    ):
        """
        Args:
            store: Appointment store (not yet loaded)
            agent: AppointmentAgent bound to the same store
            notifier: Used by nowish-notify
            output: Line printer
            read_line: Prompting line reader for daily-setup
            clock: Returns the current time
            strict_load: Report a corrupt store instead of starting empty
        """
        self.store = store
        self.agent = agent
        self.notifier = notifier
        self.output = output
        self.read_line = read_line
        self.clock = clock
        self.strict_load = strict_load

        self._handlers: Dict[str, Callable[[List[str]], None]] = {
            'add': self._add,
            'prune': self._prune,
            'daily-setup': self._daily_setup,
            'nowish': self._nowish,
            'nowish-debug': self._nowish_debug,
            'nowish-notify': self._nowish_notify,
            'ACK': self._acknowledge,
            'all': self._all,
            'today': self._today,
        }

    def usage(self):
        self.output(USAGE)

    def dispatch(self, argv: List[str]) -> int:
        """
        Run one command.

        Args:
            argv: Command name followed by its arguments

        Returns:
            Process exit code (always 0)
        """
        if not argv:
            self.usage()
            return 0

        command, args = argv[0], argv[1:]

        try:
            if command == 'init':
                self._init()
                return 0

            handler = self._handlers.get(command)
            if handler is None:
                self.usage()
                return 0

            self._load()
            handler(args)

        except PersistenceError as e:
            logger.error(f"Storage error during '{command}': {e}", exc_info=True)
            self.output(f"Error with config file: {e}")
        except MtgError as e:
            logger.error(f"Command '{command}' failed: {e}")
            self.output(str(e))

        return 0

    def _load(self):
        if self.strict_load:
            self.store.load()
        else:
            self.store.load_or_empty()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _init(self):
        if self.store.init():
            self.output("Config file initialized.")
        else:
            self.output("Config file already exists.")

    def _print_numbered(self, records: List[AppointmentRecord]):
        for index, record in enumerate(records, start=1):
            self.output(format_record(index, record))

    def _all(self, args: List[str]):
        self.output("All meetings:")
        self._print_numbered(window_query.all_records(self.store.records))

    def _today(self, args: List[str]):
        self.output("Today's meetings:")
        self._print_numbered(window_query.today(self.store.records, self.clock()))

    def _nowish_selection(self) -> List[AppointmentRecord]:
        return window_query.nowish(self.store.records, self.clock())

    @staticmethod
    def _summary(records: List[AppointmentRecord]) -> str:
        return "; ".join(r.text for r in records)

    def _nowish(self, args: List[str]):
        records = self._nowish_selection()
        if records:
            self.output(self._summary(records))

    def _nowish_debug(self, args: List[str]):
        records = self._nowish_selection()
        self.output("nowish non-acked:")
        if not records:
            self.output("- none")
            return
        for index, record in enumerate(records):
            self.output(f"{index}. {record.text}")

    def _nowish_notify(self, args: List[str]):
        records = self._nowish_selection()
        if not records:
            return
        if self.notifier is None:
            logger.warning("nowish-notify called without a notifier")
            return
        self.notifier.notify(self._summary(records))

    def _acknowledge(self, args: List[str]):
        acknowledged = self.agent.acknowledge_nowish(now=self.clock())
        self.output("Acknowledging nowish meetings:")
        self._print_numbered(acknowledged)

    def _add_text(self, text: str):
        try:
            record = self.agent.add(text, now=self.clock())
        except ValidationError:
            self.output("Please provide appointment details.")
            return
        except UnparseableDateError:
            self.output("Could not parse meeting time.")
            return

        self.output(f"Parsed meeting time: {format_when(record.when)}")
        self.output("Appointment saved.")

    def _add(self, args: List[str]):
        self._add_text(" ".join(args))

    def _prune(self, args: List[str]):
        removed = self.agent.prune(now=self.clock())
        for record in removed:
            self.output(f"Appointment pruned: {record.text}")
        self.output(f"Appointments pruned: {len(removed)}.")

    def _daily_setup(self, args: List[str]):
        self._prune(args)

        while True:
            try:
                text = self.read_line(DAILY_SETUP_PROMPT)
            except (EOFError, KeyboardInterrupt):
                self.output("")
                break

            if not text or not text.strip():
                break

            try:
                self._add_text(text)
            except PersistenceError as e:
                # Keep prompting; the record stays in memory for the next save
                logger.error(f"Failed to save appointment: {e}", exc_info=True)
                self.output(f"Error saving config file: {e}")
