"""
MTG Notifier - Desktop alerts for nowish appointments

Channels, tried in this order:
1. External command (terminal-notifier by default) if it is installed
2. Desktop notification via plyer
3. Spoken message via pyttsx3 (opt-in)

Notifications are best-effort: failures are logged, never raised.
"""

import logging
import shlex
import shutil
import subprocess
from typing import List, Optional

import pyttsx3
from plyer import notification

logger = logging.getLogger(__name__)


DEFAULT_TITLE = "my-mtg-alerter"
DEFAULT_COMMAND = "terminal-notifier -sound Glass -title {title} -message"


class Notifier:
    """
    Sends one message through whichever channels are available.

    The message is always passed as a separate argument, never through
    a shell.
    """

    def __init__(
        self,
        command: Optional[str] = DEFAULT_COMMAND,
        title: str = DEFAULT_TITLE,
        desktop: bool = True,
        speak: bool = False,
        rate: int = 175,
        timeout: int = 10
    ):
        """
        Initialize notifier.

        Args:
            command: Command line prefix; the message is appended as the
                     last argument. "{title}" is substituted. None or ""
                     disables the external command.
            title: Notification title
            desktop: Fall back to a plyer desktop notification
            speak: Also speak the message with pyttsx3
            rate: Speech rate (words per minute)
            timeout: Seconds to wait for the external command
        """
        self.command = command
        self.title = title
        self.desktop = desktop
        self.speak = speak
        self.rate = rate
        self.timeout = timeout

        logger.info(f"Notifier initialized (command={command!r}, desktop={desktop}, speak={speak})")

    def _command_args(self, message: str) -> Optional[List[str]]:
        if not self.command:
            return None

        args = [part.replace('{title}', self.title) for part in shlex.split(self.command)]
        if not args or shutil.which(args[0]) is None:
            logger.debug(f"Notifier command not found: {self.command}")
            return None

        return args + [message]

    def _run_command(self, args: List[str]) -> bool:
        try:
            subprocess.run(
                args,
                check=True,
                timeout=self.timeout,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL
            )
            return True
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"Notifier command failed: {e}", exc_info=True)
            return False

    def _show_desktop(self, message: str) -> bool:
        try:
            notification.notify(title=self.title, message=message, timeout=10)
            return True
        except Exception as e:
            # plyer raises NotImplementedError or backend-specific errors
            logger.error(f"Desktop notification failed: {e}", exc_info=True)
            return False

    def _speak(self, message: str) -> bool:
        try:
            engine = pyttsx3.init()
            engine.setProperty('rate', self.rate)
            engine.say(message)
            engine.runAndWait()
            return True
        except Exception as e:
            logger.error(f"Speaking notification failed: {e}", exc_info=True)
            return False

    def notify(self, message: str) -> bool:
        """
        Deliver message.

        Args:
            message: Text to show

        Returns:
            True if at least one channel delivered the message
        """
        if not message or not message.strip():
            return False

        delivered = False

        args = self._command_args(message)
        if args:
            delivered = self._run_command(args)

        if not delivered and self.desktop:
            delivered = self._show_desktop(message)

        if self.speak:
            delivered = self._speak(message) or delivered

        if delivered:
            logger.info(f"Notified: {message}")
        else:
            logger.warning(f"No notification channel delivered: {message}")
        return delivered
