"""
Signal handling for paused sessions.

A session started paused waits for the profiled program to resume it. On
POSIX, ``SIGUSR1`` resumes and ``SIGUSR2`` pauses again, so the program (or
another process) can bracket the interesting region with
``os.kill(pid, signal.SIGUSR1)``.
"""

import logging
import signal
import threading
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)


class PauseSignalHandler:
    """
    Installs and restores the resume/pause signal handlers.
    """

    def __init__(self, resume: Callable[[], None], pause: Callable[[], None]):
        self._callbacks: Dict[int, Callable[[], None]] = {}
        if hasattr(signal, "SIGUSR1"):
            self._callbacks[signal.SIGUSR1] = resume
        if hasattr(signal, "SIGUSR2"):
            self._callbacks[signal.SIGUSR2] = pause
        self._original_handlers: Dict[int, Any] = {}
        self._signal_handlers_set = False

    @property
    def is_installed(self) -> bool:
        return self._signal_handlers_set

    def setup_signal_handlers(self) -> None:
        """Install the handlers. A no-op off the main thread or without SIGUSR signals."""
        if not self._callbacks:
            logger.debug("Resume/pause signals are not available on this platform")
            return
        if threading.current_thread() is not threading.main_thread():
            logger.warning("Signal handlers can only be installed from the main thread")
            return

        for signum in self._callbacks:
            self._original_handlers[signum] = signal.signal(signum, self._handle)
        self._signal_handlers_set = True
        logger.debug("Resume/pause signal handlers installed")

    def cleanup_signal_handlers(self) -> None:
        """Restore previous handlers, leaving alone any the program replaced."""
        if not self._signal_handlers_set:
            return

        try:
            for signum, original in self._original_handlers.items():
                if signal.getsignal(signum) == self._handle:
                    signal.signal(signum, original)
            logger.debug("Resume/pause signal handlers restored")
        finally:
            self._original_handlers.clear()
            self._signal_handlers_set = False

    def _handle(self, signum: int, frame: Any) -> None:
        callback = self._callbacks.get(signum)
        if callback is not None:
            logger.info(f"Signal {signal.strsignal(signum)} received")
            callback()
