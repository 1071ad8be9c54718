"""
Finalization at process exit.

``atexit`` runs callbacks in reverse registration order. Registering the
finalizer before the profiled script is loaded therefore guarantees it runs
after every exit callback the script registers.
"""

import atexit
import logging
from typing import Callable, Optional

from ..validation import SessionStateError, handle_error
from .output import OutputRouter
from .session import SessionController

logger = logging.getLogger(__name__)


class ExitCoordinator:
    """Registers exactly one finalize callback and runs it at most once."""

    def __init__(
        self,
        finalizer: Callable[[], None],
        register: Optional[Callable[[Callable[[], None]], object]] = None,
    ):
        self._finalizer = finalizer
        self._register = register or atexit.register
        self._registered = False
        self._has_run = False

    @property
    def is_registered(self) -> bool:
        return self._registered

    @property
    def has_run(self) -> bool:
        return self._has_run

    def register(self) -> None:
        if self._registered:
            raise SessionStateError("exit finalizer is already registered")
        self._register(self.finalize)
        self._registered = True
        logger.debug("Exit finalizer registered")

    def finalize(self) -> None:
        if self._has_run:
            return
        self._has_run = True
        self._finalizer()


def finalize_session(controller: SessionController, router: OutputRouter) -> None:
    """
    Stop the session if it is still running and render its results.

    Does nothing when the target never ran.
    """
    controller.stop()
    if not controller.has_results:
        logger.warning(f"No profile to report: session is {controller.state.value}")
        return
    try:
        router.route(controller.results())
    except Exception as e:
        handle_error(e, "rendering the report", reraise=True, logger=logger)
