"""
Lifecycle of the process's single profiling session.

``SessionController`` builds the measurement engine from the parsed
configuration, registers the exclusions, and runs the target script under
measurement:

    UNSTARTED -> CONFIGURED -> RUNNING <-> PAUSED -> STOPPED
"""

import functools
import logging
import os
import runpy
import sys
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..engine import Profile, ResultSet
from ..models.session import SessionConfig
from ..validation import SessionStateError
from .signal_handler import PauseSignalHandler

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNSTARTED = "unstarted"
    CONFIGURED = "configured"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class SessionController:
    """
    Owns the measurement session from construction until its results are read.

    Args:
        config: The parsed session configuration
        profile_factory: Callable building the engine; takes the same
            keyword arguments as ``Profile``
        init_globals: Names seeded into the script's ``__main__`` namespace,
            typically what the prelude snippets defined
    """

    def __init__(
        self,
        config: SessionConfig,
        profile_factory: Callable[..., Profile] = Profile,
        init_globals: Optional[Dict[str, Any]] = None,
    ):
        self.config = config
        self.profile_factory = profile_factory
        self.init_globals = init_globals
        self.profile: Optional[Profile] = None
        self._state = SessionState.UNSTARTED
        self._signals = PauseSignalHandler(resume=self.resume, pause=self.pause)

    @property
    def state(self) -> SessionState:
        if self._state in (SessionState.RUNNING, SessionState.PAUSED) and self.profile is not None:
            return SessionState.PAUSED if self.profile.is_paused else SessionState.RUNNING
        return self._state

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            expected = ", ".join(state.value for state in states)
            raise SessionStateError(f"session is {self.state.value}, expected {expected}")

    def configure(self) -> Profile:
        """Construct the engine and register every exclusion, in parse order."""
        self._require(SessionState.UNSTARTED)
        config = self.config
        self.profile = self.profile_factory(
            allow_exceptions=config.allow_exceptions,
            exclude_common=config.exclude_common,
            measure_mode=config.measure_mode,
            track_allocations=config.track_allocations,
        )
        for target in config.exclude:
            self.profile.exclude(target.scope, target.method)
        self._state = SessionState.CONFIGURED
        logger.debug(f"Session configured with {len(config.exclude)} exclusions")
        return self.profile

    def _prepare_script_environment(self) -> None:
        script = self.config.script
        sys.argv[:] = [script, *self.config.script_args]
        sys.path.insert(0, os.path.dirname(os.path.abspath(script)))

    def run(self) -> None:
        """
        Execute the target script under measurement.

        Returns once the script body finishes, with measurement still on so
        the script's own exit callbacks are measured too. The exit finalizer
        calls ``stop``. Exceptions from the script follow the engine's
        ``allow_exceptions`` policy; ``SystemExit`` always propagates so the
        script's exit status becomes the process's.
        """
        self._require(SessionState.CONFIGURED)
        self._prepare_script_environment()
        workload = functools.partial(
            runpy.run_path,
            self.config.script,
            init_globals=self.init_globals,
            run_name="__main__",
        )

        paused = self.config.start_paused
        if paused:
            self._signals.setup_signal_handlers()
        self.profile.start(paused=paused)
        self._state = SessionState.PAUSED if paused else SessionState.RUNNING
        logger.debug(f"Running {self.config.script} under measurement (paused={paused})")
        self.profile.execute(workload)

    def pause(self) -> None:
        if self.profile is not None and self.state is SessionState.RUNNING:
            self.profile.pause()

    def resume(self) -> None:
        if self.profile is not None and self.state is SessionState.PAUSED:
            self.profile.resume()

    def stop(self) -> None:
        """Stop measuring. Safe to call more than once."""
        if self._state not in (SessionState.RUNNING, SessionState.PAUSED):
            return
        try:
            self.profile.stop()
        finally:
            self._signals.cleanup_signal_handlers()
            self._state = SessionState.STOPPED
            logger.debug("Session stopped")

    @property
    def has_results(self) -> bool:
        return self._state is SessionState.STOPPED

    def results(self) -> ResultSet:
        self._require(SessionState.STOPPED)
        return self.profile.results()
