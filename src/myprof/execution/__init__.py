"""
Session execution: prelude, measured run, exit-time finalization and output.
"""

from .exit_hooks import ExitCoordinator, finalize_session
from .output import OutputRouter, working_directory
from .prelude import PreludeRunner
from .session import SessionController, SessionState
from .signal_handler import PauseSignalHandler

__all__ = [
    "ExitCoordinator",
    "finalize_session",
    "OutputRouter",
    "working_directory",
    "PreludeRunner",
    "SessionController",
    "SessionState",
    "PauseSignalHandler",
]
