"""
Command-line entry point for myprof.

Pipeline: parse the command line (resolving exclusions), run the unmeasured
prelude, register the exit-time finalizer, then run the script under
measurement. The report is rendered by the finalizer once the script and its
own exit callbacks are done.
"""

import functools
import logging
import os
import sys
from typing import Optional, Sequence

from ..config import get_config
from ..execution import (
    ExitCoordinator,
    OutputRouter,
    PreludeRunner,
    SessionController,
    finalize_session,
)
from ..models.config import AppConfig
from ..validation import UsageError, ValidationError, handle_cli_error
from .parser import ConfigParser

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_LEVEL_ENV_VAR = "MYPROF_LOG_LEVEL"

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    """
    Configure logging to stderr; stdout is reserved for reports.

    ``$MYPROF_LOG_LEVEL`` overrides ``level``.
    """
    level = os.environ.get(LOG_LEVEL_ENV_VAR, level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _load_app_config() -> AppConfig:
    try:
        return get_config()
    except (ValidationError, OSError, ValueError) as e:
        # tomllib.TOMLDecodeError is a ValueError
        setup_logging()
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )


def main_cli(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main command-line interface for myprof.

    Raises:
        SystemExit: Status 0 after ``--help``/``--version``, 1 on usage
            errors, or whatever status the profiled script exits with.
    """
    app_config = _load_app_config()
    setup_logging(app_config.logging.level)

    parser = ConfigParser(app_config=app_config)
    try:
        config = parser.parse(argv)
    except UsageError as e:
        handle_cli_error(
            error=e,
            context="argument parsing",
            exit_code=1,
            usage=parser.format_usage(),
            logger=logger,
        )

    prelude = PreludeRunner(config.pre_libs, config.pre_exec)
    prelude.run()

    controller = SessionController(config, init_globals=prelude.script_globals)
    router = OutputRouter(config)
    ExitCoordinator(functools.partial(finalize_session, controller, router)).register()

    controller.configure()
    controller.run()


if __name__ == "__main__":
    main_cli()
