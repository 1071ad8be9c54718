"""
Routing of the finished report to its destination.
"""

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional, Union

from ..engine import ResultSet
from ..models.session import OutputPlan, SessionConfig
from ..printers import create_printer
from ..validation import OutputError

logger = logging.getLogger(__name__)


@contextmanager
def working_directory(path: Union[str, Path]) -> Iterator[Path]:
    """Change the working directory for the duration of the block, restoring it on every path."""
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield Path(path)
    finally:
        os.chdir(previous)


class OutputRouter:
    """
    Sends the report to stdout, a file, or a directory.

    With no destination the report goes to ``stdout`` and the working
    directory is left alone. With a destination, rendering happens inside
    the directory the tool was started from, so relative paths mean what
    the user typed regardless of where the profiled program left the
    working directory.
    """

    def __init__(self, config: SessionConfig, stdout: Optional[IO[str]] = None):
        self.config = config
        self.stdout = stdout

    def plan(self) -> OutputPlan:
        return OutputPlan.from_config(self.config)

    def route(self, result: ResultSet) -> OutputPlan:
        """
        Render ``result`` with the configured renderer.

        Raises:
            OutputError: If the destination file cannot be opened for writing
        """
        config = self.config
        printer = create_printer(config.printer, result)
        plan = self.plan()
        options = dict(min_percent=config.min_percent, sort_method=config.sort_method)

        if plan.file is None:
            stream = self.stdout or sys.stdout
            printer.render(stream, **options)
            stream.flush()
            return plan

        with working_directory(plan.working_dir):
            if plan.is_directory:
                printer.render(plan.file, **options)
            else:
                try:
                    out = open(plan.file, "w", encoding="utf-8")
                except OSError as e:
                    raise OutputError(f"cannot write report to {plan.file}: {e}") from e
                with out:
                    printer.render(out, **options)
        logger.info(f"Report written to {plan.file}")
        return plan
