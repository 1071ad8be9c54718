"""
Unmeasured setup performed before the profiling session starts.
"""

import importlib
import logging
from typing import Any, Dict, Optional, Sequence

logger = logging.getLogger(__name__)


class PreludeRunner:
    """
    Imports the ``--require-noprof`` libraries, then executes the
    ``--eval-noprof`` snippets, each in command-line order.

    Snippets share one top-level namespace. Whatever they define is handed
    to the profiled script through ``script_globals``. Failures propagate
    unchanged.
    """

    def __init__(
        self,
        libraries: Sequence[str] = (),
        snippets: Sequence[str] = (),
        namespace: Optional[Dict[str, Any]] = None,
    ):
        self.libraries = list(libraries)
        self.snippets = list(snippets)
        self.namespace = namespace if namespace is not None else {}

    def run(self) -> None:
        for library in self.libraries:
            logger.debug(f"Loading library before profiling: {library}")
            importlib.import_module(library)

        for index, snippet in enumerate(self.snippets):
            logger.debug(f"Evaluating snippet {index + 1} before profiling")
            exec(compile(snippet, f"<eval-noprof {index + 1}>", "exec"), self.namespace)

    @property
    def script_globals(self) -> Dict[str, Any]:
        """The snippets' top-level names, minus the ``__builtins__`` exec adds."""
        return {name: value for name, value in self.namespace.items() if name != "__builtins__"}
