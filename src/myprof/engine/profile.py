"""
Deterministic profiler built on ``sys.setprofile``.

``Profile`` records every Python and C call made by the main thread into a
call tree, charging each call with the change in the configured measure.
Excluded functions are transparent: their cost stays with the caller and
their callees are attached to the caller.
"""

import logging
import os
import sys
from dataclasses import dataclass
from types import CodeType, FunctionType, ModuleType
from typing import Any, Callable, Dict, List, Optional, Set

from ..models.enums import MeasureMode
from .common import is_common_builtin, is_common_module
from .measure import create_measurer
from .results import ROOT_KEY, CallNode, MethodKey, ProcessInfo, ResultSet

logger = logging.getLogger(__name__)

# Frames from the myprof package itself are never recorded.
_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + os.sep


@dataclass
class _Frame:
    frame: Any
    cfunc: Any
    node: Optional[CallNode]
    start: float
    start_blocks: int


class Profile:
    """
    A single measurement session.

    Lifecycle: construct, ``exclude`` as needed, then ``run`` a workload, or
    ``start``, ``execute`` it and ``stop`` later. ``pause`` and ``resume``
    may be called at any point while running.
    """

    def __init__(
        self,
        allow_exceptions: bool = False,
        exclude_common: bool = False,
        measure_mode: MeasureMode = MeasureMode.WALL_TIME,
        track_allocations: bool = False,
    ):
        self.allow_exceptions = allow_exceptions
        self.exclude_common = exclude_common
        self.measure_mode = MeasureMode(measure_mode)
        self.track_allocations = track_allocations

        self._measurer = create_measurer(self.measure_mode)
        self._excluded_codes: Set[CodeType] = set()
        self._excluded_names: List[str] = []
        self._code_keys: Dict[CodeType, Optional[MethodKey]] = {}

        self._root = CallNode(ROOT_KEY)
        self._stack: List[_Frame] = []
        self._running = False
        self._stopped = False
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0
        self._process: Optional[ProcessInfo] = None
        self.exception: Optional[BaseException] = None

    # --- configuration ---

    def exclude(self, scope: Any, method: str) -> None:
        """
        Leave ``method`` of ``scope`` out of the profile.

        ``scope`` must provide ``find_function(method)`` returning the Python
        function to exclude.

        Raises:
            RuntimeError: If the profile has already started
            ValueError: If the method does not resolve to a Python function
        """
        if self._running or self._stopped:
            raise RuntimeError("Exclusions must be registered before the profile starts")
        function = scope.find_function(method)
        if not isinstance(function, FunctionType):
            raise ValueError(f"{scope} has no Python function '{method}'")
        self._excluded_codes.add(function.__code__)
        self._excluded_names.append(f"{getattr(scope, 'qualified_name', scope)}:{method}")
        logger.debug(f"Excluding {self._excluded_names[-1]}")

    @property
    def excluded(self) -> List[str]:
        return list(self._excluded_names)

    # --- state ---

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._running and self._paused_at is not None

    def _measure(self) -> float:
        if self._paused_at is not None:
            return self._paused_at - self._paused_total
        return self._measurer.read() - self._paused_total

    def start(self, paused: bool = False) -> None:
        if self._running:
            raise RuntimeError("Profile is already running")
        if self._stopped:
            raise RuntimeError("A stopped profile cannot be restarted")
        self._measurer.start()
        self._paused_total = 0.0
        self._paused_at = self._measurer.read() if paused else None
        self._running = True
        logger.debug(f"Profile started (mode={self.measure_mode.value}, paused={paused})")
        sys.setprofile(self._callback)

    def pause(self) -> None:
        if self._running and self._paused_at is None:
            self._paused_at = self._measurer.read()
            logger.debug("Profile paused")

    def resume(self) -> None:
        if self._running and self._paused_at is not None:
            # Logged while still paused so the logging calls go unrecorded.
            logger.debug("Profile resumed")
            self._paused_total += self._measurer.read() - self._paused_at
            self._paused_at = None

    def stop(self) -> None:
        """Stop measuring. Calls still open are closed at the current reading."""
        if not self._running:
            return
        sys.setprofile(None)
        now = self._measure()
        blocks = sys.getallocatedblocks() if self.track_allocations else 0
        while self._stack:
            self._close(self._stack.pop(), now, blocks)
        self._running = False
        self._stopped = True
        self._measurer.stop()
        self._process = ProcessInfo.sample()
        logger.debug("Profile stopped")

    def execute(self, workload: Callable[[], Any]) -> Any:
        """
        Call ``workload`` under the running profile without stopping it.

        Exceptions raised by the workload are logged and suppressed unless
        ``allow_exceptions`` is set. ``SystemExit`` and ``KeyboardInterrupt``
        always propagate.
        """
        if not self._running:
            raise RuntimeError("Profile must be started before executing a workload")
        try:
            return workload()
        except (SystemExit, KeyboardInterrupt):
            raise
        except Exception as e:
            self.exception = e
            if self.allow_exceptions:
                raise
            was_paused = self.is_paused
            self.pause()
            try:
                logger.error(f"Profiled code raised {type(e).__name__}: {e}", exc_info=True)
            finally:
                if not was_paused:
                    self.resume()
        return None

    def run(self, workload: Callable[[], Any], paused: bool = False) -> ResultSet:
        """
        Run ``workload`` under measurement and return the results.

        Same exception policy as ``execute``. The profile is stopped on every
        path.
        """
        self.start(paused=paused)
        try:
            self.execute(workload)
        finally:
            self.stop()
        return self.results()

    def results(self) -> ResultSet:
        if self._running:
            raise RuntimeError("Results are only available after the profile stops")
        return ResultSet(
            root=self._root,
            measure_mode=self.measure_mode,
            unit=self._measurer.unit,
            process=self._process,
            track_allocations=self.track_allocations,
        )

    # --- tracing ---

    def _key_for_code(self, frame) -> Optional[MethodKey]:
        code = frame.f_code
        if code in self._code_keys:
            return self._code_keys[code]

        filename = code.co_filename
        module = frame.f_globals.get("__name__", "") or ""
        key: Optional[MethodKey] = MethodKey(
            module=module,
            name=getattr(code, "co_qualname", code.co_name),
            filename=filename,
            lineno=code.co_firstlineno,
        )
        if code in self._excluded_codes or filename.startswith(_PACKAGE_DIR):
            key = None
        elif self.exclude_common and is_common_module(module, filename):
            key = None
        self._code_keys[code] = key
        return key

    def _key_for_builtin(self, func) -> Optional[MethodKey]:
        qualname = getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or repr(func)
        module = getattr(func, "__module__", None)
        if module is None:
            owner = getattr(func, "__self__", None)
            if isinstance(owner, ModuleType):
                module = owner.__name__
            elif owner is not None:
                module = type(owner).__module__
            else:
                module = "builtins"
        if self.exclude_common and is_common_builtin(module, qualname):
            return None
        return MethodKey(module=module, name=qualname, filename="", lineno=0, is_builtin=True)

    def _current_node(self) -> CallNode:
        for entry in reversed(self._stack):
            if entry.node is not None:
                return entry.node
        return self._root

    def _callback(self, frame, event: str, arg) -> None:
        if event == "call":
            self._enter(frame, None, self._key_for_code(frame))
        elif event == "c_call":
            internal = frame.f_code.co_filename.startswith(_PACKAGE_DIR)
            self._enter(frame, arg, None if internal else self._key_for_builtin(arg))
        elif event == "return":
            self._leave(frame, None)
        elif event in ("c_return", "c_exception"):
            self._leave(frame, arg)

    def _enter(self, frame, cfunc, key: Optional[MethodKey]) -> None:
        now = self._measure()
        blocks = sys.getallocatedblocks() if self.track_allocations else 0
        node = None
        if key is not None and self._paused_at is None:
            node = self._current_node().child(key)
            node.calls += 1
        self._stack.append(_Frame(frame, cfunc, node, now, blocks))

    def _leave(self, frame, cfunc) -> None:
        stack = self._stack
        for index in range(len(stack) - 1, -1, -1):
            entry = stack[index]
            if entry.frame is frame and entry.cfunc is cfunc:
                break
        else:
            # Return from a frame entered before profiling started.
            return

        now = self._measure()
        blocks = sys.getallocatedblocks() if self.track_allocations else 0
        while len(stack) > index:
            self._close(stack.pop(), now, blocks)

    def _close(self, entry: _Frame, now: float, blocks: int) -> None:
        if entry.node is None:
            return
        entry.node.total_time += max(now - entry.start, 0.0)
        if self.track_allocations:
            entry.node.allocations += max(blocks - entry.start_blocks, 0)
