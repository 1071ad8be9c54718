"""
Result structures produced by a stopped profile.

The engine records a call tree (``CallNode``); ``ResultSet`` aggregates it
into per-method statistics (``MethodInfo``) that the renderers consume.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import psutil

from ..models.enums import MeasureMode, SortKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodKey:
    """Identity of a profiled function."""

    module: str
    name: str
    filename: str = ""
    lineno: int = 0
    is_builtin: bool = False

    @property
    def full_name(self) -> str:
        if not self.module or self.module in ("builtins", "__main__"):
            return self.name
        return f"{self.module}.{self.name}"

    @property
    def location(self) -> str:
        if self.is_builtin or not self.filename:
            return "<built-in>"
        return f"{self.filename}:{self.lineno}"


ROOT_KEY = MethodKey(module="", name="[root]")


class CallNode:
    """One call path in the call tree; repeated calls along the same path share a node."""

    __slots__ = ("key", "parent", "children", "total_time", "calls", "allocations")

    def __init__(self, key: MethodKey, parent: Optional["CallNode"] = None):
        self.key = key
        self.parent = parent
        self.children: Dict[MethodKey, "CallNode"] = {}
        self.total_time = 0.0
        self.calls = 0
        self.allocations = 0.0

    def child(self, key: MethodKey) -> "CallNode":
        node = self.children.get(key)
        if node is None:
            node = CallNode(key, self)
            self.children[key] = node
        return node

    @property
    def children_time(self) -> float:
        return sum(child.total_time for child in self.children.values())

    @property
    def self_time(self) -> float:
        return max(self.total_time - self.children_time, 0.0)

    def __repr__(self) -> str:
        return f"CallNode({self.key.full_name}, total={self.total_time}, calls={self.calls})"


@dataclass
class CallStat:
    """Calls and cost along one caller/callee edge."""

    calls: int = 0
    total_time: float = 0.0


@dataclass
class MethodInfo:
    """Aggregated statistics for one function across the whole call tree."""

    key: MethodKey
    total_time: float = 0.0
    self_time: float = 0.0
    wait_time: float = 0.0
    called: int = 0
    allocations: float = 0.0
    recursive: bool = False
    callers: Dict[MethodKey, CallStat] = field(default_factory=dict)
    callees: Dict[MethodKey, CallStat] = field(default_factory=dict)

    @property
    def children_time(self) -> float:
        return max(self.total_time - self.self_time - self.wait_time, 0.0)

    @property
    def full_name(self) -> str:
        return self.key.full_name


@dataclass(frozen=True)
class ProcessInfo:
    """Facts about the profiled process, sampled when the profile stops."""

    pid: int
    rss_bytes: Optional[int] = None
    cpu_user: Optional[float] = None
    cpu_system: Optional[float] = None

    @classmethod
    def sample(cls) -> "ProcessInfo":
        process = psutil.Process()
        try:
            with process.oneshot():
                memory = process.memory_info()
                cpu = process.cpu_times()
            return cls(pid=process.pid, rss_bytes=memory.rss, cpu_user=cpu.user, cpu_system=cpu.system)
        except psutil.Error as e:
            logger.warning(f"Could not sample process information: {e}")
            return cls(pid=process.pid)


def aggregate_methods(root: CallNode) -> Dict[MethodKey, MethodInfo]:
    """
    Fold the call tree into per-method statistics.

    A recursive function's total is counted once, at its outermost
    activation on each path; self cost is summed over every activation.
    """
    infos: Dict[MethodKey, MethodInfo] = {}
    active: Counter = Counter()
    stack = [(child, False) for child in reversed(list(root.children.values()))]

    while stack:
        node, exiting = stack.pop()
        key = node.key
        if exiting:
            active[key] -= 1
            continue

        info = infos.get(key)
        if info is None:
            info = infos[key] = MethodInfo(key=key)
        info.called += node.calls
        info.self_time += node.self_time
        info.allocations += node.allocations
        if active[key]:
            info.recursive = True
        else:
            info.total_time += node.total_time

        parent_key = node.parent.key if node.parent is not None else ROOT_KEY
        caller = info.callers.setdefault(parent_key, CallStat())
        caller.calls += node.calls
        caller.total_time += node.total_time
        if parent_key in infos and parent_key != ROOT_KEY:
            callee = infos[parent_key].callees.setdefault(key, CallStat())
            callee.calls += node.calls
            callee.total_time += node.total_time

        active[key] += 1
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(list(node.children.values())))

    return infos


class ResultSet:
    """
    Read-only view of a stopped profile.
    """

    def __init__(
        self,
        root: CallNode,
        measure_mode: MeasureMode,
        unit: str,
        process: Optional[ProcessInfo] = None,
        track_allocations: bool = False,
    ):
        self.root = root
        self.measure_mode = measure_mode
        self.unit = unit
        self.process = process
        self.track_allocations = track_allocations
        self._methods = aggregate_methods(root)

    @property
    def total_time(self) -> float:
        return self.root.children_time

    @property
    def methods(self) -> List[MethodInfo]:
        return list(self._methods.values())

    def method(self, key: MethodKey) -> Optional[MethodInfo]:
        return self._methods.get(key)

    def find(self, full_name: str) -> Optional[MethodInfo]:
        """Look up a method by its dotted display name."""
        for info in self._methods.values():
            if info.full_name == full_name:
                return info
        return None

    def sorted_methods(self, sort_method: SortKey = SortKey.TOTAL) -> List[MethodInfo]:
        attribute = SortKey(sort_method).attribute
        return sorted(
            self._methods.values(),
            key=lambda info: (getattr(info, attribute), info.full_name),
            reverse=True,
        )

    def percent(self, value: float) -> float:
        total = self.total_time
        return (value / total * 100.0) if total > 0 else 0.0

    def format_value(self, value: float) -> str:
        if self.unit == "seconds":
            return f"{value:.6f}"
        return f"{value:.0f}"

    def iter_nodes(self):
        """Depth-first walk of the call tree, excluding the synthetic root."""
        stack = list(reversed(list(self.root.children.values())))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children.values())))
