"""
Measurement sources for each measure mode.

Every measurer exposes a monotonic-ish reading via ``read()``; the engine
charges the difference between two readings to the call in between.
"""

import sys
import time
import tracemalloc
from abc import ABC, abstractmethod

from ..models.enums import MeasureMode


class Measurer(ABC):
    """Reads the quantity a profile accumulates."""

    mode: MeasureMode
    unit: str

    def start(self) -> None:
        """Prepare the underlying source before the first reading."""

    def stop(self) -> None:
        """Release anything ``start`` acquired."""

    @abstractmethod
    def read(self) -> float:
        pass


class WallTimeMeasurer(Measurer):
    mode = MeasureMode.WALL_TIME
    unit = "seconds"

    def read(self) -> float:
        return time.perf_counter()


class ProcessTimeMeasurer(Measurer):
    mode = MeasureMode.PROCESS_TIME
    unit = "seconds"

    def read(self) -> float:
        return time.process_time()


class AllocationsMeasurer(Measurer):
    """Counts memory blocks currently allocated by the interpreter."""

    mode = MeasureMode.ALLOCATIONS
    unit = "blocks"

    def read(self) -> float:
        return float(sys.getallocatedblocks())


class MemoryMeasurer(Measurer):
    """Bytes currently traced by ``tracemalloc``."""

    mode = MeasureMode.MEMORY
    unit = "bytes"

    def __init__(self):
        self._started_tracing = False

    def start(self) -> None:
        if not tracemalloc.is_tracing():
            tracemalloc.start()
            self._started_tracing = True

    def stop(self) -> None:
        if self._started_tracing:
            tracemalloc.stop()
            self._started_tracing = False

    def read(self) -> float:
        if not tracemalloc.is_tracing():
            return 0.0
        return float(tracemalloc.get_traced_memory()[0])


_MEASURERS = {
    MeasureMode.WALL_TIME: WallTimeMeasurer,
    MeasureMode.PROCESS_TIME: ProcessTimeMeasurer,
    MeasureMode.ALLOCATIONS: AllocationsMeasurer,
    MeasureMode.MEMORY: MemoryMeasurer,
}


def create_measurer(mode: MeasureMode) -> Measurer:
    """
    Create the measurer for a measure mode.

    Raises:
        ValueError: If the mode is unknown
    """
    try:
        return _MEASURERS[MeasureMode(mode)]()
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported measure mode: {mode}")
