"""
Measurement engine.

A deterministic tracer that records call trees under one of four measure
modes and exposes the aggregated results to the renderers.
"""

from .measure import Measurer, create_measurer
from .profile import Profile
from .results import (
    ROOT_KEY,
    CallNode,
    CallStat,
    MethodInfo,
    MethodKey,
    ProcessInfo,
    ResultSet,
    aggregate_methods,
)

__all__ = [
    "Measurer",
    "create_measurer",
    "Profile",
    "ROOT_KEY",
    "CallNode",
    "CallStat",
    "MethodInfo",
    "MethodKey",
    "ProcessInfo",
    "ResultSet",
    "aggregate_methods",
]
