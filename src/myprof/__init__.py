"""
myprof: launch a Python script under a profiler and report where the cost went.

The package is organized into specialized modules:
- config: Configuration file loading and validation
- models: Session and configuration data structures
- validation: Input validation and error handling
- symbols: Resolution of dotted names for --exclude
- engine: The measurement engine and its results
- printers: Report renderers
- execution: Prelude, session lifecycle, exit finalization and output routing
- cli: Command-line parsing and entry point

Usage:
    From command line:
        myprof [options] script.py [script arguments]
        python -m myprof [options] script.py [script arguments]

    Programmatically:
        from myprof import Profile
        profile = Profile()
        result = profile.run(workload)
"""

__version__ = "1.0.0"

from .engine import Profile, ResultSet
from .models import (
    ExclusionTarget,
    MeasureMode,
    OutputPlan,
    PrinterKind,
    SessionConfig,
    SortKey,
)
from .validation import OutputError, ResolutionError, UsageError, ValidationError
from .cli import main_cli

__all__ = [
    "__version__",
    "main_cli",
    # Engine
    "Profile",
    "ResultSet",
    # Models
    "ExclusionTarget",
    "MeasureMode",
    "OutputPlan",
    "PrinterKind",
    "SessionConfig",
    "SortKey",
    # Errors
    "OutputError",
    "ResolutionError",
    "UsageError",
    "ValidationError",
]
