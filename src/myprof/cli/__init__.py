"""
Command-line interface for the myprof package.
"""

from .main import main_cli, setup_logging
from .parser import ConfigParser

__all__ = [
    "ConfigParser",
    "main_cli",
    "setup_logging",
]
