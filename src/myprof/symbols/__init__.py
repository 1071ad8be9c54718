"""
Symbol resolution for ``--exclude`` entries.
"""

from .resolver import SCOPE_SEPARATOR, SymbolResolver, resolve_name
from .scopes import ClassLevelScope, ObjectScope, RootScope, is_container

__all__ = [
    "SCOPE_SEPARATOR",
    "SymbolResolver",
    "resolve_name",
    "ClassLevelScope",
    "ObjectScope",
    "RootScope",
    "is_container",
]
