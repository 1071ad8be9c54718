"""
Symbol scopes over the live interpreter.

A scope is a container that owns names: the root namespace (top-level
modules and builtins), a module, a class, or the class-level companion of a
class or module. Scopes expose only the queries the resolver needs:
direct ownership, member lookup and the ancestor chain.
"""

import builtins
import importlib
import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass
from types import FunctionType, ModuleType
from typing import Any, Dict, List, Mapping, Optional

from ..validation import ResolutionError

logger = logging.getLogger(__name__)


def is_container(obj: Any) -> bool:
    """True for the objects a scope can wrap: modules and classes."""
    return isinstance(obj, ModuleType) or inspect.isclass(obj)


def _wrap(value: Any, path: str) -> "ObjectScope":
    if not is_container(value):
        raise ResolutionError(
            f"'{path}' is not a class or module",
            field_name="exclude",
            value=path,
        )
    return ObjectScope(value)


@dataclass(frozen=True)
class ObjectScope:
    """A module or class in the live symbol space."""

    obj: Any

    is_class_level = False

    @property
    def is_class(self) -> bool:
        return inspect.isclass(self.obj)

    @property
    def is_module(self) -> bool:
        return isinstance(self.obj, ModuleType)

    @property
    def qualified_name(self) -> str:
        if self.is_module:
            return self.obj.__name__
        module = getattr(self.obj, "__module__", None)
        qualname = getattr(self.obj, "__qualname__", self.obj.__name__)
        if module in (None, "builtins", "__main__"):
            return qualname
        return f"{module}.{qualname}"

    def _submodule_name(self, name: str) -> Optional[str]:
        if not self.is_module or not hasattr(self.obj, "__path__"):
            return None
        full_name = f"{self.obj.__name__}.{name}"
        if full_name in sys.modules:
            return full_name
        try:
            if importlib.util.find_spec(full_name) is not None:
                return full_name
        except (ImportError, ValueError):
            pass
        return None

    def owns(self, name: str) -> bool:
        """Whether the name is defined directly in this scope."""
        if name in vars(self.obj):
            return True
        return self._submodule_name(name) is not None

    def member(self, name: str) -> "ObjectScope":
        """Return the directly owned member ``name`` as a scope."""
        path = f"{self.qualified_name}.{name}"
        namespace = vars(self.obj)
        if name in namespace:
            return _wrap(namespace[name], path)
        submodule = self._submodule_name(name)
        if submodule is None:
            raise ResolutionError(
                f"'{self.qualified_name}' has no member '{name}'",
                field_name="exclude",
                value=path,
            )
        return _wrap(importlib.import_module(submodule), path)

    def ancestors(self) -> List["ObjectScope"]:
        """Base classes, most specific first, stopping before ``object``."""
        if not self.is_class:
            return []
        return [ObjectScope(base) for base in self.obj.__mro__[1:] if base is not object]

    def class_level(self) -> "ClassLevelScope":
        return ClassLevelScope(self)

    def find_function(self, name: str) -> Optional[FunctionType]:
        """
        Look up an instance method: a plain function defined on the class
        or one of its bases.
        """
        if not self.is_class:
            return None
        for klass in self.obj.__mro__:
            if name in vars(klass):
                attr = vars(klass)[name]
                return attr if isinstance(attr, FunctionType) else None
        return None

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True)
class ClassLevelScope:
    """
    The class-level companion of a scope.

    For a class it holds classmethods and staticmethods; for a module, the
    module-level functions.
    """

    owner: ObjectScope

    is_class_level = True

    @property
    def qualified_name(self) -> str:
        return self.owner.qualified_name

    def find_function(self, name: str) -> Optional[FunctionType]:
        if self.owner.is_module:
            attr = vars(self.owner.obj).get(name)
            return attr if isinstance(attr, FunctionType) else None
        for klass in self.owner.obj.__mro__:
            if name in vars(klass):
                attr = vars(klass)[name]
                if isinstance(attr, (classmethod, staticmethod)) and isinstance(attr.__func__, FunctionType):
                    return attr.__func__
                return None
        return None

    def __str__(self) -> str:
        return f"<class-level {self.qualified_name}>"


class RootScope:
    """
    The root namespace.

    By default it is the live interpreter: loaded and importable top-level
    modules plus ``builtins``. Passing ``namespace`` restricts it to an
    explicit mapping of names to modules or classes.
    """

    qualified_name = ""

    def __init__(self, namespace: Optional[Mapping[str, Any]] = None):
        self._namespace: Optional[Dict[str, Any]] = dict(namespace) if namespace is not None else None

    def owns(self, name: str) -> bool:
        if self._namespace is not None:
            return name in self._namespace
        if name in sys.modules or hasattr(builtins, name):
            return True
        try:
            return importlib.util.find_spec(name) is not None
        except (ImportError, ValueError):
            return False

    def member(self, name: str) -> ObjectScope:
        if self._namespace is not None:
            if name in self._namespace:
                return _wrap(self._namespace[name], name)
        elif name in sys.modules:
            return _wrap(sys.modules[name], name)
        elif hasattr(builtins, name):
            return _wrap(getattr(builtins, name), name)
        elif self.owns(name):
            logger.debug(f"Importing '{name}' to resolve an exclusion")
            return _wrap(importlib.import_module(name), name)
        raise ResolutionError(
            f"uninitialized name '{name}' in the root namespace",
            field_name="exclude",
            value=name,
        )

    def ancestors(self) -> List[ObjectScope]:
        return []

    def __repr__(self) -> str:
        kind = "explicit" if self._namespace is not None else "live"
        return f"RootScope({kind})"
