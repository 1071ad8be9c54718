"""
Resolution of dotted names and exclusion entries against the symbol space.

``resolve_name`` is a pure query over scopes: it walks the dotted path from
the root, preferring names a container owns directly and, for names the
container does not own, the first ancestor that does. This lets
``Outer.Inner`` pick the nested ``Inner`` even when a top-level ``Inner``
also exists.
"""

import logging
from typing import Iterable, List, Optional

from ..models.session import ExclusionTarget
from ..validation import ResolutionError, ValidationError, validate_exclusion_entry
from .scopes import ObjectScope, RootScope

logger = logging.getLogger(__name__)

SCOPE_SEPARATOR = "."


def resolve_name(root: RootScope, qualified_name: str) -> ObjectScope:
    """
    Resolve a dotted name to a module or class scope.

    Args:
        root: The root namespace to start from
        qualified_name: Name such as ``"package.module.Outer.Inner"``

    Returns:
        The scope the name denotes

    Raises:
        ResolutionError: If any segment cannot be resolved
    """
    segments = qualified_name.split(SCOPE_SEPARATOR)
    if not qualified_name or any(not segment for segment in segments):
        raise ResolutionError(
            f"'{qualified_name}' is not a valid dotted name",
            field_name="exclude",
            value=qualified_name,
        )

    current = root
    for segment in segments:
        if current.owns(segment):
            current = current.member(segment)
            continue

        if current is root:
            # Surfaces the root namespace's own not-found diagnostic.
            current = root.member(segment)
            continue

        owner = next((ancestor for ancestor in current.ancestors() if ancestor.owns(segment)), None)
        if owner is not None:
            current = owner.member(segment)
        else:
            current = root.member(segment)

    return current


class SymbolResolver:
    """
    Resolves names and ``--exclude`` entries to exclusion targets.
    """

    def __init__(self, root: Optional[RootScope] = None):
        self.root = root if root is not None else RootScope()

    def resolve(self, qualified_name: str) -> ObjectScope:
        """
        Resolve a dotted name.

        Resolving may import modules. Anything a module raises while being
        imported is converted to ResolutionError.
        """
        try:
            return resolve_name(self.root, qualified_name)
        except ResolutionError:
            raise
        except Exception as e:
            raise ResolutionError(
                f"cannot import while resolving '{qualified_name}': {type(e).__name__}: {e}",
                field_name="exclude",
                value=qualified_name,
            ) from e

    def resolve_exclusion(self, entry: str) -> ExclusionTarget:
        """
        Resolve one ``Scope#method`` or ``Scope.method`` entry.

        ``#`` selects an instance method of a class; ``.`` selects the
        class-level companion (classmethods, staticmethods, or module
        functions).

        Raises:
            ResolutionError: If the entry is malformed or does not resolve
        """
        try:
            scope_name, separator, method = validate_exclusion_entry(entry)
        except ResolutionError:
            raise
        except ValidationError as e:
            raise ResolutionError(str(e), field_name="exclude", value=entry) from e

        scope = self.resolve(scope_name)
        if separator == "#":
            if not scope.is_class:
                raise ResolutionError(
                    f"'{scope.qualified_name}' is a module and has no instance methods; "
                    f"use '{scope_name}.{method}'",
                    field_name="exclude",
                    value=entry,
                )
            target_scope = scope
        else:
            target_scope = scope.class_level()

        function = target_scope.find_function(method)
        if function is None:
            kind = "class-level function" if separator == "." else "instance method"
            raise ResolutionError(
                f"'{scope.qualified_name}' has no {kind} '{method}'",
                field_name="exclude",
                value=entry,
            )

        if scope.is_class and function.__qualname__ != f"{scope.obj.__qualname__}.{method}":
            logger.warning(
                f"'{entry}' resolves to {function.__module__}.{function.__qualname__}; "
                f"its calls are excluded for every class that shares it"
            )

        target = ExclusionTarget(scope=target_scope, method=method, function=function)
        logger.debug(f"Resolved exclusion '{entry}' to {target}")
        return target

    def resolve_exclusions(self, entries: Iterable[str]) -> List[ExclusionTarget]:
        """
        Resolve entries in order, dropping duplicates but keeping first-seen order.
        """
        targets = {}
        for entry in entries:
            target = self.resolve_exclusion(entry)
            targets.setdefault(target, None)
        return list(targets)

    def parse_exclusion_list(self, value: str) -> List[ExclusionTarget]:
        """Resolve a comma-separated ``--exclude`` value."""
        entries = [piece.strip() for piece in value.split(",")]
        if not all(entries):
            raise ResolutionError(
                f"empty entry in exclusion list '{value}'",
                field_name="exclude",
                value=value,
            )
        return self.resolve_exclusions(entries)
