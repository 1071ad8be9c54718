"""
Methods skipped when ``exclude_common`` is set.

These are dispatch and iteration helpers whose cost is better attributed to
the caller, plus the machinery that loads the profiled script.
"""

COMMON_EXCLUDED_BUILTINS = frozenset({
    ("builtins", "exec"),
    ("builtins", "eval"),
    ("builtins", "isinstance"),
    ("builtins", "issubclass"),
    ("builtins", "len"),
    ("builtins", "iter"),
    ("builtins", "next"),
    ("builtins", "getattr"),
    ("builtins", "setattr"),
    ("builtins", "hasattr"),
    ("builtins", "map"),
    ("builtins", "filter"),
    ("builtins", "enumerate"),
    ("builtins", "zip"),
    ("builtins", "__import__"),
})

COMMON_EXCLUDED_MODULES = frozenset({
    "runpy",
    "importlib._bootstrap",
    "importlib._bootstrap_external",
    "importlib.util",
})

# Frozen import machinery has no real file name.
COMMON_EXCLUDED_FILENAME_PREFIXES = ("<frozen importlib", "<frozen runpy")


def is_common_module(module: str, filename: str) -> bool:
    return module in COMMON_EXCLUDED_MODULES or filename.startswith(COMMON_EXCLUDED_FILENAME_PREFIXES)


def is_common_builtin(module: str, qualname: str) -> bool:
    return (module, qualname) in COMMON_EXCLUDED_BUILTINS
