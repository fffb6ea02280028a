"""Deferred imports for optional backends (motor, redis)."""

from collections.abc import Callable
from functools import cache
from importlib import import_module

__all__ = [
    "lazy_import",
]


def lazy_import(
    module_name: str,
    name: str | None = None,
    *,
    package: str | None = None,
) -> Callable[[], object]:
    """Return a loader that imports a module (or one attribute) on first call.

    Args:
        module_name: Dotted module path
        name: Attribute to fetch from the module, or None for the module itself
        package: Distribution to suggest when the import fails

    Returns:
        Zero-argument callable returning the imported object
    """

    @cache
    def _load() -> object:
        try:
            mod = import_module(module_name)
        except ImportError as e:
            hint = package or module_name.split(".")[0]
            raise ImportError(f"{module_name} is required for this backend: pip install {hint}") from e
        return getattr(mod, name) if name else mod

    return _load
