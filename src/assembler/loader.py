"""Resolution of configured type names to classes.

A :class:`TypeLoader` looks a name up in three places, in order:

1. Classes registered explicitly with :meth:`TypeLoader.register`.
2. Dotted import paths, either ``package.module.Class`` or
   ``package.module:Class``.
3. Builtin classes such as ``dict``.
"""

import builtins
import importlib
import inspect
import logging
from typing import Any, Optional

from assembler.errors import TypeNotFoundError

__all__ = ["TypeLoader", "inferred_name"]

logger = logging.getLogger(__name__)


def inferred_name(target: type) -> str:
    """Derive the registration name of a class from the class itself.

    Example:
        >>> inferred_name(FileLogger)
        'FileLogger'
    """
    return target.__name__


class TypeLoader:
    """Resolves type names to classes, with an explicit registration table."""

    def __init__(self, types: Optional[dict[str, type]] = None):
        self._types: dict[str, type] = dict(types or {})

    def register(self, target: Optional[type] = None, name: Optional[str] = None) -> Any:
        """Register a class under a name.

        Can be called directly or used as a class decorator, with or without
        an explicit name.

        Args:
            target: The class to register. If omitted, a decorator is returned.
            name: The name to register under; defaults to the class name.

        Raises:
            TypeError: If ``target`` is not a class.

        Example:
            >>> loader = TypeLoader()
            >>> @loader.register()
            ... class FileLogger:
            ...     pass
            >>> loader.register(Service, name="app.Service")
        """

        def decorator(cls: type) -> type:
            if not inspect.isclass(cls):
                raise TypeError(f"{cls!r} is not a class")
            self._types[name or inferred_name(cls)] = cls
            return cls

        if target is None:
            return decorator
        return decorator(target)

    def is_registered(self, type_name: str) -> bool:
        return type_name in self._types

    def resolve(self, type_name: str) -> type:
        """Return the class named by ``type_name``.

        Raises:
            TypeNotFoundError: If no class can be found for ``type_name``.
        """
        if type_name in self._types:
            return self._types[type_name]

        cls = _import_type(type_name) if ("." in type_name or ":" in type_name) else None
        if cls is None:
            cls = getattr(builtins, type_name, None)

        if not inspect.isclass(cls):
            raise TypeNotFoundError(f"Cannot find a class named {type_name!r}")

        logger.debug("Resolved type %r to %r", type_name, cls)
        return cls


def _import_type(type_name: str) -> Optional[Any]:
    if ":" in type_name:
        module_name, _, attribute_path = type_name.partition(":")
    else:
        module_name, _, attribute_path = type_name.rpartition(".")

    try:
        target = importlib.import_module(module_name)
    except (ImportError, ValueError):
        return None

    for attribute in attribute_path.split("."):
        target = getattr(target, attribute, None)
        if target is None:
            return None
    return target
