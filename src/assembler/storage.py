"""Named storage for built objects.

:class:`ObjectStorage` is the interface a
:class:`~assembler.registry.Registry` needs from the storage behind its
containers. :class:`Storage` is the default implementation; it behaves like a small insertion
ordered dictionary of objects that refuses to hold plain scalar values.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator

from assembler.errors import NotFoundError

__all__ = ["ObjectStorage", "Storage"]

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (type(None), bool, int, float, complex, str, bytes)


class ObjectStorage(ABC):
    """Named objects held by a registry container.

    A registry keeps one storage as a prototype and calls
    :meth:`new_instance` on it for every container it creates.
    """

    @abstractmethod
    def new_instance(self) -> "ObjectStorage":
        """Return a new, empty storage of the same kind."""

    @abstractmethod
    def get(self, name: str) -> Any:
        """Return the object stored under ``name``, or raise ``NotFoundError``."""

    @abstractmethod
    def set(self, name: str, value: Any) -> None:
        ...

    @abstractmethod
    def is_stored(self, name: str) -> bool:
        ...

    @abstractmethod
    def __iter__(self) -> Iterator[Any]:
        ...


class Storage(ObjectStorage):
    """Insertion ordered collection of objects keyed by component name.

    Iterating a storage yields the stored objects in the order they were
    first added. Every call to ``iter()`` returns a new generator, so two
    consumers never share a cursor.

    Example:
        >>> storage = Storage()
        >>> storage.set("db", database)
        >>> storage.get("db") is database
        True
        >>> list(storage)
        [database]
    """

    def __init__(self):
        self._objects: dict[str, Any] = {}

    def new_instance(self) -> "Storage":
        """Return a new, empty storage of the same class."""
        return type(self)()

    def get(self, name: str) -> Any:
        """Return the object stored under ``name``.

        Raises:
            NotFoundError: If nothing is stored under ``name``.
        """
        if name not in self._objects:
            raise NotFoundError(f"Nothing stored under {name!r}")
        return self._objects[name]

    def set(self, name: str, value: Any) -> None:
        """Store ``value`` under ``name``.

        Scalar values (``None``, numbers, strings and bytes) are not objects
        in the sense used here and are ignored.
        """
        if isinstance(value, _SCALAR_TYPES):
            logger.warning("Ignoring scalar value for %r in storage", name)
            return
        self._objects[name] = value

    def is_stored(self, name: str) -> bool:
        return name in self._objects

    def items(self) -> Iterator[tuple[str, Any]]:
        yield from self._objects.items()

    def __iter__(self) -> Iterator[Any]:
        yield from self._objects.values()

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, name: str) -> bool:
        return self.is_stored(name)
