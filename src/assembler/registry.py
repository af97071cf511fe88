"""Singleton and container bookkeeping for built components."""

import logging
from typing import Any, Iterable, Optional

from assembler.errors import (
    InvalidNameError,
    InvalidStateError,
    NameCollisionError,
    NotFoundError,
)
from assembler.storage import ObjectStorage, Storage

__all__ = ["Registry"]

logger = logging.getLogger(__name__)


class Registry:
    """Holds one cached instance per component name, plus named containers.

    A container is a named :class:`~assembler.storage.ObjectStorage` into which
    already-built singletons can be copied. Containers are filled between
    :meth:`open` and :meth:`close`, and only one container may be open at a
    time. Container names share a namespace with component names, so a
    component name can never be used as a container name.

    Example:
        >>> registry = Registry({"db", "cache"})
        >>> registry.set_singleton("db", database)
        >>> sessions = registry.open("session").add("db").close()
        >>> sessions.get("db") is database
        True
    """

    def __init__(self, identities: Optional[Iterable[str]] = None):
        self._identities: frozenset[str] = frozenset(identities or ())
        self._singletons: dict[str, Any] = {}
        self._containers: dict[str, ObjectStorage] = {}
        self._open_container: Optional[str] = None
        self._storage: Optional[ObjectStorage] = None

    @property
    def identities(self) -> frozenset[str]:
        return self._identities

    def set_identities(self, identities: Iterable[str]) -> None:
        self._identities = frozenset(identities)

    @property
    def storage(self) -> ObjectStorage:
        """The prototype used to create the storage of new containers."""
        if self._storage is None:
            self._storage = Storage()
        return self._storage

    def set_storage(self, storage: Optional[ObjectStorage] = None) -> None:
        self._storage = storage

    def open(self, container_name: str) -> "Registry":
        """Open ``container_name``, creating it on first use.

        Raises:
            InvalidStateError: If another container is still open.
            NameCollisionError: If ``container_name`` is a component name.
        """
        if self.is_selected():
            raise InvalidStateError(
                f"Close the container {self._open_container!r} "
                "before opening a new one"
            )
        if container_name in self._identities:
            raise NameCollisionError(
                f"{container_name!r} is a component name and cannot be used "
                "as a container name"
            )

        if not self.is_container(container_name):
            self._containers[container_name] = self.storage.new_instance()
            logger.debug("Created container %r", container_name)

        self._open_container = container_name
        return self

    def add(self, name: str) -> "Registry":
        """Copy the singleton ``name`` into the open container.

        Raises:
            InvalidStateError: If no container is open.
            InvalidNameError: If ``name`` is not a component name.
            NotFoundError: If ``name`` has not been built yet.
        """
        if not self.is_selected():
            raise InvalidStateError("Open a container before adding a component")
        if name not in self._identities:
            raise InvalidNameError(f"Invalid component name passed to the container: {name!r}")
        if name not in self._singletons:
            raise NotFoundError(f"Cannot find any instances of {name!r}")

        self._containers[self._open_container].set(name, self._singletons[name])
        return self

    def close(self) -> ObjectStorage:
        """Close the open container and return it.

        Raises:
            InvalidStateError: If no container is open.
        """
        if not self.is_selected():
            raise InvalidStateError("Open a container before closing it")

        container_name = self._open_container
        self._open_container = None
        return self._containers[container_name]

    def is_selected(self) -> bool:
        return self._open_container is not None

    def is_container(self, container_name: str) -> bool:
        return container_name in self._containers

    def get_container(self, container_name: str) -> Optional[ObjectStorage]:
        return self._containers.get(container_name)

    def set_singleton(self, name: str, obj: Any) -> None:
        self._singletons[name] = obj

    def get_singleton(self, name: str) -> Any:
        """Return the cached instance for ``name``.

        Raises:
            NotFoundError: If no instance has been cached under ``name``.
        """
        if name not in self._singletons:
            raise NotFoundError(f"Cannot find an instance of {name!r}")
        return self._singletons[name]

    def is_singleton(self, name: str) -> bool:
        return name in self._singletons
