"""Instantiation of component types and setter injection.

The :class:`Factory` keeps track of which types have been loaded, creates
instances of them with the arguments materialised by a
:class:`~assembler.parameter.Parameter`, checks the declared ``instanceof``
type and finally calls each configured setter method.
"""

import inspect
import logging
from typing import Any, Optional

from assembler.config import ComponentSpec
from assembler.errors import MethodNotFoundError, NotInstanceOfError, TypeNotDefinedError
from assembler.loader import TypeLoader
from assembler.parameter import Parameter

__all__ = ["Factory"]

logger = logging.getLogger(__name__)


class Factory:
    """Build objects of loaded types."""

    def __init__(self, loader: Optional[TypeLoader] = None):
        self.loader = loader or TypeLoader()
        self._classes_defined: dict[str, str] = {}
        self._types: dict[str, type] = {}

    @property
    def classes_defined(self) -> dict[str, str]:
        """Loaded type names keyed by the component they were loaded for."""
        return dict(self._classes_defined)

    def is_class_defined(self, type_name: str) -> bool:
        return type_name in self._types

    def load_class(self, type_name: str, component_name: Optional[str] = None) -> bool:
        """Load ``type_name`` unless it is already loaded.

        Args:
            type_name: The type to resolve through the loader.
            component_name: The component the type is recorded under; defaults
                to ``type_name``.

        Returns:
            True if the type was loaded, False if it had been loaded before.

        Raises:
            TypeNotFoundError: If the loader cannot resolve ``type_name``.
        """
        if self.is_class_defined(type_name):
            return False

        self._types[type_name] = self.loader.resolve(type_name)
        self._classes_defined[component_name or type_name] = type_name
        logger.debug("Loaded type %r for component %r", type_name, component_name or type_name)
        return True

    def get_class(self, type_name: str) -> type:
        """Return the loaded class for ``type_name``.

        Raises:
            TypeNotDefinedError: If ``type_name`` has not been loaded.
        """
        if not self.is_class_defined(type_name):
            raise TypeNotDefinedError(f"Class not defined: {type_name}")
        return self._types[type_name]

    def create(self, parameter: Parameter, spec: ComponentSpec) -> Any:
        """Instantiate the type of ``spec`` and inject its setter arguments.

        The parameter must already be materialised. Its resolved argument
        buffers are cleared once the object has been built, or the build has
        failed, so a parameter is never applied twice.

        Args:
            parameter: Holds the constructor arguments and setter arguments.
            spec: The spec of the component being built.

        Returns:
            The new object.

        Raises:
            TypeNotDefinedError: If the spec's type has not been loaded.
            NotInstanceOfError: If the object is not an instance of the spec's
                ``instanceof`` type.
            MethodNotFoundError: If a setter method does not exist on the type.
        """
        cls = self.get_class(spec.class_name)
        try:
            return self._build(cls, parameter, spec)
        finally:
            parameter.clear_resolved()

    def _build(self, cls: type, parameter: Parameter, spec: ComponentSpec) -> Any:
        if parameter.has_constructor_args():
            obj = cls(*parameter.constructor_args)
        else:
            obj = cls()

        if spec.instanceof is not None:
            required_type = self.loader.resolve(spec.instanceof)
            if not isinstance(obj, required_type):
                raise NotInstanceOfError(f"{spec.class_name} is not an instance of {spec.instanceof}")

        for method_name, method_args in parameter.setter_args.items():
            method = inspect.getattr_static(cls, method_name, None)
            if method is None or not callable(getattr(obj, method_name, None)):
                raise MethodNotFoundError(
                    f"The method {method_name}() does not exist in {cls.__qualname__}"
                )
            getattr(obj, method_name)(*method_args)

        logger.debug("Created %s with %d setter call(s)", cls.__qualname__, len(parameter.setter_args))
        return obj
