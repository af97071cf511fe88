"""
Module for building configured components into a graph of live objects.

A :class:`Container` is driven through a small state machine:

* ``load_class(name)`` selects a component from the configuration,
* ``select_method(name)`` optionally directs the following arguments to a
  setter method instead of the constructor,
* ``add_value``/``add_component``/``bind_param`` collect arguments,
* ``new_instance()`` builds the component, caches it as a singleton in the
  registry and returns to the idle state.

Component references among the arguments are resolved recursively: an
existing registry container or singleton of that name is reused, otherwise a
child container sharing this container's configuration, registry, factory
and bindings builds it. Components currently being built are tracked so that
cycles (A needs B needs A) fail instead of recursing forever.
"""

import logging
from typing import Any, Optional

from assembler.config import ComponentSpec, ConfigInput, parse_config
from assembler.domain import CONSTRUCTOR, DataType
from assembler.errors import (
    CyclicDependencyError,
    InvalidSelectionError,
    NoComponentSelectedError,
    UnknownComponentError,
)
from assembler.factory import Factory
from assembler.loader import TypeLoader
from assembler.parameter import Parameter
from assembler.registry import Registry

__all__ = ["Container"]

logger = logging.getLogger(__name__)


class Container:
    """
    Builds components from configuration and caches them in a registry.

    Example:
        >>> container = Container({
        ...     "logger": {"class": "FileLogger"},
        ...     "service": {"class": "Service", "arguments": {"__construct": "logger"}},
        ... }, loader)
        >>> service = container.load_class("service").new_instance()
        >>> container.registry.is_singleton("logger")
        True
    """

    def __init__(self, config: Optional[ConfigInput] = None, loader: Optional[TypeLoader] = None):
        self._config: dict[str, ComponentSpec] = {}
        self._loader = loader
        self._registry: Optional[Registry] = None
        self._factory: Optional[Factory] = None
        self._parameter: Optional[Parameter] = None
        self._component: Optional[str] = None
        self._method = CONSTRUCTOR
        self._in_progress: set[str] = set()

        if config is not None:
            self.set_config(config)

    def set_config(self, config: ConfigInput) -> None:
        """Replace the component configuration.

        Raises:
            ConfigError: If the configuration is malformed.
        """
        self._config = parse_config(config)
        if self._registry is not None:
            self._registry.set_identities(self._config.keys())

    @property
    def config(self) -> dict[str, ComponentSpec]:
        return self._config

    @property
    def component(self) -> Optional[str]:
        """The selected component, or None when idle."""
        return self._component

    @property
    def method(self) -> str:
        """The method that added arguments are collected for."""
        return self._method

    def load_class(self, component_name: str) -> "Container":
        """Select ``component_name`` and load its type on first use.

        Any previous selection and its collected arguments are dropped first,
        so a failed call leaves the container idle.

        Raises:
            UnknownComponentError: If the component is not configured.
            TypeNotFoundError: If the component's type cannot be resolved.
        """
        self._set_default_values()
        if component_name not in self._config:
            raise UnknownComponentError(f"Invalid component name: {component_name!r}")

        class_name = self._config[component_name].class_name
        if not self.factory.is_class_defined(class_name):
            self.factory.load_class(class_name, component_name)

        self._component = component_name
        logger.debug("Selected component %r (%s)", component_name, class_name)
        return self

    def select_method(self, method_name: str) -> "Container":
        """Direct the following arguments to the setter ``method_name``.

        Raises:
            NoComponentSelectedError: If no component is selected.
            InvalidSelectionError: If ``method_name`` names the constructor.
        """
        spec = self._selected_spec()
        if method_name in (CONSTRUCTOR, "__init__", spec.class_name, _short_name(spec.class_name)):
            raise InvalidSelectionError("Selecting the constructor method is not allowed")

        self._method = method_name
        return self

    def add_component(self, *components: Any) -> "Container":
        """Add component references, by name or as live objects.

        Raises:
            NoComponentSelectedError: If no component is selected.
            CyclicDependencyError: If a reference is the selected component.
        """
        if self._component is None:
            raise NoComponentSelectedError("Load a class before adding a dependency")

        self.parameter.set_parameters_from_code(components, self._component, self._method)
        return self

    def add_value(self, *values: Any) -> "Container":
        for value in values:
            self.parameter.set_parameter(value, self._method, DataType.of(value))
        return self

    def bind_param(self, identifier: str, value: Any, data_type: Optional[DataType] = None) -> "Container":
        self.parameter.bind_param(identifier, value, data_type)
        return self

    def new_instance(self) -> Any:
        """Build the selected component and cache it as a singleton.

        The container returns to the idle state afterwards, whether or not the
        build succeeded.

        Returns:
            The new object.

        Raises:
            NoComponentSelectedError: If no component is selected.
            CyclicDependencyError: If the component is already being built
                further up the dependency chain.
        """
        spec = self._selected_spec()
        component_name = self._component
        if component_name in self._in_progress:
            self._set_default_values()
            raise CyclicDependencyError(
                f"Circular dependency detected while building {component_name!r}"
            )

        self._in_progress.add(component_name)
        try:
            parameter = self.parameter
            if spec.has_arguments:
                parameter.set_parameters_from_config(spec.arguments, self._config.keys())
            parameter.materialise(self._get_instance_of)
            new_instance = self.factory.create(parameter, spec)
        finally:
            self._in_progress.discard(component_name)
            self._set_default_values()

        self.registry.set_singleton(component_name, new_instance)
        logger.debug("Built component %r", component_name)
        return new_instance

    @property
    def registry(self) -> Registry:
        if self._registry is None:
            self._registry = Registry(self._config.keys())
        return self._registry

    @registry.setter
    def registry(self, registry: Registry) -> None:
        self._registry = registry

    @property
    def factory(self) -> Factory:
        if self._factory is None:
            self._factory = Factory(self._loader)
        return self._factory

    @factory.setter
    def factory(self, factory: Factory) -> None:
        self._factory = factory

    @property
    def parameter(self) -> Parameter:
        if self._parameter is None:
            self._parameter = Parameter()
        return self._parameter

    @parameter.setter
    def parameter(self, parameter: Parameter) -> None:
        self._parameter = parameter

    def clear_parameter(self) -> None:
        """Forget the collected arguments. Bindings are kept."""
        if self._parameter is not None:
            self._parameter.reset()

    def _selected_spec(self) -> ComponentSpec:
        if self._component is None:
            raise NoComponentSelectedError("Load a class first")
        return self._config[self._component]

    def _get_instance_of(self, component_name: str) -> Any:
        """Return a container, a singleton or a newly built instance of ``component_name``."""
        registry = self.registry
        if registry.is_container(component_name):
            return registry.get_container(component_name)
        if registry.is_singleton(component_name):
            return registry.get_singleton(component_name)

        logger.debug("Building dependency %r", component_name)
        return self._child().load_class(component_name).new_instance()

    def _child(self) -> "Container":
        child = type(self)(loader=self._loader)
        child._config = self._config
        child._registry = self.registry
        child._factory = self.factory
        child._parameter = Parameter(self.parameter.bindings)
        child._in_progress = self._in_progress
        return child

    def _set_default_values(self) -> None:
        self.clear_parameter()
        self._component = None
        self._method = CONSTRUCTOR


def _short_name(class_name: str) -> str:
    return class_name.replace(":", ".").rsplit(".", 1)[-1]
