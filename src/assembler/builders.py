"""High level entry points for constructing containers and objects."""

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from assembler.config import ComponentSpec, ConfigInput, load_config
from assembler.container import Container
from assembler.loader import TypeLoader
from assembler.parameter import Parameter

__all__ = ["make_container", "load_container", "Assembler"]


def make_container(
    config: Optional[ConfigInput] = None,
    loader: Optional[TypeLoader] = None,
) -> Container:
    """Create a :class:`Container` for the given component configuration.

    Args:
        config: Mapping of component name to component spec.
        loader: Resolves the configured type names. Defaults to a loader that
            only knows importable dotted paths and builtins.

    Returns:
        A container in the idle state.

    Raises:
        ConfigError: If the configuration is malformed.

    Example:
        >>> container = make_container({"clock": {"class": "datetime.datetime"}})
    """
    return Container(config, loader)


def load_container(
    path: Union[str, Path],
    section: Optional[str] = None,
    loader: Optional[TypeLoader] = None,
) -> Container:
    """Create a :class:`Container` from a YAML configuration file.

    Args:
        path: The YAML file holding the component configuration.
        section: Optional top level key the components live under.
        loader: Resolves the configured type names.

    Raises:
        ConfigError: If the file cannot be read as a component configuration.
    """
    return Container(load_config(path, section), loader)


class Assembler:
    """Creates objects by type name, without any component configuration.

    Objects are cached as singletons under their type name, and a replacement
    registered with :meth:`replace_class` is returned instead of a new object.
    This makes it easy to swap in test doubles for collaborators that are
    created by type name.

    Example:
        >>> assembler = Assembler()
        >>> assembler.replace_class("myapp.Mailer", FakeMailer())
        >>> assembler.create("myapp.Mailer")
        <FakeMailer ...>
    """

    def __init__(self, container: Optional[Container] = None, loader: Optional[TypeLoader] = None):
        self.container = container or Container(loader=loader)

    def create(
        self,
        type_name: str,
        constructor_args: Optional[Iterable[Any]] = None,
        setter_args: Optional[Mapping[str, Iterable[Any]]] = None,
    ) -> Any:
        """Return the singleton for ``type_name``, creating it on first use.

        Args:
            type_name: The type to instantiate.
            constructor_args: Values passed positionally to the constructor.
            setter_args: Mapping of method name to the values it is called
                with after construction.

        Raises:
            TypeNotFoundError: If ``type_name`` cannot be resolved.
            MethodNotFoundError: If a setter method does not exist.
        """
        registry = self.container.registry
        if registry.is_singleton(type_name):
            return registry.get_singleton(type_name)

        factory = self.container.factory
        factory.load_class(type_name)

        parameter = Parameter()
        if constructor_args is not None:
            parameter.set_constructor_args(constructor_args)
        if setter_args is not None:
            parameter.set_setter_args(setter_args)

        new_object = factory.create(parameter, ComponentSpec(name=type_name, class_name=type_name))
        registry.set_singleton(type_name, new_object)
        return new_object

    def replace_class(self, type_name: str, replacement: Any) -> None:
        """Make :meth:`create` return ``replacement`` for ``type_name``."""
        self.container.registry.set_singleton(type_name, replacement)
