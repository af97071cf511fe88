"""Assembler object-graph framework.

Assembler builds objects from a declarative map of named components. Each
component names a type, its constructor arguments and the setter methods to
call after construction. Arguments may be literal values, named bindings or
references to other components, which are built recursively and cached as
singletons in a registry.

Key Features:
    - Declarative component configuration, from a mapping or a YAML file
    - Constructor and setter injection
    - Typed argument coercion and ``:name`` placeholders bound at runtime
    - Singleton caching and named containers of built components
    - Cycle detection across the whole dependency chain

Basic Usage:
    >>> from assembler import TypeLoader, make_container
    >>>
    >>> loader = TypeLoader()
    >>> loader.register(FileLogger)
    >>> loader.register(Service)
    >>>
    >>> container = make_container({
    ...     "logger": {"class": "FileLogger"},
    ...     "service": {"class": "Service", "arguments": {"__construct": "logger"}},
    ... }, loader)
    >>> service = container.load_class("service").new_instance()

The framework consists of several core modules:
    - container: The component building state machine
    - parameter: Argument collection, typing and coercion
    - factory: Instantiation and setter injection
    - registry: Singletons and named containers
    - storage: Object storage backing registry containers
    - loader: Resolution of type names to classes
    - config: Component configuration models and loading
    - builders: High level entry points
    - errors: Framework-specific exceptions
"""

import logging

from assembler.builders import Assembler, load_container, make_container
from assembler.config import ComponentSpec, load_config, parse_config
from assembler.container import Container
from assembler.domain import CONSTRUCTOR, DataType, TypedArg
from assembler.errors import DependencyError
from assembler.factory import Factory
from assembler.loader import TypeLoader
from assembler.parameter import Parameter
from assembler.registry import Registry
from assembler.storage import ObjectStorage, Storage

__all__ = [
    "Assembler",
    "CONSTRUCTOR",
    "ComponentSpec",
    "Container",
    "DataType",
    "DependencyError",
    "Factory",
    "ObjectStorage",
    "Parameter",
    "Registry",
    "Storage",
    "TypeLoader",
    "TypedArg",
    "load_config",
    "load_container",
    "make_container",
    "parse_config",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
