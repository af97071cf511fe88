"""Exceptions raised while assembling components.

Every error raised by the framework is a :class:`DependencyError`. The
subclasses tag the failure so callers can tell them apart, but none of them
is recoverable by retrying the same call sequence.
"""

__all__ = [
    "DependencyError",
    "ConfigError",
    "UnknownComponentError",
    "InvalidSelectionError",
    "NoComponentSelectedError",
    "CyclicDependencyError",
    "TypeNotFoundError",
    "TypeNotDefinedError",
    "NotInstanceOfError",
    "MethodNotFoundError",
    "UnknownBindingError",
    "CoercionError",
    "InvalidStateError",
    "NameCollisionError",
    "InvalidNameError",
    "NotFoundError",
]


class DependencyError(Exception):
    """Raised when a component cannot be configured, resolved or built."""

    kind = "dependency"


class ConfigError(DependencyError):
    """The component configuration is malformed."""

    kind = "config"


class UnknownComponentError(DependencyError):
    """The component name is not present in the configuration."""

    kind = "unknown_component"


class InvalidSelectionError(DependencyError):
    """The constructor was selected as a setter target."""

    kind = "invalid_selection"


class NoComponentSelectedError(DependencyError):
    """An operation needs a selected component but none is loaded."""

    kind = "no_component_selected"


class CyclicDependencyError(DependencyError):
    """A component depends, directly or indirectly, on itself."""

    kind = "cyclic_dependency"


class TypeNotFoundError(DependencyError):
    """A type name could not be resolved to a class."""

    kind = "type_not_found"


class TypeNotDefinedError(DependencyError):
    """The factory was asked to build a type it has not loaded."""

    kind = "type_not_defined"


class NotInstanceOfError(DependencyError):
    """A built object does not satisfy its declared ``instanceof`` type."""

    kind = "not_instance_of"


class MethodNotFoundError(DependencyError):
    """A setter method named in the configuration does not exist."""

    kind = "method_not_found"


class UnknownBindingError(DependencyError):
    """A placeholder refers to an identifier that was never bound."""

    kind = "unknown_binding"


class CoercionError(DependencyError):
    """A raw argument cannot be converted to its declared data type."""

    kind = "coercion"


class InvalidStateError(DependencyError):
    """A registry container was opened or closed out of order."""

    kind = "invalid_state"


class NameCollisionError(DependencyError):
    """A container name is already taken by a component."""

    kind = "name_collision"


class InvalidNameError(DependencyError):
    """A name passed to a container is not a component name."""

    kind = "invalid_name"


class NotFoundError(DependencyError):
    """No singleton or stored object exists under the given name."""

    kind = "not_found"
