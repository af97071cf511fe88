"""Component configuration.

The configuration is a mapping of component name to component spec::

    logger:
      class: myapp.logging.FileLogger
    service:
      class: myapp.Service
      instanceof: myapp.ServiceInterface
      arguments:
        __construct: logger, 42
        setTimeout: "30"

It can be given as a plain mapping or loaded from a YAML file. Specs are
validated into immutable :class:`ComponentSpec` models.
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from assembler.domain import CONSTRUCTOR
from assembler.errors import ConfigError

__all__ = ["ComponentSpec", "parse_config", "load_config"]

_CONSTRUCTOR_ALIASES = ("__init__",)


class ComponentSpec(BaseModel):
    """How to build one component.

    - **name**: the component name (the key in the configuration)
    - **class_name**: the type to instantiate (``class`` in the configuration)
    - **instanceof**: optional type the built object must be an instance of
    - **arguments**: optional mapping of method name to its arguments, either a
      comma separated string or a list. ``__construct`` (or ``__init__``) holds
      the constructor arguments.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    name: str = ""
    class_name: str = Field(alias="class", min_length=1)
    instanceof: Optional[str] = None
    arguments: Optional[dict[str, Union[str, list[Any]]]] = None

    @field_validator("arguments", mode="before")
    @classmethod
    def _normalise_arguments(cls, v: object) -> object:
        if v is None or not isinstance(v, Mapping):
            return v
        normalised: dict[str, Any] = {}
        for method_name, raw_arguments in v.items():
            if method_name in _CONSTRUCTOR_ALIASES:
                method_name = CONSTRUCTOR
            if raw_arguments is None:
                raw_arguments = []
            elif not isinstance(raw_arguments, (str, list)):
                raw_arguments = [raw_arguments]
            normalised[str(method_name)] = raw_arguments
        return normalised

    @property
    def has_arguments(self) -> bool:
        return self.arguments is not None


ConfigInput = Mapping[str, Union[ComponentSpec, Mapping[str, Any]]]


def parse_config(config: ConfigInput) -> dict[str, ComponentSpec]:
    """Validate a component configuration mapping.

    Raises:
        ConfigError: If any component spec is malformed.
    """
    specs: dict[str, ComponentSpec] = {}
    for name, raw_spec in config.items():
        if isinstance(raw_spec, ComponentSpec):
            specs[name] = raw_spec if raw_spec.name == name else raw_spec.model_copy(update={"name": name})
            continue
        if not isinstance(raw_spec, Mapping):
            raise ConfigError(f"Component {name!r} must be a mapping, got {type(raw_spec).__name__}")
        try:
            specs[name] = ComponentSpec.model_validate({**raw_spec, "name": name})
        except ValidationError as err:
            raise ConfigError(f"Invalid configuration for component {name!r}: {err}") from err
    return specs


def load_config(path: Union[str, Path], section: Optional[str] = None) -> dict[str, ComponentSpec]:
    """Load and validate a component configuration from a YAML file.

    Args:
        path: The YAML file to read.
        section: Optional top level key holding the components, for files
            that keep several configurations side by side.

    Raises:
        ConfigError: If the file cannot be parsed, the section is missing, or
            the configuration is malformed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Cannot parse configuration file {path}: {err}") from err

    data = data or {}
    if section is not None:
        if not isinstance(data, Mapping) or section not in data:
            raise ConfigError(f"Section {section!r} not found in {path}")
        data = data[section] or {}

    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration in {path} must be a mapping")
    return parse_config(data)
