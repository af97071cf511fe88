"""Collection, typing and materialisation of method arguments.

A :class:`Parameter` gathers the arguments for one component build: the
constructor arguments and the arguments of each setter method, in the order
they were added. Arguments arrive from three places:

* the ``arguments`` section of the component configuration, as strings
  such as ``"logger, 42, :host"`` that are tokenised and classified,
* code, through :meth:`Parameter.set_parameter` and
  :meth:`Parameter.set_parameters_from_code`,
* named bindings, referenced from string arguments as ``:identifier``.

Once everything has been added, :meth:`Parameter.materialise` turns the typed
arguments into the plain value lists the factory passes to the constructor
and setters. Component references are handed back to the caller to resolve,
since building objects is the container's job.
"""

import logging
import math
import re
from typing import Any, Callable, Collection, Iterable, Iterator, Mapping, Optional, Union

from assembler.domain import CONSTRUCTOR, PLACEHOLDER_PREFIX, DataType, TypedArg
from assembler.errors import (
    CoercionError,
    ConfigError,
    CyclicDependencyError,
    UnknownBindingError,
)

__all__ = ["Parameter", "coerce", "tokenise", "classify"]

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(r"[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?")
_QUOTES = "'\""

RawArguments = Union[str, list[Any], None]
Resolver = Callable[[str], Any]


class _Token(str):
    """A token read from an argument string, remembering whether it was quoted."""

    quoted = False


def tokenise(arguments: str) -> list[str]:
    """Split a comma separated argument string into tokens.

    Whitespace around unquoted tokens is trimmed. Commas inside single or
    double quotes do not split, and a backslash escapes the character after
    it. Quoted tokens are returned without their quotes and with the
    ``quoted`` attribute set. A blank string has no tokens.

    Raises:
        ConfigError: If a quote is left unterminated.

    Example:
        >>> tokenise("logger, 42, 'a, b'")
        ['logger', '42', 'a, b']
    """
    if not arguments.strip():
        return []
    return list(_scan(arguments))


def _scan(arguments: str) -> Iterator[str]:
    chars = iter(arguments)
    current: list[str] = []
    quoted = False
    quote: Optional[str] = None

    for char in chars:
        if char == "\\":
            current.append(next(chars, "\\"))
        elif quote is not None:
            if char == quote:
                quote = None
            else:
                current.append(char)
        elif char in _QUOTES and not "".join(current).strip():
            current = []
            quote = char
            quoted = True
        elif char == ",":
            yield _make_token(current, quoted)
            current, quoted = [], False
        elif quoted and char.isspace():
            continue
        else:
            current.append(char)

    if quote is not None:
        raise ConfigError(f"Unterminated quote in argument string {arguments!r}")
    yield _make_token(current, quoted)


def _make_token(chars: list[str], quoted: bool) -> str:
    token = _Token("".join(chars) if quoted else "".join(chars).strip())
    token.quoted = quoted
    return token


def classify(token: Any, known_names: Collection[str] = ()) -> TypedArg:
    """Turn a raw configuration value into a :class:`TypedArg`.

    Strings are classified by their content: ``NULL``, ``TRUE`` and ``FALSE``
    (in any case), integer and float literals, names of known components,
    and finally plain strings. Quoted tokens are always literal strings.
    Values that are not strings take their type from the value itself.
    """
    if not isinstance(token, str):
        return TypedArg(DataType.of(token), token)
    if getattr(token, "quoted", False):
        return TypedArg(DataType.STRING, str(token), literal=True)

    token = str(token)
    upper = token.upper()
    if upper == "NULL":
        return TypedArg(DataType.NULL, None)
    if upper in ("TRUE", "FALSE"):
        return TypedArg(DataType.BOOL, token)
    if _INT_PATTERN.fullmatch(token):
        return TypedArg(DataType.INT, token)
    if _FLOAT_PATTERN.fullmatch(token):
        return TypedArg(DataType.FLOAT, token)
    if token in known_names:
        return TypedArg(DataType.OBJECT, token)
    return TypedArg(DataType.STRING, token)


def coerce(value: Any, data_type: DataType) -> Any:
    """Convert a raw value to ``data_type``.

    Raises:
        CoercionError: If the value cannot be represented as ``data_type``.
            Nothing is ever silently converted to zero or NaN.

    Example:
        >>> coerce("42", DataType.INT)
        42
        >>> coerce("true", DataType.BOOL)
        True
    """
    if data_type is DataType.NULL:
        return None
    if data_type is DataType.BOOL:
        return _coerce_bool(value)
    if data_type is DataType.INT:
        return _coerce_number(value, int)
    if data_type is DataType.FLOAT:
        result = _coerce_number(value, float)
        if not math.isfinite(result):
            raise CoercionError(f"Cannot coerce {value!r} to a finite float")
        return result
    if data_type is DataType.STRING:
        if value is None:
            raise CoercionError("Cannot coerce None to a string")
        return str(value)
    raise CoercionError(f"Cannot coerce {value!r} to {data_type.name}")


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().upper() in ("TRUE", "FALSE"):
        return value.strip().upper() == "TRUE"
    raise CoercionError(f"Cannot coerce {value!r} to a boolean")


def _coerce_number(value: Any, number_type: type) -> Any:
    if isinstance(value, bool) or value is None:
        raise CoercionError(f"Cannot coerce {value!r} to {number_type.__name__}")
    if isinstance(value, str):
        pattern = _INT_PATTERN if number_type is int else _FLOAT_PATTERN
        if not pattern.fullmatch(value.strip()):
            raise CoercionError(f"Cannot coerce {value!r} to {number_type.__name__}")
    try:
        return number_type(value)
    except (TypeError, ValueError) as err:
        raise CoercionError(f"Cannot coerce {value!r} to {number_type.__name__}") from err


class Parameter:
    """Arguments for the constructor and setter methods of one component.

    Attributes:
        bindings: Named values referenced by ``:identifier`` placeholders.
            The mapping may be shared with other parameters, which is how child
            containers see the bindings of their parent.
    """

    def __init__(self, bindings: Optional[dict[str, TypedArg]] = None):
        self.bindings: dict[str, TypedArg] = bindings if bindings is not None else {}
        self._method_args: dict[str, list[TypedArg]] = {}
        self._constructor_args: list[Any] = []
        self._setter_args: dict[str, list[Any]] = {}

    @property
    def method_args(self) -> dict[str, list[TypedArg]]:
        return self._method_args

    def set_parameters_from_config(
        self,
        arguments: Mapping[str, RawArguments],
        known_names: Iterable[str] = (),
    ) -> None:
        """Add the arguments of a component's ``arguments`` configuration.

        Args:
            arguments: Mapping of method name to a comma separated argument
                string or an already split list of values. A method with no
                arguments is still called, with none.
            known_names: Component names. A bare token equal to one of them is
                a reference to that component.
        """
        known = frozenset(known_names)
        for method_name, raw_arguments in arguments.items():
            self._method_args.setdefault(method_name, [])
            if raw_arguments is None:
                continue
            tokens = tokenise(raw_arguments) if isinstance(raw_arguments, str) else raw_arguments
            for token in tokens:
                typed_arg = classify(token, known)
                self._append(method_name, typed_arg)

    def set_parameters_from_code(self, args: Iterable[Any], owner: str, method_name: str) -> None:
        """Add component references for ``method_name``.

        Args:
            args: Live objects or component names.
            owner: The name of the component being built.
            method_name: The method receiving the references.

        Raises:
            CyclicDependencyError: If an argument refers to ``owner`` itself.
        """
        for arg in args:
            referenced = arg if isinstance(arg, str) else type(arg).__name__
            if referenced == owner:
                raise CyclicDependencyError(
                    f"Component {owner!r} cannot be injected into itself"
                )
            self.set_parameter(arg, method_name, DataType.OBJECT)

    def set_parameter(self, data: Any, method_name: str, data_type: DataType) -> None:
        self._append(method_name, TypedArg(data_type, data))

    def _append(self, method_name: str, typed_arg: TypedArg) -> None:
        self._method_args.setdefault(method_name, []).append(typed_arg)

    def bind_param(
        self, identifier: str, value: Any, data_type: Optional[DataType] = None
    ) -> "Parameter":
        """Bind ``value`` to ``identifier`` for use as a ``:identifier`` placeholder."""
        if data_type is None:
            data_type = DataType.of(value)
        self.bindings[_strip_prefix(identifier)] = TypedArg(data_type, value)
        return self

    def get_param_value(self, identifier: str) -> Any:
        """Return the value bound to ``identifier``, with or without its ``:``.

        The value is coerced to the data type it was bound with, so
        ``bind_param("port", "8080", DataType.INT)`` yields ``8080``. OBJECT
        bindings, and values that already have their type, are returned as they
        are.

        Raises:
            UnknownBindingError: If ``identifier`` was never bound.
            CoercionError: If the value does not fit its data type.
        """
        key = _strip_prefix(identifier)
        if key not in self.bindings:
            raise UnknownBindingError(f"Invalid parameter identifier {identifier!r}")
        binding = self.bindings[key]
        if binding.data_type in (DataType.OBJECT, DataType.of(binding.data)):
            return binding.data
        return coerce(binding.data, binding.data_type)

    def materialise(self, resolve: Resolver) -> None:
        """Build the constructor and setter argument lists.

        Args:
            resolve: Called with a component name for every OBJECT argument
                that holds a name rather than a live object, and must return
                the object to pass.
        """
        self._constructor_args = [
            self._value_of(arg, resolve) for arg in self._method_args.get(CONSTRUCTOR, [])
        ]
        self._setter_args = {
            method_name: [self._value_of(arg, resolve) for arg in args]
            for method_name, args in self._method_args.items()
            if method_name != CONSTRUCTOR
        }

    def _value_of(self, arg: TypedArg, resolve: Resolver) -> Any:
        if arg.data_type is DataType.OBJECT:
            if arg.is_reference:
                logger.debug("Resolving component reference %r", arg.data)
                return resolve(arg.data)
            return arg.data
        if arg.is_placeholder:
            return self.get_param_value(arg.data)
        return coerce(arg.data, arg.data_type)

    @property
    def constructor_args(self) -> list[Any]:
        return self._constructor_args

    def set_constructor_args(self, args: Iterable[Any]) -> None:
        self._constructor_args = list(args)

    def has_constructor_args(self) -> bool:
        return len(self._constructor_args) > 0

    @property
    def setter_args(self) -> dict[str, list[Any]]:
        return self._setter_args

    def set_setter_args(self, args: Mapping[str, Iterable[Any]]) -> None:
        self._setter_args = {method_name: list(values) for method_name, values in args.items()}

    def has_setter_args(self) -> bool:
        return len(self._setter_args) > 0

    def clear_resolved(self) -> None:
        self._constructor_args = []
        self._setter_args = {}

    def reset(self) -> None:
        """Forget all method arguments. Bindings are kept."""
        self._method_args = {}
        self.clear_resolved()


def _strip_prefix(identifier: str) -> str:
    if identifier.startswith(PLACEHOLDER_PREFIX):
        return identifier[len(PLACEHOLDER_PREFIX):]
    return identifier
