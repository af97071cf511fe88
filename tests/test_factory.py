from abc import ABC, abstractmethod
from collections import OrderedDict

import pytest

from assembler.config import ComponentSpec
from assembler.domain import CONSTRUCTOR, DataType
from assembler.errors import (
    MethodNotFoundError,
    NotInstanceOfError,
    TypeNotDefinedError,
    TypeNotFoundError,
)
from assembler.factory import Factory
from assembler.loader import TypeLoader
from assembler.parameter import Parameter


class Connection(ABC):
    @abstractmethod
    def connect(self):
        pass


class MySqlConnection(Connection):
    def __init__(self, host="127.0.0.1", port=3306):
        self.host = host
        self.port = port
        self.calls = []

    def connect(self):
        return f"{self.host}:{self.port}"

    def setCharset(self, charset):
        self.calls.append(("setCharset", charset))

    def setOptions(self, timeout, retries):
        self.calls.append(("setOptions", timeout, retries))


class Clock:
    pass


@pytest.fixture
def loader():
    loader = TypeLoader()
    loader.register(MySqlConnection)
    loader.register(Connection)
    loader.register(Clock)
    return loader


@pytest.fixture
def factory(loader):
    return Factory(loader)


def spec(class_name, **kwargs):
    return ComponentSpec.model_validate({"class": class_name, **kwargs})


def materialised(arguments):
    parameter = Parameter()
    parameter.set_parameters_from_config(arguments)
    parameter.materialise(lambda name: pytest.fail(f"Unexpected reference to {name}"))
    return parameter


def test_loading_is_idempotent(factory):
    assert not factory.is_class_defined("MySqlConnection")
    assert factory.load_class("MySqlConnection", "db") is True
    assert factory.is_class_defined("MySqlConnection")
    assert factory.load_class("MySqlConnection", "db") is False
    assert factory.is_class_defined("MySqlConnection")
    assert factory.classes_defined == {"db": "MySqlConnection"}


def test_component_name_defaults_to_type_name(factory):
    factory.load_class("Clock")

    assert factory.classes_defined == {"Clock": "Clock"}
    assert factory.get_class("Clock") is Clock


def test_unknown_type_raises(factory):
    with pytest.raises(TypeNotFoundError, match="'Missing'"):
        factory.load_class("Missing")
    assert not factory.is_class_defined("Missing")


def test_create_requires_loaded_type(factory):
    with pytest.raises(TypeNotDefinedError, match="Class not defined: Clock"):
        factory.create(Parameter(), spec("Clock"))


def test_create_without_arguments(factory):
    factory.load_class("MySqlConnection")
    connection = factory.create(Parameter(), spec("MySqlConnection"))

    assert connection.connect() == "127.0.0.1:3306"


def test_create_with_constructor_and_setter_arguments(factory):
    factory.load_class("MySqlConnection")
    parameter = materialised(
        {
            CONSTRUCTOR: "db.local, 3307",
            "setOptions": "30, 3",
            "setCharset": "utf8",
        }
    )

    connection = factory.create(parameter, spec("MySqlConnection"))

    assert connection.connect() == "db.local:3307"
    assert connection.calls == [("setOptions", 30, 3), ("setCharset", "utf8")]


def test_create_clears_resolved_arguments(factory):
    factory.load_class("MySqlConnection")
    parameter = materialised({CONSTRUCTOR: "db.local", "setCharset": "utf8"})

    factory.create(parameter, spec("MySqlConnection"))

    assert not parameter.has_constructor_args()
    assert not parameter.has_setter_args()


def test_create_checks_declared_supertype(factory):
    factory.load_class("MySqlConnection")
    factory.load_class("Clock")

    connection = factory.create(Parameter(), spec("MySqlConnection", instanceof="Connection"))
    assert isinstance(connection, Connection)

    with pytest.raises(NotInstanceOfError, match="Clock is not an instance of Connection"):
        factory.create(Parameter(), spec("Clock", instanceof="Connection"))


def test_create_rejects_missing_setter(factory):
    factory.load_class("MySqlConnection")
    parameter = Parameter()
    parameter.set_parameter("utf8", "setEncoding", DataType.STRING)
    parameter.materialise(lambda name: None)

    with pytest.raises(MethodNotFoundError, match=r"setEncoding\(\) does not exist in MySqlConnection"):
        factory.create(parameter, spec("MySqlConnection"))
    assert not parameter.has_setter_args()


def test_create_rejects_non_callable_attribute(factory):
    factory.load_class("MySqlConnection")
    parameter = Parameter()
    parameter.set_setter_args({"host": ["db.local"]})

    with pytest.raises(MethodNotFoundError):
        factory.create(parameter, spec("MySqlConnection"))


def test_loader_resolves_dotted_paths():
    loader = TypeLoader()

    assert loader.resolve("collections.OrderedDict") is OrderedDict
    assert loader.resolve("collections:OrderedDict") is OrderedDict
    assert loader.resolve("dict") is dict


def test_loader_rejects_non_classes():
    loader = TypeLoader()

    with pytest.raises(TypeNotFoundError):
        loader.resolve("collections.namedtuple")
    with pytest.raises(TypeNotFoundError):
        loader.resolve("no_such_module.Thing")
    with pytest.raises(TypeNotFoundError):
        loader.resolve("len")


def test_loader_registration_as_decorator():
    loader = TypeLoader()

    @loader.register()
    class Mailer:
        pass

    @loader.register(name="app.Queue")
    class Queue:
        pass

    assert loader.resolve("Mailer") is Mailer
    assert loader.resolve("app.Queue") is Queue
    assert loader.is_registered("Mailer")


def test_loader_registration_rejects_non_class():
    with pytest.raises(TypeError, match="is not a class"):
        TypeLoader().register(len)
