import pytest
from pydantic import ValidationError

from assembler.config import ComponentSpec, load_config, parse_config
from assembler.domain import CONSTRUCTOR
from assembler.errors import ConfigError


def test_parse_config_names_components():
    specs = parse_config(
        {
            "logger": {"class": "app.FileLogger"},
            "service": {
                "class": "app.Service",
                "instanceof": "app.ServiceInterface",
                "arguments": {"__construct": "logger", "setDebug": "true"},
            },
        }
    )

    assert specs["logger"].name == "logger"
    assert specs["logger"].class_name == "app.FileLogger"
    assert not specs["logger"].has_arguments
    assert specs["service"].instanceof == "app.ServiceInterface"
    assert specs["service"].arguments == {CONSTRUCTOR: "logger", "setDebug": "true"}


def test_constructor_alias_and_scalars_are_normalised():
    spec = ComponentSpec.model_validate({"class": "app.Service", "arguments": {"__init__": 42, "setTags": None}})

    assert spec.arguments == {CONSTRUCTOR: [42], "setTags": []}


def test_parse_config_accepts_specs():
    spec = ComponentSpec.model_validate({"class": "app.Service"})

    assert parse_config({"service": spec})["service"].name == "service"


def test_specs_are_immutable():
    spec = parse_config({"service": {"class": "app.Service"}})["service"]

    with pytest.raises(ValidationError):
        spec.class_name = "app.Other"


@pytest.mark.parametrize(
    "raw_spec",
    [
        {},
        {"class": ""},
        {"class": "app.Service", "constructor": "x"},
        {"class": "app.Service", "arguments": "x"},
        "app.Service",
    ],
)
def test_malformed_specs_raise(raw_spec):
    with pytest.raises(ConfigError, match="'service'"):
        parse_config({"service": raw_spec})


def test_load_config_from_yaml(tmp_path):
    path = tmp_path / "components.yaml"
    path.write_text(
        "logger:\n"
        "  class: app.FileLogger\n"
        "service:\n"
        "  class: app.Service\n"
        "  arguments:\n"
        "    __construct: logger, 3\n"
        "    setHosts: [a.local, b.local]\n"
    )

    specs = load_config(path)

    assert set(specs) == {"logger", "service"}
    assert specs["service"].arguments == {CONSTRUCTOR: "logger, 3", "setHosts": ["a.local", "b.local"]}


def test_load_config_section(tmp_path):
    path = tmp_path / "components.yaml"
    path.write_text("testing:\n  logger:\n    class: app.NullLogger\n")

    assert load_config(path, "testing")["logger"].class_name == "app.NullLogger"
    with pytest.raises(ConfigError, match="Section 'production' not found"):
        load_config(path, "production")


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "components.yaml"
    path.write_text("")

    assert load_config(path) == {}


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "components.yaml"
    path.write_text("logger: [unclosed\n")

    with pytest.raises(ConfigError, match="Cannot parse"):
        load_config(path)
