import json
import logging

import pytest

from shapetrace.config import ShapetraceConfig
from shapetrace.errors import ConfigError
from shapetrace.geometry.raster_detector import DetectionConfig
from shapetrace.logging_setup import TRACE, parse_level


def test_defaults_without_sources(tmp_path):
    config = ShapetraceConfig.load(config_path=tmp_path / "missing.json", environ={})
    assert config.detection == DetectionConfig()
    assert config.verbose == "info"
    assert config.config_path == tmp_path / "missing.json"


def test_file_then_env_then_arguments(tmp_path):
    path = tmp_path / "default.json"
    path.write_text(json.dumps({"canny_low": 10, "canny_high": 90, "min_area": 50, "verbose": "warn"}))
    environ = {"SHAPETRACE_CANNY_HIGH": "120", "SHAPETRACE_L2_GRADIENT": "true", "OTHER": "x"}

    config = ShapetraceConfig.load(config_path=path, overrides={"min_area": 75, "aperture": None}, environ=environ)

    assert config.detection.canny_low == 10
    assert config.detection.canny_high == 120
    assert config.detection.l2_gradient is True
    assert config.detection.min_area == 75
    assert config.detection.aperture == 3
    assert config.verbose == "warn"


def test_config_path_from_environment(tmp_path):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"epsilon_factor": 0.02}))
    config = ShapetraceConfig.load(environ={"SHAPETRACE_CONFIG": str(path)})
    assert config.config_path == path
    assert config.detection.approx_epsilon_factor == 0.02


@pytest.mark.parametrize(
    "values",
    [
        {"aperture": 4},
        {"canny_low": 200, "canny_high": 100},
        {"min_area": -1},
        {"epsilon_factor": 0},
        {"aperture": "wide"},
    ],
)
def test_invalid_values_raise_config_error(tmp_path, values):
    with pytest.raises(ConfigError):
        ShapetraceConfig.load(config_path=tmp_path / "missing.json", overrides=values, environ={})


def test_unreadable_config_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        ShapetraceConfig.load(config_path=path, environ={})


def test_config_file_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        ShapetraceConfig.load(config_path=path, environ={})


def test_parse_level():
    assert parse_level("debug") == 10
    assert parse_level("WARN") == 30
    assert parse_level("trace") == TRACE
    assert parse_level("nonsense") == 20


def test_approx_epsilon_factor_alias(tmp_path):
    path = tmp_path / "default.json"
    path.write_text(json.dumps({"approx_epsilon_factor": 0.03}))
    config = ShapetraceConfig.load(config_path=path, environ={})
    assert config.detection.approx_epsilon_factor == 0.03


def test_unknown_keys_are_reported(tmp_path, caplog):
    path = tmp_path / "default.json"
    path.write_text(json.dumps({"min_aera": 500}))
    with caplog.at_level(logging.WARNING, logger="shapetrace.config"):
        config = ShapetraceConfig.load(config_path=path, environ={"SHAPETRACE_CANY_LOW": "5"})
    assert config.detection.min_area == 100
    assert "min_aera" in caplog.text
    assert "cany_low" in caplog.text
