import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Set

from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from .errors import ConfigError
from .geometry.raster_detector import DetectionConfig

load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = "SHAPETRACE_"


def default_config_path() -> Path:
    return Path.home() / ".config" / "shapetrace" / "default.json"


class SettingsLayer(BaseModel):
    """One source of settings (config file or environment). Unset keys are None."""

    canny_low: Optional[float] = None
    canny_high: Optional[float] = None
    aperture: Optional[int] = None
    l2_gradient: Optional[bool] = None
    min_area: Optional[float] = None
    epsilon_factor: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("epsilon_factor", "approx_epsilon_factor"),
    )
    verbose: Optional[str] = None

    @classmethod
    def accepted_keys(cls) -> Set[str]:
        keys = set(cls.model_fields)
        for field in cls.model_fields.values():
            if isinstance(field.validation_alias, AliasChoices):
                keys.update(c for c in field.validation_alias.choices if isinstance(c, str))
        return keys

    def values(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return _validate_layer(data, str(path))


def _read_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    raw = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX) and key != ENV_PREFIX + "CONFIG"
    }
    return _validate_layer(raw, "environment")


def _validate_layer(data: Dict[str, Any], source: str) -> Dict[str, Any]:
    accepted = SettingsLayer.accepted_keys()
    unknown = sorted(k for k in data if k not in accepted)
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", source, ", ".join(unknown))
    known = {k: v for k, v in data.items() if k in accepted}
    try:
        return SettingsLayer(**known).values()
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {source}: {exc}") from exc


class ShapetraceConfig:
    """
    Central configuration object.

    Values are layered: defaults, then the JSON config file, then
    SHAPETRACE_* environment variables, then explicit overrides.
    """

    def __init__(
        self,
        detection: Optional[DetectionConfig] = None,
        verbose: str = "info",
        config_path: Optional[Path] = None,
    ):
        self.detection = (detection or DetectionConfig()).validate()
        self.verbose = verbose
        self.config_path = config_path or default_config_path()

    def __repr__(self) -> str:
        return (
            f"ShapetraceConfig(detection={self.detection!r}, verbose={self.verbose!r}, "
            f"config_path={str(self.config_path)!r})"
        )

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ShapetraceConfig":
        environ = os.environ if environ is None else environ
        if config_path is None:
            env_path = environ.get(ENV_PREFIX + "CONFIG")
            config_path = Path(env_path) if env_path else default_config_path()
        config_path = Path(config_path).expanduser()

        merged: Dict[str, Any] = {}
        merged.update(_read_config_file(config_path))
        merged.update(_read_environment(environ))
        merged.update(_validate_layer(
            {k: v for k, v in (overrides or {}).items() if v is not None},
            "arguments",
        ))

        defaults = DetectionConfig()
        detection = DetectionConfig(
            canny_low=merged.get("canny_low", defaults.canny_low),
            canny_high=merged.get("canny_high", defaults.canny_high),
            aperture=merged.get("aperture", defaults.aperture),
            l2_gradient=merged.get("l2_gradient", defaults.l2_gradient),
            min_area=merged.get("min_area", defaults.min_area),
            approx_epsilon_factor=merged.get("epsilon_factor", defaults.approx_epsilon_factor),
        )
        return cls(
            detection=detection,
            verbose=merged.get("verbose", "info"),
            config_path=config_path,
        )
