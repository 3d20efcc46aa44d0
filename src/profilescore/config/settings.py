# src/profilescore/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/profilescore/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `PROFILESCORE_LOG_LEVEL`, `PROFILESCORE_LOG_REPORT_URL`)
- an external YAML file via `PROFILESCORE_CONFIG_PATH`

Design rule:
- Tuning knobs (time factors, physical rates) live in YAML, not hard-coded in business logic.
  The defaults below mirror `defaults.yaml` so a scorer can also be built without any config file.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Mapping, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

CO2_PER_GALLON = 8.887  # Kilograms of CO2 burned per gallon of gasoline
CYCLING_MET = 8.0
WALKING_MET = 3.8
METERS_TO_MILES = 0.000621371
SECONDS_TO_HOURS = 1 / 60 / 60

# Kilograms of CO2 per passenger trip (annual agency emissions / annual rides).
CO2_PER_TRANSIT_TRIP = 239000000 / 200000000

# A factor converts a quantity into minutes: either a per-unit weight or a function.
Factor = Union[float, Callable[[float], float]]


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `profilescore.config`."""
    text = resources.files("profilescore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class TimeFactors(BaseModel):
    """Minutes-equivalent weight for each cost dimension.

    Field names follow the camelCase keys used by the profile payloads so that
    `{"carParking": 10}` style overrides can be validated directly.
    """

    model_config = ConfigDict(frozen=True)

    bikeParking: Factor = 1
    calories: Factor = -0.01
    carParking: Factor = 5
    co2: Factor = 0.5
    cost: Factor = 5
    transfer: Factor = 5


class Rates(BaseModel):
    """Physical and economic constants used by the tally stage."""

    model_config = ConfigDict(frozen=True)

    bikeSpeed: float = Field(4.1, gt=0)  # m/s
    carParkingCost: float = 10
    co2PerTransitTrip: float = CO2_PER_TRANSIT_TRIP
    mileageRate: float = 0.56  # IRS reimbursement rate per mile
    mpg: float = Field(21.4, gt=0)
    walkSpeed: float = Field(1.4, gt=0)  # m/s
    weight: float = Field(75, ge=0)  # kg


class AppSettings(BaseModel):
    name: str = "profilescore"
    log_level: str = "INFO"


class LogSettings(BaseModel):
    report_url: str | None = None
    timeout_seconds: float = 5


class ScoringSettings(BaseModel):
    factors: TimeFactors = Field(default_factory=TimeFactors)
    rates: Rates = Field(default_factory=Rates)
    # When both `bicycle` and `bicycle_rent` are present, bike calories are credited once per mode.
    count_bike_calories_per_mode: bool = True


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


def merge_time_factors(base: TimeFactors, overrides: Mapping[str, Any] | None) -> TimeFactors:
    """Shallow key-by-key merge of factor overrides onto `base`."""
    if not overrides:
        return base
    return TimeFactors.model_validate({**base.model_dump(), **dict(overrides)})


def merge_rates(base: Rates, overrides: Mapping[str, Any] | None) -> Rates:
    """Shallow key-by-key merge of rate overrides onto `base`."""
    if not overrides:
        return base
    return Rates.model_validate({**base.model_dump(), **dict(overrides)})


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    data = dict(data)
    log_level = os.getenv("PROFILESCORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    report_url = os.getenv("PROFILESCORE_LOG_REPORT_URL")
    if report_url:
        data.setdefault("log", {})["report_url"] = report_url

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    config_path = os.getenv("PROFILESCORE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
