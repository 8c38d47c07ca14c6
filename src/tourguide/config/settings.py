# src/tourguide/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/tourguide/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `TOURGUIDE_PROVIDER_MODE`, `TRIP_PRICER_API_KEY`)
- an external YAML file via `TOURGUIDE_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from tourguide.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `tourguide.config`."""
    text = resources.files("tourguide.config").joinpath(filename).read_text(encoding="utf-8")
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


class AppSettings(BaseModel):
    name: str = "TourGuide"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class ProximitySettings(BaseModel):
    reward_buffer_miles: float = Field(10, ge=0)
    attraction_range_miles: float = Field(200, ge=0)


class WorkerSettings(BaseModel):
    pool_size: int = Field(100, ge=1)


class TrackingSettings(BaseModel):
    enabled: bool = True
    interval_seconds: float = Field(300, gt=0)


class NearbySettings(BaseModel):
    top_k: int = Field(5, ge=1)


class CatalogSettings(BaseModel):
    # When unset, the catalog is fetched once from the GPS provider at startup.
    path: str | None = None


class InternalUsersSettings(BaseModel):
    enabled: bool = True
    count: int = Field(100, ge=0)
    history_size: int = Field(3, ge=0)
    history_days: int = Field(30, ge=1)


class RetrySettings(BaseModel):
    max_attempts: int = Field(2, ge=0)
    base_delay_seconds: float = Field(0.5, ge=0)
    max_delay_seconds: float = Field(5.0, ge=0)


class ServiceEndpointSettings(BaseModel):
    base_url: str


class SimulatedProviderSettings(BaseModel):
    latency_seconds: float = Field(0.0, ge=0)
    min_reward_points: int = Field(1, ge=0)
    max_reward_points: int = Field(1000, ge=0)
    offers: int = Field(5, ge=1)
    seed: int | None = None


class ProvidersSettings(BaseModel):
    mode: Literal["simulated", "http"] = "simulated"
    gps: ServiceEndpointSettings
    rewards: ServiceEndpointSettings
    pricer: ServiceEndpointSettings
    retry: RetrySettings = Field(default_factory=RetrySettings)
    simulated: SimulatedProviderSettings = Field(default_factory=SimulatedProviderSettings)


class TripPricerSettings(BaseModel):
    api_key: str = "test-server-api-key"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    proximity: ProximitySettings = Field(default_factory=ProximitySettings)
    workers: WorkerSettings = Field(default_factory=WorkerSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    nearby: NearbySettings = Field(default_factory=NearbySettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    internal_users: InternalUsersSettings = Field(default_factory=InternalUsersSettings)
    providers: ProvidersSettings
    trip_pricer: TripPricerSettings = Field(default_factory=TripPricerSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("TOURGUIDE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    mode = os.getenv("TOURGUIDE_PROVIDER_MODE")
    if mode:
        data.setdefault("providers", {})["mode"] = mode.strip().lower()

    for service in ("gps", "rewards", "pricer"):
        base_url = os.getenv(f"TOURGUIDE_{service.upper()}_BASE_URL")
        if base_url:
            data.setdefault("providers", {}).setdefault(service, {})["base_url"] = base_url

    api_key = os.getenv("TRIP_PRICER_API_KEY")
    if api_key:
        data.setdefault("trip_pricer", {})["api_key"] = api_key

    user_count = os.getenv("TOURGUIDE_INTERNAL_USER_COUNT")
    if user_count:
        data.setdefault("internal_users", {})["count"] = int(user_count)

    tracking = os.getenv("TOURGUIDE_TRACKING_ENABLED")
    if tracking:
        data.setdefault("tracking", {})["enabled"] = tracking.strip().lower() in {"1", "true", "yes", "y"}

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("TOURGUIDE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
