from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _running_in_docker() -> bool:
    """Best-effort check for container execution.

    Used only to pick sensible defaults. Environment variables always win.
    """
    return Path("/.dockerenv").exists() or os.environ.get("RUNNING_IN_DOCKER") == "1"


def _default_out_dir() -> str:
    if _running_in_docker():
        return "/app/out"
    return str(Path(__file__).resolve().parents[1] / "out")


class Settings(BaseSettings):
    """Validated settings (env-driven), keeping provider keys and throttle floors out of code."""

    model_config = SettingsConfigDict(
        # Support both "repo root/.env" and "backend/.env" (local dev)
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ors_base_url: str = Field(default="https://api.openrouteservice.org", alias="ORS_BASE_URL")
    ors_api_key: str = Field(default="", alias="ORS_API_KEY")
    ors_country: str = Field(default="PH", alias="ORS_COUNTRY")
    ors_search_size: int = Field(default=5, ge=1, le=40, alias="ORS_SEARCH_SIZE")
    ors_directions_profile: str = Field(default="driving-car", alias="ORS_DIRECTIONS_PROFILE")
    ors_request_timeout_s: float = Field(default=10.0, ge=0.5, le=120.0, alias="ORS_REQUEST_TIMEOUT_S")
    ors_connect_timeout_s: float = Field(default=5.0, ge=0.5, le=60.0, alias="ORS_CONNECT_TIMEOUT_S")
    ors_max_attempts: int = Field(default=1, ge=1, le=5, alias="ORS_MAX_ATTEMPTS")

    # Call-to-call spacing for the shared outbound limiter. Reverse lookups are
    # driven by map panning and get the tighter floor.
    gateway_min_interval_ms: int = Field(default=1000, ge=0, alias="GATEWAY_MIN_INTERVAL_MS")
    gateway_reverse_min_interval_ms: int = Field(default=500, ge=0, alias="GATEWAY_REVERSE_MIN_INTERVAL_MS")

    # Quiet period before a debounced search / map-centre lookup fires.
    debounce_quiet_period_s: float = Field(default=5.0, ge=0.0, alias="DEBOUNCE_QUIET_PERIOD_S")

    fare_base: float = Field(default=13.0, ge=0.0, alias="FARE_BASE")
    fare_per_km: float = Field(default=2.0, ge=0.0, alias="FARE_PER_KM")
    fare_free_km: float = Field(default=4.0, ge=0.0, alias="FARE_FREE_KM")

    out_dir: str = Field(default_factory=_default_out_dir, alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


settings = Settings()
