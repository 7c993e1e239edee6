"""Backpack.tf snapshot API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .http_resilience import RateLimit, ResilienceConfig

BACKPACKTF_BASE_URL = "https://backpack.tf/api/"
BACKPACKTF_TIMEOUT_SECONDS = 30.0
TF2_APPID = 440


@dataclass(frozen=True)
class BackpackTfConfig:
    """Holds backpack.tf API configuration values."""

    api_key: str
    resilience: ResilienceConfig
    appid: int = TF2_APPID


def get_backpacktf_config(
    api_key: str,
    *,
    resilience: ResilienceConfig | None = None,
) -> BackpackTfConfig:
    return BackpackTfConfig(
        api_key=api_key,
        resilience=resilience
        or ResilienceConfig(
            name="backpacktf",
            base_url=BACKPACKTF_BASE_URL,
            timeout_seconds=BACKPACKTF_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        ),
    )
