"""Configuration container for the ComfyUI Cloud client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar

DEFAULT_BASE_URL = "https://cloud.comfy.org"
API_KEY_ENV = "COMFY_UI_API_KEY"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(slots=True)
class ClientConfig:
    """Connection and polling settings applied to every run."""

    env_prefix: ClassVar[str] = "COMFY_"

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = 5.0
    max_wait: float = 600.0
    request_timeout: float = 60.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create a config object populated from environment variables."""
        prefix = cls.env_prefix
        api_key = (os.getenv(API_KEY_ENV) or "").strip() or None
        return cls(
            api_key=api_key,
            base_url=os.getenv(f"{prefix}BASE_URL", "").strip() or DEFAULT_BASE_URL,
            poll_interval=_float_env(f"{prefix}POLL_INTERVAL", 5.0),
            max_wait=_float_env(f"{prefix}MAX_WAIT", 600.0),
            request_timeout=_float_env(f"{prefix}REQUEST_TIMEOUT", 60.0),
            log_level=os.getenv(f"{prefix}LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
