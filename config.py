# =============================================================================
# Camera Vision Analyzer - Centralized Configuration
# =============================================================================
# Provides a single Config dataclass containing all tunable parameters for
# both the analyzer client and the relay server. Parameters are overridable
# via environment variables with the VISION_ prefix
# (e.g., VISION_REQUEST_TIMEOUT_SECONDS=15).
#
# The inference credential is NOT a config field: only the name of the
# environment variable holding it is configured, and the value is read at
# call time so rotated secrets take effect without a restart.
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _parse_origins(value: str) -> List[str]:
    """
    Split a comma-separated origin list into clean entries.

    Args:
        value: e.g. "https://a.example, https://b.example".

    Returns:
        List of non-empty, whitespace-stripped origins.
    """
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """
    Centralized configuration for the Camera Vision Analyzer system.

    All fields can be overridden via environment variables prefixed with VISION_.
    """

    # -- Relay server --
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    allowed_origins: List[str] = field(default_factory=list)

    # -- Upstream inference --
    provider: str = "gateway"  # gateway | openai | responses
    endpoint_url: str = ""  # empty = provider default
    model: str = ""  # empty = provider default
    api_key_env: str = "AI_GATEWAY_API_KEY"
    max_tokens: int = 700
    request_timeout_seconds: float = 30.0
    image_detail: str = "low"
    max_image_bytes: int = 8 * 1024 * 1024
    default_language: str = "es"

    # -- Capture --
    capture_max_dimension: int = 800
    capture_quality: float = 0.7
    camera_width_hint: int = 1280
    camera_height_hint: int = 720
    camera_index_environment: int = 0
    camera_index_user: int = 1

    # -- Speech --
    speech_rate: float = 0.95
    speech_pitch: float = 1.0
    speech_command: str = "espeak-ng"
    auto_speak: bool = False

    # -- Derived (computed post-init) --
    relay_url: str = field(init=False)

    def __post_init__(self):
        """Apply environment variable overrides and compute derived fields."""
        self._apply_env_overrides()
        self.relay_url = f"http://{self.server_host}:{self.server_port}"

    def _apply_env_overrides(self):
        """
        Override config fields from environment variables.

        Looks for VISION_<FIELD_NAME_UPPERCASE> environment variables and
        applies them with appropriate type conversion.
        """
        field_types = {
            "server_host": str,
            "server_port": int,
            "allowed_origins": _parse_origins,
            "provider": str,
            "endpoint_url": str,
            "model": str,
            "api_key_env": str,
            "max_tokens": int,
            "request_timeout_seconds": float,
            "image_detail": str,
            "max_image_bytes": int,
            "default_language": str,
            "capture_max_dimension": int,
            "capture_quality": float,
            "camera_width_hint": int,
            "camera_height_hint": int,
            "camera_index_environment": int,
            "camera_index_user": int,
            "speech_rate": float,
            "speech_pitch": float,
            "speech_command": str,
            "auto_speak": _parse_bool,
        }
        for field_name, field_type in field_types.items():
            env_key = f"VISION_{field_name.upper()}"
            env_value = os.environ.get(env_key)
            if env_value is not None:
                setattr(self, field_name, field_type(env_value))

    def read_api_key(self) -> Optional[str]:
        """
        Read the inference credential from the process environment.

        Called on every upstream request; the value is never cached.

        Returns:
            The credential, or None when the variable is unset or blank.
        """
        value = os.environ.get(self.api_key_env, "").strip()
        return value or None


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------
_config_instance: Optional[Config] = None


def get_config() -> Config:
    """
    Return the singleton Config instance, creating it on first call.

    Returns:
        Config: The global configuration object.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance
