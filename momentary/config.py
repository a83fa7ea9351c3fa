"""Engine Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - default_max_lifetime_ms is positive; ManifestOptions can only override it per task
    - preferences_path is the ONE path a task reads; there is no per-call override
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - MOMENTARY_ prefix: the engine is embedded in host processes with their own env
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from momentary.core.domain_types import DEFAULT_MAX_LIFETIME_MS, PREFERENCES_PATH


class Settings(BaseSettings):
    """Engine settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="MOMENTARY_", case_sensitive=False,
    )

    # Lifecycle
    default_max_lifetime_ms: int = Field(DEFAULT_MAX_LIFETIME_MS, gt=0)

    # State access — fixed, operation-namespaced path
    preferences_path: str = PREFERENCES_PATH

    @field_validator("preferences_path")
    @classmethod
    def require_absolute_path(cls, v: str) -> str:
        if not v.startswith("/") or len(v) < 2:
            raise ValueError("preferences_path must be an absolute path")
        return v

    # Cleanup
    reclamation_hint_enabled: bool = True

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
