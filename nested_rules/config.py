"""Engine configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCT_NAME = "nested-rules"
PRODUCT_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (NESTED_RULES_*)."""

    model_config = SettingsConfigDict(
        env_prefix="NESTED_RULES_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Reserved fallback key in rule trees
    default_key: str = "default"

    # Record a TraceEntry per level in Outcome.logs
    trace_enabled: bool = True

    # Let synchronous evaluation run awaitable actions with asyncio.run
    settle_awaitables: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
