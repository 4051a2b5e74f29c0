"""
Grapher configuration.

Centralized configuration management with environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class GrapherSettings(BaseSettings):
    """Grapher settings"""

    model_config = SettingsConfigDict(
        env_prefix="GRAPHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Sample range
    X_MIN: float = -10
    X_MAX: float = 10
    DENSITY: int = 10  # samples per unit of x

    # Fallback colors
    FUNC_COLOR: str = "blue"
    POINT_COLOR: str = "yellow"
    POINT_SIZE: int = 3

    # Engine
    USE_BASE_TEN_LOG: bool = False
    ZERO_TOLERANCE: float = 1e-12
    MAX_DEPTH: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> GrapherSettings:
    """Get cached settings instance"""
    return GrapherSettings()
