"""Centralized configuration using Pydantic Settings.

Single source of truth for data locations, record column names, search
limits and logging. Every setting can be overridden via environment
variables:
- CF_DATA_DATA_DIR=/path/to/data
- CF_SEARCH_MAX_DRIVERS=2
- CF_COLUMNS_CARRIER=Carrier
- CF_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataConfig(BaseSettings):
    """Input data locations.

    Environment variables prefixed with CF_DATA_.
    """

    model_config = SettingsConfigDict(env_prefix="CF_DATA_")

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "data"
    )
    drivers_file: str = "drivers.csv"
    cities_file: str = "cities.csv"
    line_paths_file: str = "line_paths.csv"

    @property
    def drivers_path(self) -> Path:
        """Full path to the carriers CSV file."""
        return self.data_dir / self.drivers_file

    @property
    def cities_path(self) -> Path:
        """Full path to the known-cities CSV file."""
        return self.data_dir / self.cities_file

    @property
    def line_paths_path(self) -> Path:
        """Full path to the supplementary route chains CSV file."""
        return self.data_dir / self.line_paths_file


class ColumnsConfig(BaseSettings):
    """Field names of a carrier record.

    Environment variables prefixed with CF_COLUMNS_.
    """

    model_config = SettingsConfigDict(env_prefix="CF_COLUMNS_")

    carrier: str = "Перевозчик"
    history: str = "Маршруты из истории"
    chains: str = "Города (детализация)"
    branches: str = "Ветки (может обслужить)"
    corridors: str = "Коридоры (может обслужить)"


class SearchConfig(BaseSettings):
    """Search limits and composite planning budget.

    Environment variables prefixed with CF_SEARCH_.
    """

    model_config = SettingsConfigDict(env_prefix="CF_SEARCH_")

    max_drivers: int = Field(default=3, ge=1)
    k_paths: int = Field(default=5, ge=1)
    k_paths_alternatives: int = Field(default=8, ge=1)
    alternatives_limit: int = Field(default=3, ge=0)
    max_chain_expansions: int = Field(default=64, ge=1)
    suggestion_limit: int = Field(default=10, ge=0)
    suggestion_score_cutoff: float = Field(default=70.0, ge=0, le=100)


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with CF_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="CF_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.search.max_drivers)
        print(config.data.drivers_path)

    Environment variables prefixed with CF_.
    """

    model_config = SettingsConfigDict(env_prefix="CF_")

    data: DataConfig = Field(default_factory=DataConfig)
    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
