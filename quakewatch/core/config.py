from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = Field(default="QuakeWatch Sensor Anomaly Service")
    app_env: str = Field(default="dev")
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000)
    log_level: str = Field(default="INFO")

    default_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    n_trees: int = Field(default=100, ge=1)
    random_seed: int = Field(default=42, ge=0)
    max_samples: int = Field(default=256, ge=2)
    min_rows: int = Field(default=2, ge=2)
    pad_small_batches: bool = Field(default=True)
    n_jobs: int = Field(default=1)
    score_cache_size: int = Field(default=16, ge=0)

    metrics_enabled: bool = Field(default=True)
    otel_enabled: bool = Field(default=False)
    otel_exporter_otlp_endpoint: str = Field(default="")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
