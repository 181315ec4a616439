from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True)

    service_name: str = Field(default="available-schedules", alias="SERVICE_NAME")
    env: str = Field(default="local", alias="ENV")
    version: str = Field(default="dev", alias="VERSION")

    # Fault injection: probability that a request on an instrumented route is
    # turned into a 500 after its handler ran.
    error_rate: float = Field(default=0.02, ge=0.0, le=1.0, alias="ERROR_RATE")
    error_seed: int | None = Field(default=None, alias="ERROR_SEED")

    histogram_buckets: list[float] = Field(
        default_factory=lambda: [0.05, 0.1, 0.2, 0.5, 1.0],
        alias="HISTOGRAM_BUCKETS",
    )
    extra_delay_ms: int = Field(default=0, ge=0, alias="EXTRA_DELAY_MS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
