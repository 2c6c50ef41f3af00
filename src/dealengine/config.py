from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Projection horizon (years)
    PROJECTION_YEARS: int = Field(default=10, ge=1)

    # IRR solver (Newton-Raphson)
    IRR_GUESS: float = Field(default=0.10)
    IRR_MAX_ITERATIONS: int = Field(default=100, gt=0)
    IRR_TOLERANCE: float = Field(default=1e-6, gt=0)
    IRR_MIN_DERIVATIVE: float = Field(default=1e-10, gt=0)

    # Reports
    OUTPUT_DIR: str = Field(default="outputs")

    # -----------------------------
    # OpenAI assessment
    # -----------------------------
    OPENAI_API_KEY: str | None = Field(default=None)
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")

    model_config = SettingsConfigDict(
        env_prefix="DEALENGINE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


config = AppConfig()
