"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    contribgrid_env: str = "development"
    contribgrid_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Defaults when a request or command line does not name them
    default_theme: str = "blue"
    default_years: list[int] = [2022, 2023]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
