from pathlib import Path
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_PATH, env_file_encoding="utf-8", extra="ignore")

    # App
    env: str = "dev"
    service_name: str = "cms-admin-console"

    # CMS backend
    backend: Literal["http", "memory"] = "http"
    cms_base_url: str = "http://localhost:5000"
    cms_api_token: SecretStr = SecretStr("")
    http_timeout_seconds: float = 20.0

    # Relation / media pickers (single page, no pagination)
    relation_page_size: int = 100

    # Upload dialog
    upload_progress_tick_seconds: float = 0.3
    upload_progress_step: int = 10
    upload_progress_cap: int = 90
    upload_auto_close_seconds: float = 1.0

    # Telemetry
    telemetry_enabled: bool = False
    otlp_endpoint: str = "http://localhost:4318"  # Jaeger OTLP HTTP


settings = Settings()
