from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "web3-job-board-api"
    environment: str = "dev"
    api_prefix: str = ""
    cors_allow_origins: str = "*"
    record_store_backend: Literal["postgres", "memory"] = "postgres"
    database_url: str | None = None
    database_pool_min_size: int = 1
    database_pool_max_size: int = 10
    record_table: str = "kv_store"
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None
    auth_timeout_seconds: float = 5.0
    storage_timeout_seconds: float = 15.0
    company_logo_bucket: str = "company-logos"
    user_avatar_bucket: str = "user-avatars"
    company_logo_max_bytes: int = 100 * 1024
    user_avatar_max_bytes: int = 5 * 1024 * 1024
    bootstrap_admin_emails: str | None = None
    otel_enabled: bool = True
    otel_service_name: str = "web3-job-board-api"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: str | None = None
    otel_trace_sample_ratio: float = 1.0
    otel_log_correlation: bool = True

    model_config = SettingsConfigDict(env_prefix="JB_", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [chunk.strip() for chunk in self.cors_allow_origins.split(",") if chunk.strip()]

    @property
    def bootstrap_admins(self) -> list[str]:
        if not self.bootstrap_admin_emails:
            return []
        return [chunk.strip() for chunk in self.bootstrap_admin_emails.split(",") if chunk.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
