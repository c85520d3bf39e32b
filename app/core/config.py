from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    enable_openapi_docs: bool = Field(default=True, alias="ENABLE_OPENAPI_DOCS")

    internal_api_token: str = Field(
        default="dev_internal_token_change_me",
        alias="INTERNAL_API_TOKEN",
    )
    internal_api_allowlist: str = Field(
        default="127.0.0.1/32,::1/128",
        alias="INTERNAL_API_ALLOWLIST",
    )
    internal_api_trusted_proxies: str = Field(default="", alias="INTERNAL_API_TRUSTED_PROXIES")

    database_url: str = Field(alias="DATABASE_URL")

    accounts_api_url: str = Field(alias="ACCOUNTS_API_URL")
    product_tokens_api_url: str = Field(alias="PRODUCT_TOKENS_API_URL")
    upstream_http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        alias="UPSTREAM_HTTP_TIMEOUT_SECONDS",
    )
    hive_detail_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        alias="HIVE_DETAIL_TIMEOUT_SECONDS",
    )

    beacon_point_rules_json: str = Field(default="", alias="BEACON_POINT_RULES_JSON")
    hive_tier_table_json: str = Field(default="", alias="HIVE_TIER_TABLE_JSON")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
