from __future__ import annotations

from app.core.config import Settings


def test_settings_read_hive_options_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@localhost/hive_test")
    monkeypatch.setenv("ACCOUNTS_API_URL", "http://authsvc.local")
    monkeypatch.setenv("PRODUCT_TOKENS_API_URL", "http://web3svc.local")
    monkeypatch.setenv("HIVE_DETAIL_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("BEACON_POINT_RULES_JSON", '{"bythen-pod": "10"}')

    settings = Settings(_env_file=None)

    assert settings.accounts_api_url == "http://authsvc.local"
    assert settings.product_tokens_api_url == "http://web3svc.local"
    assert settings.hive_detail_timeout_seconds == 2.5
    assert settings.beacon_point_rules_json == '{"bythen-pod": "10"}'
    assert settings.hive_tier_table_json == ""
    assert settings.enable_openapi_docs is True
