import pytest

from corsgate.config import DEV_DEFAULT_ORIGINS, Settings, split_csv
from corsgate.cors.policy import PolicyConfig
from corsgate.cors.rules import RuleKind


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("APP_ENV", "CLIENT_ORIGINS", "PRODUCTION_DEFAULT_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_split_csv_trims_and_drops_blanks() -> None:
    assert split_csv(" a.com, ,*.b.com,,") == ["a.com", "*.b.com"]
    assert split_csv("") == []


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.APP_ENV == "development"
    assert s.is_production is False
    assert s.allowed_origins() == [DEV_DEFAULT_ORIGINS]
    assert s.CORS_PREFLIGHT_STATUS == 204


def test_app_env_and_log_level_are_case_insensitive() -> None:
    s = Settings(_env_file=None, APP_ENV="Production", LOG_LEVEL="warning")
    assert s.is_production is True
    assert s.LOG_LEVEL == "WARNING"


def test_origins_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("CLIENT_ORIGINS", "https://a.com, *.b.com")
    monkeypatch.setenv("APP_ENV", "production")
    s = Settings(_env_file=None)
    assert s.allowed_origins() == ["https://a.com", "*.b.com"]
    assert s.uses_production_defaults() is False


def test_production_falls_back_to_production_defaults() -> None:
    s = Settings(_env_file=None, APP_ENV="production", PRODUCTION_DEFAULT_ORIGINS="https://app.io,*.app.io")
    assert s.uses_production_defaults() is True
    assert s.allowed_origins() == ["https://app.io", "*.app.io"]

    still_dev_default = Settings(
        _env_file=None,
        APP_ENV="production",
        CLIENT_ORIGINS=DEV_DEFAULT_ORIGINS,
        PRODUCTION_DEFAULT_ORIGINS="https://app.io",
    )
    assert still_dev_default.allowed_origins() == ["https://app.io"]


def test_production_defaults_ignored_outside_production() -> None:
    s = Settings(_env_file=None, PRODUCTION_DEFAULT_ORIGINS="https://app.io")
    assert s.allowed_origins() == [DEV_DEFAULT_ORIGINS]


def test_policy_config_from_settings() -> None:
    s = Settings(_env_file=None, APP_ENV="production", CLIENT_ORIGINS="*, *.example.com ,")
    config = PolicyConfig.from_settings(s)
    assert config.is_production is True
    assert [r.kind for r in config.rules] == [RuleKind.UNIVERSAL, RuleKind.WILDCARD_SUFFIX]


def test_invalid_preflight_status_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, CORS_PREFLIGHT_STATUS=404)


def test_blank_client_origins_counts_as_unset_in_production(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("CLIENT_ORIGINS", "  ")
    monkeypatch.setenv("PRODUCTION_DEFAULT_ORIGINS", "https://app.io")
    s = Settings(_env_file=None)
    assert s.uses_production_defaults() is True
    assert s.allowed_origins() == ["https://app.io"]
