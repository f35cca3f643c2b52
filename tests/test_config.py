import pytest
from pydantic import ValidationError

from arrowslide.config import Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.GENERATOR_MAX_ATTEMPTS == 50
    assert settings.AXIS_IMBALANCE_LIMIT == 3
    assert settings.generate_rate_limit == "30/minute"
    assert not settings.is_production


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("AXIS_IMBALANCE_LIMIT", "0")

    settings = Settings()
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
    assert settings.AXIS_IMBALANCE_LIMIT == 0


@pytest.mark.parametrize("field, value", [
    ("LOG_LEVEL", "LOUD"),
    ("GENERATOR_MAX_ATTEMPTS", 0),
    ("GENERATOR_SUPPLEMENTAL_PASSES", -1),
    ("LEVEL_TILE_RATIO", 0.9),
    ("ENVIRONMENT", "staging"),
])
def test_rejects_bad_values(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
