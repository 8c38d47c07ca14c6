import pytest

from tourguide.config.settings import get_logging_config, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_match_packaged_yaml(monkeypatch):
    for name in ("TOURGUIDE_CONFIG_PATH", "TOURGUIDE_PROVIDER_MODE", "TRIP_PRICER_API_KEY", "TOURGUIDE_TRACKING_ENABLED"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.proximity.reward_buffer_miles == 10
    assert settings.proximity.attraction_range_miles == 200
    assert settings.workers.pool_size == 100
    assert settings.nearby.top_k == 5
    assert settings.providers.mode == "simulated"
    assert settings.trip_pricer.api_key == "test-server-api-key"


def test_env_overrides_are_applied(monkeypatch):
    monkeypatch.setenv("TOURGUIDE_PROVIDER_MODE", "HTTP")
    monkeypatch.setenv("TOURGUIDE_GPS_BASE_URL", "http://gps.test")
    monkeypatch.setenv("TRIP_PRICER_API_KEY", "secret")
    monkeypatch.setenv("TOURGUIDE_INTERNAL_USER_COUNT", "7")
    monkeypatch.setenv("TOURGUIDE_TRACKING_ENABLED", "false")

    settings = get_settings()

    assert settings.providers.mode == "http"
    assert settings.providers.gps.base_url == "http://gps.test"
    assert settings.providers.rewards.base_url == "http://localhost:8082"
    assert settings.trip_pricer.api_key == "secret"
    assert settings.internal_users.count == 7
    assert settings.tracking.enabled is False


def test_external_config_file(monkeypatch, tmp_path):
    path = tmp_path / "tourguide.yaml"
    path.write_text(
        "proximity:\n"
        "  reward_buffer_miles: 3\n"
        "providers:\n"
        "  gps: {base_url: http://g}\n"
        "  rewards: {base_url: http://r}\n"
        "  pricer: {base_url: http://p}\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("TOURGUIDE_CONFIG_PATH", str(path))
    monkeypatch.delenv("TOURGUIDE_PROVIDER_MODE", raising=False)

    settings = get_settings()

    assert settings.proximity.reward_buffer_miles == 3
    assert settings.proximity.attraction_range_miles == 200
    assert settings.providers.pricer.base_url == "http://p"


def test_negative_reward_buffer_in_config_is_rejected(monkeypatch, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "proximity: {reward_buffer_miles: -1}\n"
        "providers:\n"
        "  gps: {base_url: http://g}\n"
        "  rewards: {base_url: http://r}\n"
        "  pricer: {base_url: http://p}\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("TOURGUIDE_CONFIG_PATH", str(path))

    with pytest.raises(ValueError):
        get_settings()


def test_logging_config_is_a_dictconfig():
    config = get_logging_config()
    assert config["version"] == 1
    assert "console" in config["handlers"]
