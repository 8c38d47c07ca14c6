import uuid

import httpx
import pytest

from tourguide.config.settings import get_settings
from tourguide.domain.errors import ProviderUnavailable
from tourguide.providers.http_clients import RewardsClient, build_http_clients


def _clients(max_attempts: int = 2):
    settings = get_settings()
    retry = settings.providers.retry.model_copy(
        update={"max_attempts": max_attempts, "base_delay_seconds": 0.0, "max_delay_seconds": 0.0}
    )
    providers = settings.providers.model_copy(update={"retry": retry})
    return build_http_clients(settings.model_copy(update={"providers": providers}))


def _status_error(url: str, status: int, headers: dict | None = None) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(status, request=request, headers=headers or {})
    return httpx.HTTPStatusError(str(status), request=request, response=response)


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    sleeps: list[float] = []
    monkeypatch.setattr("tourguide.providers.http_clients.time.sleep", lambda s: sleeps.append(s))
    return sleeps


def test_gps_location_retries_on_429_then_parses(monkeypatch, _no_sleep):
    user_id = uuid.uuid4()
    calls: list[str] = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15, client=None):  # noqa: ARG001
        calls.append(url)
        if len(calls) == 1:
            raise _status_error(url, 429, {"Retry-After": "1"})
        return {
            "user_id": str(user_id),
            "location": {"latitude": 33.817595, "longitude": -117.922008},
            "time_visited": "2026-01-05T10:00:00Z",
        }

    monkeypatch.setattr("tourguide.providers.http_clients.get_json", fake_get_json)
    gps, _, _ = _clients()

    visited = gps.get_user_location(user_id)

    assert visited.user_id == user_id
    assert visited.location.latitude == 33.817595
    assert calls == [f"http://localhost:8081/users/{user_id}/location"] * 2
    assert _no_sleep == [1.0]


def test_rewards_client_reads_points_and_passes_user_id(monkeypatch):
    seen = {}

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15, client=None):  # noqa: ARG001
        seen["url"] = url
        seen["params"] = params
        return {"points": 321}

    monkeypatch.setattr("tourguide.providers.http_clients.get_json", fake_get_json)
    _, rewards, _ = _clients()
    attraction_id, user_id = uuid.uuid4(), uuid.uuid4()

    assert rewards.get_attraction_reward_points(attraction_id, user_id) == 321
    assert seen["url"].endswith(f"/attractions/{attraction_id}/points")
    assert seen["params"] == {"user_id": str(user_id)}


def test_pricer_sends_api_key_header(monkeypatch):
    seen = {}
    trip_id = uuid.uuid4()

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15, client=None):  # noqa: ARG001
        seen["headers"] = headers
        seen["params"] = params
        return [{"name": "Sunny Days", "price": 420.5, "trip_id": str(trip_id)}]

    monkeypatch.setattr("tourguide.providers.http_clients.get_json", fake_get_json)
    _, _, pricer = _clients()

    offers = pricer.get_price("k3y", uuid.uuid4(), 2, 1, 3, 150)

    assert offers[0].trip_id == trip_id
    assert seen["headers"] == {"X-Api-Key": "k3y"}
    assert seen["params"]["reward_points"] == 150


def test_non_retryable_status_raises_provider_unavailable(monkeypatch):
    calls = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15, client=None):  # noqa: ARG001
        calls.append(url)
        raise _status_error(url, 404)

    monkeypatch.setattr("tourguide.providers.http_clients.get_json", fake_get_json)
    gps, _, _ = _clients()

    with pytest.raises(ProviderUnavailable) as excinfo:
        gps.get_attractions()
    assert excinfo.value.provider == "gps"
    assert len(calls) == 1


def test_transport_errors_exhaust_retries(monkeypatch, _no_sleep):
    calls = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15, client=None):  # noqa: ARG001
        calls.append(url)
        raise httpx.ConnectError("refused", request=httpx.Request("GET", url))

    monkeypatch.setattr("tourguide.providers.http_clients.get_json", fake_get_json)
    _, rewards, _ = _clients(max_attempts=2)

    with pytest.raises(ProviderUnavailable):
        rewards.get_attraction_reward_points(uuid.uuid4(), uuid.uuid4())
    assert len(calls) == 3
    assert len(_no_sleep) == 2


def test_malformed_points_payload(monkeypatch):
    monkeypatch.setattr(
        "tourguide.providers.http_clients.get_json",
        lambda *_args, **_kwargs: {"points": "lots"},
    )
    _, rewards, _ = _clients()

    with pytest.raises(ProviderUnavailable):
        rewards.get_attraction_reward_points(uuid.uuid4(), uuid.uuid4())


def test_undecodable_body_raises_provider_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        # Labelled gzip but sent as plain bytes.
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b'{"points": 5}')

    retry = get_settings().providers.retry
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        rewards = RewardsClient("http://rewards.test", retry=retry, timeout_seconds=5, client=client)
        with pytest.raises(ProviderUnavailable) as excinfo:
            rewards.get_attraction_reward_points(uuid.uuid4(), uuid.uuid4())

    assert excinfo.value.provider == "rewards"
    assert "DecodingError" in str(excinfo.value)
