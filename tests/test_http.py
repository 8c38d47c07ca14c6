import httpx
import pytest

from tourguide.core.http import DEFAULT_USER_AGENT, get_json


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), headers={"User-Agent": DEFAULT_USER_AGENT})


def test_get_json_uses_given_client_and_merges_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers["user-agent"]
        seen["key"] = request.headers.get("x-api-key")
        seen["query"] = dict(request.url.params)
        return httpx.Response(200, json={"points": 5})

    with _client(handler) as client:
        payload = get_json(
            "http://rewards.test/points",
            params={"user_id": "u1"},
            headers={"X-Api-Key": "k"},
            client=client,
        )

    assert payload == {"points": 5}
    assert seen == {"ua": DEFAULT_USER_AGENT, "key": "k", "query": {"user_id": "u1"}}


def test_get_json_raises_on_error_status():
    with _client(lambda request: httpx.Response(503)) as client:
        with pytest.raises(httpx.HTTPStatusError):
            get_json("http://gps.test/attractions", client=client)


def test_get_json_raises_value_error_on_bad_body():
    with _client(lambda request: httpx.Response(200, text="not json")) as client:
        with pytest.raises(ValueError):
            get_json("http://gps.test/attractions", client=client)
