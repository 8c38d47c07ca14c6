"""
Remote provider clients (GPS, rewards, trip pricing).

The three clients share one pooled `httpx.Client`. On top of `tourguide.core.http.get_json` each one:
- retries 429/5xx responses and transport errors with exponential backoff,
- honours `Retry-After` when the upstream sends one,
- parses payloads into domain models,
- reports any remaining failure as `ProviderUnavailable`.

Wire shapes (JSON, snake_case):
- GPS:     GET {gps}/users/{user_id}/location -> VisitedLocation
           GET {gps}/attractions             -> [Attraction]
- Rewards: GET {rewards}/attractions/{attraction_id}/points?user_id=... -> {"points": int}
- Pricer:  GET {pricer}/prices?... (api key in `X-Api-Key`) -> [ProviderOffer]
"""

from __future__ import annotations

import logging
import time
from typing import Any
from uuid import UUID

import httpx
from pydantic import TypeAdapter, ValidationError

from tourguide.config.settings import RetrySettings, Settings
from tourguide.core.http import build_client, get_json
from tourguide.domain.errors import ProviderUnavailable
from tourguide.domain.models import Attraction, ProviderOffer, VisitedLocation

logger = logging.getLogger(__name__)

_ATTRACTIONS_ADAPTER = TypeAdapter(list[Attraction])
_OFFERS_ADAPTER = TypeAdapter(list[ProviderOffer])

RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class _ServiceClient:
    provider_name = "remote"

    def __init__(
        self,
        base_url: str,
        *,
        retry: RetrySettings,
        timeout_seconds: float,
        client: httpx.Client | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._retry = retry
        self._timeout_seconds = float(timeout_seconds)
        self._client = client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    @staticmethod
    def _parse_retry_after_seconds(value: str | None) -> float | None:
        if not value:
            return None
        try:
            seconds = float(value)
        except ValueError:
            return None
        return seconds if seconds >= 0 else None

    def _get_json(self, path: str, *, params: dict[str, Any] | None = None, headers: dict[str, str] | None = None) -> Any:
        url = f"{self._base_url}/{path.lstrip('/')}"
        max_attempts = int(self._retry.max_attempts)
        base_delay_seconds = float(self._retry.base_delay_seconds)
        max_delay_seconds = float(self._retry.max_delay_seconds)

        for attempt in range(max_attempts + 1):
            try:
                return get_json(
                    url,
                    params=params,
                    headers=headers,
                    timeout_seconds=self._timeout_seconds,
                    client=self._client,
                )
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                if status not in RETRYABLE_STATUSES or attempt >= max_attempts:
                    raise ProviderUnavailable(self.provider_name, f"status={status} url={url}") from exc

                delay = min(max_delay_seconds, base_delay_seconds * (2**attempt))
                retry_after = self._parse_retry_after_seconds(exc.response.headers.get("Retry-After"))
                if retry_after is not None:
                    delay = max(delay, retry_after)
                logger.warning(
                    "%s request failed with status=%s; retrying in %.2fs (attempt %s/%s)",
                    self.provider_name,
                    status,
                    delay,
                    attempt + 1,
                    max_attempts,
                )
                time.sleep(delay)
            except httpx.TransportError as exc:
                if attempt >= max_attempts:
                    raise ProviderUnavailable(self.provider_name, f"{type(exc).__name__}: {exc}") from exc
                delay = min(max_delay_seconds, base_delay_seconds * (2**attempt))
                logger.warning(
                    "%s transport error; retrying in %.2fs (attempt %s/%s)",
                    self.provider_name,
                    delay,
                    attempt + 1,
                    max_attempts,
                )
                time.sleep(delay)
            except httpx.HTTPError as exc:
                raise ProviderUnavailable(self.provider_name, f"{type(exc).__name__}: {exc}") from exc
            except ValueError as exc:
                raise ProviderUnavailable(self.provider_name, f"invalid JSON from {url}") from exc

        raise ProviderUnavailable(self.provider_name, f"request to {url} failed")


class GpsClient(_ServiceClient):
    provider_name = "gps"

    def get_user_location(self, user_id: UUID) -> VisitedLocation:
        payload = self._get_json(f"/users/{user_id}/location")
        try:
            return VisitedLocation.model_validate(payload)
        except ValidationError as exc:
            raise ProviderUnavailable(self.provider_name, f"malformed location payload: {exc}") from exc

    def get_attractions(self) -> list[Attraction]:
        payload = self._get_json("/attractions")
        try:
            return _ATTRACTIONS_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            raise ProviderUnavailable(self.provider_name, f"malformed attractions payload: {exc}") from exc


class RewardsClient(_ServiceClient):
    provider_name = "rewards"

    def get_attraction_reward_points(self, attraction_id: UUID, user_id: UUID) -> int:
        payload = self._get_json(f"/attractions/{attraction_id}/points", params={"user_id": str(user_id)})
        if not isinstance(payload, dict) or not isinstance(payload.get("points"), int):
            raise ProviderUnavailable(self.provider_name, "malformed points payload")
        return int(payload["points"])


class TripPricerClient(_ServiceClient):
    provider_name = "pricer"

    def get_price(
        self,
        api_key: str,
        user_id: UUID,
        number_of_adults: int,
        number_of_children: int,
        trip_duration: int,
        cumulative_reward_points: int,
    ) -> list[ProviderOffer]:
        payload = self._get_json(
            "/prices",
            params={
                "user_id": str(user_id),
                "adults": int(number_of_adults),
                "children": int(number_of_children),
                "nights": int(trip_duration),
                "reward_points": int(cumulative_reward_points),
            },
            headers={"X-Api-Key": api_key},
        )
        try:
            return _OFFERS_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            raise ProviderUnavailable(self.provider_name, f"malformed offers payload: {exc}") from exc


def build_http_clients(settings: Settings) -> tuple[GpsClient, RewardsClient, TripPricerClient]:
    providers = settings.providers
    timeout_seconds = settings.app.http_timeout_seconds
    client = build_client(timeout_seconds=timeout_seconds, max_connections=settings.workers.pool_size)
    common = {"retry": providers.retry, "timeout_seconds": timeout_seconds, "client": client}
    return (
        GpsClient(providers.gps.base_url, **common),
        RewardsClient(providers.rewards.base_url, **common),
        TripPricerClient(providers.pricer.base_url, **common),
    )
