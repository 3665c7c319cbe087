from __future__ import annotations

import json

import pytest
import redis

from core.errors import AppException, ErrorCode
from core.settings import Settings
from schemas.pricing import Coordinates
from services import distance_service


class _FakeCache:
    def __init__(self) -> None:
        self._rows: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._rows.get(key)

    def setex(self, key: str, _: int, value: str) -> None:
        self._rows[key] = value


class _BrokenCache:
    def get(self, key: str) -> str | None:
        raise redis.ConnectionError("cache down")

    def setex(self, key: str, _: int, value: str) -> None:
        raise redis.ConnectionError("cache down")


def _settings(**overrides) -> Settings:
    payload = {
        "env": "test",
        "cors_origins": (),
        "debug_include_error_details": False,
        "rate_limit_storage_uri": "memory://",
        "price_rate_limits": "price:30/minute",
        "redis_url": None,
        "google_maps_api_key": "test-key",
        "log_level": "INFO",
        "max_service_distance_km": 50.0,
    }
    payload.update(overrides)
    return Settings(**payload)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(distance_service, "get_settings", lambda: _settings())
    monkeypatch.setattr(distance_service, "get_cache_db", lambda: None)


def _geocode_payload(lat: float, lng: float, address: str = "Ilica 1, Zagreb"):
    return {
        "status": "OK",
        "results": [
            {
                "formatted_address": address,
                "geometry": {"location": {"lat": lat, "lng": lng}},
            }
        ],
    }


@pytest.mark.asyncio
async def test_coordinates_take_priority_over_postal_code(monkeypatch: pytest.MonkeyPatch):
    async def _stub_google_get_json(url: str, params: dict):  # pragma: no cover
        raise AssertionError("Provider should not be called when coordinates are given")

    monkeypatch.setattr(distance_service, "_google_get_json", _stub_google_get_json)

    resolution = await distance_service.resolve_distance(
        coordinates=Coordinates(lat=45.8150, lng=15.9819),
        postal_code="10410",
    )

    assert resolution.source == "coordinates"
    assert resolution.distance_km == 0
    assert resolution.total_fee == 0
    assert resolution.within_service_area is True


@pytest.mark.asyncio
async def test_postal_code_table_lookup():
    resolution = await distance_service.resolve_distance(postal_code="HR-10410")

    assert resolution.source == "postal_code"
    assert resolution.location == "Velika Gorica"
    assert resolution.billable_distance_km == pytest.approx(resolution.distance_km - 10, abs=0.11)
    assert resolution.total_fee > 0


@pytest.mark.asyncio
async def test_unknown_postal_code_falls_back_to_geocoding(monkeypatch: pytest.MonkeyPatch):
    fake_cache = _FakeCache()
    monkeypatch.setattr(distance_service, "get_cache_db", lambda: fake_cache)
    calls: list[dict] = []

    async def _stub_google_get_json(url: str, params: dict):
        assert url == distance_service.GOOGLE_GEOCODE_URL
        calls.append(params)
        return _geocode_payload(45.3271, 14.4422, "Rijeka, Hrvatska")

    monkeypatch.setattr(distance_service, "_google_get_json", _stub_google_get_json)

    resolution = await distance_service.resolve_distance(postal_code="51000", address="Korzo 1", city="Rijeka")

    assert calls[0]["address"] == "Korzo 1, Rijeka"
    assert calls[0]["region"] == "hr"
    assert resolution.source == "geocoding"
    assert resolution.location == "Rijeka, Hrvatska"
    assert resolution.within_service_area is False

    cache_key = distance_service._geocode_cache_key(address="Korzo 1", city="Rijeka")
    assert json.loads(fake_cache._rows[cache_key])["lat"] == 45.3271


@pytest.mark.asyncio
async def test_geocoding_uses_cache_before_provider(monkeypatch: pytest.MonkeyPatch):
    fake_cache = _FakeCache()
    monkeypatch.setattr(distance_service, "get_cache_db", lambda: fake_cache)
    cache_key = distance_service._geocode_cache_key(address="Ilica  1", city=None)
    fake_cache._rows[cache_key] = json.dumps({"lat": 45.8131, "lng": 15.9700, "label": "Ilica 1"})

    async def _stub_google_get_json(url: str, params: dict):  # pragma: no cover
        raise AssertionError(f"Provider should not be called for cached result: {url} {params}")

    monkeypatch.setattr(distance_service, "_google_get_json", _stub_google_get_json)

    resolution = await distance_service.resolve_distance(address="Ilica 1")
    assert resolution.location == "Ilica 1"
    assert resolution.total_fee == 0


@pytest.mark.asyncio
async def test_cache_failures_fail_open(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(distance_service, "get_cache_db", lambda: _BrokenCache())

    async def _stub_google_get_json(url: str, params: dict):
        return _geocode_payload(45.8131, 15.9700)

    monkeypatch.setattr(distance_service, "_google_get_json", _stub_google_get_json)

    resolution = await distance_service.resolve_distance(address="Ilica 1")
    assert resolution.source == "geocoding"


@pytest.mark.asyncio
async def test_zero_results_without_other_hints_is_unresolvable(monkeypatch: pytest.MonkeyPatch):
    async def _stub_google_get_json(url: str, params: dict):
        return {"status": "ZERO_RESULTS", "results": []}

    monkeypatch.setattr(distance_service, "_google_get_json", _stub_google_get_json)

    with pytest.raises(AppException) as exc_info:
        await distance_service.resolve_distance(address="Nepostojeća ulica 99")

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail["code"] == ErrorCode.VALIDATION_FAILED.value


@pytest.mark.asyncio
async def test_provider_quota_error_maps_to_429(monkeypatch: pytest.MonkeyPatch):
    async def _stub_google_get_json(url: str, params: dict):
        return {"status": "OVER_QUERY_LIMIT", "error_message": "quota"}

    monkeypatch.setattr(distance_service, "_google_get_json", _stub_google_get_json)

    with pytest.raises(AppException) as exc_info:
        await distance_service.geocode_address("Ilica 1")

    assert exc_info.value.status_code == 429
    assert exc_info.value.detail["details"]["providerMessage"] == "quota"


@pytest.mark.asyncio
async def test_missing_api_key_returns_503(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(distance_service, "get_settings", lambda: _settings(google_maps_api_key=None))

    with pytest.raises(AppException) as exc_info:
        await distance_service.resolve_distance(address="Ilica 1")

    assert exc_info.value.status_code == 503
    assert exc_info.value.detail["code"] == ErrorCode.GEOCODING_PROVIDER_ERROR.value


@pytest.mark.asyncio
async def test_service_area_limit_comes_from_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(distance_service, "get_settings", lambda: _settings(max_service_distance_km=20.0))

    resolution = await distance_service.resolve_distance(postal_code="10410")

    assert resolution.within_service_area is False
    assert resolution.max_service_distance_km == 20.0
