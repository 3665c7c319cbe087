from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any

import httpx
import redis

from core.errors import AppException, ErrorCode
from core.geo import coordinates_for_postal_code, distance_from_reference, linear_distance_quote
from core.redis_cache import get_cache_db
from core.settings import get_settings
from schemas.pricing import Coordinates

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
GEOCODE_CACHE_TTL_SECONDS = 60 * 60 * 24 * 15
GEOCODE_REGION = "hr"


@dataclass(frozen=True)
class DistanceResolution:
    distance_km: float
    free_radius_km: float
    billable_distance_km: float
    fee_per_km: float
    total_fee: float
    location: str
    source: str
    within_service_area: bool
    max_service_distance_km: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _require_google_maps_api_key() -> str:
    api_key = get_settings().google_maps_api_key
    if not api_key:
        raise AppException(
            status_code=503,
            code=ErrorCode.GEOCODING_PROVIDER_ERROR,
            message="Google Maps API key is not configured",
        )
    return api_key


def _geocode_cache_key(*, address: str, city: str | None) -> str:
    normalized_city = (city or "any").strip().lower()
    normalized_address = " ".join(address.lower().split())
    return f"distance:geocode:{normalized_city}:{normalized_address}"


def _cache_get_json(cache_key: str) -> Any | None:
    cache_db = get_cache_db()
    if cache_db is None:
        return None

    try:
        raw = cache_db.get(cache_key)
    except redis.RedisError as exc:
        logger.warning("Geocode cache read failed: %s", exc)
        return None

    if not raw:
        return None

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None


def _cache_set_json(cache_key: str, payload: Any, ttl_seconds: int = GEOCODE_CACHE_TTL_SECONDS) -> None:
    cache_db = get_cache_db()
    if cache_db is None:
        return

    try:
        cache_db.setex(cache_key, ttl_seconds, json.dumps(payload))
    except redis.RedisError as exc:
        logger.warning("Geocode cache write failed: %s", exc)


def _raise_provider_status_error(*, status_value: str, error_message: str | None = None) -> None:
    normalized_status = (status_value or "").upper()
    details: dict[str, Any] = {"providerStatus": normalized_status}
    if error_message:
        details["providerMessage"] = error_message

    if normalized_status == "OVER_QUERY_LIMIT":
        raise AppException(
            status_code=429,
            code=ErrorCode.TOO_MANY_REQUESTS,
            message="Geocoding provider quota exceeded",
            details=details,
        )
    if normalized_status == "REQUEST_DENIED":
        raise AppException(
            status_code=403,
            code=ErrorCode.GEOCODING_PROVIDER_ERROR,
            message="Geocoding provider denied the request",
            details=details,
        )

    raise AppException(
        status_code=502,
        code=ErrorCode.GEOCODING_PROVIDER_ERROR,
        message="Geocoding provider returned an unexpected status",
        details=details,
    )


async def _google_get_json(url: str, params: dict[str, Any]) -> dict[str, Any]:
    request_params = dict(params)
    request_params["key"] = _require_google_maps_api_key()

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(url, params=request_params)
            response.raise_for_status()
    except httpx.HTTPStatusError as err:
        raise AppException(
            status_code=502,
            code=ErrorCode.GEOCODING_PROVIDER_ERROR,
            message="Geocoding provider HTTP error",
            details={"status_code": err.response.status_code},
        ) from err
    except httpx.HTTPError as err:
        raise AppException(
            status_code=502,
            code=ErrorCode.GEOCODING_PROVIDER_ERROR,
            message="Geocoding provider request failed",
            details=str(err),
        ) from err

    try:
        payload = response.json()
    except ValueError as err:
        raise AppException(
            status_code=502,
            code=ErrorCode.GEOCODING_PROVIDER_ERROR,
            message="Geocoding provider returned invalid JSON",
        ) from err

    if not isinstance(payload, dict):
        raise AppException(
            status_code=502,
            code=ErrorCode.GEOCODING_PROVIDER_ERROR,
            message="Geocoding provider response shape is invalid",
        )
    return payload


async def geocode_address(address: str, city: str | None = None) -> dict[str, Any] | None:
    """Look up an address in Croatia. Returns {lat, lng, label} or None."""
    query = " ".join(address.split())
    if city and city.strip():
        query = f"{query}, {city.strip()}"

    cache_key = _geocode_cache_key(address=address, city=city)
    cached = _cache_get_json(cache_key)
    if isinstance(cached, dict) and {"lat", "lng", "label"} <= cached.keys():
        return cached

    payload = await _google_get_json(GOOGLE_GEOCODE_URL, {"address": query, "region": GEOCODE_REGION})
    status_value = str(payload.get("status") or "")
    if status_value.upper() == "ZERO_RESULTS":
        logger.info("No geocoding result for %r", query)
        return None
    if status_value.upper() != "OK":
        _raise_provider_status_error(
            status_value=status_value,
            error_message=payload.get("error_message"),
        )

    results = payload.get("results")
    first = results[0] if isinstance(results, list) and results else None
    location = first.get("geometry", {}).get("location") if isinstance(first, dict) else None
    if not isinstance(location, dict) or location.get("lat") is None or location.get("lng") is None:
        raise AppException(
            status_code=502,
            code=ErrorCode.GEOCODING_PROVIDER_ERROR,
            message="Geocoding provider response missing coordinates",
        )

    resolved = {
        "lat": float(location["lat"]),
        "lng": float(location["lng"]),
        "label": str(first.get("formatted_address") or query),
    }
    _cache_set_json(cache_key, resolved)
    return resolved


def _resolution(lat: float, lng: float, *, location: str, source: str) -> DistanceResolution:
    quote = linear_distance_quote(distance_from_reference(lat, lng))
    max_distance = get_settings().max_service_distance_km
    return DistanceResolution(
        distance_km=quote.distance_km,
        free_radius_km=quote.free_radius_km,
        billable_distance_km=quote.billable_distance_km,
        fee_per_km=quote.fee_per_km,
        total_fee=quote.total_fee,
        location=location,
        source=source,
        within_service_area=quote.distance_km <= max_distance,
        max_service_distance_km=max_distance,
    )


async def resolve_distance(
    *,
    coordinates: Coordinates | None = None,
    postal_code: str | None = None,
    address: str | None = None,
    city: str | None = None,
) -> DistanceResolution:
    """Distance and travel fee from the Zagreb centre.

    Coordinates win over the postal code table, which wins over geocoding.
    """
    if coordinates is not None:
        return _resolution(
            coordinates.lat,
            coordinates.lng,
            location=f"{coordinates.lat:.4f}, {coordinates.lng:.4f}",
            source="coordinates",
        )

    if postal_code and postal_code.strip():
        known = coordinates_for_postal_code(postal_code)
        if known is not None:
            lat, lng, label = known
            return _resolution(lat, lng, location=label, source="postal_code")
        logger.info("Postal code %s is not in the local table", postal_code)

    if address and address.strip():
        geocoded = await geocode_address(address, city)
        if geocoded is not None:
            return _resolution(geocoded["lat"], geocoded["lng"], location=geocoded["label"], source="geocoding")

    raise AppException(
        status_code=422,
        code=ErrorCode.VALIDATION_FAILED,
        message="Location could not be resolved",
        details={"postal_code": postal_code, "address": address, "city": city},
    )
