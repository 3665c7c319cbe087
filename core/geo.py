from __future__ import annotations

import math
from dataclasses import dataclass

from core.errors import InvalidInput
from core.pricing_rules import (
    FREE_DISTANCE_KM,
    LINEAR_DISTANCE_FEE_PER_KM,
    TIERED_DISTANCE_FEE_BEYOND,
    TIERED_DISTANCE_FEES,
)
from schemas.imports import DistanceFeeSchedule

EARTH_RADIUS_KM = 6371.0
ZAGREB_CENTER = (45.8150, 15.9819)

ZAGREB_POSTAL_CODES: dict[str, tuple[float, float, str]] = {
    "10000": (45.8150, 15.9819, "Zagreb - Centar"),
    "10010": (45.7756, 15.9819, "Zagreb - Sloboština"),
    "10020": (45.7717, 15.9419, "Novi Zagreb"),
    "10040": (45.8317, 16.0656, "Dubrava"),
    "10090": (45.8089, 15.8669, "Susedgrad"),
    "10110": (45.7367, 15.8667, "Zaprešić"),
    "10250": (45.7500, 15.8167, "Lučko"),
    "10255": (45.8644, 16.0000, "Gornja Dubrava"),
    "10257": (45.7289, 15.9178, "Brezovica"),
    "10290": (45.7333, 15.8500, "Jakovlje"),
    "10310": (45.9667, 16.1500, "Ivanić-Grad"),
    "10340": (45.8833, 16.3833, "Vrbovec"),
    "10360": (45.8311, 16.1161, "Sesvete"),
    "10370": (46.0333, 16.2000, "Dugo Selo"),
    "10380": (45.9833, 16.0667, "Sveti Ivan Zelina"),
    "10410": (45.6167, 15.8833, "Velika Gorica"),
    "10450": (45.9000, 15.7167, "Jastrebarsko"),
}


@dataclass(frozen=True)
class LinearDistanceQuote:
    distance_km: float
    free_radius_km: float
    billable_distance_km: float
    fee_per_km: float
    total_fee: float


def validate_distance(distance_km: float, field: str = "distance_km") -> float:
    if not isinstance(distance_km, (int, float)) or isinstance(distance_km, bool):
        raise InvalidInput("Distance must be a number", field=field, details={"value": distance_km})
    if not math.isfinite(distance_km) or distance_km < 0:
        raise InvalidInput("Distance must be a non-negative number", field=field, details={"value": distance_km})
    return float(distance_km)


def tiered_distance_fee(distance_km: float) -> float:
    distance = validate_distance(distance_km)
    for upper_km, fee in TIERED_DISTANCE_FEES:
        if distance <= upper_km:
            return fee
    return TIERED_DISTANCE_FEE_BEYOND


def linear_distance_fee(distance_km: float) -> float:
    distance = validate_distance(distance_km)
    if distance <= FREE_DISTANCE_KM:
        return 0.0
    return round((distance - FREE_DISTANCE_KM) * LINEAR_DISTANCE_FEE_PER_KM, 2)


_SCHEDULES = {
    DistanceFeeSchedule.TIERED: tiered_distance_fee,
    DistanceFeeSchedule.LINEAR: linear_distance_fee,
}


def calculate_distance_fee(distance_km: float, schedule: DistanceFeeSchedule) -> float:
    try:
        calculator = _SCHEDULES[DistanceFeeSchedule(schedule)]
    except ValueError as exc:
        raise InvalidInput("Unknown distance fee schedule", field="schedule", details={"value": schedule}) from exc
    return calculator(distance_km)


def linear_distance_quote(distance_km: float) -> LinearDistanceQuote:
    distance = validate_distance(distance_km)
    billable = max(0.0, distance - FREE_DISTANCE_KM)
    return LinearDistanceQuote(
        distance_km=round(distance, 1),
        free_radius_km=FREE_DISTANCE_KM,
        billable_distance_km=round(billable, 1),
        fee_per_km=LINEAR_DISTANCE_FEE_PER_KM,
        total_fee=round(billable * LINEAR_DISTANCE_FEE_PER_KM, 2),
    )


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_from_reference(lat: float, lng: float) -> float:
    return haversine_km(ZAGREB_CENTER[0], ZAGREB_CENTER[1], lat, lng)


def coordinates_for_postal_code(postal_code: str) -> tuple[float, float, str] | None:
    cleaned = postal_code.strip().upper()
    if cleaned.startswith("HR"):
        cleaned = cleaned[2:].lstrip("-").strip()

    if cleaned in ZAGREB_POSTAL_CODES:
        return ZAGREB_POSTAL_CODES[cleaned]
    # Unknown Zagreb area codes resolve to the city centre.
    if cleaned.startswith("10"):
        return ZAGREB_CENTER[0], ZAGREB_CENTER[1], "Zagreb"
    return None
