from __future__ import annotations

import math
from enum import Enum
from typing import Any, TypeVar

from core.errors import InvalidInput
from core.pricing_rules import (
    DAILY_RENTAL_RATE_PER_SQM,
    DEFAULT_MINIMUM_PRICE,
    LAST_CLEANED_MULTIPLIERS,
    LAST_CLEANED_SERVICE_TYPES,
    OFFICE_BASE_RATE_PER_SQM,
    OFFICE_BATHROOM_RATE,
    OFFICE_CLEANING_TIME_MULTIPLIERS,
    OFFICE_COMMON_AREAS_RATE,
    OFFICE_KITCHENETTE_RATE,
    OFFICE_MINIMUM_PRICE,
    OFFICE_NO_ELEVATOR_SURCHARGE_RATE,
    OFFICE_PRIVATE_OFFICE_RATE,
    OFFICE_RECYCLING_RATE,
    OFFICE_SUPPLIES_RATE,
    OFFICE_TRASH_RATE,
    OFFICE_TYPE_MULTIPLIERS,
    PROPERTY_TYPE_MULTIPLIERS,
    REGULAR_MINIMUM_PRICE,
    WINDOWS_BALCONY_DOOR_MULTIPLIER,
    WINDOWS_BASE_PER_WINDOW,
    WINDOWS_FLOOR_SURCHARGES,
    WINDOWS_FRAMES_PER_WINDOW,
    WINDOWS_MINIMUM_PRICE,
    WINDOWS_SERVICE_TYPE_MULTIPLIERS,
    WINDOWS_SILLS_PER_WINDOW,
    WINDOWS_SKYLIGHT_MULTIPLIER,
)
from core.pricing_types import BasePriceResult, OfficeBreakdown, OfficeInput, WindowsBreakdown, WindowsInput
from schemas.imports import (
    CleaningTime,
    FloorLevel,
    LastCleaned,
    OfficeType,
    PropertyType,
    RentalBookingFrequency,
    ServiceType,
    SuppliesOption,
    WindowsServiceType,
)

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: type[E], value: Any, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvalidInput(
            f"Unknown {field} value",
            field=field,
            details={"value": value, "allowed": [member.value for member in enum_cls]},
        ) from exc


def require_number(value: Any, field: str, *, positive: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f"{field} must be a number", field=field, details={"value": value})
    if not math.isfinite(value):
        raise InvalidInput(f"{field} must be finite", field=field, details={"value": value})
    if positive and value <= 0:
        raise InvalidInput(f"{field} must be greater than zero", field=field, details={"value": value})
    if value < 0:
        raise InvalidInput(f"{field} must not be negative", field=field, details={"value": value})
    return float(value)


def minimum_price_for(service_type: ServiceType) -> float:
    if service_type == ServiceType.REGULAR:
        return REGULAR_MINIMUM_PRICE
    if service_type == ServiceType.WINDOWS:
        return WINDOWS_MINIMUM_PRICE
    if service_type == ServiceType.OFFICE:
        return OFFICE_MINIMUM_PRICE
    return DEFAULT_MINIMUM_PRICE


def calculate_base_price(
    *,
    service_type: ServiceType,
    property_type: PropertyType,
    property_size: float,
    price_per_area_unit: float,
    rental_frequency: RentalBookingFrequency = RentalBookingFrequency.OCCASIONAL,
    last_cleaned: LastCleaned | None = None,
) -> BasePriceResult:
    """Area based price for the residential and rental services.

    The daily rental rate comes from the monthly booking volume tier, not from
    the caller's rate. The last-cleaned multiplier only applies to standard
    and deep cleaning and is applied after the minimum floor.
    """
    service_type = coerce_enum(ServiceType, service_type, "service_type")
    property_type = coerce_enum(PropertyType, property_type, "property_type")
    size = require_number(property_size, "property_size", positive=True)
    rate = require_number(price_per_area_unit, "price_per_area_unit", positive=True)

    multiplier = PROPERTY_TYPE_MULTIPLIERS[property_type]
    effective_area = size * multiplier

    if service_type == ServiceType.DAILY_RENTAL:
        tier = coerce_enum(RentalBookingFrequency, rental_frequency, "rental_frequency")
        rate = DAILY_RENTAL_RATE_PER_SQM[tier]

    raw_base = effective_area * rate
    minimum = minimum_price_for(service_type)
    base = max(raw_base, minimum)

    applied_multiplier: float | None = None
    if last_cleaned is not None and service_type in LAST_CLEANED_SERVICE_TYPES:
        applied_multiplier = LAST_CLEANED_MULTIPLIERS[coerce_enum(LastCleaned, last_cleaned, "last_cleaned")]
        base = base * applied_multiplier

    return BasePriceResult(
        base_price=base,
        effective_area=effective_area,
        property_type_multiplier=multiplier,
        price_per_area_unit=rate,
        minimum_price=minimum,
        minimum_applied=raw_base < minimum,
        last_cleaned_multiplier=applied_multiplier,
    )


def _require_count(value: Any, field: str, *, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{field} must be a whole number", field=field, details={"value": value})
    if value < minimum:
        raise InvalidInput(f"{field} must be at least {minimum}", field=field, details={"value": value})
    return value


def calculate_windows_price(windows: WindowsInput) -> WindowsBreakdown:
    window_count = _require_count(windows.window_count, "windows.window_count", minimum=1)
    balcony_doors = _require_count(windows.balcony_doors, "windows.balcony_doors")
    skylights = _require_count(windows.skylights, "windows.skylights")
    service_type = coerce_enum(WindowsServiceType, windows.service_type, "windows.service_type")
    floor_level = coerce_enum(FloorLevel, windows.floor_level, "windows.floor_level")

    floor_surcharge = WINDOWS_FLOOR_SURCHARGES[floor_level]
    price_per_window = WINDOWS_BASE_PER_WINDOW * WINDOWS_SERVICE_TYPE_MULTIPLIERS[service_type] + floor_surcharge

    windows_base = window_count * price_per_window
    balcony_doors_total = balcony_doors * (WINDOWS_BALCONY_DOOR_MULTIPLIER * price_per_window)
    skylights_total = skylights * (WINDOWS_SKYLIGHT_MULTIPLIER * price_per_window + floor_surcharge)
    frames_total = window_count * WINDOWS_FRAMES_PER_WINDOW if windows.frames_cleaning else 0.0
    sills_total = window_count * WINDOWS_SILLS_PER_WINDOW if windows.sills_cleaning else 0.0

    components = windows_base + balcony_doors_total + skylights_total + frames_total + sills_total
    return WindowsBreakdown(
        price_per_window=price_per_window,
        windows_base=windows_base,
        balcony_doors_total=balcony_doors_total,
        skylights_total=skylights_total,
        frames_total=frames_total,
        sills_total=sills_total,
        minimum_applied=components < WINDOWS_MINIMUM_PRICE,
        base_price=max(components, WINDOWS_MINIMUM_PRICE),
    )


def calculate_office_price(office: OfficeInput) -> OfficeBreakdown:
    size = require_number(office.property_size, "office.property_size", positive=True)
    private_offices = _require_count(office.private_offices, "office.private_offices")
    bathrooms = _require_count(office.bathrooms, "office.bathrooms")
    floor_count = _require_count(office.floor_count, "office.floor_count", minimum=1)
    office_type = coerce_enum(OfficeType, office.office_type, "office.office_type")
    cleaning_time = coerce_enum(CleaningTime, office.cleaning_time, "office.cleaning_time")
    supplies = coerce_enum(SuppliesOption, office.supplies, "office.supplies")

    office_type_multiplier = OFFICE_TYPE_MULTIPLIERS[office_type]
    time_multiplier = OFFICE_CLEANING_TIME_MULTIPLIERS[cleaning_time]
    office_base_price = size * OFFICE_BASE_RATE_PER_SQM * office_type_multiplier * time_multiplier

    private_offices_extra = private_offices * OFFICE_PRIVATE_OFFICE_RATE
    common_areas_extra = OFFICE_COMMON_AREAS_RATE if office.common_areas else 0.0
    bathrooms_extra = bathrooms * OFFICE_BATHROOM_RATE
    kitchenette_extra = OFFICE_KITCHENETTE_RATE if office.kitchenette else 0.0
    supplies_extra = OFFICE_SUPPLIES_RATE[supplies]
    trash_extra = OFFICE_TRASH_RATE if office.trash_removal else 0.0
    recycling_extra = OFFICE_RECYCLING_RATE if office.recycling_management else 0.0

    running = (
        office_base_price
        + private_offices_extra
        + common_areas_extra
        + bathrooms_extra
        + kitchenette_extra
        + supplies_extra
        + trash_extra
        + recycling_extra
    )
    no_elevator_surcharge = 0.0
    if floor_count > 1 and not office.elevator_access:
        no_elevator_surcharge = running * OFFICE_NO_ELEVATOR_SURCHARGE_RATE
    running += no_elevator_surcharge

    return OfficeBreakdown(
        office_base_price=office_base_price,
        office_type_multiplier=office_type_multiplier,
        time_multiplier=time_multiplier,
        private_offices_extra=private_offices_extra,
        common_areas_extra=common_areas_extra,
        bathrooms_extra=bathrooms_extra,
        kitchenette_extra=kitchenette_extra,
        supplies_extra=supplies_extra,
        trash_extra=trash_extra,
        recycling_extra=recycling_extra,
        no_elevator_surcharge=no_elevator_surcharge,
        minimum_applied=running < OFFICE_MINIMUM_PRICE,
        base_price=max(running, OFFICE_MINIMUM_PRICE),
    )
