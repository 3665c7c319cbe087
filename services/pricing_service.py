from __future__ import annotations

from dataclasses import replace
from typing import Any

from core.errors import InvalidServiceConfiguration
from core.geo import calculate_distance_fee, distance_from_reference, validate_distance
from core.holidays import is_croatian_public_holiday, is_weekend
from core.pricing_rules import (
    FREQUENCY_DISCOUNT_PERCENT,
    HOLIDAY_SURCHARGE_RATE,
    INDOOR_EXTRAS_CATALOG,
    LAST_CLEANED_MULTIPLIERS,
    OFFICE_FREQUENCY_DISCOUNT_PERCENT,
    OUTDOOR_SERVICES_CATALOG,
    PROPERTY_TYPE_MULTIPLIERS,
    QUOTE_BASE_RATES,
    QUOTE_EXTRAS_CATALOG,
    QUOTE_FREQUENCY_DISCOUNT_PERCENT,
    QUOTE_MINIMUM_PRICES,
    RENTAL_FEATURE_SURCHARGES,
    SERVICE_RATES_PER_SQM,
    TURNAROUND_PRICE_ADJUSTMENT,
    VAT_SHARE_OF_GROSS,
    WEEKEND_SURCHARGE_RATE,
)
from core.pricing_types import (
    IndoorExtra,
    IndoorExtraLine,
    OutdoorService,
    OutdoorServiceLine,
    PriceBreakdown,
    PriceRequest,
    RentalFeatures,
    round_currency,
)
from schemas.imports import (
    RENTAL_SERVICE_TYPES,
    CleaningTime,
    DistanceFeeSchedule,
    FloorLevel,
    Frequency,
    OfficeFrequency,
    OfficeType,
    QuoteServiceType,
    ServiceType,
    SuppliesOption,
    TurnaroundTime,
    WindowsServiceType,
)
from schemas.pricing import QuoteRequest
from services.price_calculators import (
    calculate_base_price,
    calculate_office_price,
    calculate_windows_price,
    coerce_enum,
    minimum_price_for,
    require_number,
)

# The booking wizard prices travel in tiers; the quote API charges per km.
ENHANCED_DISTANCE_SCHEDULE = DistanceFeeSchedule.TIERED
QUOTE_DISTANCE_SCHEDULE = DistanceFeeSchedule.LINEAR

FREQUENCY_LABELS_HR = {
    Frequency.WEEKLY: "tjedni",
    Frequency.BIWEEKLY: "dvotjedni",
    Frequency.MONTHLY: "mjesečni",
}


def _validate_service_configuration(request: PriceRequest, service_type: ServiceType) -> None:
    if service_type == ServiceType.WINDOWS and request.windows is None:
        raise InvalidServiceConfiguration("windows input is required for windows service", field="windows")
    if service_type == ServiceType.OFFICE and request.office is None:
        raise InvalidServiceConfiguration("office input is required for office service", field="office")
    if service_type != ServiceType.WINDOWS and request.windows is not None:
        raise InvalidServiceConfiguration("windows input is only allowed for windows service", field="windows")
    if service_type != ServiceType.OFFICE and request.office is not None:
        raise InvalidServiceConfiguration("office input is only allowed for office service", field="office")
    if request.rental_features is not None and service_type not in RENTAL_SERVICE_TYPES:
        raise InvalidServiceConfiguration(
            "rental features are only allowed for rental services",
            field="rental_features",
            details={"service_type": service_type.value},
        )


def _price_indoor_extras(extras: tuple[IndoorExtra, ...]) -> tuple[tuple[IndoorExtraLine, ...], float]:
    for index, extra in enumerate(extras):
        require_number(extra.quantity, f"indoor_extras[{index}].quantity")
        require_number(extra.unit_price, f"indoor_extras[{index}].unit_price")

    lines = tuple(
        IndoorExtraLine(
            id=extra.id,
            quantity=extra.quantity,
            unit_price=extra.unit_price,
            total=extra.quantity * extra.unit_price,
        )
        for extra in extras
        if extra.quantity > 0
    )
    return lines, sum(line.total for line in lines)


def _price_outdoor_services(services: tuple[OutdoorService, ...]) -> tuple[tuple[OutdoorServiceLine, ...], float]:
    for index, service in enumerate(services):
        require_number(service.area, f"outdoor_services[{index}].area")
        require_number(service.price_per_unit, f"outdoor_services[{index}].price_per_unit")
        require_number(service.min_price, f"outdoor_services[{index}].min_price")

    lines: list[OutdoorServiceLine] = []
    for service in services:
        if service.area <= 0:
            continue
        calculated = service.area * service.price_per_unit
        lines.append(
            OutdoorServiceLine(
                id=service.id,
                area=service.area,
                price_per_unit=service.price_per_unit,
                total=max(calculated, service.min_price),
                min_price_applied=calculated < service.min_price,
            )
        )
    return tuple(lines), sum(line.total for line in lines)


def _coerce_rental_features(features: RentalFeatures | None) -> RentalFeatures | None:
    if features is None:
        return None
    turnaround = coerce_enum(TurnaroundTime, features.turnaround_time, "rental_features.turnaround_time")
    return replace(features, turnaround_time=turnaround)


def rental_adjustment_for(features: RentalFeatures) -> float:
    turnaround = coerce_enum(TurnaroundTime, features.turnaround_time, "rental_features.turnaround_time")
    adjustment = TURNAROUND_PRICE_ADJUSTMENT[turnaround]
    for feature, surcharge in RENTAL_FEATURE_SURCHARGES.items():
        if getattr(features, feature):
            adjustment += surcharge
    return adjustment


def calculate_price(request: PriceRequest) -> PriceBreakdown:
    """Price a cleaning job and split the gross total into net and VAT.

    Raises InvalidInput or InvalidServiceConfiguration before anything is
    priced. Windows and office jobs take distance and frequency from their own
    payload; office jobs use the commercial discount schedule.
    """
    service_type = coerce_enum(ServiceType, request.service_type, "service_type")
    _validate_service_configuration(request, service_type)
    # Checked for every service so a bad value never reaches a breakdown.
    validate_distance(request.distance_km)
    require_number(request.property_size, "property_size")
    rental_features = _coerce_rental_features(request.rental_features)

    windows_breakdown = None
    office_breakdown = None
    last_cleaned_multiplier = None

    if service_type == ServiceType.WINDOWS:
        windows = request.windows
        distance_km = validate_distance(windows.distance_km, "windows.distance_km")
        discount_percent = FREQUENCY_DISCOUNT_PERCENT[coerce_enum(Frequency, windows.frequency, "windows.frequency")]
        windows_breakdown = calculate_windows_price(windows)
        base_price = windows_breakdown.base_price
        property_multiplier = 1.0
        effective_area = float(windows.window_count)
        minimum_applied = windows_breakdown.minimum_applied
    elif service_type == ServiceType.OFFICE:
        office = request.office
        distance_km = validate_distance(office.distance_km, "office.distance_km")
        discount_percent = OFFICE_FREQUENCY_DISCOUNT_PERCENT[
            coerce_enum(OfficeFrequency, office.frequency, "office.frequency")
        ]
        office_breakdown = calculate_office_price(office)
        base_price = office_breakdown.base_price
        property_multiplier = 1.0
        effective_area = float(office.property_size)
        minimum_applied = office_breakdown.minimum_applied
    else:
        distance_km = validate_distance(request.distance_km)
        discount_percent = FREQUENCY_DISCOUNT_PERCENT[coerce_enum(Frequency, request.frequency, "frequency")]
        rate = request.price_per_area_unit
        if rate is None:
            rate = SERVICE_RATES_PER_SQM[service_type]
        base = calculate_base_price(
            service_type=service_type,
            property_type=request.property_type,
            property_size=request.property_size,
            price_per_area_unit=rate,
            rental_frequency=request.rental_frequency,
            last_cleaned=request.last_cleaned,
        )
        base_price = base.base_price
        property_multiplier = base.property_type_multiplier
        effective_area = base.effective_area
        minimum_applied = base.minimum_applied
        last_cleaned_multiplier = base.last_cleaned_multiplier

    extra_lines, indoor_total = _price_indoor_extras(request.indoor_extras)
    outdoor_lines, outdoor_total = _price_outdoor_services(request.outdoor_services)
    rental_adjustment = rental_adjustment_for(rental_features) if rental_features else 0.0
    distance_fee = calculate_distance_fee(distance_km, ENHANCED_DISTANCE_SCHEDULE)

    subtotal_pre_surcharge = base_price + indoor_total + outdoor_total + rental_adjustment + distance_fee

    weekend_surcharge = 0.0
    holiday_surcharge = 0.0
    if service_type == ServiceType.DAILY_RENTAL and request.booking_date is not None:
        if is_weekend(request.booking_date):
            weekend_surcharge = subtotal_pre_surcharge * WEEKEND_SURCHARGE_RATE
        if is_croatian_public_holiday(request.booking_date):
            holiday_surcharge = subtotal_pre_surcharge * HOLIDAY_SURCHARGE_RATE

    # Surcharges are never discounted.
    frequency_discount = subtotal_pre_surcharge * (discount_percent / 100)
    gross_total = subtotal_pre_surcharge + weekend_surcharge + holiday_surcharge - frequency_discount
    vat_amount = gross_total * VAT_SHARE_OF_GROSS
    net_amount = gross_total - vat_amount

    return PriceBreakdown(
        service_type=service_type,
        base_price=base_price,
        property_type_multiplier=property_multiplier,
        effective_area=effective_area,
        distance_fee=distance_fee,
        distance_fee_schedule=ENHANCED_DISTANCE_SCHEDULE,
        subtotal_pre_surcharge=subtotal_pre_surcharge,
        weekend_surcharge=weekend_surcharge,
        holiday_surcharge=holiday_surcharge,
        frequency_discount_percent=discount_percent,
        frequency_discount=frequency_discount,
        subtotal=gross_total,
        net_amount=net_amount,
        vat_amount=vat_amount,
        total=gross_total,
        indoor_extras=extra_lines,
        outdoor_services=outdoor_lines,
        indoor_extras_total=indoor_total,
        outdoor_services_total=outdoor_total,
        rental_adjustment=rental_adjustment,
        rental_features=rental_features,
        last_cleaned_multiplier=last_cleaned_multiplier,
        minimum_applied=minimum_applied,
        windows=windows_breakdown,
        office=office_breakdown,
    )


def _quote_distance_fee(payload: QuoteRequest) -> float:
    if payload.coordinates is None:
        return 0.0
    distance = distance_from_reference(payload.coordinates.lat, payload.coordinates.lng)
    return calculate_distance_fee(distance, QUOTE_DISTANCE_SCHEDULE)


def calculate_quote(payload: QuoteRequest) -> dict[str, Any]:
    """Flat quote behind POST /price: discount on the base only, extras and
    distance added afterwards."""
    money = round_currency
    frequency = payload.frequency
    base_rate = QUOTE_BASE_RATES[payload.service_type]
    property_multiplier = PROPERTY_TYPE_MULTIPLIERS[payload.property_type]
    minimum_price = QUOTE_MINIMUM_PRICES[payload.service_type]

    base_price = max(payload.property_size * base_rate * property_multiplier, minimum_price)

    discount_percent = QUOTE_FREQUENCY_DISCOUNT_PERCENT[frequency]
    discount_amount = base_price * (discount_percent / 100)
    price_after_discount = base_price - discount_amount

    extras_cost = sum(extra.price * (extra.quantity or 1) for extra in payload.extras)
    distance_fee = _quote_distance_fee(payload)
    total_price = price_after_discount + extras_cost + distance_fee

    size_label = f"{payload.property_size:g}"
    return {
        "base_price": money(base_price),
        "property_multiplier": property_multiplier,
        "frequency_discount": {
            "percentage": discount_percent,
            "amount": money(discount_amount),
        },
        "price_after_discount": money(price_after_discount),
        "extras_cost": money(extras_cost),
        "distance_fee": distance_fee,
        "distance_fee_schedule": QUOTE_DISTANCE_SCHEDULE.value,
        "total_price": money(total_price),
        "service_details": {
            "type": payload.service_type.value,
            "base_rate_per_sqm": base_rate,
            "minimum_price": minimum_price,
            "property_type": payload.property_type.value,
            "property_size": payload.property_size,
            "frequency": frequency.value,
        },
        "messages": {
            "base": f"Osnovna cijena za {size_label}m²: €{base_price:.2f}",
            "discount": (
                f"Popust za {FREQUENCY_LABELS_HR[frequency]} raspored: -{discount_percent:g}%"
                if discount_percent > 0
                else None
            ),
            "extras": f"Dodatne usluge: €{extras_cost:.2f}" if extras_cost > 0 else None,
            "distance": f"Naknada za udaljenost: €{distance_fee:.2f}" if distance_fee > 0 else None,
            "total": f"Ukupna cijena: €{total_price:.2f}",
        },
    }


def pricing_options() -> dict[str, Any]:
    """Catalogues the booking wizard renders before asking for a price."""
    return {
        "service_types": [
            {
                "id": service.value,
                "rate_per_sqm": SERVICE_RATES_PER_SQM.get(service),
                "minimum_price": minimum_price_for(service),
                "rental": service in RENTAL_SERVICE_TYPES,
            }
            for service in ServiceType
        ],
        "property_types": [
            {"id": property_type.value, "multiplier": multiplier}
            for property_type, multiplier in PROPERTY_TYPE_MULTIPLIERS.items()
        ],
        "frequencies": [
            {"id": frequency.value, "discount_percent": percent}
            for frequency, percent in FREQUENCY_DISCOUNT_PERCENT.items()
        ],
        "office_frequencies": [
            {"id": frequency.value, "discount_percent": percent}
            for frequency, percent in OFFICE_FREQUENCY_DISCOUNT_PERCENT.items()
        ],
        "indoor_extras": list(INDOOR_EXTRAS_CATALOG),
        "outdoor_services": list(OUTDOOR_SERVICES_CATALOG),
        "turnaround_options": [
            {"id": turnaround.value, "price_adjustment": adjustment}
            for turnaround, adjustment in TURNAROUND_PRICE_ADJUSTMENT.items()
        ],
        "rental_features": [
            {"id": feature, "price": price} for feature, price in RENTAL_FEATURE_SURCHARGES.items()
        ],
        "last_cleaned": [
            {"id": period.value, "multiplier": multiplier} for period, multiplier in LAST_CLEANED_MULTIPLIERS.items()
        ],
        "windows": {
            "service_types": [item.value for item in WindowsServiceType],
            "floor_levels": [item.value for item in FloorLevel],
        },
        "office": {
            "office_types": [item.value for item in OfficeType],
            "cleaning_times": [item.value for item in CleaningTime],
            "supplies": [item.value for item in SuppliesOption],
        },
        "quote": {
            "service_types": [
                {
                    "id": service.value,
                    "base_rate_per_sqm": QUOTE_BASE_RATES[service],
                    "minimum_price": QUOTE_MINIMUM_PRICES[service],
                }
                for service in QuoteServiceType
            ],
            "frequencies": [
                {"id": frequency.value, "discount_percent": percent}
                for frequency, percent in QUOTE_FREQUENCY_DISCOUNT_PERCENT.items()
            ],
            "extras": quote_extras(),
        },
    }


def quote_extras() -> list[dict[str, Any]]:
    """Flat add-ons the simple quote accepts as `{name, price, quantity}`."""
    return [dict(extra) for extra in QUOTE_EXTRAS_CATALOG]
