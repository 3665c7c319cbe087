from __future__ import annotations

import pytest

from core.errors import InvalidInput
from core.pricing_rules import (
    DAILY_RENTAL_RATE_PER_SQM,
    LAST_CLEANED_MULTIPLIERS,
    OFFICE_CLEANING_TIME_MULTIPLIERS,
    OFFICE_SUPPLIES_RATE,
    OFFICE_TYPE_MULTIPLIERS,
    PROPERTY_TYPE_MULTIPLIERS,
    WINDOWS_FLOOR_SURCHARGES,
    WINDOWS_SERVICE_TYPE_MULTIPLIERS,
)
from core.pricing_types import OfficeInput, WindowsInput
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
from services.price_calculators import (
    calculate_base_price,
    calculate_office_price,
    calculate_windows_price,
    coerce_enum,
    minimum_price_for,
    require_number,
)


def _base(**overrides):
    payload = {
        "service_type": ServiceType.STANDARD,
        "property_type": PropertyType.APARTMENT,
        "property_size": 60,
        "price_per_area_unit": 1.0,
    }
    payload.update(overrides)
    return calculate_base_price(**payload)


@pytest.mark.parametrize(
    ("property_type", "multiplier"),
    [(PropertyType.APARTMENT, 1.0), (PropertyType.HOUSE, 1.15), (PropertyType.OFFICE, 1.1)],
)
def test_property_multiplier_scales_effective_area(property_type, multiplier):
    result = _base(property_type=property_type, property_size=100)

    assert result.property_type_multiplier == multiplier
    assert result.effective_area == pytest.approx(100 * multiplier)


def test_minimum_price_per_service():
    assert minimum_price_for(ServiceType.REGULAR) == 30
    assert minimum_price_for(ServiceType.DEEP) == 40
    assert minimum_price_for(ServiceType.DAILY_RENTAL) == 40


def test_standard_cleaning_applies_last_cleaned_multiplier():
    result = _base(last_cleaned=LastCleaned.THREE_TO_6_MONTHS)

    assert result.last_cleaned_multiplier == 1.30
    assert result.base_price == pytest.approx(60 * 1.30)


def test_last_cleaned_ignored_for_regular_service():
    result = _base(service_type=ServiceType.REGULAR, last_cleaned=LastCleaned.NEVER)

    assert result.last_cleaned_multiplier is None
    assert result.base_price == pytest.approx(60)


@pytest.mark.parametrize(
    ("tier", "expected"),
    [
        (RentalBookingFrequency.VERY_FREQUENT, 50),
        (RentalBookingFrequency.FREQUENT, 80),
        (RentalBookingFrequency.OCCASIONAL, 100),
    ],
)
def test_daily_rental_rate_tiers(tier, expected):
    result = _base(service_type=ServiceType.DAILY_RENTAL, property_size=100, rental_frequency=tier)
    assert result.base_price == pytest.approx(expected)


def test_require_number_rejects_bools_and_strings():
    with pytest.raises(InvalidInput):
        require_number(True, "property_size")
    with pytest.raises(InvalidInput):
        require_number("12", "property_size")


def test_require_number_positive_flag():
    assert require_number(0, "distance_km") == 0.0
    with pytest.raises(InvalidInput):
        require_number(0, "price_per_area_unit", positive=True)


def test_coerce_enum_reports_allowed_values():
    with pytest.raises(InvalidInput) as exc_info:
        coerce_enum(PropertyType, "castle", "property_type")

    assert exc_info.value.details["allowed"] == ["apartment", "house", "office"]


def test_windows_upper_floor_balcony_and_skylights():
    windows = WindowsInput(
        window_count=4,
        service_type=WindowsServiceType.INTERIOR,
        floor_level=FloorLevel.SECOND_PLUS,
        balcony_doors=1,
        skylights=2,
    )
    breakdown = calculate_windows_price(windows)

    # 4.0 * 0.6 + 1.0
    assert breakdown.price_per_window == pytest.approx(3.4)
    assert breakdown.windows_base == pytest.approx(13.6)
    assert breakdown.balcony_doors_total == pytest.approx(6.8)
    assert breakdown.skylights_total == pytest.approx(2 * (1.5 * 3.4 + 1.0))
    assert breakdown.base_price == pytest.approx(13.6 + 6.8 + 12.2)


def test_windows_minimum_applies_to_small_jobs():
    breakdown = calculate_windows_price(WindowsInput(window_count=2))

    assert breakdown.minimum_applied is True
    assert breakdown.base_price == 25


def test_windows_count_must_be_positive_integer():
    with pytest.raises(InvalidInput):
        calculate_windows_price(WindowsInput(window_count=0))
    with pytest.raises(InvalidInput):
        calculate_windows_price(WindowsInput(window_count=2.5))


def test_office_extras_and_multipliers():
    office = OfficeInput(
        property_size=100,
        office_type=OfficeType.MIXED,
        cleaning_time=CleaningTime.AFTER_HOURS,
        private_offices=3,
        common_areas=True,
        kitchenette=True,
        supplies=SuppliesOption.WE_PROVIDE,
        trash_removal=True,
        recycling_management=True,
    )
    breakdown = calculate_office_price(office)

    assert breakdown.office_base_price == pytest.approx(100 * 0.4 * 1.1 * 1.25)
    assert breakdown.private_offices_extra == 15
    assert breakdown.no_elevator_surcharge == 0
    assert breakdown.base_price == pytest.approx(55 + 15 + 15 + 15 + 10 + 5 + 5)


def test_office_single_floor_without_elevator_has_no_surcharge():
    breakdown = calculate_office_price(OfficeInput(property_size=300, elevator_access=False))
    assert breakdown.no_elevator_surcharge == 0


def test_office_minimum_price():
    breakdown = calculate_office_price(OfficeInput(property_size=20))

    assert breakdown.minimum_applied is True
    assert breakdown.base_price == 45


@pytest.mark.parametrize(
    ("table", "enum_cls"),
    [
        (PROPERTY_TYPE_MULTIPLIERS, PropertyType),
        (LAST_CLEANED_MULTIPLIERS, LastCleaned),
        (DAILY_RENTAL_RATE_PER_SQM, RentalBookingFrequency),
        (WINDOWS_SERVICE_TYPE_MULTIPLIERS, WindowsServiceType),
        (WINDOWS_FLOOR_SURCHARGES, FloorLevel),
        (OFFICE_TYPE_MULTIPLIERS, OfficeType),
        (OFFICE_CLEANING_TIME_MULTIPLIERS, CleaningTime),
        (OFFICE_SUPPLIES_RATE, SuppliesOption),
    ],
)
def test_rate_tables_cover_every_enum_member(table, enum_cls):
    assert set(table) == set(enum_cls)


def test_rate_tables_are_read_only():
    with pytest.raises(TypeError):
        PROPERTY_TYPE_MULTIPLIERS[PropertyType.HOUSE] = 2.0
