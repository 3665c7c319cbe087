from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from schemas.imports import (
    CleaningTime,
    FloorLevel,
    Frequency,
    LastCleaned,
    OfficeFrequency,
    OfficeType,
    PropertyType,
    QuoteServiceType,
    RentalBookingFrequency,
    ServiceType,
    SuppliesOption,
    TurnaroundTime,
    WindowsServiceType,
)

# All amounts are EUR, gross (VAT included).

PROPERTY_TYPE_MULTIPLIERS: Mapping[PropertyType, float] = MappingProxyType(
    {
        PropertyType.APARTMENT: 1.0,
        PropertyType.HOUSE: 1.15,
        PropertyType.OFFICE: 1.1,
    }
)

SERVICE_RATES_PER_SQM: Mapping[ServiceType, float] = MappingProxyType(
    {
        ServiceType.REGULAR: 0.8,
        ServiceType.STANDARD: 1.0,
        ServiceType.DEEP: 3.0,
        ServiceType.POST_RENOVATION: 5.0,
        ServiceType.MOVE_IN_OUT: 4.0,
        ServiceType.DAILY_RENTAL: 0.75,
        ServiceType.VACATION_RENTAL: 3.0,
    }
)

REGULAR_MINIMUM_PRICE: float = 30.0
DEFAULT_MINIMUM_PRICE: float = 40.0

FREQUENCY_DISCOUNT_PERCENT: Mapping[Frequency, float] = MappingProxyType(
    {
        Frequency.ONE_TIME: 0,
        Frequency.WEEKLY: 10,
        Frequency.BIWEEKLY: 5,
        Frequency.MONTHLY: 3,
    }
)

OFFICE_FREQUENCY_DISCOUNT_PERCENT: Mapping[OfficeFrequency, float] = MappingProxyType(
    {
        OfficeFrequency.ONE_TIME: 0,
        OfficeFrequency.DAILY: 20,
        OfficeFrequency.WEEKLY: 15,
        OfficeFrequency.BIWEEKLY: 10,
        OfficeFrequency.MONTHLY: 5,
    }
)

DAILY_RENTAL_RATE_PER_SQM: Mapping[RentalBookingFrequency, float] = MappingProxyType(
    {
        RentalBookingFrequency.VERY_FREQUENT: 0.5,
        RentalBookingFrequency.FREQUENT: 0.8,
        RentalBookingFrequency.OCCASIONAL: 1.0,
    }
)

LAST_CLEANED_MULTIPLIERS: Mapping[LastCleaned, float] = MappingProxyType(
    {
        LastCleaned.UNDER_1_MONTH: 1.0,
        LastCleaned.ONE_TO_3_MONTHS: 1.15,
        LastCleaned.THREE_TO_6_MONTHS: 1.30,
        LastCleaned.SIX_TO_12_MONTHS: 1.50,
        LastCleaned.OVER_12_MONTHS: 1.75,
        LastCleaned.NEVER: 1.75,
    }
)
LAST_CLEANED_SERVICE_TYPES = frozenset({ServiceType.STANDARD, ServiceType.DEEP})

TURNAROUND_PRICE_ADJUSTMENT: Mapping[TurnaroundTime, float] = MappingProxyType(
    {
        TurnaroundTime.URGENT: 30,
        TurnaroundTime.STANDARD: 0,
        TurnaroundTime.SAME_DAY: -5,
        TurnaroundTime.FLEXIBLE: -10,
    }
)

RENTAL_FEATURE_SURCHARGES: Mapping[str, float] = MappingProxyType(
    {
        "laundry_service": 20,
        "supplies_refill": 15,
        "inventory_check": 10,
        "guest_welcome_setup": 10,
        "emergency_available": 50,
    }
)

WEEKEND_SURCHARGE_RATE: float = 0.20
HOLIDAY_SURCHARGE_RATE: float = 0.30

# Share of the gross total that is VAT: 25 % on net equals 20 % of gross.
VAT_SHARE_OF_GROSS: float = 0.20

# Catalogue of quantity based indoor extras shown in the booking wizard.
INDOOR_EXTRAS_CATALOG: tuple[dict, ...] = (
    {"id": "windows", "name": "Pranje prozora", "price_per_unit": 7, "unit": "prozor", "default_quantity": 5, "max_quantity": 30},
    {"id": "oven", "name": "Čišćenje pećnice", "price_per_unit": 30, "unit": "pećnica", "default_quantity": 1, "max_quantity": 3},
    {"id": "fridge", "name": "Čišćenje hladnjaka", "price_per_unit": 30, "unit": "hladnjak", "default_quantity": 1, "max_quantity": 3},
    {"id": "balcony", "name": "Čišćenje balkona", "price_per_unit": 30, "unit": "balkon", "default_quantity": 1, "max_quantity": 5},
    {"id": "ironing", "name": "Glačanje", "price_per_unit": 15, "unit": "sat", "default_quantity": 1, "max_quantity": 8},
    {"id": "cabinet_interior", "name": "Čišćenje unutrašnjosti ormara", "price_per_unit": 20, "unit": "ormar", "default_quantity": 2, "max_quantity": 10},
)

OUTDOOR_SERVICES_CATALOG: tuple[dict, ...] = (
    {"id": "lawn_mowing", "name": "Košnja travnjaka", "price_per_unit": 0.5, "min_price": 30, "unit": "m²"},
    {"id": "garden_maintenance", "name": "Održavanje vrta", "price_per_unit": 0.8, "min_price": 50, "unit": "m²"},
    {"id": "leaf_removal", "name": "Uklanjanje lišća", "price_per_unit": 0.3, "min_price": 25, "unit": "m²"},
    {"id": "hedge_trimming", "name": "Šišanje živice", "price_per_unit": 5, "min_price": 40, "unit": "m"},
)

# Distance fee schedules, measured from the Zagreb reference point.
FREE_DISTANCE_KM: float = 10.0
TIERED_DISTANCE_FEES: tuple[tuple[float, float], ...] = (
    (10.0, 0.0),
    (20.0, 25.0),
    (30.0, 50.0),
)
TIERED_DISTANCE_FEE_BEYOND: float = 75.0
LINEAR_DISTANCE_FEE_PER_KM: float = 0.5

WINDOWS_BASE_PER_WINDOW: float = 4.0
WINDOWS_SERVICE_TYPE_MULTIPLIERS: Mapping[WindowsServiceType, float] = MappingProxyType(
    {
        WindowsServiceType.INTERIOR: 0.6,
        WindowsServiceType.EXTERIOR: 0.6,
        WindowsServiceType.BOTH: 1.0,
    }
)
WINDOWS_FLOOR_SURCHARGES: Mapping[FloorLevel, float] = MappingProxyType(
    {
        FloorLevel.GROUND: 0.0,
        FloorLevel.FIRST: 0.5,
        FloorLevel.SECOND_PLUS: 1.0,
    }
)
WINDOWS_BALCONY_DOOR_MULTIPLIER: float = 2.0
WINDOWS_SKYLIGHT_MULTIPLIER: float = 1.5
WINDOWS_FRAMES_PER_WINDOW: float = 1.5
WINDOWS_SILLS_PER_WINDOW: float = 1.0
WINDOWS_MINIMUM_PRICE: float = 25.0

OFFICE_BASE_RATE_PER_SQM: float = 0.4
OFFICE_TYPE_MULTIPLIERS: Mapping[OfficeType, float] = MappingProxyType(
    {
        OfficeType.SINGLE: 1.0,
        OfficeType.OPEN_PLAN: 0.9,
        OfficeType.MIXED: 1.1,
    }
)
OFFICE_CLEANING_TIME_MULTIPLIERS: Mapping[CleaningTime, float] = MappingProxyType(
    {
        CleaningTime.BUSINESS_HOURS: 1.0,
        CleaningTime.AFTER_HOURS: 1.25,
        CleaningTime.WEEKEND: 1.5,
    }
)
OFFICE_PRIVATE_OFFICE_RATE: float = 5.0
OFFICE_COMMON_AREAS_RATE: float = 15.0
OFFICE_BATHROOM_RATE: float = 10.0
OFFICE_KITCHENETTE_RATE: float = 15.0
OFFICE_SUPPLIES_RATE: Mapping[SuppliesOption, float] = MappingProxyType(
    {
        SuppliesOption.CLIENT_PROVIDED: 0.0,
        SuppliesOption.WE_PROVIDE: 10.0,
    }
)
OFFICE_TRASH_RATE: float = 5.0
OFFICE_RECYCLING_RATE: float = 5.0
OFFICE_NO_ELEVATOR_SURCHARGE_RATE: float = 0.10
OFFICE_MINIMUM_PRICE: float = 45.0

# Tables behind the simple POST /price quote.
QUOTE_BASE_RATES: Mapping[QuoteServiceType, float] = MappingProxyType(
    {
        QuoteServiceType.REGULAR: 0.8,
        QuoteServiceType.DEEP: 1.5,
        QuoteServiceType.CONSTRUCTION: 2.0,
        QuoteServiceType.MOVING: 1.2,
        QuoteServiceType.WINDOWS: 0.6,
        QuoteServiceType.OFFICE: 0.7,
        QuoteServiceType.GENERAL: 0.8,
        QuoteServiceType.DISINFECTION: 1.0,
    }
)
QUOTE_MINIMUM_PRICES: Mapping[QuoteServiceType, float] = MappingProxyType(
    {
        QuoteServiceType.REGULAR: 40,
        QuoteServiceType.DEEP: 60,
        QuoteServiceType.CONSTRUCTION: 100,
        QuoteServiceType.MOVING: 80,
        QuoteServiceType.WINDOWS: 30,
        QuoteServiceType.OFFICE: 50,
        QuoteServiceType.GENERAL: 40,
        QuoteServiceType.DISINFECTION: 50,
    }
)
QUOTE_FREQUENCY_DISCOUNT_PERCENT: Mapping[Frequency, float] = MappingProxyType(
    {
        Frequency.ONE_TIME: 0,
        Frequency.WEEKLY: 15,
        Frequency.BIWEEKLY: 10,
        Frequency.MONTHLY: 5,
    }
)
QUOTE_MIN_PROPERTY_SIZE: float = 10
QUOTE_MAX_PROPERTY_SIZE: float = 500
QUOTE_EXTRAS_CATALOG: tuple[dict, ...] = (
    {"id": "balcony_cleaning", "name": "Čišćenje balkona", "price": 15},
    {"id": "inside_oven", "name": "Čišćenje pećnice iznutra", "price": 20},
    {"id": "inside_fridge", "name": "Čišćenje hladnjaka iznutra", "price": 15},
    {"id": "ironing", "name": "Glačanje", "price": 20},
    {"id": "window_blinds", "name": "Čišćenje roletni", "price": 25},
    {"id": "pet_hair_removal", "name": "Uklanjanje dlaka kućnih ljubimaca", "price": 15},
    {"id": "laundry", "name": "Pranje rublja", "price": 15},
)
