from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from schemas.imports import (
    CleaningTime,
    DistanceFeeSchedule,
    FloorLevel,
    Frequency,
    LastCleaned,
    OfficeFrequency,
    OfficeType,
    PropertyType,
    RentalBookingFrequency,
    ServiceType,
    SuppliesOption,
    TurnaroundTime,
    WindowsServiceType,
)


def round_currency(value: float, places: int = 2) -> float:
    """Round half up, the way the booking UI rounds euro amounts."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class IndoorExtra:
    id: str
    quantity: float
    unit_price: float


@dataclass(frozen=True)
class OutdoorService:
    id: str
    area: float
    price_per_unit: float
    min_price: float = 0.0


@dataclass(frozen=True)
class RentalFeatures:
    turnaround_time: TurnaroundTime = TurnaroundTime.STANDARD
    laundry_service: bool = False
    supplies_refill: bool = False
    inventory_check: bool = False
    guest_welcome_setup: bool = False
    emergency_available: bool = False


@dataclass(frozen=True)
class WindowsInput:
    window_count: int
    service_type: WindowsServiceType = WindowsServiceType.BOTH
    floor_level: FloorLevel = FloorLevel.GROUND
    frames_cleaning: bool = False
    sills_cleaning: bool = False
    balcony_doors: int = 0
    skylights: int = 0
    distance_km: float = 0.0
    frequency: Frequency = Frequency.ONE_TIME


@dataclass(frozen=True)
class OfficeInput:
    property_size: float
    office_type: OfficeType = OfficeType.SINGLE
    cleaning_time: CleaningTime = CleaningTime.BUSINESS_HOURS
    private_offices: int = 0
    common_areas: bool = False
    bathrooms: int = 0
    kitchenette: bool = False
    floor_count: int = 1
    elevator_access: bool = True
    supplies: SuppliesOption = SuppliesOption.CLIENT_PROVIDED
    trash_removal: bool = False
    recycling_management: bool = False
    distance_km: float = 0.0
    frequency: OfficeFrequency = OfficeFrequency.ONE_TIME


@dataclass(frozen=True)
class PriceRequest:
    service_type: ServiceType
    property_type: PropertyType = PropertyType.APARTMENT
    property_size: float = 0.0
    # None selects the catalogue rate for the service type.
    price_per_area_unit: float | None = None
    indoor_extras: tuple[IndoorExtra, ...] = ()
    outdoor_services: tuple[OutdoorService, ...] = ()
    frequency: Frequency = Frequency.ONE_TIME
    rental_frequency: RentalBookingFrequency = RentalBookingFrequency.OCCASIONAL
    distance_km: float = 0.0
    rental_features: RentalFeatures | None = None
    booking_date: date | None = None
    last_cleaned: LastCleaned | None = None
    windows: WindowsInput | None = None
    office: OfficeInput | None = None


@dataclass(frozen=True)
class BasePriceResult:
    base_price: float
    effective_area: float
    property_type_multiplier: float
    price_per_area_unit: float
    minimum_price: float
    minimum_applied: bool
    last_cleaned_multiplier: float | None = None


@dataclass(frozen=True)
class WindowsBreakdown:
    price_per_window: float
    windows_base: float
    balcony_doors_total: float
    skylights_total: float
    frames_total: float
    sills_total: float
    minimum_applied: bool
    base_price: float


@dataclass(frozen=True)
class OfficeBreakdown:
    office_base_price: float
    office_type_multiplier: float
    time_multiplier: float
    private_offices_extra: float
    common_areas_extra: float
    bathrooms_extra: float
    kitchenette_extra: float
    supplies_extra: float
    trash_extra: float
    recycling_extra: float
    no_elevator_surcharge: float
    minimum_applied: bool
    base_price: float


@dataclass(frozen=True)
class IndoorExtraLine:
    id: str
    quantity: float
    unit_price: float
    total: float


@dataclass(frozen=True)
class OutdoorServiceLine:
    id: str
    area: float
    price_per_unit: float
    total: float
    min_price_applied: bool


@dataclass(frozen=True)
class PriceBreakdown:
    service_type: ServiceType
    base_price: float
    property_type_multiplier: float
    effective_area: float
    distance_fee: float
    distance_fee_schedule: DistanceFeeSchedule
    subtotal_pre_surcharge: float
    weekend_surcharge: float
    holiday_surcharge: float
    frequency_discount_percent: float
    frequency_discount: float
    subtotal: float
    net_amount: float
    vat_amount: float
    total: float
    indoor_extras: tuple[IndoorExtraLine, ...] = ()
    outdoor_services: tuple[OutdoorServiceLine, ...] = ()
    indoor_extras_total: float = 0.0
    outdoor_services_total: float = 0.0
    rental_adjustment: float = 0.0
    rental_features: RentalFeatures | None = None
    last_cleaned_multiplier: float | None = None
    minimum_applied: bool = False
    windows: WindowsBreakdown | None = None
    office: OfficeBreakdown | None = None

    @property
    def total_rounded(self) -> int:
        return int(round_currency(self.total, 0))

    def to_dict(self) -> dict[str, Any]:
        money = round_currency
        payload: dict[str, Any] = {
            "service_type": self.service_type.value,
            "base_price": money(self.base_price),
            "property_type_multiplier": self.property_type_multiplier,
            "effective_area": money(self.effective_area),
            "last_cleaned_multiplier": self.last_cleaned_multiplier,
            "minimum_applied": self.minimum_applied,
            "indoor_extras": {
                line.id: {
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "total": money(line.total),
                }
                for line in self.indoor_extras
            },
            "outdoor_services": {
                line.id: {
                    "area": line.area,
                    "price_per_unit": line.price_per_unit,
                    "total": money(line.total),
                    "min_price_applied": line.min_price_applied,
                }
                for line in self.outdoor_services
            },
            "indoor_extras_total": money(self.indoor_extras_total),
            "outdoor_services_total": money(self.outdoor_services_total),
            "rental_adjustment": money(self.rental_adjustment),
            "distance_fee": money(self.distance_fee),
            "distance_fee_schedule": self.distance_fee_schedule.value,
            "subtotal_pre_surcharge": money(self.subtotal_pre_surcharge),
            "weekend_surcharge": money(self.weekend_surcharge),
            "holiday_surcharge": money(self.holiday_surcharge),
            "frequency_discount_percent": self.frequency_discount_percent,
            "frequency_discount": money(self.frequency_discount),
            "subtotal": money(self.subtotal),
            "net_amount": money(self.net_amount),
            "vat_amount": money(self.vat_amount),
            "total": money(self.total),
            "total_rounded": self.total_rounded,
        }
        if self.windows is not None:
            payload["windows"] = {
                "price_per_window": money(self.windows.price_per_window),
                "windows_base": money(self.windows.windows_base),
                "balcony_doors_total": money(self.windows.balcony_doors_total),
                "skylights_total": money(self.windows.skylights_total),
                "frames_total": money(self.windows.frames_total),
                "sills_total": money(self.windows.sills_total),
                "minimum_applied": self.windows.minimum_applied,
            }
        if self.office is not None:
            payload["office"] = {
                "office_base_price": money(self.office.office_base_price),
                "office_type_multiplier": self.office.office_type_multiplier,
                "time_multiplier": self.office.time_multiplier,
                "private_offices_extra": money(self.office.private_offices_extra),
                "common_areas_extra": money(self.office.common_areas_extra),
                "bathrooms_extra": money(self.office.bathrooms_extra),
                "kitchenette_extra": money(self.office.kitchenette_extra),
                "supplies_extra": money(self.office.supplies_extra),
                "trash_extra": money(self.office.trash_extra),
                "recycling_extra": money(self.office.recycling_extra),
                "no_elevator_surcharge": money(self.office.no_elevator_surcharge),
                "minimum_applied": self.office.minimum_applied,
            }
        return payload
