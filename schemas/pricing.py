from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from core.pricing_rules import QUOTE_MAX_PROPERTY_SIZE, QUOTE_MIN_PROPERTY_SIZE
from core.pricing_types import (
    IndoorExtra,
    OfficeInput,
    OutdoorService,
    PriceRequest,
    RentalFeatures,
    WindowsInput,
)
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


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class QuoteExtra(BaseModel):
    name: str
    price: float = Field(gt=0)
    quantity: Optional[float] = Field(default=None, gt=0)


class QuoteRequest(BaseModel):
    service_id: Optional[str] = None
    service_type: QuoteServiceType
    property_size: float = Field(ge=QUOTE_MIN_PROPERTY_SIZE, le=QUOTE_MAX_PROPERTY_SIZE)
    property_type: PropertyType
    bedrooms: Optional[int] = Field(default=None, ge=0, le=10)
    bathrooms: Optional[int] = Field(default=None, ge=0, le=5)
    frequency: Frequency = Frequency.ONE_TIME
    extras: List[QuoteExtra] = Field(default_factory=list)
    address: Optional[str] = None
    postal_code: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class IndoorExtraIn(BaseModel):
    id: str
    quantity: float = Field(ge=0)
    unit_price: float = Field(ge=0)


class OutdoorServiceIn(BaseModel):
    id: str
    area: float = Field(ge=0)
    price_per_unit: float = Field(ge=0)
    min_price: float = Field(default=0, ge=0)


class RentalFeaturesIn(BaseModel):
    turnaround_time: TurnaroundTime = TurnaroundTime.STANDARD
    laundry_service: bool = False
    supplies_refill: bool = False
    inventory_check: bool = False
    guest_welcome_setup: bool = False
    emergency_available: bool = False

    def to_core(self) -> RentalFeatures:
        return RentalFeatures(**self.model_dump())


class WindowsIn(BaseModel):
    window_count: int = Field(ge=1, le=200)
    service_type: WindowsServiceType = WindowsServiceType.BOTH
    floor_level: FloorLevel = FloorLevel.GROUND
    frames_cleaning: bool = False
    sills_cleaning: bool = False
    balcony_doors: int = Field(default=0, ge=0)
    skylights: int = Field(default=0, ge=0)
    distance_km: float = Field(default=0, ge=0)
    frequency: Frequency = Frequency.ONE_TIME

    def to_core(self) -> WindowsInput:
        return WindowsInput(**self.model_dump())


class OfficeIn(BaseModel):
    property_size: float = Field(gt=0)
    office_type: OfficeType = OfficeType.SINGLE
    cleaning_time: CleaningTime = CleaningTime.BUSINESS_HOURS
    private_offices: int = Field(default=0, ge=0)
    common_areas: bool = False
    bathrooms: int = Field(default=0, ge=0)
    kitchenette: bool = False
    floor_count: int = Field(default=1, ge=1)
    elevator_access: bool = True
    supplies: SuppliesOption = SuppliesOption.CLIENT_PROVIDED
    trash_removal: bool = False
    recycling_management: bool = False
    distance_km: float = Field(default=0, ge=0)
    frequency: OfficeFrequency = OfficeFrequency.ONE_TIME

    def to_core(self) -> OfficeInput:
        return OfficeInput(**self.model_dump())


class EnhancedPriceRequest(BaseModel):
    service_type: ServiceType
    property_type: PropertyType = PropertyType.APARTMENT
    property_size: float = Field(default=0, ge=0)
    price_per_area_unit: Optional[float] = Field(default=None, gt=0)
    indoor_extras: List[IndoorExtraIn] = Field(default_factory=list)
    outdoor_services: List[OutdoorServiceIn] = Field(default_factory=list)
    frequency: Frequency = Frequency.ONE_TIME
    rental_frequency: RentalBookingFrequency = RentalBookingFrequency.OCCASIONAL
    distance_km: float = Field(default=0, ge=0)
    rental_features: Optional[RentalFeaturesIn] = None
    booking_date: Optional[date] = None
    last_cleaned: Optional[LastCleaned] = None
    windows: Optional[WindowsIn] = None
    office: Optional[OfficeIn] = None

    @model_validator(mode="after")
    def validate_property_size(self):
        if self.service_type not in (ServiceType.WINDOWS, ServiceType.OFFICE) and self.property_size <= 0:
            raise ValueError("property_size must be greater than zero for area priced services")
        return self

    def to_price_request(self) -> PriceRequest:
        return PriceRequest(
            service_type=self.service_type,
            property_type=self.property_type,
            property_size=self.property_size,
            price_per_area_unit=self.price_per_area_unit,
            indoor_extras=tuple(IndoorExtra(**extra.model_dump()) for extra in self.indoor_extras),
            outdoor_services=tuple(OutdoorService(**service.model_dump()) for service in self.outdoor_services),
            frequency=self.frequency,
            rental_frequency=self.rental_frequency,
            distance_km=self.distance_km,
            rental_features=self.rental_features.to_core() if self.rental_features else None,
            booking_date=self.booking_date,
            last_cleaned=self.last_cleaned,
            windows=self.windows.to_core() if self.windows else None,
            office=self.office.to_core() if self.office else None,
        )


class DistanceRequest(BaseModel):
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    coordinates: Optional[Coordinates] = None

    @model_validator(mode="after")
    def validate_location_given(self):
        if self.coordinates is None and not (self.postal_code or "").strip() and not (self.address or "").strip():
            raise ValueError("one of coordinates, postal_code or address is required")
        return self
