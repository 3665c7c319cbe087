from enum import Enum


class ServiceType(str, Enum):
    REGULAR = "regular"
    STANDARD = "standard"
    DEEP = "deep"
    POST_RENOVATION = "post-renovation"
    MOVE_IN_OUT = "move-in-out"
    DAILY_RENTAL = "daily_rental"
    VACATION_RENTAL = "vacation_rental"
    WINDOWS = "windows"
    OFFICE = "office"


RENTAL_SERVICE_TYPES = frozenset({ServiceType.DAILY_RENTAL, ServiceType.VACATION_RENTAL})


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    OFFICE = "office"


class Frequency(str, Enum):
    ONE_TIME = "one-time"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class OfficeFrequency(str, Enum):
    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class RentalBookingFrequency(str, Enum):
    VERY_FREQUENT = "very-frequent"
    FREQUENT = "frequent"
    OCCASIONAL = "occasional"


class LastCleaned(str, Enum):
    UNDER_1_MONTH = "under_1_month"
    ONE_TO_3_MONTHS = "1_3_months"
    THREE_TO_6_MONTHS = "3_6_months"
    SIX_TO_12_MONTHS = "6_12_months"
    OVER_12_MONTHS = "over_12_months"
    NEVER = "never"


class TurnaroundTime(str, Enum):
    URGENT = "2-3h"
    STANDARD = "4-6h"
    SAME_DAY = "same-day"
    FLEXIBLE = "flexible"


class WindowsServiceType(str, Enum):
    INTERIOR = "interior"
    EXTERIOR = "exterior"
    BOTH = "both"


class FloorLevel(str, Enum):
    GROUND = "ground"
    FIRST = "first"
    SECOND_PLUS = "second_plus"


class OfficeType(str, Enum):
    SINGLE = "single"
    OPEN_PLAN = "open_plan"
    MIXED = "mixed"


class CleaningTime(str, Enum):
    BUSINESS_HOURS = "business_hours"
    AFTER_HOURS = "after_hours"
    WEEKEND = "weekend"


class SuppliesOption(str, Enum):
    CLIENT_PROVIDED = "client_provided"
    WE_PROVIDE = "we_provide"


class DistanceFeeSchedule(str, Enum):
    TIERED = "tiered"
    LINEAR = "linear"


class QuoteServiceType(str, Enum):
    REGULAR = "regular"
    DEEP = "deep"
    CONSTRUCTION = "construction"
    MOVING = "moving"
    WINDOWS = "windows"
    OFFICE = "office"
    GENERAL = "general"
    DISINFECTION = "disinfection"
