from __future__ import annotations

from typing import Any

from core.pricing_rules import (
    INDOOR_EXTRAS_CATALOG,
    OUTDOOR_SERVICES_CATALOG,
    RENTAL_FEATURE_SURCHARGES,
    TURNAROUND_PRICE_ADJUSTMENT,
)
from core.pricing_types import PriceBreakdown, round_currency
from schemas.imports import PropertyType, ServiceType

SERVICE_LABELS_HR = {
    ServiceType.REGULAR: "Redovno čišćenje",
    ServiceType.STANDARD: "Standardno čišćenje",
    ServiceType.DEEP: "Dubinsko čišćenje",
    ServiceType.POST_RENOVATION: "Čišćenje nakon renovacije",
    ServiceType.MOVE_IN_OUT: "Čišćenje pri useljenju/iseljenju",
    ServiceType.DAILY_RENTAL: "Jednodnevni najam",
    ServiceType.VACATION_RENTAL: "Dubinsko čišćenje najma",
    ServiceType.WINDOWS: "Pranje prozora",
    ServiceType.OFFICE: "Čišćenje ureda",
}

PROPERTY_LABELS_HR = {
    PropertyType.APARTMENT: "Stan",
    PropertyType.HOUSE: "Kuća",
    PropertyType.OFFICE: "Ured",
}

RENTAL_FEATURE_LABELS_HR = {
    "laundry_service": "Pranje posteljine",
    "supplies_refill": "Dopuna potrepština",
    "inventory_check": "Provjera inventara",
    "guest_welcome_setup": "Priprema dobrodošlice",
    "emergency_available": "24/7 Hitna dostupnost",
}

_EXTRA_NAMES = {item["id"]: item["name"] for item in INDOOR_EXTRAS_CATALOG}
_OUTDOOR_NAMES = {item["id"]: item["name"] for item in OUTDOOR_SERVICES_CATALOG}


def format_eur(amount: float) -> str:
    value = round_currency(amount)
    if value == int(value):
        return f"{int(value)} EUR"
    return f"{value:.2f} EUR".replace(".", ",")


def _line(kind: str, label: str, amount: float, detail: str | None = None) -> dict[str, Any]:
    return {"kind": kind, "label": label, "amount": round_currency(amount), "detail": detail}


def build_line_items(breakdown: PriceBreakdown) -> list[dict[str, Any]]:
    """Ordered rows for the quote table shown next to the booking wizard."""
    service_label = SERVICE_LABELS_HR.get(breakdown.service_type, breakdown.service_type.value)
    if breakdown.windows is not None:
        base_detail = f"{breakdown.effective_area:g} × {format_eur(breakdown.windows.price_per_window)}"
    elif breakdown.office is not None:
        base_detail = f"{breakdown.effective_area:g} m²"
    else:
        base_detail = f"{round_currency(breakdown.effective_area):g} m² efektivno"
    if breakdown.minimum_applied:
        base_detail += ", minimalna cijena"

    items = [_line("base", service_label, breakdown.base_price, base_detail)]

    if breakdown.rental_features is not None:
        turnaround = breakdown.rental_features.turnaround_time
        adjustment = TURNAROUND_PRICE_ADJUSTMENT[turnaround]
        if adjustment:
            items.append(_line("rental", f"Vrijeme izvršenja ({turnaround.value})", adjustment))
        for feature in RENTAL_FEATURE_SURCHARGES:
            if getattr(breakdown.rental_features, feature):
                items.append(_line("rental", RENTAL_FEATURE_LABELS_HR[feature], RENTAL_FEATURE_SURCHARGES[feature]))

    for extra in breakdown.indoor_extras:
        name = _EXTRA_NAMES.get(extra.id, extra.id)
        items.append(
            _line("extra", f"{name} ({extra.quantity:g}x)", extra.total, f"{extra.quantity:g} × {format_eur(extra.unit_price)}")
        )

    for service in breakdown.outdoor_services:
        name = _OUTDOOR_NAMES.get(service.id, service.id)
        detail = f"{service.area:g} × {format_eur(service.price_per_unit)}"
        if service.min_price_applied:
            detail += ", minimalna cijena"
        items.append(_line("outdoor", name, service.total, detail))

    if breakdown.distance_fee > 0:
        items.append(_line("fee", "Naknada za udaljenost", breakdown.distance_fee))
    if breakdown.weekend_surcharge > 0:
        items.append(_line("fee", "Vikend dodatak (20%)", breakdown.weekend_surcharge))
    if breakdown.holiday_surcharge > 0:
        items.append(_line("fee", "Blagdanski dodatak (30%)", breakdown.holiday_surcharge))
    if breakdown.frequency_discount > 0:
        items.append(
            _line("discount", f"Popust za redovitost (-{breakdown.frequency_discount_percent:g}%)", -breakdown.frequency_discount)
        )

    items.append(_line("net", "Iznos bez PDV-a", breakdown.net_amount))
    # VAT is carried inside the gross price; the share is 20 % of gross.
    items.append(_line("vat", "PDV (uključen u cijenu)", breakdown.vat_amount))
    items.append(_line("total", "Ukupno", breakdown.total_rounded))
    return items


def property_size_category(size: float) -> str:
    if size <= 40:
        return "Studio/Garsonijera"
    if size <= 60:
        return "Jednosoban stan"
    if size <= 80:
        return "Dvosoban stan"
    if size <= 100:
        return "Trosoban stan"
    if size <= 150:
        return "Četverosoban stan"
    return "Velika nekretnina"


def estimated_duration(property_size: float, service_type: ServiceType | str) -> str:
    service = ServiceType(service_type) if not isinstance(service_type, ServiceType) else service_type
    hours = 2
    if service in (ServiceType.DEEP, ServiceType.VACATION_RENTAL):
        hours = 4
    elif service == ServiceType.POST_RENOVATION:
        hours = 6
    elif service == ServiceType.DAILY_RENTAL:
        hours = 3

    for threshold in (60, 100, 150):
        if property_size > threshold:
            hours += 1

    if hours < 5:
        return f"{hours} sata"
    return f"{hours} sati"


def format_quote_summary(breakdown: PriceBreakdown, property_type: PropertyType | None = None) -> dict[str, Any]:
    summary = {
        "line_items": build_line_items(breakdown),
        "total_label": f"Ukupno: {format_eur(breakdown.total_rounded)}",
    }
    if breakdown.windows is None and breakdown.office is None and property_type is not None:
        summary["property_label"] = PROPERTY_LABELS_HR[property_type]
        if breakdown.property_type_multiplier != 1:
            summary["property_label"] += f" (+{(breakdown.property_type_multiplier - 1) * 100:.0f}%)"
    return summary
