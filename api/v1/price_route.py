import logging

from fastapi import APIRouter, Depends, Query, Request

from core.holidays import generate_available_dates, is_croatian_public_holiday, is_weekend
from core.rate_limits import RateLimitDecision, rate_limit
from core.response_envelope import document_response
from schemas.imports import ServiceType
from schemas.pricing import EnhancedPriceRequest, QuoteRequest
from services.price_formatter import estimated_duration, format_quote_summary, property_size_category
from services.pricing_service import calculate_price, calculate_quote, pricing_options, quote_extras

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/price", tags=["Pricing"])

QUOTE_EXAMPLE = {
    "base_price": 60.0,
    "property_multiplier": 1.0,
    "frequency_discount": {"percentage": 15, "amount": 9.0},
    "price_after_discount": 51.0,
    "extras_cost": 0.0,
    "distance_fee": 0.0,
    "distance_fee_schedule": "linear",
    "total_price": 51.0,
}


@router.post("")
@document_response(message="Cijena izračunata", success_example=QUOTE_EXAMPLE)
async def create_quote(
    request: Request,
    payload: QuoteRequest,
    _limit: RateLimitDecision = Depends(rate_limit("price")),
):
    quote = calculate_quote(payload)
    logger.info(
        "Quote %s %sm2 %s -> %.2f EUR",
        payload.service_type.value,
        payload.property_size,
        payload.frequency.value,
        quote["total_price"],
    )
    return quote


@router.post("/enhanced")
@document_response(message="Cijena izračunata")
async def create_enhanced_quote(
    request: Request,
    payload: EnhancedPriceRequest,
    _limit: RateLimitDecision = Depends(rate_limit("price")),
):
    breakdown = calculate_price(payload.to_price_request())
    logger.info("Enhanced price %s -> %.2f EUR", breakdown.service_type.value, breakdown.total)
    result = {"breakdown": breakdown.to_dict(), **format_quote_summary(breakdown, payload.property_type)}

    if payload.service_type != ServiceType.WINDOWS:
        size = payload.office.property_size if payload.office is not None else payload.property_size
        result["property_size_category"] = property_size_category(size)
        result["estimated_duration"] = estimated_duration(size, payload.service_type)
    return result


@router.get("/options")
@document_response(message="Cjenik dohvaćen")
async def list_price_options(request: Request):
    return pricing_options()


@router.get("/extras")
@document_response(
    message="Dodatne usluge dohvaćene",
    success_example=[{"id": "inside_oven", "name": "Čišćenje pećnice iznutra", "price": 20}],
)
async def list_quote_extras(request: Request):
    return quote_extras()


@router.get("/available-dates")
@document_response(message="Slobodni termini dohvaćeni", success_example=[])
async def list_available_dates(
    request: Request,
    days_ahead: int = Query(default=30, ge=1, le=90, description="How many days ahead to list."),
):
    return [
        {
            "date": day.isoformat(),
            "weekday": day.strftime("%A"),
            "is_weekend": is_weekend(day),
            "is_holiday": is_croatian_public_holiday(day),
        }
        for day in generate_available_dates(days_ahead)
    ]
