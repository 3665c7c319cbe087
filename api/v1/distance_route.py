import logging

from fastapi import APIRouter, Depends, Request

from core.rate_limits import RateLimitDecision, rate_limit
from core.response_envelope import document_response
from schemas.pricing import DistanceRequest
from services.distance_service import resolve_distance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/distance", tags=["Distance"])


@router.post("")
@document_response(
    message="Udaljenost izračunata",
    success_example={
        "distance_km": 14.2,
        "free_radius_km": 10.0,
        "billable_distance_km": 4.2,
        "fee_per_km": 0.5,
        "total_fee": 2.1,
        "location": "Sesvete",
        "source": "postal_code",
        "within_service_area": True,
        "max_service_distance_km": 50.0,
    },
)
async def calculate_distance(
    request: Request,
    payload: DistanceRequest,
    _limit: RateLimitDecision = Depends(rate_limit("distance")),
):
    resolution = await resolve_distance(
        coordinates=payload.coordinates,
        postal_code=payload.postal_code,
        address=payload.address,
        city=payload.city,
    )
    if not resolution.within_service_area:
        logger.info("Location %s is outside the service area (%.1f km)", resolution.location, resolution.distance_km)
    return resolution.to_dict()
