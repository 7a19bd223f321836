"""Booking-confirmation redemption endpoint.

Called by the booking flow once a reservation is confirmed. This is the
only route that changes promotion and referral usage counts.
"""

from fastapi import APIRouter, Depends

from campquote.models import RedemptionRequest, RedemptionResult
from campquote.services.redemption import RedemptionService
from campquote_api.dependencies import get_redemption_service

router = APIRouter(tags=["redemptions"])


@router.post(
    "/redemptions",
    summary="Record discount usage for a confirmed booking",
    description="""
Increment promotion and referral usage for a confirmed booking.

Idempotent per `booking_id`: repeating the call returns the stored
redemption with `duplicate=true` and leaves the counters unchanged.
""",
    response_model=RedemptionResult,
    responses={
        409: {"description": "Promotion usage limit reached or promotion inactive"},
    },
)
async def redeem(
    request: RedemptionRequest,
    service: RedemptionService = Depends(get_redemption_service),
) -> RedemptionResult:
    return service.redeem(request)
