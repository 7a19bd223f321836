"""Quote endpoints.

Provides REST endpoints for:
- Computing a full stay quote
- Looking up resolved base nightly rates for a stay

All amounts are integer cents of the campground's currency.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from campquote.models import Quote, QuoteRequest, StayWindow
from campquote.services.config_store import SnapshotLoader
from campquote.services.quotes import QuoteService
from campquote.services.rates import RateResolver
from campquote_api.dependencies import get_quote_service, get_snapshot_loader
from campquote_api.models.quotes import NightlyBaseRate, NightlyRatesResponse

router = APIRouter(tags=["quotes"])


@router.post(
    "/quotes",
    summary="Compute a stay quote",
    description="""
Compute the full price breakdown for a prospective stay.

Applies base rates, pricing rules, discounts (membership, then promotion
code, then referral code), taxes and the deposit policy.

**Notes:**
- Invalid or exhausted codes do not fail the request; they are listed in
  `rejected_discounts` with a reason
- When a tax exemption needs a signed waiver, `tax_waiver_required` is
  true and `tax_waiver_text` holds the text to present. Re-request with
  `tax_waiver_signed=true` once the guest signs
- Quoting never changes promotion usage counts
""",
    response_description="Immutable quote breakdown",
    response_model=Quote,
    responses={
        400: {"description": "Departure is not after arrival"},
        404: {"description": "Campground, site or site class not found"},
        422: {"description": "Invalid request, or no rate configured for a night"},
    },
)
async def create_quote(
    request: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    """Compute a quote for the requested stay."""
    if request.as_of is None:
        request = request.model_copy(update={"as_of": dt.date.today()})
    return service.quote_for_request(request)


@router.get(
    "/campgrounds/{campground_id}/rates",
    summary="Get base nightly rates",
    description="""
Resolve the base nightly rate for each night of a stay, before pricing
rules and discounts.

Give either `site_id` or `site_class_id`. Site-specific seasonal rates
outrank site-class seasonal rates, which outrank the site-class default.
""",
    response_model=NightlyRatesResponse,
    responses={
        400: {"description": "Departure is not after arrival"},
        404: {"description": "Campground, site or site class not found"},
        422: {"description": "No rate configured for a night"},
    },
)
async def get_nightly_rates(
    campground_id: str,
    arrival: dt.date = Query(..., description="Arrival date (YYYY-MM-DD)"),
    departure: dt.date = Query(..., description="Departure date (exclusive)"),
    site_id: str | None = Query(default=None, description="Specific site"),
    site_class_id: str | None = Query(default=None, description="Site class"),
    loader: SnapshotLoader = Depends(get_snapshot_loader),
) -> NightlyRatesResponse:
    """Resolve base nightly rates for a stay."""
    stay = StayWindow(arrival=arrival, departure=departure)
    snapshot = loader.load(campground_id)
    resolver = RateResolver(snapshot)
    resolved_class = resolver.resolve_site_class(site_id=site_id, site_class_id=site_class_id)
    rates = resolver.resolve(stay, resolved_class, site_id)

    return NightlyRatesResponse(
        campground_id=campground_id,
        site_class_id=resolved_class,
        currency=snapshot.campground.currency,
        nights=[
            NightlyBaseRate(date=n.date, rate_cents=n.rate_cents, source=n.source)
            for n in rates.nights
        ],
        base_subtotal_cents=rates.base_subtotal_cents,
    )
