"""Quote assembly and the quoting entry point.

The pipeline runs synchronously over an immutable PricingSnapshot:
rates -> pricing rules -> discounts -> taxes -> deposit -> Quote.
Nothing here writes to storage; usage counters are only changed by
RedemptionService at booking confirmation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from campquote.models import (
    DepositBreakdown,
    NightlyRate,
    PolicyDocument,
    PolicyRequirement,
    PricingSnapshot,
    Quote,
    QuoteError,
    QuoteRequest,
    StayWindow,
)
from campquote.utils.logging import get_logger, log_quote_operation

from .deposits import DepositCalculator, resolve_deposit_policy
from .discounts import DiscountContext, DiscountEngine, DiscountResult
from .pricing_rules import PricingRuleEngine, RuleEvaluation
from .rates import RateResolver
from .taxes import TaxCalculator, TaxResult

if TYPE_CHECKING:
    from .config_store import SnapshotLoader

logger = get_logger(__name__)


def collect_policy_requirements(
    documents: tuple[PolicyDocument, ...],
    site_class_id: str,
    nights: int,
    pets: int,
) -> tuple[PolicyRequirement, ...]:
    """Documents the booking flow must present for this stay."""
    required = []
    for doc in sorted(documents, key=lambda d: d.document_id):
        if not doc.is_active:
            continue
        if doc.site_class_ids and site_class_id not in doc.site_class_ids:
            continue
        if doc.min_nights is not None and nights < doc.min_nights:
            continue
        if doc.pets_only and pets == 0:
            continue
        required.append(
            PolicyRequirement(
                document_id=doc.document_id,
                name=doc.name,
                kind=doc.kind,
                text=doc.text,
            )
        )
    return tuple(required)


class QuoteAssembler:
    """Composes pipeline results into one self-consistent Quote."""

    def assemble(
        self,
        *,
        request: QuoteRequest,
        snapshot: PricingSnapshot,
        stay: StayWindow,
        evaluation: RuleEvaluation,
        site_class_id: str,
        discounts: DiscountResult,
        taxes: TaxResult,
        deposit: DepositBreakdown,
    ) -> Quote:
        after_discount = max(
            evaluation.adjusted_subtotal_cents - discounts.discount_total_cents, 0
        )
        total_with_taxes = after_discount + taxes.taxes_cents

        nightly = tuple(
            NightlyRate(
                date=n.date,
                base_rate_cents=n.base.rate_cents,
                adjusted_rate_cents=n.rate_cents,
                rate_source=n.base.source,
                applied_rule_ids=n.applied_rule_ids,
                capped_at=n.capped_at,
            )
            for n in evaluation.nights
        )

        return Quote(
            campground_id=snapshot.campground.campground_id,
            site_id=request.site_id,
            site_class_id=site_class_id,
            arrival=stay.arrival,
            departure=stay.departure,
            nights=stay.nights,
            currency=snapshot.campground.currency,
            nightly=nightly,
            base_subtotal_cents=evaluation.base_subtotal_cents,
            adjusted_subtotal_cents=evaluation.adjusted_subtotal_cents,
            rules_delta_cents=evaluation.rules_delta_cents,
            applied_rules=evaluation.applied_rule_ids,
            applied_discounts=discounts.applied,
            rejected_discounts=discounts.rejected,
            discount_total_cents=discounts.discount_total_cents,
            discount_capped=discounts.discount_capped,
            after_discount_total_cents=after_discount,
            taxes=taxes.lines,
            taxes_cents=taxes.taxes_cents,
            tax_waiver_required=taxes.waiver_required,
            tax_waiver_text=taxes.waiver_text,
            tax_exemption_applied=taxes.exemption_applied,
            total_with_taxes_cents=total_with_taxes,
            deposit=deposit,
            policy_requirements=collect_policy_requirements(
                snapshot.policy_documents,
                site_class_id,
                stay.nights,
                request.party.pets,
            ),
        )


class QuoteService:
    """Entry point for computing stay quotes."""

    def __init__(self, loader: SnapshotLoader | None = None) -> None:
        """Initialize quote service.

        Args:
            loader: Snapshot loader used by quote_for_request. Not needed
                when callers supply their own snapshot.
        """
        self.loader = loader
        self.assembler = QuoteAssembler()
        self.discount_engine = DiscountEngine()

    def quote(self, request: QuoteRequest, snapshot: PricingSnapshot) -> Quote:
        """Compute a quote against a configuration snapshot.

        Args:
            request: Stay, site scope, codes and flags
            snapshot: Configuration fetched for this request

        Returns:
            Immutable Quote

        Raises:
            InvalidStayWindowError: If departure is not after arrival
            SiteNotFoundError: If the site or site class is unknown
            RateResolutionError: If a night has no configured rate
            ValueError: If request.as_of is not set
        """
        if request.as_of is None:
            raise ValueError("as_of must be resolved before quoting")
        stay = StayWindow(arrival=request.arrival, departure=request.departure)
        as_of = request.as_of

        resolver = RateResolver(snapshot)
        site_class_id = resolver.resolve_site_class(
            site_id=request.site_id, site_class_id=request.site_class_id
        )
        rates = resolver.resolve(stay, site_class_id, request.site_id)
        evaluation = PricingRuleEngine(snapshot).evaluate(rates)

        discounts = self.discount_engine.apply(
            DiscountContext(
                snapshot=snapshot,
                as_of=as_of,
                adjusted_subtotal_cents=evaluation.adjusted_subtotal_cents,
                membership_id=request.membership_id,
                promo_code=request.promo_code,
                referral_code=request.referral_code,
            )
        )

        taxes = TaxCalculator(snapshot.tax_rules).calculate(
            discounts.after_discount_cents,
            stay.nights,
            waiver_signed=request.tax_waiver_signed,
        )

        deposit = DepositCalculator(
            resolve_deposit_policy(snapshot, site_class_id)
        ).calculate(
            total_with_taxes_cents=discounts.after_discount_cents + taxes.taxes_cents,
            after_discount_cents=discounts.after_discount_cents,
            first_night_cents=evaluation.nights[0].rate_cents,
        )

        quote = self.assembler.assemble(
            request=request,
            snapshot=snapshot,
            stay=stay,
            evaluation=evaluation,
            site_class_id=site_class_id,
            discounts=discounts,
            taxes=taxes,
            deposit=deposit,
        )

        log_quote_operation(
            logger,
            "quote_computed",
            campground_id=quote.campground_id,
            site_class_id=site_class_id,
            nights=quote.nights,
            total_cents=quote.total_with_taxes_cents,
            rejected=[f"{r.id}:{r.reason.value}" for r in quote.rejected_discounts],
            waiver_required=quote.tax_waiver_required,
        )
        return quote

    def quote_for_request(self, request: QuoteRequest) -> Quote:
        """Load configuration for the campground and compute a quote.

        Raises:
            CampgroundNotFoundError: If the campground does not exist
        """
        if self.loader is None:
            raise RuntimeError("QuoteService was created without a snapshot loader")

        try:
            snapshot = self.loader.load(
                request.campground_id, membership_id=request.membership_id
            )
            return self.quote(request, snapshot)
        except QuoteError as e:
            log_quote_operation(
                logger,
                "quote_failed",
                campground_id=request.campground_id,
                error=e.code.value,
            )
            raise
