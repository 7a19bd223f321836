"""Unit tests for QuoteService and quote assembly.

Tests cover:
- End-to-end pipeline arithmetic over a snapshot
- Determinism and immutability of quotes
- Fatal configuration errors
- Policy requirements for the booking flow
"""

import datetime as dt
import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from campquote.models import (
    CapBound,
    DepositPolicy,
    DiscountKind,
    InvalidStayWindowError,
    PolicyDocument,
    PolicyDocumentKind,
    PricingRule,
    PromotionView,
    RateResolutionError,
    RateSource,
    ReferralProgram,
    RejectionReason,
    SiteClass,
    SiteNotFoundError,
    TaxRule,
)
from campquote.services.quotes import QuoteService, collect_policy_requirements

SITE_CLASS_ID = "rv-full"


@pytest.fixture
def full_snapshot(make_snapshot, weekend_rule_data):
    """Weekend rule, promo, referral, 10% lodging tax, 25% lodging deposit."""
    return make_snapshot(
        pricing_rules=[PricingRule(**weekend_rule_data)],
        promotions=[PromotionView(promotion_id="promo-summer", code="SUMMER10", value=10)],
        referral_programs=[
            ReferralProgram(program_id="ref-friend", code="FRIEND", incentive_value=1000)
        ],
        tax_rules=[TaxRule(tax_rule_id="tax-lodging", name="Lodging tax", rate=Decimal("0.10"))],
        deposit_policies=[
            DepositPolicy(
                policy_id="dep-25", strategy="percent", value=25, apply_to="lodging_only"
            )
        ],
    )


class TestBaseQuote:
    """Tests for a quote with no rules, discounts or taxes."""

    def test_scenario_a(self, make_snapshot, make_request) -> None:
        quote = QuoteService().quote(make_request(), make_snapshot())

        assert quote.nights == 3
        assert quote.base_subtotal_cents == 15000
        assert quote.adjusted_subtotal_cents == 15000
        assert quote.rules_delta_cents == 0
        assert quote.discount_total_cents == 0
        assert quote.after_discount_total_cents == 15000
        assert quote.taxes_cents == 0
        assert quote.total_with_taxes_cents == 15000
        assert quote.deposit.deposit_due_cents == 15000
        assert quote.deposit.balance_due_cents == 0

    def test_nightly_breakdown(self, make_snapshot, make_request) -> None:
        quote = QuoteService().quote(make_request(), make_snapshot())

        assert [n.date for n in quote.nightly] == [
            dt.date(2025, 6, 5),
            dt.date(2025, 6, 6),
            dt.date(2025, 6, 7),
        ]
        assert all(n.rate_source == RateSource.CLASS_DEFAULT for n in quote.nightly)
        assert all(n.capped_at is None for n in quote.nightly)

    def test_quote_echoes_request(self, make_snapshot, make_request) -> None:
        quote = QuoteService().quote(make_request(), make_snapshot())

        assert quote.campground_id == "cg-test"
        assert quote.site_id is None
        assert quote.site_class_id == SITE_CLASS_ID
        assert quote.arrival == dt.date(2025, 6, 5)
        assert quote.departure == dt.date(2025, 6, 8)
        assert quote.currency == "USD"

    def test_site_request_resolves_class(self, make_snapshot, make_request) -> None:
        quote = QuoteService().quote(make_request(site_id="site-a1"), make_snapshot())

        assert quote.site_id == "site-a1"
        assert quote.site_class_id == SITE_CLASS_ID


class TestFullPipeline:
    """Tests for the complete rates -> rules -> discounts -> taxes -> deposit flow."""

    def test_totals(self, full_snapshot, make_request) -> None:
        request = make_request(promo_code="SUMMER10", referral_code="FRIEND")

        quote = QuoteService().quote(request, full_snapshot)

        assert [n.adjusted_rate_cents for n in quote.nightly] == [5000, 6000, 6000]
        assert quote.adjusted_subtotal_cents == 17000
        assert quote.rules_delta_cents == 2000
        assert quote.applied_rules == ("weekend",)
        assert [d.kind for d in quote.applied_discounts] == [
            DiscountKind.PROMOTION,
            DiscountKind.REFERRAL,
        ]
        assert quote.discount_total_cents == 2700
        assert quote.after_discount_total_cents == 14300
        assert quote.taxes_cents == 1430
        assert quote.total_with_taxes_cents == 15730
        assert quote.deposit.deposit_due_cents == 3575
        assert quote.deposit.balance_due_cents == 12155

    def test_totals_are_consistent(self, full_snapshot, make_request) -> None:
        quote = QuoteService().quote(
            make_request(promo_code="SUMMER10", referral_code="FRIEND"), full_snapshot
        )

        assert quote.adjusted_subtotal_cents == sum(
            n.adjusted_rate_cents for n in quote.nightly
        )
        assert quote.after_discount_total_cents == (
            quote.adjusted_subtotal_cents - quote.discount_total_cents
        )
        assert quote.taxes_cents == sum(t.amount_cents for t in quote.taxes)
        assert quote.total_with_taxes_cents == (
            quote.after_discount_total_cents + quote.taxes_cents
        )
        assert quote.deposit.deposit_due_cents + quote.deposit.balance_due_cents == (
            quote.total_with_taxes_cents
        )

    def test_rejected_codes_reported(self, full_snapshot, make_request) -> None:
        quote = QuoteService().quote(make_request(promo_code="NOPE"), full_snapshot)

        assert quote.applied_discounts == ()
        assert quote.rejected_discounts[0].id == "NOPE"
        assert quote.rejected_discounts[0].reason == RejectionReason.NOT_FOUND
        assert quote.after_discount_total_cents == 17000

    def test_capped_night_is_flagged(self, make_snapshot, make_request, weekend_rule_data) -> None:
        rule = PricingRule(**{**weekend_rule_data, "max_rate_cap_cents": 5500})

        quote = QuoteService().quote(make_request(), make_snapshot(pricing_rules=[rule]))

        assert [n.adjusted_rate_cents for n in quote.nightly] == [5000, 5500, 5500]
        assert [n.capped_at for n in quote.nightly] == [None, CapBound.MAX, CapBound.MAX]

    def test_waiver_flags(self, make_snapshot, make_request) -> None:
        snapshot = make_snapshot(
            tax_rules=[
                TaxRule(
                    tax_rule_id="tax-lodging", name="Lodging", rate=Decimal("0.10"), group="lodging"
                ),
                TaxRule(
                    tax_rule_id="exempt",
                    name="Exempt",
                    rule_type="exemption",
                    group="lodging",
                    requires_waiver=True,
                    waiver_text="Sign here",
                ),
            ]
        )

        unsigned = QuoteService().quote(make_request(), snapshot)
        signed = QuoteService().quote(make_request(tax_waiver_signed=True), snapshot)

        assert unsigned.tax_waiver_required is True
        assert unsigned.tax_waiver_text == "Sign here"
        assert unsigned.taxes_cents == 1500
        assert signed.tax_waiver_required is False
        assert signed.tax_exemption_applied is True
        assert signed.taxes_cents == 0

    def test_first_night_deposit_uses_adjusted_rate(self, make_snapshot, make_request, weekend_rule_data) -> None:
        snapshot = make_snapshot(
            pricing_rules=[PricingRule(**weekend_rule_data)],
            deposit_policies=[DepositPolicy(policy_id="dep-first", strategy="first_night")],
        )

        quote = QuoteService().quote(
            make_request(arrival=dt.date(2025, 6, 6), departure=dt.date(2025, 6, 8)),
            snapshot,
        )

        assert quote.deposit.deposit_due_cents == 6000
        assert quote.deposit.balance_due_cents == 6000


class TestQuoteProperties:
    """Determinism and immutability."""

    def test_same_inputs_same_quote(self, full_snapshot, make_request) -> None:
        request = make_request(promo_code="SUMMER10", referral_code="FRIEND")
        service = QuoteService()

        assert service.quote(request, full_snapshot) == service.quote(request, full_snapshot)

    def test_quote_is_frozen(self, make_snapshot, make_request) -> None:
        quote = QuoteService().quote(make_request(), make_snapshot())

        with pytest.raises(ValidationError):
            quote.total_with_taxes_cents = 1

    def test_promotion_view_is_read_only(self) -> None:
        promo = PromotionView(promotion_id="p", code="P", value=10, usage_count=3)

        with pytest.raises(ValidationError):
            promo.usage_count = 4

    def test_quoting_never_changes_usage(self, full_snapshot, make_request) -> None:
        QuoteService().quote(make_request(promo_code="SUMMER10"), full_snapshot)

        assert full_snapshot.promotions[0].usage_count == 0

    def test_as_of_controls_promotion_window(self, make_snapshot, make_request) -> None:
        snapshot = make_snapshot(
            promotions=[
                PromotionView(
                    promotion_id="promo-may",
                    code="MAY",
                    value=10,
                    valid_from="2025-05-01",
                    valid_to="2025-05-31",
                )
            ]
        )
        service = QuoteService()

        in_window = service.quote(make_request(promo_code="MAY", as_of=dt.date(2025, 5, 15)), snapshot)
        after = service.quote(make_request(promo_code="MAY", as_of=dt.date(2025, 6, 1)), snapshot)

        assert in_window.discount_total_cents == 1500
        assert after.rejected_discounts[0].reason == RejectionReason.EXPIRED

    def test_unresolved_as_of_is_refused(self, make_snapshot, make_request) -> None:
        """The engine never falls back to the wall clock."""
        with pytest.raises(ValueError, match="as_of"):
            QuoteService().quote(make_request(as_of=None), make_snapshot())


class TestQuoteErrors:
    """Fatal errors abort quoting with no partial quote."""

    def test_departure_not_after_arrival(self, make_snapshot, make_request) -> None:
        request = make_request(departure=dt.date(2025, 6, 5))

        with pytest.raises(InvalidStayWindowError):
            QuoteService().quote(request, make_snapshot())

    def test_missing_rate(self, make_snapshot, make_request) -> None:
        snapshot = make_snapshot(site_classes=[SiteClass(site_class_id=SITE_CLASS_ID)])

        with pytest.raises(RateResolutionError):
            QuoteService().quote(make_request(), snapshot)

    def test_unknown_site(self, make_snapshot, make_request) -> None:
        with pytest.raises(SiteNotFoundError):
            QuoteService().quote(make_request(site_id="nope"), make_snapshot())

    def test_quote_for_request_requires_loader(self, make_request) -> None:
        with pytest.raises(RuntimeError):
            QuoteService().quote_for_request(make_request())


class TestQuoteLogging:
    """Tests for quote operation logs."""

    def test_rejections_logged_as_warning(self, full_snapshot, make_request, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="campquote.services.quotes"):
            QuoteService().quote(make_request(promo_code="NOPE"), full_snapshot)

        record = next(r for r in caplog.records if "quote_computed" in r.getMessage())
        assert record.levelno == logging.WARNING
        assert "NOPE:not_found" in record.getMessage()

    def test_clean_quote_logged_as_info(self, make_snapshot, make_request, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="campquote.services.quotes"):
            QuoteService().quote(make_request(), make_snapshot())

        record = next(r for r in caplog.records if "quote_computed" in r.getMessage())
        assert record.levelno == logging.INFO
        assert record.campground_id == "cg-test"


class TestPolicyRequirements:
    """Tests for documents surfaced for the booking flow."""

    @pytest.fixture
    def documents(self) -> tuple[PolicyDocument, ...]:
        return (
            PolicyDocument(document_id="doc-rules", name="Park rules", text="Quiet after 10pm"),
            PolicyDocument(
                document_id="doc-pets", name="Pet policy", kind="waiver", pets_only=True
            ),
            PolicyDocument(document_id="doc-long", name="Long stay form", kind="form", min_nights=7),
            PolicyDocument(
                document_id="doc-tent", name="Tent rules", site_class_ids=["tent"]
            ),
            PolicyDocument(document_id="doc-old", name="Old rules", is_active=False),
        )

    def test_default_requirements(self, documents) -> None:
        required = collect_policy_requirements(documents, SITE_CLASS_ID, nights=3, pets=0)

        assert [r.document_id for r in required] == ["doc-rules"]
        assert required[0].kind == PolicyDocumentKind.PARK_RULES
        assert required[0].text == "Quiet after 10pm"

    def test_pets_add_pet_policy(self, documents) -> None:
        required = collect_policy_requirements(documents, SITE_CLASS_ID, nights=3, pets=1)

        assert [r.document_id for r in required] == ["doc-pets", "doc-rules"]

    def test_long_stay_adds_form(self, documents) -> None:
        required = collect_policy_requirements(documents, SITE_CLASS_ID, nights=7, pets=0)

        assert [r.document_id for r in required] == ["doc-long", "doc-rules"]

    def test_class_filter(self, documents) -> None:
        required = collect_policy_requirements(documents, "tent", nights=3, pets=0)

        assert [r.document_id for r in required] == ["doc-rules", "doc-tent"]

    def test_requirements_on_quote(self, make_snapshot, make_request, documents) -> None:
        request = make_request(party={"adults": 2, "pets": 1})

        quote = QuoteService().quote(request, make_snapshot(policy_documents=documents))

        assert [r.document_id for r in quote.policy_requirements] == ["doc-pets", "doc-rules"]
