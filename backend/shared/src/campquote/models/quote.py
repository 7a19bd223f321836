"""Quote request and quote breakdown models.

All amounts are in cents of the campground's currency.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import (
    CapBound,
    DepositApplyTo,
    DepositDueTiming,
    DepositStrategy,
    DiscountKind,
    PolicyDocumentKind,
    RateSource,
    RejectionReason,
)


class PartyComposition(BaseModel):
    """Who is staying."""

    adults: int = Field(default=1, ge=1)
    children: int = Field(default=0, ge=0)
    pets: int = Field(default=0, ge=0)


class QuoteRequest(BaseModel):
    """Input for a stay quote.

    Exactly one of ``site_id`` or ``site_class_id`` must be given.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "campground_id": "cg-riverbend",
                    "site_id": "site-a12",
                    "arrival": "2025-06-05",
                    "departure": "2025-06-08",
                    "promo_code": "SUMMER10",
                    "tax_waiver_signed": False,
                    "party": {"adults": 2, "children": 1, "pets": 1},
                }
            ]
        },
    )

    campground_id: str = Field(..., min_length=1)
    site_id: str | None = None
    site_class_id: str | None = None
    arrival: dt.date
    departure: dt.date = Field(..., description="Departure date (exclusive)")
    promo_code: str | None = None
    referral_code: str | None = None
    membership_id: str | None = None
    tax_waiver_signed: bool = False
    party: PartyComposition = Field(default_factory=PartyComposition)
    as_of: dt.date | None = Field(
        default=None,
        description="Date promotion validity is evaluated against; the API fills in today when omitted",
    )

    @model_validator(mode="after")
    def _check_scope(self) -> "QuoteRequest":
        if (self.site_id is None) == (self.site_class_id is None):
            raise ValueError("exactly one of site_id or site_class_id is required")
        return self


class QuoteModel(BaseModel):
    """Base for immutable quote output models."""

    model_config = ConfigDict(strict=True, frozen=True)


class NightlyRate(QuoteModel):
    """Base and adjusted rate for one night."""

    date: dt.date
    base_rate_cents: int = Field(..., ge=0)
    adjusted_rate_cents: int = Field(..., ge=0)
    rate_source: RateSource
    applied_rule_ids: tuple[str, ...] = ()
    capped_at: CapBound | None = None


class AppliedDiscount(QuoteModel):
    """A discount that reduced the running balance."""

    id: str
    kind: DiscountKind
    code: str | None = None
    amount_cents: int = Field(..., ge=0)
    capped: bool = False


class RejectedDiscount(QuoteModel):
    """A discount code that was not applied, with the reason."""

    id: str
    kind: DiscountKind
    reason: RejectionReason


class TaxLine(QuoteModel):
    """One applied tax."""

    tax_rule_id: str
    name: str
    amount_cents: int = Field(..., ge=0)


class DepositBreakdown(QuoteModel):
    """Amount due now versus later."""

    policy_id: str | None = None
    strategy: DepositStrategy | None = None
    apply_to: DepositApplyTo | None = None
    due_timing: DepositDueTiming = DepositDueTiming.AT_BOOKING
    deposit_due_cents: int = Field(..., ge=0)
    balance_due_cents: int = Field(..., ge=0)


class PolicyRequirement(QuoteModel):
    """A document the booking flow must present before confirming."""

    document_id: str
    name: str
    kind: PolicyDocumentKind
    text: str


class Quote(QuoteModel):
    """Point-in-time price breakdown for a prospective stay."""

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "campground_id": "cg-riverbend",
                    "site_id": None,
                    "site_class_id": "rv-full-hookup",
                    "arrival": "2025-06-05",
                    "departure": "2025-06-08",
                    "nights": 3,
                    "currency": "USD",
                    "base_subtotal_cents": 15000,
                    "adjusted_subtotal_cents": 17000,
                    "rules_delta_cents": 2000,
                    "discount_total_cents": 1700,
                    "after_discount_total_cents": 15300,
                    "taxes_cents": 0,
                    "total_with_taxes_cents": 15300,
                }
            ]
        },
    )

    campground_id: str
    site_id: str | None = None
    site_class_id: str
    arrival: dt.date
    departure: dt.date
    nights: int = Field(..., ge=1)
    currency: str
    nightly: tuple[NightlyRate, ...]
    base_subtotal_cents: int = Field(..., ge=0)
    adjusted_subtotal_cents: int = Field(..., ge=0)
    rules_delta_cents: int = Field(..., description="May be negative")
    applied_rules: tuple[str, ...] = ()
    applied_discounts: tuple[AppliedDiscount, ...] = ()
    rejected_discounts: tuple[RejectedDiscount, ...] = ()
    discount_total_cents: int = Field(..., ge=0)
    discount_capped: bool = False
    after_discount_total_cents: int = Field(..., ge=0)
    taxes: tuple[TaxLine, ...] = ()
    taxes_cents: int = Field(..., ge=0)
    tax_waiver_required: bool = False
    tax_waiver_text: str | None = None
    tax_exemption_applied: bool = False
    total_with_taxes_cents: int = Field(..., ge=0)
    deposit: DepositBreakdown
    policy_requirements: tuple[PolicyRequirement, ...] = ()
