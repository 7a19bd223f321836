"""Configuration entities read at quote time.

Staff author these records through management tooling. The quote engine
only ever reads them: every model here is frozen, and promotions are exposed
to quoting solely through PromotionView, which carries the usage counter as
plain data with no way to change it.

Models use lax validation so DynamoDB items (numbers as Decimal, dates as
ISO strings) can be loaded with ``model_validate``.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .enums import (
    AdjustmentType,
    DepositApplyTo,
    DepositDueTiming,
    DepositStrategy,
    DiscountType,
    PolicyDocumentKind,
    PricingRuleType,
    StackMode,
    TaxRuleType,
)


class ConfigEntity(BaseModel):
    """Base for read-only configuration records."""

    model_config = ConfigDict(frozen=True, extra="ignore")


def _in_window(day: dt.date, start: dt.date | None, end: dt.date | None) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


class Campground(ConfigEntity):
    """Campground-level pricing settings."""

    campground_id: str
    name: str = ""
    currency: str = Field(default="USD", description="ISO currency code")
    default_deposit_policy_id: str | None = None
    max_discount_fraction: Decimal | None = Field(
        default=None,
        ge=0,
        le=1,
        description="Ceiling on total discounts as a fraction of the adjusted subtotal",
    )
    occupancy_pct: int | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Current occupancy used to trigger demand bands",
    )


class SiteClass(ConfigEntity):
    """A class of sites sharing a default nightly rate."""

    site_class_id: str
    name: str = ""
    default_rate_cents: int | None = Field(default=None, ge=0)


class Site(ConfigEntity):
    """A bookable site and the class it belongs to."""

    site_id: str
    site_class_id: str
    name: str = ""


class SeasonalRate(ConfigEntity):
    """Date-ranged nightly rate override for a site class or a single site."""

    rate_id: str
    site_class_id: str
    site_id: str | None = Field(
        default=None, description="Set for site-specific overrides"
    )
    start_date: dt.date
    end_date: dt.date = Field(..., description="Last night covered (inclusive)")
    nightly_rate_cents: int = Field(..., ge=0)
    is_active: bool = True

    def covers(self, night: dt.date) -> bool:
        return self.is_active and self.start_date <= night <= self.end_date


class PricingRule(ConfigEntity):
    """Typed nightly rate adjustment.

    Percent adjustments are fractions (0.20 is +20%). Flat adjustments are
    cents and may be negative.
    """

    rule_id: str
    name: str = ""
    rule_type: PricingRuleType = PricingRuleType.SEASON
    priority: int = 0
    stack_mode: StackMode = StackMode.ADDITIVE
    adjustment_type: AdjustmentType = AdjustmentType.PERCENT
    adjustment_value: Decimal = Decimal(0)
    site_class_id: str | None = None
    demand_band_id: str | None = None
    calendar_ref: str | None = None
    dow_mask: list[int] | None = Field(
        default=None, description="Days of week the rule applies to, 0=Sunday"
    )
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    min_rate_cap_cents: int | None = Field(default=None, ge=0)
    max_rate_cap_cents: int | None = Field(default=None, ge=0)
    is_active: bool = True

    def in_window(self, night: dt.date) -> bool:
        return _in_window(night, self.start_date, self.end_date)


class DemandBand(ConfigEntity):
    """Occupancy threshold that activates demand pricing rules."""

    band_id: str
    name: str = ""
    threshold_pct: int = Field(..., ge=0, le=100)
    adjustment_type: AdjustmentType = AdjustmentType.PERCENT
    adjustment_value: Decimal = Decimal(0)
    is_active: bool = True


class PromotionView(ConfigEntity):
    """Read-only projection of a promotion code.

    Usage is incremented only by the booking-confirmation redemption step.
    """

    promotion_id: str
    code: str
    discount_type: DiscountType = DiscountType.PERCENTAGE
    value: int = Field(..., ge=0, description="Whole percent or cents")
    valid_from: dt.date | None = None
    valid_to: dt.date | None = None
    usage_limit: int | None = Field(default=None, ge=0)
    usage_count: int = Field(default=0, ge=0)
    is_active: bool = True

    def in_window(self, day: dt.date) -> bool:
        return _in_window(day, self.valid_from, self.valid_to)

    @property
    def exhausted(self) -> bool:
        return self.usage_limit is not None and self.usage_count >= self.usage_limit


class ReferralProgram(ConfigEntity):
    """Referral code and the incentive it grants to the referred guest."""

    program_id: str
    code: str
    incentive_type: DiscountType = DiscountType.FLAT
    incentive_value: int = Field(..., ge=0, description="Whole percent or cents")
    is_active: bool = True


class Membership(ConfigEntity):
    """Projection of a guest membership from the membership directory."""

    membership_id: str
    membership_type: str = ""
    discount_percent: int = Field(default=0, ge=0, le=100)
    is_active: bool = True
    expires_on: dt.date | None = None


class TaxRule(ConfigEntity):
    """Tax or tax exemption.

    ``rate`` is a fraction for percentage rules and cents for flat rules.
    Exemptions suppress standard rules in the same ``group`` (all standard
    rules when the exemption has no group).
    """

    tax_rule_id: str
    name: str
    rule_type: TaxRuleType = TaxRuleType.PERCENTAGE
    rate: Decimal = Decimal(0)
    group: str | None = None
    min_nights: int | None = Field(default=None, ge=1)
    max_nights: int | None = Field(default=None, ge=1)
    requires_waiver: bool = False
    waiver_text: str | None = None
    is_active: bool = True

    def applies_to_nights(self, nights: int) -> bool:
        if self.min_nights is not None and nights < self.min_nights:
            return False
        if self.max_nights is not None and nights > self.max_nights:
            return False
        return True


class DepositPolicy(ConfigEntity):
    """Deposit configuration for a campground or a single site class."""

    policy_id: str
    name: str = ""
    site_class_id: str | None = None
    strategy: DepositStrategy = DepositStrategy.PERCENT
    value: int = Field(default=0, ge=0, description="Whole percent or cents")
    apply_to: DepositApplyTo = DepositApplyTo.LODGING_PLUS_FEES
    due_timing: DepositDueTiming = DepositDueTiming.AT_BOOKING
    min_cap_cents: int | None = Field(default=None, ge=0)
    max_cap_cents: int | None = Field(default=None, ge=0)
    is_active: bool = True
    created_at: dt.datetime | None = None


class PolicyDocument(ConfigEntity):
    """Document a guest must accept before the booking can be confirmed."""

    document_id: str
    name: str
    kind: PolicyDocumentKind = PolicyDocumentKind.PARK_RULES
    text: str = ""
    site_class_ids: list[str] = Field(default_factory=list)
    min_nights: int | None = Field(default=None, ge=1)
    pets_only: bool = False
    is_active: bool = True
