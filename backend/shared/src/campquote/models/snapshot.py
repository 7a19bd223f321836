"""Immutable configuration snapshot used for a single quote."""

from pydantic import BaseModel, ConfigDict, Field

from .config import (
    Campground,
    DemandBand,
    DepositPolicy,
    Membership,
    PolicyDocument,
    PricingRule,
    PromotionView,
    ReferralProgram,
    SeasonalRate,
    Site,
    SiteClass,
    TaxRule,
)


class PricingSnapshot(BaseModel):
    """Everything the quote pipeline reads, fetched once per request.

    Collections are tuples so the snapshot cannot be changed after it is
    built.
    """

    model_config = ConfigDict(frozen=True)

    campground: Campground
    sites: tuple[Site, ...] = ()
    site_classes: tuple[SiteClass, ...] = ()
    seasonal_rates: tuple[SeasonalRate, ...] = ()
    pricing_rules: tuple[PricingRule, ...] = ()
    demand_bands: tuple[DemandBand, ...] = ()
    promotions: tuple[PromotionView, ...] = ()
    referral_programs: tuple[ReferralProgram, ...] = ()
    memberships: tuple[Membership, ...] = Field(
        default=(), description="Memberships relevant to the request"
    )
    tax_rules: tuple[TaxRule, ...] = ()
    deposit_policies: tuple[DepositPolicy, ...] = ()
    policy_documents: tuple[PolicyDocument, ...] = ()

    def find_site(self, site_id: str) -> Site | None:
        return next((s for s in self.sites if s.site_id == site_id), None)

    def find_site_class(self, site_class_id: str) -> SiteClass | None:
        return next(
            (c for c in self.site_classes if c.site_class_id == site_class_id), None
        )

    def find_demand_band(self, band_id: str) -> DemandBand | None:
        return next((b for b in self.demand_bands if b.band_id == band_id), None)

    def find_promotion(self, code: str) -> PromotionView | None:
        wanted = code.strip().upper()
        return next((p for p in self.promotions if p.code.upper() == wanted), None)

    def find_referral_program(self, code: str) -> ReferralProgram | None:
        wanted = code.strip().upper()
        return next(
            (r for r in self.referral_programs if r.code.upper() == wanted), None
        )

    def find_membership(self, membership_id: str) -> Membership | None:
        return next(
            (m for m in self.memberships if m.membership_id == membership_id), None
        )
