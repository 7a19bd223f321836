"""Pydantic models for campquote configuration, requests and quotes."""

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
from .enums import (
    AdjustmentType,
    CapBound,
    DepositApplyTo,
    DepositDueTiming,
    DepositStrategy,
    DiscountKind,
    DiscountType,
    PolicyDocumentKind,
    PricingRuleType,
    RateSource,
    RejectionReason,
    StackMode,
    TaxRuleType,
)
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    CampgroundNotFoundError,
    ConfigurationError,
    ErrorCode,
    InvalidStayWindowError,
    QuoteError,
    RateResolutionError,
    SiteNotFoundError,
    ToolError,
    UsageLimitReachedError,
)
from .quote import (
    AppliedDiscount,
    DepositBreakdown,
    NightlyRate,
    PartyComposition,
    PolicyRequirement,
    Quote,
    QuoteRequest,
    RejectedDiscount,
    TaxLine,
)
from .redemption import RedemptionRequest, RedemptionResult
from .snapshot import PricingSnapshot
from .stay import StayWindow

__all__ = [
    # Enums
    "AdjustmentType",
    "CapBound",
    "DepositApplyTo",
    "DepositDueTiming",
    "DepositStrategy",
    "DiscountKind",
    "DiscountType",
    "PolicyDocumentKind",
    "PricingRuleType",
    "RateSource",
    "RejectionReason",
    "StackMode",
    "TaxRuleType",
    # Configuration
    "Campground",
    "DemandBand",
    "DepositPolicy",
    "Membership",
    "PolicyDocument",
    "PricingRule",
    "PromotionView",
    "ReferralProgram",
    "SeasonalRate",
    "Site",
    "SiteClass",
    "TaxRule",
    "PricingSnapshot",
    # Stay and quote
    "StayWindow",
    "PartyComposition",
    "QuoteRequest",
    "Quote",
    "NightlyRate",
    "AppliedDiscount",
    "RejectedDiscount",
    "TaxLine",
    "DepositBreakdown",
    "PolicyRequirement",
    # Redemption
    "RedemptionRequest",
    "RedemptionResult",
    # Errors
    "ErrorCode",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "ToolError",
    "QuoteError",
    "ConfigurationError",
    "InvalidStayWindowError",
    "RateResolutionError",
    "SiteNotFoundError",
    "CampgroundNotFoundError",
    "UsageLimitReachedError",
]
