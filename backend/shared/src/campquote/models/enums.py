"""Enumeration types for campquote data models."""

from enum import Enum


class PricingRuleType(str, Enum):
    """Business category of a pricing rule."""

    SEASON = "season"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"
    EVENT = "event"
    DEMAND = "demand"


class StackMode(str, Enum):
    """How a pricing rule combines with adjustments applied before it."""

    ADDITIVE = "additive"
    MAX = "max"
    OVERRIDE = "override"


class AdjustmentType(str, Enum):
    """Shape of a pricing rule or demand band adjustment."""

    PERCENT = "percent"
    FLAT = "flat"


class RateSource(str, Enum):
    """Where a night's base rate came from."""

    SITE_OVERRIDE = "site_override"
    CLASS_OVERRIDE = "class_override"
    CLASS_DEFAULT = "class_default"


class CapBound(str, Enum):
    """Which rate cap changed a night's adjusted rate."""

    MIN = "min"
    MAX = "max"


class DiscountType(str, Enum):
    """Shape of a promotion or referral incentive."""

    PERCENTAGE = "percentage"
    FLAT = "flat"


class DiscountKind(str, Enum):
    """Discount stage, in the order stages are applied."""

    MEMBERSHIP = "membership"
    PROMOTION = "promotion"
    REFERRAL = "referral"


class RejectionReason(str, Enum):
    """Why a discount code was not applied."""

    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"


class TaxRuleType(str, Enum):
    """Kind of tax rule."""

    PERCENTAGE = "percentage"
    FLAT = "flat"
    EXEMPTION = "exemption"


class DepositStrategy(str, Enum):
    """How the amount due at booking is derived."""

    FIRST_NIGHT = "first_night"
    PERCENT = "percent"
    FIXED = "fixed"


class DepositApplyTo(str, Enum):
    """Which amount a percent deposit is taken from."""

    LODGING_ONLY = "lodging_only"
    LODGING_PLUS_FEES = "lodging_plus_fees"


class DepositDueTiming(str, Enum):
    """When the deposit should be collected."""

    AT_BOOKING = "at_booking"
    BEFORE_ARRIVAL = "before_arrival"


class PolicyDocumentKind(str, Enum):
    """Kind of document a guest must accept before booking."""

    WAIVER = "waiver"
    PARK_RULES = "park_rules"
    FORM = "form"
