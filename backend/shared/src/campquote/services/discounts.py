"""Discount stacking.

Discounts are applied in a fixed order against the running balance:
membership, then promotion code, then referral code. Each stage is a pure
function returning the new balance and an applied or rejected record.
Invalid codes are rejected with a reason and never stop the pipeline.
"""

import datetime as dt
from collections.abc import Callable
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from campquote.models import (
    AppliedDiscount,
    DiscountKind,
    DiscountType,
    PricingSnapshot,
    RejectedDiscount,
    RejectionReason,
)
from campquote.utils.money import percent_of, round_half_up


class DiscountContext(BaseModel):
    """Inputs shared by all discount stages."""

    model_config = ConfigDict(frozen=True)

    snapshot: PricingSnapshot
    as_of: dt.date
    adjusted_subtotal_cents: int
    membership_id: str | None = None
    promo_code: str | None = None
    referral_code: str | None = None

    @property
    def discount_ceiling_cents(self) -> int | None:
        fraction = self.snapshot.campground.max_discount_fraction
        if fraction is None:
            return None
        return round_half_up(Decimal(self.adjusted_subtotal_cents) * fraction)


class StageResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    balance_cents: int
    applied: AppliedDiscount | None = None
    rejected: RejectedDiscount | None = None
    ceiling_hit: bool = False


class DiscountResult(BaseModel):
    """Outcome of all discount stages."""

    model_config = ConfigDict(frozen=True)

    applied: tuple[AppliedDiscount, ...]
    rejected: tuple[RejectedDiscount, ...]
    after_discount_cents: int
    discount_capped: bool = False

    @property
    def discount_total_cents(self) -> int:
        return sum(d.amount_cents for d in self.applied)


def _amount(discount_type: DiscountType, value: int, balance_cents: int) -> int:
    if discount_type == DiscountType.PERCENTAGE:
        return percent_of(balance_cents, value)
    return value


def _apply(
    ctx: DiscountContext,
    balance_cents: int,
    discounted_so_far: int,
    *,
    discount_id: str,
    kind: DiscountKind,
    code: str | None,
    requested_cents: int,
) -> StageResult:
    """Cap a requested amount at the balance and the campground ceiling."""
    amount = min(requested_cents, balance_cents)
    ceiling_hit = False
    ceiling = ctx.discount_ceiling_cents
    if ceiling is not None:
        headroom = max(ceiling - discounted_so_far, 0)
        if headroom < amount:
            amount = headroom
            ceiling_hit = True
    applied = AppliedDiscount(
        id=discount_id,
        kind=kind,
        code=code,
        amount_cents=amount,
        capped=amount < requested_cents,
    )
    return StageResult(
        balance_cents=balance_cents - amount, applied=applied, ceiling_hit=ceiling_hit
    )


def membership_stage(ctx: DiscountContext, balance_cents: int, discounted_so_far: int) -> StageResult:
    if ctx.membership_id is None:
        return StageResult(balance_cents=balance_cents)

    membership = ctx.snapshot.find_membership(ctx.membership_id)
    reason: RejectionReason | None = None
    if membership is None:
        reason = RejectionReason.NOT_FOUND
    elif not membership.is_active:
        reason = RejectionReason.INACTIVE
    elif membership.expires_on is not None and membership.expires_on < ctx.as_of:
        reason = RejectionReason.EXPIRED

    if reason is not None or membership is None:
        rejected = RejectedDiscount(
            id=ctx.membership_id, kind=DiscountKind.MEMBERSHIP, reason=reason or RejectionReason.NOT_FOUND
        )
        return StageResult(balance_cents=balance_cents, rejected=rejected)

    return _apply(
        ctx,
        balance_cents,
        discounted_so_far,
        discount_id=membership.membership_id,
        kind=DiscountKind.MEMBERSHIP,
        code=None,
        requested_cents=percent_of(balance_cents, membership.discount_percent),
    )


def promotion_stage(ctx: DiscountContext, balance_cents: int, discounted_so_far: int) -> StageResult:
    if not ctx.promo_code:
        return StageResult(balance_cents=balance_cents)

    promotion = ctx.snapshot.find_promotion(ctx.promo_code)
    reason: RejectionReason | None = None
    if promotion is None:
        reason = RejectionReason.NOT_FOUND
    elif not promotion.is_active:
        reason = RejectionReason.INACTIVE
    elif not promotion.in_window(ctx.as_of):
        reason = RejectionReason.EXPIRED
    elif promotion.exhausted:
        reason = RejectionReason.USAGE_LIMIT_REACHED

    if reason is not None or promotion is None:
        rejected = RejectedDiscount(
            id=promotion.promotion_id if promotion else ctx.promo_code,
            kind=DiscountKind.PROMOTION,
            reason=reason or RejectionReason.NOT_FOUND,
        )
        return StageResult(balance_cents=balance_cents, rejected=rejected)

    return _apply(
        ctx,
        balance_cents,
        discounted_so_far,
        discount_id=promotion.promotion_id,
        kind=DiscountKind.PROMOTION,
        code=promotion.code,
        requested_cents=_amount(promotion.discount_type, promotion.value, balance_cents),
    )


def referral_stage(ctx: DiscountContext, balance_cents: int, discounted_so_far: int) -> StageResult:
    if not ctx.referral_code:
        return StageResult(balance_cents=balance_cents)

    program = ctx.snapshot.find_referral_program(ctx.referral_code)
    if program is None or not program.is_active:
        rejected = RejectedDiscount(
            id=program.program_id if program else ctx.referral_code,
            kind=DiscountKind.REFERRAL,
            reason=RejectionReason.INACTIVE if program else RejectionReason.NOT_FOUND,
        )
        return StageResult(balance_cents=balance_cents, rejected=rejected)

    return _apply(
        ctx,
        balance_cents,
        discounted_so_far,
        discount_id=program.program_id,
        kind=DiscountKind.REFERRAL,
        code=program.code,
        requested_cents=_amount(program.incentive_type, program.incentive_value, balance_cents),
    )


DiscountStage = Callable[[DiscountContext, int, int], StageResult]

# Fixed precedence; not configurable.
DISCOUNT_STAGES: tuple[DiscountStage, ...] = (
    membership_stage,
    promotion_stage,
    referral_stage,
)


class DiscountEngine:
    """Runs the discount stages over a running balance."""

    def __init__(self, stages: tuple[DiscountStage, ...] = DISCOUNT_STAGES) -> None:
        self.stages = stages

    def apply(self, ctx: DiscountContext) -> DiscountResult:
        balance = ctx.adjusted_subtotal_cents
        applied: list[AppliedDiscount] = []
        rejected: list[RejectedDiscount] = []
        ceiling_hit = False

        for stage in self.stages:
            discounted = ctx.adjusted_subtotal_cents - balance
            result = stage(ctx, balance, discounted)
            balance = result.balance_cents
            ceiling_hit = ceiling_hit or result.ceiling_hit
            if result.applied is not None:
                applied.append(result.applied)
            if result.rejected is not None:
                rejected.append(result.rejected)

        return DiscountResult(
            applied=tuple(applied),
            rejected=tuple(rejected),
            after_discount_cents=balance,
            discount_capped=ceiling_hit,
        )
