"""Deposit policy resolution and deposit calculation."""

import datetime as dt
from decimal import Decimal

from campquote.models import (
    DepositApplyTo,
    DepositBreakdown,
    DepositDueTiming,
    DepositPolicy,
    DepositStrategy,
    PricingSnapshot,
)
from campquote.utils.money import clamp, round_up

_EPOCH = dt.datetime.min.replace(tzinfo=dt.timezone.utc)


def _created_instant(policy: DepositPolicy) -> dt.datetime:
    """created_at as an aware UTC datetime; naive values are read as UTC."""
    created = policy.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=dt.timezone.utc)
    return created.astimezone(dt.timezone.utc)


def _newest(policies: list[DepositPolicy]) -> DepositPolicy | None:
    """Most recently created policy; ties go to the lowest policy_id."""
    if not policies:
        return None
    ordered = sorted(policies, key=lambda p: p.policy_id)
    return max(ordered, key=_created_instant)


def resolve_deposit_policy(
    snapshot: PricingSnapshot,
    site_class_id: str,
) -> DepositPolicy | None:
    """Pick the deposit policy for a site class.

    Order: active site-class policy, then the campground's default policy,
    then the newest active campground-wide policy.
    """
    active = [p for p in snapshot.deposit_policies if p.is_active]

    policy = _newest([p for p in active if p.site_class_id == site_class_id])
    if policy is not None:
        return policy

    default_id = snapshot.campground.default_deposit_policy_id
    if default_id is not None:
        policy = next((p for p in active if p.policy_id == default_id), None)
        if policy is not None:
            return policy

    return _newest([p for p in active if p.site_class_id is None])


class DepositCalculator:
    """Splits a quote total into deposit due now and balance due later."""

    def __init__(self, policy: DepositPolicy | None) -> None:
        self.policy = policy

    def calculate(
        self,
        *,
        total_with_taxes_cents: int,
        after_discount_cents: int,
        first_night_cents: int,
    ) -> DepositBreakdown:
        """Calculate the deposit breakdown.

        Args:
            total_with_taxes_cents: Quote total including taxes
            after_discount_cents: Lodging total after discounts, before taxes
            first_night_cents: Adjusted rate of the arrival night

        Returns:
            DepositBreakdown; the full total is due at booking when no
            policy applies
        """
        policy = self.policy
        if policy is None:
            return DepositBreakdown(
                due_timing=DepositDueTiming.AT_BOOKING,
                deposit_due_cents=total_with_taxes_cents,
                balance_due_cents=0,
            )

        if policy.strategy == DepositStrategy.FIRST_NIGHT:
            amount = first_night_cents
        elif policy.strategy == DepositStrategy.PERCENT:
            scoped = (
                after_discount_cents
                if policy.apply_to == DepositApplyTo.LODGING_ONLY
                else total_with_taxes_cents
            )
            amount = round_up(Decimal(scoped) * Decimal(policy.value) / Decimal(100))
        else:
            amount = policy.value

        amount = clamp(amount, policy.min_cap_cents, policy.max_cap_cents)
        deposit = max(min(amount, total_with_taxes_cents), 0)

        return DepositBreakdown(
            policy_id=policy.policy_id,
            strategy=policy.strategy,
            apply_to=policy.apply_to,
            due_timing=policy.due_timing,
            deposit_due_cents=deposit,
            balance_due_cents=total_with_taxes_cents - deposit,
        )
