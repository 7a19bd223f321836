"""Pricing rule evaluation.

Rules that match a night are applied in (priority, rule_id) order. Each
rule's adjustment is computed against the night's untouched base rate and
folded into the running rate by its stack mode:

- additive: running + adjustment
- max: the larger of running and (base + adjustment)
- override: base + adjustment, discarding earlier adjustments; no later
  rule is applied to that night

The result is floored at zero and clamped by the tightest caps among the
rules that were applied (highest min cap, lowest max cap, max applied last).
"""

import datetime as dt
import re
from collections.abc import Callable
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from campquote.models import (
    AdjustmentType,
    CapBound,
    PricingRule,
    PricingSnapshot,
    StackMode,
)
from campquote.utils.money import clamp, fraction_of, round_half_up

from .rates import ResolvedNight, ResolvedRates

_MIN_NIGHTS_REF = re.compile(r"minnights:(-?\d+)", re.IGNORECASE)


def extract_min_nights(calendar_ref: str | None) -> int | None:
    """Parse a ``minNights:N`` calendar reference.

    Returns None when the reference is missing, malformed or not positive.
    """
    if not calendar_ref:
        return None
    match = _MIN_NIGHTS_REF.search(calendar_ref)
    if not match:
        return None
    value = int(match.group(1))
    return value if value >= 1 else None


def day_of_week(night: dt.date) -> int:
    """Day of week with 0 = Sunday, matching stored rule masks."""
    return (night.weekday() + 1) % 7


def rule_applies(rule: PricingRule, night: dt.date, stay_nights: int) -> bool:
    """Check the calendar constraints of a rule for one night."""
    if not rule.in_window(night):
        return False
    if rule.dow_mask and day_of_week(night) not in rule.dow_mask:
        return False
    min_nights = extract_min_nights(rule.calendar_ref)
    if min_nights is not None and stay_nights < min_nights:
        return False
    return True


def compute_adjustment(
    adjustment_type: AdjustmentType,
    value: Decimal,
    base_rate_cents: int,
) -> int:
    """Adjustment in cents; percent values are fractions of the base rate."""
    if adjustment_type == AdjustmentType.PERCENT:
        return fraction_of(base_rate_cents, value)
    return round_half_up(value)


def _stack_additive(running: int, base: int, adjustment: int) -> int:
    return running + adjustment


def _stack_max(running: int, base: int, adjustment: int) -> int:
    return max(running, base + adjustment)


def _stack_override(running: int, base: int, adjustment: int) -> int:
    return base + adjustment


STACKERS: dict[StackMode, Callable[[int, int, int], int]] = {
    StackMode.ADDITIVE: _stack_additive,
    StackMode.MAX: _stack_max,
    StackMode.OVERRIDE: _stack_override,
}


class AdjustedNight(BaseModel):
    """Result of applying rules to one night."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    base: ResolvedNight
    rate_cents: int
    applied_rule_ids: tuple[str, ...]
    capped_at: CapBound | None


class RuleEvaluation(BaseModel):
    """Adjusted nightly rates for a stay."""

    model_config = ConfigDict(frozen=True)

    nights: tuple[AdjustedNight, ...]
    base_subtotal_cents: int

    @property
    def adjusted_subtotal_cents(self) -> int:
        return sum(n.rate_cents for n in self.nights)

    @property
    def rules_delta_cents(self) -> int:
        return self.adjusted_subtotal_cents - self.base_subtotal_cents

    @property
    def applied_rule_ids(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for night in self.nights:
            for rule_id in night.applied_rule_ids:
                seen.setdefault(rule_id, None)
        return tuple(seen)


class PricingRuleEngine:
    """Applies pricing rules from a snapshot to resolved base rates."""

    def __init__(self, snapshot: PricingSnapshot) -> None:
        self.snapshot = snapshot

    def candidate_rules(self, site_class_id: str) -> list[PricingRule]:
        """Active rules in scope for a site class, in evaluation order."""
        rules = [
            r
            for r in self.snapshot.pricing_rules
            if r.is_active and r.site_class_id in (None, site_class_id)
        ]
        return sorted(rules, key=lambda r: (r.priority, r.rule_id))

    def _rule_adjustment(self, rule: PricingRule, base_rate_cents: int) -> int | None:
        """Adjustment for a rule, or None if its demand band is not triggered."""
        if rule.demand_band_id is None:
            return compute_adjustment(rule.adjustment_type, rule.adjustment_value, base_rate_cents)

        band = self.snapshot.find_demand_band(rule.demand_band_id)
        occupancy = self.snapshot.campground.occupancy_pct
        if band is None or not band.is_active or occupancy is None:
            return None
        if occupancy < band.threshold_pct:
            return None
        return compute_adjustment(band.adjustment_type, band.adjustment_value, base_rate_cents)

    def adjust_night(
        self,
        base: ResolvedNight,
        rules: list[PricingRule],
        stay_nights: int,
    ) -> AdjustedNight:
        """Fold the matching rules over one night's base rate."""
        running = base.rate_cents
        applied: list[PricingRule] = []

        for rule in rules:
            if not rule_applies(rule, base.date, stay_nights):
                continue
            adjustment = self._rule_adjustment(rule, base.rate_cents)
            if adjustment is None:
                continue
            running = STACKERS[rule.stack_mode](running, base.rate_cents, adjustment)
            applied.append(rule)
            if rule.stack_mode == StackMode.OVERRIDE:
                break

        floored = max(running, 0)
        min_caps = [r.min_rate_cap_cents for r in applied if r.min_rate_cap_cents is not None]
        max_caps = [r.max_rate_cap_cents for r in applied if r.max_rate_cap_cents is not None]
        low = max(min_caps) if min_caps else None
        high = min(max_caps) if max_caps else None
        final = clamp(floored, low, high)

        capped_at: CapBound | None = None
        if final < floored:
            capped_at = CapBound.MAX
        elif final > floored:
            capped_at = CapBound.MIN

        return AdjustedNight(
            date=base.date,
            base=base,
            rate_cents=final,
            applied_rule_ids=tuple(r.rule_id for r in applied),
            capped_at=capped_at,
        )

    def evaluate(self, rates: ResolvedRates) -> RuleEvaluation:
        """Apply rules to every night of a resolved stay."""
        rules = self.candidate_rules(rates.site_class_id)
        stay_nights = len(rates.nights)
        nights = tuple(self.adjust_night(n, rules, stay_nights) for n in rates.nights)
        return RuleEvaluation(nights=nights, base_subtotal_cents=rates.base_subtotal_cents)
