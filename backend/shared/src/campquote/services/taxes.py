"""Tax calculation on the after-discount lodging total."""

from pydantic import BaseModel, ConfigDict

from campquote.models import TaxLine, TaxRule, TaxRuleType
from campquote.utils.money import fraction_of, round_half_up


class TaxResult(BaseModel):
    """Taxes for a stay plus waiver and exemption flags."""

    model_config = ConfigDict(frozen=True)

    lines: tuple[TaxLine, ...]
    waiver_required: bool = False
    waiver_text: str | None = None
    exemption_applied: bool = False

    @property
    def taxes_cents(self) -> int:
        return sum(line.amount_cents for line in self.lines)


class TaxCalculator:
    """Applies tax rules and exemptions.

    Standard rules are additive; no tax is computed on another tax.
    """

    def __init__(self, tax_rules: tuple[TaxRule, ...]) -> None:
        self.tax_rules = tax_rules

    def applicable_rules(self, nights: int) -> list[TaxRule]:
        """Active rules whose nights range covers the stay, by tax_rule_id."""
        rules = [r for r in self.tax_rules if r.is_active and r.applies_to_nights(nights)]
        return sorted(rules, key=lambda r: r.tax_rule_id)

    def calculate(
        self,
        after_discount_cents: int,
        nights: int,
        waiver_signed: bool = False,
    ) -> TaxResult:
        """Calculate taxes for a stay.

        Args:
            after_discount_cents: Lodging total after discounts
            nights: Number of nights in the stay
            waiver_signed: Whether the guest signed the tax-exemption waiver

        Returns:
            TaxResult with one line per applied standard rule
        """
        rules = self.applicable_rules(nights)
        exemptions = [r for r in rules if r.rule_type == TaxRuleType.EXEMPTION]
        standard = [r for r in rules if r.rule_type != TaxRuleType.EXEMPTION]

        waiver_required = False
        waiver_text: str | None = None
        suppress_all = False
        suppressed_groups: set[str] = set()

        for exemption in exemptions:
            if exemption.requires_waiver and not waiver_signed:
                if not waiver_required:
                    waiver_required = True
                    waiver_text = exemption.waiver_text
                continue
            if exemption.group is None:
                suppress_all = True
            else:
                suppressed_groups.add(exemption.group)

        lines: list[TaxLine] = []
        exemption_applied = False
        for rule in standard:
            if suppress_all or (rule.group is not None and rule.group in suppressed_groups):
                exemption_applied = True
                continue
            lines.append(
                TaxLine(
                    tax_rule_id=rule.tax_rule_id,
                    name=rule.name,
                    amount_cents=self._amount(rule, after_discount_cents),
                )
            )

        return TaxResult(
            lines=tuple(lines),
            waiver_required=waiver_required,
            waiver_text=waiver_text,
            exemption_applied=exemption_applied,
        )

    @staticmethod
    def _amount(rule: TaxRule, after_discount_cents: int) -> int:
        if rule.rule_type == TaxRuleType.PERCENTAGE:
            return max(fraction_of(after_discount_cents, rule.rate), 0)
        return max(round_half_up(rule.rate), 0)
