"""Quote pipeline, configuration storage and redemption services."""

from .config_store import ConfigStore, SnapshotLoader
from .deposits import DepositCalculator, resolve_deposit_policy
from .discounts import DiscountContext, DiscountEngine, DiscountResult
from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .pricing_rules import PricingRuleEngine, RuleEvaluation
from .quotes import QuoteAssembler, QuoteService
from .rates import RateResolver, ResolvedRates
from .redemption import RedemptionService
from .taxes import TaxCalculator, TaxResult

__all__ = [
    "ConfigStore",
    "SnapshotLoader",
    "DepositCalculator",
    "resolve_deposit_policy",
    "DiscountContext",
    "DiscountEngine",
    "DiscountResult",
    "DynamoDBService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
    "PricingRuleEngine",
    "RuleEvaluation",
    "QuoteAssembler",
    "QuoteService",
    "RateResolver",
    "ResolvedRates",
    "RedemptionService",
    "TaxCalculator",
    "TaxResult",
]
