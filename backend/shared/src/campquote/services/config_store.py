"""Pricing configuration storage and snapshot loading.

Each entity type lives in its own table keyed by ``campground_id`` (hash)
and the entity id (range). The campgrounds table is keyed by
``campground_id`` alone.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from pydantic import BaseModel

from campquote.models import (
    Campground,
    CampgroundNotFoundError,
    DemandBand,
    DepositPolicy,
    Membership,
    PolicyDocument,
    PricingRule,
    PricingSnapshot,
    PromotionView,
    ReferralProgram,
    SeasonalRate,
    Site,
    SiteClass,
    TaxRule,
)
from campquote.utils.logging import get_logger, log_quote_operation

from .dynamodb import DynamoDBService, get_dynamodb_service

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

CAMPGROUNDS_TABLE = "campgrounds"
REDEMPTIONS_TABLE = "redemptions"

# Model -> (table, range key attribute)
ENTITY_TABLES: dict[type[BaseModel], tuple[str, str]] = {
    Site: ("sites", "site_id"),
    SiteClass: ("site-classes", "site_class_id"),
    SeasonalRate: ("seasonal-rates", "rate_id"),
    PricingRule: ("pricing-rules", "rule_id"),
    DemandBand: ("demand-bands", "band_id"),
    PromotionView: ("promotions", "promotion_id"),
    ReferralProgram: ("referral-programs", "program_id"),
    Membership: ("memberships", "membership_id"),
    TaxRule: ("tax-rules", "tax_rule_id"),
    DepositPolicy: ("deposit-policies", "policy_id"),
    PolicyDocument: ("policy-documents", "document_id"),
}

DEFAULT_FETCH_WORKERS = 8


def table_key_schema() -> list[tuple[str, str | None]]:
    """(table, range key) for every table; all use campground_id as hash key."""
    return [
        (CAMPGROUNDS_TABLE, None),
        *ENTITY_TABLES.values(),
        (REDEMPTIONS_TABLE, "booking_id"),
    ]


def create_tables(db: DynamoDBService) -> None:
    """Create every campquote table (local development and tests)."""
    for table, range_key in table_key_schema():
        db.create_table(table, range_key)


def _to_item(campground_id: str, entity: BaseModel) -> dict[str, Any]:
    item = entity.model_dump(mode="json", exclude_none=True)
    item["campground_id"] = campground_id
    return item


class ConfigStore:
    """Reads and writes pricing configuration records."""

    def __init__(self, db: DynamoDBService | None = None) -> None:
        """Initialize config store.

        Args:
            db: DynamoDB service. Defaults to the shared instance.
        """
        self.db = db or get_dynamodb_service()

    def get_campground(self, campground_id: str) -> Campground | None:
        item = self.db.get_item(CAMPGROUNDS_TABLE, {"campground_id": campground_id})
        if not item:
            return None
        return Campground.model_validate(item)

    def put_campground(self, campground: Campground) -> None:
        self.db.put_item(
            CAMPGROUNDS_TABLE, campground.model_dump(mode="json", exclude_none=True)
        )

    def list_entities(self, model: type[T], campground_id: str) -> list[T]:
        """List every record of a type for a campground, ordered by id.

        Args:
            model: Entity model class registered in ENTITY_TABLES
            campground_id: Campground to list

        Returns:
            Validated entity models
        """
        table, _ = ENTITY_TABLES[model]
        items = self.db.query_partition(table, "campground_id", campground_id)
        return [model.model_validate(item) for item in items]

    def get_entity(self, model: type[T], campground_id: str, entity_id: str) -> T | None:
        table, range_key = ENTITY_TABLES[model]
        item = self.db.get_item(
            table, {"campground_id": campground_id, range_key: entity_id}
        )
        if not item:
            return None
        return model.model_validate(item)

    def put_entity(self, campground_id: str, entity: BaseModel) -> None:
        """Write a configuration record for a campground."""
        table, _ = ENTITY_TABLES[type(entity)]
        self.db.put_item(table, _to_item(campground_id, entity))

    def list_sites(self, campground_id: str) -> list[Site]:
        return self.list_entities(Site, campground_id)

    def list_site_classes(self, campground_id: str) -> list[SiteClass]:
        return self.list_entities(SiteClass, campground_id)

    def list_seasonal_rates(self, campground_id: str) -> list[SeasonalRate]:
        return self.list_entities(SeasonalRate, campground_id)

    def list_pricing_rules(self, campground_id: str) -> list[PricingRule]:
        return self.list_entities(PricingRule, campground_id)

    def list_demand_bands(self, campground_id: str) -> list[DemandBand]:
        return self.list_entities(DemandBand, campground_id)

    def list_promotions(self, campground_id: str) -> list[PromotionView]:
        return self.list_entities(PromotionView, campground_id)

    def list_referral_programs(self, campground_id: str) -> list[ReferralProgram]:
        return self.list_entities(ReferralProgram, campground_id)

    def list_tax_rules(self, campground_id: str) -> list[TaxRule]:
        return self.list_entities(TaxRule, campground_id)

    def list_deposit_policies(self, campground_id: str) -> list[DepositPolicy]:
        return self.list_entities(DepositPolicy, campground_id)

    def list_policy_documents(self, campground_id: str) -> list[PolicyDocument]:
        return self.list_entities(PolicyDocument, campground_id)

    def get_membership(self, campground_id: str, membership_id: str) -> Membership | None:
        return self.get_entity(Membership, campground_id, membership_id)


class SnapshotLoader:
    """Builds a PricingSnapshot with the table reads issued concurrently."""

    def __init__(
        self,
        store: ConfigStore | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.store = store or ConfigStore()
        self.max_workers = max_workers or int(
            os.getenv("SNAPSHOT_FETCH_WORKERS", str(DEFAULT_FETCH_WORKERS))
        )

    def load(self, campground_id: str, membership_id: str | None = None) -> PricingSnapshot:
        """Fetch all configuration for one campground.

        Args:
            campground_id: Campground to load
            membership_id: Membership to include, if the request names one

        Returns:
            Immutable snapshot for a single quote

        Raises:
            CampgroundNotFoundError: If the campground does not exist
        """
        store = self.store
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            campground_future = executor.submit(store.get_campground, campground_id)
            futures = {
                "sites": executor.submit(store.list_sites, campground_id),
                "site_classes": executor.submit(store.list_site_classes, campground_id),
                "seasonal_rates": executor.submit(store.list_seasonal_rates, campground_id),
                "pricing_rules": executor.submit(store.list_pricing_rules, campground_id),
                "demand_bands": executor.submit(store.list_demand_bands, campground_id),
                "promotions": executor.submit(store.list_promotions, campground_id),
                "referral_programs": executor.submit(
                    store.list_referral_programs, campground_id
                ),
                "tax_rules": executor.submit(store.list_tax_rules, campground_id),
                "deposit_policies": executor.submit(
                    store.list_deposit_policies, campground_id
                ),
                "policy_documents": executor.submit(
                    store.list_policy_documents, campground_id
                ),
            }
            membership_future = (
                executor.submit(store.get_membership, campground_id, membership_id)
                if membership_id
                else None
            )

            campground = campground_future.result()
            collections = {name: tuple(f.result()) for name, f in futures.items()}
            membership = membership_future.result() if membership_future else None

        if campground is None:
            raise CampgroundNotFoundError(details={"campground_id": campground_id})

        snapshot = PricingSnapshot(
            campground=campground,
            memberships=(membership,) if membership else (),
            **collections,
        )
        log_quote_operation(
            logger,
            "snapshot_loaded",
            campground_id=campground_id,
            pricing_rules=len(snapshot.pricing_rules),
            promotions=len(snapshot.promotions),
        )
        return snapshot
