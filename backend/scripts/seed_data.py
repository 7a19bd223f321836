#!/usr/bin/env python3
"""Seed a development campground with pricing configuration.

Writes one demo campground with everything the quote pipeline reads:
- Site classes with default rates, sites, and a seasonal rate card
- Weekend, holiday-event and demand pricing rules
- A promotion, a referral program and a membership
- Lodging tax with a waiver-gated long-stay exemption
- A deposit policy and the park rules / pet policy documents

Usage:
    python scripts/seed_data.py --env dev
    python scripts/seed_data.py --env dev --create-tables
"""

import argparse
import os
import sys
from decimal import Decimal
from pathlib import Path

# Add shared package to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "shared" / "src"))

from botocore.exceptions import ClientError  # noqa: E402

from campquote.models import (  # noqa: E402
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
from campquote.services.config_store import ConfigStore, create_tables  # noqa: E402
from campquote.services.dynamodb import DynamoDBService  # noqa: E402


def demo_configuration() -> tuple[Campground, list]:
    """Build the demo campground and its configuration records."""
    campground = Campground(
        campground_id="cg-riverbend",
        name="Riverbend RV Park",
        default_deposit_policy_id="dep-standard",
        max_discount_fraction=Decimal("0.40"),
        occupancy_pct=72,
    )

    entities = [
        SiteClass(site_class_id="rv-full-hookup", name="RV Full Hookup", default_rate_cents=5000),
        SiteClass(site_class_id="tent", name="Tent Site", default_rate_cents=2500),
        SiteClass(site_class_id="cabin", name="Rustic Cabin", default_rate_cents=9500),
        Site(site_id="site-a12", site_class_id="rv-full-hookup", name="A12 Riverside"),
        Site(site_id="site-a14", site_class_id="rv-full-hookup", name="A14"),
        Site(site_id="site-t03", site_class_id="tent", name="T3"),
        Site(site_id="site-c01", site_class_id="cabin", name="Cabin 1"),
        SeasonalRate(
            rate_id="summer-2025",
            site_class_id="rv-full-hookup",
            start_date="2025-06-01",
            end_date="2025-08-31",
            nightly_rate_cents=5500,
        ),
        SeasonalRate(
            rate_id="a12-riverside-2025",
            site_class_id="rv-full-hookup",
            site_id="site-a12",
            start_date="2025-06-01",
            end_date="2025-08-31",
            nightly_rate_cents=6500,
        ),
        PricingRule(
            rule_id="weekend",
            name="Weekend uplift",
            rule_type="weekend",
            priority=10,
            stack_mode="additive",
            adjustment_value=Decimal("0.20"),
            dow_mask=[5, 6],
        ),
        PricingRule(
            rule_id="july-fourth",
            name="Independence Day",
            rule_type="holiday",
            priority=5,
            stack_mode="override",
            adjustment_type="flat",
            adjustment_value=Decimal("3000"),
            start_date="2025-07-03",
            end_date="2025-07-05",
            calendar_ref="minNights:2",
            max_rate_cap_cents=12000,
        ),
        DemandBand(
            band_id="band-high",
            name="High occupancy",
            threshold_pct=85,
            adjustment_value=Decimal("0.15"),
        ),
        PricingRule(
            rule_id="demand-high",
            name="High occupancy surge",
            rule_type="demand",
            priority=20,
            stack_mode="max",
            demand_band_id="band-high",
        ),
        PromotionView(
            promotion_id="promo-summer10",
            code="SUMMER10",
            value=10,
            valid_from="2025-05-01",
            valid_to="2025-09-30",
            usage_limit=500,
        ),
        ReferralProgram(program_id="ref-friend", code="FRIEND", incentive_value=1000),
        Membership(membership_id="mem-1001", membership_type="good-sam", discount_percent=10),
        TaxRule(
            tax_rule_id="tax-lodging",
            name="State lodging tax",
            rate=Decimal("0.07"),
            group="lodging",
        ),
        TaxRule(
            tax_rule_id="tax-county",
            name="County tourism tax",
            rate=Decimal("0.02"),
            group="tourism",
        ),
        TaxRule(
            tax_rule_id="exempt-long-stay",
            name="Long-stay lodging exemption",
            rule_type="exemption",
            group="lodging",
            min_nights=30,
            requires_waiver=True,
            waiver_text="I certify this is my primary residence for 30 or more consecutive nights.",
        ),
        DepositPolicy(
            policy_id="dep-standard",
            name="Standard deposit",
            strategy="percent",
            value=25,
            apply_to="lodging_only",
        ),
        DepositPolicy(
            policy_id="dep-cabin",
            name="Cabin first night",
            site_class_id="cabin",
            strategy="first_night",
        ),
        PolicyDocument(
            document_id="doc-park-rules",
            name="Park rules",
            text="Quiet hours are 10pm to 7am. Speed limit 5 mph.",
        ),
        PolicyDocument(
            document_id="doc-pets",
            name="Pet policy",
            kind="waiver",
            text="Pets must be leashed and never left unattended.",
            pets_only=True,
        ),
    ]
    return campground, entities


def seed(store: ConfigStore) -> int:
    """Write the demo configuration. Returns the number of records written."""
    campground, entities = demo_configuration()

    print(f"Seeding campground: {campground.name} ({campground.campground_id})")
    store.put_campground(campground)

    for entity in entities:
        store.put_entity(campground.campground_id, entity)
        entity_id = next(iter(entity.model_dump().values()))
        print(f"  ✓ {type(entity).__name__}: {entity_id}")

    return len(entities) + 1


def main() -> int:
    """Run the seed script."""
    parser = argparse.ArgumentParser(description="Seed development pricing configuration")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "eu-west-1"),
        help="AWS region (default: eu-west-1 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create the campquote tables first (local DynamoDB only)",
    )

    args = parser.parse_args()

    # boto3 reads the region from the environment
    os.environ["AWS_DEFAULT_REGION"] = args.region

    # Safety check for production
    if args.env == "prod":
        confirm = input("⚠️  WARNING: You are about to modify PRODUCTION data. Type 'yes' to continue: ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return 1

    print(f"\n🌱 Seeding {args.env} environment (region: {args.region})\n")

    db = DynamoDBService(args.env)

    if args.create_tables:
        try:
            create_tables(db)
            print("  ✓ Tables created\n")
        except ClientError as e:
            print(f"  ❌ Failed to create tables: {e}")
            return 1

    try:
        count = seed(ConfigStore(db))
    except ClientError as e:
        print(f"  ❌ Failed to seed configuration: {e}")
        return 1

    print(f"\n✅ Seed completed successfully! ({count} records)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
