"""Pytest configuration and fixtures for campquote backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Sample configuration (campground, site classes, rules, discounts, taxes)
- Snapshot builders for pure pipeline tests
"""

import datetime as dt
import os
from collections.abc import Callable, Generator
from decimal import Decimal
from typing import Any

import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-campquote")
os.environ.setdefault("ENVIRONMENT", "test")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from campquote.models import (  # noqa: E402
    Campground,
    PricingSnapshot,
    QuoteRequest,
    Site,
    SiteClass,
)

# === Test Constants ===

CAMPGROUND_ID = "cg-test"
SITE_CLASS_ID = "rv-full"
SITE_ID = "site-a1"
BASE_RATE = 5000  # $50.00

# 2025-06-05 is a Thursday; departing Sunday gives Thu, Fri, Sat nights
THURSDAY = dt.date(2025, 6, 5)
SUNDAY = dt.date(2025, 6, 8)
AS_OF = dt.date(2025, 5, 1)


# === Singleton Reset ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset the DynamoDB singleton and cached API services around each test.

    Tests using mock_aws then get fresh boto3 clients created inside the
    mock context.
    """
    from campquote.services.dynamodb import reset_dynamodb_service
    from campquote_api.dependencies import reset_services

    reset_dynamodb_service()
    reset_services()
    yield
    reset_dynamodb_service()
    reset_services()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def dynamodb(aws_credentials: None) -> Generator[Any, None, None]:
    """DynamoDBService singleton with every campquote table created in moto."""
    from campquote.services.config_store import create_tables
    from campquote.services.dynamodb import get_dynamodb_service

    with mock_aws():
        db = get_dynamodb_service()
        create_tables(db)
        yield db


@pytest.fixture
def config_store(dynamodb: Any) -> Any:
    """ConfigStore backed by the mocked tables."""
    from campquote.services.config_store import ConfigStore

    return ConfigStore(dynamodb)


# === Sample Configuration ===


@pytest.fixture
def campground() -> Campground:
    return Campground(campground_id=CAMPGROUND_ID, name="Riverbend RV Park")


@pytest.fixture
def site_class() -> SiteClass:
    return SiteClass(
        site_class_id=SITE_CLASS_ID, name="RV Full Hookup", default_rate_cents=BASE_RATE
    )


@pytest.fixture
def site() -> Site:
    return Site(site_id=SITE_ID, site_class_id=SITE_CLASS_ID, name="A1")


@pytest.fixture
def make_snapshot(
    campground: Campground, site_class: SiteClass, site: Site
) -> Callable[..., PricingSnapshot]:
    """Build a PricingSnapshot around the sample site class.

    Keyword arguments replace or add snapshot collections, e.g.
    ``make_snapshot(pricing_rules=(rule,))``. Lists are converted to tuples.
    """

    def _make(**overrides: Any) -> PricingSnapshot:
        fields: dict[str, Any] = {
            "campground": campground,
            "sites": (site,),
            "site_classes": (site_class,),
        }
        for key, value in overrides.items():
            fields[key] = tuple(value) if isinstance(value, list) else value
        return PricingSnapshot(**fields)

    return _make


@pytest.fixture
def make_request() -> Callable[..., QuoteRequest]:
    """Build a QuoteRequest for the sample site class, Thu-Sun stay."""

    def _make(**overrides: Any) -> QuoteRequest:
        fields: dict[str, Any] = {
            "campground_id": CAMPGROUND_ID,
            "site_class_id": SITE_CLASS_ID,
            "arrival": THURSDAY,
            "departure": SUNDAY,
            "as_of": AS_OF,
        }
        if "site_id" in overrides:
            fields.pop("site_class_id")
        fields.update(overrides)
        return QuoteRequest(**fields)

    return _make


@pytest.fixture
def weekend_rule_data() -> dict[str, Any]:
    """+20% additive rule on Friday and Saturday nights."""
    return {
        "rule_id": "weekend",
        "name": "Weekend uplift",
        "rule_type": "weekend",
        "priority": 10,
        "stack_mode": "additive",
        "adjustment_type": "percent",
        "adjustment_value": Decimal("0.20"),
        "dow_mask": [5, 6],
    }
