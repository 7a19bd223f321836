"""API models for the nightly rate lookup endpoint."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from campquote.models import RateSource


class NightlyBaseRate(BaseModel):
    """Base rate for one night before pricing rules."""

    model_config = ConfigDict(strict=True)

    date: dt.date
    rate_cents: int = Field(..., ge=0, description="Base nightly rate in cents")
    source: RateSource = Field(..., description="Which rate card entry supplied the rate")


class NightlyRatesResponse(BaseModel):
    """Resolved base rates for a stay."""

    model_config = ConfigDict(
        strict=True,
        json_schema_extra={
            "examples": [
                {
                    "campground_id": "cg-riverbend",
                    "site_class_id": "rv-full-hookup",
                    "currency": "USD",
                    "nights": [
                        {"date": "2025-06-05", "rate_cents": 5000, "source": "class_default"},
                        {"date": "2025-06-06", "rate_cents": 5500, "source": "class_override"},
                    ],
                    "base_subtotal_cents": 10500,
                }
            ]
        },
    )

    campground_id: str
    site_class_id: str
    currency: str = Field(..., description="ISO currency code")
    nights: list[NightlyBaseRate]
    base_subtotal_cents: int = Field(..., ge=0)
